from __future__ import annotations

from pathlib import Path
import textwrap

import pytest

LEF_TEXT = """\
VERSION 5.7 ;
NAMESCASESENSITIVE ON ;
BUSBITCHARS "[]" ;
UNITS
  DATABASE MICRONS 1000 ;
END UNITS
PROPERTYDEFINITIONS
  LAYER LEF57_SPACING STRING ;
END PROPERTYDEFINITIONS
LAYER metal1
  TYPE ROUTING ;
  SPACING 0.2 ;
  WIDTH 0.2 ;
END metal1
VIA via1 DEFAULT
  LAYER metal1 ;
    RECT -0.1 -0.1 0.1 0.1 ;
END via1
VIARULE M2_M1 GENERATE
  LAYER metal1 ;
    ENCLOSURE 0 0.05 ;
END M2_M1
SPACING
  SAMENET metal1 metal1 0.2 ;
END SPACING
SITE core
  CLASS CORE ;
  SIZE 0.2 BY 2.72 ;
END core
MACRO FILL1
  CLASS CORE SPACER ;
  ORIGIN 0 0 ;
  SIZE 4.00 BY 2.72 ;
  SYMMETRY X Y ;
  SITE core ;
  PIN vdd
    DIRECTION INOUT ;
    USE POWER ;
    PORT
      LAYER metal1 ;
        RECT 0 2.5 4.0 2.9 ;
    END
  END vdd
END FILL1
MACRO INVX1
  CLASS CORE ;
  ORIGIN 0 0 ;
  SIZE 1.00 BY 2.72 ;
  PIN A
    DIRECTION INPUT ;
    PORT
      LAYER metal1 ;
        RECT 0.1 0.1 0.3 0.3 ;
    END
  END A
  OBS
    LAYER metal1 ;
      RECT 0 0 1.0 2.72 ;
  END
END INVX1
MACRO FILL2
  CLASS CORE SPACER ;
  ORIGIN 0.1 0.05 ;
  SIZE 5.50 BY 2.72 ;
  SYMMETRY X Y R90 ;
END FILL2
MACRO FILL4
  CLASS CORE SPACER ;
  SIZE 7.00 BY 2.72 ;
  SYMMETRY X Y ;
END FILL4
END LIBRARY
"""

CEL_TEXT = """\
cell 1 U1
left -200 right 200 bottom -136 top 136
pin name A signal n1 0 0

cell 2 U2
left -200 right 200 bottom -136 top 136
pin name Y signal n2 0 0

pad 1 twpin_a
corners 4 -100 -100 -100 100 100 100 100 -100
restrict side W

pad 2 twpin_y
corners 4 -100 -100 -100 100 100 100 100 -100
"""

REPORT_TEXT = """\
Net=N1  Instance=ANT1  Cell=ANTENNACELL  Pin=A
Net=N1  Instance=ANT1  Cell=ANTENNACELL  Pin=A
Net=N2  Instance=ANT2  Cell=ANTENNACELL  Pin=A
Unfixed antenna errors:
Net=N9  Instance=ANT9  Cell=ANTENNACELL  Pin=A
# Fill cell instances
Net=  Instance=FILL_1  Cell=FILL1  Pin=
"""

VERILOG_TEXT = """\
module top (a, y);
input a;
output y;
wire N1;
INVX1 U1 ( .A(a), .Y(N1) );
INVX1 U2 ( .A(N1), .Y(y) );
endmodule
"""

SUBCKT_LIB_TEXT = """\
* cell library
.subckt INVX1 A Y vdd! gnd!
M1 Y A vdd! vdd! pmos
.ends
.subckt ANTENNACELL A
+ VDD! GND!
D1 GND! A diode
.ends
.SUBCKT ANTENNACELL X Y Z
.ends
.subckt FILL1 VDD GND
.ends
"""

SPICE_TEXT = """\
* top level
.subckt top a y VDD GND
XU1 a N1 VDD GND INVX1
XU2 N1 y VDD GND INVX1
.ends
.end
"""


def _dedent(text: str) -> str:
    return textwrap.dedent(text)


@pytest.fixture
def write_file(tmp_path: Path):
    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(_dedent(text))
        return path

    return _write


@pytest.fixture
def lef_file(write_file) -> Path:
    return write_file("cells.lef", LEF_TEXT)


@pytest.fixture
def cel_file(write_file) -> Path:
    return write_file("top.cel", CEL_TEXT)


@pytest.fixture
def report_file(write_file) -> Path:
    return write_file("top_antenna.out", REPORT_TEXT)


@pytest.fixture
def netlists(write_file) -> dict[str, Path]:
    return {
        "rtlnopwr": write_file("top.rtlnopwr.v", VERILOG_TEXT),
        "rtl": write_file("top.rtl.v", VERILOG_TEXT),
        "spice": write_file("top.spc", SPICE_TEXT),
        "lib": write_file("cells.sp", SUBCKT_LIB_TEXT),
    }
