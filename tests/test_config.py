from __future__ import annotations

import pytest
from pydantic import ValidationError

from netlist_backanno.config import Config, load_config, load_power_ground_alias, read_naming_file


def test_defaults_without_file():
    config = load_config(None)

    assert config.fill.cell_prefix == "FILL"
    assert config.fill.scale == 100
    assert [v.tag for v in config.netlist.variants] == ["rtl", "rtlbb"]
    assert config.default_alias().power == "VDD"


def test_yaml_overrides(write_file):
    path = write_file(
        "backanno.yaml",
        """\
        fill:
          cell_prefix: sky130_fd_sc_hd__fill
          min_strap_width: 500
          estimated_rows: 4
        netlist:
          drop_existing_instances: true
          variants:
            - tag: rtl
              power_pins: true
        """,
    )

    config = load_config(path)

    assert config.fill.cell_prefix == "sky130_fd_sc_hd__fill"
    assert config.fill.min_strap_width == 500
    assert config.fill.estimated_rows == 4
    assert config.netlist.drop_existing_instances is True
    assert [v.tag for v in config.netlist.variants] == ["rtl"]


@pytest.mark.parametrize(
    "raw",
    [
        {"fill": {"scale": 0}},
        {"fill": {"estimated_rows": 0}},
        {"fill": {"row_marker": "("}},
        {"netlist": {"variants": [{"tag": "rtlnopwr"}]}},
    ],
)
def test_invalid_values_rejected(raw):
    with pytest.raises(ValidationError):
        Config.model_validate(raw)


def test_naming_file_parsing(write_file):
    path = write_file(
        "project_vars.sh",
        """\
        # project variables
        set vddnet=vdd
        gndnet="vss"
        techdir=/usr/share
        """,
    )

    assert read_naming_file(path) == {"vddnet": "vdd", "gndnet": "vss", "techdir": "/usr/share"}
    alias = load_power_ground_alias(path, Config())
    assert (alias.power, alias.ground) == ("vdd", "vss")


def test_naming_file_missing_key_falls_back(write_file):
    path = write_file("names", "vddnet=VPWR\n")

    alias = load_power_ground_alias(path, Config())

    assert (alias.power, alias.ground) == ("VPWR", "GND")


def test_no_naming_file_means_no_alias():
    assert load_power_ground_alias(None, Config()) is None
