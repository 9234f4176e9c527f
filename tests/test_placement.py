from __future__ import annotations

from netlist_backanno.fill_planner import fixed_row_estimator, plan_power_straps
from netlist_backanno.geometry import FillCatalog, Macro
from netlist_backanno.placement import annotate_placement

from conftest import CEL_TEXT


def _plan(rows: int = 2):
    catalog = FillCatalog(prefix="FILL", macros=[Macro(name="FILL4", width=700, height=272)])
    return plan_power_straps(catalog, 0, fixed_row_estimator(rows))


def test_records_inserted_once_before_first_marker():
    lines = CEL_TEXT.splitlines()

    out, records = annotate_placement(lines, _plan(2), r"^pad\s")

    assert len(records) == 4
    first_pad = out.index("pad 1 twpin_a")
    inserted = out[first_pad - 16:first_pad]
    assert inserted[0:3] == [
        "cell 3 PWRBUS_1",
        "initially fixed 0 from left of block 1",
        "left -350 right 350 bottom -136 top 136",
    ]
    assert inserted[12:15] == [
        "cell 6 PWRBUS_4",
        "initially fixed 0 from right of block 2",
        "left -350 right 350 bottom -136 top 136",
    ]
    assert sum(1 for line in out if line.startswith("cell ")) == 6


def test_output_is_superset_of_input_in_order():
    lines = CEL_TEXT.splitlines()

    out, records = annotate_placement(lines, _plan(3), r"^pad\s")

    added = sum(len(r.to_lines()) + 1 for r in records)
    assert len(out) == len(lines) + added
    it = iter(out)
    assert all(line in it for line in lines)


def test_synthetic_names_avoid_existing_instances():
    lines = ["cell 7 PWRBUS_1", "left -1 right 1 bottom -1 top 1", "pad 1 p"]

    _, records = annotate_placement(lines, _plan(1), r"^pad\s")

    assert [r.instance_name for r in records] == ["PWRBUS_2", "PWRBUS_3"]
    assert [r.cell_id for r in records] == [8, 9]


def test_missing_marker_leaves_input_unchanged():
    lines = ["cell 1 U1", "left -1 right 1 bottom -1 top 1"]

    out, records = annotate_placement(lines, _plan(2), r"^pad\s")

    assert out == lines
    assert records == []


def test_second_run_duplicates_block():
    lines = CEL_TEXT.splitlines()
    once, _ = annotate_placement(lines, _plan(1), r"^pad\s")
    twice, _ = annotate_placement(once, _plan(1), r"^pad\s")

    assert len(twice) > len(once)
