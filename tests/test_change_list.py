from __future__ import annotations

from netlist_backanno.change_list import parse_change_list, read_change_list
from netlist_backanno.geometry import ChangeListEntry


def test_duplicate_instance_keeps_first_occurrence():
    lines = [
        "Net=N1  Instance=ANT1  Cell=ANTENNACELL  Pin=A",
        "Net=N1  Instance=ANT1  Cell=ANTENNACELL  Pin=A",
        "Net=N7  Instance=ANT1  Cell=OTHERCELL  Pin=B",
    ]

    change_list = parse_change_list(lines)

    assert list(change_list.values()) == [
        ChangeListEntry(instance="ANT1", net="N1", cell_type="ANTENNACELL", pin="A")
    ]


def test_unfixed_section_is_excluded(report_file):
    change_list = read_change_list(report_file)

    assert list(change_list) == ["ANT1", "ANT2", "FILL_1"]
    assert "ANT9" not in change_list


def test_fill_entries_have_empty_pin(report_file):
    entry = read_change_list(report_file)["FILL_1"]

    assert entry.pin == ""
    assert entry.net == ""
    assert entry.cell_type == "FILL1"


def test_banners_only_gives_empty_change_list():
    lines = ["Unfixed antenna errors:", "# Fill cell instances", ""]
    assert parse_change_list(lines) == {}


def test_records_after_unfixed_banner_without_fill_banner_are_dropped():
    lines = [
        "Net=N1 Instance=ANT1 Cell=ANTENNACELL Pin=A",
        "Unfixed antenna errors:",
        "Net=N2 Instance=ANT2 Cell=ANTENNACELL Pin=A",
    ]
    assert list(parse_change_list(lines)) == ["ANT1"]


def test_unrelated_lines_are_ignored():
    lines = ["qrouter antenna report", "Net=N1 Instance=ANT1 Cell=ANTENNACELL Pin=A", "total 1"]
    assert list(parse_change_list(lines)) == ["ANT1"]
