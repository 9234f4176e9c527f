"""Change list of antenna diodes and fill cells from the post-route report."""

from __future__ import annotations

import logging
from pathlib import Path
import re
from typing import Iterable

from netlist_backanno.geometry import ChangeListEntry

logger = logging.getLogger(__name__)

UNFIXED_BANNER = "Unfixed antenna errors:"
FILL_BANNER = "# Fill cell instances"

_RECORD_RE = re.compile(r"Net=(\S*)\s+Instance=(\S+)\s+Cell=(\S+)\s+Pin=(\S*)")

ChangeList = dict[str, ChangeListEntry]


def parse_change_list(lines: Iterable[str]) -> ChangeList:
    """Build the ordered, deduplicated change list.

    Records between the unfixed-antenna banner and the fill-cell banner are
    diagnostics and are not collected. The first record for an instance wins.
    """
    entries: ChangeList = {}
    suppressed = False
    duplicates = 0

    for line in lines:
        if UNFIXED_BANNER in line:
            suppressed = True
            continue
        if FILL_BANNER in line:
            suppressed = False
            continue
        if suppressed:
            continue
        m = _RECORD_RE.search(line)
        if not m:
            continue
        net, instance, cell_type, pin = m.groups()
        if instance in entries:
            duplicates += 1
            continue
        entries[instance] = ChangeListEntry(
            instance=instance, net=net, cell_type=cell_type, pin=pin,
        )

    logger.debug("Change list: %d entries, %d duplicates dropped", len(entries), duplicates)
    return entries


def read_change_list(path: str | Path) -> ChangeList:
    with open(path, "r") as f:
        return parse_change_list(f)
