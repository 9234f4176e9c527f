"""Injection of fixed power-strap records into a placement (.cel) description."""

from __future__ import annotations

import logging
import re

from netlist_backanno.geometry import PlacementRecord, PowerStrapPlan

logger = logging.getLogger(__name__)

_CELL_RE = re.compile(r"^\s*cell\s+(\d+)\s+(\S+)")


def _existing_cells(lines: list[str]) -> tuple[int, set[str]]:
    max_id = 0
    names: set[str] = set()
    for line in lines:
        m = _CELL_RE.match(line)
        if m:
            max_id = max(max_id, int(m.group(1)))
            names.add(m.group(2))
    return max_id, names


def build_strap_records(
    plan: PowerStrapPlan,
    first_id: int,
    instance_prefix: str,
    taken: set[str] | None = None,
) -> list[PlacementRecord]:
    """One column of straps per side, one record per row, left column first."""
    if plan.strap is None or plan.offsets is None:
        return []
    taken = set(taken or ())
    records: list[PlacementRecord] = []
    cell_id = first_id
    k = 0
    for side in ("left", "right"):
        for block in range(1, plan.rows + 1):
            k += 1
            name = f"{instance_prefix}_{k}"
            while name in taken:
                k += 1
                name = f"{instance_prefix}_{k}"
            taken.add(name)
            records.append(
                PlacementRecord(
                    cell_id=cell_id,
                    instance_name=name,
                    macro=plan.strap.name,
                    block=block,
                    side=side,
                    offsets=plan.offsets,
                )
            )
            cell_id += 1
    return records


def annotate_placement(
    lines: list[str],
    plan: PowerStrapPlan,
    row_marker: str,
    instance_prefix: str = "PWRBUS",
) -> tuple[list[str], list[PlacementRecord]]:
    """Insert the strap records before the first row-marker line.

    Lines are returned without trailing newlines. Input lines are kept
    verbatim and in order. Running this on its own output inserts the
    block again.
    """
    max_id, names = _existing_cells(lines)
    records = build_strap_records(plan, max_id + 1, instance_prefix, names)
    marker = re.compile(row_marker)

    out: list[str] = []
    done_pwrbus = not records
    for line in lines:
        if not done_pwrbus and marker.search(line):
            for record in records:
                out.extend(record.to_lines())
                out.append("")
            done_pwrbus = True
        out.append(line)

    if not done_pwrbus:
        logger.warning("Row marker '%s' not found; no power straps inserted", row_marker)
        records = []
    else:
        logger.info("Inserted %d fixed strap records", len(records))
    return out, records
