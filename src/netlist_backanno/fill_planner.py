"""Selection of power-bus strap cells from the fill catalog."""

from __future__ import annotations

import logging
from typing import Callable

from netlist_backanno.errors import EmptyCatalogError
from netlist_backanno.geometry import FillCatalog, Macro, PowerStrapPlan, StrapOffsets

logger = logging.getLogger(__name__)

RowEstimator = Callable[[FillCatalog], int]


def fixed_row_estimator(rows: int) -> RowEstimator:
    """Row estimator that ignores the catalog and returns a constant."""

    def _estimate(catalog: FillCatalog) -> int:
        return rows

    return _estimate


def select_strap_candidates(catalog: FillCatalog, min_width: int) -> list[Macro]:
    """Widest-first prefix of the catalog whose widths are >= min_width."""
    candidates: list[Macro] = []
    for macro in sorted(catalog.macros, key=lambda m: m.width, reverse=True):
        if macro.width < min_width:
            break
        candidates.append(macro)
    return candidates


def strap_offsets(macro: Macro) -> StrapOffsets:
    """Extents of the macro centered on its reference point.

    Integer division; odd sizes put the extra unit below/left of center.
    """
    right = macro.width // 2
    top = macro.height // 2
    return StrapOffsets(
        left=right - macro.width,
        right=right,
        bottom=top - macro.height,
        top=top,
    )


def plan_power_straps(
    catalog: FillCatalog,
    min_width: int,
    row_estimator: RowEstimator,
) -> PowerStrapPlan:
    """Choose the default filler and power-strap cell and compute strap extents."""
    if not catalog.macros:
        raise EmptyCatalogError(catalog.prefix)

    ordered = sorted(catalog.macros, key=lambda m: m.width, reverse=True)
    filler = ordered[0]
    candidates = select_strap_candidates(catalog, min_width)
    rows = row_estimator(catalog)
    if rows < 1:
        raise ValueError(f"Row estimator returned {rows}; expected >= 1")

    if not candidates:
        logger.warning(
            "No fill cell is at least %d units wide; no power straps will be placed",
            min_width,
        )
        return PowerStrapPlan(filler=filler, strap=None, candidates=[], offsets=None, rows=rows)

    strap = candidates[0]
    logger.info(
        "Default filler %s (width %d); power strap %s, %d candidate(s), %d rows",
        filler.name, filler.width, strap.name, len(candidates), rows,
    )
    return PowerStrapPlan(
        filler=filler,
        strap=strap,
        candidates=candidates,
        offsets=strap_offsets(strap),
        rows=rows,
    )
