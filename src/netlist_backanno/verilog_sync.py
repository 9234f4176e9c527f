"""Insertion of change-list cells into structural Verilog netlist variants."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Iterable

from netlist_backanno.change_list import ChangeList
from netlist_backanno.config import NetlistConfig
from netlist_backanno.geometry import ChangeListEntry, PowerGroundAlias

logger = logging.getLogger(__name__)

MODULE_TERMINATOR = "endmodule"


@dataclass
class NetlistVariant:
    tag: str
    path: Path
    power_pins: bool


@dataclass
class VariantResult:
    variant: NetlistVariant
    lines: list[str]
    inserted: int
    dropped: int


def format_instance(entry: ChangeListEntry, power: PowerGroundAlias | None = None) -> str:
    """Render one instantiation line; power pins come before the data pin."""
    connections: list[str] = []
    if power is not None:
        connections.append(f".{power.power}({power.power})")
        connections.append(f".{power.ground}({power.ground})")
    if entry.pin:
        connections.append(f".{entry.pin}({entry.net})")
    if not connections:
        return f"{entry.cell_type} {entry.instance} ( );"
    return f"{entry.cell_type} {entry.instance} ( {', '.join(connections)} );"


def _is_inserted_instance(line: str, change_list: ChangeList) -> bool:
    tokens = line.split()
    if len(tokens) < 3 or tokens[2] != "(" or not line.rstrip().endswith(");"):
        return False
    entry = change_list.get(tokens[1])
    return entry is not None and entry.cell_type == tokens[0]


def sync_structural(
    lines: Iterable[str],
    change_list: ChangeList,
    power: PowerGroundAlias | None = None,
    drop_existing: bool = False,
) -> tuple[list[str], int, int]:
    """Copy lines, emitting the change list before every module terminator.

    Returns (lines, inserted_count, dropped_count). With drop_existing, lines
    that instantiate a change-list entry in the format written here are dropped
    first, so re-applying the same change list does not duplicate them.
    """
    new_lines = [format_instance(e, power) for e in change_list.values()]
    out: list[str] = []
    inserted = dropped = 0
    for line in lines:
        line = line.rstrip("\n")
        if drop_existing and _is_inserted_instance(line, change_list):
            dropped += 1
            continue
        if line.strip().startswith(MODULE_TERMINATOR):
            out.extend(new_lines)
            inserted += len(new_lines)
        out.append(line)
    return out, inserted, dropped


def derive_variants(primary: Path, config: NetlistConfig) -> list[NetlistVariant]:
    """Primary variant plus those derived by substituting the primary tag."""
    variants = [NetlistVariant(tag=config.primary_tag, path=primary, power_pins=False)]
    if config.primary_tag not in primary.name:
        logger.warning(
            "Netlist name %s does not contain '%s'; no derived variants",
            primary.name, config.primary_tag,
        )
        return variants
    for v in config.variants:
        name = primary.name.replace(config.primary_tag, v.tag)
        variants.append(NetlistVariant(tag=v.tag, path=primary.with_name(name), power_pins=v.power_pins))
    return variants


def sync_variants(
    primary: str | Path,
    change_list: ChangeList,
    config: NetlistConfig,
    power: PowerGroundAlias,
) -> list[VariantResult]:
    """Apply the change list to each structural variant present on disk.

    The primary variant is required; derived variants are skipped if absent.
    """
    results: list[VariantResult] = []
    for variant in derive_variants(Path(primary), config):
        if variant.tag != config.primary_tag and not variant.path.exists():
            logger.warning("Netlist variant %s not found; skipping", variant.path)
            continue
        with open(variant.path, "r") as f:
            lines, inserted, dropped = sync_structural(
                f,
                change_list,
                power if variant.power_pins else None,
                drop_existing=config.drop_existing_instances,
            )
        if inserted == 0:
            logger.warning("No '%s' found in %s", MODULE_TERMINATOR, variant.path)
        results.append(VariantResult(variant=variant, lines=lines, inserted=inserted, dropped=dropped))
    return results
