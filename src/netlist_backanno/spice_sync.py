"""Insertion of change-list cells into a transistor-level SPICE netlist."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Iterable, Iterator

from netlist_backanno.change_list import ChangeList
from netlist_backanno.errors import MissingSubcircuitError
from netlist_backanno.geometry import ChangeListEntry, PowerGroundAlias, SubcircuitSignature

logger = logging.getLogger(__name__)

SUBCKT_KEYWORD = ".subckt"
TERMINATOR_KEYWORD = ".ends"
END_KEYWORD = ".end"
INSTANCE_PREFIX = "X"


@dataclass
class SpiceResult:
    lines: list[str]
    inserted: int = 0
    dropped: int = 0
    missing: list[MissingSubcircuitError] = field(default_factory=list)


def _logical_lines(lines: Iterable[str]) -> Iterator[str]:
    """Join '+' continuation lines onto the line they continue."""
    current: str | None = None
    for line in lines:
        line = line.rstrip("\n")
        if line.startswith("+") and current is not None:
            current += " " + line[1:].strip()
            continue
        if current is not None:
            yield current
        current = line
    if current is not None:
        yield current


def parse_subckt_signatures(lines: Iterable[str], cell_types: set[str]) -> dict[str, SubcircuitSignature]:
    """Ordered pin lists for the wanted cell types; first declaration wins."""
    signatures: dict[str, SubcircuitSignature] = {}
    for line in _logical_lines(lines):
        tokens = line.split()
        if len(tokens) < 2 or tokens[0].lower() != SUBCKT_KEYWORD:
            continue
        name = tokens[1]
        if name not in cell_types or name in signatures:
            continue
        pins = tuple(t for t in tokens[2:] if "=" not in t)
        signatures[name] = SubcircuitSignature(cell_type=name, pins=pins)
    return signatures


def read_subckt_signatures(path: str | Path, cell_types: set[str]) -> dict[str, SubcircuitSignature]:
    with open(path, "r") as f:
        return parse_subckt_signatures(f, cell_types)


def map_pin(pin: str, entry: ChangeListEntry, alias: PowerGroundAlias | None) -> str:
    """Net name a sub-circuit pin connects to for an inserted instance.

    Pins that are neither the entry's pin nor a power/ground alias are
    assumed tied to a global net of the same name.
    """
    if entry.pin and pin == entry.pin:
        return entry.net
    if alias is not None:
        resolved = alias.resolve(pin)
        if resolved is not None:
            return resolved
    return pin


def format_instance(
    entry: ChangeListEntry,
    signature: SubcircuitSignature,
    alias: PowerGroundAlias | None,
) -> str:
    nets = [map_pin(pin, entry, alias) for pin in signature.pins]
    return " ".join([INSTANCE_PREFIX + entry.instance, *nets, entry.cell_type])


def _instance_name(line: str) -> str | None:
    tokens = line.split(None, 1)
    if not tokens or len(tokens[0]) < 2 or tokens[0][0].upper() != INSTANCE_PREFIX:
        return None
    return tokens[0][1:]


def sync_spice(
    lines: Iterable[str],
    change_list: ChangeList,
    signatures: dict[str, SubcircuitSignature],
    alias: PowerGroundAlias | None = None,
) -> SpiceResult:
    """Copy the netlist, replacing any earlier insertions with the change list.

    Existing instances named in the change list (and their continuation
    lines) are dropped everywhere, and the change list is emitted once, before
    the top-level terminator, so applying the same change list twice gives the
    same output.
    """
    result = SpiceResult(lines=[])
    new_lines: list[str] = []
    for entry in change_list.values():
        signature = signatures.get(entry.cell_type)
        if signature is None:
            err = MissingSubcircuitError(entry.cell_type, entry.instance)
            logger.warning(str(err))
            result.missing.append(err)
            continue
        new_lines.append(format_instance(entry, signature, alias))

    kept: list[str] = []
    dropping = False
    for line in lines:
        line = line.rstrip("\n")
        if dropping and line.startswith("+"):
            continue
        dropping = False
        if _instance_name(line) in change_list:
            dropping = True
            result.dropped += 1
            continue
        kept.append(line)

    at = _insertion_index(kept)
    if at is None:
        result.lines = kept
    else:
        result.lines = kept[:at] + new_lines + kept[at:]
        result.inserted = len(new_lines)
    return result


def _keyword(line: str) -> str:
    tokens = line.split(None, 1)
    return tokens[0].lower() if tokens else ""


def _insertion_index(lines: list[str]) -> int | None:
    """Index of the top-level terminator: the last '.ends', else '.end'."""
    for keyword in (TERMINATOR_KEYWORD, END_KEYWORD):
        for i in range(len(lines) - 1, -1, -1):
            if _keyword(lines[i]) == keyword:
                return i
    return None


def sync_spice_file(
    netlist: str | Path,
    subckt_library: str | Path,
    change_list: ChangeList,
    alias: PowerGroundAlias | None = None,
) -> SpiceResult:
    cell_types = {e.cell_type for e in change_list.values()}
    signatures = read_subckt_signatures(subckt_library, cell_types)
    with open(netlist, "r") as f:
        result = sync_spice(f, change_list, signatures, alias)
    if result.inserted == 0 and len(result.missing) < len(change_list):
        logger.warning("No '%s' or '%s' found in %s", TERMINATOR_KEYWORD, END_KEYWORD, netlist)
    return result
