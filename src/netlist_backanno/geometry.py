"""Data model shared by the catalog reader, planner and synchronizers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True)
class Macro:
    """A cell footprint from the geometry library."""

    name: str
    width: int  # grid units (1/scale um)
    height: int  # grid units
    origin_x: int = 0
    origin_y: int = 0
    symmetry: tuple[str, ...] = ()


@dataclass
class FillCatalog:
    """Fill macros matching the configured prefix, widest first."""

    prefix: str
    macros: list[Macro] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.macros = sorted(self.macros, key=lambda m: m.width, reverse=True)

    def __len__(self) -> int:
        return len(self.macros)

    @property
    def default_filler(self) -> Macro:
        return self.macros[0]


@dataclass(frozen=True)
class StrapOffsets:
    """Extents of a strap cell centered on its reference point."""

    left: int
    right: int
    bottom: int
    top: int


@dataclass
class PowerStrapPlan:
    filler: Macro
    strap: Macro | None
    candidates: list[Macro]
    offsets: StrapOffsets | None
    rows: int

    @property
    def replication_count(self) -> int:
        if self.strap is None:
            return 0
        return 2 * self.rows


@dataclass
class PlacementRecord:
    """A fixed cell record injected into the placement description."""

    cell_id: int
    instance_name: str
    macro: str
    block: int
    side: Literal["left", "right"]
    offsets: StrapOffsets
    fixed: bool = True

    def to_lines(self) -> list[str]:
        o = self.offsets
        return [
            f"cell {self.cell_id} {self.instance_name}",
            f"initially fixed 0 from {self.side} of block {self.block}",
            f"left {o.left} right {o.right} bottom {o.bottom} top {o.top}",
        ]


@dataclass(frozen=True)
class ChangeListEntry:
    """One cell to add, keyed by instance name in the change list."""

    instance: str
    net: str
    cell_type: str
    pin: str = ""  # empty: no-connect placeholder (pure fill)


@dataclass(frozen=True)
class SubcircuitSignature:
    cell_type: str
    pins: tuple[str, ...]


@dataclass(frozen=True)
class PowerGroundAlias:
    """Global power/ground net names, each optionally written with a trailing '!'."""

    power: str
    ground: str

    def resolve(self, pin: str) -> str | None:
        if pin in (self.power, self.power + "!"):
            return self.power
        if pin in (self.ground, self.ground + "!"):
            return self.ground
        return None
