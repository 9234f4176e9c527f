"""Pydantic models for YAML configuration parsing."""

from __future__ import annotations

import logging
from pathlib import Path
import re

import yaml
from pydantic import BaseModel, Field, model_validator

from netlist_backanno.geometry import PowerGroundAlias

logger = logging.getLogger(__name__)


class FillConfig(BaseModel):
    cell_prefix: str = "FILL"
    # Provisional: minimum strap width and row count are placeholders until a
    # layout aspect-ratio estimator exists.
    min_strap_width: int = 0  # grid units
    estimated_rows: int = 10
    scale: int = 100  # grid units per micron
    row_marker: str = r"^pad\s"
    instance_prefix: str = "PWRBUS"


class VariantConfig(BaseModel):
    tag: str
    power_pins: bool = True


class NetlistConfig(BaseModel):
    primary_tag: str = "rtlnopwr"
    variants: list[VariantConfig] = Field(
        default_factory=lambda: [
            VariantConfig(tag="rtl", power_pins=True),
            VariantConfig(tag="rtlbb", power_pins=True),
        ]
    )
    drop_existing_instances: bool = False
    power_net: str = "VDD"
    ground_net: str = "GND"


class NamingConfig(BaseModel):
    power_key: str = "vddnet"
    ground_key: str = "gndnet"


class Config(BaseModel):
    fill: FillConfig = Field(default_factory=FillConfig)
    netlist: NetlistConfig = Field(default_factory=NetlistConfig)
    naming: NamingConfig = Field(default_factory=NamingConfig)

    @model_validator(mode="after")
    def validate_semantics(self) -> Config:
        if self.fill.scale <= 0:
            raise ValueError("fill.scale must be > 0")
        if self.fill.estimated_rows < 1:
            raise ValueError("fill.estimated_rows must be >= 1")
        if self.fill.min_strap_width < 0:
            raise ValueError("fill.min_strap_width must be >= 0")
        if not self.fill.cell_prefix:
            raise ValueError("fill.cell_prefix must be a non-empty string")
        try:
            re.compile(self.fill.row_marker)
        except re.error as exc:
            raise ValueError(f"fill.row_marker is not a valid regular expression: {exc}") from exc

        if not self.netlist.primary_tag:
            raise ValueError("netlist.primary_tag must be a non-empty string")
        tags = [v.tag for v in self.netlist.variants]
        if self.netlist.primary_tag in tags:
            raise ValueError("netlist.variants must not repeat netlist.primary_tag")
        if len(set(tags)) != len(tags):
            raise ValueError("netlist.variants tags must be unique")
        return self

    def default_alias(self) -> PowerGroundAlias:
        return PowerGroundAlias(power=self.netlist.power_net, ground=self.netlist.ground_net)


def load_config(path: str | Path | None = None) -> Config:
    """Load and validate a YAML configuration file; defaults when path is None."""
    if path is None:
        return Config()
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f)
    return Config.model_validate(raw or {})


def _strip_value(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return value


def read_naming_file(path: str | Path) -> dict[str, str]:
    """Read `name=value` pairs, one per line."""
    names: dict[str, str] = {}
    with open(path, "r") as f:
        for line in f:
            line = line.split("#", 1)[0].strip()
            if not line or "=" not in line:
                continue
            # Shell-style project files prefix assignments with 'set'.
            if line.startswith("set "):
                line = line[4:]
            key, value = line.split("=", 1)
            names[key.strip()] = _strip_value(value)
    return names


def load_power_ground_alias(path: str | Path | None, config: Config) -> PowerGroundAlias | None:
    """Build the power/ground alias from a naming file; None when no file is given."""
    if path is None:
        return None
    names = read_naming_file(path)
    power = names.get(config.naming.power_key)
    ground = names.get(config.naming.ground_key)
    if power is None:
        logger.warning(
            "Naming file %s has no '%s'; using '%s'",
            path, config.naming.power_key, config.netlist.power_net,
        )
        power = config.netlist.power_net
    if ground is None:
        logger.warning(
            "Naming file %s has no '%s'; using '%s'",
            path, config.naming.ground_key, config.netlist.ground_net,
        )
        ground = config.netlist.ground_net
    return PowerGroundAlias(power=power, ground=ground)
