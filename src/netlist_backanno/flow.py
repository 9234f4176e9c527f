"""Run orchestration for the fill and annotate steps."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path

from netlist_backanno.change_list import ChangeList, read_change_list
from netlist_backanno.config import Config
from netlist_backanno.errors import NothingToAnnotate
from netlist_backanno.fill_planner import RowEstimator, fixed_row_estimator, plan_power_straps
from netlist_backanno.geometry import FillCatalog, PlacementRecord, PowerGroundAlias, PowerStrapPlan
from netlist_backanno.lef_parser import read_fill_catalog
from netlist_backanno.placement import annotate_placement
from netlist_backanno.spice_sync import SpiceResult, sync_spice_file
from netlist_backanno.verilog_sync import VariantResult, sync_variants

logger = logging.getLogger(__name__)


@dataclass
class FillResult:
    catalog: FillCatalog
    plan: PowerStrapPlan
    records: list[PlacementRecord]
    output_path: Path


@dataclass
class AnnotationResult:
    change_list: ChangeList
    variants: list[VariantResult] = field(default_factory=list)
    spice: SpiceResult | None = None
    spice_path: Path | None = None
    written: list[Path] = field(default_factory=list)


def _output_path(path: Path, output_dir: Path | None) -> Path:
    if output_dir is None:
        return path
    return output_dir / path.name


def _has_final_newline(path: Path) -> bool:
    with open(path, "rb") as f:
        f.seek(0, 2)
        if f.tell() == 0:
            return True
        f.seek(-1, 2)
        return f.read(1) == b"\n"


def _write_lines(path: Path, lines: list[str], source: Path) -> None:
    """Write lines, ending the file with a newline only if source had one."""
    final_newline = _has_final_newline(source)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        f.write("\n".join(lines))
        if lines and final_newline:
            f.write("\n")


def run_fill(
    lef_path: str | Path,
    cel_path: str | Path,
    config: Config,
    output_path: str | Path | None = None,
    row_estimator: RowEstimator | None = None,
) -> FillResult:
    """Plan power straps from the LEF fill cells and write the annotated .cel file."""
    cel_path = Path(cel_path)
    output_path = Path(output_path) if output_path else cel_path
    fill_cfg = config.fill

    catalog = read_fill_catalog(lef_path, fill_cfg.cell_prefix, fill_cfg.scale)
    estimator = row_estimator or fixed_row_estimator(fill_cfg.estimated_rows)
    plan = plan_power_straps(catalog, fill_cfg.min_strap_width, estimator)

    with open(cel_path, "r") as f:
        lines = [line.rstrip("\n") for line in f]
    out, records = annotate_placement(lines, plan, fill_cfg.row_marker, fill_cfg.instance_prefix)
    _write_lines(output_path, out, cel_path)
    return FillResult(catalog=catalog, plan=plan, records=records, output_path=output_path)


def run_annotate(
    report_path: str | Path,
    primary_netlist: str | Path,
    config: Config,
    spice_path: str | Path | None = None,
    subckt_library: str | Path | None = None,
    alias: PowerGroundAlias | None = None,
    output_dir: str | Path | None = None,
) -> AnnotationResult:
    """Propagate the antenna/fill report into every netlist representation.

    Raises NothingToAnnotate, before any file is written, when the report
    contains no insertions. All documents are transformed before any is
    written.
    """
    change_list = read_change_list(report_path)
    if not change_list:
        raise NothingToAnnotate(f"No cells to add in {report_path}")
    logger.info("Change list has %d entries", len(change_list))

    output_dir = Path(output_dir) if output_dir else None
    result = AnnotationResult(change_list=change_list)
    result.variants = sync_variants(
        primary_netlist, change_list, config.netlist, alias or config.default_alias(),
    )

    if spice_path is not None:
        spice_path = Path(spice_path)
        if not spice_path.exists():
            logger.warning("Transistor netlist %s not found; skipping", spice_path)
        elif subckt_library is None:
            logger.warning("No subcircuit library given; skipping %s", spice_path)
        else:
            result.spice = sync_spice_file(spice_path, subckt_library, change_list, alias)
            result.spice_path = spice_path

    for vr in result.variants:
        target = _output_path(vr.variant.path, output_dir)
        _write_lines(target, vr.lines, vr.variant.path)
        result.written.append(target)
    if result.spice is not None and result.spice_path is not None:
        target = _output_path(result.spice_path, output_dir)
        _write_lines(target, result.spice.lines, result.spice_path)
        result.written.append(target)
    return result
