"""Functions for generating ASCII summaries of fill and annotate runs."""

from __future__ import annotations

from collections import Counter

from netlist_backanno.flow import AnnotationResult, FillResult
from netlist_backanno.geometry import FillCatalog


def _um(value: int, scale: int) -> str:
    return f"{value / scale:.2f}"


def generate_catalog_report(catalog: FillCatalog, scale: int) -> str:
    """Table of catalog macros, widest first."""
    lines = [f"** Fill Catalog (prefix '{catalog.prefix}') **"]
    for m in catalog.macros:
        sym = " ".join(m.symmetry) or "-"
        lines.append(
            f"  - {m.name}: {_um(m.width, scale)} um x {_um(m.height, scale)} um"
            f"  (width {m.width}, origin {m.origin_x},{m.origin_y}, symmetry {sym})"
        )
    if catalog.warnings:
        lines.append(f"  - Warnings: {len(catalog.warnings)}")
    return "\n".join(lines)


def generate_fill_report(result: FillResult, scale: int, min_width: int) -> str:
    plan = result.plan
    report_lines = [
        "--- Power Strap Fill Report ---",
        "",
        generate_catalog_report(result.catalog, scale),
        "",
        "** Plan **",
        f"  - Default Filler: {plan.filler.name}",
        f"  - Minimum Strap Width: {min_width}",
        f"  - Strap Candidates: {', '.join(m.name for m in plan.candidates) or 'none'}",
    ]
    if plan.strap is not None and plan.offsets is not None:
        o = plan.offsets
        report_lines.append(f"  - Power Strap Cell: {plan.strap.name}")
        report_lines.append(
            f"  - Offsets: left {o.left} right {o.right} bottom {o.bottom} top {o.top}"
        )
    report_lines.append(f"  - Estimated Rows: {plan.rows}")
    report_lines.append(f"  - Records Inserted: {len(result.records)}")
    report_lines.append(f"  - Output: {result.output_path}")
    report_lines.append("\n--- End of Report ---")
    return "\n".join(report_lines)


def generate_annotation_report(result: AnnotationResult) -> str:
    report_lines = [
        "--- Back-Annotation Report ---",
        "",
        "** Change List **",
        f"  - Entries: {len(result.change_list)}",
    ]
    by_cell = Counter(e.cell_type for e in result.change_list.values())
    for cell_type, count in sorted(by_cell.items()):
        report_lines.append(f"  - {cell_type}: {count}")
    no_connect = sum(1 for e in result.change_list.values() if not e.pin)
    report_lines.append(f"  - No-connect (fill) entries: {no_connect}")
    report_lines.append("")

    report_lines.append("** Structural Netlists **")
    for vr in result.variants:
        line = f"  - {vr.variant.path.name} [{vr.variant.tag}]: {vr.inserted} inserted"
        if vr.dropped:
            line += f", {vr.dropped} stale dropped"
        report_lines.append(line)
    report_lines.append("")

    report_lines.append("** Transistor Netlist **")
    if result.spice is None:
        report_lines.append("  - skipped")
    else:
        report_lines.append(f"  - {result.spice_path.name}: {result.spice.inserted} inserted")
        report_lines.append(f"  - Stale instances dropped: {result.spice.dropped}")
        report_lines.append(f"  - Missing subcircuits: {len(result.spice.missing)}")
        for err in result.spice.missing:
            report_lines.append(f"    - {err.cell_type} ({err.instance})")

    report_lines.append("\n--- End of Report ---")
    return "\n".join(report_lines)
