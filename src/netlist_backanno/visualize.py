"""Plotly view of the fill catalog and the planned power-strap columns."""

from __future__ import annotations

from pathlib import Path

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from netlist_backanno.geometry import FillCatalog, PlacementRecord, PowerStrapPlan

CANDIDATE_COLOR = "rgba(40, 170, 90, 0.70)"
REJECTED_COLOR = "rgba(130, 130, 130, 0.70)"
THRESHOLD_COLOR = "rgba(210, 70, 70, 0.85)"
STRAP_COLOR = "rgba(220, 150, 50, 0.70)"
ROW_COLOR = "rgba(40, 120, 220, 0.25)"

# Nominal gap between the strap columns in the schematic view, in strap widths.
CORE_WIDTH_IN_STRAPS = 12


def _rect_trace(
    boxes: list[tuple[float, float, float, float]],
    color: str,
    name: str,
) -> go.Scatter:
    xs: list[float | None] = []
    ys: list[float | None] = []
    for x0, y0, x1, y1 in boxes:
        xs.extend([x0, x1, x1, x0, x0, None])
        ys.extend([y0, y0, y1, y1, y0, None])
    return go.Scatter(
        x=xs,
        y=ys,
        mode="lines",
        fill="toself",
        fillcolor=color,
        line=dict(color=color, width=0.8),
        name=name,
        hoverinfo="name",
    )


def build_figure(
    catalog: FillCatalog,
    plan: PowerStrapPlan,
    records: list[PlacementRecord],
    min_width: int,
    scale: int,
) -> go.Figure:
    fig = make_subplots(
        rows=1,
        cols=2,
        horizontal_spacing=0.10,
        subplot_titles=("Fill Cell Widths", "Power Strap Columns"),
    )

    candidate_names = {m.name for m in plan.candidates}
    fig.add_trace(
        go.Bar(
            x=[m.name for m in catalog.macros],
            y=[m.width / scale for m in catalog.macros],
            marker_color=[
                CANDIDATE_COLOR if m.name in candidate_names else REJECTED_COLOR
                for m in catalog.macros
            ],
            name="Fill cells",
            hovertemplate="%{x}: %{y:.2f} um<extra></extra>",
        ),
        row=1,
        col=1,
    )
    fig.add_hline(
        y=min_width / scale,
        line=dict(color=THRESHOLD_COLOR, dash="dash"),
        annotation_text="min strap width",
        row=1,
        col=1,
    )

    if plan.strap is not None and plan.offsets is not None and records:
        o = plan.offsets
        w = (o.right - o.left) / scale
        h = (o.top - o.bottom) / scale
        core = CORE_WIDTH_IN_STRAPS * w
        rows: list[tuple[float, float, float, float]] = []
        straps: list[tuple[float, float, float, float]] = []
        for block in range(1, plan.rows + 1):
            y0 = (block - 1) * h
            rows.append((0.0, y0, core + 2 * w, y0 + h))
        for record in records:
            y0 = (record.block - 1) * h
            x0 = 0.0 if record.side == "left" else core + w
            straps.append((x0, y0, x0 + w, y0 + h))
        fig.add_trace(_rect_trace(rows, ROW_COLOR, "Rows"), row=1, col=2)
        fig.add_trace(_rect_trace(straps, STRAP_COLOR, f"Strap: {plan.strap.name}"), row=1, col=2)

    fig.update_layout(
        title=f"Power Strap Plan - {catalog.prefix}*",
        width=1200,
        height=600,
        legend=dict(orientation="v"),
    )
    fig.update_yaxes(title_text="Width (um)", row=1, col=1)
    fig.update_xaxes(title_text="X (um, schematic)", row=1, col=2)
    fig.update_yaxes(title_text="Y (um)", row=1, col=2)
    return fig


def render_fill_plan(
    catalog: FillCatalog,
    plan: PowerStrapPlan,
    records: list[PlacementRecord],
    min_width: int,
    scale: int,
    output_path: str | Path,
    open_browser: bool = False,
) -> None:
    """Render the catalog widths and strap columns to HTML."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = build_figure(catalog, plan, records, min_width, scale)
    fig.write_html(str(output_path))
    if open_browser:
        import webbrowser

        webbrowser.open(f"file://{output_path.resolve()}")
