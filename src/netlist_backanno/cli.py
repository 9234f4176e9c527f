"""Rich-Click CLI for netlist_backanno."""

from __future__ import annotations

import logging
from pathlib import Path

import rich_click as click

click.rich_click.USE_RICH_MARKUP = True

_config_option = click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    show_default="None",
    help="YAML configuration file. Built-in defaults when omitted.",
)


def _load(config_file: Path | None):
    import yaml

    from netlist_backanno.config import load_config

    try:
        return load_config(config_file)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise click.ClickException(f"Cannot load config {config_file}: {exc}") from exc


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Back-annotate filler, power-strap and antenna cells into layout netlists."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(name)s: %(message)s",
    )


@cli.command()
@click.argument("lef_file", type=click.Path(path_type=Path))
@_config_option
def catalog(lef_file: Path, config_file: Path | None) -> None:
    """List fill macros found in LEF_FILE."""
    from netlist_backanno.errors import EmptyCatalogError
    from netlist_backanno.lef_parser import read_fill_catalog
    from netlist_backanno.reporter import generate_catalog_report

    config = _load(config_file)
    try:
        fill_catalog = read_fill_catalog(lef_file, config.fill.cell_prefix, config.fill.scale)
    except (OSError, EmptyCatalogError) as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(generate_catalog_report(fill_catalog, config.fill.scale))


@cli.command()
@click.argument("lef_file", type=click.Path(path_type=Path))
@click.argument("cel_file", type=click.Path(path_type=Path))
@_config_option
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    show_default="CEL_FILE",
    help="Where to write the annotated placement. Rewrites CEL_FILE when omitted.",
)
@click.option("--report/--no-report", default=True, show_default=True, help="Print an ASCII summary report.")
@click.option("--viz", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write an HTML view of the strap plan.")
@click.option("--open-browser", is_flag=True, default=False, show_default="False", help="Auto-open HTML after generation.")
def fill(
    lef_file: Path,
    cel_file: Path,
    config_file: Path | None,
    output: Path | None,
    report: bool,
    viz: Path | None,
    open_browser: bool,
) -> None:
    """Insert fixed power-strap fill cells from LEF_FILE into the placement CEL_FILE."""
    from netlist_backanno.errors import EmptyCatalogError
    from netlist_backanno.flow import run_fill

    config = _load(config_file)
    click.echo(f"Reading fill cells: {lef_file}")
    try:
        result = run_fill(lef_file, cel_file, config, output)
    except (OSError, EmptyCatalogError) as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Wrote placement: {result.output_path}")

    if report:
        from netlist_backanno.reporter import generate_fill_report

        click.echo(generate_fill_report(result, config.fill.scale, config.fill.min_strap_width))

    if viz:
        from netlist_backanno.visualize import render_fill_plan

        click.echo(f"Rendering visualization: {viz}")
        render_fill_plan(
            result.catalog,
            result.plan,
            result.records,
            config.fill.min_strap_width,
            config.fill.scale,
            output_path=viz,
            open_browser=open_browser,
        )

    click.echo("Done!")


@cli.command()
@click.argument("report_file", type=click.Path(path_type=Path))
@click.argument("netlist_file", type=click.Path(path_type=Path))
@_config_option
@click.option("--spice", type=click.Path(path_type=Path), default=None, help="Transistor-level netlist to update.")
@click.option("--subckt-lib", type=click.Path(path_type=Path), default=None, help="SPICE library with .subckt pin orders.")
@click.option("--names", type=click.Path(path_type=Path), default=None, help="Naming file with global power/ground names.")
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    show_default="None",
    help="Write updated netlists here instead of rewriting them in place.",
)
@click.option("--report/--no-report", default=True, show_default=True, help="Print an ASCII summary report.")
def annotate(
    report_file: Path,
    netlist_file: Path,
    config_file: Path | None,
    spice: Path | None,
    subckt_lib: Path | None,
    names: Path | None,
    output_dir: Path | None,
    report: bool,
) -> None:
    """Add the cells listed in REPORT_FILE to NETLIST_FILE, its variants and the SPICE netlist."""
    from netlist_backanno.config import load_power_ground_alias
    from netlist_backanno.errors import NothingToAnnotate
    from netlist_backanno.flow import run_annotate

    config = _load(config_file)
    try:
        alias = load_power_ground_alias(names, config)
        click.echo(f"Reading change list: {report_file}")
        result = run_annotate(
            report_file,
            netlist_file,
            config,
            spice_path=spice,
            subckt_library=subckt_lib,
            alias=alias,
            output_dir=output_dir,
        )
    except NothingToAnnotate:
        click.echo("Nothing to annotate; netlists left unchanged.")
        return
    except OSError as exc:
        raise click.ClickException(str(exc)) from exc

    for path in result.written:
        click.echo(f"Wrote netlist: {path}")

    if report:
        from netlist_backanno.reporter import generate_annotation_report

        click.echo(generate_annotation_report(result))

    click.echo("Done!")


# Keep the public CLI symbol name unchanged for __main__/entry points.
app = cli
