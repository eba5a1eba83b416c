"""
Command-line interface for pidgen.

Commands:
- render: Generate a P&ID schematic (SVG, optionally PDF) from a model file
- check: Report model data the schematic would silently drop or degrade
- classes: List supported equipment classes, tag prefixes and ports

Usage:
    pidgen render plant.yaml -o plant.svg
    pidgen render export.json --pdf plant.pdf --title "Crude Unit"
    pidgen check plant.yaml
    pidgen classes
"""

import logging
from pathlib import Path

import click
import yaml

from . import __version__
from .process_model import ModelFormatError, ProcessModel
from .schematic import (
    EquipmentClass,
    SchematicConfig,
    SchematicDiagram,
    find_anomalies,
    symbol_for,
)


def _load_model(model_file: Path) -> ProcessModel:
    try:
        return ProcessModel.from_yaml(model_file)
    except (ModelFormatError, yaml.YAMLError) as e:
        click.echo(f"Error loading model: {e}", err=True)
        raise SystemExit(1) from None


def _load_config(config_file: Path | None) -> SchematicConfig:
    if config_file is None:
        return SchematicConfig()
    try:
        return SchematicConfig.from_yaml(config_file)
    except (ValueError, TypeError, yaml.YAMLError) as e:
        click.echo(f"Error loading config: {e}", err=True)
        raise SystemExit(1) from None


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool):
    """pidgen - generate P&ID schematics from process models."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("model_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output SVG file path (default: configured filename in the current directory).",
)
@click.option(
    "--pdf", "pdf_output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also export a PDF (requires the 'pdf' extra).",
)
@click.option(
    "--config", "-c", "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Schematic configuration YAML file.",
)
@click.option("--title", default=None, help="Title block heading.")
def render(
    model_file: Path,
    output: Path | None,
    pdf_output: Path | None,
    config_file: Path | None,
    title: str | None,
):
    """
    Render a process model as a P&ID schematic.

    MODEL_FILE is a YAML model or the JSON payload exported by the modeling
    tool.

    Example:
        pidgen render plant.yaml -o plant.svg
    """
    model = _load_model(model_file)
    config = _load_config(config_file).with_overrides(title=title)

    diagram = SchematicDiagram.from_model(model, config=config)
    if diagram.generate() is None:
        click.echo("Nothing to draw: the model has no equipment.")
        return

    svg_path = diagram.export_svg(output or Path(config.filename))
    click.echo(f"Exported SVG: {svg_path}")

    if pdf_output is not None:
        try:
            pdf_path = diagram.export_pdf(pdf_output)
        except ImportError as e:
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(1) from None
        click.echo(f"Exported PDF: {pdf_path}")

    skipped = len(model.connections) - diagram.connection_count
    click.echo(f"  Equipment:   {diagram.equipment_count}")
    click.echo(f"  Connections: {diagram.connection_count}")
    if skipped:
        click.echo(f"  Skipped:     {skipped} (run 'pidgen check' for details)")


@cli.command()
@click.argument("model_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check(model_file: Path):
    """
    Check a process model for data the schematic would drop.

    Reports unknown equipment classes, duplicate ids, pipes referencing
    missing equipment and unknown port names. Exits with status 1 if any
    are found.

    Example:
        pidgen check plant.yaml
    """
    click.echo(f"\nChecking: {model_file}")
    click.echo("-" * 50)

    model = _load_model(model_file)
    anomalies = find_anomalies(model.equipment, model.connections)

    if anomalies:
        click.echo("\nAnomalies:")
        for anomaly in anomalies:
            click.echo(f"  - {anomaly}")
        raise SystemExit(1)

    click.echo("Model is complete.")
    click.echo(f"  Equipment:   {len(model.equipment)}")
    click.echo(f"  Connections: {len(model.connections)}")


@cli.command()
def classes():
    """List supported equipment classes with tag prefix and port names."""
    for equipment_class in EquipmentClass:
        if equipment_class is EquipmentClass.GENERIC:
            continue
        symbol = symbol_for(equipment_class)
        ports = ", ".join(symbol.ports) or "-"
        click.echo(f"{equipment_class.value:<28} {symbol.prefix:<4} {ports}")


if __name__ == "__main__":
    cli()
