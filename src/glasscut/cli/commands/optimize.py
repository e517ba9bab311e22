"""Optimize command: plan pending cuts, review waste and optionally commit."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from glasscut.application import OptimizationOutput, ServiceFactory
from glasscut.application.config import ConfigError, config_to_settings, load_config
from glasscut.cli.commands.validate import display_load_error
from glasscut.domain import (
    CommitError,
    InventoryStoreError,
    Plan,
    StaleWasteRegionError,
)
from glasscut.infrastructure import JsonInventoryStore


class OutputFormat(str, Enum):
    TEXT = "text"
    ASCII = "ascii"
    SVG = "svg"
    JSON = "json"


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


def _parse_waste_option(value: str) -> tuple[str, str | None]:
    """Split ``W3`` or ``W3=Rack B`` into region id and location."""
    region_id, sep, location = value.partition("=")
    return region_id.strip(), (location.strip() or None) if sep else None


def apply_review(plan: Plan, drop_waste: list[str], save_waste: list[str]) -> None:
    """Apply reviewer decisions to the plan's waste regions.

    Raises:
        StaleWasteRegionError: If a region id is not in the plan.
    """
    for value in drop_waste:
        region_id, _ = _parse_waste_option(value)
        plan.set_saved(region_id, False)
    for value in save_waste:
        region_id, location = _parse_waste_option(value)
        plan.set_saved(region_id, True, location)


def material_names(output: OptimizationOutput) -> dict[str, str]:
    return {
        material_id: output.material_name(material_id)
        for material_id in output.plan.material_type_ids
    }


def render_output(
    factory: ServiceFactory, output: OptimizationOutput, output_format: OutputFormat
) -> str:
    """Render the plan in the requested format."""
    names = material_names(output)
    if output_format == OutputFormat.JSON:
        return factory.get_json_exporter().export(output.plan)
    if output_format == OutputFormat.SVG:
        renderer = factory.get_cut_diagram_renderer(names)
        return renderer.render_combined_svg(output.plan)
    if output_format == OutputFormat.ASCII:
        return factory.get_cut_diagram_renderer(names).render_all_ascii(output.plan)
    return factory.get_plan_formatter(names).format(output.plan)


def optimize_command(
    inventory_file: Annotated[
        Path,
        typer.Option("--inventory", "-i", help="Inventory snapshot JSON file"),
    ],
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Optimizer configuration JSON file"),
    ] = None,
    materials: Annotated[
        list[str] | None,
        typer.Option("--material", "-m", help="Material type id to plan (repeatable)"),
    ] = None,
    requests: Annotated[
        list[str] | None,
        typer.Option("--request", "-r", help="Cut request id to plan (repeatable)"),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.TEXT,
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the plan to this file"),
    ] = None,
    drop_waste: Annotated[
        list[str] | None,
        typer.Option("--drop-waste", help="Waste region id to discard as scrap"),
    ] = None,
    save_waste: Annotated[
        list[str] | None,
        typer.Option(
            "--save-waste",
            help="Waste region id to keep as a remnant, optionally ID=LOCATION",
        ),
    ] = None,
    commit: Annotated[
        bool,
        typer.Option("--commit", help="Commit the reviewed plan to the inventory"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show optimizer debug logging"),
    ] = False,
) -> None:
    """Plan the pending cuts of an inventory file.

    Prints the cutting plan for review. Waste regions taller than the
    reusable threshold are kept as remnants by default; use --drop-waste
    and --save-waste to override individual regions, then --commit to
    consume the stock and mark the requests as cut.

    Example:
        glasscut optimize -i shop.json -m float-4mm --save-waste W2=Rack-B --commit
    """
    _configure_logging(verbose)

    config = None
    if config_file is not None:
        try:
            config = load_config(config_file)
        except ConfigError as e:
            display_load_error(e)
            raise typer.Exit(code=1)

    factory = ServiceFactory(settings=config_to_settings(config))
    store = JsonInventoryStore(inventory_file)

    try:
        output = factory.create_run_optimization_command(store).execute(
            material_type_ids=materials or None,
            request_ids=requests or None,
        )
    except InventoryStoreError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    try:
        apply_review(output.plan, drop_waste or [], save_waste or [])
    except StaleWasteRegionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    rendered = render_output(factory, output, output_format)
    if output_file is not None:
        output_file.write_text(rendered, encoding="utf-8")
        typer.echo(f"Plan written to {output_file}")
    else:
        typer.echo(rendered)

    if not commit:
        return
    if not output.plan.pieces:
        typer.echo("Nothing to commit.")
        return

    command = factory.create_commit_command(
        store, material_names=material_names(output)
    )
    try:
        result = command.execute(output.plan)
    except CommitError as e:
        typer.echo(f"Error: {e}", err=True)
        committed = len(e.report.committed_piece_ids)
        typer.echo(f"{committed} pieces were committed before the failure.", err=True)
        raise typer.Exit(code=1)
    except InventoryStoreError as e:
        # Raised by the log write, after every piece went through
        typer.echo(f"Error: {e}", err=True)
        typer.echo(
            "The pieces were committed but the optimization log was not written.",
            err=True,
        )
        raise typer.Exit(code=1)

    report = result.report
    typer.echo(f"Committed {len(report.committed_piece_ids)} pieces.")
    if report.conflicts:
        for outcome in report.conflicts:
            typer.echo(
                f"Conflict on piece {outcome.piece_id}: {outcome.message}", err=True
            )
        typer.echo(
            "Inventory changed since planning; re-run the optimization.", err=True
        )
        raise typer.Exit(code=1)
