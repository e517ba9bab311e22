"""Validate command for checking configuration and inventory files."""

from pathlib import Path
from typing import Annotated

import typer

from glasscut.application.config import (
    ConfigError,
    inventory_to_cut_requests,
    load_config,
    load_inventory,
)
from glasscut.domain.services import malformed_request_ids


def validate_command(
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Optimizer configuration file to check"),
    ] = None,
    inventory_file: Annotated[
        Path | None,
        typer.Option("--inventory", "-i", help="Inventory snapshot file to check"),
    ] = None,
) -> None:
    """Validate an optimizer configuration or an inventory file.

    Checks JSON syntax and the schema of each file given. Inventory files
    are also checked for cut requests the optimizer would drop.

    Exit codes:
        0 - All files are valid
        1 - A file has errors (cannot be used)

    Example:
        glasscut validate --inventory shop.json
    """
    if config_file is None and inventory_file is None:
        typer.echo("Error: pass --config and/or --inventory", err=True)
        raise typer.Exit(code=1)

    if config_file is not None:
        typer.echo(f"Validating {config_file}...")
        try:
            load_config(config_file)
        except ConfigError as e:
            display_load_error(e)
            raise typer.Exit(code=1)
        typer.echo("Configuration is valid.")

    if inventory_file is not None:
        typer.echo(f"Validating {inventory_file}...")
        try:
            inventory = load_inventory(inventory_file)
        except ConfigError as e:
            display_load_error(e)
            raise typer.Exit(code=1)

        dropped = malformed_request_ids(inventory_to_cut_requests(inventory))
        if dropped:
            typer.echo("Warnings:")
            for request_id in dropped:
                typer.echo(
                    f"  cut request {request_id}: non-positive size or quantity, "
                    "will be skipped"
                )
        typer.echo(
            f"Inventory is valid: {len(inventory.cut_requests)} cut requests, "
            f"{len(inventory.sheets)} sheet records, "
            f"{len(inventory.remnants)} remnants."
        )


def display_load_error(error: ConfigError) -> None:
    """Display a configuration loading error.

    Args:
        error: The ConfigError to display
    """
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            message = detail.get("message", "Unknown error")
            typer.echo(f"    Line {line}, Column {column}: {message}", err=True)
    elif error.error_type == "validation":
        for detail in error.details:
            path = detail.get("path") or "(root)"
            message = detail.get("message", "Unknown error")
            value = detail.get("value")
            typer.echo(f"  {path}: {message}", err=True)
            if value is not None and not isinstance(value, (dict, list)):
                typer.echo(f"    Value: {value!r}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)

    typer.echo("Validation failed.", err=True)
