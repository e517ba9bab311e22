"""History command: list the optimizations committed to an inventory."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer

from glasscut.application import HistoryOutput, ServiceFactory
from glasscut.domain import InventoryStoreError, OptimizationLog
from glasscut.infrastructure import JsonInventoryStore


class HistoryFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


def _log_line(output: HistoryOutput, log: OptimizationLog) -> str:
    name = output.material_name(log.material_type_id)
    label = name if name == log.material_type_id else f"{name} ({log.material_type_id})"
    return f"{log.created_at}  {label}"


def _figures_line(log: OptimizationLog) -> str:
    meta = log.metadata
    return (
        f"  pieces: {meta.get('total_pieces', '-')}"
        f"  sheets: {meta.get('sheets_used', '-')}"
        f"  remnants: {meta.get('remnants_used', '-')}"
        f"  cuts: {meta.get('total_cuts', '-')}"
        f"  efficiency: {meta.get('efficiency', '-')}%"
        f"  saved remnants: {meta.get('saved_remnants', '-')}"
    )


def format_history(output: HistoryOutput, show_report: bool = False) -> str:
    """Format optimization logs as text, newest first."""
    if not output.logs:
        return "No optimizations recorded."

    lines = [f"Optimization history ({len(output.logs)} entries)", ""]
    for log in output.logs:
        lines.append(_log_line(output, log))
        lines.append(_figures_line(log))
        if show_report:
            if log.report:
                lines.extend(f"    {line}" for line in log.report.splitlines())
            else:
                lines.append("    (no report stored)")
        lines.append("")
    return "\n".join(lines).rstrip()


def history_to_dicts(output: HistoryOutput) -> list[dict[str, Any]]:
    return [
        {
            "material_type_id": log.material_type_id,
            "material_name": output.material_name(log.material_type_id),
            "created_at": log.created_at,
            "metadata": dict(log.metadata),
            "report": log.report,
        }
        for log in output.logs
    ]


def history_command(
    inventory_file: Annotated[
        Path,
        typer.Option("--inventory", "-i", help="Inventory snapshot JSON file"),
    ],
    materials: Annotated[
        list[str] | None,
        typer.Option("--material", "-m", help="Material type id to list (repeatable)"),
    ] = None,
    search: Annotated[
        str | None,
        typer.Option(
            "--search", "-s", help="Filter by material code or number of cuts"
        ),
    ] = None,
    show_report: Annotated[
        bool,
        typer.Option("--show-report", help="Print the cut plan stored with each log"),
    ] = False,
    output_format: Annotated[
        HistoryFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = HistoryFormat.TEXT,
) -> None:
    """List the optimizations committed to an inventory file.

    Example:
        glasscut history -i shop.json --search FLT --show-report
    """
    store = JsonInventoryStore(inventory_file)
    try:
        output = (
            ServiceFactory()
            .create_history_command(store)
            .execute(material_type_ids=materials or None, search=search)
        )
    except InventoryStoreError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if output_format == HistoryFormat.JSON:
        typer.echo(json.dumps(history_to_dicts(output), indent=2))
    else:
        typer.echo(format_history(output, show_report=show_report))
