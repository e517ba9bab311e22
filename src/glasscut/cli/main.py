"""Typer CLI for glass cutting optimization."""

import typer

from glasscut.cli.commands import history_command, optimize_command, validate_command

app = typer.Typer(
    name="glasscut",
    help="Plan glass cuts from sheet and remnant stock.",
    no_args_is_help=True,
)

app.command(name="optimize")(optimize_command)
app.command(name="validate")(validate_command)
app.command(name="history")(history_command)


if __name__ == "__main__":
    app()
