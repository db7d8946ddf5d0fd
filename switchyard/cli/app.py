"""Main Typer application — registers all CLI commands.

Entry point: ``switchyard`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer
from rich.console import Console

from switchyard import __version__
from switchyard.cli.commands.demo import demo_cmd

app = typer.Typer(
    name="switchyard",
    help="Switchyard: in-process message routing through a graph of nodes.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="demo", help="Run the sample graph on one message.")(demo_cmd)


@app.command(name="version", help="Show the installed Switchyard version.")
def version_cmd() -> None:
    """Print the package version."""
    Console().print(f"switchyard [bold]{__version__}[/bold]")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
