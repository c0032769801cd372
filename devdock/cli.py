#!/usr/bin/env python3
"""devdock CLI - Versioned, containerized development environments."""
from typing import Optional

import typer
from rich.console import Console

from devdock.cli_maintenance_commands import register_maintenance_commands
from devdock.cli_project_commands import register_project_commands
from devdock.cli_support import setup_file_logging

app = typer.Typer(
    name="devdock",
    help="""devdock - Versioned, containerized development environments

One template. One compose file. Always fresh.

Quick start:
  devdock templates        # Browse templates
  devdock init web         # Start a project from a template
  devdock up               # Start it (images refresh every 16h)
  devdock down             # Stop it (outside a project: stop all)

More commands: devdock --help
""",
    add_completion=False,
)

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Write logs to this file"),
):
    if verbose or log_file:
        setup_file_logging(log_file=log_file, verbose=verbose)


register_project_commands(app, console)
register_maintenance_commands(app, console)

if __name__ == "__main__":
    app()
