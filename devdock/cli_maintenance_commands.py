"""Maintenance commands - check, update, templates, projects."""
import typer
from rich.console import Console
from rich.table import Table

from devdock.cli_support import (
    print_info,
    render_drift,
    render_refresh_report,
    run_operation,
)
from devdock.core.operations import Operation

console: Console = Console()


def check():
    """Compare the project's template version with the installed template."""
    result = run_operation(Operation.CHECK, console)
    render_drift(console, result.drift)


def update():
    """Refresh images and update devdock now, ignoring the refresh interval."""
    result = run_operation(Operation.UPDATE, console)
    render_refresh_report(console, result.refresh)


def templates():
    """List templates available to 'devdock init'."""
    result = run_operation(Operation.TEMPLATES, console)
    if not result.items:
        print_info(console, "No templates installed")
        return

    table = Table(title="Templates")
    table.add_column("Name", style="bold")
    table.add_column("Version")
    table.add_column("Description")
    for info in result.items:
        table.add_row(info.name, info.version or "-", info.description or "")
    console.print(table)


def projects():
    """List every project devdock has started."""
    result = run_operation(Operation.PROJECTS, console)
    if not result.items:
        print_info(console, "No known projects")
        return

    for known in result.items:
        if known.has_manifest:
            console.print(f"  {known.path}")
        else:
            console.print(f"  {known.path} [yellow](no compose manifest)[/yellow]")


def register_maintenance_commands(app: typer.Typer, shared_console: Console) -> None:
    """Register maintenance commands with the main Typer app."""
    global console
    console = shared_console

    app.command()(check)
    app.command()(update)
    app.command()(templates)
    app.command()(projects)
