"""Project lifecycle commands - init, up, down, run, pull, logs."""
from typing import List, Optional

import typer
from rich.console import Console

from devdock.cli_support import (
    finish,
    print_success,
    render_refresh_report,
    render_teardown,
    run_operation,
)
from devdock.core.operations import Operation

# Module-level console (replaced by the register function)
console: Console = Console()


def init(
    template: Optional[str] = typer.Argument(None, help="Template type (see 'devdock templates')"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing compose manifest"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Project name (defaults to the directory name)"),
):
    """Initialize the current directory from a template.

    Examples:
        devdock init web             # Node.js + Postgres
        devdock init python --force  # Re-apply the latest python template
    """
    result = run_operation(Operation.INIT, console, template=template, force=force, name=name)
    for path in result.items:
        console.print(f"  [dim]{path}[/dim]")
    print_success(console, f"Initialized {result.project.name} from '{template}'")
    console.print("\nNext: [cyan]devdock up[/cyan]")


def up(
    detach: bool = typer.Option(True, "--detach/--no-detach", help="Run services in the background"),
):
    """Start the project's environment (refreshing images when due)."""
    result = run_operation(Operation.UP, console, detach=detach)
    render_refresh_report(console, result.refresh)
    if result.exit_code == 0:
        print_success(console, f"{result.project.name} is up")
    finish(result)


def down(
    all_projects: bool = typer.Option(
        False, "--all", "-a", help="Stop every known project, even inside a project"
    ),
):
    """Stop the project's environment.

    Outside a project directory every previously started project is stopped.
    """
    result = run_operation(Operation.DOWN, console, all_projects=all_projects)
    if result.teardown is not None:
        render_teardown(console, result.teardown)
    elif result.exit_code == 0:
        print_success(console, f"{result.project.name} is down")
    finish(result)


def run(
    service: Optional[str] = typer.Argument(None, help="Service to run the command in"),
    command: Optional[List[str]] = typer.Argument(None, help="Command to run", metavar="COMMAND..."),
):
    """Run a command inside a service container.

    Examples:
        devdock run app npm test
        devdock run app -- python -m pytest -x
    """
    result = run_operation(Operation.RUN, console, service=service, command=command or [])
    render_refresh_report(console, result.refresh)
    finish(result)


def pull():
    """Pull the latest images for the project now."""
    result = run_operation(Operation.PULL, console)
    if result.exit_code == 0:
        print_success(console, "Images refreshed")
    finish(result)


def logs(
    service: Optional[str] = typer.Argument(None, help="Only show logs for this service"),
    follow: bool = typer.Option(False, "--follow", "-f", help="Follow log output"),
):
    """Show service logs."""
    result = run_operation(Operation.LOGS, console, service=service, follow=follow)
    finish(result)


def register_project_commands(app: typer.Typer, shared_console: Console) -> None:
    """Register project lifecycle commands with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console
    console = shared_console

    app.command()(init)
    app.command()(up)
    app.command()(down)
    app.command(context_settings={"allow_interspersed_args": False})(run)
    app.command()(pull)
    app.command()(logs)

