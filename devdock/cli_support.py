"""Shared utilities for devdock CLI modules."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

import typer
from rich.console import Console

from devdock.core.config import DevdockConfig
from devdock.core.drift import DriftResult, DriftStatus
from devdock.core.operations import Operation, OperationResult, Services, dispatch
from devdock.core.results import ActionOutcome, RefreshReport, TeardownReport, UserError


def load_config() -> DevdockConfig:
    """Build the runtime configuration from the process environment."""
    return DevdockConfig.from_env()


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Set up file logging for CLI commands.

    Args:
        log_file: Path to log file (optional)
        verbose: Enable verbose logging
    """
    from devdock.core.logger import set_console_level, setup_file_logging as _setup_file_logging
    _setup_file_logging(log_file=log_file, verbose=verbose)
    set_console_level(verbose)


def run_operation(
    operation: Union[Operation, str],
    console: Console,
    cwd: Optional[Path] = None,
    **arguments: Any,
) -> OperationResult:
    """Dispatch an operation, turning a UserError into exit code 1."""
    services = Services.build(load_config())
    try:
        return dispatch(operation, services, cwd or Path.cwd(), **arguments)
    except UserError as e:
        handle_user_error(e, console)


def handle_user_error(e: UserError, console: Console) -> None:
    """Print a UserError with its hint and exit 1."""
    console.print(f"[red]Error:[/red] {e.message}")
    if e.hint:
        console.print(f"[dim]{e.hint}[/dim]")
    raise typer.Exit(1)


def finish(result: OperationResult) -> None:
    """Exit with the operation's status when it is nonzero."""
    if result.exit_code != 0:
        raise typer.Exit(result.exit_code)


def render_drift(console: Console, drift: Optional[DriftResult]) -> None:
    """Print the template drift verdict."""
    if drift is None:
        return
    if drift.status is DriftStatus.UP_TO_DATE:
        print_success(
            console,
            f"Template '{drift.template_type}' is up to date (version {drift.local_version})",
        )
    elif drift.status is DriftStatus.OUTDATED:
        print_warning(console, f"Template is outdated: {drift.reason}")
        console.print(f"  Update with: [cyan]{drift.reinit_command}[/cyan]")
    else:
        print_info(console, f"Template status unknown: {drift.reason}")


def render_refresh_report(console: Console, report: Optional[RefreshReport]) -> None:
    """Print what the refresh cycle did, then the drift verdict."""
    if report is None:
        return
    for action in (report.images, report.self_update):
        if action.outcome is ActionOutcome.DONE:
            print_success(console, f"{action.name.capitalize()} complete")
        elif action.outcome is ActionOutcome.IGNORED_FAILURE:
            print_warning(console, f"{action.name.capitalize()} failed ({action.message}); continuing")
    render_drift(console, report.drift)


def render_teardown(console: Console, report: Optional[TeardownReport]) -> None:
    """Print per-location teardown results."""
    if report is None:
        return
    if not report.locations:
        print_info(console, "No known projects to stop")
        return
    for location in report.locations:
        if location.skipped:
            print_info(console, f"Skipped {location.path}: {location.message}")
        elif location.ok:
            print_success(console, f"Stopped {location.path}")
        else:
            print_error(console, f"{location.path}: {location.message}")
    if report.failed:
        print_warning(
            console,
            f"{len(report.failed)} of {len(report.locations)} projects failed to stop",
        )


def print_success(console: Console, message: str, prefix: str = "✓") -> None:
    """Print success message with consistent formatting."""
    console.print(f"[green]{prefix}[/green] {message}")


def print_error(console: Console, message: str, prefix: str = "✗") -> None:
    """Print error message with consistent formatting."""
    console.print(f"[red]{prefix}[/red] {message}")


def print_warning(console: Console, message: str, prefix: str = "⚠") -> None:
    """Print warning message with consistent formatting."""
    console.print(f"[yellow]{prefix}[/yellow] {message}")


def print_info(console: Console, message: str, prefix: str = "ℹ") -> None:
    """Print info message with consistent formatting."""
    console.print(f"[cyan]{prefix}[/cyan] {message}")
