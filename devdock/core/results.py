"""Error and result types shared by devdock operations.

``UserError`` aborts the requested operation. Maintenance actions never
raise; they report an ``ActionResult`` whose outcome tells whether the action
ran, was not due, was skipped, or failed and was ignored.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from devdock.core.drift import DriftResult


class UserError(Exception):
    """Invalid request from the user; aborts the operation with exit code 1."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint


class ActionOutcome(str, Enum):
    DONE = "done"
    NOT_DUE = "not-due"
    SKIPPED = "skipped"
    IGNORED_FAILURE = "ignored-failure"


@dataclass
class ActionResult:
    """Result of one maintenance action."""

    name: str
    outcome: ActionOutcome
    message: str = ""

    @property
    def ran(self) -> bool:
        return self.outcome in (ActionOutcome.DONE, ActionOutcome.IGNORED_FAILURE)

    @property
    def failed(self) -> bool:
        return self.outcome is ActionOutcome.IGNORED_FAILURE


@dataclass
class RefreshReport:
    """Everything a refresh cycle did before the primary operation."""

    images: ActionResult
    self_update: ActionResult
    drift: Optional[DriftResult] = None

    @property
    def failures(self) -> List[ActionResult]:
        return [action for action in (self.images, self.self_update) if action.failed]


@dataclass
class LocationResult:
    """Teardown status for one registered project.

    ``skipped`` marks a registry entry whose directory no longer exists; it
    is reported but never counts as a failure.
    """

    path: Path
    exit_code: int
    message: str = ""
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.skipped or self.exit_code == 0


@dataclass
class TeardownReport:
    """Per-location results of a registry-wide teardown."""

    locations: List[LocationResult] = field(default_factory=list)

    def add(self, result: LocationResult) -> None:
        self.locations.append(result)

    @property
    def failed(self) -> List[LocationResult]:
        return [loc for loc in self.locations if not loc.ok]

    @property
    def exit_code(self) -> int:
        """Status of the last failing location, or 0 when every location succeeded."""
        failed = self.failed
        return failed[-1].exit_code if failed else 0
