"""Supported devdock operations and their handlers.

Every command the CLI exposes maps to one ``Operation`` member; names are
resolved through ``Operation.parse`` and unknown names are a ``UserError``.
Handlers return an ``OperationResult`` and never exit the process.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from devdock.core.config import DevdockConfig
from devdock.core.drift import DriftDetector, DriftResult
from devdock.core.logger import get_logger
from devdock.core.manifest import find_manifest
from devdock.core.project import ProjectContext, resolve_project
from devdock.core.registry import ProjectRegistry
from devdock.core.results import (
    LocationResult,
    RefreshReport,
    TeardownReport,
    UserError,
)
from devdock.core.scheduler import UpdateScheduler
from devdock.core.staleness import StalenessCache
from devdock.scaffold.initializer import TemplateInitializer
from devdock.services.compose_backend import ComposeBackend
from devdock.services.self_update import SelfUpdater

logger = get_logger(__name__)


class Operation(str, Enum):
    INIT = "init"
    UP = "up"
    DOWN = "down"
    RUN = "run"
    PULL = "pull"
    LOGS = "logs"
    CHECK = "check"
    UPDATE = "update"
    TEMPLATES = "templates"
    PROJECTS = "projects"

    @classmethod
    def parse(cls, name: str) -> "Operation":
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise UserError(
                f"Unknown operation '{name}'",
                hint=f"Available operations: {', '.join(op.value for op in cls)}",
            ) from None


@dataclass
class Services:
    """Components shared by the handlers of one invocation."""

    config: DevdockConfig
    cache: StalenessCache
    registry: ProjectRegistry
    drift: DriftDetector
    backend: ComposeBackend
    self_updater: SelfUpdater
    scheduler: UpdateScheduler
    initializer: TemplateInitializer

    @classmethod
    def build(cls, config: DevdockConfig) -> "Services":
        cache = StalenessCache(config.cache_root)
        drift = DriftDetector(config.templates_dir)
        backend = ComposeBackend(config.compose_command, mock=config.mock)
        self_updater = SelfUpdater(config.install_root, mock=config.mock)
        return cls(
            config=config,
            cache=cache,
            registry=ProjectRegistry(config.registry_file),
            drift=drift,
            backend=backend,
            self_updater=self_updater,
            scheduler=UpdateScheduler(config, cache, backend, self_updater, drift),
            initializer=TemplateInitializer(config.templates_dir),
        )


@dataclass
class KnownProject:
    path: Path
    has_manifest: bool


@dataclass
class OperationResult:
    """What an operation did; the CLI renders it and maps ``exit_code``."""

    operation: Operation
    exit_code: int = 0
    project: Optional[ProjectContext] = None
    refresh: Optional[RefreshReport] = None
    drift: Optional[DriftResult] = None
    teardown: Optional[TeardownReport] = None
    items: List[Any] = field(default_factory=list)


Handler = Callable[..., OperationResult]


def _require_manifest(project: ProjectContext) -> None:
    if not project.has_manifest:
        raise UserError(
            f"No compose manifest in {project.root}",
            hint="Run 'devdock init <type>' to create one",
        )


def handle_init(
    services: Services,
    cwd: Path,
    template: Optional[str] = None,
    force: bool = False,
    name: Optional[str] = None,
) -> OperationResult:
    written = services.initializer.init_project(template, cwd, force=force, project_name=name)
    project = resolve_project(cwd, services.config)
    return OperationResult(Operation.INIT, project=project, items=written)


def handle_up(services: Services, cwd: Path, detach: bool = True) -> OperationResult:
    project = resolve_project(cwd, services.config)
    _require_manifest(project)

    refresh = services.scheduler.refresh_project(project)
    status = services.backend.up(project, detach=detach)
    if status == 0:
        services.registry.remember(project.root)
    return OperationResult(Operation.UP, exit_code=status, project=project, refresh=refresh)


def handle_down(services: Services, cwd: Path, all_projects: bool = False) -> OperationResult:
    project = resolve_project(cwd, services.config)
    if project.has_manifest and not all_projects:
        status = services.backend.down(project)
        return OperationResult(Operation.DOWN, exit_code=status, project=project)

    report = teardown_known_projects(services)
    return OperationResult(Operation.DOWN, exit_code=report.exit_code, teardown=report)


def teardown_known_projects(services: Services) -> TeardownReport:
    """Tear down every registered project, continuing past failures."""
    report = TeardownReport()
    for path in services.registry.for_each_known():
        if not path.exists():
            logger.info(f"Skipping {path}: directory no longer exists")
            report.add(LocationResult(path, 0, "directory no longer exists", skipped=True))
            continue

        try:
            project = resolve_project(path, services.config)
        except (OSError, ValueError) as e:
            logger.warning(f"Skipping {path}: {e}")
            report.add(LocationResult(path, 1, str(e)))
            continue

        if not project.has_manifest:
            report.add(LocationResult(path, 1, "no compose manifest"))
            continue

        logger.info(f"Stopping {project.name} ({path})")
        status = services.backend.down(project)
        message = "" if status == 0 else f"backend exited with status {status}"
        report.add(LocationResult(path, status, message))
    return report


def handle_run(
    services: Services,
    cwd: Path,
    service: Optional[str] = None,
    command: Sequence[str] = (),
) -> OperationResult:
    if not service:
        raise UserError("Missing service name", hint="Usage: devdock run <service> <command>...")
    if not command:
        raise UserError("Missing command to run", hint="Usage: devdock run <service> <command>...")
    project = resolve_project(cwd, services.config)
    _require_manifest(project)

    refresh = services.scheduler.refresh_project(project)
    status = services.backend.exec(project, service, list(command))
    return OperationResult(Operation.RUN, exit_code=status, project=project, refresh=refresh)


def handle_pull(services: Services, cwd: Path) -> OperationResult:
    project = resolve_project(cwd, services.config)
    _require_manifest(project)
    status = services.backend.pull(project)
    if status == 0:
        try:
            services.cache.mark_checked(project.cache_key)
        except OSError as e:
            logger.debug(f"Could not record image refresh: {e}")
    return OperationResult(Operation.PULL, exit_code=status, project=project)


def handle_logs(
    services: Services,
    cwd: Path,
    service: Optional[str] = None,
    follow: bool = False,
) -> OperationResult:
    project = resolve_project(cwd, services.config)
    _require_manifest(project)
    status = services.backend.logs(project, service=service, follow=follow)
    return OperationResult(Operation.LOGS, exit_code=status, project=project)


def handle_check(services: Services, cwd: Path) -> OperationResult:
    project = resolve_project(cwd, services.config)
    drift = services.drift.check_drift(project.root)
    return OperationResult(Operation.CHECK, project=project, drift=drift)


def handle_update(services: Services, cwd: Path) -> OperationResult:
    project = resolve_project(cwd, services.config)
    refresh = services.scheduler.refresh_project(project, force=True)
    return OperationResult(Operation.UPDATE, project=project, refresh=refresh)


def handle_templates(services: Services, cwd: Path) -> OperationResult:
    return OperationResult(Operation.TEMPLATES, items=services.initializer.list_templates())


def handle_projects(services: Services, cwd: Path) -> OperationResult:
    known = [
        KnownProject(path=path, has_manifest=find_manifest(path) is not None)
        for path in services.registry.for_each_known()
    ]
    return OperationResult(Operation.PROJECTS, items=known)


HANDLERS: Dict[Operation, Handler] = {
    Operation.INIT: handle_init,
    Operation.UP: handle_up,
    Operation.DOWN: handle_down,
    Operation.RUN: handle_run,
    Operation.PULL: handle_pull,
    Operation.LOGS: handle_logs,
    Operation.CHECK: handle_check,
    Operation.UPDATE: handle_update,
    Operation.TEMPLATES: handle_templates,
    Operation.PROJECTS: handle_projects,
}


def dispatch(
    operation: Union[Operation, str],
    services: Services,
    cwd: Path,
    **arguments: Any,
) -> OperationResult:
    """Run ``operation`` for the project at ``cwd``.

    Raises:
        UserError: Unknown operation or invalid request
    """
    if not isinstance(operation, Operation):
        operation = Operation.parse(operation)
    return HANDLERS[operation](services, cwd, **arguments)
