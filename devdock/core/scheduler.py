"""Staleness-gated maintenance run before ``up`` and ``run``.

Two independent refresh actions (image pull, self-update) run at most once
per interval. Their failures are logged and never block the operation the
user asked for. Every cycle ends with a template drift check.
"""
from datetime import timedelta
from typing import Optional

from devdock.core.config import DevdockConfig
from devdock.core.drift import DriftDetector
from devdock.core.logger import get_logger
from devdock.core.project import ProjectContext
from devdock.core.results import ActionOutcome, ActionResult, RefreshReport
from devdock.core.staleness import StalenessCache
from devdock.services.compose_backend import ComposeBackend
from devdock.services.self_update import SelfUpdater

logger = get_logger(__name__)


class UpdateScheduler:
    """Runs periodic refresh actions gated by the staleness cache."""

    def __init__(
        self,
        config: DevdockConfig,
        cache: StalenessCache,
        backend: ComposeBackend,
        self_updater: SelfUpdater,
        drift_detector: DriftDetector,
    ):
        self.config = config
        self.cache = cache
        self.backend = backend
        self.self_updater = self_updater
        self.drift_detector = drift_detector

    def maybe_refresh(
        self,
        project_key: str,
        tool_key: str,
        interval_hours: Optional[float] = None,
        project: Optional[ProjectContext] = None,
        force: bool = False,
    ) -> RefreshReport:
        """Run whichever refresh actions are due, then check template drift.

        Args:
            project_key: Staleness key for the project's image refresh
            tool_key: Staleness key for the self-update
            interval_hours: Override for the configured refresh interval
            project: Project whose images are refreshed and drift-checked
            force: Run both actions regardless of staleness
        """
        if interval_hours is None:
            interval = self.config.refresh_interval
        else:
            interval = timedelta(hours=interval_hours)

        try:
            self.cache.prune(self.config.cache_retention)
        except OSError as e:
            logger.warning(f"Could not prune cache at {self.cache.cache_root}: {e}")

        images = self._refresh_images(project_key, interval, project, force)
        self_update = self._self_update(tool_key, interval, force)

        drift = None
        if project is not None:
            drift = self.drift_detector.check_drift(project.root)

        return RefreshReport(images=images, self_update=self_update, drift=drift)

    def refresh_project(self, project: ProjectContext, force: bool = False) -> RefreshReport:
        """Refresh cycle for ``project`` using the configured keys and interval."""
        return self.maybe_refresh(
            project.cache_key,
            self.config.tool_key,
            project=project,
            force=force,
        )

    def _refresh_images(
        self,
        key: str,
        interval: timedelta,
        project: Optional[ProjectContext],
        force: bool,
    ) -> ActionResult:
        name = "image refresh"
        if not force and not self.cache.is_stale(key, interval):
            return ActionResult(name, ActionOutcome.NOT_DUE)
        if project is None or not project.has_manifest:
            return ActionResult(name, ActionOutcome.SKIPPED, "no compose manifest")

        self._mark(key)
        logger.info(f"Refreshing images for {project.name}...")
        try:
            status = self.backend.pull(project)
        except OSError as e:
            status = None
            message = str(e)
        else:
            message = f"backend exited with status {status}"

        if status == 0:
            return ActionResult(name, ActionOutcome.DONE)
        logger.warning(f"Image refresh failed ({message}); continuing with existing images")
        return ActionResult(name, ActionOutcome.IGNORED_FAILURE, message)

    def _self_update(self, key: str, interval: timedelta, force: bool) -> ActionResult:
        name = "self-update"
        if not force and not self.cache.is_stale(key, interval):
            return ActionResult(name, ActionOutcome.NOT_DUE)

        self._mark(key)
        logger.info("Checking for devdock updates...")
        try:
            updated = self.self_updater.update()
        except OSError as e:
            logger.warning(f"Self-update failed ({e}); continuing")
            return ActionResult(name, ActionOutcome.IGNORED_FAILURE, str(e))

        if updated:
            return ActionResult(name, ActionOutcome.DONE)
        logger.warning("Self-update failed; continuing with the installed version")
        return ActionResult(name, ActionOutcome.IGNORED_FAILURE, "update command failed")

    def _mark(self, key: str) -> None:
        try:
            self.cache.mark_checked(key)
        except OSError as e:
            logger.warning(f"Could not record check for {key}: {e}")
