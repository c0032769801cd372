"""Template drift detection: project stamp vs. canonical template."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from devdock.core.logger import get_logger
from devdock.core.manifest import (
    ManifestError,
    TemplateStamp,
    find_manifest,
    read_manifest,
)

logger = get_logger(__name__)


class DriftStatus(str, Enum):
    """Verdicts produced by the drift check."""

    UP_TO_DATE = "up-to-date"
    OUTDATED = "outdated"
    UNKNOWN = "unknown"


@dataclass
class DriftResult:
    """Outcome of a single drift check."""

    status: DriftStatus
    template_type: Optional[str] = None
    local_version: Optional[str] = None
    canonical_version: Optional[str] = None
    reason: str = ""

    @property
    def reinit_command(self) -> Optional[str]:
        if self.status is not DriftStatus.OUTDATED or not self.template_type:
            return None
        return f"devdock init {self.template_type} --force"


class DriftDetector:
    """Compares a project's template stamp with the shipped template."""

    def __init__(self, templates_dir: Path):
        self.templates_dir = Path(templates_dir)

    def canonical_manifest(self, template_type: str) -> Optional[Path]:
        return find_manifest(self.templates_dir / template_type)

    def check_drift(self, path: Path) -> DriftResult:
        """Check a project directory (or manifest file) for template drift."""
        path = Path(path)
        manifest = path if path.is_file() else find_manifest(path)
        if manifest is None:
            return DriftResult(DriftStatus.UNKNOWN, reason="no compose manifest found")

        try:
            local = TemplateStamp.from_values(read_manifest(manifest))
        except (ManifestError, ValidationError) as e:
            logger.warning(f"Skipping drift check for {manifest}: {e}")
            return DriftResult(DriftStatus.UNKNOWN, reason=str(e))

        if not local.template:
            return DriftResult(
                DriftStatus.UNKNOWN,
                local_version=local.template_version,
                reason=(
                    "project predates template tagging; re-run 'devdock init <type> --force' "
                    "to adopt a template"
                ),
            )

        canonical = self._canonical_stamp(local.template)
        canonical_version = canonical.template_version if canonical else None

        # A missing version on either side counts as a difference.
        if local.template_version and local.template_version == canonical_version:
            return DriftResult(
                DriftStatus.UP_TO_DATE,
                template_type=local.template,
                local_version=local.template_version,
                canonical_version=canonical_version,
            )

        if canonical is None:
            reason = f"template '{local.template}' is not shipped with this devdock"
        elif local.template_version is None:
            reason = "project manifest has no template version"
        elif canonical_version is None:
            reason = f"template '{local.template}' has no version tag"
        else:
            reason = f"template '{local.template}' moved from {local.template_version} to {canonical_version}"

        return DriftResult(
            DriftStatus.OUTDATED,
            template_type=local.template,
            local_version=local.template_version,
            canonical_version=canonical_version,
            reason=reason,
        )

    def _canonical_stamp(self, template_type: str) -> Optional[TemplateStamp]:
        manifest = self.canonical_manifest(template_type)
        if manifest is None:
            return None
        try:
            return TemplateStamp.from_values(read_manifest(manifest))
        except (ManifestError, ValidationError) as e:
            logger.warning(f"Canonical template '{template_type}' is unreadable: {e}")
            return TemplateStamp()
