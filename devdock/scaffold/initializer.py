"""Project initialization from shipped templates."""
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from jinja2 import BaseLoader, Environment, TemplateError
from pydantic import ValidationError

from devdock.core.logger import get_logger
from devdock.core.manifest import (
    ManifestError,
    TemplateStamp,
    find_manifest,
    read_manifest,
)
from devdock.core.results import UserError

logger = get_logger(__name__)

RENDER_SUFFIX = ".j2"
IGNORED_NAMES = {"__pycache__", ".DS_Store"}


@dataclass
class TemplateInfo:
    """A template available to ``devdock init``."""

    name: str
    version: Optional[str] = None
    description: Optional[str] = None


class TemplateInitializer:
    """Copies a template into a project directory.

    Files ending in ``.j2`` are rendered with Jinja2 and written without the
    suffix; everything else is copied as-is.
    """

    def __init__(self, templates_dir: Path):
        self.templates_dir = Path(templates_dir)
        self.jinja_env = Environment(
            loader=BaseLoader(),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def list_templates(self) -> List[TemplateInfo]:
        """List templates that carry a compose manifest."""
        if not self.templates_dir.is_dir():
            return []

        templates = []
        for directory in sorted(self.templates_dir.iterdir()):
            if not directory.is_dir() or directory.name in IGNORED_NAMES:
                continue
            manifest = find_manifest(directory)
            if manifest is None:
                continue
            try:
                stamp = TemplateStamp.from_values(read_manifest(manifest))
            except (ManifestError, ValidationError) as e:
                logger.warning(f"Template '{directory.name}' is unreadable: {e}")
                stamp = TemplateStamp()
            templates.append(
                TemplateInfo(
                    name=directory.name,
                    version=stamp.template_version,
                    description=stamp.description,
                )
            )
        return templates

    def init_project(
        self,
        template: Optional[str],
        target: Path,
        force: bool = False,
        project_name: Optional[str] = None,
    ) -> List[Path]:
        """Initialize ``target`` from ``template``.

        Returns:
            Paths written, relative to ``target``

        Raises:
            UserError: Missing or unknown template, or an already initialized
                project without ``force``
        """
        available = [t.name for t in self.list_templates()]
        hint = f"Available templates: {', '.join(available) or 'none'}"

        if not template:
            raise UserError("Missing template type", hint=f"Usage: devdock init <type>. {hint}")
        if template not in available:
            raise UserError(f"Unknown template type '{template}'", hint=hint)

        target = Path(target).resolve()
        existing = find_manifest(target)
        if existing is not None and not force:
            raise UserError(
                f"{target} is already initialized ({existing.name})",
                hint="Re-run with --force to overwrite it from the template",
            )

        source = self.templates_dir / template
        stamp = TemplateStamp.from_values(read_manifest(find_manifest(source)))
        context = {
            "project_name": project_name or target.name,
            "template": template,
            "template_version": stamp.template_version or "",
        }

        written: List[Path] = []
        for path in sorted(source.rglob("*")):
            relative = path.relative_to(source)
            if path.is_dir() or IGNORED_NAMES.intersection(relative.parts):
                continue
            written.append(self._install_file(path, target / relative, context))

        logger.info(f"Initialized {target} from template '{template}'")
        return [p.relative_to(target) for p in written]

    def _install_file(self, source: Path, destination: Path, context: dict) -> Path:
        destination.parent.mkdir(parents=True, exist_ok=True)
        if source.suffix != RENDER_SUFFIX:
            shutil.copy2(source, destination)
            if destination.suffix == ".sh":
                destination.chmod(destination.stat().st_mode | 0o755)
            return destination

        destination = destination.with_name(destination.name[: -len(RENDER_SUFFIX)])
        try:
            rendered = self.jinja_env.from_string(source.read_text()).render(**context)
        except TemplateError as e:
            raise UserError(f"Template file {source.name} failed to render: {e}") from e
        destination.write_text(rendered)
        shutil.copymode(source, destination)
        return destination
