"""Project context resolution: paths, identifiers and layered env."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional

from devdock.core.config import DevdockConfig
from devdock.core.logger import get_logger
from devdock.core.manifest import find_manifest
from devdock.core.staleness import project_cache_key

logger = get_logger(__name__)

# Project-level env layers, lowest precedence first
PROJECT_ENV_FILES = (".env", ".env.local")


def parse_env_file(path: Path) -> Dict[str, str]:
    """Parse ``KEY=VALUE`` lines.

    Blank lines and ``#`` comments are ignored, an ``export`` prefix is
    allowed, and matching surrounding quotes are stripped from values.
    """
    values: Dict[str, str] = {}
    for lineno, raw in enumerate(Path(path).read_text(encoding="utf-8").splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if "=" not in line:
            logger.warning(f"{path}:{lineno}: ignoring line without '='")
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        if key:
            values[key] = value
    return values


def load_env_layers(paths: Iterable[Path]) -> Dict[str, str]:
    """Merge env files in order; later files override earlier ones."""
    merged: Dict[str, str] = {}
    for path in paths:
        if Path(path).is_file():
            merged.update(parse_env_file(path))
    return merged


@dataclass
class ProjectContext:
    """Resolved view of one project directory."""

    root: Path
    manifest: Optional[Path] = None
    env: Dict[str, str] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.root.name

    @property
    def cache_key(self) -> str:
        return project_cache_key(self.root)

    @property
    def has_manifest(self) -> bool:
        return self.manifest is not None


def resolve_project(path: Path, config: DevdockConfig) -> ProjectContext:
    """Build the context for ``path`` with its own layered env."""
    root = Path(path).expanduser().resolve()
    layers = [config.user_env_file] + [root / name for name in PROJECT_ENV_FILES]
    return ProjectContext(
        root=root,
        manifest=find_manifest(root),
        env=load_env_layers(layers),
    )
