"""Compose manifest lookup and template stamp parsing."""
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Conventional compose file names, in lookup order
MANIFEST_NAMES = (
    "compose.yml",
    "compose.yaml",
    "docker-compose.yml",
    "docker-compose.yaml",
)

STAMP_SECTION = "x-devdock"
TEMPLATE_KEY = f"{STAMP_SECTION}.template"
VERSION_KEY = f"{STAMP_SECTION}.template-version"
DESCRIPTION_KEY = f"{STAMP_SECTION}.description"

_SCALARS = (str, int, float, bool)


class ManifestError(Exception):
    """Raised when a manifest cannot be read."""
    pass


def find_manifest(directory: Path) -> Optional[Path]:
    """Return the compose manifest at ``directory``, if any."""
    directory = Path(directory)
    for name in MANIFEST_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def read_manifest(path: Path) -> Dict[str, str]:
    """Read a manifest into a flat key/value mapping.

    Top-level scalars keep their key; scalars inside a top-level mapping are
    stored as ``parent.child``. Lists, nulls and deeper nesting are dropped.

    Raises:
        ManifestError: If the file cannot be read or is not a YAML mapping
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ManifestError(f"Cannot read {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ManifestError(f"{path} is not a key/value document")

    values: Dict[str, str] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for child, child_value in value.items():
                if isinstance(child_value, _SCALARS):
                    values[f"{key}.{child}"] = _scalar(child_value)
        elif isinstance(value, _SCALARS):
            values[str(key)] = _scalar(value)
    return values


class TemplateStamp(BaseModel):
    """Template identity recorded in a manifest's ``x-devdock`` block."""

    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    template: Optional[str] = None
    template_version: Optional[str] = Field(None, alias="template-version")
    description: Optional[str] = None

    @field_validator('template')
    @classmethod
    def validate_template(cls, v):
        """Template names double as directory names under templates/."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            return None
        if not re.match(r'^[A-Za-z0-9][A-Za-z0-9._-]*$', v):
            raise ValueError(
                f"Template name '{v}' is invalid. "
                "Use letters, numbers, dots, hyphens and underscores only."
            )
        return v

    @field_validator('template_version', 'description')
    @classmethod
    def strip_blank(cls, v):
        if v is None:
            return v
        v = v.strip()
        return v or None

    @classmethod
    def from_values(cls, values: Dict[str, str]) -> "TemplateStamp":
        return cls(
            template=values.get(TEMPLATE_KEY),
            template_version=values.get(VERSION_KEY),
            description=values.get(DESCRIPTION_KEY),
        )
