"""Shared test fixtures for devdock tests."""
import textwrap
import time
from pathlib import Path

import pytest

from devdock.core.config import DevdockConfig


class FakeClock:
    """Controllable epoch-seconds clock."""

    def __init__(self, now: float = None):
        self.now = now if now is not None else time.time()

    def __call__(self) -> float:
        return self.now

    def advance(self, hours: float = 0, days: float = 0) -> None:
        self.now += hours * 3600 + days * 86400


def write_manifest(directory: Path, template=None, version=None, name="compose.yml") -> Path:
    """Write a compose manifest with an optional x-devdock stamp."""
    directory.mkdir(parents=True, exist_ok=True)
    lines = []
    if template is not None or version is not None:
        lines.append("x-devdock:")
        if template is not None:
            lines.append(f"  template: {template}")
        if version is not None:
            lines.append(f'  template-version: "{version}"')
    lines.append(textwrap.dedent("""\
        services:
          app:
            image: alpine:3
        """))
    path = directory / name
    path.write_text("\n".join(lines))
    return path


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def install_root(tmp_path):
    """Installation root with 'web' (version 2) and 'worker' (unversioned) templates."""
    root = tmp_path / "install"
    write_manifest(root / "templates" / "web", template="web", version="2")
    write_manifest(root / "templates" / "worker", template="worker")
    (root / "templates" / "web" / "README.md.j2").write_text("# {{ project_name }} ({{ template_version }})\n")
    return root


@pytest.fixture
def config(tmp_path, install_root):
    """Mock-mode configuration rooted in tmp_path."""
    return DevdockConfig(
        cache_root=tmp_path / "cache",
        install_root=install_root,
        config_home=tmp_path / "config",
        mock=True,
    )


@pytest.fixture
def project_dir(tmp_path):
    """Project stamped with the current 'web' template."""
    root = tmp_path / "projects" / "shop"
    write_manifest(root, template="web", version="2")
    return root


@pytest.fixture
def cli_env(tmp_path, monkeypatch, install_root):
    """Point the CLI at tmp_path and enable mock mode."""
    monkeypatch.setenv("DEVDOCK_MOCK", "1")
    monkeypatch.setenv("DEVDOCK_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("DEVDOCK_INSTALL_ROOT", str(install_root))
    monkeypatch.setenv("DEVDOCK_CONFIG_HOME", str(tmp_path / "config"))
    return tmp_path
