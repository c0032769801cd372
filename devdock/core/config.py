"""devdock runtime configuration and settings."""
import os
import shlex
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import List, Mapping, Optional

from platformdirs import user_cache_dir, user_config_dir


def default_install_root() -> Path:
    """Directory holding the shipped ``templates/`` tree (the devdock package)."""
    return Path(__file__).parent.parent


def default_cache_root() -> Path:
    return Path(user_cache_dir("devdock"))


def default_config_home() -> Path:
    return Path(user_config_dir("devdock"))


@dataclass
class DevdockConfig:
    """Runtime configuration for devdock operations.

    Built once at the command-line boundary and passed explicitly to every
    component that needs paths, intervals or backend settings.

    Attributes:
        cache_root: Directory with staleness sentinels and the project registry
        install_root: Tool installation root; templates live in ``<install_root>/templates``
        config_home: Directory holding the user-wide ``devdock.env`` layer
        refresh_interval_hours: Hours between automatic refreshes (default: 16)
        cache_retention_days: Cache entries older than this are pruned (default: 30)
        compose_command: Backend command prefix (default: ``docker compose``)
        tool_key: Staleness key used for the self-update check
        registry_name: File name of the project registry inside ``cache_root``
        mock: Log backend and self-update actions instead of running them
    """

    cache_root: Path = field(default_factory=default_cache_root)
    install_root: Path = field(default_factory=default_install_root)
    config_home: Path = field(default_factory=default_config_home)

    refresh_interval_hours: float = 16
    cache_retention_days: float = 30

    compose_command: List[str] = field(default_factory=lambda: ["docker", "compose"])

    tool_key: str = "self-update"
    registry_name: str = "projects"
    mock: bool = False

    @property
    def refresh_interval(self) -> timedelta:
        return timedelta(hours=self.refresh_interval_hours)

    @property
    def cache_retention(self) -> timedelta:
        return timedelta(days=self.cache_retention_days)

    @property
    def templates_dir(self) -> Path:
        return self.install_root / "templates"

    @property
    def registry_file(self) -> Path:
        return self.cache_root / self.registry_name

    @property
    def user_env_file(self) -> Path:
        return self.config_home / "devdock.env"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DevdockConfig":
        """Create config from environment variables.

        Environment variables:
            DEVDOCK_CACHE_DIR: Cache root directory
            DEVDOCK_INSTALL_ROOT: Installation root containing ``templates/``
            DEVDOCK_CONFIG_HOME: Directory holding ``devdock.env``
            DEVDOCK_REFRESH_HOURS: Refresh interval in hours
            DEVDOCK_RETENTION_DAYS: Cache retention in days
            DEVDOCK_COMPOSE_COMMAND: Backend command, e.g. ``podman-compose``
            DEVDOCK_MOCK: Set to ``1`` to log backend actions instead of running them

        Returns:
            DevdockConfig instance with values from environment or defaults
        """
        env = os.environ if environ is None else environ
        config = cls(
            refresh_interval_hours=float(
                env.get("DEVDOCK_REFRESH_HOURS", cls.refresh_interval_hours)
            ),
            cache_retention_days=float(
                env.get("DEVDOCK_RETENTION_DAYS", cls.cache_retention_days)
            ),
            mock=env.get("DEVDOCK_MOCK") == "1",
        )
        if env.get("DEVDOCK_CACHE_DIR"):
            config.cache_root = Path(env["DEVDOCK_CACHE_DIR"]).expanduser()
        if env.get("DEVDOCK_INSTALL_ROOT"):
            config.install_root = Path(env["DEVDOCK_INSTALL_ROOT"]).expanduser()
        if env.get("DEVDOCK_CONFIG_HOME"):
            config.config_home = Path(env["DEVDOCK_CONFIG_HOME"]).expanduser()
        if env.get("DEVDOCK_COMPOSE_COMMAND"):
            config.compose_command = shlex.split(env["DEVDOCK_COMPOSE_COMMAND"])
        return config
