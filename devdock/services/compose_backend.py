"""Compose backend: runs ``docker compose`` (or a compatible tool) for a project."""
import os
import shlex
import subprocess
from typing import List, Optional, Sequence

from devdock.core.logger import get_logger
from devdock.core.project import ProjectContext

logger = get_logger(__name__)

# Exit statuses reported when the backend executable cannot be started
BACKEND_MISSING = 127
BACKEND_NOT_EXECUTABLE = 126


class ComposeBackend:
    """Issues compose operations against a project's manifest.

    Exit statuses from the backend are returned unchanged.

    Example:
        backend = ComposeBackend(["docker", "compose"])
        backend.pull(project)
        backend.up(project)
    """

    def __init__(self, compose_command: Sequence[str], mock: bool = False):
        """
        Args:
            compose_command: Command prefix, e.g. ``["docker", "compose"]``
            mock: If True, don't execute actual commands
        """
        self.compose_command = list(compose_command)
        self.mock = mock

    def build_command(self, project: ProjectContext, *args: str) -> List[str]:
        cmd = list(self.compose_command)
        if project.manifest is not None:
            cmd += ["-f", str(project.manifest)]
        cmd += ["--project-directory", str(project.root)]
        return cmd + list(args)

    def _run(self, project: ProjectContext, *args: str) -> int:
        cmd = self.build_command(project, *args)
        if self.mock:
            logger.info(f"MOCK: Would run {shlex.join(cmd)} in {project.root}")
            return 0

        logger.debug(f"Running {shlex.join(cmd)}")
        env = dict(os.environ)
        env.update(project.env)
        try:
            result = subprocess.run(cmd, cwd=project.root, env=env, check=False)
        except FileNotFoundError:
            logger.error(f"Backend command not found: {self.compose_command[0]}")
            return BACKEND_MISSING
        except OSError as e:
            logger.error(f"Could not start backend {self.compose_command[0]}: {e}")
            return BACKEND_NOT_EXECUTABLE
        return result.returncode

    def pull(self, project: ProjectContext) -> int:
        """Refresh the project's images."""
        return self._run(project, "pull")

    def up(self, project: ProjectContext, detach: bool = True) -> int:
        """Start the project's services."""
        args = ["up"]
        if detach:
            args.append("-d")
        return self._run(project, *args)

    def down(self, project: ProjectContext) -> int:
        """Stop and remove the project's services."""
        return self._run(project, "down")

    def exec(self, project: ProjectContext, service: str, command: Sequence[str]) -> int:
        """Run a command inside a running service container."""
        return self._run(project, "exec", service, *command)

    def logs(
        self,
        project: ProjectContext,
        service: Optional[str] = None,
        follow: bool = False,
    ) -> int:
        """Show service logs."""
        args = ["logs"]
        if follow:
            args.append("--follow")
        if service:
            args.append(service)
        return self._run(project, *args)
