"""Self-update for git-based devdock installations."""
import subprocess
from pathlib import Path

from devdock.core.logger import get_logger

logger = get_logger(__name__)


class SelfUpdater:
    """Pulls the latest devdock sources and restores script permissions."""

    def __init__(self, install_root: Path, mock: bool = False):
        self.install_root = Path(install_root)
        self.mock = mock

    def update(self) -> bool:
        """Fast-forward the installation checkout.

        Returns:
            True if the checkout was updated (or already current)
        """
        if self.mock:
            logger.info(f"MOCK: Would update devdock installation at {self.install_root}")
            return True

        cmd = ['git', '-C', str(self.install_root), 'pull', '--ff-only', '--quiet']
        try:
            subprocess.run(cmd, capture_output=True, text=True, check=True)
        except FileNotFoundError:
            logger.error("git is not installed; cannot self-update")
            return False
        except subprocess.CalledProcessError as e:
            logger.error(f"Self-update failed in {self.install_root}: {e}")
            if e.stderr:
                logger.error(f"Error output: {e.stderr.strip()}")
            return False

        restored = self.restore_permissions()
        logger.debug(f"Self-update complete, {restored} scripts marked executable")
        return True

    def restore_permissions(self) -> int:
        """Mark every shell script under ``templates/`` executable."""
        count = 0
        templates = self.install_root / "templates"
        if not templates.is_dir():
            return count
        for script in templates.rglob("*.sh"):
            try:
                script.chmod(script.stat().st_mode | 0o755)
                count += 1
            except OSError as e:
                logger.warning(f"Could not chmod {script}: {e}")
        return count
