"""Registry of every project devdock has brought up.

The registry is a flat text file with one absolute path per line. It lets
``devdock down`` fan out across all known projects when run from a directory
that has no compose manifest of its own.
"""
from pathlib import Path
from typing import Iterator, List, Union

from devdock.core.logger import get_logger

logger = get_logger(__name__)


class ProjectRegistry:
    """Append-only, deduplicated list of project locations."""

    def __init__(self, registry_file: Path):
        self.registry_file = Path(registry_file)

    def _read_entries(self) -> List[str]:
        if not self.registry_file.exists():
            return []
        return [line.strip() for line in self.registry_file.read_text().splitlines()]

    def remember(self, path: Union[str, Path]) -> bool:
        """Add ``path`` to the registry unless it is already known.

        A known path only refreshes the file's mtime, so a registry in
        active use survives the cache retention sweep.

        Returns:
            True if the path was appended
        """
        entry = str(Path(path).expanduser().resolve())
        if entry in self._read_entries():
            self.registry_file.touch()
            return False

        self.registry_file.parent.mkdir(parents=True, exist_ok=True)
        prefix = ""
        if self.registry_file.exists():
            content = self.registry_file.read_text()
            if content and not content.endswith("\n"):
                prefix = "\n"

        with open(self.registry_file, "a") as f:
            f.write(f"{prefix}{entry}\n")
        logger.debug(f"Registered project {entry}")
        return True

    def for_each_known(self) -> Iterator[Path]:
        """Yield known project paths, read from disk at iteration time.

        A missing registry yields nothing.
        """
        try:
            f = open(self.registry_file)
        except FileNotFoundError:
            return
        with f:
            for line in f:
                entry = line.strip()
                if entry:
                    yield Path(entry)

    def __iter__(self) -> Iterator[Path]:
        return self.for_each_known()
