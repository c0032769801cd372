"""Unified logging for devdock with console and file output."""
import logging
from pathlib import Path
from typing import Optional

from platformdirs import user_log_dir
from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)

LOG_FILE = Path(user_log_dir("devdock")) / "devdock.log"
FALLBACK_LOG_FILE = Path("/tmp/devdock.log")
FILE_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"

_file_handler: Optional[logging.FileHandler] = None


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> Path:
    """Attach a file handler to the ``devdock`` logger tree.

    Only the first call installs a handler; later calls return its path.

    Args:
        log_file: Path to log file (defaults to the per-user log directory)
        verbose: Log at DEBUG instead of INFO

    Returns:
        The file being written, ``/tmp/devdock.log`` when the requested
        directory cannot be created
    """
    global _file_handler

    if _file_handler is not None:
        return Path(_file_handler.baseFilename)

    target = Path(log_file) if log_file else LOG_FILE
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        target = FALLBACK_LOG_FILE

    level = logging.DEBUG if verbose else logging.INFO
    handler = logging.FileHandler(target)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    package_logger = logging.getLogger("devdock")
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    _file_handler = handler

    package_logger.debug(f"File logging to {target}")
    return target


def set_console_level(verbose: bool = False) -> None:
    """Switch every devdock console handler between INFO and DEBUG."""
    level = logging.DEBUG if verbose else logging.INFO
    for name, logger in logging.Logger.manager.loggerDict.items():
        if not name.startswith("devdock") or not isinstance(logger, logging.Logger):
            continue
        if any(isinstance(h, RichHandler) for h in logger.handlers):
            logger.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance with console output.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger with Rich console handler

    Note:
        File logging must be enabled separately via setup_file_logging()
    """
    logger = logging.getLogger(name)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    return logger
