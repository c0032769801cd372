"""Tests for devdock logging setup."""
import logging

import pytest

from devdock.core import logger as logger_module
from devdock.core.logger import get_logger, setup_file_logging


@pytest.fixture
def fresh_file_logging(monkeypatch):
    """Allow setup_file_logging to install a handler, and remove it afterwards."""
    monkeypatch.setattr(logger_module, "_file_handler", None)
    package_logger = logging.getLogger("devdock")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    yield
    for handler in package_logger.handlers:
        if handler not in handlers:
            handler.close()
            package_logger.removeHandler(handler)
    package_logger.setLevel(level)


def test_file_logging_writes_module_messages(tmp_path, fresh_file_logging):
    log_file = tmp_path / "logs" / "devdock.log"

    assert setup_file_logging(log_file=str(log_file)) == log_file
    get_logger("devdock.tests").info("registry refreshed")

    assert "devdock.tests | INFO | registry refreshed" in log_file.read_text()


def test_second_setup_keeps_first_handler(tmp_path, fresh_file_logging):
    first = setup_file_logging(log_file=str(tmp_path / "first.log"))
    second = setup_file_logging(log_file=str(tmp_path / "second.log"))

    assert second == first
    assert not (tmp_path / "second.log").exists()


def test_verbose_logs_debug(tmp_path, fresh_file_logging):
    log_file = tmp_path / "debug.log"

    setup_file_logging(log_file=str(log_file), verbose=True)

    assert f"File logging to {log_file}" in log_file.read_text()
