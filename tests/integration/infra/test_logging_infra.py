from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the asynchronous QueueListener architecture, idempotency
of configuration, forced reconfiguration, and log file rotation logic.
"""

import logging
import time
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from unittest.mock import patch

import pytest

from vexplorer.infra.logging import (
    _CONFIGURED_FLAG_ATTR,
    _HANDLER_TAG_ATTR,
    _QUEUE_LISTENER_ATTR,
    LoggingConfig,
    configure_logging,
    get_default_log_path,
)


@pytest.fixture(autouse=True)
def reset_logging() -> None:
    """Clean up root logger handlers before and after each test."""
    def _reset() -> None:
        root = logging.getLogger()
        listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
        if listener and isinstance(listener, QueueListener):
            if getattr(listener, "_thread", None) is not None:
                listener.stop()
            setattr(root, _QUEUE_LISTENER_ATTR, None)

        for h in list(root.handlers):
            if getattr(h, _HANDLER_TAG_ATTR, False):
                root.removeHandler(h)
                h.close()

        if hasattr(root, _CONFIGURED_FLAG_ATTR):
            delattr(root, _CONFIGURED_FLAG_ATTR)

    _reset()
    yield
    _reset()


def our_handlers():
    return [h for h in logging.getLogger().handlers if getattr(h, _HANDLER_TAG_ATTR, False)]


def test_logging_idempotency() -> None:
    """TC-01: Verify that multiple config calls do not duplicate handlers."""
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    initial = len(our_handlers())

    configure_logging(cfg)
    assert len(our_handlers()) == initial, "Handlers were duplicated."


def test_force_reconfigures_level() -> None:
    """TC-02: force=True replaces the previous setup."""
    configure_logging(LoggingConfig(level="INFO", console=True))
    configure_logging(LoggingConfig(level="DEBUG", console=True), force=True)

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(our_handlers()) == 1


def test_queue_listener_architecture() -> None:
    """TC-03: Verify that the root logger uses a QueueHandler-based architecture."""
    configure_logging(LoggingConfig(level="INFO", console=True))

    handlers = our_handlers()
    assert len(handlers) == 1
    assert isinstance(handlers[0], QueueHandler)
    assert getattr(logging.getLogger(), _QUEUE_LISTENER_ATTR) is not None


def test_log_rotation(tmp_path: Path) -> None:
    """TC-04: Verify file rotation when size limit is exceeded."""
    log_file = tmp_path / "test_rotate.log"
    cfg = LoggingConfig(
        level="DEBUG",
        console=False,
        log_file=str(log_file),
        max_bytes=100,
        backup_count=1,
    )

    configure_logging(cfg)
    logger = logging.getLogger("test_rotate")

    for _ in range(10):
        logger.debug("This is a long log message to trigger rotation." * 5)

    # Give time for the QueueListener to process
    time.sleep(0.5)

    assert log_file.exists()
    assert (tmp_path / "test_rotate.log.1").exists(), "Rotation backup file was not created."


def test_unknown_level_falls_back_to_info() -> None:
    """TC-05: Unrecognized level names resolve to INFO."""
    configure_logging(LoggingConfig(level="chatty", console=True))
    assert logging.getLogger().level == logging.INFO


def test_no_outputs_leaves_root_unconfigured() -> None:
    """TC-06: Without console or file there is nothing to attach."""
    configure_logging(LoggingConfig(console=False, log_file=None))
    assert our_handlers() == []


def test_default_log_path_location() -> None:
    """TC-07: Logs live under the user data directory."""
    with patch("vexplorer.infra.logging.core.get_user_data_dir", return_value="/data/vexplorer"):
        path = Path(get_default_log_path())
    assert path.name == "vexplorer.log"
    assert path.parent == Path("/data/vexplorer/logs")


def test_config_from_settings() -> None:
    """TC-08: Settings drive level and file; an explicit file wins."""
    cfg = LoggingConfig.from_settings({"log_level": "DEBUG", "log_file": "/var/log/a.log"})
    assert cfg.level == "DEBUG"
    assert cfg.log_file == "/var/log/a.log"

    cfg = LoggingConfig.from_settings({"log_file": "/var/log/a.log"}, log_file="/tmp/b.log")
    assert cfg.level == "INFO"
    assert cfg.log_file == "/tmp/b.log"

    assert LoggingConfig.from_settings({"log_file": ""}).log_file is None


def test_quiet_level_hides_info() -> None:
    """TC-09: 'quiet' keeps only errors."""
    configure_logging(LoggingConfig(level="quiet", console=True))
    assert logging.getLogger().level == logging.ERROR
