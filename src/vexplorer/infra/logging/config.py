from __future__ import annotations

"""
Logging Configuration Models.

Builds the logging setup of one CLI run from the application settings:
severity from 'log_level', optional rotating file from 'log_file' (or the
--log-file flag, which wins).
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

DEFAULT_LOG_FILE_NAME = "vexplorer.log"

# Mapping of string identifiers to native logging constants
_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    # Only failures that end the command
    "QUIET": logging.ERROR,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging setup for a vexplorer process.

    Attributes:
        level: Name of the minimum severity (see _LEVEL_MAP).
        console: Mirror records to stderr (stdout is reserved for command output).
        log_file: Rotating log file, or None to log to the console only.
        max_bytes: Size at which the log file rolls over.
        backup_count: Rolled-over files kept next to the active one.
        console_fmt: Format for stderr records.
        file_fmt: Format for file records.
        datefmt: Timestamp format for file records.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 512 * 1024
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_settings(
            cls,
            settings: Mapping[str, Any],
            log_file: Optional[str] = None,
    ) -> "LoggingConfig":
        """
        Derive the config from the 'app_settings' mapping.

        Args:
            settings: Resolved application settings.
            log_file: Explicit log file overriding settings['log_file'].

        Returns:
            LoggingConfig: Console logging, plus a file when one is configured.
        """
        target = log_file or settings.get("log_file") or None
        return cls(
            level=str(settings.get("log_level") or "INFO"),
            console=True,
            log_file=target,
        )
