# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Logging setup for RegKeeper.

Core modules log through plain `logging.getLogger("regkeeper.<component>")`
loggers. configure_logging() attaches a console handler and a rotating file
handler to the top-level "regkeeper" logger so those records have somewhere
to go.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional

CONSOLE_FORMAT = "[%(asctime)s] [%(name)s:%(levelname)s] %(message)s"
FILE_FORMAT = (
    "%(asctime)s | %(name)s | %(levelname)s | %(filename)s:%(lineno)d | %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Rotate after 10MB, keep 5 backups
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

_configured: Dict[str, logging.Logger] = {}


def parse_level(level: str) -> int:
    """Level name to logging constant; unknown names fall back to INFO"""
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def _file_handler(log_dir: Path, name: str) -> RotatingFileHandler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / f"{name}.log",
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))
    handler.setLevel(logging.DEBUG)
    return handler


def configure_logging(
    name: str = "regkeeper",
    level: Optional[str] = None,
    log_dir: Optional[Path] = None,
    file_output: Optional[bool] = None,
) -> logging.Logger:
    """
    Attach handlers to the `name` logger once and return it.

    Args:
        name: Logger that component loggers propagate to
        level: Console level; defaults to REGKEEPER_LOG_LEVEL, then INFO
        log_dir: Directory for rotating log files (~/.regkeeper/logs)
        file_output: Force file logging on or off; defaults to on unless
            REGKEEPER_NO_FILE_LOGS is "true"

    Returns:
        The configured logging.Logger
    """
    if name in _configured:
        return _configured[name]

    console_level = parse_level(level or os.getenv("REGKEEPER_LOG_LEVEL", "INFO"))
    if file_output is None:
        file_output = os.getenv("REGKEEPER_NO_FILE_LOGS", "false").lower() != "true"

    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.setLevel(console_level)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))
    console.setLevel(console_level)
    logger.addHandler(console)

    if file_output:
        logger.addHandler(
            _file_handler(Path(log_dir or Path.home() / ".regkeeper" / "logs"), name)
        )
        # File gets everything
        logger.setLevel(logging.DEBUG)

    _configured[name] = logger
    return logger
