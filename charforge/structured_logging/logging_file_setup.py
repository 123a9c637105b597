"""
File logging setup for the enhanced logging system.

Every environment writes to its own directory under the log base:
``charforge.log`` receives everything at the configured level, ``errors.log``
aggregates ERROR and above, and a console handler mirrors output to stderr.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from .logging_utilities import ensure_log_directory, resolve_log_base

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marker attribute so reconfiguration only removes our own handlers
_HANDLER_MARKER = "_charforge_handler"


def _convert_max_size_to_bytes(max_size_str: str | int) -> int:
    """Convert a size like '10MB', '512KB' or '100B' to bytes."""
    if isinstance(max_size_str, str):
        if max_size_str.endswith("MB"):
            return int(max_size_str[:-2]) * 1024 * 1024
        if max_size_str.endswith("KB"):
            return int(max_size_str[:-2]) * 1024
        if max_size_str.endswith("B"):
            return int(max_size_str[:-1])
        return int(max_size_str)
    return max_size_str


def _create_rotating_handler(log_path: Path, level: int, max_bytes: int, backup_count: int) -> logging.Handler:
    ensure_log_directory(log_path)
    handler = RotatingFileHandler(
        log_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    setattr(handler, _HANDLER_MARKER, True)
    return handler


def remove_file_handlers() -> None:
    """Detach and close every handler previously installed by this module."""
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root_logger.removeHandler(handler)
            handler.close()


def setup_enhanced_file_logging(environment: str, log_config: dict[str, Any], log_level: str) -> Path:
    """
    Install rotating file handlers and a console handler on the root logger.

    Args:
        environment: Environment name, used as the log sub-directory
        log_config: The "logging" section of the legacy config dict
        log_level: Minimum level for the main log file and console

    Returns:
        Path: The environment log directory
    """
    remove_file_handlers()

    env_log_dir = resolve_log_base(log_config.get("log_base", "logs")) / environment
    ensure_log_directory(env_log_dir / ".dummy")

    rotation_config = log_config.get("rotation", {})
    max_bytes = _convert_max_size_to_bytes(rotation_config.get("max_size", "10MB"))
    backup_count = rotation_config.get("backup_count", 5)

    level = getattr(logging, str(log_level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(_create_rotating_handler(env_log_dir / "charforge.log", level, max_bytes, backup_count))
    root_logger.addHandler(
        _create_rotating_handler(env_log_dir / "errors.log", logging.ERROR, max_bytes, backup_count)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    setattr(console_handler, _HANDLER_MARKER, True)
    root_logger.addHandler(console_handler)

    return env_log_dir
