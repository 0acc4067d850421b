# -*- coding: utf-8 -*-
"""
Logging configuration for Link2Ink.

All modules log through the loguru ``logger`` re-exported here. Each process
gets a log session directory under ``.link2ink/logs/log_<timestamp>/`` (or
under ``LINK2INK_LOG_BASE_DIR`` when set). While the Textual app owns the
terminal, the stderr sink is removed so log lines cannot corrupt the screen.
"""

import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger

_LOG_BASE_ENV = "LINK2INK_LOG_BASE_DIR"
_DEFAULT_LOG_BASE = Path(".link2ink") / "logs"

# Session state (reset between tests via reset_logging_session)
_LOG_BASE_SESSION_DIR: Optional[Path] = None
_LOG_SESSION_DIR: Optional[Path] = None

_CONSOLE_HANDLER_ID: Optional[int] = None
_FILE_HANDLER_ID: Optional[int] = None
_CONSOLE_SUPPRESSED = False

_CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


def _log_base_dir() -> Path:
    override = os.environ.get(_LOG_BASE_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return _DEFAULT_LOG_BASE


def reset_logging_session() -> None:
    """Forget the current log session so the next lookup creates a new one."""
    global _LOG_BASE_SESSION_DIR, _LOG_SESSION_DIR
    _LOG_BASE_SESSION_DIR = None
    _LOG_SESSION_DIR = None


def set_log_base_session_dir(name: str) -> None:
    """Reuse an existing session directory name under the log base dir."""
    global _LOG_BASE_SESSION_DIR, _LOG_SESSION_DIR
    _LOG_BASE_SESSION_DIR = _log_base_dir() / name
    _LOG_SESSION_DIR = None


def set_log_base_session_dir_absolute(path: Path) -> None:
    """Pin the log session directory to an absolute path."""
    global _LOG_BASE_SESSION_DIR, _LOG_SESSION_DIR
    _LOG_BASE_SESSION_DIR = Path(path)
    _LOG_SESSION_DIR = None


def get_log_session_root() -> Path:
    """Return the session root, creating a timestamped one on first use."""
    global _LOG_BASE_SESSION_DIR
    if _LOG_BASE_SESSION_DIR is None:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        _LOG_BASE_SESSION_DIR = _log_base_dir() / f"log_{stamp}"
    return _LOG_BASE_SESSION_DIR


def get_log_session_dir() -> Path:
    """Return (and create) the directory this process writes logs into."""
    global _LOG_SESSION_DIR
    if _LOG_SESSION_DIR is None:
        _LOG_SESSION_DIR = get_log_session_root()
    _LOG_SESSION_DIR.mkdir(parents=True, exist_ok=True)
    return _LOG_SESSION_DIR


def setup_logging(debug: bool = False, log_file: Optional[Path] = None) -> Path:
    """Configure console and file sinks.

    Args:
        debug: Log at DEBUG level instead of INFO.
        log_file: Explicit log file path. Defaults to ``link2ink.log`` in the
            session directory.

    Returns:
        Path of the file sink.
    """
    global _CONSOLE_HANDLER_ID, _FILE_HANDLER_ID, _CONSOLE_SUPPRESSED

    level = "DEBUG" if debug else "INFO"
    logger.remove()
    _CONSOLE_HANDLER_ID = logger.add(sys.stderr, level="WARNING", format=_CONSOLE_FORMAT, colorize=True)
    _CONSOLE_SUPPRESSED = False

    target = Path(log_file) if log_file else get_log_session_dir() / "link2ink.log"
    target.parent.mkdir(parents=True, exist_ok=True)
    _FILE_HANDLER_ID = logger.add(str(target), level=level, format=_FILE_FORMAT, enqueue=False)

    logger.info("Logging initialized (level={}, file={})", level, target)
    return target


def suppress_console_logging() -> None:
    """Remove the stderr sink while a full-screen UI is running."""
    global _CONSOLE_HANDLER_ID, _CONSOLE_SUPPRESSED
    if _CONSOLE_HANDLER_ID is not None:
        try:
            logger.remove(_CONSOLE_HANDLER_ID)
        except ValueError:
            pass
        _CONSOLE_HANDLER_ID = None
    _CONSOLE_SUPPRESSED = True


def restore_console_logging() -> None:
    """Re-add the stderr sink after the UI exits."""
    global _CONSOLE_HANDLER_ID, _CONSOLE_SUPPRESSED
    if not _CONSOLE_SUPPRESSED:
        return
    _CONSOLE_HANDLER_ID = logger.add(sys.stderr, level="WARNING", format=_CONSOLE_FORMAT, colorize=True)
    _CONSOLE_SUPPRESSED = False


__all__ = [
    "logger",
    "get_log_session_dir",
    "get_log_session_root",
    "reset_logging_session",
    "restore_console_logging",
    "set_log_base_session_dir",
    "set_log_base_session_dir_absolute",
    "setup_logging",
    "suppress_console_logging",
]
