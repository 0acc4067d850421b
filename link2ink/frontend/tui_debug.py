# -*- coding: utf-8 -*-
"""TUI debug logging utilities.

Writes widget-level debug lines (key dispatch, timer attach/detach) to a
separate file so they never touch the running display. Enabled with
``LINK2INK_TUI_DEBUG=1``.
"""

import logging
import os
import tempfile
from pathlib import Path

_DEBUG_ENV = "LINK2INK_TUI_DEBUG"
_DEBUG_FILE = Path(tempfile.gettempdir()) / "link2ink_tui_debug.log"


def tui_debug_enabled() -> bool:
    """Return True when TUI debug logging is enabled via env."""
    return os.environ.get(_DEBUG_ENV, "").lower() in ("1", "true", "yes", "on")


def get_tui_debug_logger() -> logging.Logger:
    """Get or create the TUI debug logger."""
    logger = logging.getLogger("link2ink.tui_debug")

    if not tui_debug_enabled():
        logger.disabled = True
        return logger

    if logger.disabled:
        logger.disabled = False

    if not logger.handlers:
        handler = logging.FileHandler(_DEBUG_FILE, mode="a")
        handler.setFormatter(logging.Formatter("[%(asctime)s] [%(name)s] %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
    return logger


def tui_log(msg: str, level: str = "debug") -> None:
    """Log to the TUI debug file.

    Args:
        msg: Message to log.
        level: Log level (debug, info, warning, error). Default is debug.
    """
    if not tui_debug_enabled():
        return
    try:
        logger = get_tui_debug_logger()
        level_method = getattr(logger, level.lower(), logger.debug)
        level_method(msg)
    except OSError:
        # Debug file is best-effort
        pass
