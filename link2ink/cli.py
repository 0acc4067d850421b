# -*- coding: utf-8 -*-
"""
Command-line entry point for Link2Ink Studio.

Usage:
    link2ink                      # start the studio with saved settings
    link2ink --demo --no-intro    # scripted generation service, no intro
    link2ink --storage-dir ./tmp --history-limit 20 --modifier ctrl
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from link2ink import __version__
from link2ink.generation import ScriptedGenerationService
from link2ink.logger_config import logger, restore_console_logging, setup_logging, suppress_console_logging
from link2ink.session_gate import CapabilityProbe, resolve_probe
from link2ink.storage import JsonFileStorage
from link2ink.user_settings import SHORTCUT_MODIFIERS, UserSettings, get_user_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="link2ink",
        description="Link2Ink Studio - turn repositories and articles into diagrams and infographics",
    )
    parser.add_argument(
        "--storage-dir",
        type=Path,
        default=None,
        help="Directory for the persisted history (default: ~/.config/link2ink/storage)",
    )
    parser.add_argument(
        "--history-limit",
        type=int,
        default=None,
        help="Keep at most this many history items per tool (default: no limit)",
    )
    parser.add_argument(
        "--modifier",
        choices=SHORTCUT_MODIFIERS,
        default=None,
        help="Modifier key for the view shortcuts (default: alt)",
    )
    parser.add_argument(
        "--export-dir",
        type=Path,
        default=None,
        help="Directory where saved artifacts are written (default: current directory)",
    )
    parser.add_argument(
        "--no-intro",
        action="store_true",
        help="Skip the introductory overlay",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use the scripted generation service and skip the key check",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Write debug-level logs to the session log file",
    )
    parser.add_argument(
        "--theme",
        choices=("dark", "light"),
        default=None,
        help="Color theme (default: from settings)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def _demo_probe() -> bool:
    return True


def resolve_options(args: argparse.Namespace, settings: UserSettings) -> dict:
    """Merge CLI flags over saved settings. Flags win."""
    history_limit = args.history_limit if args.history_limit is not None else settings.history_limit
    if history_limit is not None and history_limit < 1:
        raise ValueError("--history-limit must be a positive integer")
    return {
        "storage_dir": args.storage_dir or settings.storage_dir,
        "export_dir": args.export_dir or settings.export_dir,
        "history_limit": history_limit,
        "modifier": args.modifier or settings.shortcut_modifier,
        "show_intro": settings.show_intro and not args.no_intro,
        "theme_name": args.theme or settings.theme,
    }


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    log_dir = setup_logging(debug=args.debug)
    settings = get_user_settings()
    try:
        options = resolve_options(args, settings)
    except ValueError as e:
        parser.error(str(e))

    # Imported late so --help and --version don't pay for Textual
    from link2ink.frontend import Link2InkApp

    probe: Optional[CapabilityProbe]
    if args.demo:
        service = ScriptedGenerationService()
        probe = _demo_probe
    else:
        service = None
        probe = resolve_probe()

    logger.info("[CLI] Starting Link2Ink {} (logs: {})", __version__, log_dir)
    app = Link2InkApp(
        storage=JsonFileStorage(options.pop("storage_dir")),
        service=service,
        probe=probe,
        **options,
    )

    suppress_console_logging()
    try:
        app.run()
    finally:
        restore_console_logging()
    return 0


if __name__ == "__main__":
    sys.exit(main())
