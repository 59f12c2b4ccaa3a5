#!/usr/bin/env python3
"""
icons.py - Console icons and logging setup for LessonTree output

Usage:
    from lessontree import icons
    click.echo(f"{icons.SUCCESS} Manifest written")

Read the constants through the module (icons.SUCCESS), not with
"from icons import SUCCESS": use_ascii_icons() swaps the module globals
and a name bound at import time would keep the unicode glyph.
"""

import logging
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Icons:
    """Unicode icon set"""
    SUCCESS: str = "✅"      # operation succeeded
    ERROR: str = "❌"        # operation failed
    WARNING: str = "⚠️"      # warning triangle
    INFO: str = "ℹ️"         # information
    SKIP: str = "⏭️"         # skipped / unchanged
    EDIT: str = "✏️"         # file rewritten
    FOLDER: str = "📁"
    WATCH: str = "👀"
    WAVE: str = "👋"


@dataclass(frozen=True)
class AsciiIcons(Icons):
    """ASCII-only fallback icons for limited terminals."""
    SUCCESS: str = "[OK]"
    ERROR: str = "[X]"
    WARNING: str = "[!]"
    INFO: str = "[i]"
    SKIP: str = "[ ]"
    EDIT: str = "[*]"
    FOLDER: str = "[D]"
    WATCH: str = "[w]"
    WAVE: str = "[~]"


icons = Icons()

SUCCESS = icons.SUCCESS
ERROR = icons.ERROR
WARNING = icons.WARNING
INFO = icons.INFO
SKIP = icons.SKIP
EDIT = icons.EDIT
FOLDER = icons.FOLDER
WATCH = icons.WATCH
WAVE = icons.WAVE


def _apply(icon_set: Icons) -> None:
    global icons, SUCCESS, ERROR, WARNING, INFO, SKIP, EDIT, FOLDER, WATCH, WAVE

    icons = icon_set
    SUCCESS = icon_set.SUCCESS
    ERROR = icon_set.ERROR
    WARNING = icon_set.WARNING
    INFO = icon_set.INFO
    SKIP = icon_set.SKIP
    EDIT = icon_set.EDIT
    FOLDER = icon_set.FOLDER
    WATCH = icon_set.WATCH
    WAVE = icon_set.WAVE


def use_ascii_icons() -> None:
    """Switch to ASCII-only icons globally."""
    _apply(AsciiIcons())


def use_unicode_icons() -> None:
    _apply(Icons())


def changed_icon(changed: bool) -> str:
    """EDIT when a file was rewritten, SKIP when it was left alone."""
    return EDIT if changed else SKIP


# =========================================================================
# Logging
# =========================================================================

# Message-only; no per-line timestamps
LOG_FORMAT = "%(message)s"


class IconLogFormatter(logging.Formatter):
    """Prefix each record with the icon for its level."""

    def format(self, record: logging.LogRecord) -> str:
        level_icons = {
            logging.DEBUG: "·",
            logging.INFO: INFO,
            logging.WARNING: WARNING,
            logging.ERROR: ERROR,
            logging.CRITICAL: ERROR,
        }
        icon = level_icons.get(record.levelno, INFO)
        base = super().format(record)
        return f"{icon} {base}"


def setup_logging(verbosity: int = 0) -> None:
    """
    Install the icon formatter on the root logger.

    0 -> WARNING, 1 -> INFO, 2+ -> DEBUG
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler()
    handler.setFormatter(IconLogFormatter(LOG_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)


DOT_LINE = "." * 70


def fence(label: str) -> None:
    """Print a visual fence with a timestamped label."""
    ts = datetime.now().strftime("%H:%M:%S")
    print(DOT_LINE)
    print(f"[{ts}] {label}")
    print()
