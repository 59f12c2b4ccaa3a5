#!/usr/bin/env python3
"""
# LessonTree
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

master_document.py

Combine every card's writing and images into one HTML file for easy
PDF export.

Any folder holding a "writing" entry is a card:

    <h5>Card: first winter</h5>
    <p>...writing text, HTML-escaped...</p>
    <img src="01_colonial_america/02_jamestown/overview/first_winter/map.png" ...><br>
    <p>[Video: reenactment.mp4]</p>

Every other folder becomes a heading (h1 for children of the content
root, h2 below them, capped at h4) and is walked in turn. Loose files at
that level are ignored.

Unlike the manifest, the document is written on every run.

Usage:
    lessontree master [--root usii] [--output master.html]
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from lessontree.errors import content_root_missing_error, output_write_error
from lessontree.filesystem import LocalFileSystem
from lessontree.manifest import WRITING_NAME, list_entries
from lessontree.naming import display_name

logger = logging.getLogger(__name__)


IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp", ".gif")
VIDEO_EXTENSIONS = (".mp4", ".mov", ".webm")

MAX_HEADING_LEVEL = 4
CARD_HEADING_LEVEL = 5

DEFAULT_TITLE = "US II - Master Document"

HTML_HEADER = """
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>{title}</title>
<style>
body {{ font-family: Arial, sans-serif; line-height: 1.4; margin: 40px; }}
h1, h2, h3, h4, h5 {{ color: #2c3e50; }}
img {{ display: block; margin: 10px 0; max-width: 100%; }}
p {{ margin: 5px 0; }}
</style>
</head>
<body>
"""

HTML_FOOTER = """
</body>
</html>
"""


def escape_html(text: str) -> str:
    """Escape &, < and > so writing text can't inject markup."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def heading_level(depth: int) -> int:
    return min(depth, MAX_HEADING_LEVEL)


def extension_of(filename: str) -> str:
    return Path(filename).suffix.lower()


def read_writing(fs, card_dir: Path) -> str:
    writing_path = card_dir / WRITING_NAME
    try:
        return fs.read_text(writing_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", writing_path, e)
        return ""


def render_card(fs, card_dir: Path, rel: Tuple[str, ...], sort_entries: bool = True) -> str:
    """
    Render one card.

    Args:
        fs: Filesystem to read from
        card_dir: Folder holding the writing entry
        rel: Path parts of card_dir below the content root, used for
            image src attributes
        sort_entries: Sort files by name before rendering
    """
    level = CARD_HEADING_LEVEL
    parts = [
        f"<h{level}>Card: {escape_html(display_name(card_dir.name))}</h{level}>\n",
        f"<p>{escape_html(read_writing(fs, card_dir))}</p>\n",
    ]

    files = [e.name for e in list_entries(fs, card_dir, sort_entries) if e.is_file]

    for name in files:
        if extension_of(name) in IMAGE_EXTENSIONS:
            src = "/".join(rel + (name,))
            parts.append(f'<img src="{src}" style="max-width: 100%; margin: 10px 0;"><br>\n')

    for name in files:
        if extension_of(name) in VIDEO_EXTENSIONS:
            parts.append(f"<p>[Video: {escape_html(name)}]</p>\n")

    return "".join(parts)


def render_tree(
    content_root: Path,
    fs=None,
    sort_entries: bool = True,
    _rel: Tuple[str, ...] = (),
) -> str:
    """Depth-first, pre-order HTML body for everything below content_root."""
    fs = fs or LocalFileSystem()
    directory = Path(content_root).joinpath(*_rel)
    parts: List[str] = []

    for entry in list_entries(fs, directory, sort_entries):
        if not entry.is_dir:
            continue
        rel = _rel + (entry.name,)
        item_dir = directory / entry.name

        if fs.exists(item_dir / WRITING_NAME):
            parts.append(render_card(fs, item_dir, rel, sort_entries))
            continue

        level = heading_level(len(rel))
        parts.append(f"<h{level}>{escape_html(display_name(entry.name))}</h{level}>\n")
        parts.append(render_tree(content_root, fs=fs, sort_entries=sort_entries, _rel=rel))

    return "".join(parts)


def build_master_html(
    content_root: Path,
    fs=None,
    title: str = DEFAULT_TITLE,
    sort_entries: bool = True,
) -> str:
    body = render_tree(content_root, fs=fs, sort_entries=sort_entries)
    return HTML_HEADER.format(title=escape_html(title)) + body + HTML_FOOTER


def write_master_html(
    content_root: Path,
    output_path: Path,
    fs=None,
    title: Optional[str] = None,
    sort_entries: bool = True,
) -> Path:
    """
    Build the master document and write it unconditionally.

    Raises:
        ContentRootError: If content_root is missing or not a directory
        OutputWriteError: If output_path cannot be written
    """
    fs = fs or LocalFileSystem()
    content_root = Path(content_root)
    output_path = Path(output_path)
    if not fs.is_dir(content_root):
        raise content_root_missing_error(content_root)

    html = build_master_html(
        content_root,
        fs=fs,
        title=title or DEFAULT_TITLE,
        sort_entries=sort_entries,
    )

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html, encoding="utf-8")
    except OSError as e:
        raise output_write_error(output_path, e)

    logger.info("Master document written: %s", output_path)
    return output_path
