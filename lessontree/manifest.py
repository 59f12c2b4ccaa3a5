#!/usr/bin/env python3
"""
# LessonTree
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

manifest.py

Build <content_root>/manifest.json from the content folder tree:

    usii/
      01_colonial_america/            unit
        icon.png
        02_jamestown/                 lesson
          overview/                   tab
            first_winter/             card
              bgimage.jpg
              writing
              map.png
              map.caption

For each unit, lesson and tab the first existing icon candidate is
recorded. For each card the background image, the media files (with
their .caption text) and whether a writing resource exists are recorded.

The manifest is rebuilt from scratch on every run and written only when
its text differs from the file already on disk, so a versioned content
repo sees no change when nothing changed.

Usage:
    lessontree manifest [--root usii] [--output usii/manifest.json]
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from lessontree.errors import content_root_missing_error, output_write_error
from lessontree.filesystem import DirEntry, LocalFileSystem
from lessontree.naming import snake_to_title

logger = logging.getLogger(__name__)


# ============================================================================
# Conventions
# ============================================================================

ICON_CANDIDATES = (
    "icon.png", "icon.svg", "icon.jpg", "icon.jpeg",
    "bgimage.png", "bgimage.jpg", "bgimage.jpeg",
)

# No SVG: card backgrounds are raster only
BGIMAGE_CANDIDATES = ("bgimage.png", "bgimage.jpg", "bgimage.jpeg")

MEDIA_PATTERN = re.compile(r"\.(png|jpe?g|mp4|svg)$", re.IGNORECASE)
BGIMAGE_PATTERN = re.compile(r"^bgimage\.", re.IGNORECASE)
VIDEO_PATTERN = re.compile(r"\.mp4$", re.IGNORECASE)
EXTENSION_PATTERN = re.compile(r"\.[^/.]+$")

CAPTION_SUFFIX = ".caption"
WRITING_NAME = "writing"


# ============================================================================
# Manifest tree
# ============================================================================

@dataclass(frozen=True)
class MediaEntry:
    name: str
    type: str
    caption: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type, "caption": self.caption}


@dataclass(frozen=True)
class CardEntry:
    name: str
    title: str
    bgimage: Optional[str]
    has_writing: bool
    media: Tuple[MediaEntry, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "bgimage": self.bgimage,
            "has_writing": self.has_writing,
            "media": [m.to_dict() for m in self.media],
        }


@dataclass(frozen=True)
class TabEntry:
    name: str
    title: str
    icon: Optional[str]
    cards: Tuple[CardEntry, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "icon": self.icon,
            "cards": [c.to_dict() for c in self.cards],
        }


@dataclass(frozen=True)
class LessonEntry:
    name: str
    title: str
    icon: Optional[str]
    tabs: Tuple[TabEntry, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "icon": self.icon,
            "tabs": [t.to_dict() for t in self.tabs],
        }


@dataclass(frozen=True)
class UnitEntry:
    name: str
    title: str
    icon: Optional[str]
    lessons: Tuple[LessonEntry, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "icon": self.icon,
            "lessons": [lesson.to_dict() for lesson in self.lessons],
        }


@dataclass(frozen=True)
class Manifest:
    generated_at: str
    units: Tuple[UnitEntry, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generated_at": self.generated_at,
            "units": [u.to_dict() for u in self.units],
        }


@dataclass(frozen=True)
class WriteResult:
    """Outcome of an equality-gated write"""
    path: Path
    changed: bool


# ============================================================================
# Lookups
# ============================================================================

def list_entries(fs, directory: Path, sort_entries: bool = True) -> List[DirEntry]:
    entries = fs.list_dir(directory)
    if sort_entries:
        entries = sorted(entries, key=lambda e: e.name)
    return entries


def subdirectories(fs, directory: Path, sort_entries: bool = True) -> List[str]:
    return [e.name for e in list_entries(fs, directory, sort_entries) if e.is_dir]


def find_first_file(fs, directory: Path, candidates: Sequence[str]) -> Optional[str]:
    """
    Return the first candidate that exists as a file in directory.

    Candidates are checked in order, so earlier names win. A missing
    directory simply has no candidates.
    """
    for name in candidates:
        if fs.is_file(directory / name):
            return name
    return None


def media_base_name(filename: str) -> str:
    """Filename without its last extension ("a.b.png" -> "a.b")."""
    return EXTENSION_PATTERN.sub("", filename)


def read_caption(fs, directory: Path, base_name: str) -> Optional[str]:
    """
    Text of <base_name>.caption, trimmed.

    Missing, unreadable or blank caption files give None.
    """
    caption_path = directory / f"{base_name}{CAPTION_SUFFIX}"
    if not fs.exists(caption_path):
        return None
    try:
        text = fs.read_text(caption_path).strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Skipping unreadable caption %s: %s", caption_path, e)
        return None
    return text or None


def classify_media(filename: str) -> str:
    return "video" if VIDEO_PATTERN.search(filename) else "image"


def is_media_file(filename: str) -> bool:
    return bool(MEDIA_PATTERN.search(filename)) and not BGIMAGE_PATTERN.match(filename)


def manifest_path(*parts: str) -> str:
    """Join path parts with forward slashes, whatever the host OS."""
    return "/".join(parts)


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2025-01-02T03:04:05.678Z"""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    stamp = now.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


# ============================================================================
# Tree walk
# ============================================================================

def build_card(fs, card_dir: Path, rel: Tuple[str, ...], sort_entries: bool = True) -> CardEntry:
    files = [e.name for e in list_entries(fs, card_dir, sort_entries) if e.is_file]

    media = tuple(
        MediaEntry(
            name=name,
            type=classify_media(name),
            caption=read_caption(fs, card_dir, media_base_name(name)),
        )
        for name in files
        if is_media_file(name)
    )

    bg_file = find_first_file(fs, card_dir, BGIMAGE_CANDIDATES)

    return CardEntry(
        name=card_dir.name,
        title=snake_to_title(card_dir.name),
        bgimage=manifest_path(*rel, bg_file) if bg_file else None,
        has_writing=fs.exists(card_dir / WRITING_NAME),
        media=media,
    )


def _icon(fs, directory: Path, rel: Tuple[str, ...]) -> Optional[str]:
    icon_file = find_first_file(fs, directory, ICON_CANDIDATES)
    return manifest_path(*rel, icon_file) if icon_file else None


def build_tab(fs, tab_dir: Path, rel: Tuple[str, ...], sort_entries: bool = True) -> TabEntry:
    cards = tuple(
        build_card(fs, tab_dir / name, rel + (name,), sort_entries)
        for name in subdirectories(fs, tab_dir, sort_entries)
    )
    return TabEntry(
        name=tab_dir.name,
        title=snake_to_title(tab_dir.name),
        icon=_icon(fs, tab_dir, rel),
        cards=cards,
    )


def build_lesson(fs, lesson_dir: Path, rel: Tuple[str, ...], sort_entries: bool = True) -> LessonEntry:
    tabs = tuple(
        build_tab(fs, lesson_dir / name, rel + (name,), sort_entries)
        for name in subdirectories(fs, lesson_dir, sort_entries)
    )
    return LessonEntry(
        name=lesson_dir.name,
        title=snake_to_title(lesson_dir.name),
        icon=_icon(fs, lesson_dir, rel),
        tabs=tabs,
    )


def build_unit(fs, unit_dir: Path, rel: Tuple[str, ...], sort_entries: bool = True) -> UnitEntry:
    lessons = tuple(
        build_lesson(fs, unit_dir / name, rel + (name,), sort_entries)
        for name in subdirectories(fs, unit_dir, sort_entries)
    )
    return UnitEntry(
        name=unit_dir.name,
        title=snake_to_title(unit_dir.name),
        icon=_icon(fs, unit_dir, rel),
        lessons=lessons,
    )


def build_manifest(
    content_root: Path,
    fs=None,
    now: Optional[datetime] = None,
    sort_entries: bool = True,
) -> Manifest:
    """
    Walk units/lessons/tabs/cards under content_root.

    Args:
        content_root: Folder holding the unit directories
        fs: Filesystem to read from (defaults to LocalFileSystem)
        now: Timestamp for generated_at (defaults to current UTC time)
        sort_entries: Sort sibling folders and files by name; when False
            the raw directory listing order is kept

    Returns:
        Manifest tree. Recorded paths start with content_root's folder
        name, e.g. "usii/01_colonial_america/icon.png".
    """
    fs = fs or LocalFileSystem()
    content_root = Path(content_root)
    root_name = content_root.name or content_root.resolve().name

    units = tuple(
        build_unit(fs, content_root / name, (root_name, name), sort_entries)
        for name in subdirectories(fs, content_root, sort_entries)
    )
    return Manifest(generated_at=utc_timestamp(now), units=units)


# ============================================================================
# Output
# ============================================================================

def serialize_manifest(manifest: Manifest) -> str:
    return json.dumps(manifest.to_dict(), indent=2, ensure_ascii=False) + "\n"


def read_previous(output_path: Path) -> Optional[str]:
    """Existing output text, or None when there is none to read."""
    try:
        return Path(output_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def write_if_changed(output_path: Path, text: str) -> WriteResult:
    """
    Equality-gated write: replace output_path only if text differs.

    Raises:
        OutputWriteError: If the folder or file cannot be written
    """
    output_path = Path(output_path)
    if read_previous(output_path) == text:
        return WriteResult(path=output_path, changed=False)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise output_write_error(output_path, e)
    return WriteResult(path=output_path, changed=True)


def carry_forward_timestamp(manifest: Manifest, previous_text: Optional[str]) -> Manifest:
    """
    Reuse the previous generated_at when nothing else changed.

    Without this every run would differ by its timestamp alone.
    """
    if not previous_text:
        return manifest
    try:
        previous = json.loads(previous_text)
    except ValueError:
        return manifest
    if not isinstance(previous, dict) or not isinstance(previous.get("generated_at"), str):
        return manifest

    current = manifest.to_dict()
    current.pop("generated_at")
    old_stamp = previous.pop("generated_at")
    if previous != current:
        return manifest
    return replace(manifest, generated_at=old_stamp)


def generate_manifest(
    content_root: Path,
    output_path: Path,
    fs=None,
    now: Optional[datetime] = None,
    sort_entries: bool = True,
) -> WriteResult:
    """
    Build the manifest for content_root and write it if it changed.

    Raises:
        ContentRootError: If content_root is missing or not a directory
        OutputWriteError: If output_path cannot be written
    """
    fs = fs or LocalFileSystem()
    content_root = Path(content_root)
    if not fs.is_dir(content_root):
        raise content_root_missing_error(content_root)

    manifest = build_manifest(content_root, fs=fs, now=now, sort_entries=sort_entries)
    logger.info("Scanned %d unit(s) under %s", len(manifest.units), content_root)

    manifest = carry_forward_timestamp(manifest, read_previous(output_path))
    return write_if_changed(output_path, serialize_manifest(manifest))
