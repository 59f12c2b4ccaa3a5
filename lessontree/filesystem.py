#!/usr/bin/env python3
"""
# LessonTree
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

filesystem.py - Read-only filesystem access used by the builders

Both builders take a filesystem object instead of calling os/pathlib
directly, so a whole content tree can be described in memory for tests:

    fs = MemoryFileSystem()
    fs.add_file("usii/01_colonies/icon.png")
    manifest = build_manifest(Path("usii"), fs=fs)

LocalFileSystem.list_dir never raises. A directory that is missing or
cannot be listed reads as empty.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Dict, List, Optional, Set, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, PurePath]


@dataclass(frozen=True)
class DirEntry:
    """One item of a directory listing"""
    name: str
    is_dir: bool
    is_file: bool


class LocalFileSystem:
    """The real disk, read through os.scandir"""

    def list_dir(self, path: PathLike) -> List[DirEntry]:
        try:
            with os.scandir(path) as it:
                return [
                    DirEntry(name=e.name, is_dir=e.is_dir(), is_file=e.is_file())
                    for e in it
                ]
        except OSError as e:
            logger.debug("Cannot list %s: %s", path, e)
            return []

    def exists(self, path: PathLike) -> bool:
        return os.path.exists(path)

    def is_file(self, path: PathLike) -> bool:
        return os.path.isfile(path)

    def is_dir(self, path: PathLike) -> bool:
        return os.path.isdir(path)

    def read_text(self, path: PathLike) -> str:
        return Path(path).read_text(encoding="utf-8")


class MemoryFileSystem:
    """
    Dict-backed stand-in for LocalFileSystem.

    Directories list their children in the order they were added.
    Paths passed to deny() behave like entries without read permission.
    """

    def __init__(self):
        # None marks a directory, a string is file content
        self._nodes: Dict[PurePath, Optional[str]] = {}
        self._denied: Set[PurePath] = set()

    @staticmethod
    def _key(path: PathLike) -> PurePath:
        return PurePath(path)

    def add_dir(self, path: PathLike) -> "MemoryFileSystem":
        key = self._key(path)
        for parent in reversed(key.parents):
            if str(parent) != ".":
                self._nodes.setdefault(parent, None)
        self._nodes.setdefault(key, None)
        return self

    def add_file(self, path: PathLike, text: str = "") -> "MemoryFileSystem":
        key = self._key(path)
        if str(key.parent) != ".":
            self.add_dir(key.parent)
        self._nodes[key] = text
        return self

    def deny(self, path: PathLike) -> "MemoryFileSystem":
        self._denied.add(self._key(path))
        return self

    def list_dir(self, path: PathLike) -> List[DirEntry]:
        key = self._key(path)
        if key in self._denied or self._nodes.get(key, "") is not None:
            return []
        return [
            DirEntry(name=p.name, is_dir=content is None, is_file=content is not None)
            for p, content in self._nodes.items()
            if p.parent == key and p != key
        ]

    def exists(self, path: PathLike) -> bool:
        return self._key(path) in self._nodes

    def is_file(self, path: PathLike) -> bool:
        key = self._key(path)
        return key in self._nodes and self._nodes[key] is not None

    def is_dir(self, path: PathLike) -> bool:
        key = self._key(path)
        return key in self._nodes and self._nodes[key] is None

    def read_text(self, path: PathLike) -> str:
        key = self._key(path)
        if key in self._denied:
            raise PermissionError(f"Permission denied: '{path}'")
        if key not in self._nodes:
            raise FileNotFoundError(f"No such file or directory: '{path}'")
        content = self._nodes[key]
        if content is None:
            raise IsADirectoryError(f"Is a directory: '{path}'")
        return content
