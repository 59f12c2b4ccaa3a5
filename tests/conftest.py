# tests/conftest.py
"""
Pytest configuration and shared fixtures for LessonTree tests
"""
import sys
import pytest
from pathlib import Path
from typing import Callable

sys.path.insert(0, str(Path(__file__).parent.parent))

from lessontree import icons
from lessontree.filesystem import MemoryFileSystem


@pytest.fixture(autouse=True)
def isolated_env(tmp_path_factory, monkeypatch):
    """Keep the user's global config and LESSONTREE_* variables out of tests"""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    for name in (
        "LESSONTREE_CONTENT_DIR",
        "LESSONTREE_MANIFEST",
        "LESSONTREE_MASTER_OUTPUT",
        "LESSONTREE_MASTER_TITLE",
        "LESSONTREE_SORT",
        "LESSONTREE_ASCII",
    ):
        monkeypatch.delenv(name, raising=False)
    yield home
    icons.use_unicode_icons()


@pytest.fixture
def touch() -> Callable[..., Path]:
    """Create a file (and its parent folders) with optional text"""
    def _touch(path: Path, text: str = "") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
    return _touch


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    """Empty usii/ content folder inside a temporary project"""
    root = tmp_path / "usii"
    root.mkdir()
    return root


@pytest.fixture
def sample_tree(content_root: Path, touch) -> Path:
    """
    One unit, one lesson, one tab, two cards:

        usii/01_colonial_america/icon.png
        usii/01_colonial_america/02_jamestown/bgimage.jpg
        usii/01_colonial_america/02_jamestown/overview/
        usii/.../overview/first_winter/{bgimage.png, writing, map.png, map.caption, reenactment.mp4}
        usii/.../overview/starving_time/{notes.txt}
    """
    unit = content_root / "01_colonial_america"
    lesson = unit / "02_jamestown"
    tab = lesson / "overview"
    card = tab / "first_winter"

    touch(unit / "icon.png")
    touch(lesson / "bgimage.jpg")
    touch(card / "bgimage.png")
    touch(card / "writing", "The colonists arrived in 1607 & struggled.")
    touch(card / "map.png")
    touch(card / "map.caption", "  Map of the fort.\n")
    touch(card / "reenactment.mp4")
    touch(tab / "starving_time" / "notes.txt", "not media")
    return content_root


@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    return MemoryFileSystem()
