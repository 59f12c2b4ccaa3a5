# config_utils.py - YAML Configuration System for LessonTree
"""
LessonTree configuration utilities with YAML file support.

Configuration Resolution Order (highest to lowest priority):
1. Command-line options (applied by cli.py on top of get_config())
2. Environment variables (LESSONTREE_CONTENT_DIR, LESSONTREE_MANIFEST, etc.)
3. lessontree.yaml (or lessontree.yml) in the project root
4. ~/.lessontree/config.yaml (global defaults)

Usage:
    from lessontree.config_utils import get_config

    config = get_config()
    print(config.content_root)
    print(config.manifest_file)
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

import yaml

from lessontree.errors import ConfigurationError, invalid_config_error


CONFIG_FILENAMES = ("lessontree.yaml", "lessontree.yml")

TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class LessonTreeConfig:
    """Complete LessonTree configuration"""
    # Paths (relative values resolve against project_root)
    project_root: Optional[Path] = None
    content_dir: str = "usii"
    manifest_path: str = "usii/manifest.json"
    master_output: str = "master.html"

    # Master document
    master_title: str = "US II - Master Document"

    # Directory listings are sorted by name unless this is off
    sort_entries: bool = True

    # Console output
    ascii_icons: bool = False

    # Watch settings
    watch_debounce: float = 2.0

    # Extra settings from config file
    extra: Dict[str, Any] = field(default_factory=dict)

    # Track where values came from (for debugging)
    _sources: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.project_root is None:
            self.project_root = Path.cwd()

    def resolve(self, value: str) -> Path:
        path = Path(value).expanduser()
        if path.is_absolute():
            return path
        return self.project_root / path

    @property
    def content_root(self) -> Path:
        return self.resolve(self.content_dir)

    @property
    def manifest_file(self) -> Path:
        return self.resolve(self.manifest_path)

    @property
    def master_file(self) -> Path:
        return self.resolve(self.master_output)

    def source_of(self, attr: str) -> str:
        return self._sources.get(attr, "default")


class ConfigLoader:
    """Load configuration from multiple sources"""

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.config = LessonTreeConfig(project_root=self.project_dir)

    def load(self) -> LessonTreeConfig:
        """Load configuration from all sources in priority order"""
        # Load in reverse priority (lowest first, higher overwrites)
        self._load_global_config()
        self._load_yaml_config()
        self._load_env_vars()
        return self.config

    def _load_global_config(self):
        """Load ~/.lessontree/config.yaml if it exists"""
        global_config = Path.home() / ".lessontree" / "config.yaml"
        if global_config.is_file():
            self._load_yaml_file(global_config, "global")

    def _load_yaml_config(self):
        """Load lessontree.yaml (or .yml) from the project root"""
        for name in CONFIG_FILENAMES:
            yaml_path = self.project_dir / name
            if yaml_path.is_file():
                self._load_yaml_file(yaml_path, name)
                return

    def _load_yaml_file(self, path: Path, source_name: str):
        """Load settings from a YAML file"""
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise invalid_config_error(path, e)

        if not isinstance(data, dict):
            raise ConfigurationError(
                message=f"Expected a mapping at the top of {path.name}",
                suggestion="Write settings as 'key: value' lines, e.g.\n  content_dir: usii",
                context={"file": str(path), "found_type": type(data).__name__},
            )

        # Map YAML keys to config attributes
        mappings = {
            "content_dir": "content_dir",
            "manifest_path": "manifest_path",
            "master_output": "master_output",
            "master_title": "master_title",
        }

        for yaml_key, attr in mappings.items():
            if yaml_key in data:
                setattr(self.config, attr, str(data[yaml_key]))
                self.config._sources[attr] = source_name

        for yaml_key in ("sort_entries", "ascii_icons"):
            if yaml_key in data:
                setattr(self.config, yaml_key, bool(data[yaml_key]))
                self.config._sources[yaml_key] = source_name

        # Handle nested watch settings
        if "watch" in data and isinstance(data["watch"], dict):
            watch = data["watch"]
            if "debounce" in watch:
                try:
                    self.config.watch_debounce = float(watch["debounce"])
                except (TypeError, ValueError) as e:
                    raise invalid_config_error(path, e)
                self.config._sources["watch_debounce"] = source_name

        # Store any extra settings
        known_keys = set(mappings) | {"sort_entries", "ascii_icons", "watch"}
        for key, value in data.items():
            if key not in known_keys:
                self.config.extra[key] = value

    def _load_env_vars(self):
        """Load from environment variables (highest priority)"""
        env_map = {
            "LESSONTREE_CONTENT_DIR": "content_dir",
            "LESSONTREE_MANIFEST": "manifest_path",
            "LESSONTREE_MASTER_OUTPUT": "master_output",
            "LESSONTREE_MASTER_TITLE": "master_title",
        }
        for env_name, attr in env_map.items():
            if os.environ.get(env_name):
                setattr(self.config, attr, os.environ[env_name])
                self.config._sources[attr] = f"env:{env_name}"

        sort_entries = os.environ.get("LESSONTREE_SORT")
        if sort_entries is not None:
            self.config.sort_entries = sort_entries.lower() in TRUTHY
            self.config._sources["sort_entries"] = "env:LESSONTREE_SORT"

        ascii_icons = os.environ.get("LESSONTREE_ASCII")
        if ascii_icons is not None:
            self.config.ascii_icons = ascii_icons.lower() in TRUTHY
            self.config._sources["ascii_icons"] = "env:LESSONTREE_ASCII"


# ============================================================================
# Public API
# ============================================================================

def get_config(project_dir: Optional[Path] = None) -> LessonTreeConfig:
    """
    Get complete LessonTree configuration.

    Args:
        project_dir: Repository root (defaults to cwd)

    Returns:
        LessonTreeConfig with all settings resolved

    Raises:
        ConfigurationError: If a config file cannot be parsed
    """
    loader = ConfigLoader(project_dir)
    return loader.load()


def create_config_template(include_comments: bool = True) -> str:
    """
    Generate a lessontree.yaml template.

    Args:
        include_comments: Whether to include explanatory comments

    Returns:
        YAML string ready to write to file
    """
    if include_comments:
        return '''# LessonTree Configuration File

# Folder holding the unit/lesson/tab/card tree
content_dir: usii

# Where the JSON manifest is written
manifest_path: usii/manifest.json

# Concatenated document for PDF export
master_output: master.html
master_title: "US II - Master Document"

# Sort directory entries by name (false keeps raw listing order)
sort_entries: true

# Use [OK]/[X] instead of emoji in console output
ascii_icons: false

# Watch mode settings
watch:
  debounce: 2.0        # Seconds to wait after a change before rebuilding
'''
    else:
        return '''content_dir: usii
manifest_path: usii/manifest.json
master_output: master.html
master_title: "US II - Master Document"
sort_entries: true
ascii_icons: false
watch:
  debounce: 2.0
'''
