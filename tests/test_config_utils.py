# tests/test_config_utils.py
"""
Tests for config_utils.py - Configuration loading with YAML support
"""
import pytest
from pathlib import Path

import yaml

from lessontree.config_utils import (
    LessonTreeConfig,
    ConfigLoader,
    get_config,
    create_config_template,
)
from lessontree.errors import ConfigurationError


class TestLessonTreeConfig:
    """Tests for LessonTreeConfig dataclass"""

    def test_default_values(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = LessonTreeConfig()

        assert config.project_root == tmp_path
        assert config.content_dir == "usii"
        assert config.manifest_path == "usii/manifest.json"
        assert config.master_output == "master.html"
        assert config.sort_entries is True
        assert config.watch_debounce == 2.0

    def test_derived_paths(self, tmp_path):
        config = LessonTreeConfig(project_root=tmp_path)

        assert config.content_root == tmp_path / "usii"
        assert config.manifest_file == tmp_path / "usii" / "manifest.json"
        assert config.master_file == tmp_path / "master.html"

    def test_absolute_paths_kept(self, tmp_path):
        elsewhere = tmp_path / "elsewhere"
        config = LessonTreeConfig(project_root=tmp_path / "proj", content_dir=str(elsewhere))
        assert config.content_root == elsewhere

    def test_source_of_default(self):
        assert LessonTreeConfig().source_of("content_dir") == "default"


class TestConfigLoader:
    """Tests for ConfigLoader class"""

    def test_no_files_gives_defaults(self, tmp_path):
        config = ConfigLoader(tmp_path).load()
        assert config.content_dir == "usii"
        assert config.project_root == tmp_path

    def test_load_from_yaml(self, tmp_path):
        yaml_content = """
content_dir: content/usii
manifest_path: public/manifest.json
master_output: exports/master.html
master_title: "US History II"
sort_entries: false
ascii_icons: true
watch:
  debounce: 0.5
school_name: "From YAML"
"""
        (tmp_path / "lessontree.yaml").write_text(yaml_content)

        config = ConfigLoader(tmp_path).load()

        assert config.content_root == tmp_path / "content" / "usii"
        assert config.manifest_file == tmp_path / "public" / "manifest.json"
        assert config.master_file == tmp_path / "exports" / "master.html"
        assert config.master_title == "US History II"
        assert config.sort_entries is False
        assert config.ascii_icons is True
        assert config.watch_debounce == 0.5
        assert config.extra == {"school_name": "From YAML"}
        assert config.source_of("content_dir") == "lessontree.yaml"

    def test_load_from_yml_extension(self, tmp_path):
        (tmp_path / "lessontree.yml").write_text("content_dir: lessons\n")
        config = ConfigLoader(tmp_path).load()
        assert config.content_dir == "lessons"
        assert config.source_of("content_dir") == "lessontree.yml"

    def test_global_config_lowest_priority(self, tmp_path, isolated_env):
        global_dir = isolated_env / ".lessontree"
        global_dir.mkdir()
        (global_dir / "config.yaml").write_text("content_dir: global_dir\nmaster_title: Global\n")
        (tmp_path / "lessontree.yaml").write_text("content_dir: local_dir\n")

        config = ConfigLoader(tmp_path).load()

        assert config.content_dir == "local_dir"
        assert config.master_title == "Global"
        assert config.source_of("master_title") == "global"

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        (tmp_path / "lessontree.yaml").write_text("content_dir: from_yaml\nsort_entries: true\n")
        monkeypatch.setenv("LESSONTREE_CONTENT_DIR", "from_env")
        monkeypatch.setenv("LESSONTREE_SORT", "off")
        monkeypatch.setenv("LESSONTREE_ASCII", "yes")

        config = ConfigLoader(tmp_path).load()

        assert config.content_dir == "from_env"
        assert config.sort_entries is False
        assert config.ascii_icons is True
        assert config.source_of("content_dir") == "env:LESSONTREE_CONTENT_DIR"

    def test_empty_yaml_file(self, tmp_path):
        (tmp_path / "lessontree.yaml").write_text("")
        assert ConfigLoader(tmp_path).load().content_dir == "usii"

    def test_malformed_yaml_raises(self, tmp_path):
        (tmp_path / "lessontree.yaml").write_text("content_dir: [unclosed\n")
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader(tmp_path).load()
        assert "lessontree.yaml" in str(exc_info.value)

    def test_non_mapping_yaml_raises(self, tmp_path):
        (tmp_path / "lessontree.yaml").write_text("- just\n- a list\n")
        with pytest.raises(ConfigurationError):
            ConfigLoader(tmp_path).load()

    def test_bad_debounce_raises(self, tmp_path):
        (tmp_path / "lessontree.yaml").write_text("watch:\n  debounce: soon\n")
        with pytest.raises(ConfigurationError):
            ConfigLoader(tmp_path).load()


class TestPublicApi:
    def test_get_config_uses_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "lessontree.yaml").write_text("master_title: Here\n")
        config = get_config()
        assert config.project_root == tmp_path
        assert config.master_title == "Here"

    @pytest.mark.parametrize("include_comments", [True, False])
    def test_template_round_trips(self, tmp_path, include_comments):
        text = create_config_template(include_comments=include_comments)
        data = yaml.safe_load(text)
        assert data["content_dir"] == "usii"
        assert data["watch"]["debounce"] == 2.0

        (tmp_path / "lessontree.yaml").write_text(text)
        config = ConfigLoader(tmp_path).load()
        assert config.manifest_path == "usii/manifest.json"
        assert config.extra == {}
