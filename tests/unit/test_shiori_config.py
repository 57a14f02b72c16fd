"""Tests for configuration loading."""

from pathlib import Path

import pytest

from shiori.api import ConfigManager, ShioriConfig, find_config_file, load_config
from shiori.errors import ConfigurationError


class TestConfigManager:
    """ConfigManager tests."""

    def test_defaults_without_file(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml")
        assert config == ShioriConfig()
        assert config.max_concurrent == 10
        assert config.enabled_validators is None

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "shiori.yaml"
        path.write_text(
            "repo_root: content\n"
            "max_concurrent: 4\n"
            "max_errors: 100\n"
            "strict_mode: true\n"
            "enabled_validators: [naming, duplicate_id]\n"
            "log_level: INFO\n"
            "use_git: false\n",
            encoding="utf-8",
        )
        config = ConfigManager.from_yaml(path).config
        assert config.repo_root == tmp_path / "content"
        assert config.max_concurrent == 4
        assert config.max_errors == 100
        assert config.strict_mode is True
        assert config.enabled_validators == ["naming", "duplicate_id"]
        assert config.log_level == "info"
        assert config.use_git is False

    def test_absolute_root_kept(self, tmp_path):
        path = tmp_path / "shiori.yaml"
        path.write_text(f"repo_root: {tmp_path / 'docs'}\n", encoding="utf-8")
        assert load_config(path).repo_root == tmp_path / "docs"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "shiori.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path).repo_root == tmp_path

    @pytest.mark.parametrize(
        "content",
        [
            "max_concurrent: 0\n",
            "max_concurrent: many\n",
            "max_errors: -1\n",
            "log_level: loud\n",
            "enabled_validators: naming\n",
            "enabled_validators: [spelling]\n",
            "- just\n- a list\n",
            "repo_root: [unclosed\n",
        ],
    )
    def test_invalid(self, tmp_path, content):
        path = tmp_path / "shiori.yaml"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_save_roundtrip(self, tmp_path):
        manager = ConfigManager.from_dict({"max_errors": 5, "use_git": False})
        target = tmp_path / "out" / "shiori.yaml"
        manager.save(target)
        loaded = load_config(target)
        assert loaded.max_errors == 5
        assert loaded.use_git is False

    def test_save_without_path(self):
        manager = ConfigManager.from_config(ShioriConfig())
        with pytest.raises(ValueError):
            manager.save()

    def test_string_root(self):
        assert ShioriConfig(repo_root="docs").repo_root == Path("docs")


class TestFindConfigFile:
    """find_config_file tests."""

    def test_found(self, tmp_path):
        (tmp_path / ".shiori.yaml").write_text("", encoding="utf-8")
        assert find_config_file(tmp_path) == tmp_path / ".shiori.yaml"

    def test_preference(self, tmp_path):
        (tmp_path / ".shiori.yaml").write_text("", encoding="utf-8")
        (tmp_path / "shiori.yaml").write_text("", encoding="utf-8")
        assert find_config_file(tmp_path) == tmp_path / "shiori.yaml"

    def test_missing(self, tmp_path):
        assert find_config_file(tmp_path) is None
