"""Tests for configuration management."""

import json

import pytest
from prgraph.config import AnalyzerConfig, AnalysisOptions, ConfigManager
from prgraph.exceptions import InvalidConfigError


class TestConfigManager:
    """Tests for ConfigManager."""

    def test_defaults(self):
        config = AnalyzerConfig()
        assert config.dependencies.include_reverse_deps is True
        assert config.dependencies.max_depth == 2
        assert "node_modules" in config.dependencies.ignored_dirs
        assert ".vue" in config.dependencies.scan_extensions
        assert ".json" not in config.dependencies.scan_extensions

    def test_load_yaml(self, tmp_path):
        path = tmp_path / ".prgraph.yaml"
        path.write_text(
            "dependencies:\n"
            "  max_depth: 4\n"
            "  source_roots: [packages]\n"
            "  unknown_key: 1\n"
            "logging:\n"
            "  level: DEBUG\n",
            encoding="utf-8",
        )
        config = ConfigManager().load_from_file(str(path)).config

        assert config.dependencies.max_depth == 4
        assert config.dependencies.source_roots == ["packages"]
        assert config.logging.level == "DEBUG"

    def test_load_json(self, tmp_path):
        path = tmp_path / ".prgraph.json"
        path.write_text(json.dumps({"dependencies": {"include_reverse_deps": False}}), encoding="utf-8")
        config = ConfigManager().load_from_file(str(path)).config
        assert config.dependencies.include_reverse_deps is False

    def test_missing_file_is_ignored(self, tmp_path):
        manager = ConfigManager().load_from_file(str(tmp_path / "nope.yaml"))
        assert manager.config.dependencies.max_depth == 2

    def test_malformed_file(self, tmp_path):
        path = tmp_path / ".prgraph.yaml"
        path.write_text("dependencies: [unclosed", encoding="utf-8")
        with pytest.raises(InvalidConfigError):
            ConfigManager().load_from_file(str(path))

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / ".prgraph.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(InvalidConfigError):
            ConfigManager().load_from_file(str(path))

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PRGRAPH_MAX_DEPTH", "5")
        monkeypatch.setenv("PRGRAPH_INCLUDE_REVERSE_DEPS", "false")
        monkeypatch.setenv("PRGRAPH_LOG_LEVEL", "INFO")
        config = ConfigManager().load_from_env().config

        assert config.dependencies.max_depth == 5
        assert config.dependencies.include_reverse_deps is False
        assert config.logging.level == "INFO"

    def test_invalid_env_depth(self, monkeypatch):
        monkeypatch.setenv("PRGRAPH_MAX_DEPTH", "deep")
        with pytest.raises(InvalidConfigError):
            ConfigManager().load_from_env()

    def test_save_round_trip(self, tmp_path):
        manager = ConfigManager()
        manager.config.dependencies.max_depth = 3
        path = tmp_path / "out.yaml"
        manager.save(str(path))

        loaded = ConfigManager().load_from_file(str(path)).config
        assert loaded.dependencies.max_depth == 3

    def test_auto_discover(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        (tmp_path / "repo").mkdir()
        (tmp_path / "repo" / ".prgraph.yml").write_text("dependencies:\n  max_depth: 7\n", encoding="utf-8")

        config = ConfigManager.auto_discover(tmp_path / "repo").config
        assert config.dependencies.max_depth == 7


class TestAnalysisOptions:
    """Tests for AnalysisOptions."""

    def test_from_config(self):
        config = AnalyzerConfig()
        config.dependencies.max_depth = 1
        options = AnalysisOptions.from_config(config)
        assert options.max_depth == 1
        assert options.include_reverse_deps is True

    @pytest.mark.parametrize("depth", [-1, "2", 1.5, True])
    def test_invalid_depth(self, depth):
        with pytest.raises(InvalidConfigError):
            AnalysisOptions(max_depth=depth)
