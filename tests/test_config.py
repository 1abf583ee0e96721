"""Tests for configuration module."""

import json

import pytest
from pydantic import ValidationError

from qa_automation.config import (
    CONFIG_FILENAME,
    ConfigFile,
    NamingStrategy,
    ProjectConfig,
    ScriptLanguage,
    find_project_root,
    load_config,
    read_config_file,
)
from qa_automation.errors import ConfigError


class TestProjectConfig:
    """Tests for ProjectConfig."""

    def test_default_values(self, tmp_path):
        """Test default values are set correctly."""
        config = ProjectConfig(project_root=tmp_path)

        assert config.source_dir == "src"
        assert config.test_output_dir == "tests/e2e"
        assert config.backup_dir == ".qa-backup"
        assert config.naming_strategy == NamingStrategy.COMPONENT_ACTION
        assert config.testid_attribute == "data-testid"
        assert config.backup_before_modify is True
        assert config.base_url == "http://localhost:5173"
        assert config.test_language == ScriptLanguage.TYPESCRIPT
        assert config.backup_root == tmp_path / ".qa-backup"

    def test_loads_from_env(self, monkeypatch, tmp_path):
        """Test that settings load from environment variables."""
        monkeypatch.setenv("QA_AUTOMATION_NAMING_STRATEGY", "hierarchical")
        monkeypatch.setenv("QA_AUTOMATION_TEST_LANGUAGE", "python")

        config = ProjectConfig(project_root=tmp_path)

        assert config.naming_strategy == NamingStrategy.HIERARCHICAL
        assert config.test_language == ScriptLanguage.PYTHON

    def test_rejects_non_http_base_url(self, tmp_path):
        with pytest.raises(ValidationError):
            ProjectConfig(project_root=tmp_path, base_url="localhost:5173")


class TestConfigFile:
    """Tests for the camelCase JSON config file schema."""

    def test_to_settings(self, tmp_path):
        config_file = ConfigFile.model_validate({
            "sourceDir": "app",
            "testOutputDir": "e2e",
            "namingStrategy": {"type": "descriptive"},
            "testidAttribute": "data-qa",
            "backupBeforeModify": False,
            "playwright": {"baseURL": "http://localhost:3000"},
            "somethingElse": True,
        })

        assert config_file.to_settings(tmp_path) == {
            "source_dir": "app",
            "test_output_dir": "e2e",
            "testid_attribute": "data-qa",
            "backup_before_modify": False,
            "naming_strategy": NamingStrategy.DESCRIPTIVE,
            "base_url": "http://localhost:3000",
        }

    def test_invalid_strategy(self):
        with pytest.raises(ValidationError):
            ConfigFile.model_validate({"namingStrategy": {"type": "random"}})


class TestLoadConfig:
    """Tests for load_config and find_project_root."""

    def test_without_config_file(self, tmp_path):
        config = load_config(tmp_path)

        assert config.project_root == tmp_path.resolve()
        assert config.source_dir == "src"

    def test_merges_config_file(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text(json.dumps({
            "sourceDir": "app",
            "namingStrategy": {"type": "hierarchical"},
        }))

        config = load_config(tmp_path)

        assert config.source_dir == "app"
        assert config.naming_strategy == NamingStrategy.HIERARCHICAL

    def test_overrides_win(self, tmp_path):
        """Test explicit overrides beat the config file; None means not given."""
        (tmp_path / CONFIG_FILENAME).write_text(json.dumps({"namingStrategy": {"type": "hierarchical"}}))

        config = load_config(tmp_path, naming_strategy="descriptive", test_language=None)

        assert config.naming_strategy == NamingStrategy.DESCRIPTIVE
        assert config.test_language == ScriptLanguage.TYPESCRIPT

    def test_invalid_config_file_is_ignored(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("{not json")

        config = load_config(tmp_path)

        assert config.naming_strategy == NamingStrategy.COMPONENT_ACTION

    def test_read_config_file_raises_config_error(self, tmp_path):
        path = tmp_path / CONFIG_FILENAME
        path.write_text(json.dumps({"namingStrategy": {"type": "random"}}))

        with pytest.raises(ConfigError):
            read_config_file(path)

    def test_project_root_in_config_file(self, tmp_path):
        (tmp_path / "web").mkdir()
        (tmp_path / CONFIG_FILENAME).write_text(json.dumps({"projectRoot": "web"}))

        assert load_config(tmp_path).project_root == (tmp_path / "web").resolve()

    def test_find_root_by_config_file(self, tmp_path):
        nested = tmp_path / "src" / "pages"
        nested.mkdir(parents=True)
        (tmp_path / CONFIG_FILENAME).write_text("{}")

        assert find_project_root(nested) == tmp_path.resolve()

    def test_find_root_by_workspaces(self, tmp_path):
        nested = tmp_path / "packages" / "web"
        nested.mkdir(parents=True)
        (nested / "package.json").write_text(json.dumps({"name": "web"}))
        (tmp_path / "package.json").write_text(json.dumps({"workspaces": ["packages/*"]}))

        assert find_project_root(nested) == tmp_path.resolve()

    def test_find_root_defaults_to_start(self, tmp_path):
        assert find_project_root(tmp_path) in {tmp_path.resolve(), *tmp_path.resolve().parents}
