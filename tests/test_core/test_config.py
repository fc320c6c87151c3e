"""
Tests for bundlerepo.core.config
==================================

These tests verify that the configuration system works correctly:
    - Default values are sensible
    - Plugin property maps are converted (strings, aliases, passthrough)
    - Environment variables and YAML files are honoured
    - Invalid values raise ConfigurationError
"""

from pathlib import Path

import pytest
import yaml

from bundlerepo.core.config import RepositoryConfig, load_config
from bundlerepo.core.enums import ConflictPolicy
from bundlerepo.core.exceptions import ConfigurationError


# =============================================================================
# Test: Default Configuration
# =============================================================================
class TestDefaultConfig:
    """Tests for default configuration values."""

    def test_defaults(self) -> None:
        config = RepositoryConfig()
        assert config.name == "local"
        assert config.local is None
        assert config.type == "R5"
        assert config.overwrite is True
        assert config.conflict_policy is ConflictPolicy.SKIP
        assert config.pretty is False
        assert config.locations == []
        assert config.lock is False
        assert config.options == {}

    def test_local_accepts_strings(self, tmp_path: Path) -> None:
        config = RepositoryConfig(local=str(tmp_path))
        assert config.local == tmp_path


# =============================================================================
# Test: Plugin Properties
# =============================================================================
class TestFromProperties:
    """Tests for RepositoryConfig.from_properties."""

    def test_string_values_are_converted(self) -> None:
        config = RepositoryConfig.from_properties(
            {"local": "/srv/repo", "type": "R5", "overwrite": "false", "pretty": "true"}
        )
        assert config.local == Path("/srv/repo")
        assert config.overwrite is False
        assert config.pretty is True

    def test_locations_split_on_commas(self) -> None:
        config = RepositoryConfig.from_properties(
            {"locations": "file:///a/index.xml.gz, file:///b/index.xml.gz"}
        )
        assert config.locations == ["file:///a/index.xml.gz", "file:///b/index.xml.gz"]

    def test_camel_case_aliases(self) -> None:
        config = RepositoryConfig.from_properties(
            {"indexName": "repo.xml.gz", "conflictPolicy": "fail"}
        )
        assert config.index_name == "repo.xml.gz"
        assert config.conflict_policy is ConflictPolicy.FAIL

    def test_unknown_keys_become_generator_options(self) -> None:
        config = RepositoryConfig.from_properties({"type": "R5", "compression": "max"})
        assert config.options == {"compression": "max"}

    def test_invalid_value_raises_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            RepositoryConfig.from_properties({"overwrite": "perhaps"})
        assert exc_info.value.error_code == "CONFIG_ERROR"

    def test_empty_type_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            RepositoryConfig.from_properties({"type": ""})


# =============================================================================
# Test: Environment & YAML
# =============================================================================
class TestConfigSources:
    """Tests for environment variable and YAML loading."""

    def test_env_var_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BUNDLEREPO_OVERWRITE", "false")
        monkeypatch.setenv("BUNDLEREPO_TYPE", "Custom")
        config = RepositoryConfig()
        assert config.overwrite is False
        assert config.type == "Custom"

    def test_load_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bundlerepo.yaml"
        path.write_text(yaml.safe_dump({
            "name": "release",
            "local": str(tmp_path),
            "overwrite": False,
            "options": {"mode": "strict"},
        }))

        config = load_config(str(path))

        assert config.name == "release"
        assert config.local == tmp_path
        assert config.overwrite is False
        assert config.options == {"mode": "strict"}

    def test_missing_explicit_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_malformed_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("name: [unclosed")
        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_no_file_uses_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert load_config().type == "R5"
