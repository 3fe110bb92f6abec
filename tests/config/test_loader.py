"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence and error mapping
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from taprunner.config import loader
from taprunner.config.loader import GLOBAL_CONFIG_PATH, _deep_merge, _load_yaml, load_config
from taprunner.config.models import RunnerConfig
from taprunner.core.errors import ConfigError, ErrorCode


@pytest.fixture
def no_global_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the global config at a file that doesn't exist."""
    path = tmp_path / "global" / "config.yaml"
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", path)
    for name in ("TAPRUNNER__RUNNER__SLOW_THRESHOLD_MS", "TAPRUNNER__REPORTER__NAME"):
        monkeypatch.delenv(name, raising=False)
    return path


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        """Returns empty dict when file doesn't exist."""
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        """Loads valid YAML content."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("runner:\n  slow_threshold_ms: 200\n")

        assert _load_yaml(yaml_file) == {"runner": {"slow_threshold_ms": 200}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        """Returns empty dict for empty file."""
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        """Raises ConfigError for invalid YAML syntax."""
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("runner:\n  echo_extra:\n    - invalid: [unclosed")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        """A list at the top level is not a config."""
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="mapping"):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        """Override values replace base values."""
        assert _deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_nested_merge(self) -> None:
        """Nested dicts are merged recursively."""
        base = {"reporter": {"name": "spec", "show_stack": True}}
        override = {"reporter": {"name": "json"}}

        assert _deep_merge(base, override) == {"reporter": {"name": "json", "show_stack": True}}

    def test_override_replaces_non_dict(self) -> None:
        """Non-dict override replaces dict base."""
        base: dict[str, Any] = {"a": {"nested": 1}}

        assert _deep_merge(base, {"a": "simple"}) == {"a": "simple"}

    def test_does_not_mutate_base(self) -> None:
        """Base dict is not mutated."""
        base = {"a": 1}
        _deep_merge(base, {"b": 2})

        assert base == {"a": 1}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_returns_defaults_when_no_files(self, no_global_config: Path) -> None:
        """Returns default config when no config files exist."""
        config = load_config()

        assert config.logging.level == "WARNING"
        assert config.runner.slow_threshold_ms == 75
        assert config.runner.echo_extra is True
        assert config.reporter.name == "spec"

    def test_loads_global_config(self, no_global_config: Path) -> None:
        """Loads the global config file when present."""
        no_global_config.parent.mkdir(parents=True)
        no_global_config.write_text("reporter:\n  name: json\n")

        assert load_config().reporter.name == "json"

    def test_explicit_path_merged_over_global(
        self, no_global_config: Path, tmp_path: Path
    ) -> None:
        """Explicit file overrides the global one key by key."""
        no_global_config.parent.mkdir(parents=True)
        no_global_config.write_text(
            "reporter:\n  name: json\n  show_stack: false\nrunner:\n  slow_threshold_ms: 500\n"
        )
        explicit = tmp_path / "project.yaml"
        explicit.write_text("runner:\n  slow_threshold_ms: 10\nreporter:\n  name: spec\n")

        config = load_config(explicit)

        assert config.runner.slow_threshold_ms == 10
        assert config.reporter.name == "spec"
        assert config.reporter.show_stack is False

    def test_env_vars_override_yaml(
        self, no_global_config: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Environment variables override YAML config."""
        explicit = tmp_path / "config.yaml"
        explicit.write_text("runner:\n  slow_threshold_ms: 10\n")
        monkeypatch.setenv("TAPRUNNER__RUNNER__SLOW_THRESHOLD_MS", "300")

        assert load_config(explicit).runner.slow_threshold_ms == 300

    def test_kwargs_override_all(
        self, no_global_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Keyword arguments override everything."""
        monkeypatch.setenv("TAPRUNNER__RUNNER__SLOW_THRESHOLD_MS", "300")

        config = load_config(runner=RunnerConfig(slow_threshold_ms=5, echo_extra=False))

        assert config.runner.slow_threshold_ms == 5
        assert config.runner.echo_extra is False

    def test_raises_config_error_for_invalid_value(
        self, no_global_config: Path, tmp_path: Path
    ) -> None:
        """Raises ConfigError for invalid config values."""
        explicit = tmp_path / "config.yaml"
        explicit.write_text("runner:\n  slow_threshold_ms: -1\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(explicit)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "runner" in exc_info.value.details["field"]

    def test_raises_config_error_for_unknown_reporter(
        self, no_global_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """An unknown reporter name from the environment is rejected."""
        monkeypatch.setenv("TAPRUNNER__REPORTER__NAME", "dots")

        with pytest.raises(ConfigError):
            load_config()

    def test_raises_file_not_found_for_missing_explicit_path(
        self, no_global_config: Path, tmp_path: Path
    ) -> None:
        """A missing explicit file is an error, unlike a missing global file."""
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "missing.yaml")
        assert exc_info.value.code == ErrorCode.CONFIG_FILE_NOT_FOUND


class TestGlobalConfigPath:
    """Tests for GLOBAL_CONFIG_PATH constant."""

    def test_is_in_user_config(self) -> None:
        """Path is in the user config directory."""
        assert isinstance(GLOBAL_CONFIG_PATH, Path)
        assert GLOBAL_CONFIG_PATH.parts[-2:] == ("taprunner", "config.yaml")
