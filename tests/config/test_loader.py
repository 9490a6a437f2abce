"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence and error mapping
"""

from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from linkcheck.config.loader import (
    GLOBAL_CONFIG_PATH,
    _deep_merge,
    _load_yaml,
    detect_java_home,
    load_config,
)
from linkcheck.core.errors import ConfigError, ErrorCode


@pytest.fixture(autouse=True)
def clean_env() -> Generator[None, None, None]:
    """Remove LINKCHECK__* env vars for clean tests."""
    orig = {k: v for k, v in os.environ.items() if k.startswith("LINKCHECK__")}
    for k in orig:
        del os.environ[k]
    yield
    for k in [k for k in os.environ if k.startswith("LINKCHECK__")]:
        del os.environ[k]
    os.environ.update(orig)


@pytest.fixture
def no_global(tmp_path: Path) -> Generator[None, None, None]:
    """Point the global config at a file that does not exist."""
    with patch("linkcheck.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
        yield


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        """Returns empty dict when file doesn't exist."""
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        """Loads valid YAML content."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("check:\n  whitelist_to:\n    - javax/\n")

        assert _load_yaml(yaml_file) == {"check": {"whitelist_to": ["javax/"]}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        """Returns empty dict for empty file."""
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        """Raises ConfigError for invalid YAML syntax."""
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("check:\n  classpath:\n    - invalid: [unclosed")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        """A top-level list is rejected."""
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        """Override values replace base values."""
        assert _deep_merge({"a": 1}, {"a": 2}) == {"a": 2}

    def test_nested_sections_merge(self) -> None:
        """Nested dicts merge key by key."""
        base = {"check": {"java_home": "/jdk", "classpath": ["a"]}}
        override = {"check": {"classpath": ["b"]}}

        assert _deep_merge(base, override) == {"check": {"java_home": "/jdk", "classpath": ["b"]}}

    def test_base_not_mutated(self) -> None:
        """The base dict is left untouched."""
        base = {"check": {"java_home": "/jdk"}}
        _deep_merge(base, {"check": {"java_home": "/other"}})
        assert base == {"check": {"java_home": "/jdk"}}


class TestLoadConfig:
    """Tests for load_config function."""

    @pytest.mark.usefixtures("no_global")
    def test_defaults_without_files(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Built-in defaults apply when no config exists."""
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config.logging.level == "WARNING"
        assert config.check.whitelist_from == []
        assert config.check.java_home is None
        assert config.discovery.artifacts_dir is None

    @pytest.mark.usefixtures("no_global")
    def test_project_file_in_cwd_loaded(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """linkcheck.yaml in the working directory is picked up."""
        (tmp_path / "linkcheck.yaml").write_text(
            "check:\n  whitelist_to: [javax.annotation]\ndiscovery:\n  artifacts_dir: /build\n"
        )
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config.check.whitelist_to == ["javax/annotation"]
        assert config.discovery.artifacts_dir == "/build"

    @pytest.mark.usefixtures("no_global")
    def test_explicit_missing_file_raises(self, tmp_path: Path) -> None:
        """An explicit config path must exist."""
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "missing.yaml")
        assert exc_info.value.code == ErrorCode.CONFIG_FILE_NOT_FOUND

    def test_global_then_project_merge(self, tmp_path: Path) -> None:
        """Project settings override global ones section by section."""
        global_file = tmp_path / "global.yaml"
        global_file.write_text("check:\n  java_home: /jdk\nlogging:\n  level: INFO\n")
        project_file = tmp_path / "project.yaml"
        project_file.write_text("logging:\n  level: DEBUG\n")

        with patch("linkcheck.config.loader.GLOBAL_CONFIG_PATH", global_file):
            config = load_config(project_file)

        assert config.check.java_home == "/jdk"
        assert config.logging.level == "DEBUG"

    @pytest.mark.usefixtures("no_global")
    def test_env_overrides_yaml(self, tmp_path: Path) -> None:
        """Environment variables beat YAML values."""
        project_file = tmp_path / "project.yaml"
        project_file.write_text("logging:\n  level: INFO\n")
        os.environ["LINKCHECK__LOGGING__LEVEL"] = "ERROR"

        config = load_config(project_file)

        assert config.logging.level == "ERROR"

    @pytest.mark.usefixtures("no_global")
    def test_kwargs_override_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Direct kwargs have the highest precedence."""
        monkeypatch.chdir(tmp_path)
        os.environ["LINKCHECK__LOGGING__LEVEL"] = "ERROR"

        config = load_config(logging={"level": "DEBUG"})

        assert config.logging.level == "DEBUG"

    @pytest.mark.usefixtures("no_global")
    def test_invalid_value_mapped_to_config_error(self, tmp_path: Path) -> None:
        """Validation failures surface as CONFIG_INVALID_VALUE."""
        project_file = tmp_path / "project.yaml"
        project_file.write_text("logging:\n  level: LOUD\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(project_file)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "logging" in exc_info.value.details["field"]


class TestGlobalConfigPath:
    """Tests for GLOBAL_CONFIG_PATH constant."""

    def test_is_under_user_config_dir(self) -> None:
        """Global config lives in the user's config directory."""
        assert isinstance(GLOBAL_CONFIG_PATH, Path)
        assert GLOBAL_CONFIG_PATH.name == "config.yaml"
        assert "linkcheck" in str(GLOBAL_CONFIG_PATH)


class TestDetectJavaHome:
    """Tests for detect_java_home() function."""

    def test_java_home_env_wins(self, tmp_path: Path) -> None:
        """JAVA_HOME is used without consulting PATH."""
        with patch("linkcheck.config.loader.shutil.which") as which:
            found = detect_java_home({"JAVA_HOME": str(tmp_path / "jdk")})

        assert found == tmp_path / "jdk"
        which.assert_not_called()

    def test_falls_back_to_java_launcher(self, tmp_path: Path) -> None:
        """The JDK is two levels above the resolved java binary."""
        launcher = tmp_path / "jdk-21" / "bin" / "java"
        launcher.parent.mkdir(parents=True)
        launcher.write_text("")

        with patch("linkcheck.config.loader.shutil.which", return_value=str(launcher)):
            found = detect_java_home({"PATH": str(launcher.parent)})

        assert found == (tmp_path / "jdk-21").resolve()

    def test_none_without_env_or_launcher(self) -> None:
        """No JAVA_HOME and no java on PATH means no JDK."""
        with patch("linkcheck.config.loader.shutil.which", return_value=None):
            assert detect_java_home({}) is None
