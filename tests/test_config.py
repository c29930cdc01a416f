"""Tests for tinyhooks configuration loading."""

import logging
from pathlib import Path

import pytest

from tinyhooks.config import (
    TinyHooksConfig,
    clear_config_instance,
    get_config,
    set_config_instance,
)
from tinyhooks.errors import ConfigurationError
from tinyhooks.terminators import Terminator


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Remove TINYHOOKS_* variables and point HOME at an empty directory."""
    for key in ("TINYHOOKS_CONFIG_DIR", "TINYHOOKS_DEBUG", "TINYHOOKS_PUBLIC_ONLY", "TINYHOOKS_DEFAULT_TERMINATOR"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    clear_config_instance()
    yield
    clear_config_instance()


def write_config(directory: Path, body: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "tinyhooks.yaml"
    path.write_text(body)
    return path


class TestTinyHooksConfig:
    def test_defaults(self, clean_env):
        config = TinyHooksConfig()

        assert config.debug is False
        assert config.log_level == "INFO"
        assert config.default_terminator is Terminator.ABORT
        assert config.public_only is False

    def test_environment_overrides(self, clean_env, monkeypatch):
        monkeypatch.setenv("TINYHOOKS_PUBLIC_ONLY", "true")
        monkeypatch.setenv("TINYHOOKS_DEFAULT_TERMINATOR", "return_false")

        config = TinyHooksConfig()

        assert config.public_only is True
        assert config.default_terminator is Terminator.RETURN_FALSE

    def test_effective_log_level(self, clean_env):
        assert TinyHooksConfig(log_level="warning").effective_log_level == "WARNING"
        assert TinyHooksConfig(log_level="warning", debug=True).effective_log_level == "DEBUG"


class TestFromYaml:
    def test_loads_section(self, clean_env, tmp_path):
        path = write_config(
            tmp_path,
            "tinyhooks:\n  debug: true\n  log_level: ERROR\n  default_terminator: return_false\n  public_only: true\n",
        )

        config = TinyHooksConfig.from_yaml(path)

        assert config.config_path == path
        assert config.debug is True
        assert config.log_level == "ERROR"
        assert config.default_terminator is Terminator.RETURN_FALSE
        assert config.public_only is True

    def test_missing_file_uses_defaults(self, clean_env, tmp_path):
        config = TinyHooksConfig.from_yaml(tmp_path / "absent.yaml")

        assert config.public_only is False
        assert config.config_path == tmp_path / "absent.yaml"

    def test_empty_file_uses_defaults(self, clean_env, tmp_path):
        config = TinyHooksConfig.from_yaml(write_config(tmp_path, ""))

        assert config.default_terminator is Terminator.ABORT

    def test_invalid_section_is_ignored(self, clean_env, tmp_path, caplog):
        path = write_config(tmp_path, "tinyhooks: [1, 2]\n")

        with caplog.at_level(logging.WARNING):
            config = TinyHooksConfig.from_yaml(path)

        assert config.public_only is False
        assert "Invalid tinyhooks config format" in caplog.text

    def test_invalid_terminator_raises(self, clean_env, tmp_path):
        path = write_config(tmp_path, "tinyhooks:\n  default_terminator: throw\n")

        with pytest.raises(ConfigurationError):
            TinyHooksConfig.from_yaml(path)


class TestGetConfig:
    def test_config_dir_from_environment(self, clean_env, monkeypatch, tmp_path):
        write_config(tmp_path / "conf", "tinyhooks:\n  public_only: true\n")
        monkeypatch.setenv("TINYHOOKS_CONFIG_DIR", str(tmp_path / "conf"))

        config = get_config()

        assert config.public_only is True
        assert config.config_path == tmp_path / "conf" / "tinyhooks.yaml"

    def test_home_directory_fallback(self, clean_env, tmp_path):
        write_config(tmp_path / "home" / ".tinyhooks", "tinyhooks:\n  log_level: DEBUG\n")

        assert get_config().log_level == "DEBUG"

    def test_defaults_when_nothing_found(self, clean_env, tmp_path):
        config = get_config()

        assert config.public_only is False
        assert config.config_path == tmp_path / "home" / ".tinyhooks" / "tinyhooks.yaml"

    def test_instance_is_cached(self, clean_env):
        assert get_config() is get_config()

    def test_set_config_instance(self, clean_env):
        config = TinyHooksConfig(public_only=True)
        set_config_instance(config)

        assert get_config() is config
