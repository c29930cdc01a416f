"""Configuration management for tinyhooks.

Configuration Discovery Precedence (Highest to Lowest Priority):
===============================================================

1. **TINYHOOKS_CONFIG_DIR Environment Variable** (Highest Priority)
   - Looks for: `${TINYHOOKS_CONFIG_DIR}/tinyhooks.yaml`
   - Use case: Development, testing, per-project settings

2. **~/.tinyhooks Directory** (Fallback)
   - Looks for: `~/.tinyhooks/tinyhooks.yaml`
   - Use case: Per-user defaults

If no `tinyhooks.yaml` is found, default configuration is applied.
Individual settings can also be overridden with `TINYHOOKS_*` environment
variables (e.g. `TINYHOOKS_PUBLIC_ONLY=1`).

Example tinyhooks.yaml:
--------
tinyhooks:
  debug: false
  log_level: INFO
  default_terminator: abort   # or return_false
  public_only: false          # initial mode for newly declared hookable classes
"""

import logging
import os
import threading
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tinyhooks.terminators import Terminator

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "tinyhooks.yaml"


class TinyHooksConfig(BaseSettings):
    """Main configuration for tinyhooks that reads from tinyhooks.yaml."""

    model_config = SettingsConfigDict(
        env_prefix="TINYHOOKS_",
        case_sensitive=False,
        extra="ignore",
    )

    # Core settings
    debug: bool = False
    log_level: str = "INFO"

    # Terminator used by define_hook when none is given
    default_terminator: Terminator = Terminator.ABORT

    # Initial public-only mode for classes that subclass Hookable directly
    public_only: bool = False

    # Path to tinyhooks config
    config_path: Path = Field(default_factory=lambda: Path("./" + CONFIG_FILENAME))

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level.upper()

    @classmethod
    def from_yaml(cls, yaml_path: Path, **kwargs: Any) -> "TinyHooksConfig":
        """Load configuration from tinyhooks.yaml file.

        Args:
            yaml_path: Path to the tinyhooks.yaml file
            **kwargs: Additional keyword arguments

        Returns:
            TinyHooksConfig instance
        """
        instance = cls(config_path=yaml_path, **kwargs)

        if not yaml_path.exists():
            return instance

        with yaml_path.open() as f:
            data = yaml.safe_load(f) or {}

        section = data.get("tinyhooks", {})
        if not isinstance(section, dict):
            logger.warning("Invalid tinyhooks config format in %s: %s", yaml_path, type(section))
            return instance

        if "debug" in section:
            instance.debug = bool(section["debug"])
        if "log_level" in section:
            instance.log_level = str(section["log_level"])
        if "default_terminator" in section:
            instance.default_terminator = Terminator.parse(section["default_terminator"])
        if "public_only" in section:
            instance.public_only = bool(section["public_only"])

        return instance


# Global configuration instance
_config_instance: TinyHooksConfig | None = None
_config_lock = threading.Lock()


def get_config() -> TinyHooksConfig:
    """Get the configuration instance."""
    global _config_instance

    if _config_instance is None:
        with _config_lock:
            # Double-check locking pattern
            if _config_instance is None:
                env_config_dir = os.environ.get("TINYHOOKS_CONFIG_DIR")
                if env_config_dir:
                    config_dir = Path(env_config_dir)
                    logger.info("Using config directory from environment: %s", config_dir)
                else:
                    config_dir = Path.home() / ".tinyhooks"

                yaml_path = config_dir / CONFIG_FILENAME
                if yaml_path.exists():
                    logger.info("Loading tinyhooks config from: %s", yaml_path)
                    _config_instance = TinyHooksConfig.from_yaml(yaml_path)
                else:
                    logger.debug("%s not found, using default config", yaml_path)
                    _config_instance = TinyHooksConfig(config_path=yaml_path)

    return _config_instance


def set_config_instance(config: TinyHooksConfig) -> None:
    """Set the global configuration instance (for testing)."""
    global _config_instance
    _config_instance = config


def clear_config_instance() -> None:
    """Clear the global configuration instance (for testing)."""
    global _config_instance
    _config_instance = None
