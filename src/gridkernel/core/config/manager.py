"""
Configuration manager for gridkernel.

Loads the TOML configuration file, applies GRIDKERNEL_* environment
overrides, validates the result and writes it back.
"""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import tomli_w
from pydantic import ValidationError

from gridkernel.exceptions.config import (
    ConfigurationError,
    ConfigurationValidationError,
    InvalidConfigurationError,
)

from .models import GridKernelConfig, GridKernelSettings


@dataclass
class EnvironmentOverride:
    """Helper for applying environment variable overrides."""

    config_section: Dict[str, Any]
    settings: GridKernelSettings

    def apply_if_set(self, setting_name: str, config_key: str) -> None:
        value = getattr(self.settings, setting_name, None)
        if value is not None:
            self.config_section[config_key] = value

    def apply_string_if_set(self, setting_name: str, config_key: str) -> None:
        value = getattr(self.settings, setting_name, None)
        if value:
            self.config_section[config_key] = value


def default_config_file() -> Path:
    """Standard per-user configuration path."""
    return Path.home() / ".config" / "gridkernel" / "config.toml"


class ConfigManager:
    """Loads, validates and saves gridkernel configuration."""

    def __init__(self, config_file: Optional[Path] = None):
        """
        Args:
            config_file: Path to a config file. If None, uses the per-user default.
        """
        self.config_file = Path(config_file) if config_file else default_config_file()
        self._config: Optional[GridKernelConfig] = None

    def load_config(self) -> GridKernelConfig:
        """Load and validate configuration from file and environment."""
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}
        if self.config_file.exists():
            config_data = self._load_toml_file()

        config_data = self._apply_env_overrides(config_data)

        try:
            self._config = GridKernelConfig(**config_data)
        except ValidationError as e:
            errors = [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            ]
            raise ConfigurationValidationError(errors) from e

        return self._config

    def reload(self) -> GridKernelConfig:
        """Drop the cached configuration and load it again."""
        self._config = None
        return self.load_config()

    def _load_toml_file(self) -> Dict[str, Any]:
        try:
            with open(self.config_file, "rb") as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise InvalidConfigurationError(
                str(self.config_file), f"Invalid TOML syntax: {e}", "valid TOML format"
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read configuration file: {self.config_file}",
                help_text="Check file permissions and path",
            ) from e

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration."""
        settings = GridKernelSettings()

        for section in ("node", "context", "logging", "metrics"):
            config_data.setdefault(section, {})

        node = EnvironmentOverride(config_data["node"], settings)
        node.apply_string_if_set("gridkernel_node_id", "node_id")
        node.apply_string_if_set("gridkernel_studio_id", "studio_id")
        node.apply_string_if_set("gridkernel_environment", "environment")

        logging_override = EnvironmentOverride(config_data["logging"], settings)
        logging_override.apply_string_if_set("gridkernel_log_level", "level")
        logging_override.apply_string_if_set("gridkernel_log_format", "format")

        EnvironmentOverride(config_data["context"], settings).apply_if_set(
            "gridkernel_max_header_length", "max_header_length"
        )
        EnvironmentOverride(config_data["metrics"], settings).apply_if_set(
            "gridkernel_metrics_enabled", "enabled"
        )

        if "level" in config_data["logging"]:
            config_data["logging"]["level"] = str(config_data["logging"]["level"]).upper()

        return config_data

    def _remove_none_values(self, data):
        """Recursively remove None values; TOML has no null."""
        if isinstance(data, dict):
            return {k: self._remove_none_values(v) for k, v in data.items() if v is not None}
        elif isinstance(data, list):
            return [self._remove_none_values(item) for item in data if item is not None]
        else:
            return data

    def save_config(self, config: Optional[GridKernelConfig] = None) -> None:
        """Save configuration to the TOML file."""
        if config is None:
            config = self.load_config()

        config_dict = self._remove_none_values(config.model_dump(mode="json"))

        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "wb") as f:
                tomli_w.dump(config_dict, f)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot write configuration file: {self.config_file}",
                help_text="Check file permissions and path",
            ) from e

        self._config = config
