"""
Configuration management for gridkernel.

Usage:
    from gridkernel.core.config import ConfigManager

    config = ConfigManager(Path("gridkernel.toml")).load_config()
    identity = config.node.to_identity()
"""

from gridkernel.exceptions.config import (
    ConfigurationError,
    ConfigurationValidationError,
    InvalidConfigurationError,
    MissingConfigurationError,
)

from .manager import ConfigManager, default_config_file
from .models import (
    ContextConfig,
    GridKernelConfig,
    GridKernelSettings,
    LoggingConfig,
    LogLevel,
    MetricsConfig,
    NodeConfig,
)


def get_config_manager(config_file=None):
    """Get a config manager instance."""
    return ConfigManager(config_file)


__all__ = [
    "GridKernelConfig",
    "NodeConfig",
    "ContextConfig",
    "LoggingConfig",
    "MetricsConfig",
    "LogLevel",
    "ConfigManager",
    "GridKernelSettings",
    "default_config_file",
    "get_config_manager",
    "ConfigurationError",
    "InvalidConfigurationError",
    "MissingConfigurationError",
    "ConfigurationValidationError",
]
