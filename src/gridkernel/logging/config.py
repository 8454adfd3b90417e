"""
Logging configuration.

Provides the LoggingConfig used by LoggingManager to build handlers.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union


class LoggingConfig:
    """Configuration for the logging system."""

    def __init__(
        self,
        level: Union[str, int] = logging.INFO,
        format_type: str = "console",  # "console", "json", "rich"
        output: Union[str, List[str]] = "console",  # "console", "file", ["console", "file"]
        file_path: Optional[Path] = None,
        max_file_size: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
        service_name: str = "gridkernel",
        version: str = "unknown",
    ):
        self.level = level if isinstance(level, int) else getattr(logging, level.upper())
        self.format_type = format_type
        self.output = output if isinstance(output, list) else [output]
        self.file_path = Path(file_path) if file_path else None
        self.max_file_size = max_file_size
        self.backup_count = backup_count
        self.service_name = service_name
        self.version = version


def create_default_config() -> LoggingConfig:
    """Create a default logging configuration."""
    return LoggingConfig(
        level=logging.INFO,
        format_type="console",
        output="console",
        service_name="gridkernel",
        version="unknown",
    )


def create_config_from_settings(settings, service_name: str = "gridkernel", version: str = "unknown") -> LoggingConfig:
    """Build a LoggingConfig from the [logging] table of the configuration file."""
    return LoggingConfig(
        level=settings.level.value,
        format_type=settings.format,
        output=list(settings.output),
        file_path=settings.file_path,
        max_file_size=settings.max_file_size,
        backup_count=settings.backup_count,
        service_name=service_name,
        version=version,
    )
