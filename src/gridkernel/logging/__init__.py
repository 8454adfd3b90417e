"""
gridkernel logging package.

Structured logging wired to the GridContext, so every line written while a
context is bound carries its correlation, operation and causation ids:
- config: LoggingConfig
- filters: GridContextFilter, attaching ambient ids to records
- formatters: JSON, console and Rich output
- loggers: GridLogger with keyword context
- manager: LoggingManager singleton and configure_logging()
"""

from .config import LoggingConfig, create_config_from_settings, create_default_config
from .filters import GridContextFilter
from .formatters import StructuredFormatter
from .loggers import GridLogger
from .manager import LoggingManager, configure_logging, logging_manager

get_logger = logging_manager.get_logger

__all__ = [
    "LoggingConfig",
    "LoggingManager",
    "configure_logging",
    "create_config_from_settings",
    "create_default_config",
    "GridLogger",
    "GridContextFilter",
    "get_logger",
    "StructuredFormatter",
]
