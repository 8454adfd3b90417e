"""
Configuration models for gridkernel.

Pydantic models for the TOML configuration file, plus the environment
variable settings that override it.

Example config.toml:

    [node]
    node_id = "catalog-api"
    studio_id = "main-studio"
    environment = "production"

    [context]
    max_header_length = 256

    [logging]
    level = "INFO"
    format = "json"
"""

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gridkernel.constants import (
    DEFAULT_MAX_HEADER_LENGTH,
    MAX_MAX_HEADER_LENGTH,
    MIN_MAX_HEADER_LENGTH,
)
from gridkernel.exceptions.config import MissingConfigurationError

from ..identity import NodeIdentity, validate_node_id


class LogLevel(str, Enum):
    """Valid logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class NodeConfig(BaseModel):
    """Identity of this node. Required before contexts can be created."""

    node_id: Optional[str] = Field(None, description="Kebab-case node identifier")
    studio_id: Optional[str] = Field(None, description="Studio the node belongs to")
    environment: Optional[str] = Field(None, description="Deployment environment")
    version: str = Field("unknown", description="Node version reported in logs and metrics")

    @field_validator("node_id")
    @classmethod
    def validate_node_id(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        is_valid, error = validate_node_id(v)
        if not is_valid:
            raise ValueError(error)
        return v

    @field_validator("studio_id", "environment")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v.strip()) == 0:
            return None
        return v

    def to_identity(self) -> NodeIdentity:
        """Build the process NodeIdentity, failing on missing fields."""
        for name in ("node_id", "studio_id", "environment"):
            if getattr(self, name) is None:
                raise MissingConfigurationError(f"node.{name}")
        return NodeIdentity(self.node_id, self.studio_id, self.environment)


class ContextConfig(BaseModel):
    """Inbound context handling."""

    max_header_length: int = Field(
        DEFAULT_MAX_HEADER_LENGTH,
        ge=MIN_MAX_HEADER_LENGTH,
        le=MAX_MAX_HEADER_LENGTH,
        description="Cap applied to every value read from inbound headers",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Logging level")
    format: str = Field("console", description="Log format: console, json, rich")
    output: List[str] = Field(["console"], description="Log outputs: console, file")
    file_path: Optional[Path] = Field(None, description="Log file path")
    max_file_size: int = Field(
        10 * 1024 * 1024, ge=1024, description="Maximum log file size in bytes"
    )
    backup_count: int = Field(5, ge=1, le=20, description="Number of backup log files to keep")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in ["console", "json", "rich"]:
            raise ValueError("format must be one of: console, json, rich")
        return v

    @field_validator("output")
    @classmethod
    def validate_output(cls, v: List[str]) -> List[str]:
        valid_outputs = {"console", "file"}
        for output in v:
            if output not in valid_outputs:
                raise ValueError(f"output must contain only: {', '.join(sorted(valid_outputs))}")
        return v


class MetricsConfig(BaseModel):
    """Metrics configuration."""

    enabled: bool = Field(False, description="Enable Prometheus metrics collection")
    port: int = Field(8000, ge=1024, le=65535, description="Metrics server port")


class GridKernelConfig(BaseModel):
    """Main gridkernel configuration model."""

    node: NodeConfig = Field(default_factory=NodeConfig)
    context: ContextConfig = Field(default_factory=ContextConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    model_config = {
        "extra": "forbid",
        "validate_assignment": True,
        "str_strip_whitespace": True,
    }


class GridKernelSettings(BaseSettings):
    """Settings that can be overridden by environment variables."""

    gridkernel_node_id: Optional[str] = Field(None, alias="GRIDKERNEL_NODE_ID")
    gridkernel_studio_id: Optional[str] = Field(None, alias="GRIDKERNEL_STUDIO_ID")
    gridkernel_environment: Optional[str] = Field(None, alias="GRIDKERNEL_ENVIRONMENT")
    gridkernel_log_level: Optional[str] = Field(None, alias="GRIDKERNEL_LOG_LEVEL")
    gridkernel_log_format: Optional[str] = Field(None, alias="GRIDKERNEL_LOG_FORMAT")
    gridkernel_max_header_length: Optional[int] = Field(None, alias="GRIDKERNEL_MAX_HEADER_LENGTH")
    gridkernel_metrics_enabled: Optional[bool] = Field(None, alias="GRIDKERNEL_METRICS_ENABLED")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )
