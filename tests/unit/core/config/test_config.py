"""Tests for configuration loading, overrides and saving."""

import tomllib

import pytest
from pydantic import ValidationError

from gridkernel.core.config import (
    ConfigManager,
    ConfigurationError,
    ConfigurationValidationError,
    GridKernelConfig,
    InvalidConfigurationError,
    LogLevel,
    MissingConfigurationError,
    NodeConfig,
)
from gridkernel.core.identity import NodeIdentity

VALID_TOML = """
[node]
node_id = "catalog-api"
studio_id = "main-studio"
environment = "production"

[context]
max_header_length = 512

[logging]
level = "debug"
format = "json"
"""


def write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


@pytest.mark.unit
class TestConfigModels:
    """Test pydantic configuration models."""

    def test_defaults(self):
        config = GridKernelConfig()

        assert config.node.node_id is None
        assert config.context.max_header_length == 256
        assert config.logging.level is LogLevel.INFO
        assert config.logging.output == ["console"]
        assert config.metrics.enabled is False

    @pytest.mark.parametrize("node_id", ["Catalog", "catalog_api", "-catalog", "ab", "catalog--api"])
    def test_invalid_node_ids(self, node_id):
        with pytest.raises(ValidationError):
            NodeConfig(node_id=node_id)

    def test_to_identity(self):
        node = NodeConfig(node_id="catalog-api", studio_id="main", environment="prod")

        assert node.to_identity() == NodeIdentity("catalog-api", "main", "prod")

    def test_to_identity_requires_all_fields(self):
        node = NodeConfig(node_id="catalog-api", studio_id="  ")

        with pytest.raises(MissingConfigurationError) as exc_info:
            node.to_identity()

        assert exc_info.value.field == "node.studio_id"

    @pytest.mark.parametrize("length", [8, 10000])
    def test_header_length_bounds(self, length):
        with pytest.raises(ValidationError):
            GridKernelConfig(context={"max_header_length": length})

    def test_unknown_section_rejected(self):
        with pytest.raises(ValidationError):
            GridKernelConfig(tracing={})

    def test_invalid_logging_format(self):
        with pytest.raises(ValidationError):
            GridKernelConfig(logging={"format": "xml"})


@pytest.mark.unit
class TestConfigManagerLoad:
    """Test loading from TOML and the environment."""

    def test_missing_file_gives_defaults(self, config_file, clean_environment):
        config = ConfigManager(config_file).load_config()

        assert config == GridKernelConfig()

    def test_load_toml(self, config_file, clean_environment):
        write(config_file, VALID_TOML)

        config = ConfigManager(config_file).load_config()

        assert config.node.node_id == "catalog-api"
        assert config.node.environment == "production"
        assert config.context.max_header_length == 512
        assert config.logging.level is LogLevel.DEBUG
        assert config.logging.format == "json"

    def test_load_is_cached_until_reload(self, config_file, clean_environment):
        write(config_file, VALID_TOML)
        manager = ConfigManager(config_file)
        first = manager.load_config()

        write(config_file, VALID_TOML.replace("512", "1024"))

        assert manager.load_config() is first
        assert manager.reload().context.max_header_length == 1024

    def test_environment_overrides_file(self, config_file, clean_environment, monkeypatch):
        write(config_file, VALID_TOML)
        monkeypatch.setenv("GRIDKERNEL_NODE_ID", "billing-api")
        monkeypatch.setenv("GRIDKERNEL_LOG_LEVEL", "warning")
        monkeypatch.setenv("GRIDKERNEL_MAX_HEADER_LENGTH", "1024")
        monkeypatch.setenv("GRIDKERNEL_METRICS_ENABLED", "true")

        config = ConfigManager(config_file).load_config()

        assert config.node.node_id == "billing-api"
        assert config.node.studio_id == "main-studio"
        assert config.logging.level is LogLevel.WARNING
        assert config.context.max_header_length == 1024
        assert config.metrics.enabled is True

    def test_invalid_toml(self, config_file, clean_environment):
        write(config_file, "[node\nnode_id = ")

        with pytest.raises(InvalidConfigurationError) as exc_info:
            ConfigManager(config_file).load_config()

        assert "Invalid TOML syntax" in str(exc_info.value)

    def test_validation_errors_collected(self, config_file, clean_environment):
        write(config_file, '[node]\nnode_id = "Bad_Id"\n\n[context]\nmax_header_length = 1\n')

        with pytest.raises(ConfigurationValidationError) as exc_info:
            ConfigManager(config_file).load_config()

        errors = exc_info.value.errors
        assert len(errors) == 2
        assert any(error.startswith("node.node_id") for error in errors)
        assert any(error.startswith("context.max_header_length") for error in errors)
        assert isinstance(exc_info.value, ConfigurationError)


@pytest.mark.unit
class TestConfigManagerSave:
    def test_save_and_load_back(self, config_file, clean_environment):
        manager = ConfigManager(config_file)
        config = GridKernelConfig(
            node={"node_id": "catalog-api", "studio_id": "main", "environment": "dev"}
        )

        manager.save_config(config)

        with open(config_file, "rb") as f:
            data = tomllib.load(f)
        assert data["node"]["node_id"] == "catalog-api"
        assert "file_path" not in data["logging"]
        assert ConfigManager(config_file).load_config() == config

    def test_save_creates_parent_directories(self, temp_dir, clean_environment):
        path = temp_dir / "a" / "b" / "config.toml"

        ConfigManager(path).save_config(GridKernelConfig())

        assert path.exists()
