# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
RegKeeper Configuration System

Centralized configuration management supporting:
- Environment variables (REGKEEPER_*)
- Config files (~/.regkeeper/config.yaml, ./.regkeeper.yaml)
- Programmatic defaults
- Pydantic validation
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigFileError, ConfigValidationError

logger = logging.getLogger("regkeeper.config")


# ============================================================================
# Configuration Models
# ============================================================================


class PathsConfig(BaseModel):
    """Path configuration"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    home: Path = Field(
        default_factory=lambda: Path.home() / ".regkeeper",
        description="RegKeeper home directory",
    )
    log_dir: Path = Field(
        default_factory=lambda: Path.home() / ".regkeeper" / "logs",
        description="Log files directory",
    )

    @field_validator("*", mode="before")
    @classmethod
    def ensure_path(cls, v):
        """Convert strings to Path objects"""
        if isinstance(v, str):
            return Path(v).expanduser()
        return v


class ObservabilityConfig(BaseModel):
    """Logging configuration"""

    log_level: str = Field(default="INFO", description="Logging level")
    file_logging: bool = Field(
        default=True, description="Write rotating log files to paths.log_dir"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v_upper


class ProviderConfig(BaseModel):
    """Provider selection"""

    name: str = Field(default="memory", description="Registered provider name")
    state_file: Optional[Path] = Field(
        default=None, description="YAML snapshot for the memory provider"
    )


class ReconcileConfig(BaseModel):
    """Purge generation behaviour"""

    fail_fast: bool = Field(
        default=False,
        description="Abort compilation on the first provider failure "
        "instead of skipping only the affected key",
    )


class RegKeeperConfig(BaseModel):
    """Complete RegKeeper configuration"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    paths: PathsConfig = Field(
        default_factory=PathsConfig, description="Path configuration"
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig, description="Logging configuration"
    )
    provider: ProviderConfig = Field(
        default_factory=ProviderConfig, description="Provider configuration"
    )
    reconcile: ReconcileConfig = Field(
        default_factory=ReconcileConfig, description="Reconciliation configuration"
    )


# ============================================================================
# Configuration Loader
# ============================================================================


def _env_flag(value: str) -> bool:
    return value.lower() == "true"


class ConfigLoader:
    """Load configuration from multiple sources"""

    @staticmethod
    def load_from_env() -> Dict[str, Any]:
        """Load configuration from environment variables"""
        config: Dict[str, Any] = {}

        home = os.getenv("REGKEEPER_HOME")
        if home:
            config.setdefault("paths", {})["home"] = home

        log_dir = os.getenv("REGKEEPER_LOG_DIR")
        if log_dir:
            config.setdefault("paths", {})["log_dir"] = log_dir

        log_level = os.getenv("REGKEEPER_LOG_LEVEL")
        if log_level:
            config.setdefault("observability", {})["log_level"] = log_level

        no_file_logs = os.getenv("REGKEEPER_NO_FILE_LOGS")
        if no_file_logs:
            config.setdefault("observability", {})["file_logging"] = not _env_flag(
                no_file_logs
            )

        provider = os.getenv("REGKEEPER_PROVIDER")
        if provider:
            config.setdefault("provider", {})["name"] = provider

        state_file = os.getenv("REGKEEPER_STATE_FILE")
        if state_file:
            config.setdefault("provider", {})["state_file"] = state_file

        fail_fast = os.getenv("REGKEEPER_FAIL_FAST")
        if fail_fast:
            config.setdefault("reconcile", {})["fail_fast"] = _env_flag(fail_fast)

        return config

    @staticmethod
    def load_from_file(file_path: Path) -> Dict[str, Any]:
        """
        Load configuration from a YAML file

        Raises:
            ConfigFileError: If the file exists but cannot be parsed
        """
        if not file_path.exists():
            return {}

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigFileError(
                f"Failed to load config file {file_path}: {e}",
                path=str(file_path),
                cause=e,
            )

        if not isinstance(data, dict):
            raise ConfigFileError(
                f"Config file {file_path} must contain a mapping", path=str(file_path)
            )
        return data

    @staticmethod
    def merge_configs(*configs: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge multiple configuration dictionaries"""
        result: Dict[str, Any] = {}
        for config in configs:
            for key, value in config.items():
                if (
                    key in result
                    and isinstance(result[key], dict)
                    and isinstance(value, dict)
                ):
                    result[key] = ConfigLoader.merge_configs(result[key], value)
                else:
                    result[key] = value
        return result


# ============================================================================
# Global Configuration Instance
# ============================================================================

_config: Optional[RegKeeperConfig] = None


def get_config() -> RegKeeperConfig:
    """
    Get global RegKeeper configuration

    Configuration is loaded from (in order of precedence):
    1. Environment variables (REGKEEPER_*)
    2. .regkeeper.yaml in current directory
    3. ~/.regkeeper/config.yaml
    4. Default values

    Returns:
        RegKeeperConfig instance
    """
    global _config

    if _config is None:
        _config = load_config()

    return _config


def load_config(
    config_file: Optional[Path] = None, env_override: bool = True
) -> RegKeeperConfig:
    """
    Load configuration from all sources

    Args:
        config_file: Optional specific config file to load
        env_override: Whether environment variables override file config

    Returns:
        RegKeeperConfig instance

    Raises:
        ConfigFileError: If a config file cannot be read
        ConfigValidationError: If the merged configuration is invalid
    """
    configs = []

    default_locations = [
        Path.home() / ".regkeeper" / "config.yaml",
        Path.cwd() / ".regkeeper.yaml",
    ]

    for location in default_locations:
        file_config = ConfigLoader.load_from_file(location)
        if file_config:
            configs.append(file_config)
            logger.debug(f"Loaded config from {location}")

    if config_file:
        file_config = ConfigLoader.load_from_file(Path(config_file))
        if file_config:
            configs.append(file_config)
            logger.debug(f"Loaded config from {config_file}")

    if env_override:
        env_config = ConfigLoader.load_from_env()
        if env_config:
            configs.append(env_config)
            logger.debug("Loaded config from environment")

    merged = ConfigLoader.merge_configs(*configs) if configs else {}

    try:
        return RegKeeperConfig(**merged)
    except PydanticValidationError as e:
        errors = [
            {"field": ".".join(str(loc) for loc in error["loc"]), "msg": error["msg"]}
            for error in e.errors()
        ]
        raise ConfigValidationError(
            "Config validation failed", details={"errors": errors}, cause=e
        )


def reload_config() -> RegKeeperConfig:
    """Reload global configuration"""
    global _config
    _config = load_config()
    logger.info("Configuration reloaded")
    return _config

