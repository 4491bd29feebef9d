"""
thenable Configuration

This module provides configuration management for thenable.
Includes default configuration, environment-based settings, file loading and
validation.
"""

import json
import os
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .exceptions import ConfigurationError


class QueueBackend(str, Enum):
    """Deferred callback queue implementations"""

    DEFERRED = "deferred"  # in-process FIFO, drained by the host
    ASYNCIO = "asyncio"  # loop.call_soon


def _parse_bool(value: str) -> bool:
    return value.lower() in ["true", "1", "yes"]


def _parse_optional_int(value: str) -> Optional[int]:
    if value.strip().lower() in ["", "none", "null"]:
        return None
    return int(value)


@dataclass
class ThenableConfig:
    """Main configuration class for thenable"""

    # Core settings
    debug: bool = False
    log_level: str = "WARNING"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Scheduling
    queue_backend: QueueBackend = QueueBackend.DEFERRED
    max_drain_callbacks: Optional[int] = None

    # Tracing
    trace_settlements: bool = False


_ENV_MAPPINGS = {
    "THENABLE_DEBUG": ("debug", _parse_bool),
    "THENABLE_LOG_LEVEL": ("log_level", str),
    "THENABLE_LOG_FORMAT": ("log_format", str),
    "THENABLE_QUEUE_BACKEND": ("queue_backend", QueueBackend),
    "THENABLE_MAX_DRAIN_CALLBACKS": ("max_drain_callbacks", _parse_optional_int),
    "THENABLE_TRACE_SETTLEMENTS": ("trace_settlements", _parse_bool),
}

_current_config: Optional[ThenableConfig] = None


def get_default_config() -> ThenableConfig:
    """Get default thenable configuration"""
    return ThenableConfig()


def get_config() -> ThenableConfig:
    """Get the process-wide configuration, loading it from the environment on first use"""
    global _current_config
    if _current_config is None:
        _current_config = load_config_from_env()
    return _current_config


def set_config(config: ThenableConfig) -> None:
    """Replace the process-wide configuration"""
    global _current_config
    _current_config = config


def load_config_from_file(config_path: Union[str, Path]) -> ThenableConfig:
    """
    Load configuration from a JSON or YAML file

    Args:
        config_path: Path to configuration file

    Returns:
        ThenableConfig instance
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        if config_path.suffix.lower() in [".yaml", ".yml"]:
            data = yaml.safe_load(f)
        elif config_path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            raise ConfigurationError(
                f"Unsupported config file format: {config_path.suffix}",
                {"path": str(config_path)},
            )

    # Allow a top-level "thenable:" section
    if isinstance(data, dict) and isinstance(data.get("thenable"), dict):
        data = data["thenable"]

    return _config_from_dict(data or {})


def load_config_from_env() -> ThenableConfig:
    """
    Load configuration from environment variables

    Environment variables are prefixed with THENABLE_
    For example: THENABLE_DEBUG=true, THENABLE_QUEUE_BACKEND=asyncio

    Returns:
        ThenableConfig instance
    """
    config = ThenableConfig()

    for env_var, (attr_name, converter) in _ENV_MAPPINGS.items():
        value = os.getenv(env_var)
        if value is not None:
            try:
                setattr(config, attr_name, converter(value))
            except (ValueError, TypeError) as e:
                raise ConfigurationError(
                    f"Invalid value for {env_var}: {value}. Error: {e}",
                    {"variable": env_var},
                )

    return config


def merge_configs(
    base_config: ThenableConfig, override_config: Dict[str, Any]
) -> ThenableConfig:
    """
    Merge override values into a ThenableConfig instance

    Args:
        base_config: Base configuration
        override_config: Override values as dictionary

    Returns:
        Merged ThenableConfig instance
    """
    config_dict = _config_to_dict(base_config)
    config_dict.update(override_config)
    return _config_from_dict(config_dict)


def validate_config(config: ThenableConfig) -> List[str]:
    """
    Validate configuration and return list of issues

    Args:
        config: Configuration to validate

    Returns:
        List of validation error messages (empty if valid)
    """
    issues = []

    if config.max_drain_callbacks is not None and config.max_drain_callbacks <= 0:
        issues.append("max_drain_callbacks must be positive")

    if not isinstance(config.queue_backend, QueueBackend):
        issues.append(f"Invalid queue_backend: {config.queue_backend}")

    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if config.log_level.upper() not in valid_log_levels:
        issues.append(
            f"Invalid log_level: {config.log_level}. Must be one of {valid_log_levels}"
        )

    return issues


def _config_to_dict(config: ThenableConfig) -> Dict[str, Any]:
    """Convert ThenableConfig to dictionary"""
    result = {}
    for field_def in fields(config):
        value = getattr(config, field_def.name)
        if isinstance(value, Enum):
            value = value.value
        result[field_def.name] = value
    return result


def _config_from_dict(data: Dict[str, Any]) -> ThenableConfig:
    """Create ThenableConfig from dictionary"""
    known = {field_def.name for field_def in fields(ThenableConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {', '.join(unknown)}", {"keys": unknown}
        )

    data = dict(data)
    if "queue_backend" in data:
        try:
            data["queue_backend"] = QueueBackend(data["queue_backend"])
        except ValueError as e:
            raise ConfigurationError(str(e), {"queue_backend": data["queue_backend"]})

    return ThenableConfig(**data)
