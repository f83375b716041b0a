"""
Motor Monitor Utils - Configuration Management
==============================================

Configuration loading, validation, and merging utilities.

Features:
---------
1. YAML Loading
   - Load configuration from YAML files
   - Environment variable substitution

2. Validation
   - Required section checking
   - Type and bounds validation

3. Merging
   - Override defaults with custom configs
   - Deep merge capabilities

Configuration Structure:
-----------------------
kinematics:
  frequency_hz: 0.5
  amplitude: 100.0
  encoder_resolution: 10000
  lead_per_rev: 10.0
  feedback_noise_pulses: 5
  torque_gain: 30.0
  torque_noise_max: 5.0
  torque_limit: 100.0

engine:
  interval_ms: 100
  stop_timeout_s: 2.0
  seed: null

logging:
  level: INFO
  dir: logs
  console_output: true
  file_output: false

Example:
--------
>>> from utils import load_monitor_config
>>>
>>> config = load_monitor_config("config/default.yaml")
>>> config["engine"]["interval_ms"]
100
>>>
>>> # Override specific values
>>> fast = merge_configs(config, {"engine": {"interval_ms": 20}})

Author: Motor Monitor Team
Date: October 19, 2026
"""

import copy
import yaml
import os
import re
from pathlib import Path
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    "kinematics": {
        "frequency_hz": 0.5,
        "amplitude": 100.0,
        "encoder_resolution": 10000,
        "lead_per_rev": 10.0,
        "feedback_noise_pulses": 5,
        "torque_gain": 30.0,
        "torque_noise_max": 5.0,
        "torque_limit": 100.0,
    },
    "engine": {
        "interval_ms": 100,
        "stop_timeout_s": 2.0,
        "seed": None,
    },
    "logging": {
        "level": "INFO",
        "dir": "logs",
        "console_output": True,
        "file_output": False,
    },
}

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigError(Exception):
    """Configuration error."""
    pass


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML config file

    Returns:
        Configuration dictionary

    Raises:
        ConfigError: If file not found, empty, or invalid YAML

    Example:
        >>> config = load_config("config/default.yaml")
        >>> print(config["engine"]["interval_ms"])
        100
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Error loading config: {e}")

    if config is None:
        raise ConfigError(f"Empty config file: {config_path}")

    if not isinstance(config, dict):
        raise ConfigError(f"Config root must be a mapping: {config_path}")

    config = _substitute_env_vars(config)

    logger.info(f"Loaded config from {config_path}")

    return config


def _substitute_env_vars(obj: Any) -> Any:
    """
    Recursively substitute environment variables in config.

    Supports format: ${VAR_NAME:default_value}. A string that is exactly
    one placeholder is re-parsed as YAML so numbers and booleans keep
    their type.

    Args:
        obj: Config object (dict, list, str, etc.)

    Returns:
        Config with substituted variables
    """
    if isinstance(obj, dict):
        return {k: _substitute_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_substitute_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        pattern = r'\$\{(\w+)(?::([^}]*))?\}'

        def replace_var(match):
            var_name = match.group(1)
            default = match.group(2) or ""
            return os.environ.get(var_name, default)

        if re.fullmatch(pattern, obj):
            return yaml.safe_load(re.sub(pattern, replace_var, obj) or "null")
        return re.sub(pattern, replace_var, obj)
    else:
        return obj


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        True if valid

    Raises:
        ConfigError: If validation fails
    """
    required_keys = ["kinematics", "engine"]

    for key in required_keys:
        if key not in config:
            raise ConfigError(f"Missing required key: {key}")

    _validate_kinematics(config.get("kinematics", {}))
    _validate_engine(config.get("engine", {}))
    _validate_logging(config.get("logging", {}))

    logger.debug("Configuration validation passed")
    return True


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate_kinematics(kinematics: Dict[str, Any]) -> None:
    """Validate kinematic model constants."""
    if not isinstance(kinematics, dict):
        raise ConfigError("Kinematics config must be a dictionary")

    for key in ["frequency_hz", "encoder_resolution", "lead_per_rev", "torque_limit"]:
        if key in kinematics:
            value = kinematics[key]
            if not _is_number(value) or value <= 0:
                raise ConfigError(f"kinematics.{key} must be a positive number")

    for key in ["amplitude", "feedback_noise_pulses", "torque_gain", "torque_noise_max"]:
        if key in kinematics:
            value = kinematics[key]
            if not _is_number(value) or value < 0:
                raise ConfigError(f"kinematics.{key} must be a non-negative number")

    if kinematics.get("torque_limit", 100.0) > 100:
        raise ConfigError("kinematics.torque_limit must not exceed 100 %")

    if not isinstance(kinematics.get("encoder_resolution", 1), int):
        raise ConfigError("kinematics.encoder_resolution must be an integer")

    if not isinstance(kinematics.get("feedback_noise_pulses", 0), int):
        raise ConfigError("kinematics.feedback_noise_pulses must be an integer")


def _validate_engine(engine: Dict[str, Any]) -> None:
    """Validate sampling engine settings."""
    if not isinstance(engine, dict):
        raise ConfigError("Engine config must be a dictionary")

    interval = engine.get("interval_ms", 100)
    if not isinstance(interval, int) or isinstance(interval, bool) or interval <= 0:
        raise ConfigError(f"engine.interval_ms must be a positive integer, got {interval!r}")

    timeout = engine.get("stop_timeout_s", 2.0)
    if not _is_number(timeout) or timeout <= 0:
        raise ConfigError("engine.stop_timeout_s must be a positive number")

    seed = engine.get("seed")
    if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool) or seed < 0):
        raise ConfigError("engine.seed must be null or a non-negative integer")


def _validate_logging(logging_config: Dict[str, Any]) -> None:
    """Validate logging settings."""
    if not logging_config:
        return

    if not isinstance(logging_config, dict):
        raise ConfigError("Logging config must be a dictionary")

    level = str(logging_config.get("level", "INFO")).upper()
    if level not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level: {level}. "
            f"Must be one of {VALID_LOG_LEVELS}"
        )


def merge_configs(base: Dict[str, Any],
                  override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge override config into base config.

    Args:
        base: Base configuration
        override: Configuration to merge in (overrides base)

    Returns:
        Merged configuration; neither input is modified

    Example:
        >>> config1 = {"a": 1, "b": {"c": 2}}
        >>> config2 = {"b": {"d": 3}}
        >>> merged = merge_configs(config1, config2)
        >>> merged
        {'a': 1, 'b': {'c': 2, 'd': 3}}
    """
    result = copy.deepcopy(base)

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)

    logger.debug(f"Merged {len(override)} config keys")
    return result


def load_monitor_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the effective configuration.

    Args:
        config_path: Optional YAML file layered over DEFAULT_CONFIG

    Returns:
        Validated configuration dictionary

    Raises:
        ConfigError: If the file can not be loaded or fails validation
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        config = merge_configs(config, load_config(config_path))

    validate_config(config)
    return config


def get_config_value(config: Dict[str, Any],
                     key_path: str,
                     default: Any = None) -> Any:
    """
    Get nested config value using dot notation.

    Args:
        config: Configuration dictionary
        key_path: Dot-separated path (e.g., "engine.interval_ms")
        default: Default value if not found

    Returns:
        Config value or default

    Example:
        >>> get_config_value(DEFAULT_CONFIG, "kinematics.amplitude")
        100.0
    """
    keys = key_path.split(".")
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


def set_config_value(config: Dict[str, Any],
                     key_path: str,
                     value: Any) -> Dict[str, Any]:
    """
    Set nested config value using dot notation.

    Args:
        config: Configuration dictionary
        key_path: Dot-separated path (e.g., "engine.seed")
        value: Value to set

    Returns:
        Modified config
    """
    keys = key_path.split(".")
    current = config

    for key in keys[:-1]:
        if key not in current:
            current[key] = {}
        current = current[key]

    current[keys[-1]] = value
    return config


def save_config(config: Dict[str, Any],
                output_path: str) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration dictionary
        output_path: Output file path
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Saved config to {output_path}")
