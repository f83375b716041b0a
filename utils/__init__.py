"""
Motor Monitor Utils Module - Initialization
===========================================

Utility functions and helpers for the Motor Monitor system.

Submodules:
-----------
1. config.py   - Configuration loading and validation
2. logging.py  - Logging setup and diagnostics

Functions:
----------
1. Configuration Management
   - load_config()          - Load YAML config
   - load_monitor_config()  - Defaults + optional file, validated
   - validate_config()      - Validate config structure
   - merge_configs()        - Override defaults

2. Logging & Diagnostics
   - setup_logging()      - Configure logging
   - get_logger()         - Get module logger
   - log_snapshot()       - Log a status snapshot
   - log_error()          - Log an isolated failure
   - log_statistics()     - Log engine statistics

Usage:
------
from utils import load_monitor_config, setup_logging, get_logger

config = load_monitor_config("config/default.yaml")
setup_logging(config["logging"]["dir"], level=config["logging"]["level"])
logger = get_logger(__name__)

Version: 1.0.0
Author: Motor Monitor Team
Date: October 19, 2026
"""

from pathlib import Path

from .config import (
    DEFAULT_CONFIG,
    load_config,
    load_monitor_config,
    validate_config,
    merge_configs,
    get_config_value,
    set_config_value,
    save_config,
    ConfigError,
)

from .logging import (
    StructuredFormatter,
    setup_logging,
    get_logger,
    log_snapshot,
    log_error,
    log_statistics,
)

__all__ = [
    # Config functions
    "DEFAULT_CONFIG",
    "load_config",
    "load_monitor_config",
    "validate_config",
    "merge_configs",
    "get_config_value",
    "set_config_value",
    "save_config",
    "ConfigError",
    # Logging functions
    "StructuredFormatter",
    "setup_logging",
    "get_logger",
    "log_snapshot",
    "log_error",
    "log_statistics",
]

__version__ = "1.0.0"
__author__ = "Motor Monitor Team"
__date__ = "2026-10-19"

# Default paths
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "default.yaml"
