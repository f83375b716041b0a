"""
Motor Monitor
=============

Simulated telemetry source for a single motion axis.

Modules:
--------
- domain: AxisStatus, MotorStatus, MotorStatusSnapshot
- kinematics: Sinusoidal motion, encoder and torque model
- engine: Periodic sampling service and subscriber fan-out
- utils: Configuration & logging utilities
- tests: unittest suites

Features:
---------
✅ Coupled position/speed/acceleration waveform
✅ Pulse-domain encoder model with bounded feedback noise
✅ Seedable noise for reproducible runs
✅ Thread-safe start/stop/reset lifecycle
✅ Isolated fan-out to any number of subscribers
✅ YAML configuration and structured logging

Quick Start:
-----------
from utils import load_monitor_config, setup_logging
from engine import MonitoringService

setup_logging("logs/", file_output=False)
config = load_monitor_config("config/default.yaml")

with MonitoringService(config) as service:
    service.subscribe(print)
    service.start_monitoring(100)
    ...

Version: 1.0.0
Author: Motor Monitor Team
Date: October 19, 2026
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Motor Monitor Team"
__date__ = "2026-10-19"
__all__ = [
    "domain",
    "kinematics",
    "engine",
    "utils",
    "tests",
]
