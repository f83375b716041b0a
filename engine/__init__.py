"""
Motor Monitor Engine Module - Initialization
============================================

Periodic sampling engine and its notification plumbing.

Components:
-----------
1. service.py       - MonitoringService (start/stop/reset/subscribe)
2. subscriptions.py - Subscription registry with isolated fan-out
3. errors.py        - EngineDisposedError
4. runner.py        - Headless command-line runner

Notification Stream:
--------------------
One snapshot per tick while running, one on stop_monitoring(), one on
reset(). Delivered synchronously on the engine's loop thread (or on the
caller's thread for stop and reset).

Usage:
------
from engine import MonitoringService

service = MonitoringService(seed=42)
sub = service.subscribe(on_status)
service.start_monitoring(100)
...
service.stop_monitoring()
service.dispose()

Version: 1.0.0
Author: Motor Monitor Team
Date: October 19, 2026
"""

from .errors import EngineDisposedError

from .subscriptions import (
    Subscription,
    SubscriptionRegistry,
)

from .service import (
    MonitoringService,
    EngineStats,
)

__all__ = [
    "EngineDisposedError",
    "Subscription",
    "SubscriptionRegistry",
    "MonitoringService",
    "EngineStats",
]

__version__ = "1.0.0"
__author__ = "Motor Monitor Team"
__date__ = "2026-10-19"
