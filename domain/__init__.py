"""
Motor Monitor Domain Module - Initialization
============================================

Status entities handed between the sampling engine and its consumers.

Components:
-----------
1. enums.py    - AxisStatus enumeration
2. status.py   - MotorStatus (mutable, engine-owned)
3. snapshot.py - MotorStatusSnapshot (immutable hand-off copy)

Ownership:
----------
The engine owns exactly one MotorStatus for its whole lifetime. Every
publish hands out a MotorStatusSnapshot; consumers own their snapshots
outright and can never reach the engine's mutable state.

Usage:
------
from domain import AxisStatus, MotorStatus, MotorStatusSnapshot

status = MotorStatus(status=AxisStatus.READY)
snapshot = MotorStatusSnapshot.from_status(status)
print(snapshot.position_error)

Version: 1.0.0
Author: Motor Monitor Team
Date: October 19, 2026
"""

from .enums import AxisStatus

from .status import MotorStatus

from .snapshot import (
    MotorStatusSnapshot,
    FLOAT_TOLERANCE,
)

__all__ = [
    "AxisStatus",
    "MotorStatus",
    "MotorStatusSnapshot",
    "FLOAT_TOLERANCE",
]

__version__ = "1.0.0"
__author__ = "Motor Monitor Team"
__date__ = "2026-10-19"
