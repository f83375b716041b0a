"""
Motor Monitor Domain - Status Snapshot
======================================

Immutable copy of MotorStatus handed across the publish boundary.

Equality:
---------
- encoder_command, encoder_feedback: exact
- status, timestamp:                 exact
- speed, position, torque:           |a - b| < 1e-4

Equality exists for deduplication and tests only; the engine never
branches on it.

Example:
--------
>>> from domain import MotorStatus, MotorStatusSnapshot
>>>
>>> status = MotorStatus(position=12.5, encoder_command=12500)
>>> snap = MotorStatusSnapshot.from_status(status)
>>> snap.to_dict()["position_error"]
12500

Author: Motor Monitor Team
Date: October 19, 2026
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

from .enums import AxisStatus
from .status import MotorStatus

# Absolute tolerance on floating fields when comparing snapshots
FLOAT_TOLERANCE = 1e-4


@dataclass(frozen=True, eq=False)
class MotorStatusSnapshot:
    """Value copy of the engine status at one instant."""

    encoder_command: int
    encoder_feedback: int
    speed: float
    position: float
    torque: float
    status: AxisStatus
    timestamp: datetime

    @classmethod
    def from_status(cls, status: MotorStatus) -> "MotorStatusSnapshot":
        """
        Capture a snapshot of a mutable status record.

        Args:
            status: Engine-owned MotorStatus

        Returns:
            Independent immutable snapshot
        """
        return cls(
            encoder_command=status.encoder_command,
            encoder_feedback=status.encoder_feedback,
            speed=status.speed,
            position=status.position,
            torque=status.torque,
            status=status.status,
            timestamp=status.timestamp,
        )

    @property
    def position_error(self) -> int:
        """Command minus feedback [pulse]."""
        return self.encoder_command - self.encoder_feedback

    def is_within_tolerance(self, tolerance_pulse: int) -> bool:
        return abs(self.position_error) <= tolerance_pulse

    def to_dict(self) -> Dict[str, Any]:
        """
        Plain dictionary view, suitable for logging or JSON encoding.

        Returns:
            Dictionary with every field plus position_error; status is
            given by name and timestamp in ISO-8601
        """
        return {
            "encoder_command": self.encoder_command,
            "encoder_feedback": self.encoder_feedback,
            "position_error": self.position_error,
            "speed": self.speed,
            "position": self.position,
            "torque": self.torque,
            "status": self.status.name,
            "timestamp": self.timestamp.isoformat(),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MotorStatusSnapshot):
            return NotImplemented
        if self is other:
            return True

        return (
            self.timestamp == other.timestamp
            and self.status == other.status
            and self.encoder_command == other.encoder_command
            and self.encoder_feedback == other.encoder_feedback
            and abs(self.speed - other.speed) < FLOAT_TOLERANCE
            and abs(self.position - other.position) < FLOAT_TOLERANCE
            and abs(self.torque - other.torque) < FLOAT_TOLERANCE
        )

    def __hash__(self) -> int:
        # Floats are compared with a tolerance, so only exact fields hash
        return hash((
            self.timestamp,
            self.status,
            self.encoder_command,
            self.encoder_feedback,
        ))
