"""
Motor Monitor Domain - Mutable Motor Status
===========================================

The single long-lived status record owned by the sampling engine.

Fields:
-------
- encoder_command  [pulse]     intended position
- encoder_feedback [pulse]     observed position
- speed            [units/s]
- position         [units]
- torque           [%]         0-100 of rated torque
- status           AxisStatus
- timestamp        datetime    time of the last write

Derived:
--------
position_error = encoder_command - encoder_feedback

The error is recomputed on every access and never stored, so it can not
drift out of step with the two encoder fields.

Author: Motor Monitor Team
Date: October 19, 2026
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .enums import AxisStatus


@dataclass
class MotorStatus:
    """
    Mutable motor status, written in place by the engine.

    Not thread-safe on its own; the engine serialises every access.

    Example:
    --------
    >>> status = MotorStatus(encoder_command=120, encoder_feedback=117)
    >>> status.position_error
    3
    >>> status.is_within_tolerance(5)
    True
    """

    encoder_command: int = 0
    encoder_feedback: int = 0
    speed: float = 0.0
    position: float = 0.0
    torque: float = 0.0
    status: AxisStatus = AxisStatus.READY
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def position_error(self) -> int:
        """Command minus feedback [pulse]."""
        return self.encoder_command - self.encoder_feedback

    def is_within_tolerance(self, tolerance_pulse: int) -> bool:
        """
        Check the following error against a tolerance.

        Args:
            tolerance_pulse: Allowed |command - feedback| [pulse]

        Returns:
            True if the position error is inside the tolerance
        """
        return abs(self.position_error) <= tolerance_pulse

    def apply_sample(self, sample, timestamp: Optional[datetime] = None) -> None:
        """
        Write one kinematic sample into this record.

        Args:
            sample: KinematicSample produced by the kinematic model
            timestamp: Measurement time (defaults to now)
        """
        self.encoder_command = int(sample.encoder_command)
        self.encoder_feedback = int(sample.encoder_feedback)
        self.position = float(sample.position)
        self.speed = float(sample.speed)
        self.torque = float(sample.torque)
        self.timestamp = timestamp if timestamp is not None else datetime.now()

    def zero(self, timestamp: Optional[datetime] = None) -> None:
        """Zero all measurements and stamp the time. Status is left alone."""
        self.encoder_command = 0
        self.encoder_feedback = 0
        self.position = 0.0
        self.speed = 0.0
        self.torque = 0.0
        self.timestamp = timestamp if timestamp is not None else datetime.now()

    def clone(self) -> "MotorStatus":
        return MotorStatus(
            encoder_command=self.encoder_command,
            encoder_feedback=self.encoder_feedback,
            speed=self.speed,
            position=self.position,
            torque=self.torque,
            status=self.status,
            timestamp=self.timestamp,
        )
