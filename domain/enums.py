"""Axis status enumeration."""

from enum import IntEnum


class AxisStatus(IntEnum):
    """
    Operating state of a single simulated axis.

    Only READY <-> RUNNING is driven by the sampling engine. DISABLED and
    ERROR are reserved for fault injection.
    """

    DISABLED = 0  # servo off
    READY = 1     # servo on, standing still
    RUNNING = 2   # motion in progress
    ERROR = 3     # alarm raised
