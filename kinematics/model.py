"""
Motor Monitor Kinematics - Sinusoidal Axis Model
================================================

Maps accumulated simulation time to a coherent motor sample.

Motion Profile:
---------------
Position, speed and acceleration are successive derivatives of a single
sinusoid, so speed and torque follow position instead of being drawn
independently:

    ω = 2π f
    position(t)     =  A sin(ω t)
    speed(t)        =  A ω cos(ω t)
    acceleration(t) = -A ω² sin(ω t)

    where:
    - A: amplitude [units]           (100.0)
    - f: frequency [Hz]              (0.5)

Encoder Model:
--------------
    pulse_per_unit   = R / L
    encoder_command  = trunc(position × pulse_per_unit)
    encoder_feedback = encoder_command + U{-5..5}

    where:
    - R: encoder resolution [pulse/rev]  (10000)
    - L: lead [units/rev]                (10.0)

Fractional pulses are truncated toward zero, the same way an integer cast
of the commanded position behaves on a real pulse-train output.

Torque Model:
-------------
    torque = min(100, |acceleration| / 100 × 30 + U[0, 5))   [%]

Example:
--------
>>> from kinematics import KinematicModel, NoiseModel
>>>
>>> model = KinematicModel(noise=NoiseModel(seed=1))
>>> sample = model.advance(0.1)
>>> round(sample.position, 3), sample.encoder_command
(30.902, 30901)

Author: Motor Monitor Team
Date: October 19, 2026
"""

import numpy as np
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
import logging

from .noise import NoiseModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KinematicParameters:
    """
    Fixed constants of the simulated axis.

    Attributes:
        frequency_hz: Motion frequency [Hz]
        amplitude: Position amplitude [units]
        encoder_resolution: Virtual encoder resolution [pulse/rev]
        lead_per_rev: Travel per revolution [units/rev]
        torque_gain: Torque [%] per 100 units/s² of acceleration
        torque_limit: Torque saturation [%]
    """

    frequency_hz: float = 0.5
    amplitude: float = 100.0
    encoder_resolution: int = 10000
    lead_per_rev: float = 10.0
    torque_gain: float = 30.0
    torque_limit: float = 100.0

    def __post_init__(self):
        if self.frequency_hz <= 0:
            raise ValueError("frequency_hz must be > 0")
        if self.amplitude < 0:
            raise ValueError("amplitude must be >= 0")
        if self.encoder_resolution <= 0:
            raise ValueError("encoder_resolution must be > 0")
        if self.lead_per_rev <= 0:
            raise ValueError("lead_per_rev must be > 0")
        if not (0 < self.torque_limit <= 100):
            raise ValueError("torque_limit must be in (0, 100]")

    @property
    def pulse_per_unit(self) -> float:
        return self.encoder_resolution / self.lead_per_rev

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "KinematicParameters":
        """
        Build parameters from the ``kinematics`` config section.

        Args:
            config: Full configuration or just its kinematics section

        Returns:
            KinematicParameters with defaults for missing keys
        """
        section = config.get("kinematics", config)
        defaults = cls()
        return cls(
            frequency_hz=float(section.get("frequency_hz", defaults.frequency_hz)),
            amplitude=float(section.get("amplitude", defaults.amplitude)),
            encoder_resolution=int(section.get("encoder_resolution",
                                               defaults.encoder_resolution)),
            lead_per_rev=float(section.get("lead_per_rev", defaults.lead_per_rev)),
            torque_gain=float(section.get("torque_gain", defaults.torque_gain)),
            torque_limit=float(section.get("torque_limit", defaults.torque_limit)),
        )


@dataclass(frozen=True)
class KinematicSample:
    """One evaluated tick of the model."""

    time_s: float
    position: float
    speed: float
    acceleration: float
    encoder_command: int
    encoder_feedback: int
    torque: float

    @property
    def position_error(self) -> int:
        return self.encoder_command - self.encoder_feedback


def sinusoidal_motion(t: float,
                      amplitude: float,
                      frequency_hz: float) -> Tuple[float, float, float]:
    """
    Evaluate the motion profile at time t.

    Args:
        t: Simulation time [s]
        amplitude: A [units]
        frequency_hz: f [Hz]

    Returns:
        Tuple of (position [units], speed [units/s], acceleration [units/s²])
    """
    omega = 2 * np.pi * frequency_hz
    phase = omega * t

    position = amplitude * np.sin(phase)
    speed = amplitude * omega * np.cos(phase)
    acceleration = -amplitude * omega ** 2 * np.sin(phase)

    return float(position), float(speed), float(acceleration)


def position_to_pulses(position: float,
                       encoder_resolution: int,
                       lead_per_rev: float) -> int:
    """
    Convert a position to encoder pulses, truncating toward zero.

    Args:
        position: Position [units]
        encoder_resolution: R [pulse/rev]
        lead_per_rev: L [units/rev]

    Returns:
        Pulse count

    Example:
        >>> position_to_pulses(100.0, 10000, 10.0)
        100000
    """
    pulse_per_unit = encoder_resolution / lead_per_rev
    return int(position * pulse_per_unit)


def torque_from_acceleration(acceleration: float,
                             noise: float = 0.0,
                             gain: float = 30.0,
                             limit: float = 100.0) -> float:
    """
    Torque demand proportional to |acceleration| plus ripple, saturated.

    Args:
        acceleration: Axis acceleration [units/s²]
        noise: Additive ripple [%], non-negative
        gain: Torque [%] per 100 units/s²
        limit: Saturation [%]

    Returns:
        Torque in [0, limit]
    """
    torque = abs(acceleration) / 100.0 * gain + noise
    return float(min(limit, max(0.0, torque)))


class KinematicModel:
    """
    Stateful wrapper holding simulation time and the noise source.

    The model keeps nothing else between ticks; every sample is a function
    of elapsed time plus one draw from each noise source.

    Example:
    --------
    >>> model = KinematicModel(noise=NoiseModel(seed=7))
    >>> for _ in range(5):
    ...     sample = model.advance(0.1)
    >>> model.elapsed
    0.5
    """

    def __init__(self,
                 parameters: Optional[KinematicParameters] = None,
                 noise: Optional[NoiseModel] = None):
        """
        Initialize kinematic model.

        Args:
            parameters: Axis constants (defaults when omitted)
            noise: Noise source (unseeded default when omitted)
        """
        self.parameters = parameters if parameters is not None else KinematicParameters()
        self.noise = noise if noise is not None else NoiseModel()
        self.elapsed = 0.0

    def sample_at(self, t: float) -> KinematicSample:
        """
        Evaluate a full sample at time t without touching elapsed time.

        Args:
            t: Simulation time [s]

        Returns:
            KinematicSample with noise applied
        """
        p = self.parameters
        position, speed, acceleration = sinusoidal_motion(t, p.amplitude, p.frequency_hz)

        encoder_command = position_to_pulses(position, p.encoder_resolution, p.lead_per_rev)
        encoder_feedback = encoder_command + self.noise.pulse_noise()

        torque = torque_from_acceleration(
            acceleration,
            noise=self.noise.torque_noise(),
            gain=p.torque_gain,
            limit=p.torque_limit,
        )

        return KinematicSample(
            time_s=t,
            position=position,
            speed=speed,
            acceleration=acceleration,
            encoder_command=encoder_command,
            encoder_feedback=encoder_feedback,
            torque=torque,
        )

    def advance(self, dt: float) -> KinematicSample:
        """
        Advance simulation time by dt and sample at the new time.

        Args:
            dt: Time step [s], must be positive

        Returns:
            Sample at elapsed + dt

        Raises:
            ValueError: If dt is not positive
        """
        if dt <= 0:
            raise ValueError(f"dt must be > 0, got {dt}")

        self.elapsed += dt
        return self.sample_at(self.elapsed)

    def reset(self) -> None:
        """Return simulation time to zero."""
        self.elapsed = 0.0
