"""
Motor Monitor Kinematics - Noise Model
======================================

Bounded random perturbations applied to each kinematic sample.

Noise Sources:
--------------
1. Encoder feedback: uniform integer in [-N, N] pulses (N = 5)
2. Torque ripple:    uniform float in [0, T) percent (T = 5.0)

Both draw from one numpy Generator owned by the model instance. Pass a
seed (or a ready Generator) to make a run reproducible.

Example:
--------
>>> noise = NoiseModel(seed=42)
>>> noise.pulse_noise()     # in [-5, 5]
>>> noise.torque_noise()    # in [0.0, 5.0)

Author: Motor Monitor Team
Date: October 19, 2026
"""

import numpy as np
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class NoiseModel:
    """
    Seedable source of encoder and torque noise.

    Attributes:
        feedback_noise_pulses: Half-width N of the feedback noise band
        torque_noise_max: Upper bound T of the torque ripple
    """

    def __init__(self,
                 feedback_noise_pulses: int = 5,
                 torque_noise_max: float = 5.0,
                 seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None):
        """
        Initialize noise model.

        Args:
            feedback_noise_pulses: Feedback noise half-width [pulse], >= 0
            torque_noise_max: Torque ripple upper bound [%], >= 0
            seed: Seed for a fresh Generator (ignored when rng is given)
            rng: Existing Generator to draw from

        Raises:
            ValueError: If a bound is negative
        """
        if feedback_noise_pulses < 0:
            raise ValueError("feedback_noise_pulses must be >= 0")
        if torque_noise_max < 0:
            raise ValueError("torque_noise_max must be >= 0")

        self.feedback_noise_pulses = int(feedback_noise_pulses)
        self.torque_noise_max = float(torque_noise_max)
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def pulse_noise(self) -> int:
        """Uniform integer in [-N, N], inclusive on both ends."""
        n = self.feedback_noise_pulses
        return int(self.rng.integers(-n, n + 1))

    def torque_noise(self) -> float:
        """Uniform float in [0, T)."""
        if self.torque_noise_max == 0.0:
            return 0.0
        return float(self.rng.uniform(0.0, self.torque_noise_max))
