"""
Motor Monitor Kinematics Module - Initialization
================================================

Deterministic-plus-noise model of a single simulated axis.

Components:
-----------
1. model.py - Sinusoidal motion profile, encoder and torque derivation
2. noise.py - Seedable encoder/torque noise

Model Pipeline:
---------------
elapsed time t
    ↓
[position, speed, acceleration]   (one sinusoid and its derivatives)
    ↓
[encoder command]                 (R / L pulses per unit, truncated)
    ↓
[encoder feedback, torque]        (+ bounded noise)
    ↓
KinematicSample

Usage:
------
from kinematics import KinematicModel, KinematicParameters, NoiseModel

model = KinematicModel(KinematicParameters(), NoiseModel(seed=0))
sample = model.advance(0.1)

Version: 1.0.0
Author: Motor Monitor Team
Date: October 19, 2026
"""

from .model import (
    KinematicModel,
    KinematicParameters,
    KinematicSample,
    sinusoidal_motion,
    position_to_pulses,
    torque_from_acceleration,
)

from .noise import NoiseModel

__all__ = [
    # Model
    "KinematicModel",
    "KinematicParameters",
    "KinematicSample",
    "sinusoidal_motion",
    "position_to_pulses",
    "torque_from_acceleration",
    # Noise
    "NoiseModel",
]

__version__ = "1.0.0"
__author__ = "Motor Monitor Team"
__date__ = "2026-10-19"
