"""
Motor Monitor Tests Module - Initialization
===========================================

Unit and integration tests for the Motor Monitor system.

Test Organization:
------------------
1. test_kinematics.py - Motion profile, encoder and torque derivation, noise
2. test_domain.py     - MotorStatus and snapshot semantics
3. test_engine.py     - Sampling service lifecycle, fan-out, concurrency
4. test_utils.py      - Configuration, logging and the command-line runner

Test Categories:
----------------
Unit Tests:
- Kinematic model at known phase points
- Snapshot equality and immutability
- Config validation and merging

Integration Tests:
- Start/stop/reset against a live loop thread
- Subscriber isolation and unsubscription
- Reads concurrent with ticks never observe a torn sample

Example Test Run:
-----------------
>>> from tests import run_tests
>>> result = run_tests(verbosity=2)

or from the repository root:

    python -m pytest tests
    python -m unittest discover tests

Version: 1.0.0
Author: Motor Monitor Team
Date: October 19, 2026
"""

import unittest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Import test modules
from . import test_kinematics
from . import test_domain
from . import test_engine
from . import test_utils

__all__ = [
    "test_kinematics",
    "test_domain",
    "test_engine",
    "test_utils",
]

__version__ = "1.0.0"
__author__ = "Motor Monitor Team"
__date__ = "2026-10-19"


def create_test_suite():
    """
    Create comprehensive test suite.

    Returns:
        unittest.TestSuite with all tests
    """
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    suite.addTests(loader.loadTestsFromModule(test_kinematics))
    suite.addTests(loader.loadTestsFromModule(test_domain))
    suite.addTests(loader.loadTestsFromModule(test_engine))
    suite.addTests(loader.loadTestsFromModule(test_utils))

    return suite


def run_tests(verbosity: int = 2):
    """
    Run all tests.

    Args:
        verbosity: Output verbosity level

    Returns:
        unittest.TestResult
    """
    suite = create_test_suite()
    runner = unittest.TextTestRunner(verbosity=verbosity)
    return runner.run(suite)


if __name__ == "__main__":
    result = run_tests()
    sys.exit(0 if result.wasSuccessful() else 1)
