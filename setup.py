"""
Motor Monitor - Setup Configuration
===================================

Installation and package configuration for the motor monitor.

Usage:
------
pip install -e .              # Development install
pip install -e .[dev]         # With development dependencies
pip install -e .[test]        # With testing dependencies
pip install -e .[all]         # All optional dependencies

Author: Motor Monitor Team
Date: October 19, 2026
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""

# Read requirements
requirements_path = Path(__file__).parent / "requirements.txt"
requirements = []
if requirements_path.exists():
    requirements = [
        line.strip()
        for line in requirements_path.read_text(encoding="utf-8").split("\n")
        if line.strip() and not line.startswith("#")
    ]

# Development requirements
dev_requirements = [
    "black>=23.0.0",
    "flake8>=6.0.0",
    "mypy>=1.0.0",
    "types-PyYAML>=6.0.0",
]

# Test requirements
test_requirements = [
    "pytest>=7.2.0",
    "pytest-cov>=4.0.0",
]

setup(
    # Project metadata
    name="motor-monitor",
    version="1.0.0",
    author="Motor Monitor Team",
    description="Simulated single-axis motor telemetry source",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",

    # Package discovery
    packages=find_packages(include=["domain", "domain.*", "kinematics", "kinematics.*",
                                    "engine", "engine.*", "utils", "utils.*"]),
    include_package_data=True,

    # Python version
    python_requires=">=3.10",

    # Dependencies
    install_requires=requirements,
    extras_require={
        "dev": dev_requirements,
        "test": test_requirements,
        "all": dev_requirements + test_requirements,
    },

    # Entry points
    entry_points={
        "console_scripts": [
            "motor-monitor=engine.runner:main",
        ],
    },

    # Metadata
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Manufacturing",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering",
        "Topic :: System :: Hardware",
    ],
    keywords=[
        "motor",
        "servo",
        "encoder",
        "telemetry",
        "simulation",
        "motion control",
    ],

    # Additional options
    zip_safe=False,
)
