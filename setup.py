"""
Coastal Risk Engine — flood-defense cost/damage simulation for a coastal city wedge.
Research-grade risk-cost simulation package.
"""

from setuptools import setup, find_packages

setup(
    name="coastal-risk-engine",
    version="0.1.0",
    description="Risk-cost simulation of coastal flood defenses: zone partitioning, "
                "barrier failure, expected annual damage and irreversible investment.",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24",
        "scipy>=1.10",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
        ],
    },
    entry_points={
        "console_scripts": [
            "coastal-risk=coastal_risk_engine.cli:main",
        ],
    },
)
