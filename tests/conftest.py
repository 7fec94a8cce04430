"""Shared fixtures for the coastal risk engine tests."""

import numpy as np
import pytest

from coastal_risk_engine import CityParameters, DefenseVector


@pytest.fixture
def params():
    """Reference calibration (1.5e12 $, 17 m wedge)."""
    return CityParameters()


@pytest.fixture
def staged_defenses():
    """Levers with every zone non-empty: edges 0, 2, 5, 6, 11, 17."""
    return DefenseVector(W=2.0, R=3.0, P=0.5, D=5.0, B=4.0)


@pytest.fixture
def rng():
    return np.random.default_rng(12345)
