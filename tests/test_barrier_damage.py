#!/usr/bin/env python3
"""
Tests for the effective surge transform, barrier failure model and event damage.
"""

import numpy as np
import pytest

from coastal_risk_engine import (
    CityParameters,
    DefenseVector,
    ZoneType,
    barrier_failure_probability,
    effective_surge,
    event_damage,
    partition_city,
)
from coastal_risk_engine.systems.damage import (
    base_zone_damage,
    threshold_penalty,
    zone_damage,
    zone_damage_sum,
)
from coastal_risk_engine.core.zones import Zone


# --------------------------------------------------------------------------- #
# Effective surge                                                              #
# --------------------------------------------------------------------------- #


def test_effective_surge_clamps_below_seawall():
    assert effective_surge(0.0, 1.75, 1.1) == 0.0
    assert effective_surge(1.75, 1.75, 1.1) == 0.0
    assert effective_surge(2.0, 1.75, 1.1) == pytest.approx(2.0 * 1.1 - 1.75)


# --------------------------------------------------------------------------- #
# Barrier failure                                                              #
# --------------------------------------------------------------------------- #


def test_no_barrier_fails_for_any_positive_surge():
    assert barrier_failure_probability(0.0, 0.0, 0.95, 0.05) == 0.05
    assert barrier_failure_probability(0.001, 0.0, 0.95, 0.05) == 1.0
    assert barrier_failure_probability(3.0, 0.0, 0.95, 0.05) == 1.0


def test_failure_probability_piecewise():
    D, t, p_min = 5.0, 0.95, 0.05
    assert barrier_failure_probability(0.0, D, t, p_min) == p_min
    assert barrier_failure_probability(4.7, D, t, p_min) == p_min
    assert barrier_failure_probability(4.75, D, t, p_min) == pytest.approx(p_min)
    assert barrier_failure_probability(4.875, D, t, p_min) == pytest.approx(0.05 + 0.95 * 0.5)
    assert barrier_failure_probability(5.0, D, t, p_min) == 1.0
    assert barrier_failure_probability(12.0, D, t, p_min) == 1.0


def test_failure_probability_non_decreasing_and_bounded():
    heights = np.linspace(-1.0, 8.0, 901)
    probs = [barrier_failure_probability(h, 5.0, 0.8, 0.05) for h in heights]
    assert np.all(np.diff(probs) >= 0.0)
    assert min(probs) == 0.05
    assert max(probs) == 1.0


def test_onset_fraction_of_one_is_rejected():
    with pytest.raises(AssertionError):
        barrier_failure_probability(1.0, 5.0, 1.0, 0.05)


# --------------------------------------------------------------------------- #
# Event damage                                                                 #
# --------------------------------------------------------------------------- #


def test_base_damage_partial_and_full_flood():
    zone = Zone(ZoneType.GAP, 2.0, 6.0, 1.0e9)
    partial = base_zone_damage(zone, 3.0, 3.0, 30.0, 0.39)
    assert partial == pytest.approx(1.0e9 * 0.39 * 1.0 * (0.5 + 3.0) / (30.0 * 4.0))
    full = base_zone_damage(zone, 9.0, 3.0, 30.0, 0.39)
    assert full == pytest.approx(1.0e9 * 0.39 * (3.0 + 2.0) / 30.0)
    assert base_zone_damage(zone, 6.0, 3.0, 30.0, 0.39) == pytest.approx(full)


def test_base_damage_zero_cases():
    zone = Zone(ZoneType.GAP, 2.0, 6.0, 1.0e9)
    assert base_zone_damage(zone, 1.0, 3.0, 30.0, 0.39) == 0.0
    assert base_zone_damage(zone, 2.0, 3.0, 30.0, 0.39) == 0.0
    empty = Zone(ZoneType.GAP, 4.0, 4.0, 0.0)
    assert base_zone_damage(empty, 10.0, 3.0, 30.0, 0.39) == 0.0


def test_zone_modifiers(params, staged_defenses):
    zones = partition_city(params, staged_defenses)
    surge = 14.0

    def base(zone):
        return base_zone_damage(
            zone, surge, params.basement_depth, params.building_height, params.damage_fraction
        )

    assert zone_damage(zones[0], surge, params, 0.5, False) == 0.0
    assert zone_damage(zones[1], surge, params, 0.5, False) == pytest.approx(0.5 * base(zones[1]))
    assert zone_damage(zones[2], surge, params, 0.5, False) == pytest.approx(base(zones[2]))
    assert zone_damage(zones[3], surge, params, 0.5, False) == pytest.approx(0.03 * base(zones[3]))
    assert zone_damage(zones[3], surge, params, 0.5, True) == pytest.approx(1.5 * base(zones[3]))
    assert zone_damage(zones[4], surge, params, 0.5, True) == pytest.approx(base(zones[4]))


def test_zero_surge_means_zero_damage(params):
    rng = np.random.default_rng(11)
    for _ in range(50):
        W, R, B = rng.uniform(0.0, 4.0, 3)
        D = rng.uniform(0.0, 17.0 - W - B)
        defenses = DefenseVector(W=W, R=R, P=0.99 * rng.random(), D=D, B=B)
        zones = partition_city(params, defenses)
        for failed in (False, True):
            assert event_damage(zones, 0.0, params, defenses.P, failed) == 0.0


def test_damage_non_decreasing_in_surge(params, staged_defenses):
    zones = partition_city(params, staged_defenses)
    surges = np.linspace(0.0, 20.0, 401)
    for failed in (False, True):
        damages = [event_damage(zones, h, params, staged_defenses.P, failed) for h in surges]
        assert np.all(np.diff(damages) >= 0.0)


def test_failed_barrier_never_cheaper(params, staged_defenses):
    zones = partition_city(params, staged_defenses)
    for h in np.linspace(0.0, 17.0, 69):
        intact = event_damage(zones, h, params, staged_defenses.P, False)
        failed = event_damage(zones, h, params, staged_defenses.P, True)
        assert failed >= intact


def test_threshold_penalty_activates_above_threshold(params):
    """Summed damage above the threshold gets (f * excess) ** gamma added."""
    zones = partition_city(params, DefenseVector.zero())
    surge = 5.0
    raw = zone_damage_sum(zones, surge, params, 0.0, False)
    assert raw == pytest.approx(1.5e12 * 0.39 * 5.0 * (2.5 + 3.0) / (30.0 * 17.0))
    assert raw > params.damage_threshold

    total = event_damage(zones, surge, params, 0.0, False)
    expected_penalty = (params.threshold_fraction * (raw - params.damage_threshold)) ** params.threshold_exponent
    assert total == pytest.approx(raw + expected_penalty)
    assert total > raw


def test_threshold_penalty_absent_below_threshold(params):
    zones = partition_city(params, DefenseVector.zero())
    raw = zone_damage_sum(zones, 0.1, params, 0.0, False)
    assert raw < params.damage_threshold
    assert event_damage(zones, 0.1, params, 0.0, False) == raw
    assert threshold_penalty(params.damage_threshold, params) == 0.0


def test_threshold_uses_configured_exponent_and_fraction():
    params = CityParameters(damage_threshold=1.0e9, threshold_fraction=0.5, threshold_exponent=1.2)
    assert threshold_penalty(3.0e9, params) == pytest.approx((0.5 * 2.0e9) ** 1.2)
