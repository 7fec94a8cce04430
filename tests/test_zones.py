#!/usr/bin/env python3
"""
Tests for the five-zone partition of the city wedge.
"""

import numpy as np
import pytest

from coastal_risk_engine import DefenseVector, StaticPolicy, ZoneType, partition_city
from coastal_risk_engine.core.costs import value_after_withdrawal
from coastal_risk_engine.core.zones import CityZones, Zone, zone_boundaries


def test_boundaries_for_staged_levers(params, staged_defenses):
    zones = partition_city(params, staged_defenses)
    edges = [(z.z_low, z.z_high) for z in zones]
    assert edges == [(0.0, 2.0), (2.0, 5.0), (5.0, 6.0), (6.0, 11.0), (11.0, 17.0)]
    assert [z.zone_type for z in zones] == list(ZoneType)


def test_values_for_staged_levers(params, staged_defenses):
    zones = partition_city(params, staged_defenses)
    v_w = value_after_withdrawal(1.5e12, 17.0, 0.01, 2.0)
    assert v_w == pytest.approx(1.5e12 * (1.0 - 0.02 / 17.0))

    assert zones[0].value == 0.0
    assert zones[1].value == pytest.approx(v_w * 0.95 * 3.0 / 15.0)
    assert zones[2].value == pytest.approx(v_w * 0.95 * 1.0 / 15.0)
    assert zones[3].value == pytest.approx(v_w * 1.1 * 5.0 / 15.0)
    assert zones[4].value == pytest.approx(v_w * 6.0 / 15.0)


def test_value_ratios_mean_values_do_not_sum_to_remaining(params, staged_defenses):
    zones = partition_city(params, staged_defenses)
    v_w = value_after_withdrawal(1.5e12, 17.0, 0.01, 2.0)
    assert zones.total_value != pytest.approx(v_w)


def test_gap_zone_collapses_when_resistance_covers_base(params):
    """R >= B leaves an empty gap zone that is still present with value 0."""
    zones = partition_city(params, DefenseVector(W=0.0, R=5.0, P=0.2, D=2.0, B=3.0))
    assert len(zones) == 5
    gap = zones[ZoneType.GAP]
    assert gap.height == 0.0
    assert gap.value == 0.0
    assert zones[ZoneType.RESISTANT].z_high == 3.0


def test_no_defenses_puts_everything_above_barrier(params):
    zones = partition_city(params, DefenseVector.zero())
    above = zones[ZoneType.ABOVE_BARRIER]
    assert (above.z_low, above.z_high) == (0.0, 17.0)
    assert above.value == pytest.approx(1.5e12)
    for zone in zones[:4]:
        assert zone.height == 0.0
        assert zone.value == 0.0


def test_zone_contiguity_for_random_valid_levers(params):
    """zone[i].high == zone[i+1].low and widths >= 0 for any feasible levers."""
    rng = np.random.default_rng(2024)
    for _ in range(500):
        a, w, b, r = rng.random(4)
        p = 0.99 * rng.random()
        defenses = StaticPolicy.from_fractions(params, a, w, b, r, p).defenses
        zones = partition_city(params, defenses)
        assert zones[0].z_low == 0.0
        assert zones[-1].z_high == params.city_max_height
        for i in range(4):
            assert zones[i].z_high == zones[i + 1].z_low
        for zone in zones:
            assert zone.height >= 0.0
            assert zone.value >= 0.0


def test_zone_boundaries_helper():
    assert zone_boundaries(17.0, 2.0, 3.0, 4.0, 5.0) == (0.0, 2.0, 5.0, 6.0, 11.0, 17.0)


def test_overlapping_zones_are_a_logic_defect():
    bad = (
        Zone(ZoneType.WITHDRAWN, 0.0, 3.0, 0.0),
        Zone(ZoneType.RESISTANT, 2.0, 4.0, 1.0),
        Zone(ZoneType.GAP, 4.0, 4.0, 0.0),
        Zone(ZoneType.PROTECTED, 4.0, 5.0, 1.0),
        Zone(ZoneType.ABOVE_BARRIER, 5.0, 17.0, 1.0),
    )
    with pytest.raises(AssertionError):
        CityZones(bad)


def test_negative_zone_value_is_a_logic_defect():
    bad = (
        Zone(ZoneType.WITHDRAWN, 0.0, 0.0, 0.0),
        Zone(ZoneType.RESISTANT, 0.0, 1.0, -1.0),
        Zone(ZoneType.GAP, 1.0, 1.0, 0.0),
        Zone(ZoneType.PROTECTED, 1.0, 2.0, 1.0),
        Zone(ZoneType.ABOVE_BARRIER, 2.0, 17.0, 1.0),
    )
    with pytest.raises(AssertionError):
        CityZones(bad)
