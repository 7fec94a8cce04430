"""
Zone partitioning of the city wedge.

A defense vector splits the wedge [0, H_city] into five contiguous bands of
increasing elevation:

  0  WITHDRAWN      [0, W)                      value 0
  1  RESISTANT      [W, W + min(R, B))          V_w * r_u * min(R, B) / (H - W)
  2  GAP            [W + min(R, B), W + B)      V_w * r_u * max(0, B - R) / (H - W)
  3  PROTECTED      [W + B, W + B + D)          V_w * r_p * D / (H - W)
  4  ABOVE_BARRIER  [W + B + D, H)              V_w * (H - W - B - D) / (H - W)

V_w is the city value remaining after withdrawal.  The value ratios r_p and
r_u are applied on purpose, so the five values do not sum to V_w.  A
collapsed band (e.g. GAP when R >= B) keeps its slot with zero width and
zero value; the collection always has exactly five entries.
"""

from __future__ import annotations

from enum import IntEnum
from typing import NamedTuple, Tuple

from .costs import value_after_withdrawal
from .parameters import CityParameters
from .state import DefenseVector


class ZoneType(IntEnum):
    """Role of a band in the wedge; the integer is also its index."""

    WITHDRAWN = 0
    RESISTANT = 1
    GAP = 2
    PROTECTED = 3
    ABOVE_BARRIER = 4


class Zone(NamedTuple):
    """One elevation band with its assigned value."""

    zone_type: ZoneType
    z_low: float
    z_high: float
    value: float

    @property
    def height(self) -> float:
        """Band width in metres."""
        return self.z_high - self.z_low


class CityZones(tuple):
    """Fixed-size, validated tuple of exactly five zones."""

    __slots__ = ()

    def __new__(cls, zones: Tuple[Zone, Zone, Zone, Zone, Zone]) -> "CityZones":
        assert len(zones) == 5, f"expected 5 zones, got {len(zones)}"
        for i in range(4):
            assert zones[i].z_high <= zones[i + 1].z_low, (
                f"zones {i} and {i + 1} overlap: "
                f"{zones[i].z_high} > {zones[i + 1].z_low}"
            )
        for zone in zones:
            assert zone.z_low <= zone.z_high, f"negative width in {zone}"
            assert zone.value >= 0.0, f"negative value in {zone}"
        return super().__new__(cls, zones)

    @property
    def total_value(self) -> float:
        """Sum of the zone values (not equal to V_w in general)."""
        return sum(zone.value for zone in self)


def zone_boundaries(
    city_height: float, W: float, R: float, B: float, D: float
) -> Tuple[float, float, float, float, float, float]:
    """Absolute elevations of the six band edges, bottom to top."""
    return (0.0, W, W + min(R, B), W + B, W + B + D, city_height)


def zone_values(
    remaining_value: float,
    city_height: float,
    W: float,
    R: float,
    B: float,
    D: float,
    protected_ratio: float,
    unprotected_ratio: float,
) -> Tuple[float, float, float, float, float]:
    """Value assigned to each band, in zone order."""
    remaining_height = city_height - W
    return (
        0.0,
        remaining_value * unprotected_ratio * min(R, B) / remaining_height,
        remaining_value * unprotected_ratio * max(0.0, B - R) / remaining_height,
        remaining_value * protected_ratio * D / remaining_height,
        remaining_value * (remaining_height - B - D) / remaining_height,
    )


def partition_city(params: CityParameters, defenses: DefenseVector) -> CityZones:
    """Partition the wedge into five zones for a feasible defense vector.

    Args:
        params:   City configuration.
        defenses: Vector satisfying is_feasible().

    Returns:
        CityZones ordered by elevation.
    """
    H = params.city_max_height
    W, R, B, D = defenses.W, defenses.R, defenses.B, defenses.D

    v_w = value_after_withdrawal(params.total_value, H, params.withdrawal_loss_fraction, W)
    edges = zone_boundaries(H, W, R, B, D)
    values = zone_values(
        v_w, H, W, R, B, D,
        params.protected_value_ratio, params.unprotected_value_ratio,
    )
    return CityZones(
        tuple(
            Zone(ZoneType(i), edges[i], edges[i + 1], values[i])
            for i in range(5)
        )
    )
