"""
Event damage function.

For one effective surge h (absolute elevation) and a zone [z_low, z_high)
with value V and height dz, the wash-over depth is w = max(0, h - z_low).
Base damage:

    w <= 0, dz == 0 or V == 0   ->  0
    w <  dz  (partial flood)    ->  V * f_d * w * (w/2 + b) / (H_bldg * dz)
    w >= dz  (full flood)       ->  V * f_d * (b + dz/2) / H_bldg

with basement depth b and building height H_bldg.  Zone modifiers:

    RESISTANT      * (1 - P)
    PROTECTED      * f_intact   (barrier holds)
                   * f_failed   (barrier breached; f_failed > 1 models debris
                                 and erosion beyond the naive flood depth)
    WITHDRAWN      always 0
    GAP, ABOVE     unmodified

The zone sum S is then passed through the catastrophic threshold:

    S > d_thresh  ->  S + (f_thresh * (S - d_thresh)) ** gamma_thresh
"""

from __future__ import annotations

from ..core.parameters import CityParameters
from ..core.zones import CityZones, Zone, ZoneType


def base_zone_damage(
    zone: Zone,
    surge: float,
    basement_depth: float,
    building_height: float,
    damage_fraction: float,
) -> float:
    """Unmodified flood damage of one zone."""
    wash_over = max(0.0, surge - zone.z_low)
    zone_height = zone.height

    if wash_over <= 0.0 or zone.value <= 0.0 or zone_height <= 0.0:
        return 0.0

    if wash_over < zone_height:
        flood_fraction = (
            wash_over * (wash_over / 2.0 + basement_depth)
            / (building_height * zone_height)
        )
    else:
        flood_fraction = (basement_depth + zone_height / 2.0) / building_height

    return zone.value * damage_fraction * flood_fraction


def zone_damage(
    zone: Zone,
    surge: float,
    params: CityParameters,
    resist_fraction: float,
    barrier_failed: bool,
) -> float:
    """Damage of one zone including its role-specific modifier."""
    if zone.zone_type == ZoneType.WITHDRAWN:
        return 0.0

    base = base_zone_damage(
        zone, surge, params.basement_depth, params.building_height, params.damage_fraction
    )

    if zone.zone_type == ZoneType.RESISTANT:
        return base * (1.0 - resist_fraction)
    if zone.zone_type == ZoneType.PROTECTED:
        factor = params.failed_damage_factor if barrier_failed else params.intact_damage_factor
        return base * factor
    return base


def threshold_penalty(total: float, params: CityParameters) -> float:
    """Cascade penalty added once summed damage exceeds the threshold."""
    if total <= params.damage_threshold:
        return 0.0
    excess = total - params.damage_threshold
    return (params.threshold_fraction * excess) ** params.threshold_exponent


def zone_damage_sum(
    zones: CityZones,
    surge: float,
    params: CityParameters,
    resist_fraction: float,
    barrier_failed: bool,
) -> float:
    """Sum of the five zone damages, before the threshold penalty."""
    return sum(
        zone_damage(zone, surge, params, resist_fraction, barrier_failed)
        for zone in zones
    )


def event_damage(
    zones: CityZones,
    surge: float,
    params: CityParameters,
    resist_fraction: float,
    barrier_failed: bool,
) -> float:
    """Total damage of a single surge event.

    Args:
        zones:           Partition of the wedge for the current levers.
        surge:           Effective surge elevation (m).
        params:          City configuration (damage and threshold constants).
        resist_fraction: Flood-proofed fraction P of the resistant zone.
        barrier_failed:  Realized barrier outcome.

    Returns:
        Zone damage sum plus the catastrophic-threshold penalty ($).
    """
    total = zone_damage_sum(zones, surge, params, resist_fraction, barrier_failed)
    return total + threshold_penalty(total, params)
