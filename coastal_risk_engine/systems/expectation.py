"""
Damage expectation in two modes.

Realized-event mode
    One raw surge draw, one Bernoulli barrier outcome sampled from a
    caller-supplied numpy Generator, one call to event_damage().  Exactly
    one random number is consumed per call, so replaying the generator
    replays the run bit for bit.

Expected-annual-damage (EAD) mode
    For one raw surge the barrier outcome is integrated analytically:

        E[damage | h] = p_fail(h) * damage(h, failed)
                      + (1 - p_fail(h)) * damage(h, intact)

    and the annual expectation integrates E[damage | h] over a surge
    distribution, either by deterministic quadrature on the central
    [tail_mass, 1 - tail_mass] quantile range or by Monte Carlo averaging.
    A point-mass distribution is evaluated directly (it has no density).

Surge distributions are scipy.stats frozen distributions (anything exposing
ppf / pdf / rvs), PointMass, or a plain number.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Union

import numpy as np
from scipy import integrate

from ..core.parameters import CityParameters
from ..core.state import DefenseVector
from ..core.zones import CityZones, partition_city
from .barrier import city_failure_probability
from .damage import event_damage
from .surge import city_effective_surge, raw_surge_for_elevation

logger = logging.getLogger("coastal_risk_engine.expectation")


# --------------------------------------------------------------------------- #
# Surge distributions                                                          #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class PointMass:
    """Degenerate surge distribution concentrated on one value."""

    value: float

    def rvs(self, size: Any = None, random_state: Any = None) -> Any:
        """Draws are always ``value``; the random source is left untouched."""
        if size is None:
            return self.value
        return np.full(size, self.value, dtype=np.float64)

    def ppf(self, q: float) -> float:
        return self.value

    def mean(self) -> float:
        return self.value


SurgeDistribution = Any
"""scipy.stats frozen distribution, PointMass, or a float."""


def _point_mass_value(dist: SurgeDistribution) -> Optional[float]:
    if isinstance(dist, PointMass):
        return float(dist.value)
    if isinstance(dist, (int, float, np.floating, np.integer)):
        return float(dist)
    return None


# --------------------------------------------------------------------------- #
# Per-surge damage                                                             #
# --------------------------------------------------------------------------- #


def surge_at_barrier(effective: float, defenses: DefenseVector) -> float:
    """Height of the effective surge above the barrier base (>= 0)."""
    return max(0.0, effective - defenses.barrier_base)


def realized_event_damage(
    params: CityParameters,
    defenses: DefenseVector,
    raw_surge: float,
    rng: np.random.Generator,
    zones: Optional[CityZones] = None,
) -> float:
    """Damage of one realized surge with a sampled barrier outcome.

    Args:
        params:    City configuration.
        defenses:  Current (feasible) levers.
        raw_surge: Raw surge height (m).
        rng:       Random source; exactly one uniform draw is consumed.
        zones:     Pre-computed partition for ``defenses`` (optional).

    Returns:
        Event damage ($).
    """
    if zones is None:
        zones = partition_city(params, defenses)
    h_eff = city_effective_surge(raw_surge, params)
    p_fail = city_failure_probability(
        surge_at_barrier(h_eff, defenses), defenses.D, params
    )
    failed = bool(rng.random() < p_fail)
    return event_damage(zones, h_eff, params, defenses.P, failed)


def expected_damage_given_surge(
    params: CityParameters,
    defenses: DefenseVector,
    raw_surge: float,
    zones: Optional[CityZones] = None,
) -> float:
    """Damage for one raw surge, averaged analytically over barrier failure."""
    if zones is None:
        zones = partition_city(params, defenses)
    h_eff = city_effective_surge(raw_surge, params)
    p_fail = city_failure_probability(
        surge_at_barrier(h_eff, defenses), defenses.D, params
    )
    if h_eff <= 0.0:
        return 0.0
    d_failed = event_damage(zones, h_eff, params, defenses.P, True)
    d_intact = event_damage(zones, h_eff, params, defenses.P, False)
    return p_fail * d_failed + (1.0 - p_fail) * d_intact


def surge_breakpoints(
    params: CityParameters, defenses: DefenseVector, zones: CityZones
) -> List[float]:
    """Raw surges where E[damage | h] has a kink or a jump.

    These are the seawall crest, the raw images of every zone edge and the
    two corners of the barrier failure ramp.
    """
    elevations = {zone.z_low for zone in zones} | {zone.z_high for zone in zones}
    if defenses.D > 0.0:
        elevations.add(
            defenses.barrier_base + params.failure_onset_fraction * defenses.D
        )
    points = {params.seawall_height}
    for z in elevations:
        if z > 0.0:
            points.add(raw_surge_for_elevation(z, params))
    return sorted(points)


# --------------------------------------------------------------------------- #
# Integrators                                                                  #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class QuadratureIntegrator:
    """Deterministic adaptive quadrature (scipy.integrate.quad).

    Attributes:
        rtol:      Relative tolerance passed to quad.
        tail_mass: Probability mass cut from each tail; the default keeps
                   99.98 % of the distribution.
        limit:     Maximum number of quad subintervals.
    """

    rtol: float = 1e-6
    tail_mass: float = 1e-4
    limit: int = 200

    def __post_init__(self) -> None:
        if self.rtol <= 0.0:
            raise ValueError(f"rtol must be > 0, got {self.rtol}")
        if not 0.0 < self.tail_mass < 0.5:
            raise ValueError(f"tail_mass must be in (0, 0.5), got {self.tail_mass}")
        if self.limit < 1:
            raise ValueError(f"limit must be >= 1, got {self.limit}")

    def expected_damage(
        self,
        params: CityParameters,
        defenses: DefenseVector,
        dist: SurgeDistribution,
        zones: CityZones,
        rng: Optional[np.random.Generator] = None,
    ) -> float:
        """Integrate pdf(h) * E[damage | h] over the truncated support."""
        h_min = float(dist.ppf(self.tail_mass))
        h_max = float(dist.ppf(1.0 - self.tail_mass))
        if not h_max > h_min:
            return expected_damage_given_surge(params, defenses, h_min, zones)

        def integrand(h: float) -> float:
            return float(dist.pdf(h)) * expected_damage_given_surge(
                params, defenses, h, zones
            )

        points = [p for p in surge_breakpoints(params, defenses, zones) if h_min < p < h_max]
        result, abserr = integrate.quad(
            integrand,
            h_min,
            h_max,
            points=points or None,
            epsrel=self.rtol,
            limit=self.limit,
        )
        logger.debug(f"quad EAD={result:.6g} abserr={abserr:.3g} on [{h_min:.3g}, {h_max:.3g}]")
        return float(result)


@dataclass(frozen=True)
class MonteCarloIntegrator:
    """Sample-average EAD over ``n_samples`` surge draws."""

    n_samples: int = 1000

    def __post_init__(self) -> None:
        if self.n_samples < 1:
            raise ValueError(f"n_samples must be >= 1, got {self.n_samples}")

    def expected_damage(
        self,
        params: CityParameters,
        defenses: DefenseVector,
        dist: SurgeDistribution,
        zones: CityZones,
        rng: Optional[np.random.Generator] = None,
    ) -> float:
        if rng is None:
            raise ValueError("MonteCarloIntegrator requires an explicit random generator")
        samples = np.atleast_1d(dist.rvs(size=self.n_samples, random_state=rng))
        total = 0.0
        for h in samples:
            total += expected_damage_given_surge(params, defenses, float(h), zones)
        return total / self.n_samples


Integrator = Union[QuadratureIntegrator, MonteCarloIntegrator]


def expected_annual_damage(
    params: CityParameters,
    defenses: DefenseVector,
    dist: SurgeDistribution,
    integrator: Optional[Integrator] = None,
    rng: Optional[np.random.Generator] = None,
    zones: Optional[CityZones] = None,
) -> float:
    """Expected damage over one year's surge distribution.

    Args:
        params:     City configuration.
        defenses:   Current (feasible) levers.
        dist:       Surge distribution for the year.
        integrator: QuadratureIntegrator (default) or MonteCarloIntegrator.
        rng:        Random source; only the Monte Carlo integrator uses it.
        zones:      Pre-computed partition for ``defenses`` (optional).

    Returns:
        Expected annual damage ($).
    """
    if zones is None:
        zones = partition_city(params, defenses)

    point = _point_mass_value(dist)
    if point is not None:
        return expected_damage_given_surge(params, defenses, point, zones)

    if integrator is None:
        integrator = QuadratureIntegrator()
    return integrator.expected_damage(params, defenses, dist, zones, rng)
