"""
Barrier failure model.

Failure probability as a function of the surge height measured above the
barrier base (h) and the crest height D:

    p = p_min                                           h <  t * D
    p = p_min + (1 - p_min) * (h - t*D) / (D * (1 - t))  t * D <= h < D
    p = 1                                               h >= D   (overtopping)

With no barrier (D == 0) any positive surge is a certain failure.  The onset
fraction t is validated to lie in [0, 1) when CityParameters is built, so the
ramp denominator never vanishes.
"""

from __future__ import annotations

from ..core.parameters import CityParameters


def barrier_failure_probability(
    surge_at_barrier: float,
    crest_height: float,
    onset_fraction: float,
    min_probability: float,
) -> float:
    """Probability that the barrier fails for one surge.

    Args:
        surge_at_barrier: Surge height above the barrier base (m); negative
                          values are treated as 0.
        crest_height:     Barrier height D above its base (m).
        onset_fraction:   Fraction of D where the ramp starts, in [0, 1).
        min_probability:  Floor probability p_min.

    Returns:
        p in [p_min, 1].
    """
    assert onset_fraction < 1.0, "onset_fraction must be < 1"
    h = max(0.0, surge_at_barrier)

    if crest_height == 0.0:
        return 1.0 if h > 0.0 else min_probability

    onset = onset_fraction * crest_height
    if h < onset:
        return min_probability
    if h < crest_height:
        ramp = (h - onset) / (crest_height * (1.0 - onset_fraction))
        return min_probability + (1.0 - min_probability) * ramp
    return 1.0


def city_failure_probability(
    surge_at_barrier: float, crest_height: float, params: CityParameters
) -> float:
    """barrier_failure_probability() with ramp constants taken from params."""
    return barrier_failure_probability(
        surge_at_barrier,
        crest_height,
        params.failure_onset_fraction,
        params.min_failure_probability,
    )
