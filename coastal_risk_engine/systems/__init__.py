"""Systems: effective surge, barrier failure, event damage, damage expectation."""
from .surge import effective_surge, city_effective_surge
from .barrier import barrier_failure_probability, city_failure_probability
from .damage import base_zone_damage, zone_damage, threshold_penalty, event_damage
from .expectation import (
    PointMass,
    QuadratureIntegrator,
    MonteCarloIntegrator,
    realized_event_damage,
    expected_damage_given_surge,
    expected_annual_damage,
)

__all__ = [
    "effective_surge",
    "city_effective_surge",
    "barrier_failure_probability",
    "city_failure_probability",
    "base_zone_damage",
    "zone_damage",
    "threshold_penalty",
    "event_damage",
    "PointMass",
    "QuadratureIntegrator",
    "MonteCarloIntegrator",
    "realized_event_damage",
    "expected_damage_given_surge",
    "expected_annual_damage",
]
