"""Core: parameters, levers, zones, geometry and investment costs."""
from .parameters import CityParameters
from .state import DefenseVector, SimulationState, is_feasible
from .zones import CityZones, Zone, ZoneType, partition_city, zone_boundaries, zone_values
from .costs import investment_cost, marginal_investment_cost

__all__ = [
    "CityParameters",
    "DefenseVector",
    "SimulationState",
    "is_feasible",
    "CityZones",
    "Zone",
    "ZoneType",
    "partition_city",
    "zone_boundaries",
    "zone_values",
    "investment_cost",
    "marginal_investment_cost",
]
