"""
Coastal Risk Engine.

Flood-risk cost/damage simulation for a coastal city wedge with five
irreversible mitigation levers (withdrawal, flood-proofing height and
coverage, barrier base and crest).

Public API:
    CityParameters        — immutable city configuration
    DefenseVector         — five-lever decision {W, R, P, D, B}
    SimulationState       — per-run state (levers + epoch)
    partition_city        — five-zone partition of the wedge
    investment_cost       — total investment of a lever set
    barrier_failure_probability
    event_damage          — damage of one surge event
    realized_event_damage — one sampled barrier outcome
    expected_annual_damage
    SimulationRunner      — yearly time-stepping engine
    StaticPolicy          — build-once policy
"""

from .core.parameters import CityParameters
from .core.state import DefenseVector, SimulationState, is_feasible
from .core.zones import CityZones, Zone, ZoneType, partition_city
from .core.costs import investment_cost, marginal_investment_cost
from .systems.barrier import barrier_failure_probability
from .systems.surge import effective_surge
from .systems.damage import event_damage
from .systems.expectation import (
    MonteCarloIntegrator,
    PointMass,
    QuadratureIntegrator,
    expected_annual_damage,
    expected_damage_given_surge,
    realized_event_damage,
)
from .simulation.forcing import (
    DistributionalForcing,
    EADScenario,
    StochasticForcing,
    StochasticScenario,
)
from .simulation.policies import ScheduledPolicy, StaticPolicy
from .simulation.runner import Outcome, SimulationRunner, StepRecord
from .analysis.metrics import summary_statistics
from .analysis.logging import TraceLogger

__version__ = "0.1.0"

__all__ = [
    "CityParameters",
    "DefenseVector",
    "SimulationState",
    "is_feasible",
    "CityZones",
    "Zone",
    "ZoneType",
    "partition_city",
    "investment_cost",
    "marginal_investment_cost",
    "barrier_failure_probability",
    "effective_surge",
    "event_damage",
    "MonteCarloIntegrator",
    "PointMass",
    "QuadratureIntegrator",
    "expected_annual_damage",
    "expected_damage_given_surge",
    "realized_event_damage",
    "DistributionalForcing",
    "EADScenario",
    "StochasticForcing",
    "StochasticScenario",
    "ScheduledPolicy",
    "StaticPolicy",
    "Outcome",
    "SimulationRunner",
    "StepRecord",
    "summary_statistics",
    "TraceLogger",
]
