"""Simulation: forcing, scenarios, policies and the time-stepping runner."""
from .forcing import DistributionalForcing, EADScenario, StochasticForcing, StochasticScenario
from .policies import Policy, ScheduledPolicy, StaticPolicy
from .runner import Outcome, SimulationRunner, StepHook, StepRecord

__all__ = [
    "DistributionalForcing",
    "EADScenario",
    "StochasticForcing",
    "StochasticScenario",
    "Policy",
    "ScheduledPolicy",
    "StaticPolicy",
    "Outcome",
    "SimulationRunner",
    "StepHook",
    "StepRecord",
]
