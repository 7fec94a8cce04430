"""
Discounting and objective functions.

Kept separate from the runner so that a trace can be re-discounted at a
different rate without re-simulating.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from ..core.parameters import CityParameters
from ..simulation.forcing import Scenario
from ..simulation.policies import Policy
from ..simulation.runner import Outcome, SimulationRunner, StepRecord, discount_factor


def apply_discount(value: float, epoch: int, rate: float) -> float:
    """Present value of a flow occurring at the end of ``epoch``."""
    return value * discount_factor(epoch, rate)


def calculate_npv(trace: Sequence[StepRecord], rate: float) -> Tuple[float, float]:
    """Discounted (investment, damage) totals of a trace.

    Args:
        trace: Records from SimulationRunner.run_trace().
        rate:  Annual discount rate.

    Returns:
        Tuple (npv_investment, npv_damage).
    """
    npv_investment = sum(apply_discount(r.investment, r.epoch, rate) for r in trace)
    npv_damage = sum(apply_discount(r.damage, r.epoch, rate) for r in trace)
    return float(npv_investment), float(npv_damage)


def total_cost(outcome: Outcome) -> float:
    """Investment plus damage."""
    return outcome.investment + outcome.damage


def objective_total_cost(
    params: CityParameters,
    policy: Policy,
    scenario: Scenario,
    rng: Optional[np.random.Generator] = None,
) -> float:
    """Single-objective wrapper for an external optimiser.

    Infeasible candidates evaluate to inf rather than raising.
    """
    return total_cost(SimulationRunner(params).run(policy, scenario, rng))


def objective_vector(
    params: CityParameters,
    policy: Policy,
    scenario: Scenario,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Two-objective wrapper returning [investment, damage]."""
    outcome = SimulationRunner(params).run(policy, scenario, rng)
    return np.array([outcome.investment, outcome.damage], dtype=np.float64)
