"""
Time-stepping engine.

SimulationRunner drives one sequential-decision run over yearly epochs
1..n_years.  Per epoch:

  1. target   = policy(state, scenario, epoch)
  2. merged   = max(state.defenses, target)          (irreversibility)
  3. infeasible merged vector -> investment = damage = inf, no exception
  4. invest   = max(0, C(merged) - C(state.defenses))  (marginal cost)
  5. damage   = realized-event damage (StochasticScenario, one rng draw)
              | expected annual damage  (EADScenario)
  6. both flows discounted by (1 + r) ** -epoch and accumulated
  7. state.advance(merged); post-step hooks fire

Usage:
    from coastal_risk_engine import CityParameters, DefenseVector, StaticPolicy
    from coastal_risk_engine.simulation import (
        DistributionalForcing, EADScenario, SimulationRunner,
    )
    from scipy import stats

    params = CityParameters()
    forcing = DistributionalForcing.stationary(stats.gumbel_r(1.0, 0.5), 50)
    scenario = EADScenario(forcing, discount_rate=0.04)
    runner = SimulationRunner(params)
    outcome = runner.run(StaticPolicy(DefenseVector(D=5.0)), scenario)

The runner holds no per-run state between calls; every run builds its own
SimulationState, so separate runs never share mutable data.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Callable, Dict, List, Optional

import numpy as np

from ..core.costs import marginal_investment_cost
from ..core.parameters import CityParameters
from ..core.state import DefenseVector, SimulationState, is_feasible
from ..core.zones import partition_city
from ..systems.expectation import (
    Integrator,
    QuadratureIntegrator,
    expected_annual_damage,
    realized_event_damage,
)
from .forcing import EADScenario, Scenario, StochasticForcing, StochasticScenario
from .policies import Policy

logger = logging.getLogger("coastal_risk_engine.simulation")


@dataclass(frozen=True)
class StepRecord:
    """Undiscounted flows and levers of one epoch.

    Attributes:
        epoch:      1-based year index.
        investment: Marginal investment charged this epoch ($ or inf).
        damage:     Realized or expected damage this epoch ($ or inf).
        W, R, P, D, B: Levers in force after the merge.
        feasible:   False when the merged levers violated an invariant.
    """

    epoch: int
    investment: float
    damage: float
    W: float
    R: float
    P: float
    D: float
    B: float
    feasible: bool = True

    @property
    def defenses(self) -> DefenseVector:
        return DefenseVector.unchecked(self.W, self.R, self.P, self.D, self.B)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class Outcome:
    """Discounted totals of one run."""

    investment: float
    damage: float

    @property
    def total_cost(self) -> float:
        return self.investment + self.damage


# Type alias for post-step hooks:  hook(state_after, record) -> None
StepHook = Callable[[SimulationState, StepRecord], None]


def discount_factor(epoch: int, rate: float) -> float:
    """End-of-year discount factor (1 + rate) ** -epoch."""
    return (1.0 + rate) ** (-epoch)


class SimulationRunner:
    """Runs the yearly decision loop for one city configuration.

    Attributes:
        params:     City configuration.
        integrator: Integration method for EAD scenarios.
    """

    def __init__(
        self,
        params: Optional[CityParameters] = None,
        integrator: Optional[Integrator] = None,
        post_step_hooks: Optional[List[StepHook]] = None,
    ) -> None:
        """Initialise the runner.

        Args:
            params:          City parameters (defaults to CityParameters()).
            integrator:      EAD integrator (defaults to QuadratureIntegrator()).
            post_step_hooks: Callables invoked with (state_after, record) at
                             the end of every epoch.
        """
        self.params: CityParameters = params if params is not None else CityParameters()
        self.integrator: Integrator = (
            integrator if integrator is not None else QuadratureIntegrator()
        )
        self._post_hooks: List[StepHook] = list(post_step_hooks or [])

    def register_post_hook(self, hook: StepHook) -> None:
        """Add a post-step hook."""
        self._post_hooks.append(hook)

    # ------------------------------------------------------------------ #
    # Single epoch                                                          #
    # ------------------------------------------------------------------ #

    def step(
        self,
        state: SimulationState,
        policy: Policy,
        scenario: Scenario,
        rng: Optional[np.random.Generator] = None,
    ) -> StepRecord:
        """Advance ``state`` by one epoch and return its record.

        Args:
            state:    Run state; mutated exactly once via advance().
            policy:   Target-vector policy.
            scenario: StochasticScenario or EADScenario.
            rng:      Random source (realized surges, Monte Carlo EAD).

        Returns:
            Undiscounted StepRecord for the epoch.
        """
        epoch = state.epoch + 1
        target = policy(state, scenario, epoch)
        merged = state.defenses.merge(target)

        if not is_feasible(merged, self.params):
            logger.warning(f"epoch {epoch}: infeasible levers {merged.to_dict()}")
            record = StepRecord(
                epoch, math.inf, math.inf,
                merged.W, merged.R, merged.P, merged.D, merged.B,
                feasible=False,
            )
            state.advance(merged)
            self._fire_hooks(state, record)
            return record

        investment = marginal_investment_cost(self.params, state.defenses, merged)
        zones = partition_city(self.params, merged)

        if isinstance(scenario, StochasticScenario):
            if rng is None:
                raise ValueError("realized-surge scenarios require an explicit random generator")
            damage = realized_event_damage(
                self.params, merged, scenario.get_surge(epoch), rng, zones
            )
        elif isinstance(scenario, EADScenario):
            damage = expected_annual_damage(
                self.params, merged, scenario.get_distribution(epoch),
                self.integrator, rng, zones,
            )
        else:
            raise TypeError(f"unsupported scenario type: {type(scenario).__name__}")

        record = StepRecord(
            epoch, investment, damage,
            merged.W, merged.R, merged.P, merged.D, merged.B,
        )
        logger.debug(
            f"epoch {epoch}: investment={investment:.4g} damage={damage:.4g}"
        )
        state.advance(merged)
        self._fire_hooks(state, record)
        return record

    def _fire_hooks(self, state: SimulationState, record: StepRecord) -> None:
        for hook in self._post_hooks:
            hook(state, record)

    # ------------------------------------------------------------------ #
    # Full runs                                                             #
    # ------------------------------------------------------------------ #

    def run_trace(
        self,
        policy: Policy,
        scenario: Scenario,
        rng: Optional[np.random.Generator] = None,
        initial: Optional[DefenseVector] = None,
    ) -> List[StepRecord]:
        """Run every epoch and return the undiscounted per-epoch records.

        Args:
            policy:   Target-vector policy.
            scenario: Scenario supplying surges or distributions.
            rng:      Random source; required for realized surges and
                      Monte Carlo EAD, never touched by quadrature.
            initial:  Levers already in place before epoch 1.

        Returns:
            List of StepRecord, one per epoch, in order.
        """
        state = SimulationState(defenses=initial if initial is not None else DefenseVector.zero())
        return [self.step(state, policy, scenario, rng) for _ in range(scenario.n_years)]

    def run(
        self,
        policy: Policy,
        scenario: Scenario,
        rng: Optional[np.random.Generator] = None,
        initial: Optional[DefenseVector] = None,
    ) -> Outcome:
        """Run every epoch and return discounted (investment, damage).

        An infeasible epoch makes both totals infinite.
        """
        total_investment = 0.0
        total_damage = 0.0
        for record in self.run_trace(policy, scenario, rng, initial):
            df = discount_factor(record.epoch, scenario.discount_rate)
            total_investment += record.investment * df
            total_damage += record.damage * df

        logger.info(
            f"run finished: {scenario.n_years} epochs, "
            f"investment={total_investment:.4g}, damage={total_damage:.4g}"
        )
        return Outcome(total_investment, total_damage)

    def run_ensemble(
        self,
        policy: Policy,
        forcing: StochasticForcing,
        discount_rate: float,
        rng: np.random.Generator,
    ) -> List[Outcome]:
        """Run every scenario row of a realized-surge forcing.

        Each row gets its own SimulationState; barrier outcomes draw from
        the single ``rng`` in row order, so the ensemble is reproducible.
        """
        outcomes = []
        for idx in range(forcing.n_scenarios):
            scenario = StochasticScenario(forcing, idx, discount_rate)
            outcomes.append(self.run(policy, scenario, rng))
        return outcomes
