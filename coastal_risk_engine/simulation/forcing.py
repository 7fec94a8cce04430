"""
Surge forcing and scenarios.

Two kinds of forcing drive the engine:

  StochasticForcing     pre-generated raw surges, shape (n_scenarios, n_years);
                        consumed in realized-event mode
  DistributionalForcing one surge distribution per year;
                        consumed in expected-annual-damage mode

A scenario binds a forcing to a discount rate (and, for realized surges, to
one row of the matrix).  The runner picks the damage mode from the scenario
type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from ..systems.expectation import SurgeDistribution


class StochasticForcing:
    """Matrix of realized raw surges, one row per scenario.

    Attributes:
        surges: float64 array of shape (n_scenarios, n_years).
    """

    def __init__(self, surges: Any) -> None:
        arr = np.array(surges, dtype=np.float64)
        if arr.ndim == 1:
            arr = arr[np.newaxis, :]
        if arr.ndim != 2:
            raise ValueError(f"surges must be 1-D or 2-D, got shape {arr.shape}")
        if arr.shape[0] < 1:
            raise ValueError("surges must contain at least one scenario")
        if arr.shape[1] < 1:
            raise ValueError("surges must contain at least one year")
        if not np.all(np.isfinite(arr)):
            raise ValueError("surges must be finite")
        arr.setflags(write=False)
        self.surges: NDArray[np.float64] = arr

    @classmethod
    def sample(
        cls,
        dist: SurgeDistribution,
        n_scenarios: int,
        n_years: int,
        rng: np.random.Generator,
    ) -> "StochasticForcing":
        """Draw an (n_scenarios, n_years) surge matrix from one distribution."""
        surges = dist.rvs(size=(n_scenarios, n_years), random_state=rng)
        return cls(surges)

    @property
    def n_scenarios(self) -> int:
        return int(self.surges.shape[0])

    @property
    def n_years(self) -> int:
        return int(self.surges.shape[1])

    def get_surge(self, scenario_idx: int, year: int) -> float:
        """Raw surge of one scenario in a 1-based year."""
        if not 0 <= scenario_idx < self.n_scenarios:
            raise IndexError(f"scenario_idx {scenario_idx} out of range (n={self.n_scenarios})")
        if not 1 <= year <= self.n_years:
            raise IndexError(f"year {year} out of range (1..{self.n_years})")
        return float(self.surges[scenario_idx, year - 1])

    def __repr__(self) -> str:
        return f"StochasticForcing({self.n_scenarios} scenarios, {self.n_years} years)"


class DistributionalForcing:
    """One surge distribution per year."""

    def __init__(self, distributions: Sequence[SurgeDistribution]) -> None:
        dists: Tuple[SurgeDistribution, ...] = tuple(distributions)
        if not dists:
            raise ValueError("at least one distribution is required")
        self.distributions = dists

    @classmethod
    def stationary(cls, dist: SurgeDistribution, n_years: int) -> "DistributionalForcing":
        """Same distribution every year."""
        if n_years < 1:
            raise ValueError(f"n_years must be >= 1, got {n_years}")
        return cls([dist] * n_years)

    @property
    def n_years(self) -> int:
        return len(self.distributions)

    def get_distribution(self, year: int) -> SurgeDistribution:
        """Surge distribution of a 1-based year."""
        if not 1 <= year <= self.n_years:
            raise IndexError(f"year {year} out of range (1..{self.n_years})")
        return self.distributions[year - 1]

    def __repr__(self) -> str:
        return f"DistributionalForcing({self.n_years} years)"


@dataclass(frozen=True)
class StochasticScenario:
    """One realized surge path: a row of a StochasticForcing."""

    forcing: StochasticForcing
    scenario_idx: int = 0
    discount_rate: float = 0.0

    def __post_init__(self) -> None:
        if not 0 <= self.scenario_idx < self.forcing.n_scenarios:
            raise ValueError(
                f"scenario_idx {self.scenario_idx} out of range "
                f"(n_scenarios={self.forcing.n_scenarios})"
            )
        if not 0.0 <= self.discount_rate < 1.0:
            raise ValueError(f"discount_rate must be in [0, 1), got {self.discount_rate}")

    @property
    def n_years(self) -> int:
        return self.forcing.n_years

    def get_surge(self, year: int) -> float:
        return self.forcing.get_surge(self.scenario_idx, year)


@dataclass(frozen=True)
class EADScenario:
    """Distributional surge forcing evaluated in expected-damage mode."""

    forcing: DistributionalForcing
    discount_rate: float = 0.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.discount_rate < 1.0:
            raise ValueError(f"discount_rate must be in [0, 1), got {self.discount_rate}")

    @property
    def n_years(self) -> int:
        return self.forcing.n_years

    def get_distribution(self, year: int) -> SurgeDistribution:
        return self.forcing.get_distribution(year)


Scenario = Union[StochasticScenario, EADScenario]
