"""
Decision policies.

A policy is any callable

    policy(state, scenario, epoch) -> DefenseVector

that returns the *target* levers for an epoch.  It must be a pure function
of its inputs; the runner merges the target with the current levers, so a
policy can never lower protection.

StaticPolicy builds everything in the first epoch.  Its
``from_fractions`` constructor maps five unconstrained numbers in [0, 1]
(the usual optimiser box) onto a vector that always satisfies
W + B + D <= H_city by stick-breaking a total height budget:

    A = a_frac * H        total height budget
    W = w_frac * A        withdrawal share
    B = b_frac * (A - W)  base share of the remainder
    D = A - W - B         crest takes the rest
    R = r_frac * H
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

import numpy as np
from numpy.typing import NDArray

from ..core.parameters import CityParameters
from ..core.state import DefenseVector, SimulationState

# Type alias for a policy:  policy(state, scenario, epoch) -> target levers
Policy = Callable[[SimulationState, Any, int], DefenseVector]

MAX_RESIST_FRACTION = 0.99


class StaticPolicy:
    """Build a fixed defense vector in epoch 1 and nothing afterwards.

    Attributes:
        defenses: Target levers applied in the first epoch.
    """

    def __init__(self, defenses: DefenseVector) -> None:
        self.defenses: DefenseVector = defenses

    def __call__(self, state: SimulationState, scenario: Any, epoch: int) -> DefenseVector:
        if epoch == 1:
            return self.defenses
        return DefenseVector.zero()

    def parameters(self) -> NDArray[np.float64]:
        """Levers as a vector in W, R, P, D, B order (for optimisers)."""
        return self.defenses.to_array()

    @classmethod
    def from_parameters(cls, x: Sequence[float]) -> "StaticPolicy":
        """Inverse of parameters()."""
        if len(x) != 5:
            raise ValueError(f"expected 5 parameters, got {len(x)}")
        return cls(DefenseVector.from_array(np.asarray(x, dtype=np.float64)))

    @classmethod
    def from_fractions(
        cls,
        params: CityParameters,
        a_frac: float,
        w_frac: float,
        b_frac: float,
        r_frac: float,
        P: float,
    ) -> "StaticPolicy":
        """Constraint-free reparameterisation for box-bounded search."""
        for name, value in {
            "a_frac": a_frac,
            "w_frac": w_frac,
            "b_frac": b_frac,
            "r_frac": r_frac,
        }.items():
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        if not 0.0 <= P <= MAX_RESIST_FRACTION:
            raise ValueError(f"P must be in [0, {MAX_RESIST_FRACTION}], got {P}")

        H = params.city_max_height
        budget = a_frac * H
        W = w_frac * budget
        remaining = budget - W
        B = b_frac * remaining
        D = max(0.0, remaining - B)
        R = r_frac * H
        # a_frac == w_frac == 1 puts W on H_city, where withdrawal cost diverges
        W = float(min(W, np.nextafter(H, 0.0)))
        return cls(DefenseVector(W=W, R=R, P=P, D=D, B=B))

    def __repr__(self) -> str:
        d = self.defenses
        return f"StaticPolicy(W={d.W:g}, R={d.R:g}, P={d.P:g}, D={d.D:g}, B={d.B:g})"


class ScheduledPolicy:
    """Piecewise-constant targets keyed by the first epoch they apply to.

    Example:
        ScheduledPolicy({1: DefenseVector(D=2.0), 20: DefenseVector(D=4.0)})
    """

    def __init__(self, schedule: dict) -> None:
        if not schedule:
            raise ValueError("schedule must contain at least one entry")
        if min(schedule) < 1:
            raise ValueError("schedule epochs are 1-based")
        self._epochs = sorted(schedule)
        self._targets = [schedule[e] for e in self._epochs]

    def __call__(self, state: SimulationState, scenario: Any, epoch: int) -> DefenseVector:
        target = DefenseVector.zero()
        for start, vec in zip(self._epochs, self._targets):
            if epoch >= start:
                target = vec
            else:
                break
        return target
