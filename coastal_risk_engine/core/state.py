"""
State containers for the Coastal Risk Engine.

Two tiers:
  - DefenseVector   : immutable five-lever decision {W, R, P, D, B}
  - SimulationState : per-run mutable container (current vector + epoch)

Lever semantics:
  W  relocation (withdrawal) elevation, absolute (m)
  R  flood-proofing height, relative to W (m)
  P  flood-proofed fraction of buildings, 0 <= P < 1
  D  barrier crest height, relative to its base (m)
  B  barrier base elevation, relative to W (m)

Only the city-independent invariants are enforced at construction.  The
wedge constraint W + B + D <= H_city is checked by is_feasible(), which the
engine consults every epoch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

import numpy as np
from numpy.typing import NDArray

from .parameters import CityParameters

LEVER_NAMES = ("W", "R", "P", "D", "B")


# --------------------------------------------------------------------------- #
# Decision vector                                                              #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class DefenseVector:
    """Immutable set of the five mitigation levers.

    Attributes:
        W: Withdrawal elevation (m, >= 0).
        R: Flood-proofing height above W (m, >= 0).
        P: Flood-proofed fraction in [0, 1).
        D: Barrier crest height above its base (m, >= 0).
        B: Barrier base elevation above W (m, >= 0).
    """

    W: float = 0.0
    R: float = 0.0
    P: float = 0.0
    D: float = 0.0
    B: float = 0.0

    def __post_init__(self) -> None:
        """Reject negative heights and out-of-range coverage."""
        for name in ("W", "R", "D", "B"):
            value = getattr(self, name)
            if value < 0.0:
                raise ValueError(f"DefenseVector.{name} must be >= 0, got {value}")
        if not 0.0 <= self.P < 1.0:
            raise ValueError(f"DefenseVector.P must be in [0, 1), got {self.P}")

    @classmethod
    def zero(cls) -> "DefenseVector":
        """No protection at all."""
        return cls()

    @classmethod
    def unchecked(
        cls, W: float, R: float, P: float, D: float, B: float
    ) -> "DefenseVector":
        """Build a vector without invariant checks.

        Used for merged candidates inside the time loop, where a violation
        must surface as an infeasible epoch rather than an exception.
        """
        vec = object.__new__(cls)
        object.__setattr__(vec, "W", float(W))
        object.__setattr__(vec, "R", float(R))
        object.__setattr__(vec, "P", float(P))
        object.__setattr__(vec, "D", float(D))
        object.__setattr__(vec, "B", float(B))
        return vec

    def merge(self, other: "DefenseVector") -> "DefenseVector":
        """Element-wise maximum with another vector (irreversibility)."""
        return DefenseVector.unchecked(
            max(self.W, other.W),
            max(self.R, other.R),
            max(self.P, other.P),
            max(self.D, other.D),
            max(self.B, other.B),
        )

    @property
    def barrier_base(self) -> float:
        """Absolute elevation of the barrier base (W + B)."""
        return self.W + self.B

    @property
    def barrier_top(self) -> float:
        """Absolute elevation of the barrier crest (W + B + D)."""
        return self.W + self.B + self.D

    def to_array(self) -> NDArray[np.float64]:
        """Return levers as float64 array of shape (5,) in W, R, P, D, B order."""
        return np.array([self.W, self.R, self.P, self.D, self.B], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: NDArray[np.float64], validate: bool = True) -> "DefenseVector":
        """Construct from a length-5 array in W, R, P, D, B order."""
        arr = np.asarray(arr, dtype=np.float64)
        if arr.shape != (5,):
            raise ValueError(f"DefenseVector.from_array expects shape (5,), got {arr.shape}")
        values = [float(v) for v in arr]
        if validate:
            return cls(*values)
        return cls.unchecked(*values)

    def to_dict(self) -> Dict[str, float]:
        """Serialise to plain dictionary."""
        return {name: getattr(self, name) for name in LEVER_NAMES}

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "DefenseVector":
        """Deserialise from plain dictionary; missing levers default to 0.

        Keys other than W, R, P, D, B are rejected so that a misspelt lever
        in a configuration file fails loudly.
        """
        unknown = set(data) - set(LEVER_NAMES)
        if unknown:
            raise ValueError(f"Unknown levers: {sorted(unknown)}")
        return cls(**{name: float(data.get(name, 0.0)) for name in LEVER_NAMES})


def is_feasible(defenses: DefenseVector, params: CityParameters) -> bool:
    """Check a (possibly merged) vector against every lever invariant.

    Args:
        defenses: Candidate vector.
        params:   City configuration providing the wedge height.

    Returns:
        True when W, R, D, B >= 0, 0 <= P < 1, W < H_city and
        W + B + D <= H_city.
    """
    if min(defenses.W, defenses.R, defenses.D, defenses.B) < 0.0:
        return False
    if not 0.0 <= defenses.P < 1.0:
        return False
    # W == H_city would zero the withdrawal-cost denominator
    if defenses.W >= params.city_max_height:
        return False
    return defenses.barrier_top <= params.city_max_height


# --------------------------------------------------------------------------- #
# Run state                                                                    #
# --------------------------------------------------------------------------- #


@dataclass
class SimulationState:
    """Per-run state owned by a single SimulationRunner invocation.

    Attributes:
        defenses: Levers accumulated so far.
        epoch:    Number of completed epochs (0 before the first year).
    """

    defenses: DefenseVector = field(default_factory=DefenseVector.zero)
    epoch: int = 0

    def advance(self, new_defenses: DefenseVector) -> None:
        """Commit the merged vector and move to the next epoch."""
        self.defenses = new_defenses
        self.epoch += 1
