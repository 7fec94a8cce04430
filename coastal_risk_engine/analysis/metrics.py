"""
Run metrics.

Summary statistics over traces and ensembles of outcomes.  All functions
are side-effect free.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

import numpy as np

from ..core.state import LEVER_NAMES
from ..simulation.runner import Outcome, StepRecord


def _describe(values: np.ndarray) -> Dict[str, float]:
    return {
        "mean": float(np.mean(values)),
        "std": float(np.std(values)),
        "min": float(np.min(values)),
        "max": float(np.max(values)),
    }


def summary_statistics(outcomes: Sequence[Outcome]) -> Dict[str, Dict[str, float]]:
    """Mean, std, min and max of investment, damage and total cost.

    Args:
        outcomes: Outcomes of independent runs (e.g. run_ensemble()).

    Returns:
        Nested dict keyed by "investment", "damage", "total_cost".
    """
    if not outcomes:
        raise ValueError("summary_statistics needs at least one outcome")
    investment = np.array([o.investment for o in outcomes], dtype=np.float64)
    damage = np.array([o.damage for o in outcomes], dtype=np.float64)
    return {
        "investment": _describe(investment),
        "damage": _describe(damage),
        "total_cost": _describe(investment + damage),
    }


def feasible_fraction(trace: Sequence[StepRecord]) -> float:
    """Share of epochs whose merged levers were feasible."""
    if not trace:
        return 0.0
    return float(np.mean([r.feasible for r in trace]))


def lever_matrix(trace: Sequence[StepRecord]) -> np.ndarray:
    """Levers per epoch as an (n_epochs, 5) array in W, R, P, D, B order."""
    return np.array(
        [[getattr(r, name) for name in LEVER_NAMES] for r in trace],
        dtype=np.float64,
    ).reshape(len(trace), len(LEVER_NAMES))


def is_irreversible(trace: Sequence[StepRecord]) -> bool:
    """True when no lever ever decreases along the trace."""
    levers = lever_matrix(trace)
    if len(levers) < 2:
        return True
    return bool(np.all(np.diff(levers, axis=0) >= 0.0))


def damage_series(trace: Sequence[StepRecord]) -> List[float]:
    """Undiscounted damage per epoch."""
    return [r.damage for r in trace]
