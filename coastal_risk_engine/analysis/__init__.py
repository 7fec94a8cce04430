"""Analysis: objectives, metrics and trace logging."""
from .objectives import apply_discount, calculate_npv, objective_total_cost, total_cost
from .metrics import summary_statistics
from .logging import TraceLogger

__all__ = [
    "apply_discount",
    "calculate_npv",
    "objective_total_cost",
    "total_cost",
    "summary_statistics",
    "TraceLogger",
]
