"""
Structured trace logger.

Provides TraceLogger — a lightweight observer that records StepRecord
objects during a run.  Supports serialisation to list-of-dicts for
downstream persistence.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..core.state import LEVER_NAMES, SimulationState
from ..simulation.runner import StepRecord


class TraceLogger:
    """Records StepRecord objects produced during a simulation run.

    Intended for use as a post-step hook with the SimulationRunner:

        logger = TraceLogger()
        runner.register_post_hook(logger.hook)

    Attributes:
        max_records: Maximum number of records to retain (None = unlimited).
    """

    def __init__(self, max_records: Optional[int] = None) -> None:
        """Initialise an empty logger.

        Args:
            max_records: If set, older records are discarded when the buffer
                         exceeds this limit (FIFO).
        """
        if max_records is not None and max_records <= 0:
            raise ValueError(
                f"max_records must be > 0 or None, got {max_records}"
            )
        self.max_records: Optional[int] = max_records
        self._records: List[StepRecord] = []

    def hook(self, state: SimulationState, record: StepRecord) -> None:
        """Post-step hook signature expected by SimulationRunner."""
        self.record(record)

    def record(self, record: StepRecord) -> None:
        """Append a record to the log."""
        self._records.append(record)
        if self.max_records is not None and len(self._records) > self.max_records:
            self._records.pop(0)

    def records(self) -> List[StepRecord]:
        """Return all recorded steps (copy), in chronological order."""
        return list(self._records)

    def clear(self) -> None:
        """Empty the log."""
        self._records = []

    def __len__(self) -> int:
        return len(self._records)

    def to_dicts(self) -> List[Dict[str, Any]]:
        """Serialise all records to a list of plain dictionaries."""
        return [r.to_dict() for r in self._records]

    def lever_series(self) -> Dict[str, List[float]]:
        """Time-series of each lever as lists."""
        return {
            name: [getattr(r, name) for r in self._records]
            for name in LEVER_NAMES
        }
