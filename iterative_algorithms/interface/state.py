"""Mutable per-run record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..stopping.base import CriterionState


@dataclass
class State:
    """
    Evolving state of one run.

    Attributes:
        iterate: current solution value (opaque to the loop).
        iteration: number of completed steps, 0 before the first one.
        criterion_state: bookkeeping tree for the algorithm's stopping
            criterion; its shape is fixed once initialized.
    """
    iterate: Any = None
    iteration: int = 0
    criterion_state: Optional[CriterionState] = None

    def increment(self) -> State:
        self.iteration += 1
        return self
