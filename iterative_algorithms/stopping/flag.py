"""External cancellation through a shared flag."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .base import Criterion, CriterionState, _converged_if_triggered

if TYPE_CHECKING:
    from ..interface.problem import Algorithm, Problem
    from ..interface.state import State


@dataclass(frozen=True, repr=False)
class WhenFlagged(Criterion):
    """
    Stop once ``flag`` is set.

    The flag is owned by the caller and may be set from another thread;
    the loop only notices it at the next iteration boundary.
    """
    flag: threading.Event = field(default_factory=threading.Event)

    def cancel(self) -> None:
        self.flag.set()

    def is_finished(self, problem: Problem, algorithm: Algorithm, state: State,
                    criterion_state: CriterionState) -> bool:
        return self.flag.is_set()

    def check_finished(self, problem: Problem, algorithm: Algorithm, state: State,
                       criterion_state: CriterionState) -> bool:
        if state.iteration == 0:
            criterion_state.at_iteration = -1
        if self.flag.is_set():
            criterion_state.at_iteration = state.iteration
            return True
        return False

    def get_reason(self, criterion_state: CriterionState) -> Optional[str]:
        if criterion_state.triggered:
            return f"At iteration {criterion_state.at_iteration} the run was cancelled externally.\n"
        return None

    def indicates_convergence(self, criterion_state: Optional[CriterionState] = None) -> bool:
        return _converged_if_triggered(self, criterion_state, False)

    def summary(self, criterion_state: CriterionState) -> str:
        status = "reached" if criterion_state.triggered else "not reached"
        return f"Cancellation flag:\t{status}"

    def __repr__(self) -> str:
        return "WhenFlagged()"
