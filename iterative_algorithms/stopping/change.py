"""
Iterate-change criterion.

Stops when consecutive iterates move less than a tolerance, measured with
a numpy norm.  This is the built-in criterion that certifies convergence.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

import numpy as np

from .base import Criterion, CriterionState, _converged_if_triggered

if TYPE_CHECKING:
    from ..interface.problem import Algorithm, Problem
    from ..interface.state import State


@dataclass
class ChangeState(CriterionState):
    """Last seen iterate and the size of the last measured step."""
    previous: Optional[np.ndarray] = None
    change: float = float('inf')


@dataclass(frozen=True, repr=False)
class ChangeBelow(Criterion):
    """
    Stop when ``norm(x_k - x_{k-1}) < tolerance``.

    Args:
        tolerance: strictly positive threshold on the step size.
        norm: callable reducing a difference array to a scalar.
    """
    tolerance: float
    norm: Callable[[Any], float] = np.linalg.norm

    def __post_init__(self):
        if not self.tolerance > 0:
            raise ValueError(f"ChangeBelow tolerance must be positive, got {self.tolerance}")

    def init_state(self, problem: Problem, algorithm: Algorithm) -> ChangeState:
        return ChangeState()

    def reset_state(self, problem: Problem, algorithm: Algorithm, state: State,
                    criterion_state: ChangeState) -> ChangeState:
        criterion_state.previous = None
        criterion_state.change = float('inf')
        criterion_state.at_iteration = -1
        return criterion_state

    def is_finished(self, problem: Problem, algorithm: Algorithm, state: State,
                    criterion_state: ChangeState) -> bool:
        return state.iteration > 0 and criterion_state.change < self.tolerance

    def check_finished(self, problem: Problem, algorithm: Algorithm, state: State,
                       criterion_state: ChangeState) -> bool:
        k = state.iteration
        current = np.array(state.iterate, dtype=float, copy=True)
        if criterion_state.previous is None or k <= 0:
            criterion_state.at_iteration = -1
            criterion_state.previous = current
            criterion_state.change = float('inf')
            return False

        criterion_state.change = float(self.norm(current - criterion_state.previous))
        criterion_state.previous = current
        if criterion_state.change < self.tolerance:
            criterion_state.at_iteration = k
            return True
        return False

    def get_reason(self, criterion_state: ChangeState) -> Optional[str]:
        if criterion_state.triggered:
            return (f"At iteration {criterion_state.at_iteration} the change between iterates "
                    f"({criterion_state.change:.3e}) fell below {self.tolerance:g}.\n")
        return None

    def indicates_convergence(self, criterion_state: Optional[CriterionState] = None) -> bool:
        return _converged_if_triggered(self, criterion_state, True)

    def summary(self, criterion_state: CriterionState) -> str:
        status = "reached" if criterion_state.triggered else "not reached"
        return f"Change below {self.tolerance:g}:\t{status}"

    def __repr__(self) -> str:
        return f"ChangeBelow({self.tolerance:g})"
