"""Iteration-count cap."""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .base import Criterion, CriterionState, DefaultState, _converged_if_triggered

if TYPE_CHECKING:
    from ..interface.problem import Algorithm, Problem
    from ..interface.state import State


@dataclass(frozen=True, repr=False)
class AfterIteration(Criterion):
    """Stop once ``state.iteration`` reaches ``max_iterations``."""
    max_iterations: int

    def __post_init__(self):
        if isinstance(self.max_iterations, bool):
            raise TypeError("max_iterations must be an integer, got a bool")
        try:
            max_iterations = operator.index(self.max_iterations)
        except TypeError:
            raise TypeError(
                f"max_iterations must be an integer, got {type(self.max_iterations).__name__}"
            ) from None
        object.__setattr__(self, "max_iterations", max_iterations)
        if self.max_iterations < 0:
            raise ValueError(f"max_iterations must be >= 0, got {self.max_iterations}")

    def is_finished(self, problem: Problem, algorithm: Algorithm, state: State,
                    criterion_state: CriterionState) -> bool:
        return state.iteration >= self.max_iterations

    def check_finished(self, problem: Problem, algorithm: Algorithm, state: State,
                       criterion_state: DefaultState) -> bool:
        k = state.iteration
        if k == 0:
            criterion_state.at_iteration = -1
        if k >= self.max_iterations:
            criterion_state.at_iteration = k
            return True
        return False

    def get_reason(self, criterion_state: CriterionState) -> Optional[str]:
        if criterion_state.triggered and criterion_state.at_iteration >= self.max_iterations:
            return (f"At iteration {criterion_state.at_iteration} the algorithm reached "
                    f"its maximal number of iterations ({self.max_iterations}).\n")
        return None

    def indicates_convergence(self, criterion_state: Optional[CriterionState] = None) -> bool:
        # An iteration cap says nothing about the quality of the iterate
        return _converged_if_triggered(self, criterion_state, False)

    def summary(self, criterion_state: CriterionState) -> str:
        status = "reached" if criterion_state.triggered else "not reached"
        return f"Max Iteration {self.max_iterations}:\t{status}"

    def __repr__(self) -> str:
        return f"AfterIteration({self.max_iterations})"
