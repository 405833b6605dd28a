"""
Dummy Problem / Algorithm / State triple.

Handy for exercising a new Criterion or LoggingAction without writing a
real algorithm:

    from iterative_algorithms.testing import DummyAlgorithm, DummyProblem
    state = solve(DummyProblem(), DummyAlgorithm(AfterIteration(3)))
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from .interface.problem import Algorithm, Problem
from .interface.state import State
from .stopping.base import Criterion, CriterionState


class DummyProblem(Problem):
    """Problem with no data."""


@dataclass
class DummyState(State):
    """State whose iterate is a running float counter."""
    iterate: float = 0.0


@dataclass
class DummyAlgorithm(Algorithm):
    """
    Adds 1.0 to the iterate on every step.

    Attributes:
        stopping_criterion: root criterion.
        step_sleep: seconds to sleep inside each step, for duration tests.
    """
    stopping_criterion: Criterion
    step_sleep: float = 0.0

    def init_state(self, problem: Problem, criterion_state: CriterionState, **kwargs) -> DummyState:
        return DummyState(iterate=float(kwargs.get("x0", 0.0)), iteration=0,
                          criterion_state=criterion_state)

    def reset_state(self, problem: Problem, state: DummyState, **kwargs) -> DummyState:
        state.iteration = 0
        if "x0" in kwargs:
            state.iterate = float(kwargs["x0"])
        return state

    def step(self, problem: Problem, state: DummyState) -> DummyState:
        if self.step_sleep > 0:
            time.sleep(self.step_sleep)
        state.iterate += 1.0
        return state
