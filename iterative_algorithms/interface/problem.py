"""
Problem and Algorithm base classes.

A Problem is the immutable input; an Algorithm is the immutable
configuration, including the root stopping criterion.  Together they
create and advance a State.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..stopping.base import Criterion, CriterionState
    from .state import State


class Problem(ABC):
    """Marker base for problem descriptions. No required fields."""


class Algorithm(ABC):
    """
    Static parameters of an iterative method.

    Subclasses must provide a ``stopping_criterion`` attribute and implement
    ``init_state`` and ``step``.  ``reset_state`` only needs overriding when
    a reused State carries more than the iteration counter.
    """

    stopping_criterion: Criterion

    @property
    def name(self) -> str:
        """Group name attached to log records."""
        return type(self).__name__

    @abstractmethod
    def init_state(self, problem: Problem, criterion_state: CriterionState, **kwargs) -> State:
        """Build a fresh State holding ``criterion_state``."""

    def reset_state(self, problem: Problem, state: State, **kwargs) -> State:
        """
        Reset ``state`` in place for a new run.

        The criterion state is reset separately by the solve loop.
        """
        state.iteration = 0
        return state

    @abstractmethod
    def step(self, problem: Problem, state: State) -> State:
        """Advance ``state.iterate`` by one iteration."""
