"""
Stopping Criterion Base Module
Capability set shared by every halting rule and its run-time bookkeeping.

A Criterion is an immutable description ("stop after 100 iterations").
Its CriterionState is the mutable record of whether, and when, it fired.
The two trees are built in lockstep and always traversed top-down together.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..interface.problem import Algorithm, Problem
    from ..interface.state import State


@dataclass
class CriterionState:
    """
    Mutable bookkeeping attached to a Criterion.

    ``at_iteration`` semantics:
      -1  not triggered
       0  triggered at initialization
       k  triggered at iteration k
    """
    at_iteration: int = -1

    @property
    def triggered(self) -> bool:
        return self.at_iteration >= 0


@dataclass
class DefaultState(CriterionState):
    """Generic "have I triggered, and when" marker."""


class Criterion(ABC):
    """
    Immutable halting rule.

    New variants subclass this and implement the capability set below;
    the core never needs to know about them.  ``check_finished`` mutates
    the paired state and must be called exactly once per iteration;
    ``is_finished`` is a pure read for diagnostics.
    """

    # ------------------------------------------------------------------
    # State lifecycle
    # ------------------------------------------------------------------

    def init_state(self, problem: Problem, algorithm: Algorithm) -> CriterionState:
        """Create a fresh state tree matching this criterion's shape."""
        return DefaultState()

    def reset_state(
        self,
        problem: Problem,
        algorithm: Algorithm,
        state: State,
        criterion_state: CriterionState,
    ) -> CriterionState:
        """Reset ``criterion_state`` in place to "not yet triggered"."""
        criterion_state.at_iteration = -1
        return criterion_state

    # ------------------------------------------------------------------
    # Termination checks
    # ------------------------------------------------------------------

    @abstractmethod
    def is_finished(
        self,
        problem: Problem,
        algorithm: Algorithm,
        state: State,
        criterion_state: CriterionState,
    ) -> bool:
        """Return whether the criterion holds, without touching any state."""

    @abstractmethod
    def check_finished(
        self,
        problem: Problem,
        algorithm: Algorithm,
        state: State,
        criterion_state: CriterionState,
    ) -> bool:
        """Return whether the criterion holds, recording the trigger."""

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    @abstractmethod
    def get_reason(self, criterion_state: CriterionState) -> Optional[str]:
        """Human-readable explanation of the trigger, or None."""

    @abstractmethod
    def indicates_convergence(self, criterion_state: Optional[CriterionState] = None) -> bool:
        """
        Whether stopping on this criterion certifies the result.

        Without a state this is the static property of the rule.  With a
        state it additionally requires that the criterion actually fired.
        """

    def summary(self, criterion_state: CriterionState) -> str:
        status = "reached" if criterion_state.triggered else "not reached"
        return f"{self!r}:\t{status}"

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def __and__(self, other: Criterion) -> Criterion:
        from .composite import All
        if not isinstance(other, Criterion):
            return NotImplemented
        left = self.criteria if isinstance(self, All) else (self,)
        right = other.criteria if isinstance(other, All) else (other,)
        return All(*left, *right)

    def __or__(self, other: Criterion) -> Criterion:
        from .composite import Any
        if not isinstance(other, Criterion):
            return NotImplemented
        left = self.criteria if isinstance(self, Any) else (self,)
        right = other.criteria if isinstance(other, Any) else (other,)
        return Any(*left, *right)


def _converged_if_triggered(criterion: Criterion, criterion_state: Optional[CriterionState],
                            static: bool) -> bool:
    """Shared tail of ``indicates_convergence`` for the built-in criteria."""
    if criterion_state is None:
        return static
    return static and criterion.get_reason(criterion_state) is not None


# =============================================================================
# Root-level helpers (criterion from the Algorithm, state from the State)
# =============================================================================

def _root_criterion_state(state: State) -> CriterionState:
    criterion_state = getattr(state, "criterion_state", None)
    if criterion_state is None:
        raise ValueError(
            f"{type(state).__name__} has no criterion_state; "
            "initialize it with init_stopping_state() first"
        )
    return criterion_state


def init_stopping_state(
    problem: Problem,
    algorithm: Algorithm,
    criterion: Optional[Criterion] = None,
) -> CriterionState:
    """Create the state tree for ``criterion`` (default: the algorithm's)."""
    criterion = criterion if criterion is not None else algorithm.stopping_criterion
    return criterion.init_state(problem, algorithm)


def reset_stopping_state(
    problem: Problem,
    algorithm: Algorithm,
    state: State,
    criterion: Optional[Criterion] = None,
    criterion_state: Optional[CriterionState] = None,
) -> CriterionState:
    """Reset an existing state tree in place, preserving its shape."""
    criterion = criterion if criterion is not None else algorithm.stopping_criterion
    if criterion_state is None:
        criterion_state = _root_criterion_state(state)
    return criterion.reset_state(problem, algorithm, state, criterion_state)


def is_finished(
    problem: Problem,
    algorithm: Algorithm,
    state: State,
    criterion: Optional[Criterion] = None,
    criterion_state: Optional[CriterionState] = None,
) -> bool:
    """Inspect-only termination check."""
    criterion = criterion if criterion is not None else algorithm.stopping_criterion
    if criterion_state is None:
        criterion_state = _root_criterion_state(state)
    return criterion.is_finished(problem, algorithm, state, criterion_state)


def check_finished(
    problem: Problem,
    algorithm: Algorithm,
    state: State,
    criterion: Optional[Criterion] = None,
    criterion_state: Optional[CriterionState] = None,
) -> bool:
    """
    Mutating termination check.

    Call exactly once per iteration for a given state; a second call in
    the same iteration leaves the recorded bookkeeping inconsistent.
    """
    criterion = criterion if criterion is not None else algorithm.stopping_criterion
    if criterion_state is None:
        criterion_state = _root_criterion_state(state)
    return criterion.check_finished(problem, algorithm, state, criterion_state)


def get_reason(criterion: Criterion, criterion_state: CriterionState) -> Optional[str]:
    return criterion.get_reason(criterion_state)


def indicates_convergence(
    criterion: Criterion,
    criterion_state: Optional[CriterionState] = None,
) -> bool:
    return criterion.indicates_convergence(criterion_state)
