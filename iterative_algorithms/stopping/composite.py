"""
Composite Criteria
Logical AND / OR over an ordered tuple of child criteria.

Children and their states are zipped positionally.  The mutating check
evaluates every child on every call so each child's bookkeeping stays in
sync with the composite's; only the inspect-only check may short-circuit.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from .base import Criterion, CriterionState, _converged_if_triggered

if TYPE_CHECKING:
    from ..interface.problem import Algorithm, Problem
    from ..interface.state import State


@dataclass
class GroupState(CriterionState):
    """One child state per child criterion, in the same order."""
    children: List[CriterionState] = field(default_factory=list)


class _Group(Criterion):
    """Shared plumbing for All / Any."""

    heading = ""

    def __init__(self, *criteria: Criterion):
        if len(criteria) == 1 and isinstance(criteria[0], (list, tuple)):
            criteria = tuple(criteria[0])
        for c in criteria:
            if not isinstance(c, Criterion):
                raise TypeError(f"{type(self).__name__} expects Criterion children, got {c!r}")
        if not criteria:
            raise ValueError(f"{type(self).__name__} needs at least one criterion")
        self._criteria: Tuple[Criterion, ...] = tuple(criteria)

    @property
    def criteria(self) -> Tuple[Criterion, ...]:
        return self._criteria

    @abstractmethod
    def _combine(self, results: Iterable[bool]) -> bool:
        """Reduce the children's answers to the group's answer."""

    def _pairs(self, criterion_state: GroupState):
        if len(criterion_state.children) != len(self._criteria):
            raise ValueError(
                f"{type(self).__name__} has {len(self._criteria)} criteria but its state "
                f"holds {len(criterion_state.children)}"
            )
        return zip(self._criteria, criterion_state.children)

    # -- lifecycle -------------------------------------------------------------

    def init_state(self, problem: Problem, algorithm: Algorithm) -> GroupState:
        return GroupState(children=[c.init_state(problem, algorithm) for c in self._criteria])

    def reset_state(self, problem: Problem, algorithm: Algorithm, state: State,
                    criterion_state: GroupState) -> GroupState:
        for criterion, child_state in self._pairs(criterion_state):
            criterion.reset_state(problem, algorithm, state, child_state)
        criterion_state.at_iteration = -1
        return criterion_state

    # -- checks ----------------------------------------------------------------

    def is_finished(self, problem: Problem, algorithm: Algorithm, state: State,
                    criterion_state: GroupState) -> bool:
        return self._combine(
            c.is_finished(problem, algorithm, state, s) for c, s in self._pairs(criterion_state)
        )

    def check_finished(self, problem: Problem, algorithm: Algorithm, state: State,
                       criterion_state: GroupState) -> bool:
        k = state.iteration
        if k == 0:
            criterion_state.at_iteration = -1
        # Materialize first: every child must see this iteration
        results = [
            c.check_finished(problem, algorithm, state, s) for c, s in self._pairs(criterion_state)
        ]
        if self._combine(results):
            criterion_state.at_iteration = k
            return True
        return False

    # -- reporting -------------------------------------------------------------

    def get_reason(self, criterion_state: GroupState) -> Optional[str]:
        if not criterion_state.triggered:
            return None
        return "".join(
            c.get_reason(s) or "" for c, s in self._pairs(criterion_state)
        )

    def summary(self, criterion_state: GroupState) -> str:
        lines = [self.heading]
        for c, s in self._pairs(criterion_state):
            lines.append("    " + c.summary(s).replace("\n", "\n    "))
        status = "reached" if criterion_state.triggered else "not reached"
        lines.append(f"Overall: {status}")
        return "\n".join(lines)

    # -- value semantics -------------------------------------------------------

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self._criteria == other._criteria

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._criteria))

    def __len__(self) -> int:
        return len(self._criteria)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(repr(c) for c in self._criteria)})"

    def __str__(self) -> str:
        text = f"{type(self).__name__} with the Stopping Criteria:"
        for c in self._criteria:
            text += "\n     " + str(c).replace("\n", "\n    ")
        return text


class All(_Group):
    """Stop when every child criterion indicates to stop."""

    heading = "Stop When _all_ of the following are fulfilled:"

    def _combine(self, results: Iterable[bool]) -> bool:
        return all(results)

    def indicates_convergence(self, criterion_state: Optional[CriterionState] = None) -> bool:
        # Reaching the AND through one convergence-indicating child counts
        static = any(c.indicates_convergence() for c in self._criteria)
        return _converged_if_triggered(self, criterion_state, static)


class Any(_Group):
    """
    Stop when any child criterion indicates to stop.

    The reason is the concatenation of all child reasons; children that
    did not fire contribute nothing.
    """

    heading = "Stop When _one_ of the following are fulfilled:"

    def _combine(self, results: Iterable[bool]) -> bool:
        return any(results)

    def indicates_convergence(self, criterion_state: Optional[CriterionState] = None) -> bool:
        # Only convergence if every possible trigger would itself be one
        static = all(c.indicates_convergence() for c in self._criteria)
        return _converged_if_triggered(self, criterion_state, static)
