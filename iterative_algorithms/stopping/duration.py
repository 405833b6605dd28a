"""
Wall-clock budget criterion.

The clock is only read at iteration boundaries, so a run may overshoot the
threshold by up to one step's duration.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Optional, Union

from .base import Criterion, CriterionState, _converged_if_triggered

if TYPE_CHECKING:
    from ..interface.problem import Algorithm, Problem
    from ..interface.state import State


def _ns_to_timedelta(ns: int) -> timedelta:
    return timedelta(microseconds=ns / 1_000)


@dataclass
class DurationState(CriterionState):
    """
    Timer bookkeeping for AfterDuration.

    Attributes:
        start_ns: perf_counter_ns() reading taken at the (re)start call,
            None until the first mutating check.
        elapsed: last measured run time.
        at_iteration: see CriterionState.
    """
    start_ns: Optional[int] = None
    elapsed: timedelta = timedelta(0)


@dataclass(frozen=True, repr=False)
class AfterDuration(Criterion):
    """Stop once the run has taken longer than ``threshold``."""
    threshold: Union[timedelta, float]

    def __post_init__(self):
        threshold = self.threshold
        if not isinstance(threshold, timedelta):
            seconds = float(threshold)
            if not math.isfinite(seconds):
                raise ValueError(f"AfterDuration threshold must be finite, got {threshold}")
            try:
                threshold = timedelta(seconds=seconds)
            except OverflowError:
                raise ValueError(f"AfterDuration threshold out of range: {seconds} seconds") from None
        if threshold <= timedelta(0):
            raise ValueError(f"AfterDuration threshold must be positive, got {threshold}")
        object.__setattr__(self, "threshold", threshold)

    def init_state(self, problem: Problem, algorithm: Algorithm) -> DurationState:
        return DurationState()

    def reset_state(self, problem: Problem, algorithm: Algorithm, state: State,
                    criterion_state: DurationState) -> DurationState:
        criterion_state.start_ns = None
        criterion_state.elapsed = timedelta(0)
        criterion_state.at_iteration = -1
        return criterion_state

    def is_finished(self, problem: Problem, algorithm: Algorithm, state: State,
                    criterion_state: DurationState) -> bool:
        # Uses the last recorded measurement only
        return state.iteration > 0 and criterion_state.elapsed > self.threshold

    def check_finished(self, problem: Problem, algorithm: Algorithm, state: State,
                       criterion_state: DurationState) -> bool:
        k = state.iteration
        now = time.perf_counter_ns()
        if criterion_state.start_ns is None or k <= 0:
            criterion_state.at_iteration = -1
            criterion_state.start_ns = now
            criterion_state.elapsed = timedelta(0)
            return False

        criterion_state.elapsed = _ns_to_timedelta(now - criterion_state.start_ns)
        if criterion_state.elapsed > self.threshold:
            criterion_state.at_iteration = k
            return True
        return False

    def get_reason(self, criterion_state: DurationState) -> Optional[str]:
        if criterion_state.triggered:
            return (f"After iteration {criterion_state.at_iteration} the algorithm ran for "
                    f"{criterion_state.elapsed} (threshold: {self.threshold}).\n")
        return None

    def indicates_convergence(self, criterion_state: Optional[CriterionState] = None) -> bool:
        return _converged_if_triggered(self, criterion_state, False)

    def summary(self, criterion_state: CriterionState) -> str:
        status = "reached" if criterion_state.triggered else "not reached"
        return f"stopped after {self.threshold}:\t{status}"

    def __repr__(self) -> str:
        return f"AfterDuration(seconds={self.threshold.total_seconds():g})"
