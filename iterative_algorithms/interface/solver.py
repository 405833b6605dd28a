"""
Solver Module
Generic driver for any (Problem, Algorithm, State) triple.

Life cycle: CREATED -> INITIALIZED -> RUNNING -> FINISHED.  The mutating
termination check runs exactly once before every prospective step,
including the very first one at iteration 0, which lets every criterion
restart its own bookkeeping.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, asdict
from enum import Enum, auto
from typing import Any, Dict, Optional

from ..events.logger import AlgorithmLogger, Event, emit
from ..stopping.base import (
    check_finished, get_reason, indicates_convergence,
    init_stopping_state, reset_stopping_state,
)
from .problem import Algorithm, Problem
from .state import State


class Phase(Enum):
    """Solver life-cycle phases."""
    CREATED = auto()       # Nothing allocated yet
    INITIALIZED = auto()   # State and criterion state ready
    RUNNING = auto()       # Inside the loop
    FINISHED = auto()      # Stopping criterion triggered


@dataclass
class SolveResult:
    """Outcome of a completed run."""
    iterations: int
    converged: bool
    reason: Optional[str]
    wall_clock_seconds: float
    summary: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =============================================================================
# FUNCTIONAL API
# =============================================================================

def initialize_state(problem: Problem, algorithm: Algorithm, **kwargs) -> State:
    """Create the criterion state tree, then the algorithm's State around it."""
    criterion_state = init_stopping_state(problem, algorithm)
    return algorithm.init_state(problem, criterion_state, **kwargs)


def solve(problem: Problem, algorithm: Algorithm, state: Optional[State] = None, *,
          logger: Optional[AlgorithmLogger] = None, **kwargs) -> State:
    """
    Run ``algorithm`` on ``problem`` until its stopping criterion triggers.

    Args:
        problem: immutable input.
        algorithm: configuration holding ``stopping_criterion``.
        state: optional State to reuse; it is reset in place.  A new one
            is built when omitted.
        logger: receives Start / PreStep / PostStep / Stop events.
        **kwargs: forwarded to ``init_state`` / ``reset_state``.

    Returns:
        The final State (the same object when ``state`` was given).
    """
    if state is None:
        state = initialize_state(problem, algorithm, **kwargs)

    reset_stopping_state(problem, algorithm, state)
    algorithm.reset_state(problem, state, **kwargs)

    emit(logger, problem, algorithm, state, Event.START)

    while not check_finished(problem, algorithm, state):
        emit(logger, problem, algorithm, state, Event.PRE_STEP)

        state.increment()
        algorithm.step(problem, state)

        emit(logger, problem, algorithm, state, Event.POST_STEP)

    emit(logger, problem, algorithm, state, Event.STOP)
    return state


# =============================================================================
# ORCHESTRATOR
# =============================================================================

class Solver:
    """
    Stateful wrapper around ``solve``.

    Responsibilities:
    - Track the run phase
    - Keep the State between runs so it can be reused in place
    - Summarize the stop reason and convergence after a run
    """

    def __init__(self, problem: Problem, algorithm: Algorithm,
                 logger: Optional[AlgorithmLogger] = None):
        self.problem = problem
        self.algorithm = algorithm
        self.logger = logger
        self.id = str(uuid.uuid4())[:8]

        self.phase: Phase = Phase.CREATED
        self.state: Optional[State] = None
        self._wall_clock_seconds: float = 0.0

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def _initialize(self, state: Optional[State], **kwargs) -> State:
        if state is None:
            state = self.state if self.state is not None else \
                initialize_state(self.problem, self.algorithm, **kwargs)
        self.state = state
        self.phase = Phase.INITIALIZED
        return state

    def run(self, state: Optional[State] = None, verbose: bool = False, **kwargs) -> State:
        """
        Execute a complete run.

        Args:
            state: State to reuse; defaults to the one from the previous
                run, or a fresh one.
            verbose: Print a start banner and a final summary.
        """
        state = self._initialize(state, **kwargs)

        if verbose:
            print(f"{'='*70}")
            print(f"SOLVE START: {self.algorithm.name} [{self.id}]")
            print(f"Stopping criterion: {self.algorithm.stopping_criterion!r}")
            print(f"{'='*70}")

        start = time.perf_counter()
        self.phase = Phase.RUNNING
        try:
            solve(self.problem, self.algorithm, state, logger=self.logger, **kwargs)
        except BaseException:
            self.phase = Phase.INITIALIZED
            raise
        self._wall_clock_seconds = time.perf_counter() - start
        self.phase = Phase.FINISHED

        if verbose:
            self._print_summary()

        return state

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def result(self) -> SolveResult:
        """Summarize the last run. Must be called after run()."""
        if self.phase is not Phase.FINISHED or self.state is None:
            raise RuntimeError("Must run solver before reading its result")

        criterion = self.algorithm.stopping_criterion
        criterion_state = self.state.criterion_state
        return SolveResult(
            iterations=self.state.iteration,
            converged=indicates_convergence(criterion, criterion_state),
            reason=get_reason(criterion, criterion_state),
            wall_clock_seconds=self._wall_clock_seconds,
            summary=criterion.summary(criterion_state),
        )

    def _print_summary(self) -> None:
        res = self.result()
        print(f"\n{'='*70}")
        print(f"SOLVE COMPLETE: {self.algorithm.name} [{self.id}]")
        print(f"{'='*70}")
        print(f"Iterations: {res.iterations}")
        print(f"Converged: {res.converged}")
        print(f"Wall clock time: {res.wall_clock_seconds:.4f}s")
        if res.reason:
            print(f"Reason: {res.reason.rstrip()}")
        print(res.summary)
        print(f"{'='*70}\n")

    def __repr__(self) -> str:
        iteration = self.state.iteration if self.state is not None else 0
        return f"Solver({self.algorithm.name}, {self.phase.name.lower()}, iteration={iteration})"
