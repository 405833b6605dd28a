"""
Iterative Algorithms
====================
A small protocol for running iterative numerical and optimization methods:
an immutable Problem, an immutable Algorithm, a mutable State, composable
stopping criteria and an optional event/logging boundary.

Package layout
--------------
iterative_algorithms/
    interface/  – Problem, Algorithm, State, solve loop and Solver
    stopping/   – criteria, composites (All / Any, ``&`` / ``|``), presets
    events/     – event names, logging actions, AlgorithmLogger
    testing     – dummy Problem/Algorithm/State for criterion tests
"""

from .interface import (
    Problem, Algorithm, State, Phase, SolveResult, Solver, initialize_state, solve,
)
from .stopping import (
    Criterion, CriterionState, DefaultState, DurationState, GroupState, ChangeState,
    AfterIteration, AfterDuration, All, Any, ChangeBelow, WhenFlagged, StoppingConfig,
    init_stopping_state, reset_stopping_state,
    is_finished, check_finished, get_reason, indicates_convergence,
)
from .events import (
    Event, AlgorithmLogger, LoggingAction, CallbackAction, IfAction, ActionGroup,
    LevelAction, RecordAction,
)

__version__ = "0.1.0"

__all__ = [
    "Problem", "Algorithm", "State", "Phase", "SolveResult", "Solver",
    "initialize_state", "solve",
    "Criterion", "CriterionState", "DefaultState", "DurationState", "GroupState", "ChangeState",
    "AfterIteration", "AfterDuration", "All", "Any", "ChangeBelow", "WhenFlagged",
    "StoppingConfig",
    "init_stopping_state", "reset_stopping_state",
    "is_finished", "check_finished", "get_reason", "indicates_convergence",
    "Event", "AlgorithmLogger", "LoggingAction", "CallbackAction", "IfAction",
    "ActionGroup", "LevelAction", "RecordAction",
]
