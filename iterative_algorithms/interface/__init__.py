"""interface – Problem, Algorithm, State and the generic solve loop."""

from .problem import Problem, Algorithm
from .state import State
from .solver import Phase, SolveResult, Solver, initialize_state, solve

__all__ = [
    "Problem", "Algorithm", "State",
    "Phase", "SolveResult", "Solver", "initialize_state", "solve",
]
