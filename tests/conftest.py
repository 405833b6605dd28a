"""
Shared pytest fixtures for the iterative_algorithms test suite.
"""

import pytest

from iterative_algorithms.stopping import AfterIteration
from iterative_algorithms.testing import DummyAlgorithm, DummyProblem, DummyState


@pytest.fixture
def problem():
    """A Problem with no data."""
    return DummyProblem()


@pytest.fixture
def make_algorithm():
    """Factory for a DummyAlgorithm around a given criterion."""
    def _make(criterion=None, step_sleep=0.0):
        return DummyAlgorithm(criterion if criterion is not None else AfterIteration(3),
                              step_sleep=step_sleep)
    return _make


@pytest.fixture
def make_state(problem):
    """Factory for a DummyState paired with a fresh criterion state tree."""
    def _make(algorithm, iteration=0):
        criterion_state = algorithm.stopping_criterion.init_state(problem, algorithm)
        return DummyState(iterate=0.0, iteration=iteration, criterion_state=criterion_state)
    return _make
