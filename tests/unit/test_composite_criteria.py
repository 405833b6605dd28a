"""
Unit tests for All / Any / GroupState and the & / | algebra.

Covers:
- empty groups rejected; _combine is abstract
- flattening: A & B, (A & B) & C, A & (B & C), (A & B) & (C & D); same for |
- mixed operators nest instead of flattening
- finished semantics for All / Any
- mutating check never short-circuits
- iteration-0 resync of the composite's own at_iteration
- convergence aggregation (All: any child, Any: all children)
- reason concatenation, str() listing, summary, reset
"""

import threading
from datetime import timedelta

import pytest

from iterative_algorithms.stopping import (
    AfterDuration,
    AfterIteration,
    All,
    Any,
    ChangeBelow,
    Criterion,
    DefaultState,
    GroupState,
    WhenFlagged,
    check_finished,
    get_reason,
    indicates_convergence,
    is_finished,
    reset_stopping_state,
)
from iterative_algorithms.stopping.composite import _Group


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class CountingCriterion(Criterion):
    """Fixed answer; counts how often each check is called."""

    def __init__(self, answer, converges=False):
        self.answer = answer
        self.converges = converges
        self.checks = 0

    def is_finished(self, problem, algorithm, state, criterion_state):
        return self.answer

    def check_finished(self, problem, algorithm, state, criterion_state):
        self.checks += 1
        if self.answer:
            criterion_state.at_iteration = state.iteration
        return self.answer

    def get_reason(self, criterion_state):
        return "counted\n" if criterion_state.triggered else None

    def indicates_convergence(self, criterion_state=None):
        return self.converges


# ---------------------------------------------------------------------------
# Algebra
# ---------------------------------------------------------------------------

class TestCombinatorAlgebra:
    def test_and_builds_all(self):
        c = AfterIteration(2) & AfterDuration(1.0)
        assert isinstance(c, All)
        assert c.criteria == (AfterIteration(2), AfterDuration(1.0))

    def test_or_builds_any(self):
        c = AfterIteration(2) | AfterDuration(1.0)
        assert isinstance(c, Any)
        assert len(c) == 2

    def test_left_nested_and_flattens(self):
        a, b, c = AfterIteration(1), AfterIteration(2), AfterIteration(3)
        combined = (a & b) & c
        assert isinstance(combined, All)
        assert combined.criteria == (a, b, c)
        assert not any(isinstance(child, All) for child in combined.criteria)

    def test_right_nested_and_flattens(self):
        a, b, c = AfterIteration(1), AfterIteration(2), AfterIteration(3)
        assert (a & (b & c)).criteria == (a, b, c)

    def test_both_sides_all_merge_in_order(self):
        a, b, c, d = (AfterIteration(i) for i in range(1, 5))
        assert ((a & b) & (c & d)).criteria == (a, b, c, d)

    def test_or_flattens(self):
        a, b, c = AfterIteration(1), AfterIteration(2), AfterIteration(3)
        assert ((a | b) | c).criteria == (a, b, c)
        assert (a | (b | c)).criteria == (a, b, c)

    def test_mixed_operators_nest(self):
        a, b, c = AfterIteration(1), AfterIteration(2), AfterIteration(3)
        combined = (a | b) & c
        assert isinstance(combined, All)
        assert isinstance(combined.criteria[0], Any)
        assert combined.criteria[1] == c

    def test_explicit_construction_matches_operator(self):
        a, b = AfterIteration(1), AfterDuration(2.0)
        assert All(a, b) == a & b
        assert Any([a, b]) == a | b

    def test_non_criterion_child_rejected(self):
        with pytest.raises(TypeError):
            All(AfterIteration(1), 5)

    def test_operator_with_non_criterion(self):
        with pytest.raises(TypeError):
            AfterIteration(1) & 3

    @pytest.mark.parametrize("group", [All, Any])
    def test_empty_group_rejected(self, group):
        with pytest.raises(ValueError):
            group()
        with pytest.raises(ValueError):
            group([])

    def test_group_without_combine_is_abstract(self):
        class Incomplete(_Group):
            def indicates_convergence(self, criterion_state=None):
                return False

        with pytest.raises(TypeError):
            Incomplete(AfterIteration(1))


# ---------------------------------------------------------------------------
# State shape
# ---------------------------------------------------------------------------

class TestGroupStateShape:
    def test_state_tree_mirrors_criterion_tree(self, problem, make_algorithm, make_state):
        alg = make_algorithm((AfterIteration(2) | AfterDuration(1.0)) & AfterIteration(5))
        s = make_state(alg).criterion_state
        assert isinstance(s, GroupState)
        assert len(s.children) == 2
        assert isinstance(s.children[0], GroupState)
        assert isinstance(s.children[0].children[0], DefaultState)
        assert isinstance(s.children[1], DefaultState)

    def test_mismatched_state_rejected(self, problem, make_algorithm, make_state):
        alg = make_algorithm(AfterIteration(1) & AfterIteration(2))
        state = make_state(alg)
        state.criterion_state.children.pop()
        with pytest.raises(ValueError):
            check_finished(problem, alg, state)


# ---------------------------------------------------------------------------
# Semantics
# ---------------------------------------------------------------------------

class TestAllSemantics:
    @pytest.mark.parametrize("a,b,expected", [
        (False, False, False), (True, False, False), (False, True, False), (True, True, True),
    ])
    def test_finished_iff_all_children(self, problem, make_algorithm, make_state, a, b, expected):
        alg = make_algorithm(All(CountingCriterion(a), CountingCriterion(b)))
        state = make_state(alg, iteration=1)
        assert is_finished(problem, alg, state) is expected
        assert check_finished(problem, alg, state) is expected

    def test_mutating_check_visits_every_child(self, problem, make_algorithm, make_state):
        first, second = CountingCriterion(False), CountingCriterion(True)
        alg = make_algorithm(All(first, second))
        state = make_state(alg, iteration=1)
        check_finished(problem, alg, state)
        assert first.checks == 1
        assert second.checks == 1
        # the child that fired recorded it even though the AND failed
        assert state.criterion_state.children[1].at_iteration == 1
        assert state.criterion_state.at_iteration == -1

    def test_records_iteration_on_trigger(self, problem, make_algorithm, make_state):
        alg = make_algorithm(AfterIteration(2) & AfterIteration(3))
        state = make_state(alg, iteration=3)
        assert check_finished(problem, alg, state)
        assert state.criterion_state.at_iteration == 3

    def test_iteration_zero_resyncs_composite(self, problem, make_algorithm, make_state):
        alg = make_algorithm(AfterIteration(4) & AfterIteration(5))
        state = make_state(alg, iteration=0)
        state.criterion_state.at_iteration = 9
        assert not check_finished(problem, alg, state)
        assert state.criterion_state.at_iteration == -1

    def test_inspect_check_does_not_mutate(self, problem, make_algorithm, make_state):
        alg = make_algorithm(AfterIteration(1) & AfterIteration(1))
        state = make_state(alg, iteration=1)
        assert is_finished(problem, alg, state)
        assert state.criterion_state.at_iteration == -1
        assert all(c.at_iteration == -1 for c in state.criterion_state.children)


class TestAnySemantics:
    @pytest.mark.parametrize("a,b,expected", [
        (False, False, False), (True, False, True), (False, True, True), (True, True, True),
    ])
    def test_finished_iff_any_child(self, problem, make_algorithm, make_state, a, b, expected):
        alg = make_algorithm(Any(CountingCriterion(a), CountingCriterion(b)))
        state = make_state(alg, iteration=1)
        assert is_finished(problem, alg, state) is expected
        assert check_finished(problem, alg, state) is expected

    def test_mutating_check_visits_every_child(self, problem, make_algorithm, make_state):
        first, second = CountingCriterion(True), CountingCriterion(False)
        alg = make_algorithm(Any(first, second))
        state = make_state(alg, iteration=2)
        assert check_finished(problem, alg, state)
        assert first.checks == 1
        assert second.checks == 1
        assert state.criterion_state.at_iteration == 2


class TestConvergenceAggregation:
    def test_all_converges_if_any_child_does(self):
        assert indicates_convergence(All(AfterIteration(10), ChangeBelow(1e-6)))
        assert not indicates_convergence(All(AfterIteration(10), AfterDuration(1.0)))

    def test_any_converges_only_if_all_children_do(self):
        assert not indicates_convergence(Any(AfterIteration(10), ChangeBelow(1e-6)))
        assert indicates_convergence(Any(ChangeBelow(1e-3), ChangeBelow(1e-6)))

    def test_with_state_requires_trigger(self, problem, make_algorithm, make_state):
        alg = make_algorithm(All(CountingCriterion(True, converges=True), AfterIteration(2)))
        state = make_state(alg, iteration=1)
        check_finished(problem, alg, state)
        assert not indicates_convergence(alg.stopping_criterion, state.criterion_state)
        state.iteration = 2
        check_finished(problem, alg, state)
        assert indicates_convergence(alg.stopping_criterion, state.criterion_state)


class TestCompositeReporting:
    def test_reason_none_until_triggered(self, problem, make_algorithm, make_state):
        alg = make_algorithm(AfterIteration(2) | AfterIteration(5))
        state = make_state(alg, iteration=1)
        check_finished(problem, alg, state)
        assert get_reason(alg.stopping_criterion, state.criterion_state) is None

    def test_reason_concatenates_triggered_children(self, problem, make_algorithm, make_state):
        alg = make_algorithm(AfterIteration(2) | AfterIteration(5) | AfterIteration(1))
        state = make_state(alg, iteration=2)
        check_finished(problem, alg, state)
        reason = get_reason(alg.stopping_criterion, state.criterion_state)
        assert reason == (
            "At iteration 2 the algorithm reached its maximal number of iterations (2).\n"
            "At iteration 2 the algorithm reached its maximal number of iterations (1).\n"
        )

    def test_str_lists_children(self):
        c = AfterIteration(2) & AfterDuration(timedelta(seconds=1))
        assert str(c) == ("All with the Stopping Criteria:\n"
                          "     AfterIteration(2)\n"
                          "     AfterDuration(seconds=1)")
        assert str(AfterIteration(2) | AfterIteration(3)).startswith("Any with the Stopping Criteria:")

    def test_repr(self):
        assert repr(AfterIteration(2) | AfterIteration(3)) == "Any(AfterIteration(2), AfterIteration(3))"

    def test_summary(self, problem, make_algorithm, make_state):
        alg = make_algorithm(AfterIteration(2) | AfterIteration(5))
        state = make_state(alg, iteration=2)
        check_finished(problem, alg, state)
        assert alg.stopping_criterion.summary(state.criterion_state) == (
            "Stop When _one_ of the following are fulfilled:\n"
            "    Max Iteration 2:\treached\n"
            "    Max Iteration 5:\tnot reached\n"
            "Overall: reached"
        )


class TestCompositeReset:
    def test_reset_recurses_and_clears(self, problem, make_algorithm, make_state):
        alg = make_algorithm(AfterIteration(1) & (AfterIteration(1) | AfterDuration(10.0)))
        state = make_state(alg, iteration=0)
        check_finished(problem, alg, state)
        state.iteration = 1
        assert check_finished(problem, alg, state)

        root = state.criterion_state
        inner = root.children[1]
        duration_state = inner.children[1]
        reset_stopping_state(problem, alg, state)

        assert state.criterion_state is root
        assert root.children[1] is inner
        assert root.at_iteration == -1
        assert root.children[0].at_iteration == -1
        assert inner.at_iteration == -1
        assert inner.children[0].at_iteration == -1
        assert duration_state.start_ns is None
        assert duration_state.elapsed == timedelta(0)


class TestWhenFlagged:
    def test_flag_cancels_any_composite(self, problem, make_algorithm, make_state):
        flag = threading.Event()
        alg = make_algorithm(AfterIteration(100) | WhenFlagged(flag))
        state = make_state(alg, iteration=1)
        assert not check_finished(problem, alg, state)
        flag.set()
        state.iteration = 2
        assert check_finished(problem, alg, state)
        reason = get_reason(alg.stopping_criterion, state.criterion_state)
        assert reason == "At iteration 2 the run was cancelled externally.\n"
        assert not indicates_convergence(alg.stopping_criterion, state.criterion_state)

    def test_cancel_sets_flag(self):
        c = WhenFlagged()
        assert not c.flag.is_set()
        c.cancel()
        assert c.flag.is_set()
