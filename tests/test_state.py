"""Tests for IterationState and the backtracking algorithm.

Tests cover:
- Exhaustive enumeration of independent parameters
- Odometer order driven by read order
- Conditional and dependent parameters
- Force-reset of declared but unread parameters
- Exhaustion, skipped runs and diagnostics export
- Declaration consistency checks
"""

from __future__ import annotations

import itertools

import pytest

from parameterize.core.arguments import LazyArguments
from parameterize.core.state import IterationState
from parameterize.errors import (
    DeclarationMismatchError,
    ParameterNotDeclaredError,
    SkipRun,
)


# ============================================================
# Independent Parameters
# ============================================================


class TestIndependentParameters:
    """Parameters whose arguments never depend on each other."""

    def test_two_parameters_in_odometer_order(self, run_all):
        def body(state):
            a = state.declare_parameter([1, 2], identity="a")
            b = state.declare_parameter(["x", "y"], identity="b")
            return state.read_parameter(a), state.read_parameter(b)

        assert run_all(body) == [(1, "x"), (1, "y"), (2, "x"), (2, "y")]

    def test_run_count_is_product_of_argument_counts(self, run_all):
        sizes = [2, 3, 4]

        def body(state):
            handles = [state.declare_parameter(range(n)) for n in sizes]
            return tuple(state.read_parameter(h) for h in handles)

        results = run_all(body)

        assert len(results) == 24
        assert set(results) == set(itertools.product(*(range(n) for n in sizes)))

    def test_matches_nested_loops(self, run_all):
        def body(state):
            outer = state.declare_parameter("abc")
            inner = state.declare_parameter([True, False])
            return state.read_parameter(outer), state.read_parameter(inner)

        expected = [(o, i) for o in "abc" for i in (True, False)]
        assert run_all(body) == expected

    def test_single_argument_parameters_run_once(self, run_all):
        def body(state):
            a = state.declare_parameter(["only"])
            b = state.declare_parameter([42])
            return state.read_parameter(a), state.read_parameter(b)

        assert run_all(body) == [("only", 42)]

    def test_body_without_parameters_runs_once(self, run_all):
        assert run_all(lambda state: "ran") == ["ran"]

    def test_unread_parameter_does_not_multiply_runs(self, run_all):
        def body(state):
            state.declare_parameter([1, 2, 3])
            return "ran"

        assert run_all(body) == ["ran"]


# ============================================================
# Read Order
# ============================================================


class TestReadOrder:
    """The most recently read parameter varies fastest."""

    def test_read_order_overrides_declaration_order(self, run_all):
        def body(state):
            a = state.declare_parameter([1, 2], identity="a")
            b = state.declare_parameter(["x", "y"], identity="b")
            b_value = state.read_parameter(b)
            a_value = state.read_parameter(a)
            return a_value, b_value

        assert run_all(body) == [(1, "x"), (2, "x"), (1, "y"), (2, "y")]

    def test_repeated_reads_return_same_value(self, run_all):
        def body(state):
            a = state.declare_parameter([1, 2, 3])
            first = state.read_parameter(a)
            second = state.read_parameter(a)
            assert first == second
            return first

        assert run_all(body) == [1, 2, 3]


# ============================================================
# Conditional and Dependent Parameters
# ============================================================


class TestConditionalParameters:
    """Parameters declared only on some branches."""

    def test_parameter_declared_only_for_one_value(self, run_all):
        def body(state):
            a = state.read_parameter(state.declare_parameter([1, 2], identity="a"))
            if a == 1:
                b = state.read_parameter(state.declare_parameter([10, 20], identity="b"))
                return a, b
            return a, None

        assert run_all(body) == [(1, 10), (1, 20), (2, None)]

    def test_different_parameter_at_same_position_after_backtrack(self, run_all):
        def body(state):
            a = state.read_parameter(state.declare_parameter([1, 2], identity="a"))
            if a == 1:
                handle = state.declare_parameter(["b1", "b2"], identity="b")
            else:
                handle = state.declare_parameter(["c1"], identity="c")
            return a, state.read_parameter(handle)

        assert run_all(body) == [(1, "b1"), (1, "b2"), (2, "c1")]

    def test_early_exit_stops_declaring(self, run_all):
        def body(state):
            a = state.read_parameter(state.declare_parameter([0, 1, 2]))
            if a == 0:
                return (a,)
            b = state.read_parameter(state.declare_parameter("xy"))
            return a, b

        assert run_all(body) == [(0,), (1, "x"), (1, "y"), (2, "x"), (2, "y")]


class TestDependentParameters:
    """Parameters whose arguments are computed from earlier values."""

    def test_dependent_sequence_recomputed_for_each_outer_value(self, run_all):
        def body(state):
            outer = state.read_parameter(state.declare_parameter([1, 2, 3], identity="outer"))
            inner = state.read_parameter(
                state.declare_parameter(range(outer), identity="inner")
            )
            return outer, inner

        results = run_all(body)

        assert results == [(1, 0), (2, 0), (2, 1), (3, 0), (3, 1), (3, 2)]

    def test_each_dependent_value_visited_once_per_outer_value(self, run_all):
        def f(outer):
            return [f"{outer}-{i}" for i in range(outer)]

        def body(state):
            outer = state.read_parameter(state.declare_parameter([2, 3]))
            inner = state.read_parameter(state.declare_parameter(f(outer)))
            return outer, inner

        results = run_all(body)

        for outer in (2, 3):
            visited = [inner for o, inner in results if o == outer]
            assert visited == f(outer)

    def test_chain_of_three_dependent_parameters(self, run_all):
        def body(state):
            a = state.read_parameter(state.declare_parameter(range(1, 3)))
            b = state.read_parameter(state.declare_parameter(range(a)))
            c = state.read_parameter(state.declare_parameter(range(b + 1)))
            return a, b, c

        expected = [(a, b, c) for a in range(1, 3) for b in range(a) for c in range(b + 1)]
        assert run_all(body) == expected


# ============================================================
# Force Reset of Unread Parameters
# ============================================================


class TestUnreadParameterReset:
    """Declared parameters whose branch was not taken start over."""

    def test_guarded_parameter_yields_fresh_values(self, run_all):
        def body(state):
            a = state.read_parameter(state.declare_parameter([1, 2, 3], identity="a"))
            b = state.declare_parameter([10, 20], identity="b")
            if a != 2:
                return a, state.read_parameter(b)
            return a, None

        assert run_all(body) == [
            (1, 10),
            (1, 20),
            (2, None),
            (3, 10),
            (3, 20),
        ]

    def test_unread_parameter_picks_up_new_arguments(self, run_all):
        def body(state):
            a = state.read_parameter(state.declare_parameter([1, 2, 3]))
            b = state.declare_parameter([a * 10, a * 10 + 1])
            if a == 2:
                return a, None
            return a, state.read_parameter(b)

        assert run_all(body) == [(1, 10), (1, 11), (2, None), (3, 30), (3, 31)]

    def test_unread_handle_is_unbound_after_backtrack(self, state):
        assert state.start_run()
        a = state.declare_parameter([1, 2])
        state.read_parameter(a)
        b = state.declare_parameter(["x", "y"])

        assert state.start_run()

        assert not b.is_bound
        assert a.is_bound


# ============================================================
# Exhaustion
# ============================================================


class TestExhaustion:
    """Behavior once every combination has been produced."""

    def test_first_start_run_is_always_true(self, state):
        assert state.start_run() is True
        assert state.run_index == 0

    def test_start_run_keeps_returning_false(self, state):
        while state.start_run():
            state.read_parameter(state.declare_parameter([1, 2]))

        count = state.parameter_count
        run_index = state.run_index

        for _ in range(3):
            assert state.start_run() is False

        assert state.is_finished
        assert state.parameter_count == count
        assert state.run_index == run_index

    def test_handles_are_reused_by_position(self, state):
        seen = []
        while state.start_run():
            a = state.declare_parameter([1, 2])
            b = state.declare_parameter([3, 4])
            state.read_parameter(a)
            state.read_parameter(b)
            seen.append((a, b))

        assert state.parameter_count == 2
        assert all(a is seen[0][0] and b is seen[0][1] for a, b in seen)

    def test_run_index_counts_runs(self, state):
        indices = []
        while state.start_run():
            state.read_parameter(state.declare_parameter("abc"))
            indices.append(state.run_index)

        assert indices == [0, 1, 2]


# ============================================================
# Skipped Runs
# ============================================================


class TestSkippedRuns:
    """Parameters declared with no arguments."""

    def test_empty_arguments_raise_skip_run(self, state):
        state.start_run()
        with pytest.raises(SkipRun):
            state.declare_parameter([])

    def test_enumeration_continues_after_skip(self):
        state = IterationState()
        results = []
        while state.start_run():
            a = state.read_parameter(state.declare_parameter([0, 1, 2]))
            try:
                b = state.read_parameter(state.declare_parameter(range(a)))
            except SkipRun:
                results.append((a, "skipped"))
                continue
            results.append((a, b))

        assert results == [(0, "skipped"), (1, 0), (2, 0), (2, 1)]


# ============================================================
# Arguments
# ============================================================


class TestArgumentKinds:
    """Different ways of supplying argument sequences."""

    def test_generator_arguments(self, run_all):
        def body(state):
            return state.read_parameter(state.declare_parameter(x * 2 for x in range(3)))

        assert run_all(body) == [0, 2, 4]

    def test_lazy_arguments_compute_only_selected_values(self, run_all):
        calls = []

        def square(i):
            calls.append(i)
            return i * i

        def body(state):
            return state.read_parameter(state.declare_parameter(LazyArguments(4, square)))

        assert run_all(body) == [0, 1, 4, 9]
        assert calls == [0, 1, 2, 3]

    def test_large_range_is_not_materialized(self, state):
        state.start_run()
        handle = state.declare_parameter(range(10**12))

        assert state.read_parameter(handle) == 0
        assert handle.arguments == range(10**12)


# ============================================================
# Diagnostics Export
# ============================================================


class TestGetReadParameters:
    """(identity, value) pairs of the current run."""

    def test_pairs_in_read_order(self, state):
        state.start_run()
        a = state.declare_parameter([1, 2], identity="a")
        b = state.declare_parameter(["x"], identity="b")
        state.read_parameter(b)
        state.read_parameter(a)
        state.read_parameter(b)

        assert state.get_read_parameters() == [("b", "x"), ("a", 1)]

    def test_only_current_run_is_reported(self, state):
        state.start_run()
        a = state.declare_parameter([1, 2], identity="a")
        b = state.declare_parameter([3], identity="b")
        state.read_parameter(a)
        state.read_parameter(b)

        state.start_run()
        a = state.declare_parameter([1, 2], identity="a")
        state.declare_parameter([3], identity="b")
        state.read_parameter(a)

        assert state.get_read_parameters() == [("a", 2)]

    def test_unread_parameters_are_excluded(self, state):
        state.start_run()
        state.declare_parameter([1], identity="a")

        assert state.get_read_parameters() == []

    def test_unnamed_parameters_use_position(self, state):
        state.start_run()
        a = state.declare_parameter([1])
        b = state.declare_parameter([2, 3], identity="b")
        c = state.declare_parameter([4, 5])
        state.read_parameter(c)
        state.read_parameter(a)
        state.read_parameter(b)

        assert state.get_read_parameters() == [(2, 4), (0, 1), ("b", 2)]


# ============================================================
# Programming Errors
# ============================================================


class TestDeclarationErrors:
    """Reads and declarations that break positional stability."""

    def test_read_handle_not_declared_this_run(self, state):
        state.start_run()
        handle = state.declare_parameter([1, 2])
        state.read_parameter(handle)
        state.start_run()

        with pytest.raises(ParameterNotDeclaredError):
            state.read_parameter(handle)

    def test_read_handle_from_other_state(self, state):
        other = IterationState()
        other.start_run()
        foreign = other.declare_parameter([1, 2])

        state.start_run()
        state.declare_parameter([1, 2])

        with pytest.raises(ParameterNotDeclaredError):
            state.read_parameter(foreign)

    def test_identity_mismatch_on_kept_handle(self, state):
        state.start_run()
        state.read_parameter(state.declare_parameter([1, 2], identity="a"))
        state.start_run()

        with pytest.raises(DeclarationMismatchError) as exc_info:
            state.declare_parameter([1, 2], identity="b")

        assert exc_info.value.context.position == 0
        assert not exc_info.value.recoverable

    def test_argument_count_mismatch_on_kept_handle(self, state):
        state.start_run()
        state.read_parameter(state.declare_parameter([1, 2], identity="a"))
        state.start_run()

        with pytest.raises(DeclarationMismatchError, match="had 2 arguments"):
            state.declare_parameter([1, 2, 3], identity="a")

    def test_verification_can_be_disabled(self):
        state = IterationState(verify_declarations=False)
        state.start_run()
        state.read_parameter(state.declare_parameter([1, 2], identity="a"))
        state.start_run()

        handle = state.declare_parameter([1, 2, 3], identity="b")

        assert state.read_parameter(handle) == 2
