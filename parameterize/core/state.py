"""Run bookkeeping and backtracking for exhaustive parameter enumeration.

IterationState behaves like a nested loop whose shape is discovered while
it runs. Each run, the body declares parameters in execution order and
reads them; the state records which handles were read, in first-read
order. Between runs the most recently read handle that still has
arguments left is advanced, and every handle read after it is reset,
because its arguments (or whether it is declared at all) may depend on
the value that just changed.

Example:
    >>> state = IterationState()
    >>> seen = []
    >>> while state.start_run():
    ...     a = state.declare_parameter([1, 2], identity="a")
    ...     b = state.declare_parameter("xy", identity="b")
    ...     seen.append((state.read_parameter(a), state.read_parameter(b)))
    >>> seen
    [(1, 'x'), (1, 'y'), (2, 'x'), (2, 'y')]
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable
from typing import Any, TypeVar

from parameterize.core.arguments import as_arguments
from parameterize.core.handle import ParameterHandle
from parameterize.errors import ErrorContext, ParameterNotDeclaredError, SkipRun

logger = logging.getLogger(__name__)

T = TypeVar("T")


class IterationState:
    """Owns every handle of one enumeration and decides the next combination.

    Attributes:
        verify_declarations: Check that kept handles are re-declared with
            the same identity and argument count.
    """

    def __init__(self, verify_declarations: bool = True) -> None:
        self.verify_declarations = verify_declarations

        # Handles are reused by declaration position and never removed.
        # Only the first _declared_count of them belong to the current run.
        self._handles: list[ParameterHandle[Any]] = []
        self._declared_count = 0

        # Handles by first read since they were bound. Persists across runs;
        # backtracking pops spent handles off the end.
        self._backtrack_stack: list[ParameterHandle[Any]] = []

        # Handles by first read in the current run, for diagnostics.
        self._read_this_run: list[ParameterHandle[Any]] = []

        # Unread handles declared at or after this position are reset
        # when backtracking.
        self._count_after_all_used = 0

        self._run_index = -1
        self._finished = False

    @property
    def run_index(self) -> int:
        """0-based index of the current run (-1 before the first)."""
        return self._run_index

    @property
    def is_finished(self) -> bool:
        return self._finished

    @property
    def declared_count(self) -> int:
        """Number of parameters declared so far in the current run."""
        return self._declared_count

    @property
    def parameter_count(self) -> int:
        """Number of handles allocated over the whole enumeration."""
        return len(self._handles)

    def start_run(self) -> bool:
        """Move to the next combination.

        Returns:
            True if a run should be executed, False once every combination
            has been produced. Keeps returning False after that.
        """
        if self._finished:
            return False

        if self._run_index >= 0 and not self._next_combination():
            self._finished = True
            logger.debug(f"Enumeration finished after {self._run_index + 1} runs")
            return False

        self._run_index += 1
        self._declared_count = 0
        self._count_after_all_used = 0
        return True

    def declare_parameter(
        self,
        arguments: Iterable[T],
        identity: Hashable | None = None,
    ) -> ParameterHandle[T]:
        """Declare the next parameter of the current run.

        Args:
            arguments: Candidate values, in enumeration order.
            identity: Stable token naming the parameter, used for
                consistency checks and diagnostics.

        Returns:
            The handle for this declaration position.

        Raises:
            SkipRun: The parameter has no arguments, so no combination
                exists for the rest of this run.
            DeclarationMismatchError: A kept handle was re-declared as a
                different parameter.
        """
        arguments = as_arguments(arguments)
        position = self._declared_count
        self._declared_count += 1

        if position < len(self._handles):
            handle = self._handles[position]
        else:
            handle = ParameterHandle(position)
            self._handles.append(handle)

        handle.declared_in_run = self._run_index

        if len(arguments) == 0 and not handle.has_been_read:
            handle.reset()
            raise SkipRun(
                f"Parameter {identity!r} at position {position} has no arguments"
            )

        handle.declare(arguments, identity, verify=self.verify_declarations)
        return handle

    def read_parameter(self, handle: ParameterHandle[T]) -> T:
        """Read the selected argument of a handle declared in this run.

        Raises:
            ParameterNotDeclaredError: The handle was not declared in the
                current run of this state.
        """
        if not self._is_declared_this_run(handle):
            raise ParameterNotDeclaredError(
                context=ErrorContext(
                    run_index=self._run_index,
                    position=handle.position,
                    identity=handle.identity,
                ),
            )

        value, first_read = handle.read()

        if first_read:
            self._backtrack_stack.append(handle)
            if not handle.is_last_argument:
                self._count_after_all_used = self._declared_count

        if handle.read_in_run != self._run_index:
            handle.read_in_run = self._run_index
            self._read_this_run.append(handle)

        return value

    def get_read_parameters(self) -> list[tuple[Hashable, Any]]:
        """(identity, value) pairs of the handles read in this run, in read order.

        Unnamed parameters are identified by their declaration position.
        """
        return [
            (handle.position if handle.identity is None else handle.identity, handle.value)
            for handle in self._read_this_run
        ]

    def read_handles(self) -> list[ParameterHandle[Any]]:
        """Handles read in this run, in read order."""
        return list(self._read_this_run)

    def _is_declared_this_run(self, handle: ParameterHandle[Any]) -> bool:
        position = handle.position
        return (
            position < self._declared_count
            and self._handles[position] is handle
            and handle.declared_in_run == self._run_index
            and handle.is_bound
        )

    def _next_combination(self) -> bool:
        """Advance the last-read handle that has arguments left.

        Handles read after it are spent for this pass and reset. Unread
        handles declared after the last newly read, advanceable handle are
        reset too: whether and how they get declared may change.
        """
        advanced = False

        while self._backtrack_stack:
            handle = self._backtrack_stack[-1]

            if not handle.is_last_argument:
                handle.advance()
                advanced = True
                break

            self._backtrack_stack.pop()
            handle.reset()

        for handle in self._handles[self._count_after_all_used:self._declared_count]:
            if not handle.has_been_read:
                handle.reset()

        self._declared_count = 0
        self._count_after_all_used = 0
        self._read_this_run.clear()
        return advanced

    def __repr__(self) -> str:
        return (
            f"IterationState(run_index={self._run_index}, "
            f"parameters={len(self._handles)}, finished={self._finished})"
        )
