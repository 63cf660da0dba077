"""Per-parameter state that persists across runs.

A ParameterHandle belongs to one declaration position of an
IterationState. The same handle object is handed back every time the body
reaches that position, so the argument chosen for it survives from one run
to the next until backtracking moves it on or resets it.

Lifecycle:
    unbound --declare()--> bound --read()--> read
    read --advance()--> read (next argument)
    any --reset()--> unbound
"""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from typing import Generic, TypeVar

from parameterize.core.arguments import describe_arguments
from parameterize.errors import (
    DeclarationMismatchError,
    ErrorContext,
    ParameterExhaustedError,
    ParameterNotDeclaredError,
)

T = TypeVar("T")


class ParameterHandle(Generic[T]):
    """Engine-owned state for the parameter declared at one position.

    Attributes:
        position: Declaration position this handle is allocated for.
        identity: Stable token naming the parameter (None if unnamed).
        arguments: Argument sequence bound for the current run, or None.
        index: Index of the selected argument.
        has_been_read: Whether the handle was read since it was last bound.
    """

    __slots__ = (
        "position",
        "identity",
        "arguments",
        "index",
        "has_been_read",
        "declared_in_run",
        "read_in_run",
    )

    def __init__(self, position: int) -> None:
        self.position = position
        self.identity: Hashable | None = None
        self.arguments: Sequence[T] | None = None
        self.index = 0
        self.has_been_read = False
        # Run indices stamped by IterationState; -1 means never.
        self.declared_in_run = -1
        self.read_in_run = -1

    @property
    def is_bound(self) -> bool:
        return self.arguments is not None

    @property
    def is_last_argument(self) -> bool:
        """True when the selected argument is the final one in the sequence."""
        if self.arguments is None:
            return True
        return self.index >= len(self.arguments) - 1

    @property
    def value(self) -> T:
        """Currently selected argument, without marking the handle as read."""
        if self.arguments is None:
            raise ParameterNotDeclaredError(
                "Parameter has no arguments bound",
                context=self._error_context(),
            )
        return self.arguments[self.index]

    def declare(
        self,
        arguments: Sequence[T],
        identity: Hashable | None = None,
        verify: bool = True,
    ) -> None:
        """Bind this handle for the current run.

        A handle that was read since it was bound is still part of the
        combination being enumerated: its selection is kept and the new
        declaration is only checked against it. Otherwise the fresh
        arguments are bound starting at the first one.

        Raises:
            DeclarationMismatchError: The kept selection belongs to a
                different parameter (identity or argument count differ).
        """
        if self.arguments is not None and self.has_been_read:
            if verify:
                self._verify_same_parameter(arguments, identity)
            return

        self.arguments = arguments
        self.identity = identity
        self.index = 0
        self.has_been_read = False

    def read(self) -> tuple[T, bool]:
        """Return the selected argument and whether this is the first read.

        Raises:
            ParameterNotDeclaredError: The handle is not bound.
        """
        value = self.value
        first_read = not self.has_been_read
        self.has_been_read = True
        return value, first_read

    def advance(self) -> None:
        """Select the next argument.

        Raises:
            ParameterExhaustedError: Already at the last argument.
        """
        if self.is_last_argument:
            raise ParameterExhaustedError(
                "Cannot advance a parameter past its last argument",
                context=self._error_context(),
            )
        self.index += 1

    def reset(self) -> None:
        """Unbind the handle so the next declaration starts it over."""
        self.arguments = None
        self.identity = None
        self.index = 0
        self.has_been_read = False

    def _verify_same_parameter(
        self,
        arguments: Sequence[T],
        identity: Hashable | None,
    ) -> None:
        if identity is not None and self.identity is not None and identity != self.identity:
            raise DeclarationMismatchError(
                f"Position {self.position} was declared as {self.identity!r} "
                f"but is now declared as {identity!r}",
                context=self._error_context(),
                declared_identity=identity,
            )
        if len(arguments) != len(self.arguments):
            raise DeclarationMismatchError(
                f"Position {self.position} had {len(self.arguments)} arguments "
                f"but is now declared with {len(arguments)}: "
                f"{describe_arguments(arguments)}",
                context=self._error_context(),
            )

    def _error_context(self) -> ErrorContext:
        return ErrorContext(position=self.position, identity=self.identity)

    def __repr__(self) -> str:
        if self.arguments is None:
            return f"ParameterHandle(position={self.position}, unbound)"
        name = f"{self.identity!r}, " if self.identity is not None else ""
        return (
            f"ParameterHandle({name}position={self.position}, "
            f"index={self.index}/{len(self.arguments)}, "
            f"arguments={describe_arguments(self.arguments)})"
        )

