"""Body-facing API for declaring and reading parameters.

The runner hands a ParameterizeScope to the body on every run. Parameters
declared through it come back as Parameter objects; reading ``.value``
routes through the IterationState so the read order is tracked.

Example:
    >>> def body(p: ParameterizeScope) -> None:
    ...     size = p.parameter(range(1, 4), name="size")
    ...     index = p.parameter(range(size.value), name="index")
    ...     assert 0 <= index.value < size.value
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from typing import Generic, TypeVar

from parameterize.core.arguments import LazyArguments
from parameterize.core.handle import ParameterHandle
from parameterize.core.state import IterationState
from parameterize.diagnostics import Diagnostics

T = TypeVar("T")


class Parameter(Generic[T]):
    """A declared parameter, bound to the run it was declared in."""

    __slots__ = ("_state", "handle")

    def __init__(self, state: IterationState, handle: ParameterHandle[T]) -> None:
        self._state = state
        self.handle = handle

    @property
    def name(self) -> Hashable | None:
        return self.handle.identity

    @property
    def value(self) -> T:
        return self._state.read_parameter(self.handle)

    def __call__(self) -> T:
        return self.value

    def __repr__(self) -> str:
        return f"Parameter({self.handle!r})"


class ParameterizeScope:
    """Declares parameters for one run of a body."""

    def __init__(self, state: IterationState) -> None:
        self.state = state

    def parameter(self, arguments: Iterable[T], name: Hashable | None = None) -> Parameter[T]:
        """Declare a parameter taking each of ``arguments`` across runs."""
        handle = self.state.declare_parameter(arguments, identity=name)
        return Parameter(self.state, handle)

    def parameter_of(self, *values: T, name: Hashable | None = None) -> Parameter[T]:
        return self.parameter(values, name=name)

    def parameter_from(
        self,
        count: int,
        get_argument: Callable[[int], T],
        name: Hashable | None = None,
    ) -> Parameter[T]:
        """Declare a parameter whose arguments are computed on demand."""
        return self.parameter(LazyArguments(count, get_argument), name=name)

    def read(self, parameter: Parameter[T] | ParameterHandle[T]) -> T:
        handle = parameter.handle if isinstance(parameter, Parameter) else parameter
        return self.state.read_parameter(handle)

    def read_parameters(self) -> Diagnostics:
        """Snapshot of the parameters read so far in this run."""
        return Diagnostics.capture(self.state)
