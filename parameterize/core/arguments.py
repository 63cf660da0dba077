"""Argument sequences offered to a parameter.

A parameter picks one value per run from an ordered argument sequence.
Anything indexable with a length works as-is (lists, tuples, ranges);
other iterables are consumed once per declaration into a tuple.

LazyArguments describes a sequence by its size and an index -> value
function, so large or expensive argument sets only compute the values
that actually get selected.

Example:
    >>> squares = LazyArguments(1_000, lambda i: i * i)
    >>> squares[12]
    144
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any, TypeVar, overload

T = TypeVar("T")


class LazyArguments(Sequence[T]):
    """Read-only sequence whose items are computed on access.

    Attributes:
        count: Number of arguments.
        get_argument: Callable mapping an index in [0, count) to its value.
    """

    __slots__ = ("count", "get_argument")

    def __init__(self, count: int, get_argument: Callable[[int], T]) -> None:
        if count < 0:
            raise ValueError(f"Argument count must not be negative, got {count}")
        self.count = count
        self.get_argument = get_argument

    def __len__(self) -> int:
        return self.count

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[T, ...]: ...

    def __getitem__(self, index: int | slice) -> T | tuple[T, ...]:
        if isinstance(index, slice):
            return tuple(self[i] for i in range(*index.indices(self.count)))
        if index < 0:
            index += self.count
        if not 0 <= index < self.count:
            raise IndexError(f"Argument index {index} out of range for {self.count} arguments")
        return self.get_argument(index)

    def __iter__(self) -> Iterator[T]:
        for i in range(self.count):
            yield self.get_argument(i)

    def __repr__(self) -> str:
        return f"LazyArguments(count={self.count}, get_argument={self.get_argument!r})"


def as_arguments(arguments: Iterable[T]) -> Sequence[T]:
    """Normalize a declaration's arguments to an indexable sequence.

    Args:
        arguments: Sequence or other iterable of candidate values.

    Returns:
        The sequence itself, or a tuple of the iterable's items.

    Raises:
        TypeError: If arguments is not iterable.
    """
    if isinstance(arguments, Sequence):
        return arguments
    if not isinstance(arguments, Iterable):
        raise TypeError(
            f"Parameter arguments must be iterable, got {type(arguments).__name__}"
        )
    return tuple(arguments)


def describe_arguments(arguments: Sequence[Any], limit: int = 5) -> str:
    """Short, bounded repr of an argument sequence for log and error messages."""
    if isinstance(arguments, (range, LazyArguments)):
        return repr(arguments)
    shown = ", ".join(repr(a) for a in itertools.islice(arguments, limit))
    if len(arguments) > limit:
        shown += f", ... ({len(arguments)} total)"
    return f"[{shown}]"
