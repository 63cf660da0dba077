"""Read-only snapshots of the combination a run is using.

When a body fails, the runner captures the parameters it read so the
failure can be reported with the exact combination that triggered it.

Example:
    >>> diagnostics = Diagnostics.capture(state)
    >>> diagnostics.describe()
    "auth = 'admin', count = 3"
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from rich.table import Table

if TYPE_CHECKING:
    from parameterize.core.state import IterationState


@dataclass(frozen=True)
class ParameterSnapshot:
    """One parameter's selected value at the time of capture.

    Attributes:
        position: Declaration position within the run.
        identity: Caller-supplied name of the parameter (None if unnamed).
        value: The selected argument.
        index: Index of the argument in its sequence.
        argument_count: Number of arguments the parameter had.
    """

    position: int
    identity: Hashable | None
    value: Any
    index: int = 0
    argument_count: int = 1

    @property
    def label(self) -> str:
        if self.identity is None:
            return f"#{self.position}"
        return str(self.identity)

    def __repr__(self) -> str:
        return f"{self.label}={self.value!r}"


@dataclass(frozen=True)
class Diagnostics:
    """The parameters read during one run, in read order."""

    run_index: int
    parameters: tuple[ParameterSnapshot, ...] = field(default_factory=tuple)

    @classmethod
    def capture(cls, state: IterationState) -> Diagnostics:
        """Snapshot the parameters read so far in the state's current run."""
        parameters = tuple(
            ParameterSnapshot(
                position=handle.position,
                identity=handle.identity,
                value=handle.value,
                index=handle.index,
                argument_count=len(handle.arguments or ()),
            )
            for handle in state.read_handles()
        )
        return cls(run_index=state.run_index, parameters=parameters)

    def __len__(self) -> int:
        return len(self.parameters)

    def as_pairs(self) -> list[tuple[Hashable, Any]]:
        """(identity, value) pairs, as returned by IterationState.get_read_parameters()."""
        return [(p.position if p.identity is None else p.identity, p.value) for p in self.parameters]

    def describe(self) -> str:
        """One-line ``name = value`` description of the combination."""
        if not self.parameters:
            return "(no parameters read)"
        return ", ".join(f"{p.label} = {p.value!r}" for p in self.parameters)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for serialization."""
        return {
            "run_index": self.run_index,
            "parameters": [
                {
                    "position": p.position,
                    "identity": p.identity,
                    "value": p.value,
                    "index": p.index,
                    "argument_count": p.argument_count,
                }
                for p in self.parameters
            ],
        }

    def to_table(self, title: str | None = None) -> Table:
        """Render the combination as a rich Table for console reports."""
        table = Table(title=title or f"Parameters of run {self.run_index}")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Parameter", style="cyan")
        table.add_column("Value")
        table.add_column("Argument", justify="right", style="dim")

        for p in self.parameters:
            table.add_row(
                str(p.position),
                p.label,
                repr(p.value),
                f"{p.index + 1}/{p.argument_count}",
            )
        return table
