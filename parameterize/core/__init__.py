"""Combinatorial iteration engine.

    ParameterHandle -> IterationState -> (runner) ParameterizeRunner

Modules:
    arguments: LazyArguments, as_arguments
    handle: ParameterHandle
    state: IterationState
"""

from parameterize.core.arguments import LazyArguments, as_arguments
from parameterize.core.handle import ParameterHandle
from parameterize.core.state import IterationState

__all__ = [
    "LazyArguments",
    "as_arguments",
    "ParameterHandle",
    "IterationState",
]
