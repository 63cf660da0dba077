"""Exhaustive parameterized testing.

parameterize runs a body of test logic once for every combination of the
parameters it declares. Parameters may be declared conditionally, and
their arguments may depend on values chosen for earlier parameters, so
the combination space is discovered run by run, like a nested loop whose
shape is only known while it executes.

Quick Start:
    >>> from parameterize import parameterize
    >>>
    >>> def body(p):
    ...     method = p.parameter(["GET", "POST"], name="method")
    ...     if method.value == "POST":
    ...         payload = p.parameter([{}, {"id": 1}], name="payload")
    ...         check_post(payload.value)
    ...     else:
    ...         check_get()
    >>>
    >>> parameterize(body).runs
    3
"""

from parameterize.config import ParameterizeConfig, load_config
from parameterize.core import IterationState, LazyArguments, ParameterHandle
from parameterize.diagnostics import Diagnostics, ParameterSnapshot
from parameterize.errors import (
    ConfigValidationError,
    DeclarationError,
    DeclarationMismatchError,
    ErrorCode,
    IterationError,
    ParameterExhaustedError,
    ParameterizeError,
    ParameterNotDeclaredError,
    RunLimitExceededError,
    SkipRun,
)
from parameterize.runner import ParameterizeRunner, RunSummary, parameterize
from parameterize.scope import Parameter, ParameterizeScope

__version__ = "0.1.0"

__all__ = [
    # Engine
    "IterationState",
    "ParameterHandle",
    "LazyArguments",
    # Runner
    "parameterize",
    "ParameterizeRunner",
    "RunSummary",
    "ParameterizeScope",
    "Parameter",
    # Diagnostics
    "Diagnostics",
    "ParameterSnapshot",
    # Config
    "ParameterizeConfig",
    "load_config",
    # Errors
    "ErrorCode",
    "ParameterizeError",
    "ConfigValidationError",
    "DeclarationError",
    "ParameterNotDeclaredError",
    "DeclarationMismatchError",
    "IterationError",
    "ParameterExhaustedError",
    "RunLimitExceededError",
    "SkipRun",
]
