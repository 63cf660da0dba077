"""Error handling for parameterize."""

from parameterize.errors.base import (
    ConfigValidationError,
    DeclarationError,
    DeclarationMismatchError,
    ErrorCode,
    ErrorContext,
    IterationError,
    ParameterExhaustedError,
    ParameterizeError,
    ParameterNotDeclaredError,
    RunLimitExceededError,
    SkipRun,
)

__all__ = [
    "ErrorCode",
    "ErrorContext",
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
