"""Custom exception hierarchy for parameterize.

Every error raised by the engine itself inherits from ParameterizeError and
carries:
- error_code: A unique ErrorCode enum for categorization
- context: ErrorContext with run/position/identity details
- suggestions: List of actionable steps to resolve the issue

Failures raised by the body under test are never wrapped in these types.
They propagate out of the runner unmodified.

Example:
    try:
        parameterize(body)
    except DeclarationMismatchError as e:
        print(e.format_verbose())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for parameterize.

    Error codes are organized by category:
    - E0xx: Configuration errors
    - E1xx: Declaration errors
    - E2xx: Iteration errors
    - E9xx: Unknown/internal errors
    """

    # Configuration errors (E0xx)
    INVALID_CONFIG = "E001"

    # Declaration errors (E1xx)
    PARAMETER_NOT_DECLARED = "E101"
    DECLARATION_MISMATCH = "E102"

    # Iteration errors (E2xx)
    PARAMETER_EXHAUSTED = "E201"
    RUN_LIMIT_EXCEEDED = "E202"

    # Unknown/internal errors (E9xx)
    UNKNOWN = "E999"

    @property
    def category(self) -> str:
        """Get the error category name."""
        code_num = int(self.value[1:])
        if code_num < 100:
            return "config"
        elif code_num < 200:
            return "declaration"
        elif code_num < 300:
            return "iteration"
        else:
            return "unknown"


@dataclass
class ErrorContext:
    """Where in the enumeration an error occurred.

    Attributes:
        run_index: 0-based index of the run being executed.
        position: Declaration position of the parameter involved.
        identity: Caller-supplied identity token of that parameter.
        extra: Additional context-specific information.
    """

    run_index: int | None = None
    position: int | None = None
    identity: Any = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for serialization."""
        result = {
            "run_index": self.run_index,
            "position": self.position,
            "identity": self.identity,
            "extra": self.extra or None,
        }
        return {k: v for k, v in result.items() if v is not None}

    def format_location(self) -> str:
        """Format the error location as a readable string."""
        parts = []
        if self.run_index is not None:
            parts.append(f"run={self.run_index}")
        if self.position is not None:
            parts.append(f"position={self.position}")
        if self.identity is not None:
            parts.append(f"parameter={self.identity!r}")
        return " > ".join(parts) if parts else "unknown location"


class ParameterizeError(Exception):
    """Base exception for all errors raised by the engine.

    Attributes:
        error_code: Unique ErrorCode for this error type
        message: Human-readable error description
        context: ErrorContext with execution details
        suggestions: List of actionable steps to resolve the issue
        recoverable: Whether retrying could succeed
        cause: The underlying exception (if any)
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN
    default_message: str = "An unexpected error occurred"
    default_suggestions: list[str] = []

    def __init__(
        self,
        message: str | None = None,
        error_code: ErrorCode | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
        recoverable: bool = True,
        suggestions: list[str] | None = None,
        **extra_context: Any,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.error_code
        self.context = context or ErrorContext()
        self.cause = cause
        self.recoverable = recoverable
        self._suggestions = suggestions

        if extra_context:
            self.context.extra.update(extra_context)

        super().__init__(self.message)

    @property
    def suggestions(self) -> list[str]:
        """Get actionable suggestions for resolving this error."""
        if self._suggestions is not None:
            return self._suggestions
        return self.default_suggestions.copy()

    def __str__(self) -> str:
        parts = [f"[{self.error_code.value}] {self.message}"]

        location = self.context.format_location()
        if location != "unknown location":
            parts.append(f"at {location}")

        return " | ".join(parts)

    def format_verbose(self) -> str:
        """Format error with full details including suggestions."""
        lines = [
            f"Error [{self.error_code.value}]: {self.message}",
            "",
        ]

        location = self.context.format_location()
        if location != "unknown location":
            lines.append(f"Location: {location}")

        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  - {suggestion}")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_code": self.error_code.value,
            "error_type": self.__class__.__name__,
            "message": self.message,
            "recoverable": self.recoverable,
            "suggestions": self.suggestions,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }


class ConfigValidationError(ParameterizeError):
    """Configuration could not be loaded or failed validation."""

    error_code = ErrorCode.INVALID_CONFIG
    default_message = "Invalid configuration"
    default_suggestions = [
        "Check the YAML file for typos in option names and values",
        "Check PARAMETERIZE_* environment variables",
    ]


class DeclarationError(ParameterizeError):
    """The body declared or read parameters inconsistently.

    Declaration errors mean the body's control flow broke the assumption
    that the same parameter is declared at the same position whenever the
    values read before it are unchanged. They are never recoverable.
    """

    error_code = ErrorCode.PARAMETER_NOT_DECLARED
    default_message = "Inconsistent parameter declaration"

    def __init__(self, message: str | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("recoverable", False)
        super().__init__(message, **kwargs)


class ParameterNotDeclaredError(DeclarationError):
    """A handle was read without being declared in the current run."""

    error_code = ErrorCode.PARAMETER_NOT_DECLARED
    default_message = "Parameter was read without being declared in this run"
    default_suggestions = [
        "Declare parameters inside the body, not outside of it",
        "Do not keep handles from a previous run or another enumeration",
    ]


class DeclarationMismatchError(DeclarationError):
    """A position was re-declared with a different parameter."""

    error_code = ErrorCode.DECLARATION_MISMATCH
    default_message = "Parameter declared at this position does not match the previous run"
    default_suggestions = [
        "Make the order of declarations depend only on values read earlier",
        "Avoid declaring parameters based on randomness, time or external state",
        "Give every parameter a stable name",
    ]


class IterationError(ParameterizeError):
    """The enumeration itself could not proceed."""

    error_code = ErrorCode.PARAMETER_EXHAUSTED
    default_message = "Iteration failed"

    def __init__(self, message: str | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("recoverable", False)
        super().__init__(message, **kwargs)


class ParameterExhaustedError(IterationError):
    """advance() was called on a handle already at its last argument."""

    error_code = ErrorCode.PARAMETER_EXHAUSTED
    default_message = "Parameter has no further arguments"


class RunLimitExceededError(IterationError):
    """The enumeration needed more runs than max_runs allows."""

    error_code = ErrorCode.RUN_LIMIT_EXCEEDED
    default_message = "Maximum number of runs exceeded"
    default_suggestions = [
        "Raise max_runs in the configuration (or unset it)",
        "Reduce the number of arguments per parameter",
    ]


class SkipRun(Exception):
    """Raised to abandon the current run without failing the enumeration.

    Declaring a parameter with no arguments makes the current combination
    impossible, so the runner moves straight on to the next one.
    """
