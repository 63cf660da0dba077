"""Run driver for parameterize."""

from parameterize.runner.driver import (
    Body,
    FailureHandler,
    ParameterizeRunner,
    RunSummary,
    parameterize,
)

__all__ = [
    "Body",
    "FailureHandler",
    "ParameterizeRunner",
    "RunSummary",
    "parameterize",
]
