"""Run a body once for every combination of its parameters.

The runner owns one IterationState for the whole enumeration. It starts a
run, calls the body with a ParameterizeScope, and repeats until the state
reports that every combination has been produced.

A failure raised by the body ends the enumeration: the runner captures the
combination that was active, reports it, and re-raises the original
exception unchanged.

Example:
    >>> from parameterize import parameterize
    >>>
    >>> def body(p):
    ...     a = p.parameter([1, 2], name="a")
    ...     if a.value == 1:
    ...         b = p.parameter([10, 20], name="b")
    ...         assert b.value > a.value
    >>>
    >>> summary = parameterize(body)
    >>> summary.runs
    3
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from parameterize.config import ParameterizeConfig
from parameterize.core.state import IterationState
from parameterize.diagnostics import Diagnostics
from parameterize.errors import ErrorContext, RunLimitExceededError, SkipRun
from parameterize.scope import ParameterizeScope

logger = logging.getLogger(__name__)

Body = Callable[[ParameterizeScope], Any]
FailureHandler = Callable[[Diagnostics, BaseException], None]


@dataclass
class RunSummary:
    """Outcome of a completed enumeration.

    Attributes:
        runs: Number of runs executed, skipped runs included.
        skipped: Runs abandoned because a parameter had no arguments.
        parameter_count: Handles allocated over the enumeration.
        started_at: Enumeration start time.
        finished_at: Enumeration finish time.
    """

    runs: int = 0
    skipped: int = 0
    parameter_count: int = 0
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: datetime = field(default_factory=datetime.now)

    @property
    def completed(self) -> int:
        """Runs in which the body returned normally."""
        return self.runs - self.skipped

    @property
    def total_duration_ms(self) -> float:
        return (self.finished_at - self.started_at).total_seconds() * 1000

    def summary(self) -> str:
        """Generate a human-readable summary of the enumeration."""
        return "\n".join(
            [
                f"Runs:        {self.runs}",
                f"  Completed: {self.completed}",
                f"  Skipped:   {self.skipped}",
                f"Parameters:  {self.parameter_count}",
                f"Duration:    {self.total_duration_ms / 1000:.2f}s",
            ]
        )


class ParameterizeRunner:
    """Drives a body through every combination of its parameters.

    Attributes:
        config: Settings for the enumeration.
        on_failure: Called with the failing combination and the exception
            before the exception propagates.
    """

    def __init__(
        self,
        config: ParameterizeConfig | None = None,
        on_failure: FailureHandler | None = None,
    ) -> None:
        self.config = config or ParameterizeConfig()
        self.on_failure = on_failure
        self.state = IterationState(verify_declarations=self.config.verify_declarations)

    def run(self, body: Body) -> RunSummary:
        """Execute ``body`` once per combination.

        Returns:
            RunSummary once the combinations are exhausted.

        Raises:
            RunLimitExceededError: More than ``config.max_runs`` runs needed.
            Exception: Whatever the body raised, unmodified.
        """
        if self.state.run_index >= 0:
            # Handles from a finished enumeration cannot be reused.
            self.state = IterationState(verify_declarations=self.config.verify_declarations)

        summary = RunSummary()
        scope = ParameterizeScope(self.state)
        max_runs = self.config.max_runs

        while self.state.start_run():
            if max_runs is not None and summary.runs >= max_runs:
                raise RunLimitExceededError(
                    f"Enumeration needs more than {max_runs} runs",
                    context=ErrorContext(run_index=self.state.run_index),
                    max_runs=max_runs,
                )

            summary.runs += 1
            try:
                body(scope)
            except SkipRun as e:
                summary.skipped += 1
                logger.debug(f"Run {self.state.run_index} skipped: {e}")
                continue
            except Exception as exc:
                try:
                    self._report_failure(Diagnostics.capture(self.state), exc)
                except Exception:
                    logger.exception("on_failure handler raised")
                raise

            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    f"Run {self.state.run_index} passed",
                    extra={"structured_data": {"parameters": self.state.get_read_parameters()}},
                )

        summary.parameter_count = self.state.parameter_count
        summary.finished_at = datetime.now()
        logger.info(
            f"Enumerated {summary.runs} runs "
            f"({summary.skipped} skipped, {summary.parameter_count} parameters)"
        )
        return summary

    def _report_failure(self, diagnostics: Diagnostics, exc: Exception) -> None:
        if self.config.log_failures:
            logger.warning(
                f"Run {diagnostics.run_index} failed with "
                f"{type(exc).__name__}: {diagnostics.describe()}",
                extra={"structured_data": diagnostics.to_dict()},
            )
        if self.on_failure is not None:
            self.on_failure(diagnostics, exc)


def parameterize(
    body: Body,
    config: ParameterizeConfig | None = None,
    on_failure: FailureHandler | None = None,
) -> RunSummary:
    """Run ``body`` for every combination of the parameters it declares."""
    return ParameterizeRunner(config=config, on_failure=on_failure).run(body)
