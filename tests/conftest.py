"""Pytest fixtures for parameterize tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

import pytest

from parameterize.core.state import IterationState
from parameterize.observability.logging import ROOT_LOGGER_NAME


def enumerate_runs(
    state: IterationState,
    body: Callable[[IterationState], Any],
) -> list[Any]:
    """Drive a state by hand, collecting whatever the body returns per run."""
    results = []
    while state.start_run():
        results.append(body(state))
    return results


@pytest.fixture
def state() -> IterationState:
    return IterationState()


@pytest.fixture
def run_all() -> Callable[..., list[Any]]:
    """Collect per-run results of a body driven by a fresh IterationState."""

    def _run_all(body: Callable[[IterationState], Any], **kwargs: Any) -> list[Any]:
        return enumerate_runs(IterationState(**kwargs), body)

    return _run_all


@pytest.fixture(autouse=True)
def _restore_library_logger() -> Iterator[None]:
    """Undo configure_logging() so caplog keeps seeing library records."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Keep PARAMETERIZE_* variables and stray .env files out of config tests."""
    for key in (
        "PARAMETERIZE_MAX_RUNS",
        "PARAMETERIZE_VERIFY_DECLARATIONS",
        "PARAMETERIZE_LOG_FAILURES",
        "PARAMETERIZE_LOG_LEVEL",
        "PARAMETERIZE_JSON_LOGS",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
