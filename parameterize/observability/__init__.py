"""Observability for parameterize: log formatting and configuration."""

from parameterize.observability.logging import (
    HumanReadableFormatter,
    StructuredFormatter,
    configure_from,
    configure_logging,
    get_context,
    log_context,
)

__all__ = [
    "StructuredFormatter",
    "HumanReadableFormatter",
    "configure_logging",
    "configure_from",
    "log_context",
    "get_context",
]
