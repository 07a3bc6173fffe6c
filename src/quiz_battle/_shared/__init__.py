"""Shared helpers: clock and logging."""

from .clock import Clock, elapsed_seconds, utc_now
from .logging_config import (
    JSONFormatter,
    MatchIdFilter,
    TerminalFormatter,
    log_setup_error,
    setup_logging,
)

__all__ = [
    "Clock",
    "elapsed_seconds",
    "utc_now",
    "JSONFormatter",
    "MatchIdFilter",
    "TerminalFormatter",
    "log_setup_error",
    "setup_logging",
]
