# Area: Shared
"""
quiz_battle._shared.logging_config — Structured logging setup
=============================================================

Two sinks for the ``quiz_battle`` logger tree: a colored, human
readable terminal stream and a JSON-lines file for later inspection.

Engine messages are written as ``"[<match_id>] ..."``. ``MatchIdFilter``
lifts that id into a ``match_id`` attribute so the JSON lines can be
grouped per match.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Union

if TYPE_CHECKING:
    from ..errors import ContentUnavailableError, RecordValidationError

    StructuredError = Union[ContentUnavailableError, RecordValidationError]

logger = logging.getLogger("quiz_battle")

TERMINAL_FORMAT = "%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s"
TERMINAL_DATEFMT = "%H:%M:%S"

LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}
RESET = "\033[0m"


class MatchIdFilter(logging.Filter):
    """Set ``record.match_id`` from a leading ``[%s]`` placeholder."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "match_id", None) is None:
            msg = record.msg
            if isinstance(msg, str) and msg.startswith("[%s]") and record.args:
                args = record.args if isinstance(record.args, tuple) else (record.args,)
                record.match_id = args[0]
        return True


class TerminalFormatter(logging.Formatter):
    """Formatter that colors the level name."""

    def __init__(self, fmt: str = TERMINAL_FORMAT, datefmt: str = TERMINAL_DATEFMT,
                 use_color: bool = True):
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_color:
            return super().format(record)
        # Work on a copy; other handlers share the record.
        colored = logging.makeLogRecord(record.__dict__)
        color = LEVEL_COLORS.get(record.levelno, RESET)
        colored.levelname = f"{color}{record.levelname}{RESET}"
        return super().format(colored)


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        match_id = getattr(record, "match_id", None)
        if match_id is not None:
            entry["match_id"] = match_id
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(
    log_file_path: str = "quiz_battle.log",
    level: Union[int, str] = logging.INFO,
) -> None:
    """
    Configure the ``quiz_battle`` logger. Calling it again replaces the
    handlers installed by the previous call.

    Parameters
    ----------
    log_file_path : str
        JSON-lines log file, created with its parent directory if needed.
    level : int or str
        Level as a number or a name such as "DEBUG".
    """
    level = _resolve_level(level)
    pkg_logger = logging.getLogger("quiz_battle")
    pkg_logger.setLevel(level)

    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()

    match_filter = MatchIdFilter()

    stream = logging.StreamHandler(sys.stdout)
    stream.setLevel(level)
    stream.setFormatter(TerminalFormatter(use_color=sys.stdout.isatty()))
    stream.addFilter(match_filter)
    pkg_logger.addHandler(stream)

    log_path = Path(log_file_path)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError as e:
        pkg_logger.warning("Could not open log file %s: %s", log_path, e)
    else:
        file_handler.setLevel(level)
        file_handler.setFormatter(JSONFormatter())
        file_handler.addFilter(match_filter)
        pkg_logger.addHandler(file_handler)

    pkg_logger.propagate = False


def log_setup_error(error: "StructuredError") -> None:
    """
    Print an error as a structured block and record it in the log.

    Parameters
    ----------
    error : ContentUnavailableError or RecordValidationError
        Any error providing ``format_error_log()``.
    """
    print(error.format_error_log(), file=sys.stderr)
    logger.error("%s: %s", error.__class__.__name__, error)
