"""
quiz_battle.errors — Custom exception classes
==============================================

Defines the exception hierarchy for the battle engine.
Setup and read errors carry enough context to be shown to the user;
store errors are raised by the persistence layer and caught by the
best-effort background components.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


class BattleError(Exception):
    """Base exception for all quiz_battle errors."""
    pass


class ConfigError(BattleError, ValueError):
    """Raised when configuration is missing keys or has invalid values."""
    pass


class StoreError(BattleError):
    """Raised when the backing store rejects or fails a read/write."""
    pass


class RecordValidationError(BattleError):
    """Raised when a stored row does not decode into a valid record."""

    def __init__(self, record_type: str, record_id: Any, errors: List[str]):
        self.record_type = record_type
        self.record_id = record_id
        self.errors = errors
        super().__init__(
            f"Invalid {record_type} '{record_id}': {errors}"
        )

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="INVALID_RECORD",
            details={
                "record_type": self.record_type,
                "record_id": self.record_id,
                "errors": self.errors,
            },
            message="The stored row does not satisfy the record constraints.",
            title="STORED RECORD REJECTED",
        )


class MatchNotFoundError(BattleError):
    """Raised when a match does not exist or is not accessible."""

    user_message = "match not found"

    def __init__(self, match_id: str):
        self.match_id = match_id
        super().__init__(f"Match '{match_id}' not found")


class NotAParticipantError(BattleError):
    """Raised when someone other than the two participants acts on a match."""

    def __init__(self, match_id: str, participant_id: str):
        self.match_id = match_id
        self.participant_id = participant_id
        super().__init__(
            f"'{participant_id}' is not a participant of match '{match_id}'"
        )


class InvalidTransitionError(BattleError, ValueError):
    """Raised when an event is not permitted from the current match status."""

    def __init__(self, status: str, event: str):
        self.status = status
        self.event = event
        super().__init__(f"Invalid transition: {event} from {status}")


class ContentUnavailableError(BattleError):
    """Raised when no quiz unit exists for a subject at any grade level."""

    def __init__(
        self,
        subject_id: str,
        subject_name: Optional[str] = None,
        grade_level: Optional[str] = None,
    ):
        self.subject_id = subject_id
        self.subject_name = subject_name or subject_id
        self.grade_level = grade_level
        super().__init__(
            f"No quiz found for subject '{self.subject_name}'. "
            f"Generate content for this subject before creating a battle."
        )

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="CONTENT_UNAVAILABLE",
            details={
                "subject_id": self.subject_id,
                "subject_name": self.subject_name,
                "grade_level": self.grade_level,
            },
            message=str(self),
        )


def _format_error_block(
    error_type: str,
    details: Dict[str, Any],
    message: str,
    title: str = "MATCH CREATION FAILED",
) -> str:
    """Format a structured error block for terminal output."""
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")

    lines = [
        "",
        "=" * 64,
        f" {title}",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        "",
        " ── DETAILS " + "─" * 52,
        _indent_json(details),
        "",
        f" • {message}",
        "",
        "=" * 64,
        "",
    ]
    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"


class SessionStateError(BattleError, RuntimeError):
    """Raised when a session action is not valid in the current phase."""

    def __init__(self, action: str, phase: str):
        self.action = action
        self.phase = phase
        super().__init__(f"Cannot {action} while session is {phase}")
