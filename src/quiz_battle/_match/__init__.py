"""Match record, ownership rules and the status state machine."""

from .enums import InvitationStatus, MatchEvent, MatchStatus, Role
from .ownership import Participant, ProgressUpdate
from .records import (
    ContentUnit,
    MatchRecord,
    Question,
    QuizContent,
    QuizUnitAssignment,
    SubjectSlot,
)
from .state_machine import Transition, can_transition, resolve_transition

__all__ = [
    "InvitationStatus",
    "MatchEvent",
    "MatchStatus",
    "Role",
    "Participant",
    "ProgressUpdate",
    "ContentUnit",
    "MatchRecord",
    "Question",
    "QuizContent",
    "QuizUnitAssignment",
    "SubjectSlot",
    "Transition",
    "can_transition",
    "resolve_transition",
]
