"""Client-local play of one participant's units."""

from .countdown import UnitCountdown
from .runner import SessionRunner
from .shuffle import ShuffledQuestion, shuffle_questions
from .state import SessionPhase, SessionState, UnitResult

__all__ = [
    "UnitCountdown",
    "SessionRunner",
    "ShuffledQuestion",
    "shuffle_questions",
    "SessionPhase",
    "SessionState",
    "UnitResult",
]
