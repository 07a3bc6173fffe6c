# Area: Match
"""
quiz_battle._match.outcome — Result classification
===================================================

Turns a match record into what one participant sees on the results
screen, and the reward points that result is worth.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .enums import MatchStatus
from .ownership import Participant
from .records import MatchRecord

WIN_POINTS = 10
DRAW_POINTS = 5


class OutcomeKind(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    WAITING = "waiting"
    WON = "won"
    LOST = "lost"
    DRAW = "draw"
    WON_FORFEIT = "won_forfeit"
    LOST_FORFEIT = "lost_forfeit"
    CANCELLED = "cancelled"


_POINTS = {
    OutcomeKind.WON: WIN_POINTS,
    OutcomeKind.WON_FORFEIT: WIN_POINTS,
    OutcomeKind.DRAW: DRAW_POINTS,
}


@dataclass(frozen=True)
class MatchOutcome:
    """Result of a match from one participant's point of view."""
    match_id: str
    viewer_id: str
    kind: OutcomeKind
    my_score: int
    opponent_score: int
    winner_id: Optional[str]

    @property
    def points_earned(self) -> int:
        return _POINTS.get(self.kind, 0)

    @property
    def is_final(self) -> bool:
        return self.kind not in (
            OutcomeKind.PENDING, OutcomeKind.IN_PROGRESS, OutcomeKind.WAITING
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        data["points_earned"] = self.points_earned
        return data


def classify_outcome(record: MatchRecord, viewer_id: str) -> MatchOutcome:
    """
    Classify ``record`` for ``viewer_id``.

    A completed match where not both sides finished was decided by a
    quit or a timeout, and is reported as a forfeit.

    Raises:
        NotAParticipantError: If the viewer is not in the match
    """
    me = Participant.of(record, viewer_id)
    i_finished = me.has_finished(record)

    if record.status is MatchStatus.CANCELLED:
        kind = OutcomeKind.CANCELLED
    elif record.status is MatchStatus.PENDING:
        kind = OutcomeKind.PENDING
    elif record.status is MatchStatus.ACTIVE:
        kind = OutcomeKind.WAITING if i_finished else OutcomeKind.IN_PROGRESS
    elif record.both_finished():
        if record.winner_id is None:
            kind = OutcomeKind.DRAW
        elif record.winner_id == viewer_id:
            kind = OutcomeKind.WON
        else:
            kind = OutcomeKind.LOST
    elif record.winner_id == viewer_id:
        kind = OutcomeKind.WON_FORFEIT
    else:
        kind = OutcomeKind.LOST_FORFEIT

    return MatchOutcome(
        match_id=record.id,
        viewer_id=viewer_id,
        kind=kind,
        my_score=me.score(record),
        opponent_score=record.score_of(me.role.other),
        winner_id=record.winner_id,
    )
