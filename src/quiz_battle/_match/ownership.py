# Area: Match
"""
quiz_battle._match.ownership — Field ownership per writer role
==============================================================

The match record has no lock. Safety comes from partitioning its
mutable fields by writer: each participant writes only its own
progress/score pair and its own per-unit answers, while the terminal
fields are written through the status state machine.

``Participant`` is the only place that builds a progress/score write,
so a client cannot touch the other side's counters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, List

from .enums import Role
from .records import MatchRecord
from ..errors import NotAParticipantError

OWNED_FIELDS: Dict[Role, FrozenSet[str]] = {
    Role.CREATOR: frozenset({"creator_progress", "creator_score"}),
    Role.OPPONENT: frozenset({"opponent_progress", "opponent_score"}),
}

UNIT_RESULT_FIELDS: Dict[Role, FrozenSet[str]] = {
    Role.CREATOR: frozenset({"creator_answers", "creator_unit_score", "creator_completed_at"}),
    Role.OPPONENT: frozenset({"opponent_answers", "opponent_unit_score", "opponent_completed_at"}),
}

# Written redundantly by reconciler, monitor and quit handler.
SHARED_FIELDS: FrozenSet[str] = frozenset({"status", "winner_id", "started_at", "completed_at"})


@dataclass(frozen=True)
class ProgressUpdate:
    """A single +1 progress step together with the score it adds."""
    role: Role
    expected_progress: int
    new_progress: int
    new_score: int

    def as_fields(self) -> Dict[str, int]:
        return {
            f"{self.role.value}_progress": self.new_progress,
            f"{self.role.value}_score": self.new_score,
        }


@dataclass(frozen=True)
class Participant:
    """One side of a match, bound to its role."""
    match_id: str
    participant_id: str
    role: Role

    @classmethod
    def of(cls, record: MatchRecord, participant_id: str) -> "Participant":
        role = record.role_of(participant_id)
        if role is None:
            raise NotAParticipantError(record.id, participant_id)
        return cls(match_id=record.id, participant_id=participant_id, role=role)

    def progress(self, record: MatchRecord) -> int:
        return record.progress_of(self.role)

    def score(self, record: MatchRecord) -> int:
        return record.score_of(self.role)

    def opponent_id(self, record: MatchRecord) -> str:
        return record.participant_id(self.role.other)

    def opponent_progress(self, record: MatchRecord) -> int:
        return record.progress_of(self.role.other)

    def has_finished(self, record: MatchRecord) -> bool:
        return record.is_finished(self.role)

    def next_progress(self, record: MatchRecord, unit_score: int) -> ProgressUpdate:
        """
        Build the progress/score step for one completed unit.

        Raises:
            ValueError: if the unit score is negative or the participant
                has already completed every unit.
        """
        if unit_score < 0:
            raise ValueError(f"unit score must be non-negative, got {unit_score}")
        current = self.progress(record)
        if current >= record.total_units:
            raise ValueError(
                f"{self.role.value} already completed all {record.total_units} units"
            )
        return ProgressUpdate(
            role=self.role,
            expected_progress=current,
            new_progress=current + 1,
            new_score=self.score(record) + unit_score,
        )

    def unit_result_fields(
        self, answers: List[int], unit_score: int, completed_at: str
    ) -> Dict[str, object]:
        return {
            f"{self.role.value}_answers": list(answers),
            f"{self.role.value}_unit_score": unit_score,
            f"{self.role.value}_completed_at": completed_at,
        }
