# Area: Session
"""
quiz_battle._session.state — Ephemeral session state
====================================================

Client-local state of one participant playing one match. Nothing here
is persisted; a finished unit is flushed to the store by the
reconciler and the per-unit fields are reset.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .shuffle import ShuffledQuestion


class SessionPhase(Enum):
    """
    Phase of the session for the current unit.

    AWAITING_MODE -> PLAYING (start_unit)
    PLAYING -> QUESTION_TRANSITION (answer submitted or forced)
    QUESTION_TRANSITION -> PLAYING (next question)
    QUESTION_TRANSITION -> UNIT_COMPLETE (last question of the unit)
    UNIT_COMPLETE -> PLAYING (start_unit on the next unit)
    UNIT_COMPLETE -> FINISHED (no unit left)
    """
    AWAITING_MODE = "awaiting_mode"
    PLAYING = "playing"
    QUESTION_TRANSITION = "question_transition"
    UNIT_COMPLETE = "unit_complete"
    FINISHED = "finished"


@dataclass
class SessionState:
    """Per-unit working state."""
    unit_index: int = 0
    question_index: int = 0
    selected_answer: Optional[int] = None
    correct_count: int = 0
    questions: List[ShuffledQuestion] = field(default_factory=list)
    # Shown option index per played question, UNANSWERED when forced.
    played_answers: List[int] = field(default_factory=list)

    def reset_unit(self, unit_index: int, questions: List[ShuffledQuestion]) -> None:
        self.unit_index = unit_index
        self.question_index = 0
        self.selected_answer = None
        self.correct_count = 0
        self.questions = questions
        self.played_answers = []

    @property
    def current_question(self) -> Optional[ShuffledQuestion]:
        if self.question_index < len(self.questions):
            return self.questions[self.question_index]
        return None

    @property
    def is_last_question(self) -> bool:
        return self.question_index >= len(self.questions) - 1

    def source_answers(self) -> List[int]:
        """Answers in the snapshot's question order, with snapshot option indices."""
        answers = [-1] * len(self.questions)
        for played, shown in zip(self.questions, self.played_answers):
            answers[played.source_index] = played.source_option(shown)
        return answers


@dataclass(frozen=True)
class UnitResult:
    """Local summary of a finished unit."""
    slot_index: int
    answers: List[int]
    correct_count: int
    question_count: int
    unit_score: int
    forced_count: int = 0
