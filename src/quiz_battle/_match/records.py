# Area: Match
"""
quiz_battle._match.records — Strict record models
=================================================

Pydantic models for everything that crosses the store boundary.
Rows coming back from the store are decoded through these models;
a row that does not satisfy the match invariants is rejected with
RecordValidationError instead of being trusted.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, field_validator, model_validator

from .enums import MatchStatus, Role
from ..errors import RecordValidationError


def _loads_if_text(value: Any) -> Any:
    """Columns holding JSON arrive from the store as text."""
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return value


JsonText = BeforeValidator(_loads_if_text)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SubjectSlot(BaseModel):
    """One subject chosen for the match."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    subject_id: str = Field(min_length=1)
    subject_name: str = ""


class Question(BaseModel):
    """One multiple-choice question of a quiz unit."""
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    question: str
    options: List[str] = Field(min_length=2)
    correct_answer: int = Field(alias="correctAnswer", ge=0)

    @model_validator(mode="after")
    def _correct_answer_in_range(self) -> "Question":
        if self.correct_answer >= len(self.options):
            raise ValueError(
                f"correct_answer {self.correct_answer} out of range "
                f"for {len(self.options)} options"
            )
        return self


class QuizContent(BaseModel):
    """The question payload of a content unit."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    questions: List[Question] = Field(min_length=1)


class ContentUnit(BaseModel):
    """A quiz from the content catalog."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    subject_id: str
    grade_level: Optional[str] = None
    title: str = ""
    difficulty: str = ""
    content: Annotated[QuizContent, JsonText]


class QuizUnitAssignment(BaseModel):
    """
    One subject slot of a match bound to a snapshot of its quiz.

    Each participant writes only their own answers/score/completed_at
    sub-fields once they finish the unit.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    match_id: str
    slot_index: int = Field(ge=0)
    subject_id: str
    content_unit_id: str
    snapshot_content: Annotated[QuizContent, JsonText]
    creator_answers: Annotated[Optional[List[int]], JsonText] = None
    creator_unit_score: Optional[int] = Field(default=None, ge=0)
    creator_completed_at: Optional[datetime] = None
    opponent_answers: Annotated[Optional[List[int]], JsonText] = None
    opponent_unit_score: Optional[int] = Field(default=None, ge=0)
    opponent_completed_at: Optional[datetime] = None

    @property
    def questions(self) -> List[Question]:
        return list(self.snapshot_content.questions)

    def answers_of(self, role: Role) -> Optional[List[int]]:
        return getattr(self, f"{role.value}_answers")

    def unit_score_of(self, role: Role) -> Optional[int]:
        return getattr(self, f"{role.value}_unit_score")


class MatchRecord(BaseModel):
    """
    The shared persisted state of one two-player battle.

    Frozen: a new value is produced for every observed change, never
    mutated in place. ``version`` is assigned by the store and grows
    with every write.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(min_length=1)
    creator_id: str = Field(min_length=1)
    opponent_id: str = Field(min_length=1)
    subject_slots: Annotated[List[SubjectSlot], JsonText, Field(min_length=1)]
    total_units: int = Field(ge=1)
    difficulty: str = "moyen"
    status: MatchStatus = MatchStatus.PENDING
    creator_progress: int = Field(default=0, ge=0)
    opponent_progress: int = Field(default=0, ge=0)
    creator_score: int = Field(default=0, ge=0)
    opponent_score: int = Field(default=0, ge=0)
    winner_id: Optional[str] = None
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    version: int = Field(default=1, ge=1)

    @field_validator("created_at", "started_at", "completed_at")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)

    @model_validator(mode="after")
    def _check_invariants(self) -> "MatchRecord":
        if self.creator_id == self.opponent_id:
            raise ValueError("creator_id and opponent_id must differ")
        if len(self.subject_slots) != self.total_units:
            raise ValueError(
                f"{len(self.subject_slots)} subject slots for {self.total_units} units"
            )
        for role in Role:
            if self.progress_of(role) > self.total_units:
                raise ValueError(
                    f"{role.value}_progress exceeds total_units ({self.total_units})"
                )
        if self.winner_id is not None and self.winner_id not in (
            self.creator_id, self.opponent_id
        ):
            raise ValueError(f"winner_id '{self.winner_id}' is not a participant")
        return self

    # ── Role helpers ────────────────────────────────────────────

    def participant_id(self, role: Role) -> str:
        return self.creator_id if role is Role.CREATOR else self.opponent_id

    def role_of(self, participant_id: str) -> Optional[Role]:
        if participant_id == self.creator_id:
            return Role.CREATOR
        if participant_id == self.opponent_id:
            return Role.OPPONENT
        return None

    def progress_of(self, role: Role) -> int:
        return getattr(self, f"{role.value}_progress")

    def score_of(self, role: Role) -> int:
        return getattr(self, f"{role.value}_score")

    def is_finished(self, role: Role) -> bool:
        return self.progress_of(role) == self.total_units

    def both_finished(self) -> bool:
        return self.is_finished(Role.CREATOR) and self.is_finished(Role.OPPONENT)


def _error_list(exc: ValidationError) -> List[str]:
    return [
        f"{'.'.join(str(p) for p in err['loc']) or '<record>'}: {err['msg']}"
        for err in exc.errors()
    ]


def decode_match(row: dict) -> MatchRecord:
    """Decode a store row into a MatchRecord, rejecting invalid shapes."""
    try:
        return MatchRecord.model_validate(row)
    except (ValidationError, ValueError) as exc:
        errors = _error_list(exc) if isinstance(exc, ValidationError) else [str(exc)]
        raise RecordValidationError("match", row.get("id"), errors) from exc


def decode_assignment(row: dict) -> QuizUnitAssignment:
    """Decode a store row into a QuizUnitAssignment."""
    try:
        return QuizUnitAssignment.model_validate(row)
    except (ValidationError, ValueError) as exc:
        errors = _error_list(exc) if isinstance(exc, ValidationError) else [str(exc)]
        key = f"{row.get('match_id')}#{row.get('slot_index')}"
        raise RecordValidationError("quiz_unit_assignment", key, errors) from exc


def decode_content_unit(row: dict) -> ContentUnit:
    """Decode a catalog row into a ContentUnit."""
    try:
        return ContentUnit.model_validate(row)
    except (ValidationError, ValueError) as exc:
        errors = _error_list(exc) if isinstance(exc, ValidationError) else [str(exc)]
        raise RecordValidationError("content_unit", row.get("id"), errors) from exc
