# Area: Session
"""
quiz_battle._session.runner — Session Runner
============================================

Drives one participant through their assigned units.

Per unit: AWAITING_MODE → PLAYING → QUESTION_TRANSITION (repeats) →
UNIT_COMPLETE. Starting a unit shuffles its questions and options and
starts the unit countdown. Once the countdown reaches zero, each tick
force-submits the current question as unanswered and advances as a
normal answer would.

When a unit completes the result goes to the Progress Reconciler; after
the last unit the reconciler is asked to evaluate match completion and
``on_finished`` is called with the record it returned.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional

from .countdown import DEFAULT_UNIT_SECONDS, UnitCountdown
from .shuffle import UNANSWERED, shuffle_questions
from .state import SessionPhase, SessionState, UnitResult
from .._match.ownership import Participant
from .._match.reconciler import ProgressReconciler
from .._match.records import MatchRecord, Question, QuizUnitAssignment
from ..errors import SessionStateError

logger = logging.getLogger("quiz_battle.session")

DEFAULT_POINTS_PER_CORRECT = 10

FinishedCallback = Callable[[Optional[MatchRecord]], None]


class SessionRunner:
    """
    One participant's progression through the units of one match.

    Args:
        participant: The local side
        assignments: Unit assignments of the match
        reconciler: Receives every finished unit
        start_unit: Unit to resume at, normally the persisted progress
        unit_seconds: Countdown per unit
        points_per_correct: Points for each correct answer
        rng: Source of the per-attempt shuffles
        on_finished: Called once after the last unit
    """

    def __init__(
        self,
        participant: Participant,
        assignments: List[QuizUnitAssignment],
        reconciler: ProgressReconciler,
        start_unit: int = 0,
        unit_seconds: float = DEFAULT_UNIT_SECONDS,
        points_per_correct: int = DEFAULT_POINTS_PER_CORRECT,
        rng: Optional[random.Random] = None,
        on_finished: Optional[FinishedCallback] = None,
    ):
        self.participant = participant
        self.assignments = sorted(assignments, key=lambda a: a.slot_index)
        self.reconciler = reconciler
        self.points_per_correct = points_per_correct
        self.countdown = UnitCountdown(unit_seconds)
        self.on_finished = on_finished
        self.results: List[UnitResult] = []
        self.state = SessionState(unit_index=start_unit)
        self._rng = rng or random.Random()
        self._forced_count = 0
        self._submitting = False
        self._phase = (
            SessionPhase.FINISHED if start_unit >= len(self.assignments)
            else SessionPhase.AWAITING_MODE
        )

    # ── Read-only views ─────────────────────────────────────────

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def total_units(self) -> int:
        return len(self.assignments)

    @property
    def current_assignment(self) -> Optional[QuizUnitAssignment]:
        if self.state.unit_index < len(self.assignments):
            return self.assignments[self.state.unit_index]
        return None

    @property
    def current_question(self) -> Optional[Question]:
        played = self.state.current_question
        return played.question if played is not None else None

    @property
    def remaining_seconds(self) -> float:
        return self.countdown.remaining()

    # ── Actions ─────────────────────────────────────────────────

    def start_unit(self) -> None:
        """Shuffle the next unit and start its countdown."""
        self._require("start a unit", SessionPhase.AWAITING_MODE, SessionPhase.UNIT_COMPLETE)
        assignment = self.current_assignment
        if assignment is None:
            raise SessionStateError("start a unit", "out of units")

        self.state.reset_unit(
            self.state.unit_index, shuffle_questions(assignment.questions, self._rng)
        )
        self._forced_count = 0
        self.countdown.start()
        self._phase = SessionPhase.PLAYING
        logger.info(
            "[%s] %s started unit %d/%d (%s, %d questions)",
            self.participant.match_id, self.participant.role.value,
            self.state.unit_index + 1, self.total_units,
            assignment.subject_id, len(self.state.questions),
        )

    def select_answer(self, index: int) -> None:
        """Select an option of the current question (as shown)."""
        self._require("select an answer", SessionPhase.PLAYING)
        options = self.current_question.options
        if not 0 <= index < len(options):
            raise ValueError(f"answer index {index} out of range for {len(options)} options")
        self.state.selected_answer = index

    def submit_answer(self) -> bool:
        """
        Submit the selected answer; no selection counts as unanswered.

        Once the countdown has run out the selection is discarded and the
        question is submitted unanswered.

        Returns:
            True if the answer was correct
        """
        self._require("submit an answer", SessionPhase.PLAYING)
        if self.countdown.expired():
            self._forced_count += 1
            logger.info(
                "[%s] Answer to question %d of unit %d arrived after time up, not scored",
                self.participant.match_id, self.state.question_index + 1,
                self.state.unit_index + 1,
            )
            return self._submit(None)
        return self._submit(self.state.selected_answer)

    def next_question(self) -> None:
        """Leave the question transition: next question or unit completion."""
        self._require("advance", SessionPhase.QUESTION_TRANSITION)
        if self.state.is_last_question:
            self._complete_unit()
        else:
            self.state.question_index += 1
            self._phase = SessionPhase.PLAYING

    def answer(self, index: int) -> bool:
        """Select, submit and advance in one step."""
        self.select_answer(index)
        correct = self.submit_answer()
        self.next_question()
        return correct

    def tick(self) -> SessionPhase:
        """Apply countdown expiry: at most one forced question per tick."""
        if self._phase not in (SessionPhase.PLAYING, SessionPhase.QUESTION_TRANSITION):
            return self._phase
        if not self.countdown.expired():
            return self._phase

        if self._phase is SessionPhase.PLAYING:
            self._forced_count += 1
            logger.info(
                "[%s] Time up, question %d of unit %d submitted unanswered",
                self.participant.match_id, self.state.question_index + 1,
                self.state.unit_index + 1,
            )
            self._submit(None)
        self.next_question()
        return self._phase

    def cancel(self) -> None:
        """Stop the session without completing anything."""
        self.countdown.cancel()
        if self._phase is not SessionPhase.FINISHED:
            logger.debug("[%s] Session cancelled", self.participant.match_id)
        self._phase = SessionPhase.FINISHED

    # ── Internals ───────────────────────────────────────────────

    def _require(self, action: str, *phases: SessionPhase) -> None:
        if self._phase not in phases:
            raise SessionStateError(action, self._phase.value)

    def _submit(self, shown_index: Optional[int]) -> bool:
        played = self.state.current_question
        answer = UNANSWERED if shown_index is None else shown_index
        correct = answer == played.question.correct_answer
        self.state.played_answers.append(answer)
        if correct:
            self.state.correct_count += 1
        self.state.selected_answer = None
        self._phase = SessionPhase.QUESTION_TRANSITION
        return correct

    def _complete_unit(self) -> None:
        if self._submitting:
            return
        self._submitting = True
        try:
            self.countdown.cancel()
            self._phase = SessionPhase.UNIT_COMPLETE

            slot_index = self.current_assignment.slot_index
            result = UnitResult(
                slot_index=slot_index,
                answers=self.state.source_answers(),
                correct_count=self.state.correct_count,
                question_count=len(self.state.questions),
                unit_score=self.state.correct_count * self.points_per_correct,
                forced_count=self._forced_count,
            )
            self.results.append(result)
            logger.info(
                "[%s] %s finished unit %d: %d/%d correct, %d points",
                self.participant.match_id, self.participant.role.value,
                slot_index + 1, result.correct_count, result.question_count,
                result.unit_score,
            )

            self.reconciler.record_unit(
                self.participant, slot_index, result.answers, result.unit_score
            )

            if self.state.unit_index + 1 < self.total_units:
                self.state.unit_index += 1
                return

            record = self.reconciler.check_completion(self.participant.match_id)
            self._phase = SessionPhase.FINISHED
            logger.info(
                "[%s] %s finished all %d units",
                self.participant.match_id, self.participant.role.value, self.total_units,
            )
            if self.on_finished is not None:
                self.on_finished(record)
        finally:
            self._submitting = False
