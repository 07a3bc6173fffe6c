# Area: Match
"""
quiz_battle._match.reconciler — Progress Reconciler
===================================================

Merges one finished unit into the shared match record and detects the
end of the match.

For a unit finished by participant P:
1. persist P's answers and unit score on the slot row (best effort),
2. read P's progress/score straight from the store,
3. write progress + 1 and score + unit score, conditional on the
   progress just read.

Only P ever writes P's counters, so the other client cannot race this
write; the conditional write additionally turns an accidental double
submit from the same client into a no-op.

Completion: once both counters equal total_units, the winner is the
strictly higher score (None on a tie) and the terminal fields are
written conditionally on ``status == active``. Both clients may try
this at once; the second attempt changes nothing and is not an error.

Failures here never propagate to the player: they are logged and the
session carries on.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from .enums import MatchEvent
from .ownership import Participant, ProgressUpdate
from .records import MatchRecord
from .state_machine import can_transition, resolve_transition
from .._shared.clock import Clock, utc_now
from ..errors import MatchNotFoundError, RecordValidationError, StoreError

if TYPE_CHECKING:
    from .._store.interface import MatchStore

logger = logging.getLogger("quiz_battle.reconciler")

_BACKGROUND_ERRORS = (StoreError, RecordValidationError, MatchNotFoundError)


class ProgressReconciler:
    """Writes unit results and match completion for one store."""

    def __init__(self, store: "MatchStore", clock: Clock = utc_now):
        self.store = store
        self._clock = clock

    def record_unit(
        self,
        participant: Participant,
        slot_index: int,
        answers: List[int],
        unit_score: int,
    ) -> Optional[ProgressUpdate]:
        """
        Persist a finished unit and advance the participant's counters.

        Args:
            participant: The side that finished the unit
            slot_index: Index of the finished unit
            answers: Chosen option per question (-1 when unanswered)
            unit_score: Points earned on the unit

        Returns:
            The applied progress step, or None if nothing was written
        """
        match_id = participant.match_id
        completed_at = self._clock().isoformat()

        try:
            self.store.record_unit_result(
                match_id, slot_index, participant.role, answers, unit_score, completed_at
            )
        except _BACKGROUND_ERRORS:
            logger.error(
                "[%s] Could not save answers for %s unit %d",
                match_id, participant.role.value, slot_index,
                exc_info=True,
            )

        try:
            record = self.store.get_match(match_id)
            update = participant.next_progress(record, unit_score)
            if not self.store.advance_progress(match_id, update):
                logger.warning(
                    "[%s] %s progress moved past %d before write, step skipped",
                    match_id, participant.role.value, update.expected_progress,
                )
                return None
        except ValueError as e:
            logger.warning("[%s] Progress not advanced: %s", match_id, e)
            return None
        except _BACKGROUND_ERRORS:
            logger.error(
                "[%s] Could not advance %s progress", match_id, participant.role.value,
                exc_info=True,
            )
            return None

        logger.info(
            "[%s] %s progress %d → %d, score %d (+%d)",
            match_id, participant.role.value, update.expected_progress,
            update.new_progress, update.new_score, unit_score,
        )
        return update

    def check_completion(self, match_id: str) -> Optional[MatchRecord]:
        """
        Complete the match if both sides have finished every unit.

        Returns:
            The record as stored after the check, or None if it could
            not be read
        """
        try:
            record = self.store.get_match(match_id)
            if record.status.is_terminal:
                return record
            if not record.both_finished():
                logger.info("[%s] Waiting for opponent to finish", match_id)
                return record
            if not can_transition(record.status, MatchEvent.BOTH_FINISHED):
                logger.warning(
                    "[%s] Both finished but match is %s", match_id, record.status.value
                )
                return record

            transition = resolve_transition(record, MatchEvent.BOTH_FINISHED, self._clock())
            applied = self.store.update_match_if(
                match_id, transition.fields, transition.expected_statuses
            )
            if applied:
                logger.info(
                    "[%s] Match completed: winner=%s (%d - %d)",
                    match_id, transition.fields["winner_id"] or "DRAW",
                    record.creator_score, record.opponent_score,
                )
            else:
                logger.debug("[%s] Completion already written", match_id)
            return self.store.get_match(match_id)
        except _BACKGROUND_ERRORS:
            logger.error("[%s] Completion check failed", match_id, exc_info=True)
            return None
