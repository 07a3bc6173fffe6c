# Area: Match
"""
quiz_battle._match.quit_handler — Voluntary abandon
===================================================

Resolves a match when one participant quits:

- the opponent has not played any unit yet (and the forfeit
  threshold has not passed) → cancelled, no winner;
- otherwise → completed, the side that stayed wins by forfeit.

Quitting an already finished match changes nothing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .enums import MatchEvent
from .ownership import Participant
from .records import MatchRecord
from .state_machine import Transition, can_transition, resolve_transition
from .._shared.clock import Clock, elapsed_seconds, utc_now

if TYPE_CHECKING:
    from .._store.interface import MatchStore

logger = logging.getLogger("quiz_battle.quit")

DEFAULT_FORFEIT_THRESHOLD_SECONDS = 30 * 60

# A racing terminal write can only move the match to a terminal status,
# so one retry after a rejected write is enough.
_MAX_ATTEMPTS = 2


class QuitHandler:
    """Computes and writes the terminal state of an abandoned match."""

    def __init__(
        self,
        store: "MatchStore",
        forfeit_threshold_seconds: float = DEFAULT_FORFEIT_THRESHOLD_SECONDS,
        clock: Clock = utc_now,
    ):
        self.store = store
        self.forfeit_threshold_seconds = forfeit_threshold_seconds
        self._clock = clock

    def quit(self, match_id: str, participant_id: str) -> MatchRecord:
        """
        Abandon ``match_id`` on behalf of ``participant_id``.

        Returns:
            The match record after the quit

        Raises:
            MatchNotFoundError: If the match does not exist
            NotAParticipantError: If the caller is not in the match
            StoreError: If the terminal write could not be made
        """
        for _ in range(_MAX_ATTEMPTS):
            record = self.store.get_match(match_id)
            participant = Participant.of(record, participant_id)
            if record.status.is_terminal:
                logger.info(
                    "[%s] Quit ignored, match already %s", match_id, record.status.value
                )
                return record

            transition = self.resolve(record, participant)
            if self.store.update_match_if(
                match_id, transition.fields, transition.expected_statuses
            ):
                if transition.event is MatchEvent.BOTH_FINISHED:
                    logger.info(
                        "[%s] %s quit after both sides finished, completed on score (winner=%s)",
                        match_id, participant_id, transition.fields["winner_id"] or "DRAW",
                    )
                elif transition.event is MatchEvent.QUIT_FORFEIT:
                    logger.info(
                        "[%s] %s quit, %s wins by forfeit",
                        match_id, participant_id, transition.fields["winner_id"],
                    )
                else:
                    logger.info(
                        "[%s] %s quit before the opponent played, match cancelled",
                        match_id, participant_id,
                    )
                return self.store.get_match(match_id)
            logger.debug("[%s] Match changed during quit, re-reading", match_id)

        return self.store.get_match(match_id)

    def resolve(self, record: MatchRecord, participant: Participant) -> Transition:
        """
        Pick the quit outcome for ``participant`` on ``record``.

        Both sides finished but the match still active means the
        completion write was lost; the quit then completes the match on
        score, as the monitor would.
        """
        now = self._clock()
        if record.both_finished() and can_transition(record.status, MatchEvent.BOTH_FINISHED):
            return resolve_transition(record, MatchEvent.BOTH_FINISHED, now)

        elapsed = elapsed_seconds(record.started_at, now)
        threshold_passed = (
            record.started_at is not None and elapsed >= self.forfeit_threshold_seconds
        )
        opponent_played = participant.opponent_progress(record) > 0

        logger.debug(
            "[%s] Quit by %s: opponent_progress=%d elapsed=%.0fs threshold_passed=%s",
            record.id, participant.participant_id,
            participant.opponent_progress(record), elapsed, threshold_passed,
        )

        if opponent_played or threshold_passed:
            return resolve_transition(
                record, MatchEvent.QUIT_FORFEIT, now,
                winner_id=participant.opponent_id(record),
            )
        return resolve_transition(record, MatchEvent.QUIT_EARLY, now)
