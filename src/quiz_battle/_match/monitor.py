# Area: Match
"""
quiz_battle._match.monitor — Timeout/Forfeit Monitor
====================================================

Runs on every open client at a fixed interval. Each check re-reads
the match; once an active match has run past its ceiling:

- exactly one side finished → completed, that side wins,
- neither side finished → cancelled, no winner,
- both finished (completion write was lost) → normal score compare.

Check failures are logged and swallowed so a network blip cannot end
the client's session.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Optional

from .enums import MatchEvent, MatchStatus
from .records import MatchRecord
from .state_machine import finished_side, resolve_transition
from .._shared.clock import Clock, elapsed_seconds, utc_now

if TYPE_CHECKING:
    from .._store.interface import MatchStore

logger = logging.getLogger("quiz_battle.monitor")

DEFAULT_INTERVAL_SECONDS = 10
DEFAULT_CEILING_SECONDS = 5 * 60


class TimeoutMonitor:
    """
    Periodic ceiling check for one match.

    ``tick()`` is called from the client loop as often as it likes;
    the store is only read once per ``interval_seconds``.
    """

    def __init__(
        self,
        store: "MatchStore",
        match_id: str,
        ceiling_seconds: float = DEFAULT_CEILING_SECONDS,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        clock: Clock = utc_now,
    ):
        self.store = store
        self.match_id = match_id
        self.ceiling_seconds = ceiling_seconds
        self.interval_seconds = interval_seconds
        self._clock = clock
        self._next_check_at = time.monotonic() + interval_seconds
        self._stopped = False

    @property
    def stopped(self) -> bool:
        return self._stopped

    def stop(self) -> None:
        """Stop checking. Further ticks are no-ops."""
        if not self._stopped:
            logger.debug("[%s] Monitor stopped", self.match_id)
        self._stopped = True

    def tick(self) -> Optional[MatchRecord]:
        """
        Run a check if the interval elapsed.

        Returns:
            The record read by the check, or None when no check ran
        """
        if self._stopped:
            return None
        now_mono = time.monotonic()
        if now_mono < self._next_check_at:
            return None
        self._next_check_at = now_mono + self.interval_seconds
        return self.check()

    def check(self) -> Optional[MatchRecord]:
        """Read the match and resolve it if it ran past the ceiling."""
        try:
            record = self.store.get_match(self.match_id)
            if record.status is not MatchStatus.ACTIVE or record.started_at is None:
                return record

            now = self._clock()
            elapsed = elapsed_seconds(record.started_at, now)
            if elapsed <= self.ceiling_seconds:
                return record

            event = self._timeout_event(record)
            transition = resolve_transition(record, event, now)
            applied = self.store.update_match_if(
                self.match_id, transition.fields, transition.expected_statuses
            )
            if applied:
                logger.warning(
                    "[%s] Ceiling exceeded after %.0fs: %s → %s (winner=%s)",
                    self.match_id, elapsed, event.value, transition.to_status.value,
                    transition.fields.get("winner_id"),
                )
            else:
                logger.debug("[%s] Timeout resolution already written", self.match_id)
            return self.store.get_match(self.match_id)
        except Exception:
            logger.error("[%s] Timeout check failed", self.match_id, exc_info=True)
            return None

    @staticmethod
    def _timeout_event(record: MatchRecord) -> MatchEvent:
        if record.both_finished():
            return MatchEvent.BOTH_FINISHED
        if finished_side(record) is not None:
            return MatchEvent.TIMEOUT_ONE_SIDED
        return MatchEvent.TIMEOUT_NONE_FINISHED
