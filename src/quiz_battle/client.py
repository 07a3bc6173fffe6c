# Area: Client
"""
quiz_battle.client — One participant's battle client
====================================================

Wires the per-client components together for one open match:

- opening reads the match, activates it on first open, and resumes the
  session at the participant's persisted progress;
- ``tick()`` drives the unit countdown and the timeout monitor;
- the live sync listener keeps ``record`` current and ends the session
  as soon as a terminal status is pushed;
- ``quit()`` resolves the match before the client lets go of it.

``complete_callback`` is called once, when the local participant's part
is over: they finished all units (and now wait for the opponent), or
the match reached a terminal status.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Callable, Dict, Optional

from ._config import DEFAULTS
from ._match.enums import MatchEvent, MatchStatus
from ._match.monitor import TimeoutMonitor
from ._match.outcome import MatchOutcome, classify_outcome
from ._match.ownership import Participant
from ._match.quit_handler import QuitHandler
from ._match.reconciler import ProgressReconciler
from ._match.records import MatchRecord
from ._match.state_machine import resolve_transition
from ._session.runner import SessionRunner
from ._shared.clock import Clock, utc_now
from ._store.interface import MatchStore
from ._sync.live_sync import LiveSyncListener, MatchCache
from .errors import BattleError, StoreError

logger = logging.getLogger("quiz_battle.client")

CompleteCallback = Callable[[MatchRecord], None]


class BattleClient:
    """
    Client of one participant in one match.

    Args:
        store: Shared match store
        match_id: Match to open
        participant_id: The local participant
        config: Settings, missing keys fall back to DEFAULTS
        complete_callback: Called once when the local part is over
        rng: Source of the per-attempt shuffles
        clock: Wall clock used for every stored timestamp
    """

    def __init__(
        self,
        store: MatchStore,
        match_id: str,
        participant_id: str,
        config: Optional[Dict[str, Any]] = None,
        complete_callback: Optional[CompleteCallback] = None,
        rng: Optional[random.Random] = None,
        clock: Clock = utc_now,
    ):
        self.store = store
        self.match_id = match_id
        self.participant_id = participant_id
        self.config = {**DEFAULTS, **(config or {})}
        self.complete_callback = complete_callback
        self._rng = rng or random.Random()
        self._clock = clock

        self.reconciler = ProgressReconciler(store, clock=clock)
        self.quit_handler = QuitHandler(
            store,
            forfeit_threshold_seconds=self.config["forfeit_threshold_seconds"],
            clock=clock,
        )
        self.cache = MatchCache(match_id)
        self.listener = LiveSyncListener(store, self.cache)
        self.listener.add_listener(self._on_remote_change)

        self.participant: Optional[Participant] = None
        self.session: Optional[SessionRunner] = None
        self.monitor: Optional[TimeoutMonitor] = None
        self._completed = False
        self._closed = False

    # ── State ───────────────────────────────────────────────────

    @property
    def record(self) -> Optional[MatchRecord]:
        """Latest known match record."""
        return self.cache.record

    @property
    def is_opened(self) -> bool:
        return self.participant is not None

    @property
    def is_completed(self) -> bool:
        """True once complete_callback has fired."""
        return self._completed

    @property
    def is_over(self) -> bool:
        """True once the match is terminal or the client was closed."""
        record = self.cache.record
        return self._closed or (record is not None and record.status.is_terminal)

    @property
    def is_waiting(self) -> bool:
        """Finished every unit, match not decided yet."""
        record = self.cache.record
        return (
            record is not None
            and self.participant is not None
            and not record.status.is_terminal
            and self.participant.has_finished(record)
        )

    def outcome(self) -> MatchOutcome:
        """Classify the latest known record for the local participant."""
        if self.cache.record is None:
            raise BattleError(f"Match {self.match_id} has not been opened")
        return classify_outcome(self.cache.record, self.participant_id)

    # ── Lifecycle ───────────────────────────────────────────────

    def open(self) -> MatchRecord:
        """
        Open the match for play.

        Returns:
            The record as read (after activation, when this open
            activated the match)

        Raises:
            MatchNotFoundError: If the match does not exist
            NotAParticipantError: If the local participant is not in it
            StoreError: If the match cannot be read or has no units
        """
        if self.is_opened:
            return self.cache.record

        record = self.store.get_match(self.match_id)
        participant = Participant.of(record, self.participant_id)
        self.participant = participant
        self.cache.offer(record)
        logger.info(
            "[%s] Opened by %s (%s), status=%s progress=%d/%d",
            self.match_id, self.participant_id, participant.role.value,
            record.status.value, participant.progress(record), record.total_units,
        )

        if record.status is MatchStatus.PENDING and record.started_at is None:
            record = self._activate(record)

        if record.status.is_terminal or participant.has_finished(record):
            self._notify_complete(record)
            if record.status.is_terminal:
                return record
        else:
            assignments = self.store.get_quiz_unit_assignments(self.match_id)
            if len(assignments) != record.total_units:
                raise StoreError(
                    f"Match {self.match_id} has {len(assignments)} unit(s) assigned, "
                    f"expected {record.total_units}"
                )
            self.session = SessionRunner(
                participant,
                assignments,
                self.reconciler,
                start_unit=participant.progress(record),
                unit_seconds=self.config["unit_seconds"],
                points_per_correct=self.config["points_per_correct"],
                rng=self._rng,
                on_finished=self._on_session_finished,
            )

        self.listener.start()
        self.monitor = TimeoutMonitor(
            self.store,
            self.match_id,
            ceiling_seconds=self.config["match_ceiling_seconds"],
            interval_seconds=self.config["monitor_interval_seconds"],
            clock=self._clock,
        )
        return self.cache.record

    def tick(self) -> None:
        """Advance the unit countdown and the timeout monitor."""
        if self._closed or not self.is_opened:
            return
        if self.session is not None:
            self.session.tick()
        if self.monitor is not None:
            checked = self.monitor.tick()
            if checked is not None:
                self._observe(checked)

    def refresh(self) -> Optional[MatchRecord]:
        """Re-read the match directly from the store."""
        try:
            self._observe(self.store.get_match(self.match_id))
        except BattleError:
            logger.error("[%s] Refresh failed", self.match_id, exc_info=True)
        return self.cache.record

    def quit(self) -> MatchRecord:
        """
        Abandon the match and release it.

        Raises:
            MatchNotFoundError: If the match no longer exists
            StoreError: If the terminal write failed; the client stays open
        """
        record = self.quit_handler.quit(self.match_id, self.participant_id)
        self._observe(record)
        self._stop_background()
        self._notify_complete(record)
        return record

    def close(self) -> None:
        """Release the match without changing it."""
        if self._closed:
            return
        self._stop_background()
        self._closed = True
        logger.debug("[%s] Client of %s closed", self.match_id, self.participant_id)

    def __enter__(self) -> "BattleClient":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ── Internals ───────────────────────────────────────────────

    def _activate(self, record: MatchRecord) -> MatchRecord:
        transition = resolve_transition(record, MatchEvent.ACTIVATE, self._clock())
        if self.store.update_match_if(
            self.match_id, transition.fields, transition.expected_statuses
        ):
            logger.info("[%s] Match activated by %s", self.match_id, self.participant_id)
        else:
            logger.debug("[%s] Match already activated", self.match_id)
        record = self.store.get_match(self.match_id)
        self.cache.offer(record)
        return self.cache.record

    def _observe(self, record: MatchRecord) -> None:
        self.cache.offer(record)
        current = self.cache.record
        if current is not None and current.status.is_terminal:
            self._on_terminal(current)

    def _on_remote_change(self, record: MatchRecord) -> None:
        if record.status.is_terminal:
            self._on_terminal(record)

    def _on_session_finished(self, record: Optional[MatchRecord]) -> None:
        if record is not None:
            self.cache.offer(record)
        current = self.cache.record
        if current.status.is_terminal:
            self._on_terminal(current)
        else:
            logger.info("[%s] %s waiting for opponent", self.match_id, self.participant_id)
            self._notify_complete(current)

    def _on_terminal(self, record: MatchRecord) -> None:
        self._stop_background()
        self._notify_complete(record)

    def _stop_background(self) -> None:
        if self.session is not None:
            self.session.cancel()
        if self.monitor is not None:
            self.monitor.stop()
        self.listener.stop()

    def _notify_complete(self, record: MatchRecord) -> None:
        if self._completed:
            return
        self._completed = True
        logger.info(
            "[%s] Done for %s: status=%s winner=%s",
            self.match_id, self.participant_id, record.status.value, record.winner_id,
        )
        if self.complete_callback is not None:
            self.complete_callback(record)
