# Area: Sync
"""
quiz_battle._sync.live_sync — Live Sync Listener
================================================

Keeps a client's local view of one match current.

Pushed notifications and direct reads both go through ``MatchCache``,
which keeps the record with the highest store version. A notification
that arrives after a newer direct read is dropped instead of rolling
the view back.

The listener is read-only: nothing here writes to the store.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Callable, List, Optional

from .._match.records import MatchRecord

if TYPE_CHECKING:
    from .._store.interface import MatchStore

logger = logging.getLogger("quiz_battle.live_sync")

ChangeListener = Callable[[MatchRecord], None]


class MatchCache:
    """Latest known state of one match, ordered by store version."""

    def __init__(self, match_id: str, record: Optional[MatchRecord] = None):
        self.match_id = match_id
        self._record: Optional[MatchRecord] = None
        self._lock = threading.Lock()
        if record is not None:
            self.offer(record)

    @property
    def record(self) -> Optional[MatchRecord]:
        return self._record

    @property
    def version(self) -> int:
        return self._record.version if self._record is not None else 0

    def offer(self, record: MatchRecord) -> bool:
        """
        Replace the cached record if ``record`` is newer.

        Returns:
            True if the cache changed
        """
        if record.id != self.match_id:
            logger.warning(
                "[%s] Ignoring record for match %s", self.match_id, record.id
            )
            return False
        with self._lock:
            if self._record is not None and record.version <= self._record.version:
                logger.debug(
                    "[%s] Stale record v%d dropped (have v%d)",
                    self.match_id, record.version, self._record.version,
                )
                return False
            self._record = record
        return True


class LiveSyncListener:
    """Subscribes a MatchCache to the store's change notifications."""

    def __init__(self, store: "MatchStore", cache: MatchCache):
        self.store = store
        self.cache = cache
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._listeners: List[ChangeListener] = []

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None

    def add_listener(self, listener: ChangeListener) -> None:
        """Call ``listener`` with every record that updates the cache."""
        self._listeners.append(listener)

    def start(self) -> None:
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self.store.subscribe_match_changes(
            self.cache.match_id, self._on_change
        )
        logger.debug("[%s] Listening for match changes", self.cache.match_id)

    def stop(self) -> None:
        """Unsubscribe. Safe to call more than once."""
        if self._unsubscribe is None:
            return
        self._unsubscribe()
        self._unsubscribe = None
        logger.debug("[%s] Stopped listening", self.cache.match_id)

    def _on_change(self, record: MatchRecord) -> None:
        if not self.cache.offer(record):
            return
        logger.debug(
            "[%s] v%d status=%s creator=%d/%d opponent=%d/%d",
            record.id, record.version, record.status.value,
            record.creator_progress, record.total_units,
            record.opponent_progress, record.total_units,
        )
        for listener in self._listeners:
            listener(record)
