# Area: Store
"""
quiz_battle._store.change_feed — Match change notifications
===========================================================

In-process push channel scoped by match id. The store publishes the
freshly read record after each successful match write; subscribers
receive it synchronously. A failing subscriber is logged and skipped
so it can never fail the write that triggered it.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List

from .._match.records import MatchRecord

logger = logging.getLogger("quiz_battle.store.change_feed")

MatchCallback = Callable[[MatchRecord], None]


class ChangeFeed:
    """Subscriber registry keyed by match id."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[MatchCallback]] = {}
        self._lock = threading.Lock()

    def subscribe(self, match_id: str, callback: MatchCallback) -> Callable[[], None]:
        """
        Register ``callback`` for changes to ``match_id``.

        Returns:
            A function that removes the subscription. Calling it more
            than once is a no-op.
        """
        with self._lock:
            self._subscribers.setdefault(match_id, []).append(callback)
        logger.debug("Subscribed to match %s", match_id)

        def unsubscribe() -> None:
            with self._lock:
                callbacks = self._subscribers.get(match_id, [])
                if callback in callbacks:
                    callbacks.remove(callback)
                    logger.debug("Unsubscribed from match %s", match_id)
                if not callbacks:
                    self._subscribers.pop(match_id, None)

        return unsubscribe

    def publish(self, record: MatchRecord) -> None:
        """Deliver ``record`` to every subscriber of its match."""
        with self._lock:
            callbacks = list(self._subscribers.get(record.id, []))
        for callback in callbacks:
            try:
                callback(record)
            except Exception:
                logger.error(
                    "Change subscriber failed for match %s", record.id, exc_info=True
                )

    def subscriber_count(self, match_id: str) -> int:
        with self._lock:
            return len(self._subscribers.get(match_id, []))
