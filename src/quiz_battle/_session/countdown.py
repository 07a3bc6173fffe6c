# Area: Session
"""
quiz_battle._session.countdown — Per-unit countdown
===================================================

Each unit has a fixed time budget. The countdown is read on every
session tick; once it expires the session force-submits the current
question.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

logger = logging.getLogger("quiz_battle.countdown")

DEFAULT_UNIT_SECONDS = 120


class UnitCountdown:
    """Monotonic countdown for one unit of one session."""

    def __init__(self, duration_seconds: float = DEFAULT_UNIT_SECONDS) -> None:
        self.duration_seconds = duration_seconds
        self._expires_at: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._expires_at is not None

    def start(self) -> None:
        """(Re)start the countdown from the full duration."""
        self._expires_at = time.monotonic() + self.duration_seconds
        logger.debug("Countdown started (%.0fs)", self.duration_seconds)

    def remaining(self) -> float:
        """Seconds left, 0.0 once expired or when not running."""
        if self._expires_at is None:
            return 0.0
        return max(0.0, self._expires_at - time.monotonic())

    def expired(self) -> bool:
        return self._expires_at is not None and time.monotonic() >= self._expires_at

    def cancel(self) -> None:
        """Stop the countdown. No-op if not running."""
        if self._expires_at is not None:
            logger.debug("Countdown cancelled")
        self._expires_at = None
