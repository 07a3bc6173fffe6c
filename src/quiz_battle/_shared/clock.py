# Area: Shared
"""Wall-clock helpers. All stored timestamps are timezone-aware UTC."""

from datetime import datetime, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current UTC time."""
    return datetime.now(timezone.utc)


def elapsed_seconds(since: Optional[datetime], now: datetime) -> float:
    """Seconds from ``since`` to ``now``; 0.0 if ``since`` is unset."""
    if since is None:
        return 0.0
    return (now - since).total_seconds()
