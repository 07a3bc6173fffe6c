"""Local view of a match kept current by pushed changes."""

from .live_sync import LiveSyncListener, MatchCache

__all__ = ["LiveSyncListener", "MatchCache"]
