# Area: Store
"""
quiz_battle._store.repo_invitations — Invitations Repository
============================================================

Repository for match_invitations: the notification enqueued for the
opponent when a match is created.
"""

import sqlite3
from typing import Any, Dict, List, Optional

from .database import BaseRepository
from .._match.enums import InvitationStatus


class InvitationRepository(BaseRepository):
    """Repository for match_invitations table."""

    def save_invitation(
        self,
        match_id: str,
        to_participant_id: str,
        from_participant_id: str,
        created_at: str,
        conn: Optional[sqlite3.Connection] = None,
    ) -> None:
        """Enqueue a pending invitation."""
        query = """
            INSERT INTO match_invitations
            (match_id, to_participant_id, from_participant_id, status, created_at)
            VALUES (?, ?, ?, 'pending', ?)
        """
        self._execute(
            query, (match_id, to_participant_id, from_participant_id, created_at), conn=conn
        )

    def get_invitation(self, match_id: str) -> Optional[Dict[str, Any]]:
        """Get the invitation for a match."""
        return self._execute_one(
            "SELECT * FROM match_invitations WHERE match_id = ?", (match_id,)
        )

    def get_pending_for(self, participant_id: str) -> List[Dict[str, Any]]:
        """Get pending invitations addressed to a participant."""
        query = """
            SELECT * FROM match_invitations
            WHERE to_participant_id = ? AND status = 'pending'
            ORDER BY created_at DESC
        """
        return self._execute(query, (participant_id,), fetch=True) or []

    def update_status(self, match_id: str, status: InvitationStatus) -> int:
        """Update invitation status. Returns number of rows changed."""
        query = "UPDATE match_invitations SET status = ? WHERE match_id = ?"
        return self._execute(query, (status.value, match_id))
