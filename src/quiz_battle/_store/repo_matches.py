# Area: Store
"""
quiz_battle._store.repo_matches — Matches Repository
====================================================

Repository for the matches table. Every successful write bumps the
row's ``version`` so readers can order the values they observe.
"""

import json
import sqlite3
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from .database import BaseRepository
from .._match.enums import MatchStatus, Role
from .._match.ownership import OWNED_FIELDS, SHARED_FIELDS
from .._match.records import MatchRecord
from ..errors import StoreError

UPDATABLE_COLUMNS = SHARED_FIELDS | OWNED_FIELDS[Role.CREATOR] | OWNED_FIELDS[Role.OPPONENT]


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class MatchRepository(BaseRepository):
    """
    Repository for matches table.

    Handles inserting match rows and applying plain or conditional
    field updates.
    """

    def insert_match(
        self, record: MatchRecord, conn: Optional[sqlite3.Connection] = None
    ) -> None:
        """
        Insert a new match row.

        Args:
            record: The match to insert
            conn: Connection of an enclosing transaction, if any
        """
        row = record.model_dump(mode="json")
        query = """
            INSERT INTO matches
            (id, creator_id, opponent_id, subject_slots, total_units, difficulty,
             status, creator_progress, opponent_progress, creator_score,
             opponent_score, winner_id, created_at, started_at, completed_at, version)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """
        self._execute(query, (
            row["id"],
            row["creator_id"],
            row["opponent_id"],
            json.dumps(row["subject_slots"]),
            row["total_units"],
            row["difficulty"],
            row["status"],
            row["creator_progress"],
            row["opponent_progress"],
            row["creator_score"],
            row["opponent_score"],
            row["winner_id"],
            _iso(record.created_at),
            _iso(record.started_at),
            _iso(record.completed_at),
            row["version"],
        ), conn=conn)

    def get_match_row(self, match_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a match row by ID.

        Args:
            match_id: Match identifier

        Returns:
            Row dict or None
        """
        return self._execute_one("SELECT * FROM matches WHERE id = ?", (match_id,))

    def update_fields(
        self,
        match_id: str,
        fields: Dict[str, Any],
        expected_statuses: Optional[Iterable[MatchStatus]] = None,
    ) -> int:
        """
        Update match columns, optionally only while status is one of
        ``expected_statuses``.

        Returns:
            Number of rows changed (0 when the condition did not hold)

        Raises:
            StoreError: If a column is not updatable
        """
        unknown = set(fields) - UPDATABLE_COLUMNS
        if unknown:
            raise StoreError(f"Columns not updatable: {sorted(unknown)}")
        if not fields:
            return 0

        columns = sorted(fields)
        assignments = ", ".join(f"{col} = ?" for col in columns)
        params: List[Any] = [fields[col] for col in columns]
        query = f"UPDATE matches SET {assignments}, version = version + 1 WHERE id = ?"
        params.append(match_id)

        if expected_statuses is not None:
            statuses = [s.value for s in expected_statuses]
            placeholders = ", ".join("?" for _ in statuses)
            query += f" AND status IN ({placeholders})"
            params.extend(statuses)

        return self._execute(query, tuple(params))

    def advance_progress(
        self,
        match_id: str,
        role: Role,
        expected_progress: int,
        new_progress: int,
        new_score: int,
    ) -> int:
        """
        Write one participant's progress/score pair, conditional on the
        progress value the caller read.

        Returns:
            Number of rows changed (0 if progress moved in between)
        """
        progress_col = f"{role.value}_progress"
        score_col = f"{role.value}_score"
        query = f"""
            UPDATE matches
            SET {progress_col} = ?, {score_col} = ?, version = version + 1
            WHERE id = ? AND {progress_col} = ? AND ? <= total_units
        """
        return self._execute(
            query, (new_progress, new_score, match_id, expected_progress, new_progress)
        )

    def get_pending_created_before(self, cutoff: str) -> List[Dict[str, Any]]:
        """Get pending matches created before ``cutoff`` (ISO timestamp)."""
        query = """
            SELECT * FROM matches
            WHERE status = 'pending' AND created_at < ?
            ORDER BY created_at
        """
        return self._execute(query, (cutoff,), fetch=True) or []

    def get_matches_for_participant(
        self, participant_id: str, statuses: Optional[Iterable[MatchStatus]] = None
    ) -> List[Dict[str, Any]]:
        """Get matches in which ``participant_id`` plays either side."""
        query = "SELECT * FROM matches WHERE (creator_id = ? OR opponent_id = ?)"
        params: List[Any] = [participant_id, participant_id]
        if statuses is not None:
            values = [s.value for s in statuses]
            query += f" AND status IN ({', '.join('?' for _ in values)})"
            params.extend(values)
        query += " ORDER BY created_at DESC"
        return self._execute(query, tuple(params), fetch=True) or []
