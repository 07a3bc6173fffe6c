# Area: Store
"""
quiz_battle._store.repo_units — Quiz Unit Assignments Repository
================================================================

Repository for the quiz_unit_assignments table: one row per subject
slot of a match, holding the snapshotted quiz and each participant's
answers and unit score.
"""

import json
import sqlite3
from typing import Any, Dict, List, Optional

from .database import BaseRepository
from .._match.enums import Role
from .._match.records import QuizUnitAssignment


class QuizUnitRepository(BaseRepository):
    """
    Repository for quiz_unit_assignments table.

    Handles saving assignments and recording per-participant results.
    """

    def save_assignment(
        self, assignment: QuizUnitAssignment, conn: Optional[sqlite3.Connection] = None
    ) -> None:
        """
        Save a single assignment.

        Args:
            assignment: The slot assignment to insert
            conn: Connection of an enclosing transaction, if any
        """
        query = """
            INSERT INTO quiz_unit_assignments
            (match_id, slot_index, subject_id, content_unit_id, snapshot_content)
            VALUES (?, ?, ?, ?, ?)
        """
        self._execute(query, (
            assignment.match_id,
            assignment.slot_index,
            assignment.subject_id,
            assignment.content_unit_id,
            assignment.snapshot_content.model_dump_json(by_alias=True),
        ), conn=conn)

    def save_assignments(
        self,
        assignments: List[QuizUnitAssignment],
        conn: Optional[sqlite3.Connection] = None,
    ) -> None:
        """
        Save multiple assignments.

        Args:
            assignments: List of slot assignments
            conn: Connection of an enclosing transaction, if any
        """
        if conn is not None:
            for assignment in assignments:
                self.save_assignment(assignment, conn=conn)
            return
        with self.transaction() as tx:
            for assignment in assignments:
                self.save_assignment(assignment, conn=tx)

    def get_assignments_for_match(self, match_id: str) -> List[Dict[str, Any]]:
        """
        Get all assignments for a match, in slot order.

        Args:
            match_id: Match identifier

        Returns:
            List of assignment rows
        """
        query = """
            SELECT * FROM quiz_unit_assignments
            WHERE match_id = ?
            ORDER BY slot_index
        """
        return self._execute(query, (match_id,), fetch=True) or []

    def record_result(
        self,
        match_id: str,
        slot_index: int,
        role: Role,
        answers: List[int],
        unit_score: int,
        completed_at: str,
    ) -> int:
        """
        Record one participant's answers and score for a slot.

        Returns:
            Number of rows changed
        """
        prefix = role.value
        query = f"""
            UPDATE quiz_unit_assignments
            SET {prefix}_answers = ?, {prefix}_unit_score = ?, {prefix}_completed_at = ?
            WHERE match_id = ? AND slot_index = ?
        """
        return self._execute(
            query, (json.dumps(list(answers)), unit_score, completed_at, match_id, slot_index)
        )
