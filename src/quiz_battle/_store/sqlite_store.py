# Area: Store
"""
quiz_battle._store.sqlite_store — SQLite match store
====================================================

MatchStore implementation on a local SQLite file. Each repository
opens its own short-lived connection per call, so two clients in the
same process behave like two remote clients: their reads and writes
interleave with no ordering beyond what the conditional writes give.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from .catalog import ContentCatalog
from .change_feed import ChangeFeed
from .database import init_database
from .interface import MatchStore
from .repo_invitations import InvitationRepository
from .repo_matches import MatchRepository
from .repo_units import QuizUnitRepository
from .._match.enums import InvitationStatus, MatchStatus, Role
from .._match.ownership import ProgressUpdate
from .._match.records import (
    ContentUnit,
    MatchRecord,
    QuizUnitAssignment,
    decode_assignment,
    decode_match,
)
from ..errors import MatchNotFoundError

logger = logging.getLogger("quiz_battle.store")


class SQLiteMatchStore(MatchStore):
    """
    SQLite-backed MatchStore with an in-process change feed.

    Attributes:
        db_path: Path to the SQLite database file
        feed: Change feed notified after every applied match write
    """

    def __init__(self, db_path: str = "quiz_battle.db", feed: Optional[ChangeFeed] = None,
                 initialize: bool = True):
        self.db_path = db_path
        self.feed = feed or ChangeFeed()
        if initialize:
            init_database(db_path)
        self.matches = MatchRepository(db_path)
        self.units = QuizUnitRepository(db_path)
        self.invitations = InvitationRepository(db_path)
        self.catalog = ContentCatalog(db_path)

    # ── Matches ─────────────────────────────────────────────────

    def get_match(self, match_id: str) -> MatchRecord:
        row = self.matches.get_match_row(match_id)
        if row is None:
            raise MatchNotFoundError(match_id)
        return decode_match(row)

    def update_match(self, match_id: str, fields: Dict[str, Any]) -> None:
        changed = self.matches.update_fields(match_id, fields)
        if not changed:
            raise MatchNotFoundError(match_id)
        self._publish(match_id)

    def update_match_if(
        self,
        match_id: str,
        fields: Dict[str, Any],
        expected_statuses: Iterable[MatchStatus],
    ) -> bool:
        changed = self.matches.update_fields(
            match_id, fields, expected_statuses=list(expected_statuses)
        )
        if changed:
            self._publish(match_id)
        return bool(changed)

    def advance_progress(self, match_id: str, update: ProgressUpdate) -> bool:
        changed = self.matches.advance_progress(
            match_id,
            update.role,
            update.expected_progress,
            update.new_progress,
            update.new_score,
        )
        if changed:
            self._publish(match_id)
        return bool(changed)

    def create_match(
        self,
        record: MatchRecord,
        assignments: List[QuizUnitAssignment],
        invite: bool = True,
    ) -> None:
        with self.matches.transaction() as conn:
            self.matches.insert_match(record, conn=conn)
            self.units.save_assignments(assignments, conn=conn)
            if invite:
                self.invitations.save_invitation(
                    match_id=record.id,
                    to_participant_id=record.opponent_id,
                    from_participant_id=record.creator_id,
                    created_at=record.created_at.isoformat(),
                    conn=conn,
                )
        logger.info(
            "Match %s created with %d unit(s)", record.id, len(assignments)
        )

    def get_pending_matches_created_before(self, cutoff: str) -> List[MatchRecord]:
        return [decode_match(row) for row in self.matches.get_pending_created_before(cutoff)]

    def get_matches_for_participant(
        self, participant_id: str, statuses: Optional[Iterable[MatchStatus]] = None
    ) -> List[MatchRecord]:
        rows = self.matches.get_matches_for_participant(participant_id, statuses)
        return [decode_match(row) for row in rows]

    # ── Unit assignments ────────────────────────────────────────

    def insert_quiz_unit_assignments(self, records: List[QuizUnitAssignment]) -> None:
        self.units.save_assignments(records)

    def get_quiz_unit_assignments(self, match_id: str) -> List[QuizUnitAssignment]:
        return [decode_assignment(row) for row in self.units.get_assignments_for_match(match_id)]

    def record_unit_result(
        self,
        match_id: str,
        slot_index: int,
        role: Role,
        answers: List[int],
        unit_score: int,
        completed_at: str,
    ) -> None:
        self.units.record_result(match_id, slot_index, role, answers, unit_score, completed_at)

    # ── Invitations ─────────────────────────────────────────────

    def set_invitation_status(self, match_id: str, status: InvitationStatus) -> bool:
        return bool(self.invitations.update_status(match_id, status))

    def get_invitation(self, match_id: str) -> Optional[Dict[str, Any]]:
        return self.invitations.get_invitation(match_id)

    def get_pending_invitations(self, participant_id: str) -> List[Dict[str, Any]]:
        return self.invitations.get_pending_for(participant_id)

    # ── Catalog / notifications ─────────────────────────────────

    def find_units(
        self, subject_id: str, grade_level: Optional[str] = None
    ) -> List[ContentUnit]:
        return self.catalog.find_units(subject_id, grade_level)

    def subscribe_match_changes(
        self, match_id: str, callback: Callable[[MatchRecord], None]
    ) -> Callable[[], None]:
        return self.feed.subscribe(match_id, callback)

    def _publish(self, match_id: str) -> None:
        """Re-read the written row and push it to subscribers."""
        self.feed.publish(self.get_match(match_id))
