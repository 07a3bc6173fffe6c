# Area: Store
"""
quiz_battle._store.interface — Match store contract
===================================================

Abstract base class for the external row store the battle engine runs
against. The engine never assumes ordering between calls; the only
protection it relies on is the conditional writes below.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Optional

from .._match.enums import InvitationStatus, MatchStatus, Role
from .._match.ownership import ProgressUpdate
from .._match.records import ContentUnit, MatchRecord, QuizUnitAssignment


class MatchStore(ABC):
    """
    Abstract match store.

    Implementations must raise MatchNotFoundError from get_match for a
    missing id, RecordValidationError for a row that does not decode,
    and StoreError for transport failures.
    """

    @abstractmethod
    def get_match(self, match_id: str) -> MatchRecord:
        """Read the current match record."""
        pass

    @abstractmethod
    def update_match(self, match_id: str, fields: Dict[str, Any]) -> None:
        """Unconditional last-write-wins update of the given fields."""
        pass

    @abstractmethod
    def update_match_if(
        self,
        match_id: str,
        fields: Dict[str, Any],
        expected_statuses: Iterable[MatchStatus],
    ) -> bool:
        """
        Update only while the match status is one of ``expected_statuses``.

        Returns:
            True if the write was applied
        """
        pass

    @abstractmethod
    def advance_progress(self, match_id: str, update: ProgressUpdate) -> bool:
        """
        Apply a progress/score step only if progress still equals
        ``update.expected_progress``.

        Returns:
            True if the write was applied
        """
        pass

    @abstractmethod
    def create_match(
        self,
        record: MatchRecord,
        assignments: List[QuizUnitAssignment],
        invite: bool = True,
    ) -> None:
        """Insert a match, its unit assignments and the opponent's invitation atomically."""
        pass

    @abstractmethod
    def insert_quiz_unit_assignments(self, records: List[QuizUnitAssignment]) -> None:
        """Insert unit assignment rows."""
        pass

    @abstractmethod
    def get_quiz_unit_assignments(self, match_id: str) -> List[QuizUnitAssignment]:
        """Read a match's unit assignments in slot order."""
        pass

    @abstractmethod
    def record_unit_result(
        self,
        match_id: str,
        slot_index: int,
        role: Role,
        answers: List[int],
        unit_score: int,
        completed_at: str,
    ) -> None:
        """Persist one participant's answers and score for one slot."""
        pass

    @abstractmethod
    def subscribe_match_changes(
        self, match_id: str, callback: Callable[[MatchRecord], None]
    ) -> Callable[[], None]:
        """Subscribe to pushed changes of one match. Returns an unsubscribe handle."""
        pass

    @abstractmethod
    def set_invitation_status(self, match_id: str, status: InvitationStatus) -> bool:
        """Update the invitation of a match. Returns True if one was changed."""
        pass

    @abstractmethod
    def get_pending_matches_created_before(self, cutoff: str) -> List[MatchRecord]:
        """Pending matches created before ``cutoff`` (ISO timestamp)."""
        pass

    @abstractmethod
    def find_units(
        self, subject_id: str, grade_level: Optional[str] = None
    ) -> List[ContentUnit]:
        """Query the content catalog."""
        pass
