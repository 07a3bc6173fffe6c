# Area: Match
"""
quiz_battle._match.assigner — Quiz Unit Assigner
================================================

Creates a match: binds each subject slot to one quiz from the catalog
and writes the match, its unit assignments and the opponent's
invitation.

Selection per subject: quizzes at the requested grade level first,
then quizzes of that subject at any grade level, then failure. One
quiz is drawn uniformly at random from the candidates so repeat
matches do not always serve the same quiz.

Every subject is resolved before anything is written, and the writes
share one transaction: a creation that fails leaves no partial match.
"""

from __future__ import annotations

import logging
import random
import uuid
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Union

from .records import ContentUnit, MatchRecord, QuizUnitAssignment, SubjectSlot
from .._shared.clock import Clock, utc_now
from ..errors import ContentUnavailableError

if TYPE_CHECKING:
    from .._store.interface import MatchStore

logger = logging.getLogger("quiz_battle.assigner")

SubjectInput = Union[SubjectSlot, Dict[str, Any]]


class QuizUnitAssigner:
    """
    Builds new matches against a MatchStore.

    Attributes:
        store: The match store (also serves the content catalog)
        default_difficulty: Display label stored on new matches
    """

    def __init__(
        self,
        store: "MatchStore",
        rng: Optional[random.Random] = None,
        clock: Clock = utc_now,
        default_difficulty: str = "moyen",
    ):
        self.store = store
        self._rng = rng or random.Random()
        self._clock = clock
        self.default_difficulty = default_difficulty

    def create_match(
        self,
        creator_id: str,
        opponent_id: str,
        subjects: Sequence[SubjectInput],
        grade_level: Optional[str] = None,
        difficulty: Optional[str] = None,
        match_id: Optional[str] = None,
    ) -> MatchRecord:
        """
        Create a match between two participants.

        Args:
            creator_id: Participant creating the match
            opponent_id: Invited participant
            subjects: Ordered subjects, one unit per subject
            grade_level: Creator's grade level, preferred for selection
            difficulty: Display label, defaults to ``default_difficulty``
            match_id: Explicit id, generated when omitted

        Returns:
            The created match record

        Raises:
            ValueError: If the participants are equal or no subject is given
            ContentUnavailableError: If a subject has no quiz at any grade
        """
        if not creator_id or not opponent_id:
            raise ValueError("Missing required fields: creator_id and opponent_id")
        if creator_id == opponent_id:
            raise ValueError("A participant cannot battle themselves")
        if not subjects:
            raise ValueError("At least one subject is required")

        slots = [
            s if isinstance(s, SubjectSlot) else SubjectSlot.model_validate(s)
            for s in subjects
        ]
        logger.info(
            "Create match request: creator=%s opponent=%s subjects=%s grade=%s",
            creator_id, opponent_id, [s.subject_id for s in slots], grade_level,
        )

        # Resolve every slot before the first write.
        units = [self.select_unit(slot, grade_level) for slot in slots]

        match_id = match_id or str(uuid.uuid4())
        record = MatchRecord(
            id=match_id,
            creator_id=creator_id,
            opponent_id=opponent_id,
            subject_slots=slots,
            total_units=len(slots),
            difficulty=difficulty or self.default_difficulty,
            created_at=self._clock(),
        )
        assignments = self.build_assignments(match_id, slots, units)
        self.store.create_match(record, assignments, invite=True)
        logger.info("Match %s created, invitation sent to %s", match_id, opponent_id)
        return record

    def select_unit(self, slot: SubjectSlot, grade_level: Optional[str]) -> ContentUnit:
        """
        Pick one quiz for a subject slot.

        Raises:
            ContentUnavailableError: If the subject has no quiz at all
        """
        candidates: List[ContentUnit] = []
        if grade_level is not None:
            candidates = self.store.find_units(slot.subject_id, grade_level)
            logger.debug(
                "Found %d quiz(zes) for %s at grade %s",
                len(candidates), slot.subject_id, grade_level,
            )

        if not candidates:
            candidates = self.store.find_units(slot.subject_id)
            logger.debug(
                "Found %d quiz(zes) for %s at any grade level",
                len(candidates), slot.subject_id,
            )

        if not candidates:
            logger.error("No quiz found for subject %s", slot.subject_id)
            raise ContentUnavailableError(
                subject_id=slot.subject_id,
                subject_name=slot.subject_name or None,
                grade_level=grade_level,
            )

        unit = self._rng.choice(candidates)
        logger.info("Selected unit %s (%s) for %s", unit.id, unit.title, slot.subject_id)
        return unit

    @staticmethod
    def build_assignments(
        match_id: str, slots: List[SubjectSlot], units: List[ContentUnit]
    ) -> List[QuizUnitAssignment]:
        """Snapshot each unit's content into its slot."""
        return [
            QuizUnitAssignment(
                match_id=match_id,
                slot_index=index,
                subject_id=slot.subject_id,
                content_unit_id=unit.id,
                snapshot_content=unit.content,
            )
            for index, (slot, unit) in enumerate(zip(slots, units))
        ]
