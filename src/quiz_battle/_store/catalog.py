# Area: Store
"""
quiz_battle._store.catalog — Content unit catalog
=================================================

Read side of the quiz content catalog, plus a seeding helper.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .database import BaseRepository
from .._match.records import ContentUnit, QuizContent, decode_content_unit

logger = logging.getLogger("quiz_battle.store.catalog")


class ContentCatalog(BaseRepository):
    """
    Repository for content_units table.

    Only units of type ``quiz`` are ever returned to the assigner.
    """

    def find_units(
        self, subject_id: str, grade_level: Optional[str] = None
    ) -> List[ContentUnit]:
        """
        Find quiz units for a subject, optionally at one grade level.

        Args:
            subject_id: Subject identifier
            grade_level: Exact grade level, or None for any grade

        Returns:
            Matching content units (possibly empty)
        """
        query = "SELECT * FROM content_units WHERE subject_id = ? AND unit_type = 'quiz'"
        params: tuple = (subject_id,)
        if grade_level is not None:
            query += " AND grade_level = ?"
            params = (subject_id, grade_level)
        query += " ORDER BY id"
        rows = self._execute(query, params, fetch=True) or []
        return [decode_content_unit(row) for row in rows]

    def add_unit(
        self,
        unit_id: str,
        subject_id: str,
        content: Union[QuizContent, Dict[str, Any]],
        grade_level: Optional[str] = None,
        title: str = "",
        difficulty: str = "",
        unit_type: str = "quiz",
    ) -> None:
        """Insert or replace a content unit."""
        if not isinstance(content, QuizContent):
            content = QuizContent.model_validate(content)
        query = """
            INSERT OR REPLACE INTO content_units
            (id, subject_id, grade_level, title, difficulty, unit_type, content)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """
        self._execute(query, (
            unit_id,
            subject_id,
            grade_level,
            title,
            difficulty,
            unit_type,
            content.model_dump_json(by_alias=True),
        ))

    def load_file(self, path: Union[str, Path]) -> int:
        """
        Seed the catalog from a JSON file holding a list of units.

        Each entry needs ``id``, ``subject_id`` and ``content``; the
        other columns are optional.

        Returns:
            Number of units loaded
        """
        with open(path, encoding="utf-8") as f:
            entries = json.load(f)
        for entry in entries:
            self.add_unit(
                unit_id=entry["id"],
                subject_id=entry["subject_id"],
                content=entry["content"],
                grade_level=entry.get("grade_level"),
                title=entry.get("title", ""),
                difficulty=entry.get("difficulty", ""),
                unit_type=entry.get("type", "quiz"),
            )
        logger.info("Loaded %d content units from %s", len(entries), path)
        return len(entries)
