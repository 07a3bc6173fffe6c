# Area: Tests
"""Shared fixtures: temporary SQLite store, seeded catalog, fake clock."""

import os
import random
import tempfile
from datetime import datetime, timedelta, timezone

import pytest

from quiz_battle._match.assigner import QuizUnitAssigner
from quiz_battle._match.enums import MatchEvent
from quiz_battle._match.state_machine import resolve_transition
from quiz_battle._store.sqlite_store import SQLiteMatchStore

START = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Wall clock that only moves when told to."""

    def __init__(self, now=START):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


def quiz(*correct_answers):
    """Quiz content with one 4-option question per correct answer index."""
    return {
        "questions": [
            {
                "question": f"Question {i + 1}?",
                "options": ["alpha", "bravo", "charlie", "delta"],
                "correctAnswer": correct,
            }
            for i, correct in enumerate(correct_answers)
        ]
    }


@pytest.fixture
def db_path():
    """Create temporary database file for testing."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    yield path
    os.unlink(path)


@pytest.fixture
def store(db_path):
    return SQLiteMatchStore(db_path)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def catalog(store):
    """Catalog with math at two grades, french at CM1 and ungraded science."""
    store.catalog.add_unit("math-ce2-1", "math", quiz(0, 1), grade_level="CE2", title="Additions")
    store.catalog.add_unit("math-ce2-2", "math", quiz(2, 3), grade_level="CE2", title="Tables")
    store.catalog.add_unit("math-cm1-1", "math", quiz(1, 1), grade_level="CM1", title="Fractions")
    store.catalog.add_unit("francais-cm1-1", "francais", quiz(0, 0), grade_level="CM1", title="Accords")
    store.catalog.add_unit("sciences-1", "sciences", quiz(3, 2), title="Le corps")
    return store.catalog


@pytest.fixture
def assigner(store, catalog, clock):
    return QuizUnitAssigner(store, rng=random.Random(7), clock=clock)


@pytest.fixture
def make_match(assigner):
    """Create an alice-vs-bob match with ``total_units`` units."""
    def _make(total_units=3, creator="alice", opponent="bob", grade_level="CE2"):
        subjects = (["math", "francais", "sciences"] * total_units)[:total_units]
        return assigner.create_match(
            creator, opponent, [{"subject_id": s} for s in subjects],
            grade_level=grade_level,
        )
    return _make


@pytest.fixture
def activate(store, clock):
    """Move a pending match to active, stamped with the fake clock."""
    def _activate(match_id):
        record = store.get_match(match_id)
        transition = resolve_transition(record, MatchEvent.ACTIVATE, clock())
        assert store.update_match_if(match_id, transition.fields, transition.expected_statuses)
        return store.get_match(match_id)
    return _activate
