# Area: Store Tests
"""Tests for SQLiteMatchStore."""

import pytest

from quiz_battle._match.enums import InvitationStatus, MatchStatus, Role
from quiz_battle._match.ownership import ProgressUpdate
from quiz_battle._match.records import MatchRecord, QuizUnitAssignment
from quiz_battle._store.database import get_connection
from quiz_battle._store.sqlite_store import SQLiteMatchStore
from quiz_battle.errors import MatchNotFoundError, RecordValidationError, StoreError

from conftest import START, quiz


def new_record(match_id="M1", total_units=2):
    return MatchRecord(
        id=match_id,
        creator_id="alice",
        opponent_id="bob",
        subject_slots=[{"subject_id": "math"}] * total_units,
        total_units=total_units,
        created_at=START,
    )


def new_assignments(match_id="M1", total_units=2):
    return [
        QuizUnitAssignment(
            match_id=match_id,
            slot_index=i,
            subject_id="math",
            content_unit_id=f"U{i}",
            snapshot_content=quiz(0, 1),
        )
        for i in range(total_units)
    ]


class TestCreateAndRead:
    """Tests for create_match / get_match."""

    def test_round_trip(self, store):
        store.create_match(new_record(), new_assignments())
        record = store.get_match("M1")

        assert record.status is MatchStatus.PENDING
        assert record.created_at == START
        assert record.version == 1
        assignments = store.get_quiz_unit_assignments("M1")
        assert [a.slot_index for a in assignments] == [0, 1]
        assert assignments[0].questions[1].correct_answer == 1

    def test_creation_enqueues_invitation(self, store):
        store.create_match(new_record(), new_assignments())
        invitation = store.get_invitation("M1")

        assert invitation["to_participant_id"] == "bob"
        assert invitation["from_participant_id"] == "alice"
        assert invitation["status"] == "pending"
        assert len(store.get_pending_invitations("bob")) == 1

    def test_missing_match(self, store):
        with pytest.raises(MatchNotFoundError) as exc_info:
            store.get_match("nope")
        assert exc_info.value.user_message == "match not found"

    def test_failed_creation_leaves_nothing(self, store):
        """A duplicate slot aborts the whole creation."""
        assignments = new_assignments()
        duplicate = assignments + [assignments[0]]

        with pytest.raises(StoreError):
            store.create_match(new_record(total_units=2), duplicate)

        with pytest.raises(MatchNotFoundError):
            store.get_match("M1")
        assert store.get_quiz_unit_assignments("M1") == []
        assert store.get_invitation("M1") is None

    def test_invalid_row_is_rejected_on_read(self, store, db_path):
        store.create_match(new_record(), new_assignments())
        conn = get_connection(db_path)
        conn.execute("UPDATE matches SET subject_slots = '[]' WHERE id = 'M1'")
        conn.commit()
        conn.close()

        with pytest.raises(RecordValidationError):
            store.get_match("M1")


class TestMatchWrites:
    """Tests for update_match, update_match_if and advance_progress."""

    @pytest.fixture
    def match_id(self, store):
        store.create_match(new_record(), new_assignments())
        return "M1"

    def test_update_bumps_version(self, store, match_id):
        store.update_match(match_id, {"status": "active"})
        record = store.get_match(match_id)
        assert record.status is MatchStatus.ACTIVE
        assert record.version == 2

    def test_update_unknown_match(self, store):
        with pytest.raises(MatchNotFoundError):
            store.update_match("nope", {"status": "active"})

    def test_update_rejects_non_updatable_column(self, store, match_id):
        with pytest.raises(StoreError):
            store.update_match(match_id, {"creator_id": "mallory"})

    def test_conditional_update_applies_on_expected_status(self, store, match_id):
        applied = store.update_match_if(
            match_id, {"status": "active"}, [MatchStatus.PENDING]
        )
        assert applied
        assert store.get_match(match_id).status is MatchStatus.ACTIVE

    def test_conditional_update_rejected_on_other_status(self, store, match_id):
        store.update_match(match_id, {"status": "cancelled"})
        applied = store.update_match_if(
            match_id, {"status": "active"}, [MatchStatus.PENDING]
        )
        assert not applied
        assert store.get_match(match_id).status is MatchStatus.CANCELLED

    def test_advance_progress_is_conditional(self, store, match_id):
        update = ProgressUpdate(Role.CREATOR, expected_progress=0, new_progress=1, new_score=10)

        assert store.advance_progress(match_id, update)
        assert not store.advance_progress(match_id, update)

        record = store.get_match(match_id)
        assert record.creator_progress == 1
        assert record.creator_score == 10

    def test_advance_progress_cannot_pass_total(self, store, match_id):
        update = ProgressUpdate(Role.OPPONENT, expected_progress=0, new_progress=3, new_score=10)
        assert not store.advance_progress(match_id, update)
        assert store.get_match(match_id).opponent_progress == 0

    def test_writes_are_published(self, store, match_id):
        seen = []
        store.subscribe_match_changes(match_id, seen.append)

        store.update_match(match_id, {"status": "active"})
        store.update_match_if(match_id, {"status": "active"}, [MatchStatus.PENDING])

        assert len(seen) == 1
        assert seen[0].status is MatchStatus.ACTIVE
        assert seen[0].version == 2


class TestUnitResultsAndInvitations:
    """Tests for record_unit_result, invitations and sweeps."""

    @pytest.fixture
    def match_id(self, store):
        store.create_match(new_record(), new_assignments())
        return "M1"

    def test_record_unit_result(self, store, match_id):
        store.record_unit_result(match_id, 1, Role.OPPONENT, [1, -1], 10,
                                 "2026-03-01T09:04:00+00:00")
        slot = store.get_quiz_unit_assignments(match_id)[1]

        assert slot.answers_of(Role.OPPONENT) == [1, -1]
        assert slot.unit_score_of(Role.OPPONENT) == 10
        assert slot.opponent_completed_at is not None
        assert slot.answers_of(Role.CREATOR) is None

    def test_set_invitation_status(self, store, match_id):
        assert store.set_invitation_status(match_id, InvitationStatus.ACCEPTED)
        assert store.get_invitation(match_id)["status"] == "accepted"
        assert store.get_pending_invitations("bob") == []

    def test_pending_created_before(self, store, match_id):
        assert store.get_pending_matches_created_before("2026-03-01T08:00:00+00:00") == []
        stale = store.get_pending_matches_created_before("2026-03-02T09:00:00+00:00")
        assert [r.id for r in stale] == [match_id]

    def test_matches_for_participant(self, store, match_id):
        assert [r.id for r in store.get_matches_for_participant("bob")] == [match_id]
        assert store.get_matches_for_participant("bob", [MatchStatus.ACTIVE]) == []

    def test_two_stores_share_one_file(self, store, match_id, db_path):
        other = SQLiteMatchStore(db_path)
        other.update_match(match_id, {"status": "active"})
        assert store.get_match(match_id).status is MatchStatus.ACTIVE
