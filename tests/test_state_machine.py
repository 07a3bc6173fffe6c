# Area: Match Tests
"""Tests for the match status state machine."""

from datetime import datetime, timezone

import pytest

from quiz_battle._match.enums import MatchEvent, MatchStatus
from quiz_battle._match.records import MatchRecord
from quiz_battle._match.state_machine import (
    TRANSITIONS,
    can_transition,
    decide_winner,
    finished_side,
    next_status,
    resolve_transition,
)
from quiz_battle._match.enums import Role
from quiz_battle.errors import InvalidTransitionError

NOW = datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc)


def make_record(**overrides):
    data = {
        "id": "M1",
        "creator_id": "alice",
        "opponent_id": "bob",
        "subject_slots": [{"subject_id": "math"}, {"subject_id": "francais"}],
        "total_units": 2,
        "status": "active",
        "created_at": "2026-03-01T09:00:00+00:00",
        "started_at": "2026-03-01T09:01:00+00:00",
    }
    data.update(overrides)
    return MatchRecord.model_validate(data)


class TestTransitionTable:
    """Tests for the static transition table."""

    def test_terminal_statuses_have_no_transitions(self):
        assert TRANSITIONS[MatchStatus.COMPLETED] == {}
        assert TRANSITIONS[MatchStatus.CANCELLED] == {}

    @pytest.mark.parametrize("event", list(MatchEvent))
    def test_nothing_leaves_a_terminal_status(self, event):
        for status in (MatchStatus.COMPLETED, MatchStatus.CANCELLED):
            assert not can_transition(status, event)
            with pytest.raises(InvalidTransitionError):
                next_status(status, event)

    def test_status_never_regresses(self):
        """No event leads from active back to pending."""
        order = [MatchStatus.PENDING, MatchStatus.ACTIVE]
        for status, events in TRANSITIONS.items():
            for target in events.values():
                if status in order and target in order:
                    assert order.index(target) > order.index(status)

    def test_pending_activates(self):
        assert next_status(MatchStatus.PENDING, MatchEvent.ACTIVATE) is MatchStatus.ACTIVE

    def test_activate_not_allowed_twice(self):
        assert not can_transition(MatchStatus.ACTIVE, MatchEvent.ACTIVATE)

    def test_accept_never_changes_status(self):
        for status in MatchStatus:
            assert not can_transition(status, MatchEvent.ACCEPT)

    def test_completion_only_from_active(self):
        assert not can_transition(MatchStatus.PENDING, MatchEvent.BOTH_FINISHED)
        assert next_status(MatchStatus.ACTIVE, MatchEvent.BOTH_FINISHED) is MatchStatus.COMPLETED

    def test_quit_allowed_from_pending_and_active(self):
        for status in (MatchStatus.PENDING, MatchStatus.ACTIVE):
            assert next_status(status, MatchEvent.QUIT_EARLY) is MatchStatus.CANCELLED
            assert next_status(status, MatchEvent.QUIT_FORFEIT) is MatchStatus.COMPLETED

    def test_decline_and_expire_only_from_pending(self):
        for event in (MatchEvent.DECLINE, MatchEvent.EXPIRE):
            assert next_status(MatchStatus.PENDING, event) is MatchStatus.CANCELLED
            assert not can_transition(MatchStatus.ACTIVE, event)

    def test_error_message_names_event_and_status(self):
        with pytest.raises(InvalidTransitionError, match="BOTH_FINISHED from pending"):
            next_status(MatchStatus.PENDING, MatchEvent.BOTH_FINISHED)


class TestWinnerRules:
    """Tests for decide_winner and finished_side."""

    def test_higher_score_wins(self):
        record = make_record(creator_progress=2, opponent_progress=2,
                             creator_score=30, opponent_score=20)
        assert decide_winner(record) == "alice"

    def test_opponent_can_win(self):
        record = make_record(creator_progress=2, opponent_progress=2,
                             creator_score=10, opponent_score=20)
        assert decide_winner(record) == "bob"

    def test_tie_is_draw(self):
        record = make_record(creator_progress=2, opponent_progress=2,
                             creator_score=20, opponent_score=20)
        assert decide_winner(record) is None

    def test_finished_side(self):
        assert finished_side(make_record(creator_progress=2)) is Role.CREATOR
        assert finished_side(make_record(opponent_progress=2)) is Role.OPPONENT
        assert finished_side(make_record()) is None
        assert finished_side(make_record(creator_progress=2, opponent_progress=2)) is None


class TestResolveTransition:
    """Tests for resolve_transition."""

    def test_activate_sets_started_at(self):
        record = make_record(status="pending", started_at=None)
        transition = resolve_transition(record, MatchEvent.ACTIVATE, NOW)

        assert transition.to_status is MatchStatus.ACTIVE
        assert transition.fields == {"status": "active", "started_at": NOW.isoformat()}
        assert transition.expected_statuses == (MatchStatus.PENDING,)

    def test_activate_rejects_started_match(self):
        record = make_record(status="pending")
        with pytest.raises(ValueError, match="already started"):
            resolve_transition(record, MatchEvent.ACTIVATE, NOW)

    def test_both_finished_computes_winner(self):
        record = make_record(creator_progress=2, opponent_progress=2,
                             creator_score=20, opponent_score=10)
        transition = resolve_transition(record, MatchEvent.BOTH_FINISHED, NOW)

        assert transition.fields == {
            "status": "completed",
            "completed_at": NOW.isoformat(),
            "winner_id": "alice",
        }
        assert transition.expected_statuses == (MatchStatus.ACTIVE,)

    def test_both_finished_requires_both(self):
        record = make_record(creator_progress=2, opponent_progress=1)
        with pytest.raises(ValueError):
            resolve_transition(record, MatchEvent.BOTH_FINISHED, NOW)

    def test_both_finished_is_deterministic(self):
        record = make_record(creator_progress=2, opponent_progress=2,
                             creator_score=10, opponent_score=10)
        first = resolve_transition(record, MatchEvent.BOTH_FINISHED, NOW)
        second = resolve_transition(record, MatchEvent.BOTH_FINISHED, NOW)
        assert first == second

    def test_one_sided_timeout_awards_finished_side(self):
        record = make_record(opponent_progress=2, opponent_score=5)
        transition = resolve_transition(record, MatchEvent.TIMEOUT_ONE_SIDED, NOW)
        assert transition.fields["winner_id"] == "bob"
        assert transition.to_status is MatchStatus.COMPLETED

    def test_one_sided_timeout_requires_exactly_one(self):
        with pytest.raises(ValueError):
            resolve_transition(make_record(), MatchEvent.TIMEOUT_ONE_SIDED, NOW)

    def test_none_finished_timeout_cancels(self):
        transition = resolve_transition(make_record(), MatchEvent.TIMEOUT_NONE_FINISHED, NOW)
        assert transition.to_status is MatchStatus.CANCELLED
        assert transition.fields["winner_id"] is None
        assert transition.fields["completed_at"] == NOW.isoformat()

    def test_forfeit_requires_participant_winner(self):
        record = make_record()
        with pytest.raises(ValueError):
            resolve_transition(record, MatchEvent.QUIT_FORFEIT, NOW, winner_id="mallory")
        transition = resolve_transition(record, MatchEvent.QUIT_FORFEIT, NOW, winner_id="alice")
        assert transition.fields["winner_id"] == "alice"

    def test_terminal_record_rejects_every_event(self):
        record = make_record(status="completed", completed_at=NOW.isoformat())
        for event in MatchEvent:
            with pytest.raises(InvalidTransitionError):
                resolve_transition(record, event, NOW, winner_id="alice")
