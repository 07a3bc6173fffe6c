# Area: Match Tests
"""Tests for invitation accept/decline/expiry."""

import pytest

from quiz_battle._match.enums import MatchEvent, MatchStatus
from quiz_battle._match.invitations import (
    accept_invitation,
    decline_invitation,
    expire_stale_invitations,
)
from quiz_battle.errors import InvalidTransitionError, NotAParticipantError


class TestAcceptDecline:
    """Tests for accept_invitation and decline_invitation."""

    def test_accept_keeps_match_pending(self, store, make_match):
        match = make_match(total_units=1)
        record = accept_invitation(store, match.id, "bob")

        assert record.status is MatchStatus.PENDING
        assert store.get_invitation(match.id)["status"] == "accepted"

    def test_only_invitee_can_answer(self, store, make_match):
        match = make_match(total_units=1)
        with pytest.raises(NotAParticipantError):
            accept_invitation(store, match.id, "alice")
        with pytest.raises(NotAParticipantError):
            decline_invitation(store, match.id, "mallory")

    def test_decline_cancels_match(self, store, make_match, clock):
        match = make_match(total_units=1)
        record = decline_invitation(store, match.id, "bob", clock=clock)

        assert record.status is MatchStatus.CANCELLED
        assert record.winner_id is None
        assert store.get_invitation(match.id)["status"] == "declined"

    def test_decline_after_activation_is_rejected(self, store, make_match, activate, clock):
        match = make_match(total_units=1)
        activate(match.id)

        with pytest.raises(InvalidTransitionError):
            decline_invitation(store, match.id, "bob", clock=clock)
        assert store.get_match(match.id).status is MatchStatus.ACTIVE

    def test_accept_terminal_match_is_rejected(self, store, make_match, clock):
        match = make_match(total_units=1)
        decline_invitation(store, match.id, "bob", clock=clock)
        with pytest.raises(InvalidTransitionError) as exc_info:
            accept_invitation(store, match.id, "bob")
        assert exc_info.value.event == MatchEvent.ACCEPT.value
        assert exc_info.value.status == MatchStatus.CANCELLED.value


class TestExpiry:
    """Tests for expire_stale_invitations."""

    def test_expires_only_old_pending_matches(self, store, make_match, activate, clock):
        old_pending = make_match(total_units=1)
        old_active = make_match(total_units=1)
        activate(old_active.id)
        clock.advance(23 * 3600)
        fresh = make_match(total_units=1)

        clock.advance(3600 + 1)
        expired = expire_stale_invitations(store, ttl_seconds=86400, clock=clock)

        assert expired == [old_pending.id]
        assert store.get_match(old_pending.id).status is MatchStatus.CANCELLED
        assert store.get_invitation(old_pending.id)["status"] == "declined"
        assert store.get_match(old_active.id).status is MatchStatus.ACTIVE
        assert store.get_match(fresh.id).status is MatchStatus.PENDING

    def test_sweep_is_repeatable(self, store, make_match, clock):
        make_match(total_units=1)
        clock.advance(86400 + 1)

        assert len(expire_stale_invitations(store, clock=clock)) == 1
        assert expire_stale_invitations(store, clock=clock) == []
