# Area: Match Tests
"""Tests for TimeoutMonitor, including scenario C."""

from unittest.mock import patch

import pytest

from quiz_battle._match.enums import MatchStatus
from quiz_battle._match.monitor import TimeoutMonitor
from quiz_battle._match.ownership import Participant
from quiz_battle._match.reconciler import ProgressReconciler
from quiz_battle.errors import StoreError

MOCK_TIME = "quiz_battle._match.monitor.time"


@pytest.fixture
def match(make_match, activate):
    return activate(make_match(total_units=2).id)


@pytest.fixture
def reconciler(store, clock):
    return ProgressReconciler(store, clock=clock)


def finish(reconciler, record, participant_id, unit_score=10):
    participant = Participant.of(record, participant_id)
    for slot in range(record.total_units):
        reconciler.record_unit(participant, slot, [0, 0], unit_score)


class TestCheck:
    """Tests for TimeoutMonitor.check."""

    def test_scenario_c_one_sided_timeout(self, store, clock, match, reconciler):
        finish(reconciler, match, "alice")
        monitor = TimeoutMonitor(store, match.id, ceiling_seconds=300, clock=clock)

        clock.advance(301)
        record = monitor.check()

        assert record.status is MatchStatus.COMPLETED
        assert record.winner_id == "alice"
        assert record.opponent_progress == 0

    def test_opponent_finishing_alone_wins(self, store, clock, match, reconciler):
        finish(reconciler, match, "bob", unit_score=0)
        clock.advance(400)
        record = TimeoutMonitor(store, match.id, clock=clock).check()
        assert record.winner_id == "bob"

    def test_within_ceiling_nothing_happens(self, store, clock, match, reconciler):
        finish(reconciler, match, "alice")
        clock.advance(300)
        record = TimeoutMonitor(store, match.id, ceiling_seconds=300, clock=clock).check()
        assert record.status is MatchStatus.ACTIVE

    def test_double_timeout_cancels(self, store, clock, match, reconciler):
        reconciler.record_unit(Participant.of(match, "alice"), 0, [0, 0], 10)
        clock.advance(301)

        record = TimeoutMonitor(store, match.id, clock=clock).check()

        assert record.status is MatchStatus.CANCELLED
        assert record.winner_id is None
        assert record.completed_at is not None

    def test_both_finished_but_still_active_uses_scores(self, store, clock, match, reconciler):
        finish(reconciler, match, "alice", unit_score=10)
        finish(reconciler, match, "bob", unit_score=20)
        clock.advance(301)

        record = TimeoutMonitor(store, match.id, clock=clock).check()
        assert record.status is MatchStatus.COMPLETED
        assert record.winner_id == "bob"

    def test_pending_match_is_ignored(self, store, clock, make_match):
        pending = make_match(total_units=1)
        clock.advance(10_000)
        record = TimeoutMonitor(store, pending.id, clock=clock).check()
        assert record.status is MatchStatus.PENDING

    def test_terminal_match_is_never_rewritten(self, store, clock, match, reconciler):
        finish(reconciler, match, "alice")
        store.update_match(match.id, {"status": "cancelled", "completed_at": clock().isoformat()})
        clock.advance(301)

        record = TimeoutMonitor(store, match.id, clock=clock).check()
        assert record.status is MatchStatus.CANCELLED
        assert record.winner_id is None

    def test_two_monitors_resolve_once(self, store, clock, match, reconciler):
        finish(reconciler, match, "alice")
        clock.advance(301)
        seen = []
        store.subscribe_match_changes(match.id, seen.append)

        TimeoutMonitor(store, match.id, clock=clock).check()
        TimeoutMonitor(store, match.id, clock=clock).check()

        assert len(seen) == 1

    def test_store_errors_are_swallowed(self, store, clock, match):
        monitor = TimeoutMonitor(store, match.id, clock=clock)
        with patch.object(store, "get_match", side_effect=StoreError("offline")):
            assert monitor.check() is None


class TestTick:
    """Tests for interval scheduling and stop."""

    def test_checks_once_per_interval(self, store, clock, match):
        with patch(MOCK_TIME) as mock_time:
            mock_time.monotonic.return_value = 0.0
            monitor = TimeoutMonitor(store, match.id, interval_seconds=10, clock=clock)

            with patch.object(monitor, "check", return_value=None) as check:
                mock_time.monotonic.return_value = 5.0
                monitor.tick()
                assert check.call_count == 0

                mock_time.monotonic.return_value = 10.0
                monitor.tick()
                mock_time.monotonic.return_value = 15.0
                monitor.tick()
                assert check.call_count == 1

                mock_time.monotonic.return_value = 20.0
                monitor.tick()
                assert check.call_count == 2

    def test_stopped_monitor_does_nothing(self, store, clock, match):
        with patch(MOCK_TIME) as mock_time:
            mock_time.monotonic.return_value = 0.0
            monitor = TimeoutMonitor(store, match.id, interval_seconds=10, clock=clock)
            monitor.stop()

            with patch.object(monitor, "check") as check:
                mock_time.monotonic.return_value = 100.0
                assert monitor.tick() is None
                check.assert_not_called()
        assert monitor.stopped
