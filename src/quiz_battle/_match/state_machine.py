# Area: Match
"""
quiz_battle._match.state_machine — Match status state machine
=============================================================

Single home for every status transition. The reconciler, the timeout
monitor, the quit handler and the invitation handling all call
``resolve_transition`` to get the fields to write; none of them sets
``status`` on its own.

A resolved transition carries the status it was computed from. The
store applies it as a conditional write on that status, so a terminal
status can never be overwritten and a second, racing writer of the same
completion is simply rejected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from .enums import MatchEvent, MatchStatus, Role
from .records import MatchRecord
from ..errors import InvalidTransitionError

logger = logging.getLogger("quiz_battle.state_machine")


# Valid status transitions: {current_status: {event: next_status}}
TRANSITIONS = {
    MatchStatus.PENDING: {
        MatchEvent.ACTIVATE: MatchStatus.ACTIVE,
        MatchEvent.QUIT_EARLY: MatchStatus.CANCELLED,
        MatchEvent.QUIT_FORFEIT: MatchStatus.COMPLETED,
        MatchEvent.DECLINE: MatchStatus.CANCELLED,
        MatchEvent.EXPIRE: MatchStatus.CANCELLED,
    },
    MatchStatus.ACTIVE: {
        MatchEvent.BOTH_FINISHED: MatchStatus.COMPLETED,
        MatchEvent.TIMEOUT_ONE_SIDED: MatchStatus.COMPLETED,
        MatchEvent.TIMEOUT_NONE_FINISHED: MatchStatus.CANCELLED,
        MatchEvent.QUIT_EARLY: MatchStatus.CANCELLED,
        MatchEvent.QUIT_FORFEIT: MatchStatus.COMPLETED,
    },
    MatchStatus.COMPLETED: {},
    MatchStatus.CANCELLED: {},
}


@dataclass(frozen=True)
class Transition:
    """Fields to write for one status change, and the status it requires."""
    match_id: str
    event: MatchEvent
    from_status: MatchStatus
    to_status: MatchStatus
    fields: Dict[str, Any] = field(default_factory=dict)

    @property
    def expected_statuses(self) -> Tuple[MatchStatus, ...]:
        return (self.from_status,)


def can_transition(status: MatchStatus, event: MatchEvent) -> bool:
    """Check if ``event`` is permitted from ``status``."""
    return event in TRANSITIONS.get(status, {})


def next_status(status: MatchStatus, event: MatchEvent) -> MatchStatus:
    """
    Return the status reached by applying ``event`` to ``status``.

    Raises:
        InvalidTransitionError: If the event is not permitted.
    """
    if not can_transition(status, event):
        raise InvalidTransitionError(status.value, event.value)
    return TRANSITIONS[status][event]


def decide_winner(record: MatchRecord) -> Optional[str]:
    """Strictly higher total score wins; equal scores are a draw (None)."""
    if record.creator_score > record.opponent_score:
        return record.creator_id
    if record.opponent_score > record.creator_score:
        return record.opponent_id
    return None


def finished_side(record: MatchRecord) -> Optional[Role]:
    """Return the only side that finished, or None unless exactly one did."""
    creator_done = record.is_finished(Role.CREATOR)
    opponent_done = record.is_finished(Role.OPPONENT)
    if creator_done and not opponent_done:
        return Role.CREATOR
    if opponent_done and not creator_done:
        return Role.OPPONENT
    return None


def resolve_transition(
    record: MatchRecord,
    event: MatchEvent,
    now: datetime,
    winner_id: Optional[str] = None,
) -> Transition:
    """
    Compute the write for ``event`` applied to ``record`` at ``now``.

    Args:
        record: The freshly read match record
        event: The triggering event
        now: Timestamp used for started_at / completed_at
        winner_id: Required for QUIT_FORFEIT (the side that did not quit)

    Returns:
        The resolved Transition

    Raises:
        InvalidTransitionError: If the event is not permitted from the
            record's status
        ValueError: If the record does not satisfy the event's precondition
    """
    to_status = next_status(record.status, event)
    stamp = now.isoformat()

    if event is MatchEvent.ACTIVATE:
        if record.started_at is not None:
            raise ValueError(f"match {record.id} already started")
        fields: Dict[str, Any] = {"status": to_status.value, "started_at": stamp}

    elif event is MatchEvent.BOTH_FINISHED:
        if not record.both_finished():
            raise ValueError(f"match {record.id}: both sides have not finished")
        fields = {
            "status": to_status.value,
            "completed_at": stamp,
            "winner_id": decide_winner(record),
        }

    elif event is MatchEvent.TIMEOUT_ONE_SIDED:
        side = finished_side(record)
        if side is None:
            raise ValueError(f"match {record.id}: timeout win needs exactly one finished side")
        fields = {
            "status": to_status.value,
            "completed_at": stamp,
            "winner_id": record.participant_id(side),
        }

    elif event is MatchEvent.QUIT_FORFEIT:
        if winner_id not in (record.creator_id, record.opponent_id):
            raise ValueError(f"match {record.id}: forfeit winner '{winner_id}' is not a participant")
        fields = {
            "status": to_status.value,
            "completed_at": stamp,
            "winner_id": winner_id,
        }

    else:
        # TIMEOUT_NONE_FINISHED, QUIT_EARLY, DECLINE, EXPIRE
        fields = {
            "status": to_status.value,
            "completed_at": stamp,
            "winner_id": None,
        }

    logger.debug(
        "[%s] %s: %s → %s", record.id, event.value, record.status.value, to_status.value
    )
    return Transition(
        match_id=record.id,
        event=event,
        from_status=record.status,
        to_status=to_status,
        fields=fields,
    )
