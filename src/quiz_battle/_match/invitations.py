# Area: Match
"""
quiz_battle._match.invitations — Invitation handling
====================================================

A created match waits in ``pending`` until one of the clients opens
it. Before that the invited opponent may decline it, and invitations
nobody answers are swept after a time-to-live. Both paths cancel the
match through the status state machine.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING, List

from .enums import InvitationStatus, MatchEvent, MatchStatus, Role
from .records import MatchRecord
from .state_machine import resolve_transition
from .._shared.clock import Clock, utc_now
from ..errors import InvalidTransitionError, NotAParticipantError

if TYPE_CHECKING:
    from .._store.interface import MatchStore

logger = logging.getLogger("quiz_battle.invitations")

DEFAULT_INVITATION_TTL_SECONDS = 24 * 60 * 60


def _require_invitee(record: MatchRecord, participant_id: str) -> None:
    if record.role_of(participant_id) is not Role.OPPONENT:
        raise NotAParticipantError(record.id, participant_id)


def accept_invitation(store: "MatchStore", match_id: str, participant_id: str) -> MatchRecord:
    """
    Accept the invitation of ``match_id`` as its invited opponent.

    The match itself stays pending; it becomes active when a client
    opens it.

    Raises:
        MatchNotFoundError: If the match does not exist
        NotAParticipantError: If the caller was not invited
        InvalidTransitionError: If the match is already terminal
    """
    record = store.get_match(match_id)
    _require_invitee(record, participant_id)
    if record.status.is_terminal:
        raise InvalidTransitionError(record.status.value, MatchEvent.ACCEPT.value)

    store.set_invitation_status(match_id, InvitationStatus.ACCEPTED)
    logger.info("[%s] Invitation accepted by %s", match_id, participant_id)
    return record


def decline_invitation(
    store: "MatchStore", match_id: str, participant_id: str, clock: Clock = utc_now
) -> MatchRecord:
    """
    Decline the invitation of a pending match; the match is cancelled.

    Raises:
        MatchNotFoundError: If the match does not exist
        NotAParticipantError: If the caller was not invited
        InvalidTransitionError: If the match is no longer pending
    """
    record = store.get_match(match_id)
    _require_invitee(record, participant_id)

    transition = resolve_transition(record, MatchEvent.DECLINE, clock())
    if not store.update_match_if(match_id, transition.fields, transition.expected_statuses):
        current = store.get_match(match_id)
        raise InvalidTransitionError(current.status.value, MatchEvent.DECLINE.value)

    store.set_invitation_status(match_id, InvitationStatus.DECLINED)
    logger.info("[%s] Invitation declined by %s, match cancelled", match_id, participant_id)
    return store.get_match(match_id)


def expire_stale_invitations(
    store: "MatchStore",
    ttl_seconds: float = DEFAULT_INVITATION_TTL_SECONDS,
    clock: Clock = utc_now,
) -> List[str]:
    """
    Cancel pending matches whose invitation is older than ``ttl_seconds``.

    Returns:
        Ids of the matches cancelled by this sweep
    """
    now = clock()
    cutoff = (now - timedelta(seconds=ttl_seconds)).isoformat()
    expired: List[str] = []

    for record in store.get_pending_matches_created_before(cutoff):
        if record.status is not MatchStatus.PENDING:
            continue
        transition = resolve_transition(record, MatchEvent.EXPIRE, now)
        if store.update_match_if(record.id, transition.fields, transition.expected_statuses):
            store.set_invitation_status(record.id, InvitationStatus.DECLINED)
            expired.append(record.id)
            logger.info("[%s] Invitation expired, match cancelled", record.id)
        else:
            logger.debug("[%s] Match left pending before expiry", record.id)

    if expired:
        logger.info("Expired %d stale invitation(s)", len(expired))
    return expired
