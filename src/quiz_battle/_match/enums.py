# Area: Match
"""
quiz_battle._match.enums — Match State Machine Enums
====================================================

Defines the statuses and events of the match status state machine,
and the two participant roles.
"""

from enum import Enum


class MatchStatus(Enum):
    """
    Status of a match.

    State transitions:
    PENDING -> ACTIVE (on ACTIVATE, first client open)
    ACTIVE -> COMPLETED (on BOTH_FINISHED, TIMEOUT_ONE_SIDED, QUIT_FORFEIT)
    ACTIVE -> CANCELLED (on TIMEOUT_NONE_FINISHED, QUIT_EARLY)
    PENDING -> COMPLETED (on QUIT_FORFEIT)
    PENDING -> CANCELLED (on QUIT_EARLY, DECLINE, EXPIRE)
    COMPLETED and CANCELLED are terminal.
    """
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (MatchStatus.COMPLETED, MatchStatus.CANCELLED)


class MatchEvent(Enum):
    """
    Events that trigger status transitions.

    Events are triggered by:
    - ACTIVATE: a client opens a pending match with no start time
    - BOTH_FINISHED: both progress counters reached total_units
    - TIMEOUT_ONE_SIDED: ceiling exceeded with exactly one side finished
    - TIMEOUT_NONE_FINISHED: ceiling exceeded with neither side finished
    - QUIT_EARLY: a participant quits before the opponent played
    - QUIT_FORFEIT: a participant quits after the opponent played
      (or after the forfeit threshold)
    - DECLINE: the opponent declines the invitation
    - EXPIRE: the invitation was never answered

    ACCEPT leaves the status unchanged and has no row in the
    transition table; accepting is refused once the match is terminal.
    """
    ACTIVATE = "ACTIVATE"
    BOTH_FINISHED = "BOTH_FINISHED"
    TIMEOUT_ONE_SIDED = "TIMEOUT_ONE_SIDED"
    TIMEOUT_NONE_FINISHED = "TIMEOUT_NONE_FINISHED"
    QUIT_EARLY = "QUIT_EARLY"
    QUIT_FORFEIT = "QUIT_FORFEIT"
    DECLINE = "DECLINE"
    EXPIRE = "EXPIRE"
    ACCEPT = "ACCEPT"


class Role(Enum):
    """Which side of the match a participant plays."""
    CREATOR = "creator"
    OPPONENT = "opponent"

    @property
    def other(self) -> "Role":
        return Role.OPPONENT if self is Role.CREATOR else Role.CREATOR


class InvitationStatus(Enum):
    """Status of the invitation sent to the opponent."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
