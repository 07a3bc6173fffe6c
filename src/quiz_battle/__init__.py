"""
quiz_battle — Two-player quiz battle engine
===========================================

Two participants play the same set of quiz units, each on their own
client, against one shared match record. There is no lock on that
record: each side writes only its own progress and score, and every
status change goes through one transition function applied as a
conditional write.

Quick Start:
    from quiz_battle import (
        SQLiteMatchStore, QuizUnitAssigner, BattleClient, BattleRunner, DemoPlayer,
    )

    store = SQLiteMatchStore("battle.db")
    match = QuizUnitAssigner(store).create_match("alice", "bob", [{"subject_id": "math"}])
    client = BattleClient(store, match.id, "alice")
    BattleRunner(client, DemoPlayer()).run()

Custom player:
    from quiz_battle import BattlePlayer
    class MyPlayer(BattlePlayer): ...  # implement choose_answer
"""

from ._config import DEFAULTS, load_config, validate_config
from ._match.assigner import QuizUnitAssigner
from ._match.enums import InvitationStatus, MatchEvent, MatchStatus, Role
from ._match.invitations import accept_invitation, decline_invitation, expire_stale_invitations
from ._match.monitor import TimeoutMonitor
from ._match.outcome import MatchOutcome, OutcomeKind, classify_outcome
from ._match.ownership import Participant, ProgressUpdate
from ._match.quit_handler import QuitHandler
from ._match.reconciler import ProgressReconciler
from ._match.records import (
    ContentUnit,
    MatchRecord,
    Question,
    QuizContent,
    QuizUnitAssignment,
    SubjectSlot,
)
from ._match.state_machine import TRANSITIONS, Transition, can_transition, resolve_transition
from ._session import SessionPhase, SessionRunner, shuffle_questions
from ._shared.logging_config import setup_logging
from ._store import ChangeFeed, MatchStore, SQLiteMatchStore
from ._sync import LiveSyncListener, MatchCache
from .battle_runner import BattleRunner
from .callbacks import BattlePlayer
from .client import BattleClient
from .demo_player import DemoPlayer
from .errors import (
    BattleError,
    ConfigError,
    ContentUnavailableError,
    InvalidTransitionError,
    MatchNotFoundError,
    NotAParticipantError,
    RecordValidationError,
    SessionStateError,
    StoreError,
)
from .types import AnswerResponse, QuestionContext, ResultContext

__all__ = [
    # Main classes
    "BattleClient",
    "BattleRunner",
    "BattlePlayer",
    "DemoPlayer",
    "QuizUnitAssigner",
    "ProgressReconciler",
    "TimeoutMonitor",
    "QuitHandler",
    "SessionRunner",
    "SessionPhase",
    "LiveSyncListener",
    "MatchCache",
    "shuffle_questions",
    # Invitations and results
    "accept_invitation",
    "decline_invitation",
    "expire_stale_invitations",
    "classify_outcome",
    "MatchOutcome",
    "OutcomeKind",
    # Records and state machine
    "MatchRecord",
    "QuizUnitAssignment",
    "ContentUnit",
    "QuizContent",
    "Question",
    "SubjectSlot",
    "MatchStatus",
    "MatchEvent",
    "InvitationStatus",
    "Role",
    "Participant",
    "ProgressUpdate",
    "TRANSITIONS",
    "Transition",
    "can_transition",
    "resolve_transition",
    # Store
    "MatchStore",
    "SQLiteMatchStore",
    "ChangeFeed",
    # Config and logging
    "DEFAULTS",
    "load_config",
    "validate_config",
    "setup_logging",
    # Errors
    "BattleError",
    "ConfigError",
    "ContentUnavailableError",
    "InvalidTransitionError",
    "MatchNotFoundError",
    "NotAParticipantError",
    "RecordValidationError",
    "SessionStateError",
    "StoreError",
    # Callback types
    "QuestionContext",
    "AnswerResponse",
    "ResultContext",
]
__version__ = "1.0.0"
