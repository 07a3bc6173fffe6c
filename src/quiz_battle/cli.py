# Area: Shared
"""
quiz_battle.cli — Command-line interface
========================================

Usage:
    python -m quiz_battle init-db
    python -m quiz_battle seed                                  # load demo catalog
    python -m quiz_battle create --creator alice --opponent bob --subject math --subject francais
    python -m quiz_battle accept  --match <id> --participant bob
    python -m quiz_battle decline --match <id> --participant bob
    python -m quiz_battle play    --match <id> --participant alice --seed 1
    python -m quiz_battle show    --match <id> --participant alice
    python -m quiz_battle invitations --participant bob         # pending invitations
    python -m quiz_battle list    --participant alice --status completed
    python -m quiz_battle sweep                                 # expire stale invitations

Every command accepts --config (JSON file) and --db (database path).
Settings can also come from QUIZ_BATTLE_* environment variables or a
.env file.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from ._config import load_config, validate_config
from ._match.assigner import QuizUnitAssigner
from ._match.enums import MatchStatus
from ._match.invitations import accept_invitation, decline_invitation, expire_stale_invitations
from ._match.outcome import classify_outcome
from ._shared.logging_config import log_setup_error, setup_logging
from ._store.sqlite_store import SQLiteMatchStore
from .battle_runner import BattleRunner
from .client import BattleClient
from .demo_player import DemoPlayer
from .errors import BattleError, ConfigError, ContentUnavailableError, RecordValidationError

DEMO_CATALOG_PATH = Path(__file__).parent / "demo_data" / "catalog.json"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="quiz_battle",
        description="Quiz Battle - two-player quiz matches",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m quiz_battle seed
  python -m quiz_battle create --creator alice --opponent bob --subject math
  python -m quiz_battle play --match <id> --participant alice
  python -m quiz_battle invitations --participant bob
  python -m quiz_battle list --participant alice --status active
  QUIZ_BATTLE_DB_PATH=/tmp/battle.db python -m quiz_battle sweep
        """,
    )
    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument("--db", type=str, help="Database path (overrides config)")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the database tables")

    seed = sub.add_parser("seed", help="Load quiz units into the catalog")
    seed.add_argument("--file", type=str, help="Catalog JSON (default: bundled demo catalog)")

    create = sub.add_parser("create", help="Create a match and invite the opponent")
    create.add_argument("--creator", required=True)
    create.add_argument("--opponent", required=True)
    create.add_argument("--subject", action="append", required=True,
                        help="Subject id, repeat for several units")
    create.add_argument("--grade", help="Creator's grade level")
    create.add_argument("--difficulty", help="Display label (default from config)")

    for name, text in (("accept", "Accept an invitation"), ("decline", "Decline an invitation")):
        p = sub.add_parser(name, help=text)
        p.add_argument("--match", required=True)
        p.add_argument("--participant", required=True)

    play = sub.add_parser("play", help="Play a match with the demo player")
    play.add_argument("--match", required=True)
    play.add_argument("--participant", required=True)
    play.add_argument("--seed", type=int, help="Seed for the demo player's answers")
    play.add_argument("--max-ticks", type=int, help="Stop after this many loop iterations")

    show = sub.add_parser("show", help="Show a match result for one participant")
    show.add_argument("--match", required=True)
    show.add_argument("--participant", required=True)

    invitations = sub.add_parser("invitations", help="List pending invitations for a participant")
    invitations.add_argument("--participant", required=True)

    listing = sub.add_parser("list", help="List a participant's matches, newest first")
    listing.add_argument("--participant", required=True)
    listing.add_argument("--status", action="append",
                         choices=[s.value for s in MatchStatus],
                         help="Only matches in this status, repeat for several")

    sub.add_parser("sweep", help="Cancel matches whose invitation expired")

    return parser


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def run_command(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    """Execute one parsed command against the configured store."""
    store = SQLiteMatchStore(config["db_path"])

    if args.command == "init-db":
        print(f"Database ready at {config['db_path']}")

    elif args.command == "seed":
        count = store.catalog.load_file(args.file or DEMO_CATALOG_PATH)
        print(f"Loaded {count} quiz unit(s)")

    elif args.command == "create":
        assigner = QuizUnitAssigner(store, default_difficulty=config["default_difficulty"])
        subjects: List[Dict[str, str]] = [{"subject_id": s} for s in args.subject]
        record = assigner.create_match(
            args.creator, args.opponent, subjects,
            grade_level=args.grade, difficulty=args.difficulty,
        )
        print(record.id)

    elif args.command == "accept":
        accept_invitation(store, args.match, args.participant)
        print(f"Invitation to {args.match} accepted")

    elif args.command == "decline":
        record = decline_invitation(store, args.match, args.participant)
        print(f"Match {record.id} {record.status.value}")

    elif args.command == "play":
        client = BattleClient(store, args.match, args.participant, config=config)
        outcome = BattleRunner(
            client, DemoPlayer(seed=args.seed), max_ticks=args.max_ticks
        ).run()
        _print_json(outcome.to_dict())

    elif args.command == "show":
        outcome = classify_outcome(store.get_match(args.match), args.participant)
        _print_json(outcome.to_dict())

    elif args.command == "invitations":
        _print_json(store.get_pending_invitations(args.participant))

    elif args.command == "list":
        statuses = [MatchStatus(s) for s in args.status] if args.status else None
        rows = []
        for record in store.get_matches_for_participant(args.participant, statuses):
            row = classify_outcome(record, args.participant).to_dict()
            row["status"] = record.status.value
            rows.append(row)
        _print_json(rows)

    elif args.command == "sweep":
        expired = expire_stale_invitations(store, ttl_seconds=config["invitation_ttl_seconds"])
        print(f"Expired {len(expired)} invitation(s)")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        if args.db:
            config["db_path"] = args.db
        validate_config(config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    setup_logging(log_file_path=config["log_file"], level=config["log_level"])

    try:
        return run_command(args, config)
    except (ContentUnavailableError, RecordValidationError) as e:
        log_setup_error(e)
        return 1
    except BattleError as e:
        message = getattr(e, "user_message", None) or str(e)
        print(f"Error: {message}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
