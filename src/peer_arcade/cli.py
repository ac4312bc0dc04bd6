# Area: Runner
"""
peer_arcade.cli — Command-line interface
========================================

Usage:
    peer-arcade room-code --game uno            # Print a fresh room code
    peer-arcade demo --game caro --seed 7       # Two scripted peers play a game
    peer-arcade matchmaking-demo --game memory  # Two searchers get paired
    peer-arcade run --config config.json        # Run one peer in a room

Configuration for ``run`` comes from the JSON file, then from
PEER_ARCADE_* environment variables (a ``.env`` file is honoured).
"""

import argparse
import sys
from typing import List, Optional

from ._engines import GAME_TYPES
from ._roles import generate_room_code, share_link
from ._runner_config import load_config
from .errors import PeerArcadeError


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="peer-arcade",
        description="Peer Arcade - serverless multiplayer board and card games",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  peer-arcade room-code --game battleship
  peer-arcade demo --game uno --seed 3
  peer-arcade matchmaking-demo
  PEER_ARCADE_GAME=memory peer-arcade run --config config.json
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    room_code = subparsers.add_parser("room-code", help="Generate a room code")
    room_code.add_argument("--game", choices=GAME_TYPES, default=None)
    room_code.add_argument(
        "--base-url",
        type=str,
        help="Also print the share link under this base URL",
    )

    demo = subparsers.add_parser("demo", help="Play a scripted game between two local peers")
    demo.add_argument("--game", choices=GAME_TYPES, default="caro")
    demo.add_argument("--seed", type=int, default=1)
    demo.add_argument("--db", type=str, help="Record the finished game in this SQLite file")

    matchmaking = subparsers.add_parser(
        "matchmaking-demo", help="Pair two local searchers on the matchmaking topic"
    )
    matchmaking.add_argument("--game", choices=GAME_TYPES, default="caro")

    run = subparsers.add_parser("run", help="Run one peer in a room")
    run.add_argument("--config", type=str, help="Path to JSON config file")
    run.add_argument("--ticks", type=int, default=None, help="Stop after this many loop ticks")

    return parser.parse_args(argv)


def cmd_room_code(args: argparse.Namespace) -> int:
    code = generate_room_code(args.game)
    print(code)
    if args.base_url:
        print(share_link(args.base_url, args.game or "caro", code))
    return 0


def cmd_demo(args: argparse.Namespace) -> int:
    from .demo import run_demo

    history = None
    if args.db:
        from ._shared import SqliteGameHistoryStore, init_database
        init_database(args.db)
        history = SqliteGameHistoryStore(args.db)

    result = run_demo(args.game, seed=args.seed, history=history)
    for line in result.log:
        print(f"  {line}")
    outcome = result.outcome
    if outcome.is_draw:
        verdict = "draw"
    else:
        verdict = f"{result.winner_name} wins"
    print(f"{result.game_type} in {result.room_code}: {verdict} ({outcome.reason}, {result.turns} moves)")
    return 0


def cmd_matchmaking_demo(args: argparse.Namespace) -> int:
    from .demo import run_matchmaking_demo

    matches = run_matchmaking_demo(args.game)
    if len(matches) != 2:
        print("Error: searchers were not paired", file=sys.stderr)
        return 1
    for match in matches:
        role = "created" if match.created else "joined"
        print(f"{role} room {match.room_code}")
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    from .runner import PeerRunner

    config = load_config(args.config)
    runner = PeerRunner(config)
    runner.run(max_ticks=args.ticks)
    return 0


COMMANDS = {
    "room-code": cmd_room_code,
    "demo": cmd_demo,
    "matchmaking-demo": cmd_matchmaking_demo,
    "run": cmd_run,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    try:
        return COMMANDS[args.command](args)
    except PeerArcadeError as e:
        print(e.format_error_log(), file=sys.stderr)
        return 1
