"""Play a stored match from the terminal, one move per invocation.

Usage:
    uv run python scripts/hot_seat.py new --players 3 --name Ana --name Bo
    uv run python scripts/hot_seat.py move <game_id> 0 set_ready
    uv run python scripts/hot_seat.py move <game_id> 0 farm_cocoa cell_id=farmland-1-of-player-1
    uv run python scripts/hot_seat.py show <game_id>

Payload values that look like integers are passed as integers.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any
from uuid import UUID

from saotome.actions import dispatch_move
from saotome.config import get_settings
from saotome.core.game_state_text import game_state_summary
from saotome.errors import InvalidMove
from saotome.game_store import create_game, list_games, require_game
from saotome.infra.redis_client import create_redis


def _payload(pairs: list[str]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise SystemExit(f"payload must be key=value, got {pair!r}")
        out[key] = int(value) if value.lstrip("-").isdigit() else value
    return out


def _parse_args() -> argparse.Namespace:
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("--redis-url", default=None, help="Override REDIS_URL")
    sub = ap.add_subparsers(dest="command", required=True)

    new = sub.add_parser("new", help="Create a match")
    new.add_argument("--players", type=int, default=5)
    new.add_argument("--name", action="append", default=[], help="Seat names, in order")
    new.add_argument("--seed", type=int, default=None)

    move = sub.add_parser("move", help="Apply one move")
    move.add_argument("game_id", type=UUID)
    move.add_argument("player_id", type=int)
    move.add_argument("move")
    move.add_argument("payload", nargs="*", help="key=value pairs")

    show = sub.add_parser("show", help="Print a match summary")
    show.add_argument("game_id", type=UUID)

    sub.add_parser("list", help="List stored matches")
    return ap.parse_args()


def main() -> int:
    args = _parse_args()
    logging.basicConfig(level=get_settings().log_level)
    r = create_redis(args.redis_url)

    if args.command == "new":
        state = create_game(r=r, num_players=args.players, names=args.name, seed=args.seed)
        print(state.game_id)
    elif args.command == "move":
        try:
            result = dispatch_move(
                r=r,
                game_id=args.game_id,
                player_id=args.player_id,
                move=args.move,
                payload=_payload(args.payload),
            )
        except InvalidMove as e:
            print(f"rejected: {e}", file=sys.stderr)
            return 1
        print(game_state_summary(result.state))
    elif args.command == "show":
        print(game_state_summary(require_game(r=r, game_id=args.game_id), last_logs=10))
    else:
        for state in list_games(r=r):
            print(f"{state.game_id} round={state.round} phase={state.phase.value} players={state.num_players}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
