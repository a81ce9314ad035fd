"""Play seeded random matches and print how the island fared.

Usage:
    uv run python scripts/simulate_game.py --players 5 --seed 7
    uv run python scripts/simulate_game.py --games 20 --tipping-points

The output is deterministic for a given seed.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace

from saotome.config import get_settings
from saotome.core.game_state_text import game_state_summary
from saotome.simulation import play_random_game


def _parse_args() -> argparse.Namespace:
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("--players", type=int, default=5)
    ap.add_argument("--seed", type=int, default=42)
    ap.add_argument("--games", type=int, default=1, help="Number of matches; seeds count up from --seed")
    ap.add_argument("--rounds", type=int, default=None, help="Override SAOTOME_MAX_ROUNDS")
    ap.add_argument("--tipping-points", action="store_true", help="Enable the tiered environmental tax")
    ap.add_argument("--log-level", default=None, help="Override SAOTOME_LOG_LEVEL")
    return ap.parse_args()


def main() -> None:
    args = _parse_args()
    settings = get_settings()
    if args.rounds is not None:
        settings = replace(settings, max_rounds=args.rounds)
    if args.tipping_points:
        settings = replace(settings, tipping_points=True)

    logging.basicConfig(level=(args.log_level or settings.log_level).upper())

    for i in range(args.games):
        state = play_random_game(num_players=args.players, seed=args.seed + i, settings=settings)
        if args.games == 1:
            print(game_state_summary(state, last_logs=10))
            continue
        last = state.history[-1]
        print(
            f"seed={state.seed} winners={state.winner_ids} core_trees={last.core_trees} "
            f"buffer_trees={last.buffer_trees} snails={last.total_snails} in_portugal={last.players_in_portugal}"
        )


if __name__ == "__main__":
    main()
