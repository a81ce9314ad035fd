from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal
from uuid import UUID

import redis

from saotome.engine import apply_move
from saotome.game_store import require_game, require_player, save_game
from saotome.lock import game_lock
from saotome.models import GamePhase, GameState


MoveName = Literal[
    "register",
    "set_ready",
    "transfer_resource",
    "adjourn",
    "farm_cocoa",
    "extend_farm",
    "abandon_farm",
    "log_buffer",
    "hunt_snail",
    "join_coop",
    "retrieve_worker",
    "end_turn",
    "do_nothing",
    "steal",
    "illegal_log",
]


@dataclass(frozen=True, slots=True)
class MoveResult:
    state: GameState
    phases_entered: list[GamePhase]


def dispatch_move(
    *,
    r: redis.Redis,
    game_id: UUID,
    player_id: int,
    move: MoveName | str,
    payload: dict[str, Any] | None = None,
) -> MoveResult:
    """Entry point for every seat at the table.

    Applies a move by:
    - acquiring a per-game lock
    - loading game state
    - validating + applying it in memory (phase machine included)
    - persisting state

    A rejected move raises `InvalidMove` and nothing is saved.
    """

    with game_lock(r=r, game_id=str(game_id)):
        state = require_game(r=r, game_id=game_id)
        require_player(state=state, player_id=player_id)

        entered = apply_move(state, player_id=player_id, move=move, payload=payload)

        save_game(r=r, state=state)
        return MoveResult(state=state, phases_entered=entered)
