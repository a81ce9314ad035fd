from __future__ import annotations

import inspect
import logging
from typing import Any

from saotome.errors import InvalidMove
from saotome.models import GamePhase, GameState
from saotome.moves import MOVES
from saotome.rounds import advance
from saotome.turn_processing.validators import ValidationContext, pipeline_for_move

logger = logging.getLogger(__name__)


def apply_move(
    state: GameState,
    *,
    player_id: int,
    move: str,
    payload: dict[str, Any] | None = None,
) -> list[GamePhase]:
    """Validate and apply one move in memory, then advance the phase machine.

    Raises `InvalidMove` (state untouched) when the move is not allowed.
    Returns the phases entered as a consequence of the move.
    """

    payload = dict(payload or {})
    ctx = ValidationContext(game_id=str(state.game_id), player_id=player_id, move=move)

    try:
        pipeline_for_move(move).validate(ctx=ctx, state=state)
        handler = MOVES[move]
        player = next(p for p in state.players if p.player_id == player_id)
        try:
            inspect.signature(handler).bind(state, player, **payload)
        except TypeError as e:
            raise InvalidMove(f"Bad payload for '{move}': {e}") from e
        handler(state, player, **payload)
    except InvalidMove as e:
        logger.debug("game=%s player=%s move=%s rejected: %s", ctx.game_id, player_id, move, e)
        raise

    logger.debug("game=%s player=%s move=%s applied", ctx.game_id, player_id, move)
    return advance(state)


def start_game(state: GameState) -> list[GamePhase]:
    """Mark every seat ready and leave registration (hot-seat / simulation convenience)."""

    entered: list[GamePhase] = []
    for p in state.players:
        if not p.is_ready:
            entered.extend(apply_move(state, player_id=p.player_id, move="set_ready"))
    return entered
