from __future__ import annotations

import logging
from datetime import UTC, datetime
from uuid import UUID

import redis

from saotome.config import GameSettings
from saotome.game_setup import create_initial_state
from saotome.models import GameState, PlayerState

logger = logging.getLogger(__name__)

GAMES_SET_KEY = "saotome:games"
GAME_KEY_PREFIX = "saotome:game:"  # + {uuid}


def _now() -> datetime:
    return datetime.now(tz=UTC)


def _game_key(game_id: UUID) -> str:
    return f"{GAME_KEY_PREFIX}{game_id}"


def save_game(*, r: redis.Redis, state: GameState) -> None:
    state.last_updated_at = _now()
    r.set(_game_key(state.game_id), state.model_dump_json())


def get_game(*, r: redis.Redis, game_id: UUID) -> GameState | None:
    raw = r.get(_game_key(game_id))
    if not raw:
        return None
    return GameState.model_validate_json(raw)


def require_game(*, r: redis.Redis, game_id: UUID) -> GameState:
    state = get_game(r=r, game_id=game_id)
    if state is None:
        raise ValueError("Game not found")
    return state


def require_player(*, state: GameState, player_id: int) -> PlayerState:
    for p in state.players:
        if p.player_id == player_id:
            return p
    raise ValueError("Player not found")


def create_game(
    *,
    r: redis.Redis,
    num_players: int,
    names: list[str] | None = None,
    seed: int | None = None,
    settings: GameSettings | None = None,
) -> GameState:
    state = create_initial_state(num_players=num_players, seed=seed, names=names, settings=settings)

    r.set(_game_key(state.game_id), state.model_dump_json())
    r.sadd(GAMES_SET_KEY, str(state.game_id))
    logger.info("game=%s created with %s players (seed=%s)", state.game_id, num_players, state.seed)
    return state


def delete_game(*, r: redis.Redis, game_id: UUID) -> bool:
    removed = r.delete(_game_key(game_id))
    r.srem(GAMES_SET_KEY, str(game_id))
    return bool(removed)


def list_games(*, r: redis.Redis) -> list[GameState]:
    ids = sorted(r.smembers(GAMES_SET_KEY))
    out: list[GameState] = []
    for sid in ids:
        try:
            gid = UUID(sid)
        except ValueError:
            continue
        state = get_game(r=r, game_id=gid)
        if state is not None:
            out.append(state)
    out.sort(key=lambda s: s.created_at, reverse=True)
    return out
