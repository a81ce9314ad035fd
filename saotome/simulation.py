"""Seeded random-policy playthroughs, for balancing experiments and smoke tests.

The policy only proposes candidates; every move still goes through
`apply_move`, so a candidate the rules reject is simply skipped.
"""

from __future__ import annotations

import logging
import random
from typing import Any

from saotome.config import GameSettings
from saotome.engine import apply_move, start_game
from saotome.errors import InvalidMove
from saotome.game_setup import create_initial_state
from saotome.models import CellType, GamePhase, GameState, PlayerState, Resource, Zone
from saotome.turn_processing.turns import current_turn_player_id

logger = logging.getLogger(__name__)

Candidate = tuple[str, dict[str, Any]]

# Safety valve against a policy that never ends its turn.
MAX_STEPS = 10_000


def _action_candidates(state: GameState, player: PlayerState, rng: random.Random) -> list[Candidate]:
    out: list[Candidate] = []
    if player.actions_taken < player.workers:
        for cell in state.cells:
            if cell.type == CellType.farm and not cell.farmed_this_round:
                out.append(("farm_cocoa", {"cell_id": cell.cell_id}))
            if cell.type == CellType.empty and cell.region == player.player_id:
                out.append(("extend_farm", {"cell_id": cell.cell_id}))
        out.append(("log_buffer", {}))
        out.append(("hunt_snail", {"zone": rng.choice(list(Zone))}))
        out.append(("join_coop", {}))
    if player.in_portugal:
        out.append(("retrieve_worker", {}))
    rng.shuffle(out)
    return out


def _secret_candidates(state: GameState, player: PlayerState, rng: random.Random) -> list[Candidate]:
    others = [p.player_id for p in state.players if p.player_id != player.player_id]
    roll = rng.random()
    if roll < 0.25 and others:
        return [("steal", {"target_player_id": rng.choice(others), "amount": rng.randint(1, 3)})]
    if roll < 0.45:
        return [("illegal_log", {"zone": Zone.core.value, "amount": rng.randint(1, 3)})]
    return []


def _town_hall_candidates(state: GameState, player: PlayerState, rng: random.Random) -> list[Candidate]:
    others = [p.player_id for p in state.players if p.player_id != player.player_id]
    # Occasionally help a neighbour who is short on timber.
    if others and player.timber > 2 and rng.random() < 0.2:
        return [("transfer_resource", {"target_player_id": rng.choice(others), "resource": Resource.timber.value, "amount": 1})]
    return []


def _try(state: GameState, player_id: int, candidates: list[Candidate], fallback: Candidate) -> str:
    for move, payload in candidates:
        try:
            apply_move(state, player_id=player_id, move=move, payload=payload)
            return move
        except InvalidMove:
            continue
    move, payload = fallback
    apply_move(state, player_id=player_id, move=move, payload=payload)
    return move


def play_step(state: GameState, rng: random.Random) -> str:
    """Make one move for whoever is due to act. Returns the move name."""

    if state.phase == GamePhase.registration:
        player = next(p for p in state.players if not p.is_ready)
        return _try(state, player.player_id, [], ("set_ready", {}))

    if state.phase == GamePhase.town_hall:
        player = next(p for p in state.players if p.player_id not in state.adjourned)
        return _try(state, player.player_id, _town_hall_candidates(state, player, rng), ("adjourn", {}))

    pid = current_turn_player_id(state=state)
    player = next(p for p in state.players if p.player_id == pid)
    if state.phase == GamePhase.action:
        return _try(state, pid, _action_candidates(state, player, rng), ("end_turn", {}))
    return _try(state, pid, _secret_candidates(state, player, rng), ("do_nothing", {}))


def play_random_game(
    *,
    num_players: int = 5,
    seed: int = 0,
    settings: GameSettings | None = None,
) -> GameState:
    """Play one complete match with a seeded random policy and return the final state."""

    rng = random.Random(seed)
    state = create_initial_state(num_players=num_players, seed=seed, settings=settings)
    start_game(state)

    steps = 0
    while state.phase != GamePhase.game_over:
        play_step(state, rng)
        steps += 1
        if steps >= MAX_STEPS:
            raise RuntimeError(f"Simulation did not finish within {MAX_STEPS} moves")

    logger.info("game=%s finished after %s moves; winners=%s", state.game_id, steps, state.winner_ids)
    return state
