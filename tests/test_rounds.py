from __future__ import annotations

from dataclasses import replace

import pytest

from saotome.config import GameSettings
from saotome.engine import apply_move, start_game
from saotome.errors import InvalidMove
from saotome.game_setup import create_initial_state
from saotome.models import GamePhase, GameState, HistoryEntry, LogLevel
from saotome.turn_processing.turns import current_turn_player_id, turn_order


def _adjourn_all(state: GameState) -> None:
    for p in state.players:
        apply_move(state, player_id=p.player_id, move="adjourn")


def _end_all_turns(state: GameState) -> None:
    for pid in turn_order(state=state):
        apply_move(state, player_id=pid, move="end_turn")


def _quiet_night(state: GameState) -> list[GamePhase]:
    entered: list[GamePhase] = []
    for pid in turn_order(state=state):
        entered = apply_move(state, player_id=pid, move="do_nothing")
    return entered


def _short_game(settings: GameSettings, **overrides) -> GameState:
    state = create_initial_state(num_players=5, seed=7, settings=replace(settings, **overrides))
    start_game(state)
    _adjourn_all(state)
    _end_all_turns(state)
    return state


def test_quiet_round_rolls_into_the_next_town_hall(secret_state: GameState) -> None:
    entered = _quiet_night(secret_state)

    assert entered == [GamePhase.calculation, GamePhase.town_hall]
    assert secret_state.round == 2
    assert secret_state.first_player == 1
    assert secret_state.history == [
        HistoryEntry(round=1, core_trees=20, buffer_trees=12, total_snails=14, players_in_portugal=0)
    ]
    assert all(p.secret_action is None for p in secret_state.players)


def test_round_two_boom_and_living_costs(secret_state: GameState) -> None:
    _quiet_night(secret_state)

    p0 = secret_state.players[0]
    # Three workers after the boom, but timber for only one of them.
    assert (p0.cocoa, p0.timber, p0.workers, p0.in_portugal) == (2, 0, 1, 2)

    p4 = secret_state.players[4]
    assert (p4.cocoa, p4.timber, p4.workers, p4.in_portugal) == (0, 0, 1, 2)

    assert any(
        e.level == LogLevel.danger and "Portugal" in e.message and e.round == 2 for e in secret_state.logs
    )


def test_turn_order_rotates_each_round(secret_state: GameState) -> None:
    _quiet_night(secret_state)
    _adjourn_all(secret_state)

    assert secret_state.phase == GamePhase.action
    assert current_turn_player_id(state=secret_state) == 1
    assert turn_order(state=secret_state) == [1, 2, 3, 4, 0]

    with pytest.raises(InvalidMove, match="Not your turn"):
        apply_move(secret_state, player_id=0, move="end_turn")


def test_farmed_flags_reset_after_calculation(action_state: GameState) -> None:
    apply_move(action_state, player_id=0, move="farm_cocoa", payload={"cell_id": "farmland-1-of-player-1"})
    _end_all_turns(action_state)
    _quiet_night(action_state)

    assert not any(c.farmed_this_round for c in action_state.cells)


def test_last_round_ends_the_game(settings: GameSettings) -> None:
    state = _short_game(settings, max_rounds=1)

    entered = _quiet_night(state)

    assert entered == [GamePhase.calculation, GamePhase.game_over]
    assert state.phase == GamePhase.game_over
    assert state.winner_ids == [0, 1]
    assert "Game over" in state.logs[-1].message

    with pytest.raises(InvalidMove, match="Game is over"):
        apply_move(state, player_id=0, move="do_nothing")


def test_steal_is_resolved_at_calculation(settings: GameSettings) -> None:
    state = _short_game(settings, max_rounds=1)

    apply_move(state, player_id=0, move="steal", payload={"target_player_id": 3, "amount": 3})
    for pid in range(1, 5):
        apply_move(state, player_id=pid, move="do_nothing")

    assert state.players[0].cocoa == 5
    assert state.players[3].cocoa == 0
    assert state.winner_ids == [0]


def test_colliding_thieves_take_nothing(settings: GameSettings) -> None:
    state = _short_game(settings, max_rounds=1)

    apply_move(state, player_id=0, move="steal", payload={"target_player_id": 2, "amount": 1})
    apply_move(state, player_id=1, move="steal", payload={"target_player_id": 2, "amount": 1})
    for pid in range(2, 5):
        apply_move(state, player_id=pid, move="do_nothing")

    assert [p.cocoa for p in state.players] == [3, 3, 2, 2, 1]
    assert any("spotted each other" in e.message for e in state.logs)


def test_tipping_point_tax_is_charged_next_town_hall(settings: GameSettings) -> None:
    state = _short_game(settings, tipping_points=True)
    state.core_snails = 3
    state.buffer_snails = 1

    _quiet_night(state)

    assert state.tax_penalty == 3
    assert state.round == 2
    # Living costs leave everyone with at most 2 cocoa, and the tax takes the rest.
    assert all(p.cocoa == 0 for p in state.players)
    assert any("environmental tax" in e.message for e in state.logs)


def test_tipping_points_off_by_default(secret_state: GameState) -> None:
    secret_state.core_snails = 0
    secret_state.buffer_snails = 0

    _quiet_night(secret_state)

    assert secret_state.tax_penalty == 0
    assert secret_state.history[-1].total_snails == 0
