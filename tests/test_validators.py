from __future__ import annotations

import pytest

from saotome.errors import InvalidMove
from saotome.models import DoNothing, GamePhase, GameState
from saotome.turn_processing.turns import current_turn_player_id, turn_order
from saotome.turn_processing.validators import ValidationContext, pipeline_for_move


def _ctx(state: GameState, player_id: int, move: str) -> ValidationContext:
    return ValidationContext(game_id=str(state.game_id), player_id=player_id, move=move)


def test_phase_validator_denies_wrong_phase(state: GameState) -> None:
    with pytest.raises(InvalidMove) as e:
        pipeline_for_move("farm_cocoa").validate(ctx=_ctx(state, 0, "farm_cocoa"), state=state)

    assert "not allowed" in str(e.value)
    assert "registration" in str(e.value)


def test_unknown_move_pipeline_raises() -> None:
    with pytest.raises(InvalidMove) as e:
        pipeline_for_move("nope")
    assert "Unknown move" in str(e.value)


def test_every_move_denied_once_game_is_over(state: GameState) -> None:
    state.phase = GamePhase.game_over
    with pytest.raises(InvalidMove) as e:
        pipeline_for_move("set_ready").validate(ctx=_ctx(state, 0, "set_ready"), state=state)
    assert str(e.value) == "Game is over"


def test_unknown_player_denied(state: GameState) -> None:
    with pytest.raises(InvalidMove) as e:
        pipeline_for_move("set_ready").validate(ctx=_ctx(state, 9, "set_ready"), state=state)
    assert "Player not found" in str(e.value)


def test_out_of_turn_action_denied(action_state: GameState) -> None:
    assert current_turn_player_id(state=action_state) == 0
    with pytest.raises(InvalidMove) as e:
        pipeline_for_move("log_buffer").validate(ctx=_ctx(action_state, 1, "log_buffer"), state=action_state)
    assert "Not your turn" in str(e.value)


def test_action_denied_when_workers_exhausted(action_state: GameState) -> None:
    action_state.players[0].actions_taken = 2
    with pytest.raises(InvalidMove) as e:
        pipeline_for_move("log_buffer").validate(ctx=_ctx(action_state, 0, "log_buffer"), state=action_state)
    assert "No workers left" in str(e.value)

    # Ending the turn needs no worker.
    pipeline_for_move("end_turn").validate(ctx=_ctx(action_state, 0, "end_turn"), state=action_state)


def test_second_secret_action_denied(secret_state: GameState) -> None:
    secret_state.players[0].secret_action = DoNothing()
    with pytest.raises(InvalidMove) as e:
        pipeline_for_move("steal").validate(ctx=_ctx(secret_state, 0, "steal"), state=secret_state)
    assert "already chosen" in str(e.value)


def test_town_hall_moves_are_simultaneous(town_hall_state: GameState) -> None:
    for pid in (3, 0, 4):
        pipeline_for_move("adjourn").validate(ctx=_ctx(town_hall_state, pid, "adjourn"), state=town_hall_state)


def test_turn_order_rotates_from_first_player(state: GameState) -> None:
    state.first_player = 3
    assert turn_order(state=state) == [3, 4, 0, 1, 2]
