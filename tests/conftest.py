from __future__ import annotations

from collections.abc import Generator

import fakeredis
import pytest

from saotome.config import GameSettings, reset_settings_for_tests
from saotome.engine import apply_move, start_game
from saotome.game_setup import create_initial_state
from saotome.models import GameState


@pytest.fixture(autouse=True)
def _hermetic_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Ignore any SAOTOME_* variables from the developer's shell."""

    for name in (
        "SAOTOME_MAX_ROUNDS",
        "SAOTOME_TIPPING_POINTS",
        "SAOTOME_MIN_PLAYERS",
        "SAOTOME_MAX_PLAYERS",
        "SAOTOME_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings_for_tests()
    yield
    reset_settings_for_tests()


@pytest.fixture()
def settings() -> GameSettings:
    return GameSettings()


@pytest.fixture()
def state(settings: GameSettings) -> GameState:
    """Fresh five-player match, still in registration."""

    return create_initial_state(num_players=5, seed=7, settings=settings)


@pytest.fixture()
def town_hall_state(state: GameState) -> GameState:
    """Round 1 town hall."""

    start_game(state)
    return state


@pytest.fixture()
def action_state(town_hall_state: GameState) -> GameState:
    """Round 1 action phase; seat 0 is first to act."""

    for p in town_hall_state.players:
        apply_move(town_hall_state, player_id=p.player_id, move="adjourn")
    return town_hall_state


@pytest.fixture()
def secret_state(action_state: GameState) -> GameState:
    """Round 1 secret phase; seat 0 is first to choose."""

    for pid in range(5):
        apply_move(action_state, player_id=pid, move="end_turn")
    return action_state


@pytest.fixture()
def r() -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(decode_responses=True)
