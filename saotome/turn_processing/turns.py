from __future__ import annotations

from saotome.errors import InvalidMove
from saotome.models import GamePhase, GameState

SEQUENTIAL_PHASES: frozenset[GamePhase] = frozenset({GamePhase.action, GamePhase.secret})


def turn_order(*, state: GameState) -> list[int]:
    """Seats in acting order for this round, starting from `first_player` and wrapping around."""

    seats = sorted(p.player_id for p in state.players)
    if not seats:
        raise ValueError("No players")
    start = seats.index(state.first_player) if state.first_player in seats else 0
    return seats[start:] + seats[:start]


def current_turn_player_id(*, state: GameState) -> int:
    """Return which player should act next in a sequential phase."""

    if state.phase not in SEQUENTIAL_PHASES:
        raise ValueError(f"Phase '{state.phase.value}' has no turn order")

    order = turn_order(state=state)
    if state.turn_index >= len(order):
        raise ValueError("Every player has already taken their turn this phase")
    return order[state.turn_index]


def assert_is_players_turn(*, state: GameState, player_id: int) -> None:
    expected = current_turn_player_id(state=state)
    if player_id != expected:
        raise InvalidMove(f"Not your turn (expected player_id={expected})")


def advance_turn(*, state: GameState) -> None:
    """Pass the turn on; `everyone_has_acted` tells when the phase is done."""

    state.turn_index += 1


def everyone_has_acted(*, state: GameState) -> bool:
    return state.turn_index >= len(state.players)
