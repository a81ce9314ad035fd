from __future__ import annotations

from dataclasses import replace

import pytest

from saotome.config import GameSettings
from saotome.core.game_state_text import game_state_summary
from saotome.ecology import ZONE_RULES
from saotome.models import CellType, GamePhase, Zone
from saotome.simulation import play_random_game


@pytest.mark.parametrize("seed", [0, 1, 7, 42])
def test_random_game_finishes_with_sane_state(seed: int) -> None:
    state = play_random_game(num_players=5, seed=seed)

    assert state.phase == GamePhase.game_over
    assert [h.round for h in state.history] == [1, 2, 3, 4, 5]
    assert state.winner_ids

    best = max(p.cocoa for p in state.players)
    assert all(state.players[pid].cocoa == best for pid in state.winner_ids)

    assert 0 <= state.core_trees <= ZONE_RULES[Zone.core].tree_cap
    assert 0 <= state.buffer_trees <= ZONE_RULES[Zone.buffer].tree_cap
    assert 0 <= state.core_snails <= ZONE_RULES[Zone.core].snail_cap
    assert 0 <= state.buffer_snails <= ZONE_RULES[Zone.buffer].snail_cap

    for p in state.players:
        assert p.cocoa >= 0 and p.timber >= 0
        assert p.workers >= 0 and p.in_portugal >= 0
        assert p.secret_action is None
        owned = sorted(c.cell_id for c in state.cells if c.owner == p.player_id)
        assert owned == sorted(p.owned_cells)

    assert all(c.owner is None for c in state.cells if c.type == CellType.empty)


def test_same_seed_same_game() -> None:
    a = play_random_game(num_players=4, seed=5)
    b = play_random_game(num_players=4, seed=5)

    assert a.history == b.history
    assert [p.model_dump() for p in a.players] == [p.model_dump() for p in b.players]
    assert [e.message for e in a.logs] == [e.message for e in b.logs]


def test_two_player_game_with_tipping_points(settings: GameSettings) -> None:
    state = play_random_game(num_players=2, seed=3, settings=replace(settings, max_rounds=3, tipping_points=True))

    assert state.phase == GamePhase.game_over
    assert len(state.history) == 3
    assert state.tipping_points is True


def test_summary_of_finished_game() -> None:
    state = play_random_game(num_players=3, seed=9)

    text = game_state_summary(state, last_logs=3)
    lines = text.splitlines()

    assert lines[0] == "Game over after round 5."
    assert lines[1].startswith("Forest: core ")
    assert "Players:" in lines
    assert sum(1 for line in lines if line.startswith("- ")) == 3
    assert "[winner]" in text
    assert lines[-4] == "Recent events:"
    assert text == game_state_summary(state, last_logs=3)
