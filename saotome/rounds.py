"""Round structure: what happens when the game enters each phase.

`advance` drives the phase machine as far as the current state allows, so a
single move can carry the game through several automatic phases (the
calculation phase, for instance, never waits for input).
"""

from __future__ import annotations

import logging

from saotome.core.events import record
from saotome.ecology import calculate_living_cost, tipping_point_penalty, total_snails, update_ecosystem
from saotome.fsm import GameFSM
from saotome.models import GamePhase, GameState, HistoryEntry, LogLevel, PlayerState
from saotome.secret_actions import resolve_secret_actions
from saotome.turn_processing.turns import everyone_has_acted

logger = logging.getLogger(__name__)

POPULATION_BOOM_ROUND = 2
FIRST_TAXED_ROUND = 2


def _pay_living_cost(state: GameState, player: PlayerState) -> None:
    """Feed and house every worker at home; the ones who cannot be paid leave for Portugal."""

    cost = state.living_cost
    unpaid = 0
    for _ in range(player.workers):
        if player.timber >= cost.timber and player.cocoa >= cost.cocoa:
            player.timber -= cost.timber
            player.cocoa -= cost.cocoa
        else:
            unpaid += 1

    if unpaid:
        player.workers -= unpaid
        player.in_portugal += unpaid
        record(state, f"{player.name} could not support {unpaid} worker(s), who left for Portugal", LogLevel.danger)

    if state.tax_penalty:
        paid = min(player.cocoa, state.tax_penalty)
        player.cocoa -= paid
        if paid:
            record(state, f"{player.name} paid {paid} cocoa in environmental tax", LogLevel.warning)


def begin_town_hall(state: GameState) -> None:
    record(state, f"Round {state.round} begins at the town hall")

    if state.round == POPULATION_BOOM_ROUND:
        for p in state.players:
            p.workers += 1
        record(state, "Population boom: every family gains a worker", LogLevel.success)

    if state.round >= FIRST_TAXED_ROUND:
        for p in sorted(state.players, key=lambda p: p.player_id):
            _pay_living_cost(state, p)

    by_id = {p.player_id: p for p in state.players}
    for pid in state.coop_applicants:
        state.coop_members.append(pid)
        by_id[pid].coop_round = state.round
        record(state, f"{by_id[pid].name} was admitted to the cooperative", LogLevel.success)
    state.coop_applicants = []

    state.adjourned = []


def begin_action(state: GameState) -> None:
    state.turn_index = 0
    for p in state.players:
        p.actions_taken = 0
    record(state, "The fields open: take your actions in turn")


def begin_secret(state: GameState) -> None:
    state.turn_index = 0
    record(state, "Night falls: choose your secret actions")


def run_calculation(state: GameState) -> None:
    resolve_secret_actions(state)
    update_ecosystem(state)

    snails = total_snails(state)
    state.living_cost = calculate_living_cost(snails)
    state.tax_penalty = tipping_point_penalty(snails) if state.tipping_points else 0
    if state.tax_penalty:
        record(state, f"Snail numbers are collapsing: environmental tax is now {state.tax_penalty} cocoa", LogLevel.warning)

    state.history.append(
        HistoryEntry(
            round=state.round,
            core_trees=state.core_trees,
            buffer_trees=state.buffer_trees,
            total_snails=snails,
            players_in_portugal=sum(1 for p in state.players if p.in_portugal > 0),
        )
    )

    for cell in state.cells:
        cell.farmed_this_round = False


def declare_winners(state: GameState) -> list[int]:
    best = max(p.cocoa for p in state.players)
    state.winner_ids = sorted(p.player_id for p in state.players if p.cocoa == best)
    names = ", ".join(p.name for p in state.players if p.player_id in state.winner_ids)
    record(state, f"Game over! Richest farmer(s): {names} with {best} cocoa", LogLevel.success)
    return state.winner_ids


def _start_next_round(state: GameState) -> None:
    state.round += 1
    state.first_player = (state.first_player + 1) % len(state.players)


def advance(state: GameState) -> list[GamePhase]:
    """Take every transition the state is ready for. Returns the phases entered, in order."""

    fsm = GameFSM(state)
    entered: list[GamePhase] = []

    while True:
        phase = state.phase
        if phase == GamePhase.registration and all(p.is_ready for p in state.players):
            fsm.registration_closed()
            fsm.sync_phase_to_model()
            state.round = 1
            begin_town_hall(state)
        elif phase == GamePhase.town_hall and len(set(state.adjourned)) >= len(state.players):
            fsm.town_hall_adjourned()
            fsm.sync_phase_to_model()
            begin_action(state)
        elif phase == GamePhase.action and everyone_has_acted(state=state):
            fsm.nightfall()
            fsm.sync_phase_to_model()
            begin_secret(state)
        elif phase == GamePhase.secret and all(p.secret_action is not None for p in state.players):
            fsm.reveal()
            fsm.sync_phase_to_model()
            run_calculation(state)
        elif phase == GamePhase.calculation:
            if state.round >= state.max_rounds:
                fsm.finish()
                fsm.sync_phase_to_model()
                declare_winners(state)
            else:
                fsm.next_round()
                fsm.sync_phase_to_model()
                _start_next_round(state)
                begin_town_hall(state)
        else:
            break

        logger.info("game=%s round=%s entered phase %s", state.game_id, state.round, state.phase.value)
        entered.append(state.phase)

    return entered
