from __future__ import annotations

from saotome.models import CellType, GamePhase, GameState, PlayerState


def _sorted_players(state: GameState) -> list[PlayerState]:
    return sorted(state.players, key=lambda p: p.player_id)


def _ecosystem_line(state: GameState) -> str:
    return (
        f"Forest: core {state.core_trees} trees / {state.core_snails} snails, "
        f"buffer {state.buffer_trees} trees / {state.buffer_snails} snails."
    )


def _player_line(state: GameState, p: PlayerState) -> str:
    farms = sum(1 for c in state.cells if c.owner == p.player_id and c.type == CellType.farm)
    parts = [
        f"- {p.name} (seat {p.player_id + 1}, {p.soil_quality.value.lower()} soil):",
        f"{p.cocoa} cocoa, {p.timber} timber,",
        f"{p.workers} worker(s) at home,",
        f"{farms} farm(s)",
    ]
    if p.in_portugal:
        parts.append(f"[{p.in_portugal} in Portugal]")
    if p.player_id in state.coop_members:
        parts.append("[coop]")
    if p.player_id in state.winner_ids:
        parts.append("[winner]")
    return " ".join(parts)


def game_state_summary(state: GameState, *, last_logs: int = 5) -> str:
    """Deterministic multi-line summary of a match, for scripts and server logs."""

    if state.phase == GamePhase.game_over:
        header = f"Game over after round {state.round}."
    else:
        header = f"Round {state.round}/{state.max_rounds}, phase {state.phase.value}."

    lines = [
        header,
        _ecosystem_line(state),
        f"Living cost: {state.living_cost.timber} timber + {state.living_cost.cocoa} cocoa per worker"
        + (f", plus {state.tax_penalty} cocoa environmental tax." if state.tax_penalty else "."),
        "Players:",
    ]
    lines.extend(_player_line(state, p) for p in _sorted_players(state))

    if last_logs and state.logs:
        lines.append("Recent events:")
        lines.extend(f"  [r{e.round} {e.phase.value}] {e.message}" for e in state.logs[-last_logs:])

    return "\n".join(lines)
