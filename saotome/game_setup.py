from __future__ import annotations

import random
from datetime import UTC, datetime
from uuid import uuid4

from saotome.config import GameSettings, get_settings
from saotome.models import CellType, GamePhase, GameState, LandCell, LivingCost, PlayerState, SoilQuality

# Seats further along the island farm poorer soil.
SOIL_BY_SEAT: tuple[SoilQuality, ...] = (
    SoilQuality.good,
    SoilQuality.good,
    SoilQuality.medium,
    SoilQuality.medium,
    SoilQuality.bad,
)

STARTING_COCOA: dict[SoilQuality, int] = {
    SoilQuality.good: 3,
    SoilQuality.medium: 2,
    SoilQuality.bad: 1,
}
STARTING_TIMBER = 1
STARTING_WORKERS = 2

CELLS_PER_PLAYER = 5
STARTING_FARMS = 1


def _now() -> datetime:
    return datetime.now(tz=UTC)


def validate_player_count(*, num_players: int, min_players: int = 2, max_players: int = 5) -> None:
    if num_players < min_players:
        raise ValueError(f"At least {min_players} players required")
    if num_players > max_players:
        raise ValueError(f"At most {max_players} players allowed")


def default_player_name(seat: int) -> str:
    return f"Farmer {seat + 1}"


def cell_id_for(*, seat: int, index: int) -> str:
    return f"farmland-{index + 1}-of-player-{seat + 1}"


def is_neighbor(a: int, b: int) -> bool:
    """Seats sit along a C-shaped island, so the first and last seat are not neighbours."""

    return abs(a - b) == 1


def build_initial_players(*, num_players: int, names: list[str] | None = None) -> list[PlayerState]:
    names = names or []
    players: list[PlayerState] = []
    for seat in range(num_players):
        soil = SOIL_BY_SEAT[seat]
        name = names[seat].strip() if seat < len(names) and names[seat].strip() else default_player_name(seat)
        players.append(
            PlayerState(
                player_id=seat,
                name=name,
                cocoa=STARTING_COCOA[soil],
                timber=STARTING_TIMBER,
                workers=STARTING_WORKERS,
                soil_quality=soil,
            )
        )
    return players


def build_initial_cells(players: list[PlayerState]) -> list[LandCell]:
    """Give every seat a region of cells; the first ones start as owned farms.

    Mutates `players` in place to record their owned cells.
    """

    cells: list[LandCell] = []
    for p in players:
        for index in range(CELLS_PER_PLAYER):
            cid = cell_id_for(seat=p.player_id, index=index)
            is_farm = index < STARTING_FARMS
            cells.append(
                LandCell(
                    cell_id=cid,
                    type=CellType.farm if is_farm else CellType.empty,
                    owner=p.player_id if is_farm else None,
                    region=p.player_id,
                    soil_quality=p.soil_quality,
                )
            )
            if is_farm:
                p.owned_cells.append(cid)
    return cells


def create_initial_state(
    *,
    num_players: int,
    seed: int | None = None,
    names: list[str] | None = None,
    settings: GameSettings | None = None,
) -> GameState:
    settings = settings or get_settings()
    validate_player_count(
        num_players=num_players,
        min_players=settings.min_players,
        max_players=settings.max_players,
    )

    if seed is None:
        seed = random.SystemRandom().randint(1, 2**31 - 1)

    players = build_initial_players(num_players=num_players, names=names)
    cells = build_initial_cells(players)
    now = _now()

    return GameState(
        game_id=uuid4(),
        created_at=now,
        last_updated_at=now,
        seed=seed,
        num_players=num_players,
        max_rounds=settings.max_rounds,
        tipping_points=settings.tipping_points,
        round=0,
        phase=GamePhase.registration,
        core_trees=20,
        buffer_trees=12,
        core_snails=10,
        buffer_snails=4,
        players=players,
        cells=cells,
        living_cost=LivingCost(timber=1, cocoa=1),
        tax_penalty=0,
    )
