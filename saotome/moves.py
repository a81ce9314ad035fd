"""Move handlers.

Every handler receives the authoritative state and the acting player after the
move's validator pipeline passed. Handlers check the move-specific rules
first and only then mutate, so a rejected move leaves the state untouched.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from saotome.core.events import record
from saotome.ecology import cocoa_yield, set_zone_snails, zone_snails
from saotome.errors import InvalidMove
from saotome.game_setup import is_neighbor
from saotome.models import (
    CellType,
    DoNothing,
    GameState,
    IllegalLogging,
    LandCell,
    LogLevel,
    PlayerState,
    Resource,
    Steal,
    Zone,
)
from saotome.turn_processing.turns import advance_turn

MAX_NAME_LENGTH = 32
EXTEND_FARM_TIMBER = 1
EXTEND_FARM_COCOA = 1
SNAIL_COCOA = 2
RETRIEVE_WORKER_COCOA = 2
# The cooperative opens in round 2; founding members join without applying.
COOP_FOUNDING_ROUND = 2

MoveHandler = Callable[..., None]


def _require_cell(state: GameState, cell_id: str) -> LandCell:
    cell = next((c for c in state.cells if c.cell_id == cell_id), None)
    if cell is None:
        raise InvalidMove(f"Unknown cell: {cell_id}")
    return cell


def _require_other_player(state: GameState, player: PlayerState, target_player_id: Any) -> PlayerState:
    target = next((p for p in state.players if p.player_id == target_player_id), None)
    if target is None:
        raise InvalidMove(f"Unknown player: {target_player_id}")
    if target.player_id == player.player_id:
        raise InvalidMove("Cannot target yourself")
    return target


def _parse_zone(zone: Any) -> Zone:
    try:
        return Zone(zone)
    except ValueError as e:
        raise InvalidMove(f"Unknown zone: {zone}") from e


def _spend_action(player: PlayerState) -> None:
    player.actions_taken += 1


def can_farm(state: GameState, player: PlayerState, cell: LandCell) -> bool:
    if cell.type != CellType.farm or cell.owner is None:
        return False
    if cell.owner == player.player_id or is_neighbor(cell.owner, player.player_id):
        return True
    return player.player_id in state.coop_members and cell.owner in state.coop_members


# -- registration -------------------------------------------------------------


def register(state: GameState, player: PlayerState, *, name: str) -> None:
    if not isinstance(name, str):
        raise InvalidMove("Name must be a string")
    name = name.strip()
    if not name or len(name) > MAX_NAME_LENGTH:
        raise InvalidMove(f"Name must be 1-{MAX_NAME_LENGTH} characters")
    old = player.name
    player.name = name
    record(state, f"{old} will be known as {name}")


def set_ready(state: GameState, player: PlayerState) -> None:
    player.is_ready = True
    record(state, f"{player.name} is ready")


# -- town hall ----------------------------------------------------------------


def transfer_resource(
    state: GameState,
    player: PlayerState,
    *,
    target_player_id: int,
    resource: Resource | str,
    amount: int,
) -> None:
    target = _require_other_player(state, player, target_player_id)
    try:
        resource = Resource(resource)
    except ValueError as e:
        raise InvalidMove(f"Unknown resource: {resource}") from e
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 1:
        raise InvalidMove("Amount must be a positive integer")

    if resource == Resource.cocoa:
        if player.cocoa < amount:
            raise InvalidMove("Not enough cocoa")
        player.cocoa -= amount
        target.cocoa += amount
    else:
        if player.timber < amount:
            raise InvalidMove("Not enough timber")
        player.timber -= amount
        target.timber += amount
    record(state, f"{player.name} gave {amount} {resource.value.lower()} to {target.name}", LogLevel.success)


def adjourn(state: GameState, player: PlayerState) -> None:
    state.adjourned.append(player.player_id)
    record(state, f"{player.name} left the town hall")


# -- action phase -------------------------------------------------------------


def farm_cocoa(state: GameState, player: PlayerState, *, cell_id: str) -> None:
    cell = _require_cell(state, cell_id)
    if cell.type != CellType.farm:
        raise InvalidMove("Only farms can be farmed")
    if cell.farmed_this_round:
        raise InvalidMove("This farm was already worked this round")
    if not can_farm(state, player, cell):
        raise InvalidMove("You may only farm your own land, a neighbour's, or a fellow coop member's")

    harvest = cocoa_yield(cell.soil_quality)
    cell.farmed_this_round = True
    player.cocoa += harvest
    _spend_action(player)
    record(state, f"{player.name} farmed {cell.cell_id} for {harvest} cocoa", LogLevel.success)


def extend_farm(state: GameState, player: PlayerState, *, cell_id: str) -> None:
    cell = _require_cell(state, cell_id)
    if cell.type != CellType.empty or cell.owner is not None:
        raise InvalidMove("Only empty, unowned land can be turned into a farm")
    if cell.region != player.player_id:
        raise InvalidMove("You can only extend into your own region")
    if player.timber < EXTEND_FARM_TIMBER or player.cocoa < EXTEND_FARM_COCOA:
        raise InvalidMove(f"Extending costs {EXTEND_FARM_TIMBER} timber and {EXTEND_FARM_COCOA} cocoa")

    player.timber -= EXTEND_FARM_TIMBER
    player.cocoa -= EXTEND_FARM_COCOA
    cell.type = CellType.farm
    cell.owner = player.player_id
    player.owned_cells.append(cell.cell_id)
    _spend_action(player)
    record(state, f"{player.name} cleared {cell.cell_id} for a new farm")


def abandon_farm(state: GameState, player: PlayerState, *, cell_id: str) -> None:
    cell = _require_cell(state, cell_id)
    if cell.type != CellType.farm or cell.owner != player.player_id:
        raise InvalidMove("You can only abandon a farm you own")
    if cell.farmed_this_round:
        raise InvalidMove("This farm was worked this round and cannot be abandoned")

    cell.type = CellType.empty
    cell.owner = None
    player.owned_cells.remove(cell.cell_id)
    _spend_action(player)
    record(state, f"{player.name} abandoned {cell.cell_id}")


def log_buffer(state: GameState, player: PlayerState) -> None:
    if state.buffer_trees <= 0:
        raise InvalidMove("No trees left in the buffer zone")
    state.buffer_trees -= 1
    player.timber += 1
    _spend_action(player)
    record(state, f"{player.name} logged one buffer-zone tree")


def hunt_snail(state: GameState, player: PlayerState, *, zone: Zone | str) -> None:
    zone = _parse_zone(zone)
    snails = zone_snails(state, zone)
    if snails <= 0:
        raise InvalidMove(f"No snails left in the {zone.value.lower()} zone")
    set_zone_snails(state, zone, snails - 1)
    player.cocoa += SNAIL_COCOA
    _spend_action(player)
    record(state, f"{player.name} hunted a snail in the {zone.value.lower()} zone for {SNAIL_COCOA} cocoa")


def join_coop(state: GameState, player: PlayerState) -> None:
    if state.round < COOP_FOUNDING_ROUND:
        raise InvalidMove(f"The cooperative opens in round {COOP_FOUNDING_ROUND}")
    if player.player_id in state.coop_members:
        raise InvalidMove("Already a cooperative member")
    if player.player_id in state.coop_applicants:
        raise InvalidMove("Application already pending")

    if state.round == COOP_FOUNDING_ROUND:
        state.coop_members.append(player.player_id)
        player.coop_round = state.round
        record(state, f"{player.name} co-founded the cooperative", LogLevel.success)
    else:
        state.coop_applicants.append(player.player_id)
        record(state, f"{player.name} applied to join the cooperative")
    _spend_action(player)


def retrieve_worker(state: GameState, player: PlayerState) -> None:
    if player.in_portugal <= 0:
        raise InvalidMove("No workers in Portugal")
    if player.cocoa < RETRIEVE_WORKER_COCOA:
        raise InvalidMove(f"Bringing a worker home costs {RETRIEVE_WORKER_COCOA} cocoa")
    player.cocoa -= RETRIEVE_WORKER_COCOA
    player.in_portugal -= 1
    player.workers += 1
    record(state, f"{player.name} brought a worker home from Portugal", LogLevel.success)


def end_turn(state: GameState, player: PlayerState) -> None:
    record(state, f"{player.name} ended their turn")
    advance_turn(state=state)


# -- secret phase -------------------------------------------------------------


def _choose_secret(state: GameState, player: PlayerState, action: DoNothing | Steal | IllegalLogging) -> None:
    player.secret_action = action
    # Only that a choice was made is public.
    record(state, f"{player.name} made their move in the dark")
    advance_turn(state=state)


def do_nothing(state: GameState, player: PlayerState) -> None:
    _choose_secret(state, player, DoNothing())


def steal(state: GameState, player: PlayerState, *, target_player_id: int, amount: int) -> None:
    target = _require_other_player(state, player, target_player_id)
    try:
        action = Steal(target_player_id=target.player_id, amount=amount)
    except ValidationError as e:
        raise InvalidMove("Steal amount must be between 1 and 3") from e
    _choose_secret(state, player, action)


def illegal_log(state: GameState, player: PlayerState, *, amount: int, zone: Zone | str = Zone.core) -> None:
    zone = _parse_zone(zone)
    try:
        action = IllegalLogging(zone=zone, amount=amount)
    except ValidationError as e:
        raise InvalidMove("Illegal logging amount must be between 1 and 3") from e
    _choose_secret(state, player, action)


MOVES: dict[str, MoveHandler] = {
    "register": register,
    "set_ready": set_ready,
    "transfer_resource": transfer_resource,
    "adjourn": adjourn,
    "farm_cocoa": farm_cocoa,
    "extend_farm": extend_farm,
    "abandon_farm": abandon_farm,
    "log_buffer": log_buffer,
    "hunt_snail": hunt_snail,
    "join_coop": join_coop,
    "retrieve_worker": retrieve_worker,
    "end_turn": end_turn,
    "do_nothing": do_nothing,
    "steal": steal,
    "illegal_log": illegal_log,
}
