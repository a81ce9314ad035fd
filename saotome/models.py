from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class SoilQuality(StrEnum):
    good = "GOOD"
    medium = "MEDIUM"
    bad = "BAD"


class Zone(StrEnum):
    core = "CORE"
    buffer = "BUFFER"


class CellType(StrEnum):
    farm = "FARM"
    empty = "EMPTY"


class Resource(StrEnum):
    cocoa = "COCOA"
    timber = "TIMBER"


class GamePhase(StrEnum):
    registration = "registration"
    town_hall = "town_hall"
    action = "action"
    secret = "secret"
    calculation = "calculation"
    game_over = "game_over"


class LogLevel(StrEnum):
    info = "info"
    warning = "warning"
    danger = "danger"
    success = "success"


class DoNothing(BaseModel):
    type: Literal["DO_NOTHING"] = "DO_NOTHING"


class Steal(BaseModel):
    type: Literal["STEAL"] = "STEAL"
    target_player_id: int
    amount: int = Field(..., ge=1, le=3)


class IllegalLogging(BaseModel):
    type: Literal["ILLEGAL_LOGGING"] = "ILLEGAL_LOGGING"
    zone: Zone = Zone.core
    amount: int = Field(..., ge=1, le=3)


SecretAction = Annotated[DoNothing | Steal | IllegalLogging, Field(discriminator="type")]


class LandCell(BaseModel):
    cell_id: str
    type: CellType
    owner: int | None = None

    # Seat whose plot area holds this cell; extending is only allowed inside your own region.
    region: int
    soil_quality: SoilQuality

    # Each farm can be worked once per round, by whoever gets there first.
    farmed_this_round: bool = False

    @model_validator(mode="after")
    def _only_farms_have_owners(self) -> "LandCell":
        if self.owner is not None and self.type != CellType.farm:
            raise ValueError(f"cell {self.cell_id} is {self.type.value} but has owner {self.owner}")
        return self


class PlayerState(BaseModel):
    player_id: int
    name: str
    is_ready: bool = False

    cocoa: int = Field(default=0, ge=0)
    timber: int = Field(default=0, ge=0)

    # Workers at home; each one is one action per round and one living cost per round.
    workers: int = Field(default=2, ge=0)
    # Workers who emigrated because their living cost could not be paid.
    in_portugal: int = Field(default=0, ge=0)
    actions_taken: int = Field(default=0, ge=0)

    # Hidden from other players until the calculation phase resolves it.
    secret_action: SecretAction | None = None

    # Round the player joined the cooperative (0 = not a member).
    coop_round: int = 0

    soil_quality: SoilQuality
    owned_cells: list[str] = Field(default_factory=list)


class LivingCost(BaseModel):
    timber: int = 1
    cocoa: int = 1


class HistoryEntry(BaseModel):
    round: int
    core_trees: int
    buffer_trees: int
    total_snails: int
    players_in_portugal: int


class LogEntry(BaseModel):
    round: int
    phase: GamePhase
    message: str
    level: LogLevel = LogLevel.info


class GameState(BaseModel):
    game_id: UUID
    created_at: datetime
    last_updated_at: datetime

    # For reproducibility/debugging; secret action rolls are derived from it.
    seed: int

    num_players: int
    max_rounds: int = 5
    # Tiered tax penalty when snail populations collapse. Off by default.
    tipping_points: bool = False

    round: int = 0
    phase: GamePhase = GamePhase.registration

    core_trees: int = 20
    buffer_trees: int = 12
    core_snails: int = 10
    buffer_snails: int = 4

    players: list[PlayerState]
    cells: list[LandCell] = Field(default_factory=list)

    coop_members: list[int] = Field(default_factory=list)
    coop_applicants: list[int] = Field(default_factory=list)

    living_cost: LivingCost = Field(default_factory=LivingCost)
    # Extra cocoa each player pays at the town hall (tipping points).
    tax_penalty: int = 0

    # Seat that acts first in the sequential phases; rotates every round.
    first_player: int = 0
    # Position in the turn order during the action and secret phases.
    turn_index: int = 0
    # Players who are done discussing at the town hall.
    adjourned: list[int] = Field(default_factory=list)

    logs: list[LogEntry] = Field(default_factory=list)
    history: list[HistoryEntry] = Field(default_factory=list)

    winner_ids: list[int] = Field(default_factory=list)
