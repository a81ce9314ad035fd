from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from saotome.errors import InvalidMove
from saotome.models import GamePhase, GameState, PlayerState


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """Inputs available to validators.

    Keep this tight and serializable-ish so we can safely log it.
    """

    game_id: str
    player_id: int
    move: str


def _find_player(*, state: GameState, player_id: int) -> PlayerState | None:
    return next((p for p in state.players if p.player_id == player_id), None)


class TurnValidator(ABC):
    """A small, composable validation unit for an incoming move."""

    @abstractmethod
    def validate(self, *, ctx: ValidationContext, state: GameState) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class CompletedGameValidator(TurnValidator):
    """Deny every move once the game is over."""

    def validate(self, *, ctx: ValidationContext, state: GameState) -> None:
        if state.phase == GamePhase.game_over:
            raise InvalidMove("Game is over")


@dataclass(frozen=True, slots=True)
class PhaseValidator(TurnValidator):
    """Validates current game phase for a given move."""

    allowed_phases: frozenset[GamePhase]

    def validate(self, *, ctx: ValidationContext, state: GameState) -> None:
        if state.phase not in self.allowed_phases:
            allowed = ",".join(sorted(p.value for p in self.allowed_phases))
            raise InvalidMove(f"Move '{ctx.move}' not allowed in phase '{state.phase.value}' (allowed: {allowed})")


@dataclass(frozen=True, slots=True)
class KnownPlayerValidator(TurnValidator):
    def validate(self, *, ctx: ValidationContext, state: GameState) -> None:
        if _find_player(state=state, player_id=ctx.player_id) is None:
            raise InvalidMove("Player not found")


@dataclass(frozen=True, slots=True)
class SequentialTurnValidator(TurnValidator):
    """In the action and secret phases, only the current turn player may act."""

    def validate(self, *, ctx: ValidationContext, state: GameState) -> None:
        from saotome.turn_processing.turns import SEQUENTIAL_PHASES, assert_is_players_turn

        if state.phase not in SEQUENTIAL_PHASES:
            return
        assert_is_players_turn(state=state, player_id=ctx.player_id)


@dataclass(frozen=True, slots=True)
class WorkerAvailableValidator(TurnValidator):
    """Each worker at home performs at most one action per round."""

    def validate(self, *, ctx: ValidationContext, state: GameState) -> None:
        player = _find_player(state=state, player_id=ctx.player_id)
        if player is None:
            raise InvalidMove("Player not found")
        if player.actions_taken >= player.workers:
            raise InvalidMove(f"No workers left this round ({player.actions_taken}/{player.workers} used)")


@dataclass(frozen=True, slots=True)
class SecretActionPendingValidator(TurnValidator):
    def validate(self, *, ctx: ValidationContext, state: GameState) -> None:
        player = _find_player(state=state, player_id=ctx.player_id)
        if player is None:
            raise InvalidMove("Player not found")
        if player.secret_action is not None:
            raise InvalidMove("Secret action already chosen this round")


@dataclass(frozen=True, slots=True)
class NotAdjournedValidator(TurnValidator):
    def validate(self, *, ctx: ValidationContext, state: GameState) -> None:
        if ctx.player_id in state.adjourned:
            raise InvalidMove("Already left the town hall")


@dataclass(frozen=True, slots=True)
class ValidatorPipeline:
    validators: tuple[TurnValidator, ...]

    def validate(self, *, ctx: ValidationContext, state: GameState) -> None:
        for v in self.validators:
            v.validate(ctx=ctx, state=state)


def _pipeline(*phases: GamePhase, extra: tuple[TurnValidator, ...] = ()) -> ValidatorPipeline:
    return ValidatorPipeline(
        validators=(
            CompletedGameValidator(),
            PhaseValidator(allowed_phases=frozenset(phases)),
            KnownPlayerValidator(),
            SequentialTurnValidator(),
            *extra,
        )
    )


_WORKER_MOVE = _pipeline(GamePhase.action, extra=(WorkerAvailableValidator(),))
_SECRET_MOVE = _pipeline(GamePhase.secret, extra=(SecretActionPendingValidator(),))


DEFAULT_MOVE_PIPELINES: dict[str, ValidatorPipeline] = {
    "register": _pipeline(GamePhase.registration),
    "set_ready": _pipeline(GamePhase.registration),
    "transfer_resource": _pipeline(GamePhase.town_hall, GamePhase.action),
    "adjourn": _pipeline(GamePhase.town_hall, extra=(NotAdjournedValidator(),)),
    "farm_cocoa": _WORKER_MOVE,
    "extend_farm": _WORKER_MOVE,
    "abandon_farm": _WORKER_MOVE,
    "log_buffer": _WORKER_MOVE,
    "hunt_snail": _WORKER_MOVE,
    "join_coop": _WORKER_MOVE,
    "retrieve_worker": _pipeline(GamePhase.action),
    "end_turn": _pipeline(GamePhase.action),
    "do_nothing": _SECRET_MOVE,
    "steal": _SECRET_MOVE,
    "illegal_log": _SECRET_MOVE,
}


def pipeline_for_move(move: str) -> ValidatorPipeline:
    pipe = DEFAULT_MOVE_PIPELINES.get(move)
    if pipe is None:
        raise InvalidMove(f"Unknown move: {move}")
    return pipe
