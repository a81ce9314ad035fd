from __future__ import annotations

from statemachine import State, StateMachine

from saotome.models import GamePhase, GameState


class GameFSM(StateMachine):
    """FSM wrapper around GameState.

    - phases: registration -> town hall -> action -> secret -> calculation -> (town hall | game over)
    - side effects of entering a phase live in `saotome.rounds`; the FSM only guards transitions.
    """

    awaiting_registration = State(
        GamePhase.registration.value,
        value=GamePhase.registration.value,
        initial=True,
    )
    town_hall = State(GamePhase.town_hall.value, value=GamePhase.town_hall.value)
    action_phase = State(GamePhase.action.value, value=GamePhase.action.value)
    secret_phase = State(GamePhase.secret.value, value=GamePhase.secret.value)
    calculation = State(GamePhase.calculation.value, value=GamePhase.calculation.value)
    game_over = State(GamePhase.game_over.value, value=GamePhase.game_over.value, final=True)

    registration_closed = awaiting_registration.to(town_hall)
    town_hall_adjourned = town_hall.to(action_phase)
    nightfall = action_phase.to(secret_phase)
    reveal = secret_phase.to(calculation)
    next_round = calculation.to(town_hall)
    finish = calculation.to(game_over)

    def __init__(self, game: GameState):
        self.game = game
        super().__init__(start_value=game.phase.value)

    def sync_phase_to_model(self) -> None:
        self.game.phase = GamePhase(str(self.current_state.value))
