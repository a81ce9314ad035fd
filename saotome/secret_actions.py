"""Night-time resolution of the secret actions chosen during the secret phase.

Illegal logging is resolved first (so fines land before anything is stolen),
then stealing, then every secret slot is cleared.
"""

from __future__ import annotations

import random
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from saotome.core.events import record
from saotome.ecology import set_zone_trees, zone_trees
from saotome.models import GameState, IllegalLogging, LogLevel, Steal

# Rangers spot roughly five trees' worth of forest per night.
RANGER_SIGHT = 5
ILLEGAL_LOGGING_FINE = 2


@dataclass(frozen=True, slots=True)
class LoggingOutcome:
    cut: int
    caught: bool
    trees_left: int


@dataclass(frozen=True, slots=True)
class StealDeclaration:
    thief_id: int
    target_id: int
    amount: int


@dataclass(frozen=True, slots=True)
class StealOutcome:
    thief_id: int
    target_id: int
    stolen: int
    collided: bool


def catch_chance(trees: int) -> float:
    if trees < RANGER_SIGHT:
        return 1.0
    return RANGER_SIGHT / trees


def resolve_illegal_logging(*, attempts: int, trees: int, rng: random.Random) -> LoggingOutcome:
    """Run `attempts` sequential cuts against a zone holding `trees` trees.

    Every cut is caught with the `catch_chance` of the forest as it stood when
    the logger set out. A catch ends the night and forfeits all of it: no
    timber is kept and the trees stay standing.
    """

    chance = catch_chance(trees)
    cut = 0
    for _ in range(attempts):
        if rng.random() < chance:
            return LoggingOutcome(cut=0, caught=True, trees_left=trees)
        cut += 1
    cut = min(cut, max(0, trees))
    return LoggingOutcome(cut=cut, caught=False, trees_left=trees - cut)


def resolve_steals(
    declarations: Iterable[StealDeclaration],
    cocoa_by_player: Mapping[int, int],
) -> list[StealOutcome]:
    """Arbitrate all steal declarations of one night at once.

    A target named by more than one thief notices them all: every one of those
    steals fails. The rest take `min(amount, target cocoa)`, applied in
    declaration order against running balances.
    """

    declarations = list(declarations)
    times_targeted = Counter(d.target_id for d in declarations)
    balances = dict(cocoa_by_player)

    outcomes: list[StealOutcome] = []
    for d in declarations:
        if times_targeted[d.target_id] > 1:
            outcomes.append(StealOutcome(thief_id=d.thief_id, target_id=d.target_id, stolen=0, collided=True))
            continue
        stolen = max(0, min(d.amount, balances.get(d.target_id, 0)))
        balances[d.target_id] = balances.get(d.target_id, 0) - stolen
        balances[d.thief_id] = balances.get(d.thief_id, 0) + stolen
        outcomes.append(StealOutcome(thief_id=d.thief_id, target_id=d.target_id, stolen=stolen, collided=False))
    return outcomes


def rng_for_round(state: GameState) -> random.Random:
    # Stable per (seed, round) so a stored match replays the same night.
    return random.Random(f"{state.seed}:{state.round}")


def _resolve_logging_phase(state: GameState, rng: random.Random) -> None:
    for player in sorted(state.players, key=lambda p: p.player_id):
        action = player.secret_action
        if not isinstance(action, IllegalLogging):
            continue

        outcome = resolve_illegal_logging(attempts=action.amount, trees=zone_trees(state, action.zone), rng=rng)
        set_zone_trees(state, action.zone, outcome.trees_left)
        player.timber += outcome.cut

        if outcome.caught:
            player.cocoa = max(0, player.cocoa - ILLEGAL_LOGGING_FINE)
            record(
                state,
                f"{player.name} was caught logging illegally by the rangers and fined {ILLEGAL_LOGGING_FINE} cocoa",
                LogLevel.danger,
            )
        if outcome.cut:
            record(state, f"{outcome.cut} tree(s) vanished from the {action.zone.value.lower()} forest overnight", LogLevel.warning)


def _resolve_stealing_phase(state: GameState) -> None:
    by_id = {p.player_id: p for p in state.players}
    declarations = [
        StealDeclaration(thief_id=p.player_id, target_id=p.secret_action.target_player_id, amount=p.secret_action.amount)
        for p in sorted(state.players, key=lambda p: p.player_id)
        if isinstance(p.secret_action, Steal) and p.secret_action.target_player_id in by_id
    ]
    outcomes = resolve_steals(declarations, {p.player_id: p.cocoa for p in state.players})

    noticed: set[int] = set()
    for outcome in outcomes:
        if outcome.collided:
            if outcome.target_id not in noticed:
                noticed.add(outcome.target_id)
                record(
                    state,
                    f"Several thieves crept up on {by_id[outcome.target_id].name} at once and spotted each other; nothing was taken",
                    LogLevel.warning,
                )
            continue
        if outcome.stolen:
            by_id[outcome.target_id].cocoa -= outcome.stolen
            by_id[outcome.thief_id].cocoa += outcome.stolen
            record(state, f"{by_id[outcome.target_id].name} woke up {outcome.stolen} cocoa poorer", LogLevel.danger)


def resolve_secret_actions(state: GameState, rng: random.Random | None = None) -> None:
    rng = rng or rng_for_round(state)
    _resolve_logging_phase(state, rng)
    _resolve_stealing_phase(state)
    for player in state.players:
        player.secret_action = None
