"""Ecosystem arithmetic: cocoa yields, snail carrying capacity, reforestation, living costs.

Everything here except `update_ecosystem` is a pure function of its arguments.
"""

from __future__ import annotations

from dataclasses import dataclass

from saotome.models import GameState, LivingCost, SoilQuality, Zone


@dataclass(frozen=True, slots=True)
class ZoneRules:
    tree_cap: int
    snail_cap: int
    # Trees needed to feed one snail.
    trees_per_snail: int
    # Whole-percent regrowth of the trees still standing.
    regrowth_percent: int


ZONE_RULES: dict[Zone, ZoneRules] = {
    Zone.core: ZoneRules(tree_cap=20, snail_cap=10, trees_per_snail=2, regrowth_percent=20),
    Zone.buffer: ZoneRules(tree_cap=12, snail_cap=4, trees_per_snail=3, regrowth_percent=15),
}

COCOA_YIELD: dict[SoilQuality, int] = {
    SoilQuality.good: 3,
    SoilQuality.medium: 2,
    SoilQuality.bad: 1,
}

# (max total snails, extra cocoa per player), strictest first.
TIPPING_POINTS: tuple[tuple[int, int], ...] = (
    (4, 3),
    (7, 2),
    (11, 1),
)


def cocoa_yield(soil_quality: SoilQuality | str) -> int:
    return COCOA_YIELD[SoilQuality(soil_quality)]


def snail_population(snails: int, trees: int, zone: Zone | str) -> int:
    """Snails surviving in a zone given the trees left to feed them.

    Populations only shrink: the count is capped by `trees // trees_per_snail`
    and by the zone maximum.
    """

    rules = ZONE_RULES[Zone(zone)]
    supported = max(0, trees) // rules.trees_per_snail
    return max(0, min(snails, supported, rules.snail_cap))


def tree_regrowth(trees: int, zone: Zone | str) -> int:
    """Trees standing next round: `trees + floor(trees * rate)`, capped at the zone maximum."""

    rules = ZONE_RULES[Zone(zone)]
    trees = max(0, trees)
    regrown = trees * rules.regrowth_percent // 100
    return min(trees + regrown, rules.tree_cap)


def calculate_living_cost(total_snails: int) -> LivingCost:
    """Per-worker cost for the next round. Flat; snail collapse is taxed by `tipping_point_penalty`."""

    return LivingCost(timber=1, cocoa=1)


def tipping_point_penalty(total_snails: int) -> int:
    for threshold, extra in TIPPING_POINTS:
        if total_snails <= threshold:
            return extra
    return 0


def total_snails(state: GameState) -> int:
    return state.core_snails + state.buffer_snails


def update_ecosystem(state: GameState) -> None:
    """Apply one round of nature: snails starve first, then the forest regrows."""

    state.core_snails = snail_population(state.core_snails, state.core_trees, Zone.core)
    state.buffer_snails = snail_population(state.buffer_snails, state.buffer_trees, Zone.buffer)
    state.core_trees = tree_regrowth(state.core_trees, Zone.core)
    state.buffer_trees = tree_regrowth(state.buffer_trees, Zone.buffer)


def zone_trees(state: GameState, zone: Zone) -> int:
    return state.core_trees if zone == Zone.core else state.buffer_trees


def set_zone_trees(state: GameState, zone: Zone, trees: int) -> None:
    cap = ZONE_RULES[zone].tree_cap
    trees = max(0, min(trees, cap))
    if zone == Zone.core:
        state.core_trees = trees
    else:
        state.buffer_trees = trees


def zone_snails(state: GameState, zone: Zone) -> int:
    return state.core_snails if zone == Zone.core else state.buffer_snails


def set_zone_snails(state: GameState, zone: Zone, snails: int) -> None:
    cap = ZONE_RULES[zone].snail_cap
    snails = max(0, min(snails, cap))
    if zone == Zone.core:
        state.core_snails = snails
    else:
        state.buffer_snails = snails
