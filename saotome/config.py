from __future__ import annotations

import os
from dataclasses import dataclass


_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class GameSettings:
    max_rounds: int = 5
    tipping_points: bool = False
    min_players: int = 2
    max_players: int = 5
    log_level: str = "INFO"


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def load_settings() -> GameSettings:
    """Build settings from `SAOTOME_*` environment variables."""

    settings = GameSettings(
        max_rounds=_int_from_env("SAOTOME_MAX_ROUNDS", 5),
        tipping_points=os.environ.get("SAOTOME_TIPPING_POINTS", "").strip().casefold() in _TRUTHY,
        min_players=_int_from_env("SAOTOME_MIN_PLAYERS", 2),
        max_players=_int_from_env("SAOTOME_MAX_PLAYERS", 5),
        log_level=os.environ.get("SAOTOME_LOG_LEVEL", "INFO").upper(),
    )
    if settings.max_rounds < 1:
        raise ValueError("SAOTOME_MAX_ROUNDS must be at least 1")
    if not 2 <= settings.min_players <= settings.max_players <= 5:
        raise ValueError("player bounds must satisfy 2 <= min <= max <= 5")
    return settings


_SETTINGS: GameSettings | None = None


def get_settings() -> GameSettings:
    """Load settings once and cache them."""

    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = load_settings()
    return _SETTINGS


def reset_settings_for_tests() -> None:
    global _SETTINGS
    _SETTINGS = None
