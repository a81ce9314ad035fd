from __future__ import annotations

import logging

from saotome.models import GameState, LogEntry, LogLevel

logger = logging.getLogger(__name__)

_LOG_LEVELS: dict[LogLevel, int] = {
    LogLevel.info: logging.DEBUG,
    LogLevel.success: logging.DEBUG,
    LogLevel.warning: logging.INFO,
    LogLevel.danger: logging.INFO,
}


def record(state: GameState, message: str, level: LogLevel = LogLevel.info) -> LogEntry:
    """Append a player-facing line to the game log and mirror it to the server log."""

    entry = LogEntry(round=state.round, phase=state.phase, message=message, level=level)
    state.logs.append(entry)
    logger.log(_LOG_LEVELS[level], "game=%s round=%s phase=%s %s", state.game_id, state.round, state.phase.value, message)
    return entry
