from __future__ import annotations

import logging
from typing import Callable


logger = logging.getLogger(__name__)

GameOverHook = Callable[[dict], None]


def log_game_result(result: dict) -> None:
    winner = result.get("winner") or {}
    logger.info(
        "[game-over] room=%s winner=%s score=%s players=%d",
        result.get("roomCode"),
        winner.get("name"),
        winner.get("totalScore"),
        len(result.get("standings", [])),
    )


def notify(hooks: list[GameOverHook], result: dict) -> None:
    """Hand a finished game to the history collaborators. Never raises."""
    for hook in hooks:
        try:
            hook(result)
        except Exception:
            logger.exception("[history-hook] room=%s hook=%r failed", result.get("roomCode"), hook)
