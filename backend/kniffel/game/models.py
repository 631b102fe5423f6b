from __future__ import annotations

import enum
from dataclasses import dataclass, field
from threading import RLock


DICE_COUNT = 5
ROLLS_PER_TURN = 3


class Phase(str, enum.Enum):
    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


class Difficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass
class Player:
    id: str
    name: str
    is_host: bool = False
    is_ai: bool = False
    difficulty: Difficulty | None = None
    # category -> points; a key is written once and never changed
    scores: dict[str, int] = field(default_factory=dict)


@dataclass
class Room:
    code: str
    min_players: int = 2
    max_players: int = 6
    phase: Phase = Phase.WAITING
    players: list[Player] = field(default_factory=list)
    current_player_index: int = 0
    current_round: int = 1
    rolls_left: int = ROLLS_PER_TURN
    dice: list[int] = field(default_factory=lambda: [1] * DICE_COUNT)
    kept_mask: list[bool] = field(default_factory=lambda: [False] * DICE_COUNT)
    # Bumped on every applied mutation; deferred AI steps compare against it.
    epoch: int = 0
    ai_pending_epoch: int | None = None
    ai_counter: int = 0
    last_action: dict | None = None
    standings: list[dict] = field(default_factory=list)
    winner: dict | None = None
    lock: RLock = field(default_factory=RLock, repr=False, compare=False)

    def get_player(self, player_id: str) -> Player | None:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def has_humans(self) -> bool:
        return any(not p.is_ai for p in self.players)
