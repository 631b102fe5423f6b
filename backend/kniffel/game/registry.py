from __future__ import annotations

import logging
import random
import string
from threading import RLock

from .errors import RoomNotFound
from .models import Room


logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


class RoomRegistry:
    """Owns the room-code -> Room map.

    The registry lock only guards the map itself; mutating a room's game
    state is serialized by that room's own lock.
    """

    def __init__(
        self,
        code_length: int = 4,
        min_players: int = 2,
        max_players: int = 6,
        rng: random.Random | None = None,
    ) -> None:
        self.code_length = code_length
        self.min_players = min_players
        self.max_players = max_players
        self._rng = rng or random.Random()
        self._lock = RLock()
        self._rooms: dict[str, Room] = {}

    def _generate_code(self) -> str:
        return "".join(self._rng.choices(CODE_ALPHABET, k=self.code_length))

    def create(self) -> Room:
        with self._lock:
            code = self._generate_code()
            while code in self._rooms:
                code = self._generate_code()

            room = Room(code=code, min_players=self.min_players, max_players=self.max_players)
            self._rooms[code] = room
            logger.info("[room-create] room=%s", code)
            return room

    def get(self, code: str) -> Room | None:
        with self._lock:
            return self._rooms.get((code or "").strip().upper())

    def require(self, code: str) -> Room:
        room = self.get(code)
        if room is None:
            raise RoomNotFound()
        return room

    def delete(self, code: str) -> bool:
        with self._lock:
            if code in self._rooms:
                del self._rooms[code]
                logger.info("[room-delete] room=%s", code)
                return True
            return False

    def list(self) -> list[Room]:
        with self._lock:
            return list(self._rooms.values())

    def find_by_player(self, player_id: str) -> Room | None:
        # Linear scan; room counts stay small for a single process.
        for room in self.list():
            if room.get_player(player_id) is not None:
                return room
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def __contains__(self, code: str) -> bool:
        return self.get(code) is not None
