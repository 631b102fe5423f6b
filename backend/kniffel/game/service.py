from __future__ import annotations

import logging
import random
from typing import Any, Callable, Mapping

from . import ai, engine, history, scoring
from .errors import GameError, RoomNotFound
from .models import Difficulty, Phase, Room
from .registry import RoomRegistry


logger = logging.getLogger(__name__)

Emit = Callable[..., Any]
SeatCallback = Callable[[Room], None]


def room_snapshot(room: Room) -> dict:
    current = engine.current_player(room)
    players = []
    for p in room.players:
        players.append(
            {
                "id": p.id,
                "name": p.name,
                "isHost": p.is_host,
                "isAI": p.is_ai,
                "difficulty": p.difficulty.value if p.difficulty else None,
                "scores": dict(p.scores),
                "upperSum": scoring.upper_sum(p.scores),
                "upperBonus": scoring.upper_bonus(p.scores),
                "total": scoring.total_score(p.scores),
            }
        )

    return {
        "roomCode": room.code,
        "phase": room.phase.value,
        "players": players,
        "currentPlayerIndex": room.current_player_index,
        "currentPlayerId": current.id if current else None,
        "currentRound": room.current_round,
        "rollsLeft": room.rolls_left,
        "dice": list(room.dice),
        "keptMask": list(room.kept_mask),
        "minPlayers": room.min_players,
        "maxPlayers": room.max_players,
        "lastAction": dict(room.last_action) if room.last_action else None,
        "standings": list(room.standings),
        "winner": room.winner,
    }


def _background(fn, *args):
    fn(*args)


class GameService:
    """Applies player actions to rooms and publishes the results.

    Every mutation runs under the target room's lock, and the resulting
    snapshot is emitted before the lock is released, so observers see
    states in the order they were applied. Automated turns are scheduled
    after the lock is dropped and re-validated against ``room.epoch``
    when they fire.
    """

    def __init__(
        self,
        registry: RoomRegistry,
        emit: Emit,
        spawn: Callable[..., Any] = _background,
        sleep: Callable[[float], Any] | None = None,
        ai_delays: Mapping[Difficulty, float] | None = None,
        ai_inline: bool = False,
        hooks: list[history.GameOverHook] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.registry = registry
        self._emit = emit
        self._spawn = spawn
        self._sleep = sleep
        self.ai_delays = dict(ai_delays or ai.DEFAULT_DELAYS)
        self.ai_inline = ai_inline
        self.hooks = list(hooks) if hooks is not None else [history.log_game_result]
        self._rng = rng or random.Random()

    # -- lookups -----------------------------------------------------------

    def get_room(self, code: str) -> Room | None:
        return self.registry.get(code)

    def snapshot(self, code: str) -> dict:
        room = self.registry.require(code)
        with room.lock:
            return room_snapshot(room)

    # -- actions -----------------------------------------------------------

    def create_room(self, player_id: str, name: str, on_seated: SeatCallback | None = None) -> dict:
        room = self.registry.create()
        with room.lock:
            engine.add_player(room, player_id, name)
            if on_seated:
                on_seated(room)
            snapshot = self._publish_locked(room)
        logger.info("[room-host] room=%s host=%s", room.code, player_id)
        return snapshot

    def check_joinable(self, code: str, player_id: str) -> Room:
        """Validate a join against the target room without changing anything."""
        room = self.registry.require(code)
        with room.lock:
            engine.check_seat(room, player_id)
        return room

    def join_room(self, code: str, player_id: str, name: str, on_seated: SeatCallback | None = None) -> dict:
        return self._run(code, engine.add_player, player_id, name, on_seated=on_seated)

    def add_ai_player(self, code: str, requester_id: str, difficulty: Difficulty) -> dict:
        return self._run(code, engine.add_ai_player, requester_id, difficulty)

    def start_game(self, code: str, requester_id: str) -> dict:
        return self._run(code, engine.start_game, requester_id, self._rng)

    def roll(self, code: str, player_id: str, kept_mask: list[bool]) -> dict:
        return self._run(code, engine.roll, player_id, kept_mask, self._rng)

    def submit_score(self, code: str, player_id: str, category: str) -> dict:
        return self._run(code, engine.submit_score, player_id, category, self._rng)

    def restart_game(self, code: str, requester_id: str) -> dict:
        return self._run(code, engine.restart_game, requester_id)

    def leave(self, player_id: str, code: str | None = None) -> str | None:
        """Remove a player from their room. Returns the room code, if any."""
        room = self.registry.get(code) if code else self.registry.find_by_player(player_id)
        if room is None:
            return None

        with room.lock:
            was_finished = room.phase is Phase.FINISHED
            if engine.remove_player(room, player_id, self._rng) is None:
                return None
            logger.info("[room-leave] room=%s player=%s remaining=%d", room.code, player_id, len(room.players))

            if not room.players:
                self.registry.delete(room.code)
                return room.code

            self._publish_locked(room, was_finished)

        self._schedule_ai(room)
        return room.code

    # -- internals ---------------------------------------------------------

    def _run(self, code: str, action, *args, on_seated: SeatCallback | None = None) -> dict:
        room = self.registry.require(code)
        with room.lock:
            # The room may have been emptied and dropped while we waited.
            if self.registry.get(room.code) is not room:
                raise RoomNotFound()
            was_finished = room.phase is Phase.FINISHED
            action(room, *args)
            if on_seated:
                on_seated(room)
            snapshot = self._publish_locked(room, was_finished)

        self._schedule_ai(room)
        return snapshot

    def _publish_locked(self, room: Room, was_finished: bool = False) -> dict:
        snapshot = room_snapshot(room)
        self._emit("room:state", snapshot, to=room.code)
        if not was_finished and room.phase is Phase.FINISHED:
            self._game_over_locked(room)
        return snapshot

    def _game_over_locked(self, room: Room) -> None:
        result = {
            "roomCode": room.code,
            "winner": room.winner,
            "standings": list(room.standings),
        }
        self._emit("game:over", result, to=room.code)
        if self.ai_inline:
            history.notify(self.hooks, result)
        else:
            self._spawn(history.notify, self.hooks, result)

    def _schedule_ai(self, room: Room) -> None:
        with room.lock:
            if room.phase is not Phase.PLAYING:
                return
            player = engine.current_player(room)
            if player is None or not player.is_ai:
                return
            if room.ai_pending_epoch == room.epoch:
                return
            room.ai_pending_epoch = room.epoch
            epoch = room.epoch
            delay = ai.think_delay(player.difficulty, self.ai_delays)
            player_id = player.id

        logger.debug("[ai-schedule] room=%s player=%s epoch=%d delay=%.2fs", room.code, player_id, epoch, delay)
        if self.ai_inline:
            self._ai_step(room.code, player_id, epoch, delay)
        else:
            self._spawn(self._ai_step, room.code, player_id, epoch, delay)

    def _ai_step(self, code: str, player_id: str, epoch: int, delay: float) -> None:
        if delay > 0 and self._sleep is not None:
            self._sleep(delay)

        room = self.registry.get(code)
        if room is None:
            logger.info("[ai-skip] room=%s player=%s reason=room_gone", code, player_id)
            return

        with room.lock:
            player = engine.current_player(room)
            if (
                self.registry.get(code) is not room
                or room.phase is not Phase.PLAYING
                or room.epoch != epoch
                or player is None
                or player.id != player_id
            ):
                logger.info("[ai-skip] room=%s player=%s epoch=%d reason=stale", code, player_id, epoch)
                return

            was_finished = room.phase is Phase.FINISHED
            try:
                if room.rolls_left > 0:
                    mask = ai.choose_keep_mask(room.dice, player.difficulty, self._rng)
                    engine.roll(room, player_id, mask, self._rng)
                    logger.debug("[ai-roll] room=%s player=%s dice=%s", code, player_id, room.dice)
                else:
                    category = ai.choose_category(room.dice, player.scores, player.difficulty, self._rng)
                    points = engine.submit_score(room, player_id, category, self._rng)
                    logger.info("[ai-score] room=%s player=%s category=%s points=%d", code, player_id, category, points)
            except GameError as exc:
                logger.warning("[ai-reject] room=%s player=%s error=%s", code, player_id, exc.kind)
                return

            self._publish_locked(room, was_finished)

        self._schedule_ai(room)
