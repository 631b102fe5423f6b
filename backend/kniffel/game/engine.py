"""Turn driver for a single room.

Every public function here validates its preconditions completely before
it writes anything, so a raised ``GameError`` leaves the room untouched.
Callers are expected to hold ``room.lock``.
"""
from __future__ import annotations

import random
import uuid
from typing import Sequence

from . import scoring
from .errors import (
    CategoryAlreadyUsed,
    InsufficientPlayers,
    InvalidInput,
    MustRollFirst,
    NoRollsRemaining,
    NotAuthorized,
    NotYourTurn,
    RoomFull,
    WrongPhase,
)
from .models import DICE_COUNT, ROLLS_PER_TURN, Difficulty, Phase, Player, Room


def current_player(room: Room) -> Player | None:
    if room.phase is Phase.WAITING or not room.players:
        return None
    return room.players[room.current_player_index]


def _touch(room: Room, action: dict | None) -> None:
    room.epoch += 1
    room.last_action = action


def _roll_fresh(room: Room, rng) -> None:
    room.dice = [rng.randint(1, 6) for _ in range(DICE_COUNT)]
    room.kept_mask = [False] * DICE_COUNT


def _reset_turn(room: Room, rng) -> None:
    room.rolls_left = ROLLS_PER_TURN
    _roll_fresh(room, rng)


def _require_host(room: Room, requester_id: str) -> None:
    player = room.get_player(requester_id)
    if player is None or not player.is_host:
        raise NotAuthorized()


def _require_turn(room: Room, player_id: str) -> Player:
    player = current_player(room)
    if room.phase is not Phase.PLAYING or player is None or player.id != player_id:
        raise NotYourTurn()
    return player


def _require_seat(room: Room) -> None:
    if room.phase is not Phase.WAITING:
        raise WrongPhase("Players can only join before the game starts")
    if len(room.players) >= room.max_players:
        raise RoomFull()


def standings(room: Room) -> list[dict]:
    # sorted() is stable, so equal totals keep join order
    ranked = sorted(room.players, key=lambda p: scoring.total_score(p.scores), reverse=True)
    return [
        {
            "id": p.id,
            "name": p.name,
            "isAI": p.is_ai,
            "totalScore": scoring.total_score(p.scores),
        }
        for p in ranked
    ]


def _finish_if_complete(room: Room) -> bool:
    if not room.players or not all(scoring.is_complete(p.scores) for p in room.players):
        return False
    room.phase = Phase.FINISHED
    room.rolls_left = 0
    room.standings = standings(room)
    room.winner = room.standings[0]
    return True


def _advance_turn(room: Room, rng) -> None:
    room.current_player_index = (room.current_player_index + 1) % len(room.players)
    if room.current_player_index == 0:
        room.current_round += 1
    _reset_turn(room, rng)


def check_seat(room: Room, player_id: str) -> None:
    """Raise unless ``player_id`` could take a seat in ``room`` right now."""
    _require_seat(room)
    if room.get_player(player_id) is not None:
        raise InvalidInput("Already in this room")


def add_player(room: Room, player_id: str, name: str) -> Player:
    check_seat(room, player_id)

    player = Player(id=player_id, name=name, is_host=not room.players)
    room.players.append(player)
    _touch(room, {"playerId": player_id, "kind": "join"})
    return player


def add_ai_player(room: Room, requester_id: str, difficulty: Difficulty) -> Player:
    _require_host(room, requester_id)
    _require_seat(room)

    room.ai_counter += 1
    player = Player(
        id=f"ai-{uuid.uuid4().hex[:8]}",
        name=f"Bot {room.ai_counter}",
        is_ai=True,
        difficulty=difficulty,
    )
    room.players.append(player)
    _touch(room, {"playerId": player.id, "kind": "join"})
    return player


def remove_player(room: Room, player_id: str, rng=None) -> Player | None:
    """Drop a player. Returns the removed player, or None if absent.

    Removing the current player mid-game advances the turn as if they had
    finished a turn without scoring. When the last human leaves the room is
    emptied, automated players included.
    """
    rng = rng or random
    idx = next((i for i, p in enumerate(room.players) if p.id == player_id), None)
    if idx is None:
        return None

    leaving = room.players.pop(idx)
    was_current = room.phase is Phase.PLAYING and idx == room.current_player_index

    if not room.has_humans():
        room.players.clear()
        room.current_player_index = 0
        _touch(room, {"playerId": leaving.id, "kind": "leave"})
        return leaving

    if leaving.is_host:
        rotated = room.players[idx:] + room.players[:idx]
        successor = next(p for p in rotated if not p.is_ai)
        successor.is_host = True

    if room.phase is Phase.PLAYING:
        if idx < room.current_player_index:
            room.current_player_index -= 1
        if not _finish_if_complete(room) and was_current:
            if idx >= len(room.players):
                room.current_player_index = 0
                room.current_round += 1
            _reset_turn(room, rng)
    elif room.phase is Phase.FINISHED and idx < room.current_player_index:
        room.current_player_index -= 1

    # the leaver may have held the last seat after the game ended
    if room.phase is not Phase.WAITING and room.current_player_index >= len(room.players):
        room.current_player_index = len(room.players) - 1

    _touch(room, {"playerId": leaving.id, "kind": "leave"})
    return leaving


def start_game(room: Room, requester_id: str, rng=None) -> None:
    rng = rng or random
    _require_host(room, requester_id)
    if room.phase is not Phase.WAITING:
        raise WrongPhase("Game already started")
    if len(room.players) < room.min_players:
        raise InsufficientPlayers(f"Need at least {room.min_players} players")

    for p in room.players:
        p.scores = {}
    room.phase = Phase.PLAYING
    room.current_player_index = 0
    room.current_round = 1
    room.standings = []
    room.winner = None
    _reset_turn(room, rng)
    _touch(room, {"playerId": requester_id, "kind": "start"})


def roll(room: Room, player_id: str, kept_mask: Sequence[bool], rng=None) -> list[int]:
    rng = rng or random
    _require_turn(room, player_id)
    if room.rolls_left <= 0:
        raise NoRollsRemaining()
    if len(kept_mask) != DICE_COUNT or not all(isinstance(k, bool) for k in kept_mask):
        raise InvalidInput(f"keptMask must hold {DICE_COUNT} booleans")

    room.dice = [d if keep else rng.randint(1, 6) for d, keep in zip(room.dice, kept_mask)]
    room.kept_mask = list(kept_mask)
    room.rolls_left -= 1
    _touch(room, {"playerId": player_id, "kind": "roll", "dice": list(room.dice)})
    return room.dice


def submit_score(room: Room, player_id: str, category: str, rng=None) -> int:
    rng = rng or random
    player = _require_turn(room, player_id)
    if category not in scoring.CATEGORIES:
        raise InvalidInput(f"Unknown category: {category}")
    if room.rolls_left >= ROLLS_PER_TURN:
        raise MustRollFirst()
    if category in player.scores:
        raise CategoryAlreadyUsed()

    points = scoring.score(room.dice, category)
    player.scores[category] = points

    if not _finish_if_complete(room):
        _advance_turn(room, rng)

    _touch(room, {"playerId": player_id, "kind": "score", "category": category, "score": points})
    return points


def restart_game(room: Room, requester_id: str) -> None:
    _require_host(room, requester_id)
    if room.phase is Phase.WAITING:
        raise WrongPhase("Game has not started")

    for p in room.players:
        p.scores = {}
    room.phase = Phase.WAITING
    room.current_player_index = 0
    room.current_round = 1
    room.rolls_left = ROLLS_PER_TURN
    room.dice = [1] * DICE_COUNT
    room.kept_mask = [False] * DICE_COUNT
    room.standings = []
    room.winner = None
    _touch(room, {"playerId": requester_id, "kind": "restart"})
