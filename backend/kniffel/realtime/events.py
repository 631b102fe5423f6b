"""Typed client requests.

Each Socket.IO event maps to exactly one request dataclass. ``parse``
turns the raw payload into that dataclass or raises ``InvalidInput``, so
handlers never poke at untyped dicts.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..game.errors import InvalidInput
from ..game.models import DICE_COUNT, Difficulty
from ..game.scoring import CATEGORIES


NAME_MAX_LEN = 16
CHAT_MAX_LEN = 200


def _text(payload: dict, key: str) -> str:
    value = payload.get(key, "")
    if not isinstance(value, str):
        raise InvalidInput(f"{key} must be a string")
    return value.strip()


def _room_code(payload: dict) -> str:
    code = _text(payload, "roomCode").upper()
    if not code:
        raise InvalidInput("roomCode is required")
    return code


def validate_name(name: str) -> str:
    n = (name or "").strip()
    if not n or len(n) > NAME_MAX_LEN:
        raise InvalidInput(f"Name must be 1-{NAME_MAX_LEN} characters")
    # Avoid obvious HTML/script injection.
    if "<" in n or ">" in n:
        raise InvalidInput("Name contains invalid characters")
    if any(ord(ch) < 32 for ch in n):
        raise InvalidInput("Name contains invalid characters")
    return n


@dataclass(frozen=True)
class CreateRoom:
    name: str

    @classmethod
    def from_payload(cls, payload: dict) -> "CreateRoom":
        return cls(name=validate_name(_text(payload, "name")))


@dataclass(frozen=True)
class JoinRoom:
    room_code: str
    name: str

    @classmethod
    def from_payload(cls, payload: dict) -> "JoinRoom":
        return cls(room_code=_room_code(payload), name=validate_name(_text(payload, "name")))


@dataclass(frozen=True)
class AddAutomatedPlayer:
    room_code: str
    difficulty: Difficulty

    @classmethod
    def from_payload(cls, payload: dict) -> "AddAutomatedPlayer":
        raw = _text(payload, "difficulty").lower() or Difficulty.MEDIUM.value
        try:
            difficulty = Difficulty(raw)
        except ValueError:
            raise InvalidInput(f"Unknown difficulty: {raw}") from None
        return cls(room_code=_room_code(payload), difficulty=difficulty)


@dataclass(frozen=True)
class RoomAction:
    """Payload carrying only a room code: start, restart, leave."""

    room_code: str

    @classmethod
    def from_payload(cls, payload: dict) -> "RoomAction":
        return cls(room_code=_room_code(payload))


@dataclass(frozen=True)
class RollDice:
    room_code: str
    kept_mask: tuple[bool, ...]

    @classmethod
    def from_payload(cls, payload: dict) -> "RollDice":
        raw = payload.get("keptMask", [False] * DICE_COUNT)
        if not isinstance(raw, list) or len(raw) != DICE_COUNT:
            raise InvalidInput(f"keptMask must be a list of {DICE_COUNT} booleans")
        if not all(isinstance(k, bool) for k in raw):
            raise InvalidInput(f"keptMask must be a list of {DICE_COUNT} booleans")
        return cls(room_code=_room_code(payload), kept_mask=tuple(raw))


@dataclass(frozen=True)
class SubmitScore:
    room_code: str
    category: str

    @classmethod
    def from_payload(cls, payload: dict) -> "SubmitScore":
        category = _text(payload, "category")
        if category not in CATEGORIES:
            raise InvalidInput(f"Unknown category: {category or '<empty>'}")
        return cls(room_code=_room_code(payload), category=category)


@dataclass(frozen=True)
class ChatMessage:
    room_code: str
    text: str

    @classmethod
    def from_payload(cls, payload: dict) -> "ChatMessage":
        text = _text(payload, "text")
        if not text or len(text) > CHAT_MAX_LEN:
            raise InvalidInput(f"Message must be 1-{CHAT_MAX_LEN} characters")
        return cls(room_code=_room_code(payload), text=text)


def parse(request_cls: type, data: Any):
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidInput("Payload must be an object")
    return request_cls.from_payload(data)
