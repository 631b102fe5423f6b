from __future__ import annotations


class GameError(Exception):
    """A rejected action. Raised before any room state is touched."""

    kind = "game_error"
    default_message = "Action rejected"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class RoomNotFound(GameError):
    kind = "room_not_found"
    default_message = "Room not found"


class RoomFull(GameError):
    kind = "room_full"
    default_message = "Room is full"


class NotAuthorized(GameError):
    kind = "not_authorized"
    default_message = "Only the host may do that"


class InsufficientPlayers(GameError):
    kind = "insufficient_players"
    default_message = "Not enough players to start"


class NotYourTurn(GameError):
    kind = "not_your_turn"
    default_message = "It is not your turn"


class NoRollsRemaining(GameError):
    kind = "no_rolls_remaining"
    default_message = "No rolls left this turn"


class MustRollFirst(GameError):
    kind = "must_roll_first"
    default_message = "Roll at least once before scoring"


class CategoryAlreadyUsed(GameError):
    kind = "category_already_used"
    default_message = "Category already filled"


class InvalidInput(GameError):
    kind = "invalid_input"
    default_message = "Invalid payload"


class WrongPhase(GameError):
    kind = "wrong_phase"
    default_message = "Not allowed in the current game phase"
