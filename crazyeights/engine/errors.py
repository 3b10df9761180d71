"""Exception types for the game engine.

Rule violations are user-facing and recoverable: the engine turns them into
error responses and leaves the game state untouched. Invariant violations
are defects and propagate.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Category of a rejected operation."""

    DUPLICATE_JOIN = "duplicate_join"
    NOT_ENOUGH_PLAYERS = "not_enough_players"
    ALREADY_STARTED = "already_started"
    GAME_OVER = "game_over"
    TOO_MANY_PLAYERS = "too_many_players"
    NOT_STARTED = "not_started"
    NOT_YOUR_TURN = "not_your_turn"
    CARD_NOT_IN_HAND = "card_not_in_hand"
    NO_MATCH = "no_match"
    DECK_EMPTY = "deck_empty"


class GameError(Exception):
    """Base exception for all engine errors."""
    pass


class GameRuleError(GameError):
    """Raised when an operation is not allowed in the current state."""

    def __init__(self, kind: ErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)


class InvariantViolation(GameError):
    """Raised when the game state is internally inconsistent."""
    pass
