"""Game engine for Crazy Eights."""

from crazyeights.engine.card import Card, Color
from crazyeights.engine.deck import DECK_SIZE, HAND_SIZE, create_deck, full_deck
from crazyeights.engine.errors import ErrorKind, GameError, GameRuleError, InvariantViolation
from crazyeights.engine.game_state import GameConfig, GameState, GameStatus, Player, PlayerView
from crazyeights.engine.rules import (
    Action,
    DrawCard,
    JoinGame,
    PlayCard,
    Response,
    StartGame,
    apply_action,
    check_invariants,
    draw,
    get_legal_actions,
    initialize,
    join,
    play,
    project,
    start,
)

__all__ = [
    "Card",
    "Color",
    "DECK_SIZE",
    "HAND_SIZE",
    "create_deck",
    "full_deck",
    "ErrorKind",
    "GameError",
    "GameRuleError",
    "InvariantViolation",
    "GameConfig",
    "GameState",
    "GameStatus",
    "Player",
    "PlayerView",
    "Action",
    "DrawCard",
    "JoinGame",
    "PlayCard",
    "Response",
    "StartGame",
    "apply_action",
    "check_invariants",
    "draw",
    "get_legal_actions",
    "initialize",
    "join",
    "play",
    "project",
    "start",
]
