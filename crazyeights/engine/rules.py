"""Crazy Eights rules: the game state machine.

Every operation checks all of its guards before touching the state, so a
rejected call leaves the game exactly as it was. Callers must serialize
operations on a given GameState.
"""

import functools
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Callable, List, Optional, ParamSpec, Union

from crazyeights.engine.card import Card
from crazyeights.engine.deck import (
    DECK_SIZE,
    can_deal,
    create_deck,
    deal_hand,
    draw_one,
    full_deck,
)
from crazyeights.engine.errors import ErrorKind, GameRuleError, InvariantViolation
from crazyeights.engine.game_state import (
    GameConfig,
    GameState,
    GameStatus,
    Player,
    PlayerView,
)

logger = logging.getLogger(__name__)

P = ParamSpec("P")


@dataclass
class JoinGame:
    """Request: join the lobby."""

    pass


@dataclass
class StartGame:
    """Request: deal and start the game."""

    pass


@dataclass
class PlayCard:
    """Action: play a card from hand onto the pile."""

    card: Card


@dataclass
class DrawCard:
    """Action: draw the top card of the deck."""

    pass


Action = Union[PlayCard, DrawCard]


@dataclass(frozen=True)
class Response:
    """Outcome of an operation. ``kind`` and ``message`` are None on success."""

    kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @property
    def is_ok(self) -> bool:
        return self.kind is None

    @classmethod
    def ok(cls) -> "Response":
        return cls()

    @classmethod
    def error(cls, kind: ErrorKind, message: str) -> "Response":
        return cls(kind=kind, message=message)


def _responds(op: Callable[P, None]) -> Callable[P, Response]:
    """Turn rule violations raised by ``op`` into error responses.

    The decorated operation returns a Response, never None.
    """

    @functools.wraps(op)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Response:
        try:
            op(*args, **kwargs)
        except GameRuleError as e:
            logger.debug("%s rejected: %s", op.__name__, e.message)
            return Response.error(e.kind, e.message)
        return Response.ok()

    return wrapper


def cards_equal(card1: Card, card2: Card) -> bool:
    return card1.color == card2.color and card1.number == card2.number


def initialize(config: Optional[GameConfig] = None) -> GameState:
    """Create a lobby with a freshly shuffled deck and no players."""
    rng = (config or GameConfig()).make_rng()
    return GameState(
        status=GameStatus.INITIALIZED,
        players=[],
        deck=create_deck(rng),
        pile=[],
        turn=None,
        winner=None,
        rng=rng,
    )


def next_turn(state: GameState) -> None:
    """Pass the turn to the next player in join order."""
    state.turn = (_turn_index(state) + 1) % len(state.players)


def _turn_index(state: GameState) -> int:
    if state.turn is None or not 0 <= state.turn < len(state.players):
        raise InvariantViolation(f"Invalid turn index {state.turn!r} while {state.status.value}")
    return state.turn


def _require_in_progress(state: GameState) -> None:
    if state.status == GameStatus.INITIALIZED:
        raise GameRuleError(ErrorKind.NOT_STARTED, "Game has not started yet!")
    if state.status == GameStatus.OVER:
        raise GameRuleError(ErrorKind.GAME_OVER, "Game Over!")


def _require_turn(state: GameState, user_id: str) -> Player:
    player = state.players[_turn_index(state)]
    if player.id != user_id:
        raise GameRuleError(ErrorKind.NOT_YOUR_TURN, "Not your turn!")
    return player


@_responds
def join(state: GameState, user_id: str, request: Optional[JoinGame] = None) -> None:
    """Add ``user_id`` to the lobby. Join order is turn order."""
    if state.find_player(user_id) is not None:
        raise GameRuleError(ErrorKind.DUPLICATE_JOIN, "Already joined the game!")
    if state.status == GameStatus.IN_PROGRESS:
        raise GameRuleError(ErrorKind.ALREADY_STARTED, "Game is already in progress!")
    if state.status == GameStatus.OVER:
        raise GameRuleError(ErrorKind.GAME_OVER, "Game is over! Create a new lobby")

    state.players.append(Player(id=user_id, hand=[]))
    logger.debug("%s joined (%d players)", user_id, len(state.players))


@_responds
def start(state: GameState, user_id: str, request: Optional[StartGame] = None) -> None:
    """Deal the hands and the opening pile card, then pick who goes first."""
    if len(state.players) < 2:
        raise GameRuleError(ErrorKind.NOT_ENOUGH_PLAYERS, "Not enough players to start game!")
    if state.status == GameStatus.IN_PROGRESS:
        raise GameRuleError(ErrorKind.ALREADY_STARTED, "Game is already in progress!")
    if state.status == GameStatus.OVER:
        raise GameRuleError(ErrorKind.GAME_OVER, "Game is over! Create a new lobby")
    if not can_deal(len(state.players), state.deck):
        raise GameRuleError(ErrorKind.TOO_MANY_PLAYERS, "Too many players!")

    for player in state.players:
        player.hand = deal_hand(state.deck)
    state.pile.insert(0, draw_one(state.deck))

    state.turn = state.rng.randrange(len(state.players))
    state.status = GameStatus.IN_PROGRESS
    logger.info(
        "Game started by %s: %d players, %s goes first, top card %s",
        user_id,
        len(state.players),
        state.players[state.turn].id,
        state.pile[0],
    )


@_responds
def play(state: GameState, user_id: str, request: PlayCard) -> None:
    """Play ``request.card`` from the turn holder's hand onto the pile."""
    _require_in_progress(state)
    player = _require_turn(state, user_id)
    card = request.card

    index = next((i for i, c in enumerate(player.hand) if cards_equal(c, card)), None)
    if index is None:
        raise GameRuleError(ErrorKind.CARD_NOT_IN_HAND, "You don't have this card!")

    top = state.top_of_pile()
    if top is None:
        raise InvariantViolation("Pile is empty while game is in progress")
    if not card.matches(top):
        raise GameRuleError(ErrorKind.NO_MATCH, "Card doesn't match the last card on the pile!")

    # Remove one instance only; duplicates stay in hand
    state.pile.insert(0, player.hand.pop(index))

    if not player.hand:
        state.winner = user_id
        state.status = GameStatus.OVER
        logger.info("%s played %s and won", user_id, card)
        return

    next_turn(state)
    logger.debug("%s played %s", user_id, card)


@_responds
def draw(state: GameState, user_id: str, request: Optional[DrawCard] = None) -> None:
    """Move the top card of the deck into the turn holder's hand."""
    _require_in_progress(state)
    if not state.deck:
        # No reshuffle of the pile into the deck
        raise GameRuleError(ErrorKind.DECK_EMPTY, "Deck is empty!")
    player = _require_turn(state, user_id)

    player.hand.append(draw_one(state.deck))
    next_turn(state)
    logger.debug("%s drew a card (%d left in deck)", user_id, len(state.deck))


def project(state: GameState, user_id: str) -> PlayerView:
    """Return what ``user_id`` is allowed to see."""
    return PlayerView.from_state(state, user_id)


def get_legal_actions(state: GameState, user_id: str) -> List[Action]:
    """Return all actions ``user_id`` may take right now."""
    if state.status != GameStatus.IN_PROGRESS:
        return []
    holder = state.current_player()
    if holder is None or holder.id != user_id:
        return []

    top = state.top_of_pile()
    actions: List[Action] = []
    seen = set()
    for card in holder.hand:
        if card in seen or top is None or not card.matches(top):
            continue
        seen.add(card)
        actions.append(PlayCard(card=card))

    if state.deck:
        actions.append(DrawCard())
    return actions


def apply_action(state: GameState, user_id: str, action: Action) -> Response:
    """Dispatch a play or draw request."""
    if isinstance(action, PlayCard):
        return play(state, user_id, action)
    if isinstance(action, DrawCard):
        return draw(state, user_id, action)
    raise TypeError(f"Unknown action: {action!r}")


def check_invariants(state: GameState) -> None:
    """Raise InvariantViolation if ``state`` is inconsistent.

    Checks card conservation across hands, deck and pile, the turn index,
    and that ``winner`` is set exactly when the game is over.
    """
    zones = Counter(state.deck)
    zones.update(state.pile)
    for player in state.players:
        zones.update(player.hand)
    if zones != Counter(full_deck()):
        total = sum(zones.values())
        raise InvariantViolation(f"Card conservation broken: {total} cards in play, expected {DECK_SIZE}")

    if (state.winner is not None) != (state.status == GameStatus.OVER):
        raise InvariantViolation(f"winner={state.winner!r} with status {state.status.value}")

    if state.status == GameStatus.INITIALIZED:
        if state.turn is not None or state.pile:
            raise InvariantViolation("Game not started but turn or pile is set")
    else:
        _turn_index(state)
        if not state.pile:
            raise InvariantViolation("Pile is empty after the deal")

    ids = [p.id for p in state.players]
    if len(ids) != len(set(ids)):
        raise InvariantViolation(f"Duplicate players: {ids}")
