"""Game state for Crazy Eights."""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from crazyeights.engine.card import Card


class GameStatus(str, Enum):
    """Lifecycle of a game. Only moves forward."""

    INITIALIZED = "initialized"
    IN_PROGRESS = "in_progress"
    OVER = "over"


@dataclass
class GameConfig:
    """Construction options for a game.

    ``rng`` takes precedence over ``seed``. With neither, a fresh unseeded
    generator is used.
    """

    seed: Optional[int] = None
    rng: Optional[random.Random] = None

    def make_rng(self) -> random.Random:
        if self.rng is not None:
            return self.rng
        return random.Random(self.seed)


@dataclass
class Player:
    """A joined user and their hand."""

    id: str
    hand: List[Card] = field(default_factory=list)


@dataclass
class GameState:
    """Mutable game state, owned by a single writer.

    ``deck[0]`` is the next card drawn and ``pile[0]`` is the active card.
    """

    status: GameStatus = GameStatus.INITIALIZED
    players: List[Player] = field(default_factory=list)  # join order = turn order
    deck: List[Card] = field(default_factory=list)
    pile: List[Card] = field(default_factory=list)
    turn: Optional[int] = None  # index into players
    winner: Optional[str] = None
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    def find_player(self, user_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == user_id:
                return player
        return None

    def current_player(self) -> Optional[Player]:
        """Return the turn holder, if a turn has been assigned."""
        if self.turn is None:
            return None
        return self.players[self.turn]

    def top_of_pile(self) -> Optional[Card]:
        """Return the active card on the pile."""
        return self.pile[0] if self.pile else None


@dataclass
class PlayerView:
    """Filtered game state visible to a single user.

    Contains only that user's hand and public info. Other hands, the deck's
    contents and the pile below the top card are never included.
    """

    players: List[str]
    hand: Optional[List[Card]]  # None if the user has not joined
    top_of_pile: Optional[Card]
    turn: Optional[str]
    winner: Optional[str]
    num_cards_in_deck: int

    @classmethod
    def from_state(cls, state: GameState, user_id: str) -> "PlayerView":
        """Create a view from full game state, hiding everything private."""
        player = state.find_player(user_id)
        holder = state.current_player()
        return cls(
            players=[p.id for p in state.players],
            hand=list(player.hand) if player is not None else None,
            top_of_pile=state.top_of_pile(),
            turn=holder.id if holder is not None else None,
            winner=state.winner,
            num_cards_in_deck=len(state.deck),
        )
