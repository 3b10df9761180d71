"""Deck creation, shuffling and dealing."""

import random
from typing import List

from crazyeights.engine.card import CARD_NUMBERS, Card, Color

HAND_SIZE = 4
DECK_SIZE = len(Color) * len(CARD_NUMBERS)


def full_deck() -> List[Card]:
    """Return the 36 cards of the game in a fixed order.

    - 4 colors × numbers 1-9, one of each
    """
    return [Card(color=color, number=number) for color in Color for number in CARD_NUMBERS]


def create_deck(rng: random.Random) -> List[Card]:
    """Create a shuffled deck using ``rng``."""
    cards = full_deck()
    rng.shuffle(cards)
    return cards


def can_deal(num_players: int, deck: List[Card]) -> bool:
    """True if every player can receive a full starting hand and one card
    is left over for the pile."""
    return num_players * HAND_SIZE < len(deck)


def deal_hand(deck: List[Card]) -> List[Card]:
    """Remove a starting hand from the head of ``deck``."""
    hand = deck[:HAND_SIZE]
    del deck[:HAND_SIZE]
    return hand


def draw_one(deck: List[Card]) -> Card:
    """Remove and return the head of ``deck``. Raises IndexError when empty."""
    return deck.pop(0)
