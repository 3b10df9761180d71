"""Card and Color types for Crazy Eights."""

from dataclasses import dataclass
from enum import Enum


class Color(str, Enum):
    """Card colors."""

    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"


CARD_NUMBERS = range(1, 10)


@dataclass(frozen=True)
class Card:
    """A numbered card.

    Cards carry no identity beyond their value: two cards with the same
    color and number are interchangeable.
    """

    color: Color
    number: int

    def __post_init__(self) -> None:
        if not isinstance(self.color, Color):
            raise ValueError(f"Invalid card color: {self.color!r}")
        if not isinstance(self.number, int) or isinstance(self.number, bool):
            raise ValueError(f"Invalid card number: {self.number!r}")
        if self.number not in CARD_NUMBERS:
            raise ValueError(f"Invalid card number: {self.number!r}")

    def matches(self, other: "Card") -> bool:
        """True if this card can be stacked on ``other`` (same color or number)."""
        return self.color == other.color or self.number == other.number

    @classmethod
    def parse(cls, text: str) -> "Card":
        """Parse the ``str(card)`` form, e.g. ``"red_5"``."""
        color, _, number = text.strip().lower().partition("_")
        try:
            return cls(color=Color(color), number=int(number))
        except ValueError:
            raise ValueError(f"Invalid card: {text!r}") from None

    def __str__(self) -> str:
        return f"{self.color.value}_{self.number}"
