from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering

ACE = 1
JACK = 11
QUEEN = 12
KING = 13
NUM_PER_SUIT = 13

RANK_NAMES = {ACE: "A", JACK: "J", QUEEN: "Q", KING: "K"}


class Colour(Enum):
    BLACK = "black"
    RED = "red"


class Suit(Enum):
    CLUB = "C"
    SPADE = "S"
    HEART = "H"
    DIAMOND = "D"

    @property
    def colour(self) -> Colour:
        if self in (Suit.CLUB, Suit.SPADE):
            return Colour.BLACK
        return Colour.RED

    @property
    def symbol(self) -> str:
        return SUIT_SYMBOLS[self]

    @property
    def index(self) -> int:
        return SUITS.index(self)


SUITS = tuple(Suit)
SUIT_SYMBOLS = {Suit.CLUB: "♣", Suit.SPADE: "♠", Suit.HEART: "♥", Suit.DIAMOND: "♦"}


@total_ordering
@dataclass(frozen=True, slots=True)
class Card:
    suit: Suit
    rank: int

    @property
    def colour(self) -> Colour:
        return self.suit.colour

    def sort_key(self) -> tuple[int, int]:
        return self.rank, self.suit.index

    def __lt__(self, other):
        if not isinstance(other, Card):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self):
        return RANK_NAMES.get(self.rank, str(self.rank)) + self.suit.symbol


def full_deck() -> tuple[Card, ...]:
    return tuple(Card(suit, rank) for suit in SUITS for rank in range(ACE, KING + 1))
