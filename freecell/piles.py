"""
Card piles of a FreeCell table.

Every pile is an immutable value. ``add_card`` returns the pile with the card
added, or ``None`` when the pile's rule rejects the card. ``pop_card`` returns
every way a card can be taken off the pile, as ``(pile_after, card)`` pairs.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, TypeVar, Union

from freecell.cards import ACE, NUM_PER_SUIT, SUITS, Card, Suit

FREECELL_COUNT = 4

P = TypeVar("P", bound="CardCollection")


class CardCollection(Protocol):
    def add_card(self: P, card: Card) -> Optional[P]:
        ...

    def pop_card(self: P) -> tuple[tuple[P, Card], ...]:
        ...


def fits_on_top_of(lower_card: Card, top_card: Card) -> bool:
    return lower_card.colour != top_card.colour and lower_card.rank + 1 == top_card.rank


@dataclass(frozen=True, slots=True)
class Cascade:
    """A column of cards; the last card is the top."""

    cards: tuple[Card, ...] = ()

    @property
    def top(self) -> Optional[Card]:
        return self.cards[-1] if self.cards else None

    def add_card(self, card: Card) -> Optional[Cascade]:
        if self.cards and not fits_on_top_of(card, self.cards[-1]):
            return None
        return Cascade(self.cards + (card,))

    def pop_card(self) -> tuple[tuple[Cascade, Card], ...]:
        if not self.cards:
            return ()
        return ((Cascade(self.cards[:-1]), self.cards[-1]),)

    def __len__(self):
        return len(self.cards)


@dataclass(frozen=True, slots=True)
class Foundations:
    """One pile per suit, each built up from the Ace."""

    # Indexed like SUITS.
    piles: tuple[tuple[Card, ...], ...] = ((), (), (), ())

    @staticmethod
    def complete() -> Foundations:
        return Foundations(tuple(tuple(Card(suit, rank) for rank in range(ACE, NUM_PER_SUIT + 1)) for suit in SUITS))

    @staticmethod
    def built_to(tops: dict[Suit, int]) -> Foundations:
        return Foundations(tuple(tuple(Card(suit, rank) for rank in range(ACE, tops.get(suit, 0) + 1)) for suit in SUITS))

    def pile(self, suit: Suit) -> tuple[Card, ...]:
        return self.piles[suit.index]

    def height(self, suit: Suit) -> int:
        return len(self.piles[suit.index])

    def is_complete(self, suit: Optional[Suit] = None) -> bool:
        if suit is not None:
            return self.height(suit) == NUM_PER_SUIT
        return all(len(pile) == NUM_PER_SUIT for pile in self.piles)

    def add_card(self, card: Card) -> Optional[Foundations]:
        idx = card.suit.index
        pile = self.piles[idx]
        if card.rank != len(pile) + 1:
            return None
        piles = list(self.piles)
        piles[idx] = pile + (card,)
        return Foundations(tuple(piles))

    def pop_card(self) -> tuple[tuple[Foundations, Card], ...]:
        # Cards never leave the foundations.
        return ()

    def __len__(self):
        return sum(len(pile) for pile in self.piles)


@dataclass(frozen=True, slots=True)
class Freecells:
    """
    Four single-card slots.

    Occupied slots are kept first and in card order, so two Freecells holding
    the same cards are equal no matter which slot each card went into.
    """

    slots: tuple[Optional[Card], ...] = (None,) * FREECELL_COUNT

    def __post_init__(self):
        cards = sorted(card for card in self.slots if card is not None)
        if len(cards) > FREECELL_COUNT:
            raise ValueError(f"at most {FREECELL_COUNT} free cells, got {len(cards)} cards")
        object.__setattr__(self, "slots", tuple(cards) + (None,) * (FREECELL_COUNT - len(cards)))

    @staticmethod
    def of(*cards: Card) -> Freecells:
        return Freecells(tuple(cards))

    @property
    def cards(self) -> tuple[Card, ...]:
        return tuple(card for card in self.slots if card is not None)

    def free_count(self) -> int:
        return sum(1 for card in self.slots if card is None)

    def add_card(self, card: Card) -> Optional[Freecells]:
        cards = self.cards
        if len(cards) >= FREECELL_COUNT:
            return None
        return Freecells.of(*cards, card)

    def pop_card(self) -> tuple[tuple[Freecells, Card], ...]:
        cards = self.cards
        out = []
        for i, card in enumerate(cards):
            out.append((Freecells.of(*cards[:i], *cards[i + 1:]), card))
        return tuple(out)

    def __len__(self):
        return len(self.cards)


Pile = Union[Cascade, Foundations, Freecells]
