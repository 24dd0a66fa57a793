from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterator, Optional

from freecell.cards import Card
from freecell.piles import Cascade, Foundations, Freecells, Pile
from freecell.position import FOUNDATIONS, FREECELLS, Position, PositionKind

CASCADE_COUNT = 8


@dataclass(frozen=True, slots=True)
class GameMove:
    """A single card moved from one position to another."""

    source: Position
    destination: Position
    card: Card

    def __str__(self):
        return f"Move {self.card} from {self.source} to {self.destination}"


@dataclass(frozen=True, slots=True)
class GameState:
    """Immutable snapshot of the whole table; a node of the search graph."""

    cascades: tuple[Cascade, ...] = (Cascade(),) * CASCADE_COUNT
    foundations: Foundations = Foundations()
    freecells: Freecells = Freecells()
    # Hashed once; states are looked up in the visited map many times.
    _hash: int = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_hash", hash((self.cascades, self.foundations, self.freecells)))

    def __hash__(self):
        return self._hash

    @staticmethod
    def from_cascades(*cascades: tuple[Card, ...] | list[Card],
                      foundations: Foundations = Foundations(),
                      freecells: Freecells = Freecells()) -> GameState:
        if len(cascades) > CASCADE_COUNT:
            raise ValueError(f"at most {CASCADE_COUNT} cascades, got {len(cascades)}")
        piles = [Cascade(tuple(cards)) for cards in cascades]
        piles.extend(Cascade() for _ in range(CASCADE_COUNT - len(piles)))
        return GameState(cascades=tuple(piles), foundations=foundations, freecells=freecells)

    @staticmethod
    def solved() -> GameState:
        return GameState(foundations=Foundations.complete())

    def is_solved(self) -> bool:
        """True once no card is left outside the foundations."""
        if len(self.freecells) > 0:
            return False
        return all(len(cascade) == 0 for cascade in self.cascades)

    def pile_at(self, position: Position) -> Pile:
        if position.kind is PositionKind.CASCADE:
            return self.cascades[position.index]
        if position.kind is PositionKind.FOUNDATIONS:
            return self.foundations
        return self.freecells

    def with_pile(self, position: Position, pile: Pile) -> GameState:
        if position.kind is PositionKind.CASCADE:
            cascades = list(self.cascades)
            cascades[position.index] = pile
            return replace(self, cascades=tuple(cascades))
        if position.kind is PositionKind.FOUNDATIONS:
            return replace(self, foundations=pile)
        return replace(self, freecells=pile)

    def positions(self) -> tuple[Position, ...]:
        return (FOUNDATIONS,) + tuple(Position.cascade(i) for i in range(len(self.cascades))) + (FREECELLS,)

    def iter_cards(self) -> Iterator[Card]:
        for cascade in self.cascades:
            yield from cascade.cards
        for pile in self.foundations.piles:
            yield from pile
        yield from self.freecells.cards

    def apply(self, move: GameMove) -> Optional[GameState]:
        """Replay a move; returns None if it is not legal here."""
        if move.source == move.destination:
            return None
        for popped, card in self.pile_at(move.source).pop_card():
            if card != move.card:
                continue
            added = self.pile_at(move.destination).add_card(card)
            if added is None:
                return None
            return self.with_pile(move.source, popped).with_pile(move.destination, added)
        return None
