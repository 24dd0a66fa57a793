"""
Reading deals into a ``GameState``.

A deal is plain text, one cascade per line from bottom to top::

    # optional comments
    freecells: 7H -- -- --
    foundations: 3C AS
    KS QH JC
    ...

Cards are a rank (``A``, ``2``-``10``, ``T``, ``J``, ``Q``, ``K``) followed by a
suit letter (``C``, ``S``, ``H``, ``D``) or symbol (``♣♠♥♦``), in any case.
The ``foundations:`` line names the top card of each built suit.
"""
from __future__ import annotations

import re
from collections import Counter
from pathlib import Path
from typing import Optional

from freecell.cards import ACE, JACK, KING, QUEEN, Card, Suit, full_deck
from freecell.game_state import CASCADE_COUNT, GameState
from freecell.piles import FREECELL_COUNT, Cascade, Foundations, Freecells

CARD_PATTERN = r"(?:10|[2-9atjqk])[cshd♣♠♥♦]"
EMPTY_SLOT = ("--", ".", "-")

_RANKS = {"a": ACE, "t": 10, "10": 10, "j": JACK, "q": QUEEN, "k": KING}
_RANKS.update({str(n): n for n in range(2, 10)})
_SUITS = {
    "c": Suit.CLUB, "♣": Suit.CLUB,
    "s": Suit.SPADE, "♠": Suit.SPADE,
    "h": Suit.HEART, "♥": Suit.HEART,
    "d": Suit.DIAMOND, "♦": Suit.DIAMOND,
}


class DealParseError(ValueError):
    pass


class DealParser:
    """Holds the compiled patterns; build once and reuse."""

    def __init__(self):
        self.card_re = re.compile(CARD_PATTERN, re.IGNORECASE)
        self.cascade_re = re.compile(rf"^[\s,]*(?:{CARD_PATTERN}[\s,]*)*$", re.IGNORECASE)
        self.section_re = re.compile(r"^\s*(freecells|foundations)\s*:(.*)$", re.IGNORECASE)

    def parse_card(self, text: str) -> Card:
        token = text.strip()
        if not self.card_re.fullmatch(token):
            raise DealParseError(f'Could not parse card: "{text}"')
        token = token.lower()
        return Card(_SUITS[token[-1]], _RANKS[token[:-1]])

    def parse_cascade(self, text: str) -> Cascade:
        if not self.cascade_re.match(text):
            raise DealParseError(f'Could not parse cascade: "{text}"')
        return Cascade(tuple(self.parse_card(m.group(0)) for m in self.card_re.finditer(text)))

    def _parse_freecells(self, text: str) -> Freecells:
        tokens = text.replace(",", " ").split()
        if len(tokens) > FREECELL_COUNT:
            raise DealParseError(f"At most {FREECELL_COUNT} free cells, got {len(tokens)}")
        return Freecells.of(*(self.parse_card(t) for t in tokens if t not in EMPTY_SLOT))

    def _parse_foundations(self, text: str) -> Foundations:
        tops: dict[Suit, int] = {}
        for token in text.replace(",", " ").split():
            if token in EMPTY_SLOT:
                continue
            card = self.parse_card(token)
            if card.suit in tops:
                raise DealParseError(f"Foundation for {card.suit.name.lower()}s given twice")
            tops[card.suit] = card.rank
        return Foundations.built_to(tops)

    def parse_game_state(self, text: str, check_complete: bool = True) -> GameState:
        cascades: list[Cascade] = []
        foundations = Foundations()
        freecells = Freecells()
        for line in text.splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            section = self.section_re.match(stripped)
            if section is not None:
                name = section.group(1).lower()
                if name == "freecells":
                    freecells = self._parse_freecells(section.group(2))
                else:
                    foundations = self._parse_foundations(section.group(2))
                continue
            if stripped == "-":
                cascades.append(Cascade())
            else:
                cascades.append(self.parse_cascade(stripped))

        if len(cascades) > CASCADE_COUNT:
            raise DealParseError(f"At most {CASCADE_COUNT} cascades, got {len(cascades)}")
        cascades.extend(Cascade() for _ in range(CASCADE_COUNT - len(cascades)))
        state = GameState(cascades=tuple(cascades), foundations=foundations, freecells=freecells)
        if check_complete:
            validate_deal(state)
        return state


def validate_deal(state: GameState) -> None:
    """Raise DealParseError unless the state holds each of the 52 cards exactly once."""
    counts = Counter(state.iter_cards())
    duplicated = sorted(card for card, n in counts.items() if n > 1)
    if duplicated:
        raise DealParseError("Duplicated cards: " + " ".join(str(c) for c in duplicated))
    missing = sorted(card for card in full_deck() if card not in counts)
    if missing:
        raise DealParseError("Missing cards: " + " ".join(str(c) for c in missing))


_DEFAULT_PARSER: Optional[DealParser] = None


def default_parser() -> DealParser:
    global _DEFAULT_PARSER
    if _DEFAULT_PARSER is None:
        _DEFAULT_PARSER = DealParser()
    return _DEFAULT_PARSER


def parse_card(text: str) -> Card:
    return default_parser().parse_card(text)


def parse_cascade(text: str) -> Cascade:
    return default_parser().parse_cascade(text)


def parse_game_state(text: str, check_complete: bool = True) -> GameState:
    return default_parser().parse_game_state(text, check_complete=check_complete)


def load_game_state(path, check_complete: bool = True) -> GameState:
    try:
        with Path(path).open("r", encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise DealParseError(f"Deal file {path} is not valid utf-8: {e}") from e
    return parse_game_state(text, check_complete=check_complete)


def deal_game(seed: int) -> GameState:
    """The numbered deal from the classic Windows FreeCell (seeds 1..32000 and beyond)."""
    # Deck order used by the original deal: ranks ascending, suits C D H S within each rank.
    deck = [Card(suit, rank) for rank in range(ACE, KING + 1)
            for suit in (Suit.CLUB, Suit.DIAMOND, Suit.HEART, Suit.SPADE)]
    state = seed
    columns: list[list[Card]] = [[] for _ in range(CASCADE_COUNT)]
    dealt = 0
    while deck:
        state = (state * 214013 + 2531011) & 0x7FFFFFFF
        idx = (state >> 16) % len(deck)
        deck[idx], deck[-1] = deck[-1], deck[idx]
        columns[dealt % CASCADE_COUNT].append(deck.pop())
        dealt += 1
    return GameState.from_cascades(*columns)
