import unittest

from freecell.cards import ACE, KING, Card, Colour, Suit
from freecell.piles import Cascade, Foundations, Freecells, fits_on_top_of

CLUB, SPADE, HEART, DIAMOND = Suit.CLUB, Suit.SPADE, Suit.HEART, Suit.DIAMOND


def cascade(*cards):
    return Cascade(tuple(cards))


class CardTestCase(unittest.TestCase):
    def test_colour_follows_suit(self):
        self.assertEqual(Colour.BLACK, Card(CLUB, 3).colour)
        self.assertEqual(Colour.BLACK, Card(SPADE, 3).colour)
        self.assertEqual(Colour.RED, Card(HEART, 3).colour)
        self.assertEqual(Colour.RED, Card(DIAMOND, 3).colour)

    def test_cards_compare_by_value_and_order_by_rank(self):
        self.assertEqual(Card(HEART, 7), Card(HEART, 7))
        self.assertNotEqual(Card(HEART, 7), Card(DIAMOND, 7))
        self.assertLess(Card(SPADE, 2), Card(CLUB, 3))
        self.assertEqual("10♥", str(Card(HEART, 10)))
        self.assertEqual("A♣", str(Card(CLUB, ACE)))


class CascadeTestCase(unittest.TestCase):
    def test_add_and_pop_on_mixed_cascade(self):
        pile = cascade(Card(SPADE, 9), Card(CLUB, ACE), Card(HEART, 7))

        added = pile.add_card(Card(SPADE, 6))
        self.assertEqual(cascade(Card(SPADE, 9), Card(CLUB, ACE), Card(HEART, 7), Card(SPADE, 6)), added)

        popped = pile.pop_card()
        self.assertEqual(((cascade(Card(SPADE, 9), Card(CLUB, ACE)), Card(HEART, 7)),), popped)

    def test_same_colour_is_rejected(self):
        pile = cascade(Card(HEART, 7))
        self.assertIsNone(pile.add_card(Card(DIAMOND, 6)))

    def test_add_rule_matches_rank_and_colour(self):
        for top in (Card(HEART, 7), Card(CLUB, 7)):
            pile = cascade(top)
            for suit in Suit:
                for rank in range(ACE, KING + 1):
                    card = Card(suit, rank)
                    expected = card.rank + 1 == top.rank and card.colour != top.colour
                    self.assertEqual(expected, pile.add_card(card) is not None, f"{card} on {top}")
                    self.assertEqual(expected, fits_on_top_of(card, top))

    def test_empty_cascade_accepts_anything_and_pops_nothing(self):
        self.assertEqual(cascade(Card(DIAMOND, KING)), Cascade().add_card(Card(DIAMOND, KING)))
        self.assertEqual(cascade(Card(CLUB, 4)), Cascade().add_card(Card(CLUB, 4)))
        self.assertEqual((), Cascade().pop_card())

    def test_operations_do_not_mutate_receiver(self):
        pile = cascade(Card(SPADE, 9), Card(HEART, 8))
        first = pile.add_card(Card(CLUB, 7))
        second = pile.add_card(Card(CLUB, 7))
        self.assertEqual(first, second)
        self.assertEqual(pile.pop_card(), pile.pop_card())
        self.assertEqual(cascade(Card(SPADE, 9), Card(HEART, 8)), pile)


class FoundationsTestCase(unittest.TestCase):
    def test_built_from_ace_in_suit_order(self):
        foundations = Foundations()
        self.assertIsNone(foundations.add_card(Card(HEART, 2)))

        foundations = foundations.add_card(Card(HEART, ACE))
        self.assertEqual(1, foundations.height(HEART))
        self.assertIsNone(foundations.add_card(Card(HEART, 3)))
        self.assertIsNone(foundations.add_card(Card(SPADE, 2)))

        foundations = foundations.add_card(Card(HEART, 2))
        self.assertEqual((Card(HEART, ACE), Card(HEART, 2)), foundations.pile(HEART))

    def test_add_rule_matches_height_of_suit(self):
        foundations = Foundations.built_to({CLUB: 4, DIAMOND: 1})
        for suit in Suit:
            for rank in range(ACE, KING + 1):
                expected = rank == foundations.height(suit) + 1
                self.assertEqual(expected, foundations.add_card(Card(suit, rank)) is not None)

    def test_complete_club_foundation_accepts_no_more_clubs(self):
        foundations = Foundations.built_to({CLUB: KING})
        self.assertTrue(foundations.is_complete(CLUB))
        self.assertFalse(foundations.is_complete())
        for rank in range(ACE, KING + 1):
            self.assertIsNone(foundations.add_card(Card(CLUB, rank)))

    def test_complete_foundations(self):
        foundations = Foundations.complete()
        self.assertTrue(foundations.is_complete())
        self.assertEqual(52, len(foundations))
        self.assertEqual((), foundations.pop_card())


class FreecellsTestCase(unittest.TestCase):
    def test_add_until_full(self):
        cells = Freecells()
        for rank in range(1, 5):
            cells = cells.add_card(Card(SPADE, rank))
            self.assertIsNotNone(cells)
        self.assertEqual(0, cells.free_count())
        self.assertIsNone(cells.add_card(Card(HEART, 9)))

    def test_empty_freecells_pop_nothing(self):
        self.assertEqual((), Freecells().pop_card())

    def test_pop_offers_every_resident_card(self):
        cells = Freecells.of(Card(SPADE, 5), Card(HEART, KING))
        popped = dict((card, rest) for rest, card in cells.pop_card())
        self.assertEqual({Card(SPADE, 5), Card(HEART, KING)}, set(popped))
        self.assertEqual(Freecells.of(Card(HEART, KING)), popped[Card(SPADE, 5)])
        self.assertEqual(2, len(cells))

    def test_slot_order_does_not_matter(self):
        a = Freecells((Card(SPADE, 5), None, Card(HEART, 2), None))
        b = Freecells((None, Card(HEART, 2), None, Card(SPADE, 5)))
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))

    def test_more_than_four_cards_is_rejected(self):
        with self.assertRaises(ValueError):
            Freecells.of(*(Card(CLUB, rank) for rank in range(1, 6)))


if __name__ == "__main__":
    unittest.main()
