"""
Card and Deck types for Texas Hold'em.

Cards are immutable values ordered by (rank, suit). Suits carry no weight in
hand evaluation; the suit only breaks ties so that sorting is total.

A Deck is immutable as well: drawing returns the drawn cards together with a
new, shorter Deck, so a Hand holding a Deck can be copied freely.
"""

from __future__ import annotations
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Iterator, List, Optional, Tuple

from holdem.errors import InsufficientCardsError, InvalidConfigurationError


class Suit(IntEnum):
    """Card suits."""
    DIAMONDS = 0  # ♦
    HEARTS = 1    # ♥
    CLUBS = 2     # ♣
    SPADES = 3    # ♠


class Rank(IntEnum):
    """Card ranks from 2 (lowest) to Ace (highest), valued by pip count."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


SUIT_SYMBOLS = {
    Suit.DIAMONDS: "♦",
    Suit.HEARTS: "♥",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}

SUIT_CHARS = {
    Suit.DIAMONDS: "d",
    Suit.HEARTS: "h",
    Suit.CLUBS: "c",
    Suit.SPADES: "s",
}

RANK_CHARS = {
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "T",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}

CHAR_TO_RANK = {v: k for k, v in RANK_CHARS.items()}
CHAR_TO_SUIT = {v: k for k, v in SUIT_CHARS.items()}
SYMBOL_TO_SUIT = {v: k for k, v in SUIT_SYMBOLS.items()}


@dataclass(frozen=True, order=True, repr=False)
class Card:
    """
    A playing card represented as (rank, suit).

    Cards can be created from:
    - Rank and Suit enums: Card(Rank.ACE, Suit.SPADES)
    - String notation: Card.from_string("As"), Card.from_string("10h")
      or Card.from_string("A♠")
    """
    rank: Rank
    suit: Suit

    def __post_init__(self) -> None:
        object.__setattr__(self, "rank", Rank(self.rank))
        object.__setattr__(self, "suit", Suit(self.suit))

    @classmethod
    def from_string(cls, s: str) -> Card:
        """
        Create a card from string notation.

        Accepts formats:
        - "As", "Kh", "Td", "2c" (rank + suit char)
        - "10s" (two-digit ten)
        - "A♠", "K♥", "T♦", "2♣" (rank + suit symbol)
        """
        s = s.strip()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s!r}")

        if s[:2] == "10":
            rank_part, suit_part = "T", s[2:]
        else:
            rank_part, suit_part = s[0].upper(), s[1:]

        if rank_part not in CHAR_TO_RANK:
            raise ValueError(f"Invalid rank: {rank_part}")

        if suit_part.lower() in CHAR_TO_SUIT:
            suit = CHAR_TO_SUIT[suit_part.lower()]
        elif suit_part in SYMBOL_TO_SUIT:
            suit = SYMBOL_TO_SUIT[suit_part]
        else:
            raise ValueError(f"Invalid suit: {suit_part!r}")

        return cls(CHAR_TO_RANK[rank_part], suit)

    def __repr__(self) -> str:
        return f"Card({RANK_CHARS[self.rank]}{SUIT_CHARS[self.suit]})"

    def __str__(self) -> str:
        return f"{RANK_CHARS[self.rank]}{SUIT_SYMBOLS[self.suit]}"


def full_deck() -> List[Card]:
    """The 52 canonical cards in rank-then-suit order."""
    return [Card(rank, suit) for rank in Rank for suit in Suit]


class Deck:
    """
    An ordered, immutable stack of unique cards, consumed from the front.

    Usage:
        deck = Deck.shuffled(seed=7)
        hole_cards, deck = deck.draw(2)
        flop, deck = deck.draw(3)
    """

    __slots__ = ("_cards",)

    def __init__(self, cards: Iterable[Card] = ()):
        """
        Wrap an explicit card order.

        Raises:
            InvalidConfigurationError: If a card appears more than once or an
                entry is not a Card.
        """
        cards = tuple(cards)
        for card in cards:
            if not isinstance(card, Card):
                raise InvalidConfigurationError(f"Deck entries must be Card, got {card!r}")
        if len(set(cards)) != len(cards):
            raise InvalidConfigurationError("Deck contains duplicate cards")
        self._cards: Tuple[Card, ...] = cards

    @classmethod
    def standard(cls) -> Deck:
        """A full unshuffled deck."""
        return cls(full_deck())

    @classmethod
    def shuffled(cls, seed: Optional[int] = None) -> Deck:
        """A uniformly shuffled full deck; the same seed gives the same order."""
        cards = full_deck()
        random.Random(seed).shuffle(cards)
        return cls(cards)

    def draw(self, n: int = 1) -> Tuple[List[Card], Deck]:
        """
        Take n cards from the top of the deck.

        Returns:
            Tuple of (drawn cards, remaining deck)

        Raises:
            InsufficientCardsError: If fewer than n cards remain.
        """
        if n < 0:
            raise ValueError(f"Cannot draw a negative number of cards: {n}")
        if n > len(self._cards):
            raise InsufficientCardsError(n, len(self._cards))
        remaining = Deck.__new__(Deck)
        remaining._cards = self._cards[n:]
        return list(self._cards[:n]), remaining

    @property
    def cards(self) -> Tuple[Card, ...]:
        return self._cards

    @property
    def remaining(self) -> int:
        """Number of cards remaining in the deck."""
        return len(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Deck):
            return self._cards == other._cards
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._cards)

    def __repr__(self) -> str:
        return f"Deck({self.remaining} cards remaining)"


def shuffle(rng_seed: Optional[int] = None) -> Deck:
    """Produce a freshly shuffled 52-card deck."""
    return Deck.shuffled(rng_seed)


def parse_cards(cards_str: str) -> List[Card]:
    """
    Parse multiple cards from a string.

    Accepts formats:
    - "As Kh Td" (space-separated)
    - "AsKhTd" (no separator, 2 chars each)
    - "A♠ K♥ T♦" (with symbols)
    """
    cards_str = cards_str.strip()

    if " " in cards_str:
        return [Card.from_string(s) for s in cards_str.split()]

    result = []
    i = 0
    while i < len(cards_str):
        if i + 1 < len(cards_str) and (
            cards_str[i + 1] in SYMBOL_TO_SUIT or cards_str[i + 1].lower() in CHAR_TO_SUIT
        ):
            result.append(Card.from_string(cards_str[i:i + 2]))
            i += 2
        else:
            raise ValueError(f"Cannot parse card at position {i}: {cards_str[i:]}")

    return result
