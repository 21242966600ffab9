"""
Pytest configuration and shared fixtures for holdem tests.
"""

from typing import Sequence

import pytest
from holdem.config import TableRules
from holdem.core.card import Card, Deck, Rank, Suit, full_deck, parse_cards
from holdem.core.game import create_hand, deal


@pytest.fixture
def ace_deck():
    """The four aces, in the order of the minimal two-player example."""
    return [
        Card(Rank.ACE, Suit.HEARTS),
        Card(Rank.ACE, Suit.DIAMONDS),
        Card(Rank.ACE, Suit.CLUBS),
        Card(Rank.ACE, Suit.SPADES),
    ]


@pytest.fixture
def heads_up_hand(ace_deck):
    """Will (10 chips) and Jean (2 chips) dealt from the four aces."""
    return deal(create_hand([("Will", 10), ("Jean", 2)], deck=ace_deck))


@pytest.fixture
def three_player_hand():
    """Three players with 100 chips each, no blinds, dealt from a seeded deck."""
    return deal(create_hand([("Alice", 100), ("Bob", 100), ("Carol", 100)], rng_seed=42))


@pytest.fixture
def blind_rules():
    """10/20 blinds."""
    return TableRules(small_blind=10, big_blind=20)


@pytest.fixture
def stacked_deck():
    """
    Build a deck with chosen hole cards and board on top.

    Usage:
        deck = stacked_deck(["AsAd", "2h7h"], "Kh 9h 3c 4h 8s")
    """
    def _build(holes: Sequence[str], board: str = "") -> Deck:
        top = [card for hole in holes for card in parse_cards(hole)]
        if board:
            top += parse_cards(board)
        rest = [card for card in full_deck() if card not in top]
        return Deck(top + rest)

    return _build
