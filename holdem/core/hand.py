"""
Hand Evaluation for Texas Hold'em.

This module evaluates 5-7 cards and returns the best 5-card hand as a
HandRank. HandRanks are totally ordered: first by category, then by the
tie-break ranks that justify the category, compared left to right.

Hand categories (best to worst):
9. Straight Flush: 5 consecutive cards of same suit
8. Four of a Kind: 4 cards of same rank
7. Full House: 3 of a kind + pair
6. Flush: 5 cards of same suit
5. Straight: 5 consecutive cards
4. Three of a Kind: 3 cards of same rank
3. Two Pair: 2 different pairs
2. Pair: 2 cards of same rank
1. High Card: No made hand

Note: Ace can be low in A-2-3-4-5 straight (wheel), which ranks five-high.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from enum import IntEnum
from itertools import combinations
from typing import Iterable, List, Optional, Sequence, Tuple

from holdem.core.card import Card, Rank
from holdem.core.rules import HAND_SIZE


class HandCategory(IntEnum):
    """Hand categories from worst (lowest value) to best (highest value)."""
    HIGH_CARD = 1
    PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9


HAND_CATEGORY_NAMES = {
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FLUSH: "Flush",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.PAIR: "Pair",
    HandCategory.HIGH_CARD: "High Card",
}


@dataclass(frozen=True, order=True)
class HandRank:
    """
    Strength of a five card hand.

    Attributes:
        category: The hand category
        ranks: Tie-break ranks, most significant first. A pair carries the
            paired rank then its three kickers; a straight carries only its
            top card (five for the wheel).
        cards: The five cards making the hand, in the same significance
            order. Not part of the comparison.
    """
    category: HandCategory
    ranks: Tuple[Rank, ...]
    cards: Tuple[Card, ...] = field(default=(), compare=False)

    @property
    def name(self) -> str:
        return HAND_CATEGORY_NAMES[self.category]

    def __str__(self) -> str:
        return f"{self.name} ({' '.join(str(c) for c in self.cards)})"


def evaluate(hole_cards: Sequence[Card], community_cards: Sequence[Card]) -> HandRank:
    """Best hand a player can make from their hole cards and the board."""
    return evaluate_hand(list(hole_cards) + list(community_cards))


def evaluate_hand(cards: Sequence[Card]) -> HandRank:
    """
    Evaluate a poker hand (5-7 cards).

    The result does not depend on the order the cards are given in.

    Raises:
        ValueError: If not 5-7 cards are provided, or a card is repeated.
    """
    if len(cards) < HAND_SIZE or len(cards) > 7:
        raise ValueError(f"Need 5-7 cards, got {len(cards)}")
    if len(set(cards)) != len(cards):
        raise ValueError("Cannot evaluate a hand with duplicate cards")

    # First best combination wins ties, so sort for a stable result
    ordered = sorted(cards, reverse=True)
    return max(_evaluate_5_cards(combo) for combo in combinations(ordered, HAND_SIZE))


def _evaluate_5_cards(cards: Iterable[Card]) -> HandRank:
    """Evaluate exactly 5 cards."""
    sorted_cards = sorted(cards, key=lambda c: c.rank, reverse=True)
    ranks = [c.rank for c in sorted_cards]

    is_flush = len({c.suit for c in sorted_cards}) == 1
    straight_high = _straight_high(ranks)

    rank_counts = Counter(ranks)
    counts = sorted(rank_counts.values(), reverse=True)
    # Ranks ordered by how often they appear, then by rank
    grouped = sorted(rank_counts, key=lambda r: (rank_counts[r], r), reverse=True)

    # Five distinct ranks, so a straight never competes with paired hands
    if straight_high is not None:
        if straight_high == Rank.FIVE:
            sorted_cards = _reorder_wheel(sorted_cards)
        category = HandCategory.STRAIGHT_FLUSH if is_flush else HandCategory.STRAIGHT
        return _rank(category, [straight_high], sorted_cards)

    if counts == [4, 1]:
        category = HandCategory.FOUR_OF_A_KIND
    elif counts == [3, 2]:
        category = HandCategory.FULL_HOUSE
    elif is_flush:
        return _rank(HandCategory.FLUSH, ranks, sorted_cards)
    elif counts == [3, 1, 1]:
        category = HandCategory.THREE_OF_A_KIND
    elif counts == [2, 2, 1]:
        category = HandCategory.TWO_PAIR
    elif counts == [2, 1, 1, 1]:
        category = HandCategory.PAIR
    else:
        return _rank(HandCategory.HIGH_CARD, ranks, sorted_cards)

    return _rank(category, grouped, _sort_by_count(sorted_cards, rank_counts))


def _rank(category: HandCategory, ranks: Iterable[Rank], cards: Iterable[Card]) -> HandRank:
    return HandRank(category, tuple(Rank(r) for r in ranks), tuple(cards))


def _straight_high(ranks: List[Rank]) -> Optional[Rank]:
    """Top card of the straight formed by five ranks, or None."""
    unique_ranks = sorted(set(ranks), reverse=True)
    if len(unique_ranks) != 5:
        return None

    if unique_ranks[0] - unique_ranks[4] == 4:
        return unique_ranks[0]

    if unique_ranks == [Rank.ACE, Rank.FIVE, Rank.FOUR, Rank.THREE, Rank.TWO]:
        return Rank.FIVE

    return None


def _sort_by_count(cards: List[Card], rank_counts: Counter) -> List[Card]:
    """Sort cards by count (descending), then by rank (descending)."""
    return sorted(cards, key=lambda c: (rank_counts[c.rank], c.rank), reverse=True)


def _reorder_wheel(cards: List[Card]) -> List[Card]:
    """Reorder wheel straight so Ace is last (5-4-3-2-A)."""
    ace = [c for c in cards if c.rank == Rank.ACE][0]
    others = [c for c in cards if c.rank != Rank.ACE]
    return others + [ace]


def compare_hands(cards1: Sequence[Card], cards2: Sequence[Card]) -> int:
    """
    Compare two hands.

    Returns:
        1 if cards1 wins, -1 if cards2 wins, 0 if tie
    """
    rank1 = evaluate_hand(cards1)
    rank2 = evaluate_hand(cards2)

    if rank1 > rank2:
        return 1
    if rank1 < rank2:
        return -1
    return 0
