"""
Holdem Core - Pure Python Texas Hold'em hand logic

This module contains the card model, hand evaluator, betting round engine
and hand orchestrator. It performs no I/O.
"""

from holdem.core.card import Card, Deck, Rank, Suit, parse_cards, shuffle
from holdem.core.player import Player, PlayerState, Seat
from holdem.core.hand import HandCategory, HandRank, compare_hands, evaluate, evaluate_hand
from holdem.core.pots import Pot
from holdem.core.rules import ActionRecord, ActionType, BettingStatus, GamePhase, Move
from holdem.core.betting import legal_actions
from holdem.core.game import (
    Hand, HandResult, Payout, RevealedHand,
    advance_street, create_hand, deal, deal_community, play, run_hand, showdown,
)

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "parse_cards",
    "shuffle",
    "Player",
    "PlayerState",
    "Seat",
    "HandCategory",
    "HandRank",
    "compare_hands",
    "evaluate",
    "evaluate_hand",
    "Pot",
    "ActionRecord",
    "ActionType",
    "BettingStatus",
    "GamePhase",
    "Move",
    "legal_actions",
    "Hand",
    "HandResult",
    "Payout",
    "RevealedHand",
    "advance_street",
    "create_hand",
    "deal",
    "deal_community",
    "play",
    "run_hand",
    "showdown",
]
