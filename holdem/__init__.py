"""
Holdem - Texas Hold'em Hand Engine

A single-hand Texas Hold'em state machine with:
- Immutable card, deck and hand values
- Betting round engine enforcing turn order and legal moves
- Best-of-seven hand evaluation with side pots at showdown
- Agent interface for driving hands automatically

Usage:
    from holdem import Move, create_hand, deal, play, advance_street, showdown

    hand = deal(create_hand([("Will", 10), ("Jean", 2)], rng_seed=7))
    hand = play(hand, Move.bet(3))
"""

__version__ = "0.2.0"

from holdem.errors import (
    DealingError,
    IllegalMoveError,
    InsufficientCardsError,
    InvalidConfigurationError,
    PokerError,
)
from holdem.core.card import Card, Deck, Rank, Suit
from holdem.core.hand import HandCategory, HandRank, evaluate, evaluate_hand
from holdem.core.player import PlayerState
from holdem.core.rules import ActionType, BettingStatus, GamePhase, Move
from holdem.core.betting import legal_actions
from holdem.core.game import (
    Hand, HandResult, advance_street, create_hand, deal, deal_community, play, run_hand, showdown,
)
from holdem.config import SeatConfig, TableRules

__all__ = [
    "SeatConfig",
    "TableRules",
    "DealingError",
    "IllegalMoveError",
    "InsufficientCardsError",
    "InvalidConfigurationError",
    "PokerError",
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "HandCategory",
    "HandRank",
    "evaluate",
    "evaluate_hand",
    "PlayerState",
    "ActionType",
    "BettingStatus",
    "GamePhase",
    "Move",
    "legal_actions",
    "Hand",
    "HandResult",
    "advance_street",
    "create_hand",
    "deal",
    "deal_community",
    "play",
    "run_hand",
    "showdown",
    "__version__",
]
