"""
Texas Hold'em Rules and Constants.

Table conventions used by the engine:

1. Heads-up (2 players): the button posts the small blind and acts first
   preflop. Postflop the non-button player acts first.

2. With three or more players the small blind sits left of the button, the
   big blind left of the small blind, and the player left of the big blind
   (UTG) acts first preflop.

3. Without blinds, the first player left of the button acts first on every
   street.

4. Minimum raise (optional): the raise increment must be at least the
   previous bet or raise size, and never less than the big blind. An all-in
   for less does not reopen action for players who already acted.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Tuple


class GamePhase(Enum):
    """Phases of a Texas Hold'em hand."""
    WAITING = auto()      # Created, hole cards not dealt yet
    PREFLOP = auto()      # After hole cards dealt, before flop
    FLOP = auto()         # After 3 community cards
    TURN = auto()         # After 4th community card
    RIVER = auto()        # After 5th community card
    SHOWDOWN = auto()     # River betting closed, hands to be compared
    HAND_OVER = auto()    # Pot has been paid out


class BettingStatus(Enum):
    """State of the betting round engine."""
    NOT_STARTED = auto()         # No betting round has begun
    AWAITING_ACTION = auto()     # The active seat must move
    ROUND_CLOSED = auto()        # Street is settled, advance or show down
    HAND_ENDED_BY_FOLD = auto()  # Only one player left in the hand


class ActionType(Enum):
    """Possible player actions."""
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    BET = "BET"
    RAISE = "RAISE"
    ALL_IN = "ALL_IN"


class OddChipRule(Enum):
    """Who receives the indivisible chips of a split pot."""
    LEFT_OF_BUTTON = "left_of_button"  # First winner clockwise from the button
    FIRST_SEAT = "first_seat"          # Winner with the lowest seat index


@dataclass(frozen=True)
class Move:
    """
    A player decision.

    ``amount`` is the number of chips the player adds to the pot with this
    move. It is only meaningful for BET and RAISE; CALL and ALL_IN work out
    their own amount from the player's stack and the bet to call.
    """
    action: ActionType
    amount: int = 0

    @classmethod
    def fold(cls) -> Move:
        return cls(ActionType.FOLD)

    @classmethod
    def check(cls) -> Move:
        return cls(ActionType.CHECK)

    @classmethod
    def call(cls) -> Move:
        return cls(ActionType.CALL)

    @classmethod
    def bet(cls, amount: int) -> Move:
        return cls(ActionType.BET, amount)

    @classmethod
    def raise_by(cls, amount: int) -> Move:
        return cls(ActionType.RAISE, amount)

    @classmethod
    def all_in(cls) -> Move:
        return cls(ActionType.ALL_IN)

    def __str__(self) -> str:
        if self.action in (ActionType.BET, ActionType.RAISE):
            return f"{self.action.value} {self.amount}"
        return self.action.value


@dataclass(frozen=True)
class ActionRecord:
    """One entry of the hand history."""
    player: str
    action: str  # ActionType value, or SMALL_BLIND / BIG_BLIND / ANTE
    amount: int  # Chips added to the pot
    phase: GamePhase


# Default table settings
MIN_PLAYERS = 2
MAX_PLAYERS = 10

# Cards per phase
HOLE_CARDS = 2
FLOP_CARDS = 3
TURN_CARDS = 1
RIVER_CARDS = 1
TOTAL_COMMUNITY_CARDS = 5

# Hand evaluation
HAND_SIZE = 5  # Best 5-card hand

# Street that follows each betting phase, and how many cards it reveals
NEXT_STREET: Dict[GamePhase, Tuple[GamePhase, int]] = {
    GamePhase.PREFLOP: (GamePhase.FLOP, FLOP_CARDS),
    GamePhase.FLOP: (GamePhase.TURN, TURN_CARDS),
    GamePhase.TURN: (GamePhase.RIVER, RIVER_CARDS),
}


def get_blind_positions(num_players: int, dealer_position: int) -> Tuple[int, int]:
    """
    Calculate small blind and big blind positions.

    In heads-up play, the dealer posts the small blind.

    Args:
        num_players: Number of players at the table
        dealer_position: Seat of the button (0-indexed)

    Returns:
        Tuple of (small_blind_position, big_blind_position)
    """
    if num_players < 2:
        raise ValueError("Need at least 2 players")

    if num_players == 2:
        sb_pos = dealer_position
        bb_pos = (dealer_position + 1) % num_players
    else:
        sb_pos = (dealer_position + 1) % num_players
        bb_pos = (dealer_position + 2) % num_players

    return sb_pos, bb_pos


def get_first_to_act_preflop(num_players: int, dealer_position: int, blinds: bool = True) -> int:
    """
    Get the seat of the first player to act preflop.

    - Without blinds: left of the button, same as postflop
    - Heads-up: dealer (small blind) acts first
    - Otherwise: UTG (left of big blind) acts first
    """
    if not blinds:
        return get_first_to_act_postflop(num_players, dealer_position)
    if num_players == 2:
        return dealer_position
    return (dealer_position + 3) % num_players


def get_first_to_act_postflop(num_players: int, dealer_position: int) -> int:
    """
    Get the seat of the first player to act postflop.

    The first seat left of the dealer acts first. In heads-up, this is the
    non-dealer (big blind).
    """
    return (dealer_position + 1) % num_players


def calculate_min_raise_increment(last_raise_amount: int, big_blind: int) -> int:
    """
    Smallest allowed raise over the current bet.

    The increment must be at least the previous bet or raise size; if no
    raise has occurred it is the big blind (and at least one chip).
    """
    return max(last_raise_amount, big_blind, 1)


def is_action_reopened(raise_increment: int, last_raise_amount: int, big_blind: int) -> bool:
    """
    Check if a raise reopens the betting for players who already acted.

    An all-in raise that is less than a full raise does NOT reopen the
    betting.
    """
    return raise_increment >= calculate_min_raise_increment(last_raise_amount, big_blind)
