"""
Player ledger for Texas Hold'em.

A Seat records everything the hand knows about one player:
- Stack (chip count)
- Hole cards
- Chips committed on the current street and over the whole hand
- Player state (waiting, dealt, active, folded, all-in)

Seats are frozen; every change returns a new Seat.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Optional, Tuple

from holdem.core.card import Card


class PlayerState(Enum):
    """Player states during a hand."""
    WAITING_TO_BE_DEALT = auto()  # Hand created, no hole cards yet
    DEALT = auto()                # Holding cards, not their turn
    ACTIVE = auto()               # Holding cards, their turn to act
    FOLDED = auto()               # Has folded
    ALL_IN = auto()               # All chips committed, no more actions


@dataclass(frozen=True)
class Player:
    """A player joining a hand: a name and a starting stack."""
    name: str
    stack: int


@dataclass(frozen=True)
class Seat:
    """
    A player's entry in the hand ledger.

    Attributes:
        name: Player name, unique within the hand
        stack: Chips behind (not yet committed)
        state: Current player state
        hole_cards: The player's two private cards
        street_bet: Chips committed on the current street
        total_committed: Chips committed over the whole hand
        has_acted: Whether the player has acted since the last full raise
        last_action: Last action taken, for history and display
    """
    name: str
    stack: int
    state: PlayerState = PlayerState.WAITING_TO_BE_DEALT
    hole_cards: Tuple[Card, ...] = ()
    street_bet: int = 0
    total_committed: int = 0
    has_acted: bool = False
    last_action: Optional[str] = None

    @classmethod
    def for_player(cls, player: Player) -> Seat:
        return cls(name=player.name, stack=player.stack)

    def deal_cards(self, cards: Tuple[Card, ...]) -> Seat:
        """Give the player their hole cards."""
        state = PlayerState.ALL_IN if self.state == PlayerState.ALL_IN else PlayerState.DEALT
        return replace(self, hole_cards=tuple(cards), state=state)

    def commit(self, amount: int, action: str, street: bool = True) -> Seat:
        """
        Move chips from the stack into the pot.

        Args:
            amount: Chips to commit, at most the stack
            action: Label recorded as the last action
            street: False for antes, which do not count toward the street bet

        Returns:
            The updated seat, ALL_IN once the stack reaches zero
        """
        if amount < 0 or amount > self.stack:
            raise ValueError(f"Cannot commit {amount} from a stack of {self.stack}")
        stack = self.stack - amount
        return replace(
            self,
            stack=stack,
            street_bet=self.street_bet + amount if street else self.street_bet,
            total_committed=self.total_committed + amount,
            state=PlayerState.ALL_IN if stack == 0 else self.state,
            last_action=action,
        )

    def acted(self) -> Seat:
        """Mark the player as having acted on this street."""
        return replace(self, has_acted=True)

    def fold(self) -> Seat:
        """Fold the hand."""
        return replace(self, state=PlayerState.FOLDED, has_acted=True, last_action="FOLD")

    def activate(self) -> Seat:
        """Hand the turn to this player."""
        return replace(self, state=PlayerState.ACTIVE)

    def deactivate(self) -> Seat:
        """Take the turn away; folded and all-in players keep their state."""
        if self.state == PlayerState.ACTIVE:
            return replace(self, state=PlayerState.DEALT)
        return self

    def reopen(self) -> Seat:
        """A raise means this player must act again."""
        return replace(self, has_acted=False)

    def reset_for_new_street(self) -> Seat:
        """Reset per-street betting state (flop, turn, river)."""
        return replace(self, street_bet=0, has_acted=False)

    def win(self, amount: int) -> Seat:
        """Credit pot winnings."""
        return replace(self, stack=self.stack + amount)

    @property
    def is_in_hand(self) -> bool:
        """Still contesting the pot (not folded)."""
        return self.state in (PlayerState.DEALT, PlayerState.ACTIVE, PlayerState.ALL_IN)

    @property
    def can_act(self) -> bool:
        """Check if player can take an action."""
        return self.state in (PlayerState.DEALT, PlayerState.ACTIVE) and self.stack > 0

    def __str__(self) -> str:
        cards_str = " ".join(str(c) for c in self.hole_cards) if self.hole_cards else "??"
        return f"{self.name} [{cards_str}] {self.stack} ({self.state.name})"
