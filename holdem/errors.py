"""
Exceptions raised by the hand engine.

Every engine operation returns a new Hand, so a raised error never leaves a
half-applied change behind: the caller's Hand is exactly what it passed in.
"""

from __future__ import annotations


class PokerError(Exception):
    """Base class for all hand engine errors."""


class InvalidConfigurationError(PokerError, ValueError):
    """The players, rules or deck given to create a hand are unusable."""


class DealingError(PokerError, ValueError):
    """Cards could not be dealt."""


class InsufficientCardsError(DealingError):
    """The deck holds fewer cards than a deal requires."""

    def __init__(self, requested: int, remaining: int):
        self.requested = requested
        self.remaining = remaining
        super().__init__(f"Cannot deal {requested} cards, only {remaining} remain")


class IllegalMoveError(PokerError):
    """A move violates the betting rules; the caller must re-prompt."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)
