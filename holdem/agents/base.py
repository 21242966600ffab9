"""
Base Agent Interface.

An agent decides moves for one player. ``run_hand`` calls ``observe`` and
``act`` whenever that player is active, so an agent only has to map a hand
and its legal actions to a Move.

Usage:
    class MyAgent(BaseAgent):
        def act(self, hand, legal_actions):
            return Move.call()
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from holdem.core.rules import ActionType, Move

if TYPE_CHECKING:
    from holdem.core.game import Hand, HandResult


class BaseAgent(ABC):
    """
    Abstract base class for poker agents.

    Attributes:
        name: Name of the player this agent plays for
    """

    def __init__(self, name: str):
        self.name = name

    def observe(self, hand: Hand) -> None:
        """
        Observe the current hand before being asked to act.

        Hands are immutable, so an agent may keep references to them.
        """

    @abstractmethod
    def act(self, hand: Hand, legal_actions: List[Dict[str, Any]]) -> Move:
        """
        Choose a move given the current hand.

        Args:
            hand: Current hand; ``hand.active_player`` is this agent's seat
            legal_actions: List of legal action dicts, each containing:
                - type: Action type (FOLD, CHECK, CALL, BET, RAISE, ALL_IN)
                - amount: Chips required (for CALL and ALL_IN)
                - min/max: Valid chip range (for BET/RAISE)

        Returns:
            The chosen Move. An illegal move is rejected and the agent is
            asked again.
        """

    def on_hand_start(self, hand: Hand) -> None:
        """Called once hole cards are dealt."""

    def on_hand_end(self, result: HandResult) -> None:
        """Called with the result after the pot is paid out."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name})"


def find_action(legal_actions: List[Dict[str, Any]], action_type: ActionType) -> Optional[Dict[str, Any]]:
    """The legal action dict of the given type, if present."""
    return next((a for a in legal_actions if a["type"] == action_type.value), None)


class CallAgent(BaseAgent):
    """
    An agent that always checks or calls.

    Useful for testing and as a simple baseline.
    """

    def act(self, hand: Hand, legal_actions: List[Dict[str, Any]]) -> Move:
        if find_action(legal_actions, ActionType.CHECK):
            return Move.check()
        if find_action(legal_actions, ActionType.CALL):
            return Move.call()
        return Move.fold()


class ScriptedAgent(BaseAgent):
    """
    Plays a fixed list of moves, then checks or folds.

    Useful for replaying a known betting sequence in tests.
    """

    def __init__(self, name: str, moves: List[Move]):
        super().__init__(name)
        self.moves = list(moves)

    def act(self, hand: Hand, legal_actions: List[Dict[str, Any]]) -> Move:
        if self.moves:
            return self.moves.pop(0)
        if find_action(legal_actions, ActionType.CHECK):
            return Move.check()
        return Move.fold()
