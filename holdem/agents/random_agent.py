"""
Random Agent Implementation.

A simple agent that makes random legal moves.
Useful for testing and as a baseline for evaluation.
"""

from __future__ import annotations
import random
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from holdem.agents.base import BaseAgent, find_action
from holdem.core.rules import ActionType, Move

if TYPE_CHECKING:
    from holdem.core.game import Hand


class RandomAgent(BaseAgent):
    """
    An agent that selects random legal actions.

    The agent has configurable tendencies:
    - fold_probability: How likely to fold when facing a bet
    - raise_probability: How likely to bet or raise instead of calling
    """

    def __init__(
        self,
        name: str,
        fold_probability: float = 0.1,
        raise_probability: float = 0.3,
        seed: Optional[int] = None,
    ):
        """
        Initialize the random agent.

        Args:
            name: Player name
            fold_probability: Probability of folding (0-1)
            raise_probability: Probability of betting or raising (0-1)
            seed: Seed for the agent's own random generator
        """
        super().__init__(name)
        self.fold_probability = fold_probability
        self.raise_probability = raise_probability
        self._rng = random.Random(seed)

    def act(self, hand: Hand, legal_actions: List[Dict[str, Any]]) -> Move:
        """
        Select a random legal action.

        Uses configured probabilities to bias towards certain actions.
        """
        if not legal_actions:
            return Move.fold()

        roll = self._rng.random()
        can_check = find_action(legal_actions, ActionType.CHECK) is not None

        # Never fold when checking is free
        if not can_check and roll < self.fold_probability:
            return Move.fold()

        aggressive = [a for a in legal_actions if a["type"] in (ActionType.BET.value, ActionType.RAISE.value)]
        if aggressive and roll < self.fold_probability + self.raise_probability:
            action = self._rng.choice(aggressive)
            min_amount = action["min"]
            max_amount = action["max"]
            amount = self._rng.randint(min_amount, max_amount) if max_amount > min_amount else min_amount
            return Move(ActionType(action["type"]), amount)

        if can_check:
            return Move.check()
        if find_action(legal_actions, ActionType.CALL):
            return Move.call()
        return Move.fold()
