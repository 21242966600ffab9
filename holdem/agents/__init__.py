"""
Holdem Agents - automatic players for driving hands with ``run_hand``.
"""

from holdem.agents.base import BaseAgent, CallAgent, ScriptedAgent
from holdem.agents.random_agent import RandomAgent

__all__ = ["BaseAgent", "CallAgent", "RandomAgent", "ScriptedAgent"]
