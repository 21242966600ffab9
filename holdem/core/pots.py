"""
Main pot and side pot construction.

When players are all-in for different amounts, each distinct commitment
level of a player still in the hand closes a pot that only players who
reached that level may win. Chips from folded players fill the pots up to
their own commitment; anything they put in above the highest live level
goes into the last pot.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from holdem.core.player import Seat
from holdem.core.rules import OddChipRule


@dataclass(frozen=True)
class Pot:
    """Represents a pot (main pot or side pot)."""
    amount: int
    eligible: Tuple[int, ...]  # Seat indices that may win it


def build_pots(seats: Sequence[Seat]) -> List[Pot]:
    """
    Split the chips committed this hand into a main pot and side pots.

    The pots always add up to the total committed by every seat.
    """
    live_levels = sorted({s.total_committed for s in seats if s.is_in_hand and s.total_committed > 0})

    pots: List[Pot] = []
    prev_level = 0
    for level in live_levels:
        amount = sum(
            min(s.total_committed, level) - min(s.total_committed, prev_level)
            for s in seats
        )
        eligible = tuple(
            i for i, s in enumerate(seats)
            if s.is_in_hand and s.total_committed >= level
        )
        pots.append(Pot(amount=amount, eligible=eligible))
        prev_level = level

    leftover = sum(max(s.total_committed - prev_level, 0) for s in seats)
    if leftover:
        if pots:
            last = pots[-1]
            pots[-1] = Pot(amount=last.amount + leftover, eligible=last.eligible)
        else:
            # Nobody still in the hand committed anything
            eligible = tuple(i for i, s in enumerate(seats) if s.is_in_hand)
            pots.append(Pot(amount=leftover, eligible=eligible))

    return pots


def payout_order(num_players: int, button: int, rule: OddChipRule) -> List[int]:
    """Seat order in which indivisible chips are handed out."""
    if rule == OddChipRule.FIRST_SEAT:
        return list(range(num_players))
    return [(button + 1 + i) % num_players for i in range(num_players)]


def split_pot(amount: int, winners: Sequence[int], order: Sequence[int]) -> Dict[int, int]:
    """
    Divide a pot equally between winners.

    Remainder chips go one at a time to the winners that come first in
    ``order``.

    Returns:
        Mapping of seat index to chips won
    """
    if not winners:
        raise ValueError("A pot needs at least one winner")

    share, remainder = divmod(amount, len(winners))
    result = {seat: share for seat in winners}
    for seat in order:
        if remainder == 0:
            break
        if seat in result:
            result[seat] += 1
            remainder -= 1
    return result
