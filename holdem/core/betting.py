"""
Betting Round Engine.

A betting round is a small state machine driven by the active player's
moves:

    AWAITING_ACTION(seat) --move--> AWAITING_ACTION(next seat)
                          --move--> ROUND_CLOSED
                          --fold--> HAND_ENDED_BY_FOLD

Turn order is the seating order, wrapping around and skipping folded and
all-in players. A bet or full raise reopens the action: every other player
who can still act must act again. A short all-in does not reopen the
action when the minimum raise is enforced, so players who already acted may
only call or fold. The round closes once every player who can act has acted
since the last full raise and matched the bet to call.

All functions take a Hand and return a new Hand; an illegal move raises
IllegalMoveError and the Hand passed in stays as it was.
"""

from __future__ import annotations
import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple

from holdem.core.player import Seat
from holdem.core.rules import (
    ActionRecord, ActionType, BettingStatus, Move,
    calculate_min_raise_increment, is_action_reopened,
)
from holdem.errors import IllegalMoveError

if TYPE_CHECKING:
    from holdem.config import TableRules
    from holdem.core.game import Hand


logger = logging.getLogger(__name__)


def is_round_closed(seats: Sequence[Seat], bet_to_call: int) -> bool:
    """
    Check if the current betting round is complete.

    Players who can still act must all have acted and matched the bet. If
    at most one player can act there is nobody left to bet against, so the
    round is over as soon as that player has matched.
    """
    actors = [s for s in seats if s.can_act]
    if not actors:
        return True
    if all(s.has_acted and s.street_bet >= bet_to_call for s in actors):
        return True
    return len(actors) == 1 and actors[0].street_bet >= bet_to_call


def _needs_to_act(seat: Seat, bet_to_call: int) -> bool:
    return seat.can_act and (not seat.has_acted or seat.street_bet < bet_to_call)


def _next_to_act(seats: Sequence[Seat], start: int, bet_to_call: int) -> Optional[int]:
    """First seat at or after ``start`` (wrapping) that still owes an action."""
    n = len(seats)
    for offset in range(n):
        index = (start + offset) % n
        if _needs_to_act(seats[index], bet_to_call):
            return index
    return None


def _settle(hand: Hand, seats: List[Seat], start: int) -> Hand:
    """Decide the round status and hand the turn to the next player."""
    seats = [s.deactivate() for s in seats]

    if sum(1 for s in seats if s.is_in_hand) == 1:
        return replace(
            hand, seats=tuple(seats),
            status=BettingStatus.HAND_ENDED_BY_FOLD, active_index=None,
        )

    next_index = None
    if not is_round_closed(seats, hand.bet_to_call):
        next_index = _next_to_act(seats, start, hand.bet_to_call)

    if next_index is None:
        logger.debug(f"Betting round closed in {hand.phase.name}, pot={hand.pot}")
        return replace(
            hand, seats=tuple(seats),
            status=BettingStatus.ROUND_CLOSED, active_index=None,
        )

    seats[next_index] = seats[next_index].activate()
    return replace(
        hand, seats=tuple(seats),
        status=BettingStatus.AWAITING_ACTION, active_index=next_index,
    )


def start_round(hand: Hand, first_index: int) -> Hand:
    """Open a betting round with ``first_index`` as the first seat to act."""
    return _settle(hand, list(hand.seats), first_index)


def can_raise(hand: Hand, seat: Seat) -> bool:
    """
    Check if the seat may bet or raise.

    A player who already acted and is facing a short all-in that did not
    reopen the betting may only call or fold.
    """
    if not hand.rules.enforce_min_raise:
        return True
    return not (seat.has_acted and seat.street_bet < hand.bet_to_call)


def legal_actions(hand: Hand) -> List[Dict[str, Any]]:
    """
    Get legal actions for the active player.

    Amounts are chips the player would add with the move.

    Returns:
        List of action dicts with type and constraints, empty when no
        action is awaited
    """
    if hand.status != BettingStatus.AWAITING_ACTION or hand.active_index is None:
        return []

    player = hand.seats[hand.active_index]
    rules = hand.rules
    actions: List[Dict[str, Any]] = [{"type": ActionType.FOLD.value}]
    chips_to_call = max(0, hand.bet_to_call - player.street_bet)

    if chips_to_call == 0:
        actions.append({"type": ActionType.CHECK.value})
    else:
        actions.append({
            "type": ActionType.CALL.value,
            "amount": min(chips_to_call, player.stack),
        })

    if player.stack > chips_to_call:
        if not can_raise(hand, player):
            return actions
        if hand.bet_to_call == 0:
            min_bet = max(rules.big_blind, 1) if rules.enforce_min_raise else 1
            actions.append({
                "type": ActionType.BET.value,
                "min": min(min_bet, player.stack),
                "max": player.stack,
            })
        else:
            min_raise = chips_to_call + 1
            if rules.enforce_min_raise:
                min_raise = chips_to_call + calculate_min_raise_increment(
                    hand.last_raise_size, rules.big_blind
                )
            actions.append({
                "type": ActionType.RAISE.value,
                "min": min(min_raise, player.stack),
                "max": player.stack,
            })

    actions.append({"type": ActionType.ALL_IN.value, "amount": player.stack})
    return actions


def apply_move(hand: Hand, move: Move, player: Optional[str] = None) -> Hand:
    """
    Apply the active player's move.

    Args:
        hand: Hand awaiting an action
        move: The player's decision
        player: Optional name of the player making the move; rejected if it
            is not their turn

    Returns:
        The new Hand

    Raises:
        IllegalMoveError: If the move breaks the betting rules
    """
    if hand.status != BettingStatus.AWAITING_ACTION or hand.active_index is None:
        raise IllegalMoveError(f"No action is awaited ({hand.status.name})")

    index = hand.active_index
    seat = hand.seats[index]
    if player is not None and player != seat.name:
        raise IllegalMoveError(f"It is {seat.name}'s turn, not {player}'s")

    rules = hand.rules
    chips_to_call = hand.bet_to_call - seat.street_bet
    bet_to_call = hand.bet_to_call
    last_raise = hand.last_raise_size
    all_in_sum = hand.all_in_raise_sum
    reopen = False
    amount = 0

    raising = move.action in (ActionType.BET, ActionType.RAISE) or (
        move.action == ActionType.ALL_IN and seat.stack > chips_to_call
    )
    if raising and not can_raise(hand, seat):
        raise IllegalMoveError(
            f"Betting was not reopened, {seat.name} may only call {chips_to_call} or fold"
        )

    if move.action == ActionType.FOLD:
        seat = seat.fold()

    elif move.action == ActionType.CHECK:
        if chips_to_call > 0:
            raise IllegalMoveError(f"Cannot check, must call {chips_to_call}")
        seat = replace(seat.acted(), last_action="CHECK")

    elif move.action == ActionType.CALL:
        if chips_to_call <= 0:
            raise IllegalMoveError("Nothing to call, use CHECK")
        amount = min(chips_to_call, seat.stack)
        seat = seat.commit(amount, f"CALL {amount}").acted()

    elif move.action == ActionType.BET:
        if bet_to_call > 0:
            raise IllegalMoveError(
                f"Cannot bet when facing a bet of {bet_to_call}, use CALL or RAISE"
            )
        amount = move.amount
        _check_amount(amount, seat)
        if rules.enforce_min_raise and amount < seat.stack and amount < rules.big_blind:
            raise IllegalMoveError(f"Minimum bet is {rules.big_blind}")
        seat = seat.commit(amount, f"BET {amount}").acted()
        bet_to_call = seat.street_bet
        last_raise = amount
        all_in_sum = 0
        reopen = True

    elif move.action == ActionType.RAISE:
        if bet_to_call == 0:
            raise IllegalMoveError("No bet to raise, use BET")
        amount = move.amount
        _check_amount(amount, seat)
        if amount <= chips_to_call:
            raise IllegalMoveError(
                f"A raise must add more than the {chips_to_call} needed to call"
            )
        increment = amount - chips_to_call
        is_all_in = amount == seat.stack
        full_raise = is_action_reopened(increment, last_raise, rules.big_blind)
        if rules.enforce_min_raise and not full_raise and not is_all_in:
            minimum = chips_to_call + calculate_min_raise_increment(last_raise, rules.big_blind)
            raise IllegalMoveError(f"Minimum raise is {minimum} chips")
        seat = seat.commit(amount, f"RAISE {amount}").acted()
        bet_to_call = seat.street_bet
        reopen, last_raise, all_in_sum = _raise_outcome(
            rules, increment, is_all_in, last_raise, all_in_sum
        )

    elif move.action == ActionType.ALL_IN:
        if seat.stack == 0:
            raise IllegalMoveError("Already all-in")
        amount = seat.stack
        seat = seat.commit(amount, f"ALL_IN {amount}").acted()
        if seat.street_bet > bet_to_call:
            reopen, last_raise, all_in_sum = _raise_outcome(
                rules, seat.street_bet - bet_to_call, True, last_raise, all_in_sum
            )
            bet_to_call = seat.street_bet

    else:
        raise IllegalMoveError(f"Unknown action: {move.action}")

    seats = list(hand.seats)
    seats[index] = seat
    if reopen:
        seats = [s.reopen() if i != index and s.can_act else s for i, s in enumerate(seats)]

    logger.debug(f"{seat.name}: {seat.last_action} (to call {bet_to_call}, pot {hand.pot + amount})")

    hand = replace(
        hand,
        pot=hand.pot + amount,
        bet_to_call=bet_to_call,
        last_raise_size=last_raise,
        all_in_raise_sum=all_in_sum,
        history=hand.history + (ActionRecord(seat.name, move.action.value, amount, hand.phase),),
    )
    return _settle(hand, seats, (index + 1) % len(seats))


def _raise_outcome(
    rules: TableRules,
    increment: int,
    is_all_in: bool,
    last_raise: int,
    all_in_sum: int,
) -> Tuple[bool, int, int]:
    """
    Work out whether a bet or raise reopens the betting.

    A full raise always reopens. A short all-in does not, unless several
    short all-ins in a row add up to a full raise (WSOP Rule 96).

    Returns:
        Tuple of (reopen, new last raise size, new consecutive all-in sum)
    """
    # Anything short that is not all-in was already rejected
    if not rules.enforce_min_raise or not is_all_in:
        return True, increment, 0

    all_in_sum += increment
    if is_action_reopened(increment, last_raise, rules.big_blind):
        return True, increment, 0
    if is_action_reopened(all_in_sum, last_raise, rules.big_blind):
        logger.debug(f"Consecutive all-ins add up to {all_in_sum}, betting reopened")
        return True, all_in_sum, 0
    return False, last_raise, all_in_sum


def _check_amount(amount: int, seat: Seat) -> None:
    if amount <= 0:
        raise IllegalMoveError("Amount must be positive")
    if amount > seat.stack:
        raise IllegalMoveError(f"Cannot put in {amount}, stack is only {seat.stack}")
