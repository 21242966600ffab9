"""
Texas Hold'em Hand Orchestrator.

This module drives a single hand through its streets:

    create_hand -> deal -> PREFLOP betting -> advance_street (flop)
    -> FLOP betting -> advance_street (turn) -> TURN betting
    -> advance_street (river) -> RIVER betting -> showdown

A Hand is an immutable value. Every operation returns a new Hand and leaves
the one passed in untouched, so an error never corrupts a hand in progress
and several hands can be kept side by side without sharing state.

If every player folds but one, the betting engine ends the hand early and
``showdown`` pays the whole pot to the survivor without revealing cards.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from typing import (
    TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union,
)

from holdem.config import TableRules, load_rules, load_seat
from holdem.core.betting import apply_move, legal_actions, start_round
from holdem.core.card import Card, Deck
from holdem.core.hand import HandRank, evaluate
from holdem.core.player import Player, Seat
from holdem.core.pots import Pot, build_pots, payout_order, split_pot
from holdem.core.rules import (
    ActionRecord, ActionType, BettingStatus, GamePhase, Move,
    NEXT_STREET, HOLE_CARDS, TOTAL_COMMUNITY_CARDS,
    get_blind_positions, get_first_to_act_preflop, get_first_to_act_postflop,
)
from holdem.errors import IllegalMoveError, InsufficientCardsError, InvalidConfigurationError

if TYPE_CHECKING:
    from holdem.agents.base import BaseAgent


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Hand:
    """
    One hand of Texas Hold'em.

    Attributes:
        seats: Player ledger in seating order, which is also turn order
        deck: Undealt cards
        rules: Blind and betting policy
        button: Seat index of the dealer button
        community_cards: Board cards, 0 to 5
        pot: Chips committed by all players this hand
        phase: Current street (or WAITING / SHOWDOWN / HAND_OVER)
        status: Betting round state
        bet_to_call: Street bet every player must match to stay in
        last_raise_size: Size of the last bet or full raise this street
        all_in_raise_sum: Total of the short all-in raises since the last
            full raise this street
        active_index: Seat whose turn it is, if any
        history: Every blind, ante and move so far
    """
    seats: Tuple[Seat, ...]
    deck: Deck
    rules: TableRules
    button: int
    community_cards: Tuple[Card, ...] = ()
    pot: int = 0
    phase: GamePhase = GamePhase.WAITING
    status: BettingStatus = BettingStatus.NOT_STARTED
    bet_to_call: int = 0
    last_raise_size: int = 0
    all_in_raise_sum: int = 0
    active_index: Optional[int] = None
    history: Tuple[ActionRecord, ...] = ()

    @property
    def num_players(self) -> int:
        """Number of players at the table."""
        return len(self.seats)

    @property
    def num_in_hand(self) -> int:
        """Number of players who have not folded."""
        return sum(1 for s in self.seats if s.is_in_hand)

    @property
    def active_player(self) -> Optional[Seat]:
        """The player whose turn it is to act."""
        if self.active_index is None:
            return None
        return self.seats[self.active_index]

    @property
    def is_over(self) -> bool:
        return self.phase == GamePhase.HAND_OVER

    def seat(self, name: str) -> Seat:
        """Look a player up by name."""
        for seat in self.seats:
            if seat.name == name:
                return seat
        raise KeyError(name)

    def __repr__(self) -> str:
        return (
            f"Hand(phase={self.phase.name}, status={self.status.name}, "
            f"pot={self.pot}, to_call={self.bet_to_call}, active={self.active_index})"
        )


@dataclass(frozen=True)
class Payout:
    """Chips a player collects at the end of the hand."""
    player: str
    amount: int


@dataclass(frozen=True)
class RevealedHand:
    """A hand shown down."""
    player: str
    cards: Tuple[Card, ...]  # Best five cards
    rank: HandRank


@dataclass(frozen=True)
class HandResult:
    """Outcome of a finished hand."""
    winners: List[Payout]
    revealed_hands: List[RevealedHand] = field(default_factory=list)
    pots: List[Pot] = field(default_factory=list)
    hand: Optional[Hand] = None

    @property
    def stacks(self) -> Dict[str, int]:
        """Final stacks after the payout."""
        if self.hand is None:
            return {}
        return {s.name: s.stack for s in self.hand.seats}

    @property
    def showdown(self) -> bool:
        """Whether cards were revealed."""
        return bool(self.revealed_hands)


PlayerEntry = Union[Tuple[str, int], Mapping[str, Any], Any]


def create_hand(
    players: Sequence[PlayerEntry],
    rng_seed: Optional[int] = None,
    *,
    deck: Optional[Union[Deck, Iterable[Card]]] = None,
    rules: Optional[Union[TableRules, Mapping[str, Any]]] = None,
    button: Optional[int] = None,
) -> Hand:
    """
    Create a new hand with every player waiting to be dealt.

    Args:
        players: Ordered ``(name, starting_stack)`` pairs, in seating order
        rng_seed: Seed for the deck shuffle; the same seed deals the same cards
        deck: Explicit card order to use instead of a shuffled deck
        rules: Table rules (blinds, antes, raise policy)
        button: Seat of the dealer button, by default the last seat so that
            seat 0 is first to act

    Raises:
        InvalidConfigurationError: If the table cannot play a hand
    """
    table_rules = load_rules(rules)
    seats = tuple(
        Seat.for_player(Player(cfg.name, cfg.stack)) for cfg in map(load_seat, players)
    )

    if len(seats) < table_rules.min_players:
        raise InvalidConfigurationError(
            f"Need at least {table_rules.min_players} players, got {len(seats)}"
        )
    if len(seats) > table_rules.max_players:
        raise InvalidConfigurationError(
            f"At most {table_rules.max_players} players allowed, got {len(seats)}"
        )
    names = [s.name for s in seats]
    if len(set(names)) != len(names):
        raise InvalidConfigurationError(f"Player names must be unique: {names}")

    if button is None:
        button = len(seats) - 1
    if not 0 <= button < len(seats):
        raise InvalidConfigurationError(f"Button seat {button} is not at the table")

    if deck is None:
        deck = Deck.shuffled(rng_seed)
    elif not isinstance(deck, Deck):
        deck = Deck(deck)

    logger.info(f"New hand: {len(seats)} players, button at seat {button}")
    return Hand(seats=seats, deck=deck, rules=table_rules, button=button)


def deal(hand: Hand) -> Hand:
    """
    Post antes and blinds, deal two hole cards to every player and open
    preflop betting.

    Cards are drawn two at a time in seating order, so the first player
    gets the top two cards of the deck.

    Raises:
        InsufficientCardsError: If the deck cannot cover every player
        IllegalMoveError: If the hand was already dealt
    """
    if hand.phase != GamePhase.WAITING:
        raise IllegalMoveError("Hole cards have already been dealt")

    needed = HOLE_CARDS * hand.num_players
    if len(hand.deck) < needed:
        raise InsufficientCardsError(needed, len(hand.deck))

    rules = hand.rules
    seats = list(hand.seats)
    history = list(hand.history)
    pot = 0
    bet_to_call = 0

    if rules.ante > 0:
        for i, seat in enumerate(seats):
            posted = min(rules.ante, seat.stack)
            seats[i] = seat.commit(posted, f"ANTE {posted}", street=False)
            history.append(ActionRecord(seat.name, "ANTE", posted, GamePhase.PREFLOP))
            pot += posted

    if rules.has_blinds:
        sb_pos, bb_pos = get_blind_positions(hand.num_players, hand.button)
        for pos, label, size in (
            (sb_pos, "SMALL_BLIND", rules.small_blind),
            (bb_pos, "BIG_BLIND", rules.big_blind),
        ):
            posted = min(size, seats[pos].stack)
            seats[pos] = seats[pos].commit(posted, f"{label} {posted}")
            history.append(ActionRecord(seats[pos].name, label, posted, GamePhase.PREFLOP))
            pot += posted
        bet_to_call = rules.big_blind
        logger.debug(f"Blinds posted: SB seat {sb_pos}, BB seat {bb_pos}")

    deck = hand.deck
    for i, seat in enumerate(seats):
        cards, deck = deck.draw(HOLE_CARDS)
        seats[i] = seat.deal_cards(tuple(cards))

    hand = replace(
        hand,
        seats=tuple(seats),
        deck=deck,
        pot=pot,
        phase=GamePhase.PREFLOP,
        bet_to_call=bet_to_call,
        last_raise_size=rules.big_blind,
        history=tuple(history),
    )
    first = get_first_to_act_preflop(hand.num_players, hand.button, blinds=rules.has_blinds)
    logger.info(f"Hole cards dealt, pot={pot}")
    return start_round(hand, first)


def deal_community(hand: Hand, count: int) -> Hand:
    """
    Draw ``count`` cards onto the board, burning one first if the rules say so.

    Cards can only be added between betting rounds.

    Raises:
        InsufficientCardsError: If the deck runs out
        IllegalMoveError: If betting is still open or the board would
            exceed five cards
    """
    if hand.status != BettingStatus.ROUND_CLOSED:
        raise IllegalMoveError(f"Cannot deal the board while betting is {hand.status.name}")
    if count <= 0:
        raise ValueError(f"Must deal at least one card, got {count}")
    if len(hand.community_cards) + count > TOTAL_COMMUNITY_CARDS:
        raise IllegalMoveError(
            f"Board already has {len(hand.community_cards)} cards, cannot add {count}"
        )

    deck = hand.deck
    needed = count + (1 if hand.rules.burn_cards else 0)
    if len(deck) < needed:
        raise InsufficientCardsError(needed, len(deck))
    if hand.rules.burn_cards:
        _, deck = deck.draw(1)
    cards, deck = deck.draw(count)
    return replace(hand, deck=deck, community_cards=hand.community_cards + tuple(cards))


def play(hand: Hand, move: Move, *, player: Optional[str] = None) -> Hand:
    """
    Apply a move by the active player.

    Args:
        hand: Hand awaiting an action
        move: Fold, check, call, bet, raise or all-in
        player: Optional name of the acting player, checked against the turn

    Raises:
        IllegalMoveError: If the move is not allowed; ``hand`` is unchanged
    """
    return apply_move(hand, move, player)


def advance_street(hand: Hand) -> Hand:
    """
    Move on once the current betting round has closed.

    Deals the flop, turn or river and opens its betting round with the first
    player left of the button. After the river it moves the hand to
    SHOWDOWN.

    Raises:
        IllegalMoveError: If betting is still open or the hand is over
        InsufficientCardsError: If the deck runs out
    """
    if hand.status == BettingStatus.HAND_ENDED_BY_FOLD:
        raise IllegalMoveError("Hand ended by fold, nothing left to deal")
    if hand.status != BettingStatus.ROUND_CLOSED:
        raise IllegalMoveError(f"Betting round is not closed ({hand.status.name})")

    if hand.phase == GamePhase.RIVER:
        logger.info(f"River betting closed, showdown for pot={hand.pot}")
        return replace(hand, phase=GamePhase.SHOWDOWN)
    if hand.phase not in NEXT_STREET:
        raise IllegalMoveError(f"No street follows {hand.phase.name}")

    next_phase, count = NEXT_STREET[hand.phase]
    hand = deal_community(hand, count)
    hand = replace(
        hand,
        seats=tuple(s.reset_for_new_street() for s in hand.seats),
        phase=next_phase,
        bet_to_call=0,
        last_raise_size=0,
        all_in_raise_sum=0,
    )
    logger.info(
        f"{next_phase.name}: {' '.join(str(c) for c in hand.community_cards)} pot={hand.pot}"
    )
    return start_round(hand, get_first_to_act_postflop(hand.num_players, hand.button))


def showdown(hand: Hand) -> HandResult:
    """
    Pay out the pot.

    If everyone else folded, the last player in the hand takes the whole pot
    and no cards are revealed. Otherwise every remaining hand is evaluated,
    each main or side pot goes to the best hand eligible for it, and ties
    split the pot with odd chips handed out per the table's odd chip rule.

    Raises:
        IllegalMoveError: If the hand has not reached showdown
    """
    if hand.is_over:
        raise IllegalMoveError("Hand has already been paid out")

    if hand.status == BettingStatus.HAND_ENDED_BY_FOLD:
        return _win_by_fold(hand)

    if hand.status != BettingStatus.ROUND_CLOSED or hand.phase not in (
        GamePhase.RIVER, GamePhase.SHOWDOWN
    ):
        raise IllegalMoveError(
            f"Cannot show down in {hand.phase.name} with status {hand.status.name}"
        )

    contenders = [i for i, s in enumerate(hand.seats) if s.is_in_hand]
    ranks: Dict[int, HandRank] = {
        i: evaluate(hand.seats[i].hole_cards, hand.community_cards) for i in contenders
    }
    revealed = [
        RevealedHand(hand.seats[i].name, ranks[i].cards, ranks[i]) for i in contenders
    ]

    pots = build_pots(hand.seats)
    order = payout_order(hand.num_players, hand.button, hand.rules.odd_chip_rule)
    winnings: Dict[int, int] = {}
    for pot in pots:
        best = max(ranks[i] for i in pot.eligible)
        pot_winners = [i for i in pot.eligible if ranks[i] == best]
        for seat_index, amount in split_pot(pot.amount, pot_winners, order).items():
            winnings[seat_index] = winnings.get(seat_index, 0) + amount
    if not pots:
        # Nothing was bet, the best hand still wins
        best = max(ranks.values())
        winnings = {i: 0 for i in contenders if ranks[i] == best}

    for i in contenders:
        logger.info(f"{hand.seats[i].name} shows {ranks[i]}")
    return _pay(hand, winnings, revealed, pots)


def _win_by_fold(hand: Hand) -> HandResult:
    """End the hand when only one player remains."""
    winner = next(i for i, s in enumerate(hand.seats) if s.is_in_hand)
    pots = [Pot(amount=hand.pot, eligible=(winner,))]
    return _pay(hand, {winner: hand.pot}, [], pots)


def _pay(
    hand: Hand,
    winnings: Dict[int, int],
    revealed: List[RevealedHand],
    pots: List[Pot],
) -> HandResult:
    seats = [s.win(winnings.get(i, 0)) for i, s in enumerate(hand.seats)]
    seats = [s.deactivate() for s in seats]
    winners = [
        Payout(hand.seats[i].name, winnings[i])
        for i in sorted(winnings)
    ]
    for payout in winners:
        logger.info(f"{payout.player} wins {payout.amount}")

    final = replace(
        hand, seats=tuple(seats), pot=0, phase=GamePhase.HAND_OVER, active_index=None,
    )
    return HandResult(winners=winners, revealed_hands=revealed, pots=pots, hand=final)


def _default_move(hand: Hand) -> Move:
    """Move injected when a player keeps making illegal moves."""
    types = [a["type"] for a in legal_actions(hand)]
    if ActionType.CHECK.value in types:
        return Move.check()
    return Move.fold()


def run_hand(
    hand: Hand,
    agents: Union[Mapping[str, BaseAgent], Sequence[BaseAgent]],
    *,
    max_retries: int = 3,
) -> HandResult:
    """
    Play a hand to the end, asking each player's agent for its moves.

    Args:
        hand: A created (or already dealt) hand
        agents: Agents keyed by player name, or one per seat in seating order
        max_retries: Illegal moves tolerated before the default move
            (check if possible, otherwise fold) is played instead

    Returns:
        The hand result after showdown or the last fold
    """
    if isinstance(agents, Mapping):
        by_name = dict(agents)
    else:
        if len(agents) != hand.num_players:
            raise InvalidConfigurationError(
                f"Need one agent per seat, got {len(agents)} for {hand.num_players}"
            )
        by_name = {seat.name: agent for seat, agent in zip(hand.seats, agents)}
    missing = [s.name for s in hand.seats if s.name not in by_name]
    if missing:
        raise InvalidConfigurationError(f"No agent for players: {missing}")

    if hand.phase == GamePhase.WAITING:
        hand = deal(hand)
    for agent in by_name.values():
        agent.on_hand_start(hand)

    while True:
        if hand.status == BettingStatus.AWAITING_ACTION:
            hand = _request_move(hand, by_name, max_retries)
        elif hand.status == BettingStatus.ROUND_CLOSED and hand.phase != GamePhase.SHOWDOWN:
            hand = advance_street(hand)
        else:
            break

    result = showdown(hand)
    for agent in by_name.values():
        agent.on_hand_end(result)
    return result


def _request_move(hand: Hand, agents: Mapping[str, BaseAgent], max_retries: int) -> Hand:
    seat = hand.active_player
    if seat is None:
        raise IllegalMoveError(f"No action is awaited ({hand.status.name})")
    agent = agents[seat.name]

    for attempt in range(max_retries):
        agent.observe(hand)
        move = agent.act(hand, legal_actions(hand))
        try:
            return play(hand, move, player=seat.name)
        except IllegalMoveError as exc:
            logger.debug(f"{seat.name} attempt {attempt + 1}: {move} rejected: {exc.reason}")

    move = _default_move(hand)
    logger.warning(f"{seat.name} made {max_retries} illegal moves, playing {move}")
    return play(hand, move, player=seat.name)
