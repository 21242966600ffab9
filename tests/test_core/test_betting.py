"""
Tests for the betting round engine: turn order, legal moves and round closure.
"""

import pytest
from holdem.config import TableRules
from holdem.core.betting import is_round_closed, legal_actions
from holdem.core.game import advance_street, create_hand, deal, play
from holdem.core.player import PlayerState, Seat
from holdem.core.rules import BettingStatus, Move
from holdem.errors import IllegalMoveError


def _types(actions):
    return [a["type"] for a in actions]


class TestTurnOrder:
    """Tests for passing the turn around the table."""

    def test_check_leaves_pot_untouched_and_moves_turn(self, heads_up_hand):
        hand = play(heads_up_hand, Move.check())
        assert hand.pot == 0
        assert hand.seats[0].state == PlayerState.DEALT
        assert hand.seats[1].state == PlayerState.ACTIVE
        assert hand.active_index == 1

    def test_exactly_one_active_player(self, three_player_hand):
        hand = play(three_player_hand, Move.bet(10))
        active = [s for s in hand.seats if s.state == PlayerState.ACTIVE]
        assert len(active) == 1
        assert active[0].name == "Bob"

    def test_folded_players_are_skipped(self, three_player_hand):
        hand = play(three_player_hand, Move.check())   # Alice
        hand = play(hand, Move.fold())                 # Bob
        assert hand.active_player.name == "Carol"
        hand = play(hand, Move.bet(10))                # Carol
        assert hand.active_player.name == "Alice"

    def test_all_in_players_are_skipped(self, three_player_hand):
        hand = play(three_player_hand, Move.all_in())  # Alice, 100
        hand = play(hand, Move.call())                 # Bob
        assert hand.active_player.name == "Carol"
        hand = play(hand, Move.fold())
        assert hand.status == BettingStatus.ROUND_CLOSED
        assert hand.active_index is None

    def test_wrong_player(self, heads_up_hand):
        with pytest.raises(IllegalMoveError) as exc_info:
            play(heads_up_hand, Move.check(), player="Jean")
        assert "Will" in exc_info.value.reason

    def test_named_player_on_turn(self, heads_up_hand):
        hand = play(heads_up_hand, Move.check(), player="Will")
        assert hand.active_player.name == "Jean"


class TestMoves:
    """Tests for individual moves."""

    def test_bet_increases_pot_and_reduces_stack(self, heads_up_hand):
        hand = play(heads_up_hand, Move.bet(3))
        assert hand.pot == 3
        assert hand.bet_to_call == 3
        assert hand.seats[0].stack == 7
        assert hand.seats[0].street_bet == 3

    def test_bet_when_facing_bet(self, heads_up_hand):
        hand = play(heads_up_hand, Move.bet(3))
        with pytest.raises(IllegalMoveError) as exc_info:
            play(hand, Move.bet(3))
        assert "facing a bet" in exc_info.value.reason

    def test_illegal_move_leaves_hand_unchanged(self, heads_up_hand):
        hand = play(heads_up_hand, Move.bet(3))
        with pytest.raises(IllegalMoveError):
            play(hand, Move.check())
        assert hand.pot == 3
        assert hand.active_index == 1
        assert hand.seats[1].stack == 2

    def test_bet_more_than_stack(self, heads_up_hand):
        with pytest.raises(IllegalMoveError):
            play(heads_up_hand, Move.bet(11))
        assert heads_up_hand.pot == 0

    def test_bet_must_be_positive(self, heads_up_hand):
        with pytest.raises(IllegalMoveError):
            play(heads_up_hand, Move.bet(0))

    def test_check_facing_bet(self, heads_up_hand):
        hand = play(heads_up_hand, Move.bet(3))
        with pytest.raises(IllegalMoveError):
            play(hand, Move.check())

    def test_call_with_nothing_to_call(self, heads_up_hand):
        with pytest.raises(IllegalMoveError):
            play(heads_up_hand, Move.call())

    def test_raise_without_bet(self, heads_up_hand):
        with pytest.raises(IllegalMoveError) as exc_info:
            play(heads_up_hand, Move.raise_by(3))
        assert "No bet to raise" in exc_info.value.reason

    def test_short_call_puts_player_all_in(self, heads_up_hand):
        hand = play(heads_up_hand, Move.bet(3))
        hand = play(hand, Move.call())
        jean = hand.seats[1]
        assert jean.state == PlayerState.ALL_IN
        assert jean.stack == 0
        assert hand.pot == 5
        assert hand.status == BettingStatus.ROUND_CLOSED

    def test_raise_must_exceed_call(self, three_player_hand):
        hand = play(three_player_hand, Move.bet(10))
        with pytest.raises(IllegalMoveError):
            play(hand, Move.raise_by(10))

    def test_raise_reopens_action(self, three_player_hand):
        hand = play(three_player_hand, Move.bet(10))   # Alice
        hand = play(hand, Move.call())                 # Bob
        hand = play(hand, Move.raise_by(30))           # Carol, to 30
        assert hand.bet_to_call == 30
        assert hand.pot == 50
        assert hand.status == BettingStatus.AWAITING_ACTION
        assert hand.active_player.name == "Alice"

        hand = play(hand, Move.call())
        assert hand.active_player.name == "Bob"
        hand = play(hand, Move.call())
        assert hand.status == BettingStatus.ROUND_CLOSED
        assert hand.pot == 90

    def test_fold_to_one_player_ends_hand(self, three_player_hand):
        hand = play(three_player_hand, Move.bet(10))
        hand = play(hand, Move.fold())
        assert hand.status == BettingStatus.AWAITING_ACTION
        hand = play(hand, Move.fold())
        assert hand.status == BettingStatus.HAND_ENDED_BY_FOLD
        assert hand.active_index is None

    def test_no_moves_after_round_closed(self, heads_up_hand):
        hand = play(heads_up_hand, Move.check())
        hand = play(hand, Move.check())
        assert hand.status == BettingStatus.ROUND_CLOSED
        with pytest.raises(IllegalMoveError):
            play(hand, Move.check())

    def test_all_in_as_raise(self, three_player_hand):
        hand = play(three_player_hand, Move.bet(40))
        hand = play(hand, Move.all_in())
        assert hand.bet_to_call == 100
        assert hand.seats[1].state == PlayerState.ALL_IN
        assert hand.active_player.name == "Carol"


class TestRoundClosure:
    """Tests for deciding when a street's betting is over."""

    def test_all_check(self, three_player_hand):
        hand = three_player_hand
        for _ in range(3):
            hand = play(hand, Move.check())
        assert hand.status == BettingStatus.ROUND_CLOSED

    def test_pot_matches_committed_chips(self, three_player_hand):
        """After closure the pot holds every increment and bets are level."""
        moves = [Move.bet(10), Move.raise_by(25), Move.call(), Move.call()]
        hand = three_player_hand
        added = 0
        for move in moves:
            before = hand.pot
            hand = play(hand, move)
            added += hand.pot - before
        assert hand.status == BettingStatus.ROUND_CLOSED
        assert hand.pot == added == 75
        for seat in hand.seats:
            if seat.is_in_hand:
                assert seat.street_bet == hand.bet_to_call
        assert hand.pot == sum(s.total_committed for s in hand.seats)

    def test_single_actor_who_matched_closes(self):
        seats = [
            Seat("A", 0, state=PlayerState.ALL_IN, street_bet=50),
            Seat("B", 100, state=PlayerState.DEALT, street_bet=50),
        ]
        assert is_round_closed(seats, 50)

    def test_single_actor_facing_bet_stays_open(self):
        seats = [
            Seat("A", 0, state=PlayerState.ALL_IN, street_bet=50),
            Seat("B", 100, state=PlayerState.DEALT, street_bet=0),
        ]
        assert not is_round_closed(seats, 50)


class TestLegalActions:
    """Tests for legal_actions."""

    def test_unopened_pot(self, heads_up_hand):
        actions = legal_actions(heads_up_hand)
        assert _types(actions) == ["FOLD", "CHECK", "BET", "ALL_IN"]
        bet = actions[2]
        assert (bet["min"], bet["max"]) == (1, 10)

    def test_short_stack_facing_bet(self, heads_up_hand):
        hand = play(heads_up_hand, Move.bet(3))
        actions = legal_actions(hand)
        assert _types(actions) == ["FOLD", "CALL", "ALL_IN"]
        assert actions[1]["amount"] == 2

    def test_raise_range(self, three_player_hand):
        hand = play(three_player_hand, Move.bet(10))
        raise_action = next(a for a in legal_actions(hand) if a["type"] == "RAISE")
        assert (raise_action["min"], raise_action["max"]) == (11, 100)

    def test_nothing_when_round_closed(self, heads_up_hand):
        hand = play(play(heads_up_hand, Move.check()), Move.check())
        assert legal_actions(hand) == []


class TestMinimumRaise:
    """Tests for the optional full-raise rule."""

    @pytest.fixture
    def hand(self):
        rules = TableRules(small_blind=10, big_blind=20, enforce_min_raise=True)
        return deal(create_hand([("A", 1000), ("B", 1000), ("C", 1000)], rng_seed=3, rules=rules))

    def test_bet_not_allowed_preflop(self, hand):
        with pytest.raises(IllegalMoveError):
            play(hand, Move.bet(40))

    def test_short_raise_rejected(self, hand):
        assert hand.active_player.name == "C"
        with pytest.raises(IllegalMoveError) as exc_info:
            play(hand, Move.raise_by(30))
        assert "40" in exc_info.value.reason

    def test_full_raise_accepted(self, hand):
        hand = play(hand, Move.raise_by(40))
        assert hand.bet_to_call == 40
        assert hand.last_raise_size == 20

    def test_raise_range_uses_min_raise(self, hand):
        raise_action = next(a for a in legal_actions(hand) if a["type"] == "RAISE")
        assert raise_action["min"] == 40

    def test_short_all_in_does_not_reopen(self):
        rules = TableRules(enforce_min_raise=True)
        hand = deal(create_hand([("A", 1000), ("B", 1000), ("C", 150)], rng_seed=5, rules=rules))
        hand = play(hand, Move.bet(100))
        hand = play(hand, Move.call())
        hand = play(hand, Move.all_in())
        assert hand.bet_to_call == 150
        assert hand.last_raise_size == 100
        # Both callers still owe 50 but were not reopened
        assert hand.seats[0].has_acted
        assert hand.seats[1].has_acted
        assert hand.active_player.name == "A"
        types = [a["type"] for a in legal_actions(hand)]
        assert types == ["FOLD", "CALL"]
        with pytest.raises(IllegalMoveError):
            play(hand, Move.raise_by(250))
        with pytest.raises(IllegalMoveError):
            play(hand, Move.all_in())
        hand = play(hand, Move.call())
        hand = play(hand, Move.call())
        assert hand.status == BettingStatus.ROUND_CLOSED
        assert hand.pot == 450

    def test_player_who_has_not_acted_may_raise_short_all_in(self):
        rules = TableRules(enforce_min_raise=True)
        hand = deal(create_hand([("A", 1000), ("B", 150), ("C", 1000)], rng_seed=5, rules=rules))
        hand = play(hand, Move.bet(100))
        hand = play(hand, Move.all_in())
        assert hand.active_player.name == "C"
        raise_action = next(a for a in legal_actions(hand) if a["type"] == "RAISE")
        assert raise_action["min"] == 250
        hand = play(hand, Move.raise_by(250))
        assert hand.bet_to_call == 250
        assert hand.active_player.name == "A"
        assert any(a["type"] == "RAISE" for a in legal_actions(hand))

    def test_consecutive_short_all_ins_reopen(self):
        """Two short all-ins that add up to a full raise reopen the betting."""
        rules = TableRules(enforce_min_raise=True)
        players = [("A", 1000), ("B", 1000), ("C", 160), ("D", 220)]
        hand = deal(create_hand(players, rng_seed=5, rules=rules))
        hand = play(hand, Move.bet(100))
        hand = play(hand, Move.call())
        hand = play(hand, Move.all_in())
        assert hand.all_in_raise_sum == 60
        assert hand.seats[0].has_acted
        hand = play(hand, Move.all_in())

        assert hand.bet_to_call == 220
        assert hand.last_raise_size == 120
        assert hand.all_in_raise_sum == 0
        assert hand.active_player.name == "A"
        assert not hand.seats[0].has_acted
        raise_action = next(a for a in legal_actions(hand) if a["type"] == "RAISE")
        assert raise_action["min"] == 240
        hand = play(hand, Move.raise_by(240))
        assert hand.bet_to_call == 340

    def test_full_raise_resets_all_in_sum(self):
        rules = TableRules(enforce_min_raise=True)
        players = [("A", 1000), ("B", 1000), ("C", 160)]
        hand = deal(create_hand(players, rng_seed=5, rules=rules))
        hand = play(hand, Move.bet(100))
        hand = play(hand, Move.call())
        hand = play(hand, Move.all_in())
        hand = play(hand, Move.call())
        hand = play(hand, Move.call())
        assert hand.status == BettingStatus.ROUND_CLOSED
        assert hand.all_in_raise_sum == 60
        hand = advance_street(hand)
        assert hand.all_in_raise_sum == 0
        assert hand.last_raise_size == 0

    def test_short_all_in_reopens_without_min_raise(self):
        hand = deal(create_hand([("A", 1000), ("B", 1000), ("C", 100)], rng_seed=5))
        hand = play(hand, Move.bet(60))
        hand = play(hand, Move.call())
        hand = play(hand, Move.all_in())
        assert not hand.seats[0].has_acted
        assert any(a["type"] == "RAISE" for a in legal_actions(hand))
