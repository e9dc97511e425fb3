"""
Tests for share purchases.
"""

import pytest

from ..engine_core.action import BuyShares
from ..engine_core.errors import GameError
from ..engine_core.state import GamePhase
from .conftest import assert_conserved

TOWER_5 = ["1A", "2A", "3A", "4A", "5A"]


@pytest.fixture
def buying_state(make_state):
    """Alice to buy; Tower has 5 tiles ($500), Luxor is not on the board."""
    return make_state(
        board={"Tower": TOWER_5},
        hands={0: ["1I", "2I", "3I", "4I", "5I"], 1: ["7I"]},
        phase=GamePhase.BUY_SHARES,
    )


class TestBuyShares:
    """Tests for the buy-shares step."""

    def test_buy_three_shares(self, reducer, buying_state):
        """Buying debits money, moves shares and advances the turn."""
        state = reducer.apply(buying_state, BuyShares("alice", {"Tower": 3})).new_state

        alice = state.get_player("alice")
        assert alice.money == 3000 - 1500
        assert [s.location for s in state.hotel("Tower").shares[:4]] == [0, 0, 0, "bank"]
        assert state.current_player_idx == 1
        assert state.merge_context is None
        assert state.phase == GamePhase.PLAY_TILE
        assert_conserved(state)

    def test_empty_purchase_passes(self, reducer, buying_state):
        result = reducer.apply(buying_state, BuyShares("alice"))
        assert result.new_state.current_player.name == "bob"
        assert result.new_state.get_player("alice").money == 3000

    def test_refills_hand(self, reducer, buying_state):
        """The outgoing player draws back up to six tiles."""
        state = reducer.apply(buying_state, BuyShares("alice")).new_state
        assert len(state.hand(0)) == 6

    def test_more_than_three(self, reducer, buying_state):
        with pytest.raises(GameError, match="only buy 3 shares"):
            reducer.apply(buying_state, BuyShares("alice", {"Tower": 4}))

    def test_zero_line_item(self, reducer, buying_state):
        with pytest.raises(GameError, match="Can't buy zero shares in hotel Tower"):
            reducer.apply(buying_state, BuyShares("alice", {"Tower": 0}))

    def test_unknown_hotel(self, reducer, buying_state):
        with pytest.raises(GameError, match="does not exist"):
            reducer.apply(buying_state, BuyShares("alice", {"Hilton": 1}))

    def test_hotel_not_on_board(self, reducer, buying_state):
        with pytest.raises(GameError, match="not on the board"):
            reducer.apply(buying_state, BuyShares("alice", {"Luxor": 1}))

    def test_not_enough_money(self, reducer, make_state):
        state = make_state(board={"Tower": TOWER_5}, money={0: 1000}, phase=GamePhase.BUY_SHARES)
        with pytest.raises(GameError, match=r"You need \$1500 .* only have \$1000"):
            reducer.apply(state, BuyShares("alice", {"Tower": 3}))

    def test_bank_short(self, reducer, make_state):
        state = make_state(
            board={"Tower": TOWER_5},
            shares={"Tower": {1: 24}},
            phase=GamePhase.BUY_SHARES,
        )
        with pytest.raises(GameError, match="only has 1 shares left"):
            reducer.apply(state, BuyShares("alice", {"Tower": 2}))

    def test_wrong_phase_and_turn(self, reducer, buying_state):
        with pytest.raises(GameError, match="Not bob's turn"):
            reducer.apply(buying_state, BuyShares("bob"))
        playing = buying_state._copy_with(phase=GamePhase.PLAY_TILE)
        with pytest.raises(GameError, match="expected BUY_SHARES"):
            reducer.apply(playing, BuyShares("alice"))

    def test_rejection_leaves_state_alone(self, reducer, buying_state, make_state):
        """The same invalid action fails the same way and changes nothing."""
        before = make_state(
            board={"Tower": TOWER_5},
            hands={0: ["1I", "2I", "3I", "4I", "5I"], 1: ["7I"]},
            phase=GamePhase.BUY_SHARES,
        )
        errors = []
        for _ in range(2):
            with pytest.raises(GameError) as exc:
                reducer.apply(buying_state, BuyShares("alice", {"Tower": 4}))
            errors.append((exc.value.code, exc.value.message))
        assert errors[0] == errors[1]
        assert buying_state == before
        assert buying_state.get_player("alice").money == 3000


class TestBuySharesAction:
    """Tests for the purchase action value."""

    def test_is_hashable_and_order_free(self):
        first = BuyShares("alice", {"Tower": 2, "Luxor": 1})
        second = BuyShares("alice", {"Luxor": 1, "Tower": 2})

        assert first == second
        assert hash(first) == hash(second)
        assert first.purchases == {"Luxor": 1, "Tower": 2}

    def test_caller_dict_does_not_leak_in(self):
        requested = {"Tower": 1}
        action = BuyShares("alice", requested)
        requested["Tower"] = 3

        assert action.purchases == {"Tower": 1}
        assert action.shares == (("Tower", 1),)
