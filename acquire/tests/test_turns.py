"""
Tests for turn orchestration.

Tests:
- Starting the game and turn order
- Turn advance and wraparound
- Game end conditions and final scoring
"""

from ..engine_core.action import AddPlayer, BuyShares, StartGame
from ..engine_core.setup import initialize_game
from ..engine_core.state import BOARD, GamePhase
from ..engine_core.tiles import parse_label
from ..engine_core.turns import final_standings, is_game_over
from .conftest import assert_conserved, empty_bag

TOWER_41 = (
    [f"{c}A" for c in range(1, 13)]
    + [f"{c}B" for c in range(1, 13)]
    + [f"{c}C" for c in range(1, 13)]
    + ["1D", "2D", "3D", "4D", "5D"]
)


class TestStartGame:
    """Tests for starting a game."""

    def test_turn_order_from_drawn_tiles(self, reducer, lobby_state):
        """The player whose tile sorts first (column, then row) goes first."""
        state = lobby_state
        first = [state.tile_at(*parse_label(label)) for label in ("6A", "1B", "1A")]
        rest = tuple(t for t in state.tiles if t not in first)
        state = state._copy_with(tiles=tuple(first) + rest)
        state = reducer.apply(state, AddPlayer("bob")).new_state
        state = reducer.apply(state, AddPlayer("carol")).new_state

        state = reducer.apply(state, StartGame("alice")).new_state

        assert [p.name for p in state.players] == ["carol", "bob", "alice"]
        assert [p.id for p in state.players] == [0, 1, 2]
        assert all(state.tile_at(*parse_label(label)).location == BOARD for label in ("6A", "1B", "1A"))
        assert state.phase == GamePhase.PLAY_TILE
        assert state.current_player.name == "carol"
        assert state.current_turn == 1

    def test_hands_dealt(self, reducer):
        state = initialize_game("seeded", "alice", seed=11)
        state = reducer.apply(state, AddPlayer("bob")).new_state
        state = reducer.apply(state, AddPlayer("carol")).new_state
        state = reducer.apply(state, StartGame("alice")).new_state

        for player in state.players:
            assert len(state.hand(player.id)) == 6
            assert player.money == 3000
        assert len(state.board_tiles()) == 3
        assert len(state.bag_tiles()) == 108 - 3 - 18
        assert_conserved(state)

    def test_seed_is_reproducible(self):
        assert initialize_game("a", "alice", seed=5).tiles == initialize_game("b", "alice", seed=5).tiles
        assert initialize_game("a", "alice", seed=5).tiles != initialize_game("a", "alice", seed=6).tiles


class TestAdvanceTurn:
    """Tests for passing play to the next player."""

    def test_turn_increments_on_wrap(self, reducer, make_state):
        state = make_state(
            board={"Tower": ["1A", "2A"]},
            hands={0: ["1I"], 1: ["3I"]},
            phase=GamePhase.BUY_SHARES,
        )
        state = reducer.apply(state, BuyShares("alice")).new_state
        assert (state.current_player_idx, state.current_turn) == (1, 1)

        state = state._copy_with(phase=GamePhase.BUY_SHARES)
        state = reducer.apply(state, BuyShares("bob")).new_state
        assert (state.current_player_idx, state.current_turn) == (0, 2)

    def test_empty_hand_skips_to_buying(self, reducer, make_state):
        """A player with nothing to play starts their turn in BUY_SHARES."""
        state = make_state(
            board={"Tower": ["1A", "2A"]},
            hands={0: ["1I", "2I", "3I"]},
            phase=GamePhase.BUY_SHARES,
        )
        state = empty_bag(state)
        state = reducer.apply(state, BuyShares("alice")).new_state

        assert state.current_player.name == "bob"
        assert state.phase == GamePhase.BUY_SHARES
        assert len(state.hand(0)) == 3


class TestGameEnd:
    """Tests for end conditions and final scoring."""

    def test_41_tile_hotel_ends_game(self, reducer, make_state):
        """A 41-tile hotel ends the game even while another hotel is unsafe."""
        state = make_state(
            board={"Tower": TOWER_41, "Luxor": ["10F", "11F"]},
            shares={"Tower": {0: 2}},
            phase=GamePhase.BUY_SHARES,
        )
        state = reducer.apply(state, BuyShares("alice")).new_state

        assert state.phase == GamePhase.GAME_OVER
        # Tower at 41 tiles: $1000, sole holder takes 10000 + 5000, then sells 2
        alice = state.get_player("alice")
        assert alice.money == 3000 + 15000 + 2000
        assert state.hotel("Tower").remaining_shares == 25
        assert_conserved(state)

    def test_all_safe_ends_game(self, make_state):
        state = make_state(board={
            "Tower": [f"{c}A" for c in range(1, 12)],
            "Luxor": [f"{c}C" for c in range(1, 12)],
        })
        assert is_game_over(state)

    def test_small_hotels_keep_playing(self, make_state):
        state = make_state(board={"Tower": ["1A", "2A"]})
        assert not is_game_over(state)

    def test_no_tiles_left_ends_game(self, reducer, make_state):
        state = empty_bag(make_state(board={"Tower": ["1A", "2A"]}, phase=GamePhase.BUY_SHARES))
        state = reducer.apply(state, BuyShares("alice")).new_state
        assert state.phase == GamePhase.GAME_OVER

    def test_no_actions_after_game_over(self, reducer, make_state):
        state = make_state(phase=GamePhase.GAME_OVER)
        result = reducer.try_apply(state, BuyShares("alice"))
        assert not result.success
        assert "Game is over" in result.error

    def test_final_standings(self, make_state):
        state = make_state(players=("alice", "bob", "carol"), money={0: 100, 1: 900, 2: 500})
        assert [p.name for p in final_standings(state)] == ["bob", "carol", "alice"]
