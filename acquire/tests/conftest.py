"""
Pytest fixtures for Acquire tests.

Board positions in tests use tile labels: column number then row letter,
so "1A" is the top-left corner and "12I" the bottom-right one.
"""

import pytest

from ..config import DEFAULT_CONFIG, GameConfig
from ..engine_core.hotels import allocate_shares
from ..engine_core.reducer import Reducer
from ..engine_core.setup import initialize_game
from ..engine_core.state import BOARD, DEAD, GamePhase, GameState, Player
from ..engine_core.tiles import parse_label


def place_tiles(state: GameState, labels, location, hotel=None) -> GameState:
    """Move the tiles with the given labels to a location."""
    updated = []
    for label in labels:
        row, col = parse_label(label)
        updated.append(state.tile_at(row, col).moved_to(location, hotel))
    return state.with_tiles(updated)


def empty_bag(state: GameState) -> GameState:
    """Send every undrawn tile to the dead pile."""
    return state.with_tiles([t.moved_to(DEAD) for t in state.bag_tiles()])


@pytest.fixture
def config() -> GameConfig:
    return DEFAULT_CONFIG


@pytest.fixture
def reducer(config: GameConfig) -> Reducer:
    return Reducer(config=config)


@pytest.fixture
def lobby_state() -> GameState:
    """A fresh, unshuffled game owned by alice."""
    return initialize_game("test_game", "alice")


@pytest.fixture
def make_state():
    """
    Factory for a started game with a hand-built board.

    Args (all optional):
        players: names in turn order (ids 0..n-1), first one owns the game
        board: {hotel name or None: [labels]}
        hands: {player id: [labels]}
        shares: {hotel name: {player id: count}}
        money: {player id: amount}
        phase: current phase (PLAY_TILE)
        current: current player index (0)
    """
    def _make(
        players=("alice", "bob"),
        board=None,
        hands=None,
        shares=None,
        money=None,
        phase=GamePhase.PLAY_TILE,
        current=0,
    ) -> GameState:
        state = initialize_game("test_game", players[0])
        money = money or {}
        state = state._copy_with(
            players=tuple(
                Player(name=name, id=i, money=money.get(i, DEFAULT_CONFIG.initial_money))
                for i, name in enumerate(players)
            ),
            phase=phase,
            current_turn=1,
            current_player_idx=current,
        )
        for hotel, labels in (board or {}).items():
            state = place_tiles(state, labels, BOARD, hotel)
        for player_id, labels in (hands or {}).items():
            state = place_tiles(state, labels, player_id)
        for hotel_name, holders in (shares or {}).items():
            hotel = state.hotel(hotel_name)
            for player_id, count in holders.items():
                hotel, _ = allocate_shares(hotel, player_id, count)
            state = state.with_hotel(hotel)
        return state

    return _make


def assert_conserved(state: GameState, config: GameConfig = DEFAULT_CONFIG):
    """Share and tile conservation."""
    for hotel in state.hotels:
        assert len(hotel.shares) == config.shares_per_hotel
        held = sum(hotel.stockholders().values())
        assert hotel.remaining_shares + held == config.shares_per_hotel
    positions = [t.position for t in state.tiles]
    assert len(positions) == config.rows * config.cols
    assert len(set(positions)) == len(positions)
