"""
Tests for tile placement analysis.
"""

from ..engine_core.action import PlayTile
from ..engine_core.placement import PlacementKind, analyze_tile_placement
from ..engine_core.state import GamePhase
from ..engine_core.tiles import parse_label

ALL_HOTELS_FOUNDED = {
    "Tower": ["1A", "2A"],
    "Luxor": ["4A", "5A"],
    "Worldwide": ["7A", "8A"],
    "American": ["10A", "11A"],
    "Festival": ["1C", "2C"],
    "Imperial": ["4C", "5C"],
    "Continental": ["7C", "8C"],
}


def analyze(state, label):
    return analyze_tile_placement(state, state.tile_at(*parse_label(label)))


class TestPlacement:
    """Tests for placement classification."""

    def test_simple_placement(self, make_state):
        """No board neighbours is a simple placement."""
        placement = analyze(make_state(), "5E")
        assert placement.kind == PlacementKind.SIMPLE
        assert placement.adjacent_hotels == ()

    def test_founds_hotel(self, make_state):
        """A loose neighbour founds a hotel with both tiles."""
        state = make_state(board={None: ["1A"]})
        placement = analyze(state, "2A")

        assert placement.kind == PlacementKind.FOUNDS_HOTEL
        assert placement.absorbed_tiles == ((0, 1), (0, 0))
        assert len(placement.available_hotels) == 7

    def test_no_hotel_left_to_found(self, make_state):
        """With every hotel on the board, placement degrades to simple."""
        board = dict(ALL_HOTELS_FOUNDED)
        board[None] = ["1I"]
        placement = analyze(make_state(board=board), "2I")

        assert placement.kind == PlacementKind.SIMPLE
        assert placement.additional_tiles == ((8, 0),)

    def test_unfounded_hotels_with_empty_banks(self, reducer, make_state):
        """Unfounded hotels whose shares are all held cannot be founded."""
        board = {name: labels for name, labels in ALL_HOTELS_FOUNDED.items()
                 if name not in ("Imperial", "Continental")}
        board[None] = ["1I"]
        state = make_state(
            board=board,
            hands={0: ["2I"]},
            shares={"Imperial": {1: 25}, "Continental": {1: 25}},
        )

        placement = analyze(state, "2I")
        assert placement.kind == PlacementKind.SIMPLE

        state = reducer.apply(state, PlayTile("alice", *parse_label("2I"))).new_state
        assert state.phase == GamePhase.BUY_SHARES
        assert state.pending is None

    def test_one_bank_with_shares_is_enough(self, make_state):
        """Founding is offered while any unfounded hotel has bank shares."""
        state = make_state(board={None: ["1I"]}, shares={"Imperial": {1: 25}})
        placement = analyze(state, "2I")

        assert placement.kind == PlacementKind.FOUNDS_HOTEL
        assert "Imperial" in placement.available_hotels

    def test_grows_hotel(self, make_state):
        """One neighbouring hotel grows, absorbing loose neighbours."""
        state = make_state(board={"Tower": ["1A", "2A"], None: ["3B"]})
        placement = analyze(state, "3A")

        assert placement.kind == PlacementKind.GROWS_HOTEL
        assert placement.adjacent_hotels == ("Tower",)
        assert placement.additional_tiles == ((1, 2),)

    def test_same_hotel_twice_is_growth(self, make_state):
        """Two neighbours from the same hotel count once."""
        state = make_state(board={"Tower": ["2A", "2B", "3B"]})
        placement = analyze(state, "3A")

        assert placement.kind == PlacementKind.GROWS_HOTEL
        assert placement.adjacent_hotels == ("Tower",)

    def test_merger(self, make_state):
        """Two different neighbouring hotels trigger a merger."""
        state = make_state(board={"Tower": ["1A", "2A"], "Luxor": ["4A", "5A"]})
        placement = analyze(state, "3A")

        assert placement.kind == PlacementKind.MERGER
        assert set(placement.adjacent_hotels) == {"Tower", "Luxor"}
        assert placement.absorbed_tiles == ((0, 2),)

    def test_hotels_follow_adjacency_order(self, make_state):
        """Neighbours are read up, down, left, right whatever the bag order."""
        state = make_state(board={
            "Tower": ["5C", "5D"],
            "Luxor": ["5F", "5G"],
            "American": ["3E", "4E"],
        })
        reordered = state._copy_with(tiles=tuple(reversed(state.tiles)))

        for s in (state, reordered):
            assert analyze(s, "5E").adjacent_hotels == ("Tower", "Luxor", "American")
