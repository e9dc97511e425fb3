"""
Tile placement analysis.

Classifies what happens when a tile lands on the board by looking at its
four orthogonal neighbours. The analysis is read-only; the reducer acts
on the returned Placement.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from .hotels import available_hotels
from .state import GameState, Position, Tile
from .tiles import adjacent_board_tiles
from ..config import GameConfig, DEFAULT_CONFIG


class PlacementKind(Enum):
    """Outcome of placing a tile."""
    SIMPLE = "simple"
    FOUNDS_HOTEL = "founds_hotel"
    GROWS_HOTEL = "grows_hotel"
    MERGER = "merger"


@dataclass(frozen=True)
class Placement:
    """
    Result of analyzing a tile placement.

    adjacent_hotels: distinct hotel names among the neighbours
    additional_tiles: neighbouring board tiles with no hotel
    available_hotels: hotels that could be founded right now
    """
    kind: PlacementKind
    tile: Position
    adjacent_hotels: tuple[str, ...] = ()
    additional_tiles: tuple[Position, ...] = ()
    available_hotels: tuple[str, ...] = ()

    @property
    def absorbed_tiles(self) -> tuple[Position, ...]:
        """The played tile plus its unaffiliated neighbours."""
        return (self.tile,) + self.additional_tiles


def analyze_tile_placement(state: GameState, tile: Tile,
                           config: GameConfig = DEFAULT_CONFIG) -> Placement:
    """
    Classify a placement against the current board.

    `tile` does not need to be on the board yet; only its neighbours are
    inspected.
    """
    neighbours = adjacent_board_tiles(state, tile.row, tile.col, config)

    adjacent_hotels: list[str] = []
    for t in neighbours:
        if t.hotel and t.hotel not in adjacent_hotels:
            adjacent_hotels.append(t.hotel)
    additional = tuple(t.position for t in neighbours if not t.hotel)

    if len(adjacent_hotels) >= 2:
        kind = PlacementKind.MERGER
    elif len(adjacent_hotels) == 1:
        kind = PlacementKind.GROWS_HOTEL
    else:
        kind = PlacementKind.SIMPLE

    foundable = tuple(available_hotels(state))
    # A founder needs a hotel whose bank still has shares
    can_found = any(state.hotel(name).remaining_shares > 0 for name in foundable)
    if kind == PlacementKind.SIMPLE and additional and can_found:
        kind = PlacementKind.FOUNDS_HOTEL

    return Placement(
        kind=kind,
        tile=tile.position,
        adjacent_hotels=tuple(adjacent_hotels),
        additional_tiles=additional,
        available_hotels=foundable,
    )
