"""
Tile helpers - adjacency, ordering, drawing and dead-tile detection.

All helpers are pure: they return new sequences or new states and never
reorder or mutate their inputs.
"""

from __future__ import annotations
import logging
import random
from typing import Iterable, Sequence

from .hotels import is_safe
from .state import BAG, DEAD, GameState, Position, Tile
from ..config import GameConfig, DEFAULT_CONFIG

logger = logging.getLogger(__name__)


def create_tiles(config: GameConfig = DEFAULT_CONFIG) -> tuple[Tile, ...]:
    """Every grid position, in the bag, row by row."""
    return tuple(
        Tile(row=row, col=col)
        for row in range(config.rows)
        for col in range(config.cols)
    )


def adjacent_positions(row: int, col: int, config: GameConfig = DEFAULT_CONFIG) -> list[Position]:
    """Orthogonal neighbours inside the grid: up, down, left, right."""
    candidates = [(row - 1, col), (row + 1, col), (row, col - 1), (row, col + 1)]
    return [
        (r, c) for r, c in candidates
        if 0 <= r < config.rows and 0 <= c < config.cols
    ]


def adjacent_board_tiles(state: GameState, row: int, col: int,
                         config: GameConfig = DEFAULT_CONFIG) -> list[Tile]:
    """Board tiles next to a position, in adjacent_positions order."""
    neighbours = [state.tile_at(r, c) for r, c in adjacent_positions(row, col, config)]
    return [t for t in neighbours if t is not None and t.on_board]


def tile_sort_key(tile: Tile) -> tuple[int, int]:
    """Column first, then row (1A < 1B < 2A)."""
    return (tile.col, tile.row)


def sorted_tiles(tiles: Iterable[Tile]) -> list[Tile]:
    return sorted(tiles, key=tile_sort_key)


def shuffle_tiles(tiles: Sequence[Tile], rng: random.Random) -> tuple[Tile, ...]:
    """Return a shuffled copy; the input sequence is left untouched."""
    return tuple(rng.sample(list(tiles), len(tiles)))


def is_dead_tile(state: GameState, tile: Tile, config: GameConfig = DEFAULT_CONFIG) -> bool:
    """A tile that would merge two or more safe hotels can never be played."""
    safe = {
        t.hotel for t in adjacent_board_tiles(state, tile.row, tile.col, config)
        if t.hotel and is_safe(state, t.hotel, config)
    }
    return len(safe) >= 2


def draw_tiles(state: GameState, player_id: int, count: int,
               config: GameConfig = DEFAULT_CONFIG) -> tuple[GameState, list[Tile]]:
    """
    Move up to `count` tiles from the bag into a player's hand.

    Bag tiles are taken in collection order. A tile that is dead when drawn
    goes straight to DEAD and the draw continues with the next one. Returns
    the new state and the tiles that reached the hand.
    """
    drawn: list[Tile] = []
    for tile in state.bag_tiles():
        if len(drawn) >= count:
            break
        if is_dead_tile(state, tile, config):
            logger.debug(f"Drew dead tile {tile.label}, discarding")
            state = state.with_tiles([tile.moved_to(DEAD)])
            continue
        in_hand = tile.moved_to(player_id)
        state = state.with_tiles([in_hand])
        drawn.append(in_hand)
    return state, drawn


def replace_dead_tiles(state: GameState, player_id: int,
                       config: GameConfig = DEFAULT_CONFIG) -> tuple[GameState, list[Tile]]:
    """Discard dead tiles from a hand and draw one replacement for each."""
    dead = [t for t in state.hand(player_id) if is_dead_tile(state, t, config)]
    if not dead:
        return state, []
    state = state.with_tiles([t.moved_to(DEAD) for t in dead])
    state, _ = draw_tiles(state, player_id, len(dead), config)
    return state, dead


def tiles_remaining(state: GameState) -> int:
    """Tiles still in play: bag plus every hand."""
    return sum(1 for t in state.tiles if t.location == BAG or not isinstance(t.location, str))


def parse_label(label: str) -> Position:
    """Inverse of tile_label: '1A' -> (0, 0)."""
    label = label.strip().upper()
    if len(label) < 2 or not label[:-1].isdigit() or not label[-1].isalpha():
        raise ValueError(f"Invalid tile label: {label!r}")
    return (ord(label[-1]) - ord("A"), int(label[:-1]) - 1)
