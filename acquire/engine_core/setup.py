"""
Game initialization.
"""

from __future__ import annotations
import random

from .state import HOTEL_NAMES, GameState, Hotel, Player
from .tiles import create_tiles, shuffle_tiles
from ..config import GameConfig, DEFAULT_CONFIG


def initialize_game(
    game_id: str,
    owner: str,
    config: GameConfig | None = None,
    seed: int | None = None,
) -> GameState:
    """
    Create a new game waiting for players.

    The owner is the only player. The bag holds every tile, shuffled when a
    seed is given and in row order otherwise. Draws always take bag tiles in
    order, so the seed fully determines the game.
    """
    config = config or DEFAULT_CONFIG
    tiles = create_tiles(config)
    if seed is not None:
        tiles = shuffle_tiles(tiles, random.Random(seed))

    return GameState(
        game_id=game_id,
        owner=owner,
        players=(Player(name=owner, money=config.initial_money),),
        hotels=tuple(Hotel.create(name, config.shares_per_hotel) for name in HOTEL_NAMES),
        tiles=tiles,
    )
