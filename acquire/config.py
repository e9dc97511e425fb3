"""
Game configuration - rule constants for a game of Acquire.

The engine never reads the environment. A GameConfig is built once by the
caller (service layer, CLI, tests) and passed to the reducer explicitly.
"""

from __future__ import annotations
from dataclasses import dataclass, fields
import os


@dataclass(frozen=True)
class GameConfig:
    """Rule constants. Defaults match the standard board."""
    rows: int = 9
    cols: int = 12
    initial_money: int = 3000
    tiles_per_hand: int = 6
    min_players: int = 2
    max_players: int = 6
    shares_per_hotel: int = 25
    max_shares_per_turn: int = 3
    safe_hotel_size: int = 11
    end_game_hotel_size: int = 41
    max_name_length: int = 20
    reserved_names: tuple[str, ...] = ("bank", "board", "bag", "dead")

    @classmethod
    def from_env(cls, prefix: str = "ACQUIRE_") -> GameConfig:
        """
        Build a config from environment overrides.

        Every integer field can be overridden, e.g. ACQUIRE_INITIAL_MONEY=6000.
        """
        overrides = {}
        for f in fields(cls):
            if f.name == "reserved_names":
                continue
            raw = os.getenv(f"{prefix}{f.name.upper()}")
            if raw is not None:
                overrides[f.name] = int(raw)
        return cls(**overrides)


DEFAULT_CONFIG = GameConfig()
