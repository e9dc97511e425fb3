"""
Engine Core - Deterministic rule engine for Acquire.

The engine is the runtime that:
1. Creates the initial GameState
2. Generates legal actions
3. Applies actions via the reducer
4. Runs the merger protocol step by step
"""

from .state import GameState, GamePhase, Hotel, Player, Share, Tile
from .errors import ErrorCode, GameError
from .action import (
    Action, ActionType, ActionResult,
    StartGame, AddPlayer, RemovePlayer, PlayTile, FoundHotel,
    BuyShares, BreakMergerTie, ResolveMerger,
)
from .reducer import Reducer, apply_action
from .action_generator import ActionGenerator, legal_actions
from .player_view import PlayerAction, PlayerView, get_player_view
from .setup import initialize_game
from .turns import final_standings

__all__ = [
    "GameState",
    "GamePhase",
    "Hotel",
    "Player",
    "Share",
    "Tile",
    "ErrorCode",
    "GameError",
    "Action",
    "ActionType",
    "ActionResult",
    "StartGame",
    "AddPlayer",
    "RemovePlayer",
    "PlayTile",
    "FoundHotel",
    "BuyShares",
    "BreakMergerTie",
    "ResolveMerger",
    "Reducer",
    "apply_action",
    "ActionGenerator",
    "legal_actions",
    "PlayerAction",
    "PlayerView",
    "get_player_view",
    "initialize_game",
    "final_standings",
]
