"""
Game Store - persistence contract consumed by the session layer.

The engine never touches storage. The session manager loads a state,
applies an action and saves the result.
"""

from __future__ import annotations
from typing import Protocol
import threading

from ..engine_core.state import GameState
from ..engine_core.player_view import PlayerAction


class GameStore(Protocol):
    """Load/save interface for game states and their action logs."""

    def load(self, game_id: str) -> GameState | None: ...

    def save(self, game_id: str, state: GameState) -> None: ...

    def load_actions(self, game_id: str) -> list[PlayerAction]: ...

    def append_actions(self, game_id: str, actions: list[PlayerAction]) -> None: ...

    def delete(self, game_id: str) -> None: ...

class InMemoryGameStore:
    """
    Dict-backed store.

    States are immutable, so they are stored as-is.
    """

    def __init__(self):
        self._games: dict[str, GameState] = {}
        self._actions: dict[str, list[PlayerAction]] = {}
        self._lock = threading.Lock()

    def load(self, game_id: str) -> GameState | None:
        return self._games.get(game_id)

    def save(self, game_id: str, state: GameState) -> None:
        self._games[game_id] = state

    def load_actions(self, game_id: str) -> list[PlayerAction]:
        return list(self._actions.get(game_id, []))

    def append_actions(self, game_id: str, actions: list[PlayerAction]) -> None:
        with self._lock:
            self._actions.setdefault(game_id, []).extend(actions)

    def game_ids(self) -> list[str]:
        return list(self._games)

    def delete(self, game_id: str) -> None:
        self._games.pop(game_id, None)
        self._actions.pop(game_id, None)
