"""
Session Manager - Creates games and applies actions to them.

Per action the manager:
1. Takes the game's lock (one in-flight mutation per game)
2. Loads the current state from the store
3. Applies the action through the reducer
4. Saves the new state and appends the action log

The engine stays pure; everything stateful lives here.
"""

from __future__ import annotations
import logging
import threading
import uuid

from ..config import GameConfig
from ..engine_core.action import Action, ActionResult
from ..engine_core.errors import GameError
from ..engine_core.player_view import PlayerAction, PlayerView, get_player_view
from ..engine_core.reducer import Reducer
from ..engine_core.setup import initialize_game
from ..engine_core.state import GameState
from .store import GameStore, InMemoryGameStore

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Manages running games.

    Responsibilities:
    - Create games
    - Serialize actions per game
    - Keep the per-game audit trail
    """

    def __init__(self, store: GameStore | None = None, config: GameConfig | None = None):
        self.config = config or GameConfig()
        self.store = store if store is not None else InMemoryGameStore()
        self._reducer = Reducer(config=self.config)
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, game_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(game_id, threading.Lock())

    def create_game(self, owner: str, game_id: str | None = None, seed: int | None = None) -> GameState:
        """
        Create a new game owned by `owner`.

        Args:
            owner: Name of the owning player (joins automatically)
            game_id: Optional id, generated when omitted
            seed: Optional shuffle seed for the tile bag

        Returns:
            The initial GameState
        """
        game_id = game_id or str(uuid.uuid4())
        with self._lock_for(game_id):
            if self.store.load(game_id) is not None:
                raise GameError.invalid(f"Game {game_id} already exists")
            state = initialize_game(game_id, owner, self.config, seed)
            self.store.save(game_id, state)
            self.store.append_actions(game_id, [PlayerAction(turn=0, action=f"{owner} created the game")])
        logger.info(f"Created game {game_id} for {owner}")
        return state

    def get_game(self, game_id: str) -> GameState | None:
        """Get a game by ID."""
        return self.store.load(game_id)

    def delete_game(self, game_id: str) -> None:
        """Remove a game, its action log and its lock."""
        with self._lock_for(game_id):
            self.store.delete(game_id)
        with self._locks_guard:
            self._locks.pop(game_id, None)
        logger.info(f"Deleted game {game_id}")

    def apply(self, game_id: str, action: Action) -> ActionResult:
        """
        Load, apply and save under the game's lock.

        Raises GameError when the game is unknown or the action is rejected;
        the stored state is left unchanged in that case.
        """
        with self._lock_for(game_id):
            state = self.store.load(game_id)
            if state is None:
                raise GameError.invalid(f"Game {game_id} not found")

            try:
                result = self._reducer.apply(state, action)
            except GameError as e:
                logger.info(f"Game {game_id} kept unchanged after rejected {type(action).__name__}: {e.code.value}")
                raise
            new_state = result.new_state
            self.store.save(game_id, new_state)
            self.store.append_actions(
                game_id,
                [PlayerAction(turn=state.current_turn, action=change) for change in result.state_changes],
            )

        logger.info(f"Saved {game_id} after {type(action).__name__} ({new_state.phase.value})")
        return result

    def try_apply(self, game_id: str, action: Action) -> ActionResult:
        """Like apply, but rejections come back as a failed ActionResult."""
        try:
            return self.apply(game_id, action)
        except GameError as e:
            return ActionResult.failure(e.message, error_code=e.code.value)

    def actions(self, game_id: str) -> list[PlayerAction]:
        """The game's audit trail."""
        return self.store.load_actions(game_id)

    def player_view(self, game_id: str, player_name: str) -> PlayerView:
        state = self.store.load(game_id)
        if state is None:
            raise GameError.invalid(f"Game {game_id} not found")
        return get_player_view(state, player_name, self.store.load_actions(game_id))
