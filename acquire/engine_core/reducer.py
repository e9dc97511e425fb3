"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Validates before applying; the input state is never touched
- Rejections raise GameError (try_apply returns an ActionResult instead)
- Delegates game rules to placement, merger, purchase and turns
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from .action import (
    Action, ActionResult, AddPlayer, BreakMergerTie, BuyShares, FoundHotel,
    PlayTile, RemovePlayer, ResolveMerger, StartGame,
)
from .errors import GameError
from .hotels import allocate_shares
from .merger import process_merger, resolve_shares, start_merger
from .placement import PlacementKind, analyze_tile_placement
from .purchase import buy_shares
from .state import BOARD, FoundHotelContext, GamePhase, GameState, Player
from .tiles import is_dead_tile
from .turns import advance_turn, start_game
from ..config import GameConfig, DEFAULT_CONFIG

logger = logging.getLogger(__name__)

Transition = tuple[GameState, list[str]]


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    Config provides the rule constants.
    """
    config: GameConfig = DEFAULT_CONFIG

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with the new state and the action log.
        Raises GameError if the action is rejected.
        """
        try:
            new_state, changes = self._dispatch(state, action)
        except GameError as e:
            if e.is_invalid_action:
                logger.info(f"Rejected {type(action).__name__} in {state.game_id}: {e.message}")
            else:
                logger.warning(f"Processing error on {type(action).__name__} in {state.game_id}: {e.message}")
            raise

        logger.debug(f"Applied {action!r} to {state.game_id} -> {new_state.phase.value}")
        return ActionResult.success_with_state(new_state, changes)

    def try_apply(self, state: GameState, action: Action) -> ActionResult:
        """Like apply, but rejections come back as a failed ActionResult."""
        try:
            return self.apply(state, action)
        except GameError as e:
            return ActionResult.failure(e.message, error_code=e.code.value)

    def _dispatch(self, state: GameState, action: Action) -> Transition:
        if state.phase == GamePhase.GAME_OVER:
            raise GameError.invalid("Game is over - no actions allowed")

        match action:
            case AddPlayer():
                return self._handle_add_player(state, action)
            case RemovePlayer():
                return self._handle_remove_player(state, action)
            case StartGame():
                return self._handle_start_game(state, action)
            case PlayTile():
                return self._handle_play_tile(state, action)
            case FoundHotel():
                return self._handle_found_hotel(state, action)
            case BuyShares():
                return self._handle_buy_shares(state, action)
            case BreakMergerTie():
                return self._handle_break_merger_tie(state, action)
            case ResolveMerger():
                return self._handle_resolve_merger(state, action)
            case _:
                raise GameError.processing(f"No handler for action: {action!r}")

    # -------------------------------------------------------------------------
    # Shared checks
    # -------------------------------------------------------------------------

    @staticmethod
    def _require_phase(state: GameState, phase: GamePhase) -> None:
        if state.phase != phase:
            raise GameError.invalid(
                f"Action not allowed in phase {state.phase.value}, expected {phase.value}"
            )

    @staticmethod
    def _require_player(state: GameState, name: str) -> Player:
        player = state.get_player(name)
        if player is None:
            raise GameError.invalid(f"Player {name} is not in this game")
        return player

    def _require_turn(self, state: GameState, name: str) -> Player:
        player = self._require_player(state, name)
        if player.id != state.current_player.id:
            raise GameError.invalid(f"Not {name}'s turn")
        return player

    # -------------------------------------------------------------------------
    # Lobby
    # -------------------------------------------------------------------------

    def _handle_add_player(self, state: GameState, action: AddPlayer) -> Transition:
        self._require_phase(state, GamePhase.WAITING_FOR_PLAYERS)
        name = action.player.strip()
        if state.num_players >= self.config.max_players:
            raise GameError.invalid(f"Game is full ({self.config.max_players} players)")
        if not name:
            raise GameError.invalid("Player name cannot be empty")
        if name.lower() in self.config.reserved_names:
            raise GameError.invalid(f"{name} is a reserved name")
        if len(name) > self.config.max_name_length:
            raise GameError.invalid(
                f"Player name must be {self.config.max_name_length} characters or less"
            )
        if state.get_player(name) is not None:
            raise GameError.invalid(f"Player {name} already exists")

        player = Player(name=name, money=self.config.initial_money)
        new_state = state._copy_with(players=state.players + (player,))
        return new_state, [f"Player {name} joined"]

    def _handle_remove_player(self, state: GameState, action: RemovePlayer) -> Transition:
        self._require_phase(state, GamePhase.WAITING_FOR_PLAYERS)
        self._require_player(state, action.player)
        if action.player == state.owner:
            raise GameError.invalid("The game owner cannot be removed")
        players = tuple(p for p in state.players if p.name != action.player)
        return state._copy_with(players=players), [f"Player {action.player} left"]

    def _handle_start_game(self, state: GameState, action: StartGame) -> Transition:
        self._require_phase(state, GamePhase.WAITING_FOR_PLAYERS)
        if action.player != state.owner:
            raise GameError.invalid("Only the game owner can start the game")
        if state.num_players < self.config.min_players:
            raise GameError.invalid(f"Need at least {self.config.min_players} players to start")
        new_state, changes = start_game(state, self.config)
        return new_state, [f"{action.player} started the game"] + changes

    # -------------------------------------------------------------------------
    # Turn actions
    # -------------------------------------------------------------------------

    def _handle_play_tile(self, state: GameState, action: PlayTile) -> Transition:
        player = self._require_turn(state, action.player)
        self._require_phase(state, GamePhase.PLAY_TILE)

        tile = state.tile_at(action.row, action.col)
        if tile is None:
            raise GameError.invalid(f"No tile at row {action.row}, column {action.col}")
        if not tile.held_by(player.id):
            raise GameError.invalid(f"You don't have tile {tile.label}")
        if is_dead_tile(state, tile, self.config):
            raise GameError.invalid(f"Tile {tile.label} would merge two safe hotels")

        placement = analyze_tile_placement(state, tile, self.config)
        state = state.with_tiles([tile.moved_to(BOARD)])
        changes = [f"{player.name} played {tile.label}"]

        if placement.kind == PlacementKind.MERGER:
            state, merger_changes = start_merger(
                state, placement.adjacent_hotels, placement.absorbed_tiles, self.config,
            )
            return state, changes + merger_changes

        if placement.kind == PlacementKind.FOUNDS_HOTEL:
            context = FoundHotelContext(
                tiles=placement.absorbed_tiles,
                available_hotels=placement.available_hotels,
            )
            return state._copy_with(phase=GamePhase.FOUND_HOTEL, pending=context), changes

        if placement.kind == PlacementKind.GROWS_HOTEL:
            hotel = placement.adjacent_hotels[0]
            state = state.with_tiles([
                state.tile_at(*position).moved_to(BOARD, hotel)
                for position in placement.absorbed_tiles
            ])
            changes.append(f"{hotel} grows to {state.hotel_size(hotel)} tiles")

        return state._copy_with(phase=GamePhase.BUY_SHARES, pending=None), changes

    def _handle_found_hotel(self, state: GameState, action: FoundHotel) -> Transition:
        player = self._require_turn(state, action.player)
        self._require_phase(state, GamePhase.FOUND_HOTEL)

        if not state.has_hotel(action.hotel):
            raise GameError.invalid(f"Hotel {action.hotel} does not exist")
        if state.hotel_size(action.hotel) > 0:
            raise GameError.invalid(f"Hotel {action.hotel} is already on the board")

        context = state.found_hotel_context
        if context is None:
            raise GameError.processing("Missing found hotel context")
        if len(context.tiles) < 2:
            raise GameError.processing("A hotel needs at least 2 tiles to be founded")
        tiles = [state.tile_at(*position) for position in context.tiles]
        if any(t is None or not t.on_board for t in tiles):
            raise GameError.processing("Found hotel tiles must all be on the board")

        state = state.with_tiles([t.moved_to(BOARD, action.hotel) for t in tiles])
        hotel, allocated = allocate_shares(state.hotel(action.hotel), player.id, 1)
        state = state.with_hotel(hotel)

        changes = [f"{player.name} founded {action.hotel}"]
        if allocated:
            changes.append(f"{player.name} received a free share of {action.hotel}")
        return state._copy_with(phase=GamePhase.BUY_SHARES, pending=None), changes

    def _handle_buy_shares(self, state: GameState, action: BuyShares) -> Transition:
        player = self._require_turn(state, action.player)
        self._require_phase(state, GamePhase.BUY_SHARES)

        state, changes = buy_shares(state, player, action.purchases, self.config)
        state, turn_changes = advance_turn(state, self.config)
        return state, changes + turn_changes

    # -------------------------------------------------------------------------
    # Merger decisions
    # -------------------------------------------------------------------------

    def _handle_break_merger_tie(self, state: GameState, action: BreakMergerTie) -> Transition:
        player = self._require_turn(state, action.player)
        self._require_phase(state, GamePhase.BREAK_MERGER_TIE)

        tie = state.merger_tie_context
        if tie is None:
            raise GameError.processing("Missing merger tie context")
        if action.hotel not in tie.tied_hotels:
            raise GameError.invalid(
                f"{action.hotel} is not one of the tied hotels: {', '.join(tie.tied_hotels)}"
            )

        state, changes = process_merger(state, tie.merge, choice=action.hotel, config=self.config)
        return state, [f"{player.name} chose {action.hotel}"] + changes

    def _handle_resolve_merger(self, state: GameState, action: ResolveMerger) -> Transition:
        player = self._require_player(state, action.player)
        return resolve_shares(state, player.id, action.sell, action.trade, self.config)


def apply_action(state: GameState, action: Action, config: GameConfig | None = None) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(config=config or DEFAULT_CONFIG)
    return reducer.apply(state, action)
