"""
Pydantic Schemas - JSON shapes for actions, game states and player views.

These models define the contract between a service layer and the engine.
The engine itself only deals in frozen dataclasses; these models convert
to and from them.

Error Codes:
- INVALID_ACTION: The player attempted something the game state disallows
- PROCESSING_ERROR: An engine invariant was violated
"""

from enum import Enum
from typing import Any, Optional, Union
from pydantic import BaseModel, Field

from ..engine_core.action import (
    Action, ActionResult, ActionType, AddPlayer, BreakMergerTie, BuyShares, FoundHotel,
    PlayTile, RemovePlayer, ResolveMerger, StartGame,
)
from ..engine_core.errors import ErrorCode, GameError
from ..engine_core.player_view import PlayerView
from ..engine_core.state import (
    FoundHotelContext, GamePhase, GameState, Hotel, HotelTier, MergeContext,
    MergerTieContext, PendingDecision, Player, Share, Tile,
)


# =============================================================================
# Enums
# =============================================================================

class PendingKind(str, Enum):
    """Which decision the game is waiting for."""
    FOUND_HOTEL = "found_hotel"
    MERGE = "merge"
    MERGER_TIE = "merger_tie"


# =============================================================================
# Requests
# =============================================================================

class ActionRequest(BaseModel):
    """
    One player action, discriminated by `type`.

    Only the fields used by that action type need to be set.
    """
    type: ActionType
    player: str = Field(..., description="Name of the acting player")
    row: Optional[int] = Field(None, description="PLAY_TILE row")
    col: Optional[int] = Field(None, description="PLAY_TILE column")
    hotel: Optional[str] = Field(None, description="FOUND_HOTEL / BREAK_MERGER_TIE hotel")
    shares: Optional[dict[str, int]] = Field(None, description="BUY_SHARES hotel -> amount")
    sell: int = Field(0, ge=0, description="RESOLVE_MERGER shares to sell")
    trade: int = Field(0, ge=0, description="RESOLVE_MERGER shares to trade 2-for-1")

    def to_action(self) -> Action:
        """Build the engine action, rejecting missing fields as invalid."""
        match self.type:
            case ActionType.START_GAME:
                return StartGame(player=self.player)
            case ActionType.ADD_PLAYER:
                return AddPlayer(player=self.player)
            case ActionType.REMOVE_PLAYER:
                return RemovePlayer(player=self.player)
            case ActionType.PLAY_TILE:
                if self.row is None or self.col is None:
                    raise GameError.invalid("PLAY_TILE requires row and col")
                return PlayTile(player=self.player, row=self.row, col=self.col)
            case ActionType.FOUND_HOTEL:
                return FoundHotel(player=self.player, hotel=self._require_hotel())
            case ActionType.BREAK_MERGER_TIE:
                return BreakMergerTie(player=self.player, hotel=self._require_hotel())
            case ActionType.BUY_SHARES:
                return BuyShares(player=self.player, shares=dict(self.shares or {}))
            case ActionType.RESOLVE_MERGER:
                return ResolveMerger(player=self.player, sell=self.sell, trade=self.trade)
        raise GameError.processing(f"Unknown action type: {self.type}")

    def _require_hotel(self) -> str:
        if not self.hotel:
            raise GameError.invalid(f"{self.type.value} requires a hotel")
        return self.hotel


# =============================================================================
# State Models
# =============================================================================

class TileModel(BaseModel):
    """A tile and its location (bag, dead, board or a player id)."""
    row: int
    col: int
    location: Union[int, str] = "bag"
    hotel: Optional[str] = None

    model_config = {"from_attributes": True}


class HotelModel(BaseModel):
    name: str
    tier: HotelTier
    shares: list[Union[int, str]] = Field(default_factory=list, description="Location of each share slot")

    @classmethod
    def from_hotel(cls, hotel: Hotel) -> "HotelModel":
        return cls(name=hotel.name, tier=hotel.tier, shares=[s.location for s in hotel.shares])

    def to_hotel(self) -> Hotel:
        return Hotel(name=self.name, tier=self.tier, shares=tuple(Share(location=loc) for loc in self.shares))


class PlayerModel(BaseModel):
    name: str
    id: int = -1
    money: int = 0

    model_config = {"from_attributes": True}


class PendingModel(BaseModel):
    """
    The pending decision, flattened.

    found_hotel: tiles, available_hotels
    merge: remaining_hotels .. stockholder_ids
    merger_tie: tied_hotels plus the merge fields of the paused merger
    """
    kind: PendingKind
    tiles: list[tuple[int, int]] = Field(default_factory=list)
    available_hotels: list[str] = Field(default_factory=list)
    tied_hotels: list[str] = Field(default_factory=list)
    remaining_hotels: list[str] = Field(default_factory=list)
    additional_tiles: list[tuple[int, int]] = Field(default_factory=list)
    surviving_hotel: Optional[str] = None
    merged_hotel: Optional[str] = None
    merged_size: int = 0
    stockholder_ids: list[int] = Field(default_factory=list)

    @classmethod
    def from_pending(cls, pending: PendingDecision) -> Optional["PendingModel"]:
        if pending is None:
            return None
        if isinstance(pending, FoundHotelContext):
            return cls(
                kind=PendingKind.FOUND_HOTEL,
                tiles=list(pending.tiles),
                available_hotels=list(pending.available_hotels),
            )
        if isinstance(pending, MergerTieContext):
            return cls._from_merge(PendingKind.MERGER_TIE, pending.merge, tied_hotels=list(pending.tied_hotels))
        return cls._from_merge(PendingKind.MERGE, pending)

    @classmethod
    def _from_merge(cls, kind: PendingKind, merge: MergeContext, **extra: Any) -> "PendingModel":
        return cls(
            kind=kind,
            remaining_hotels=list(merge.remaining_hotels),
            additional_tiles=list(merge.additional_tiles),
            surviving_hotel=merge.surviving_hotel,
            merged_hotel=merge.merged_hotel,
            merged_size=merge.merged_size,
            stockholder_ids=list(merge.stockholder_ids),
            **extra,
        )

    def to_pending(self) -> PendingDecision:
        if self.kind == PendingKind.FOUND_HOTEL:
            return FoundHotelContext(
                tiles=tuple(tuple(t) for t in self.tiles),
                available_hotels=tuple(self.available_hotels),
            )
        merge = MergeContext(
            remaining_hotels=tuple(self.remaining_hotels),
            additional_tiles=tuple(tuple(t) for t in self.additional_tiles),
            surviving_hotel=self.surviving_hotel,
            merged_hotel=self.merged_hotel,
            merged_size=self.merged_size,
            stockholder_ids=tuple(self.stockholder_ids),
        )
        if self.kind == PendingKind.MERGER_TIE:
            return MergerTieContext(tied_hotels=tuple(self.tied_hotels), merge=merge)
        return merge


class GameStateModel(BaseModel):
    """Complete game state as JSON."""
    game_id: str
    owner: str
    phase: GamePhase = GamePhase.WAITING_FOR_PLAYERS
    current_turn: int = 0
    current_player: int = 0
    players: list[PlayerModel] = Field(default_factory=list)
    hotels: list[HotelModel] = Field(default_factory=list)
    tiles: list[TileModel] = Field(default_factory=list)
    pending: Optional[PendingModel] = None

    @classmethod
    def from_state(cls, state: GameState) -> "GameStateModel":
        return cls(
            game_id=state.game_id,
            owner=state.owner,
            phase=state.phase,
            current_turn=state.current_turn,
            current_player=state.current_player_idx,
            players=[PlayerModel.model_validate(p) for p in state.players],
            hotels=[HotelModel.from_hotel(h) for h in state.hotels],
            tiles=[TileModel.model_validate(t) for t in state.tiles],
            pending=PendingModel.from_pending(state.pending),
        )

    def to_state(self) -> GameState:
        return GameState(
            game_id=self.game_id,
            owner=self.owner,
            phase=self.phase,
            current_turn=self.current_turn,
            current_player_idx=self.current_player,
            players=tuple(Player(name=p.name, id=p.id, money=p.money) for p in self.players),
            hotels=tuple(h.to_hotel() for h in self.hotels),
            tiles=tuple(
                Tile(row=t.row, col=t.col, location=t.location, hotel=t.hotel) for t in self.tiles
            ),
            pending=self.pending.to_pending() if self.pending else None,
        )


# =============================================================================
# Responses
# =============================================================================

class OpponentModel(BaseModel):
    name: str
    money: str
    shares: dict[str, str] = Field(default_factory=dict)

    model_config = {"from_attributes": True}


class HotelSummary(BaseModel):
    name: str
    size: int
    shares: int = Field(..., description="Shares left in the bank")

    model_config = {"from_attributes": True}


class PlayerActionModel(BaseModel):
    turn: int
    action: str

    model_config = {"from_attributes": True}


class PlayerViewModel(BaseModel):
    """What one player can see of the game."""
    game_id: str
    owner: str
    player_id: int
    money: int
    shares: dict[str, int] = Field(default_factory=dict)
    tiles: list[tuple[int, int]] = Field(default_factory=list)
    phase: GamePhase
    current_turn: int
    current_player: int
    players: list[OpponentModel] = Field(default_factory=list)
    hotels: list[HotelSummary] = Field(default_factory=list)
    board: list[TileModel] = Field(default_factory=list)
    pending: Optional[PendingModel] = None
    actions: list[PlayerActionModel] = Field(default_factory=list)

    @classmethod
    def from_view(cls, view: PlayerView) -> "PlayerViewModel":
        return cls(
            game_id=view.game_id,
            owner=view.owner,
            player_id=view.player_id,
            money=view.money,
            shares=view.shares,
            tiles=view.tiles,
            phase=view.phase,
            current_turn=view.current_turn,
            current_player=view.current_player,
            players=[OpponentModel.model_validate(p) for p in view.players],
            hotels=[HotelSummary.model_validate(h) for h in view.hotels],
            board=[TileModel.model_validate(t) for t in view.board],
            pending=PendingModel.from_pending(view.pending),
            actions=[PlayerActionModel.model_validate(a) for a in view.actions],
        )


class ActionResponse(BaseModel):
    """Result of a successful action."""
    state: GameStateModel
    changes: list[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: ActionResult) -> "ActionResponse":
        return cls(state=GameStateModel.from_state(result.new_state), changes=result.state_changes)


class ErrorResponse(BaseModel):
    """Error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")

    @classmethod
    def from_error(cls, error: GameError) -> "ErrorResponse":
        return cls(error=error.message, error_code=error.code)
