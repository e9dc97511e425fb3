"""
Game State - Immutable state container for a game of Acquire.

Design principles:
- Immutable: frozen dataclasses and tuples, all mutations return new state
- Serializable: plain values only (see api.schemas for JSON)
- Flat tile collection: every grid position appears exactly once
- One pending decision at a time (found hotel, merger, tie break)
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Union

from .errors import GameError


# Tile and share locations. An int location is a player id.
BAG = "bag"
DEAD = "dead"
BOARD = "board"
BANK = "bank"

Location = Union[str, int]
Position = tuple[int, int]

CHARACTER_CODE_A = ord("A")


class GamePhase(Enum):
    """Turn phases."""
    WAITING_FOR_PLAYERS = "WAITING_FOR_PLAYERS"
    PLAY_TILE = "PLAY_TILE"
    FOUND_HOTEL = "FOUND_HOTEL"
    RESOLVE_MERGER = "RESOLVE_MERGER"
    BREAK_MERGER_TIE = "BREAK_MERGER_TIE"
    BUY_SHARES = "BUY_SHARES"
    GAME_OVER = "GAME_OVER"


class HotelTier(Enum):
    """Price tiers."""
    ECONOMY = "economy"
    STANDARD = "standard"
    LUXURY = "luxury"


HOTEL_TIERS: dict[str, HotelTier] = {
    "Tower": HotelTier.ECONOMY,
    "Luxor": HotelTier.ECONOMY,
    "Worldwide": HotelTier.STANDARD,
    "American": HotelTier.STANDARD,
    "Festival": HotelTier.STANDARD,
    "Imperial": HotelTier.LUXURY,
    "Continental": HotelTier.LUXURY,
}

HOTEL_NAMES: tuple[str, ...] = tuple(HOTEL_TIERS)


def tile_label(row: int, col: int) -> str:
    """Board label for a position, e.g. (0, 0) -> '1A'."""
    return f"{col + 1}{chr(row + CHARACTER_CODE_A)}"


@dataclass(frozen=True)
class Tile:
    """
    A grid position and where its tile currently is.

    location is BAG, DEAD, BOARD or a player id (tile in that player's hand).
    hotel is only set for board tiles that belong to a hotel chain.
    """
    row: int
    col: int
    location: Location = BAG
    hotel: str | None = None

    @property
    def position(self) -> Position:
        return (self.row, self.col)

    @property
    def label(self) -> str:
        return tile_label(self.row, self.col)

    @property
    def on_board(self) -> bool:
        return self.location == BOARD

    def held_by(self, player_id: int) -> bool:
        """Check if the tile is in the given player's hand."""
        return not isinstance(self.location, str) and self.location == player_id

    def moved_to(self, location: Location, hotel: str | None = None) -> Tile:
        """Return the tile at a new location."""
        return replace(self, location=location, hotel=hotel)


@dataclass(frozen=True)
class Share:
    """One slot of a hotel's share pool."""
    location: Location = BANK

    @property
    def in_bank(self) -> bool:
        return self.location == BANK


@dataclass(frozen=True)
class Hotel:
    """
    A hotel chain and its share pool.

    The hotel's tiles are not stored here: they are the board tiles
    whose hotel annotation matches this name (see GameState.hotel_tiles).
    """
    name: str
    tier: HotelTier
    shares: tuple[Share, ...] = ()

    @classmethod
    def create(cls, name: str, num_shares: int = 25) -> Hotel:
        """Factory for a hotel with a full bank."""
        return cls(
            name=name,
            tier=HOTEL_TIERS[name],
            shares=tuple(Share() for _ in range(num_shares)),
        )

    @property
    def remaining_shares(self) -> int:
        """Number of shares still in the bank."""
        return sum(1 for s in self.shares if s.in_bank)

    def shares_held_by(self, player_id: int) -> int:
        return sum(1 for s in self.shares if s.location == player_id)

    def stockholders(self) -> dict[int, int]:
        """Map of player id -> number of shares held."""
        holders: dict[int, int] = {}
        for share in self.shares:
            if not share.in_bank:
                holders[share.location] = holders.get(share.location, 0) + 1
        return holders

    def with_shares(self, shares: tuple[Share, ...]) -> Hotel:
        return replace(self, shares=shares)


@dataclass(frozen=True)
class Player:
    """
    A player.

    id is the turn order index, assigned when the game starts (-1 before).
    """
    name: str
    id: int = -1
    money: int = 0

    def with_money(self, money: int) -> Player:
        return replace(self, money=money)


# =============================================================================
# Pending decisions
# =============================================================================

@dataclass(frozen=True)
class FoundHotelContext:
    """Waiting for the current player to pick a hotel to found."""
    tiles: tuple[Position, ...]
    available_hotels: tuple[str, ...]


@dataclass(frozen=True)
class MergeContext:
    """
    In-flight merger bookkeeping.

    remaining_hotels: hotels still to be merged (survivor excluded once chosen)
    additional_tiles: unaffiliated board tiles to absorb into the survivor
    merged_size: tile count of merged_hotel at the moment it was merged
    stockholder_ids: players still to trade/sell merged shares, head acts next
    """
    remaining_hotels: tuple[str, ...]
    additional_tiles: tuple[Position, ...] = ()
    surviving_hotel: str | None = None
    merged_hotel: str | None = None
    merged_size: int = 0
    stockholder_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class MergerTieContext:
    """Waiting for the current player to break a size tie between hotels."""
    tied_hotels: tuple[str, ...]
    merge: MergeContext


PendingDecision = Union[FoundHotelContext, MergeContext, MergerTieContext, None]


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    game_id: str
    owner: str

    phase: GamePhase = GamePhase.WAITING_FOR_PLAYERS
    current_turn: int = 0
    current_player_idx: int = 0

    # Players are kept in turn order once the game has started
    players: tuple[Player, ...] = ()
    hotels: tuple[Hotel, ...] = ()
    tiles: tuple[Tile, ...] = ()

    pending: PendingDecision = field(default=None)

    # -------------------------------------------------------------------------
    # Players
    # -------------------------------------------------------------------------

    @property
    def current_player(self) -> Player:
        """Get the current player."""
        return self.players[self.current_player_idx]

    @property
    def num_players(self) -> int:
        return len(self.players)

    def get_player(self, name: str) -> Player | None:
        """Get player by name."""
        for p in self.players:
            if p.name == name:
                return p
        return None

    def player_by_id(self, player_id: int) -> Player:
        for p in self.players:
            if p.id == player_id:
                return p
        raise GameError.processing(f"Player id {player_id} not found")

    def with_player(self, player: Player) -> GameState:
        """Return new state with updated player (matched by name)."""
        return self._copy_with(
            players=tuple(player if p.name == player.name else p for p in self.players)
        )

    # -------------------------------------------------------------------------
    # Tiles
    # -------------------------------------------------------------------------

    def tile_at(self, row: int, col: int) -> Tile | None:
        for tile in self.tiles:
            if tile.row == row and tile.col == col:
                return tile
        return None

    def board_tiles(self) -> list[Tile]:
        """Return only the tiles on the board."""
        return [t for t in self.tiles if t.on_board]

    def bag_tiles(self) -> list[Tile]:
        """Undrawn tiles, in draw order."""
        return [t for t in self.tiles if t.location == BAG]

    def hand(self, player_id: int) -> list[Tile]:
        return [t for t in self.tiles if t.held_by(player_id)]

    def hotel_tiles(self, name: str) -> list[Tile]:
        return [t for t in self.tiles if t.on_board and t.hotel == name]

    def hotel_size(self, name: str) -> int:
        return sum(1 for t in self.tiles if t.on_board and t.hotel == name)

    def with_tiles(self, updated: list[Tile] | tuple[Tile, ...]) -> GameState:
        """Return new state with tiles replaced by position."""
        if not updated:
            return self
        by_position = {t.position: t for t in updated}
        return self._copy_with(
            tiles=tuple(by_position.get(t.position, t) for t in self.tiles)
        )

    # -------------------------------------------------------------------------
    # Hotels
    # -------------------------------------------------------------------------

    def hotel(self, name: str) -> Hotel:
        """Get hotel by name, raising a processing error if unknown."""
        for h in self.hotels:
            if h.name == name:
                return h
        raise GameError.processing(f"Hotel not found: {name}")

    def has_hotel(self, name: str) -> bool:
        return any(h.name == name for h in self.hotels)

    def with_hotel(self, hotel: Hotel) -> GameState:
        return self._copy_with(
            hotels=tuple(hotel if h.name == hotel.name else h for h in self.hotels)
        )

    # -------------------------------------------------------------------------
    # Pending decision views
    # -------------------------------------------------------------------------

    @property
    def found_hotel_context(self) -> FoundHotelContext | None:
        return self.pending if isinstance(self.pending, FoundHotelContext) else None

    @property
    def merge_context(self) -> MergeContext | None:
        if isinstance(self.pending, MergeContext):
            return self.pending
        if isinstance(self.pending, MergerTieContext):
            return self.pending.merge
        return None

    @property
    def merger_tie_context(self) -> MergerTieContext | None:
        return self.pending if isinstance(self.pending, MergerTieContext) else None

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
