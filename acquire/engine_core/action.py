"""
Action System - Actions and results.

Actions are a closed set of frozen dataclasses, one per move a player can
make. The reducer dispatches on the concrete class. Every action names the
acting player by name.

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union


class ActionType(Enum):
    """Types of actions in the system."""
    # Lobby
    START_GAME = "START_GAME"
    ADD_PLAYER = "ADD_PLAYER"
    REMOVE_PLAYER = "REMOVE_PLAYER"

    # Turn actions
    PLAY_TILE = "PLAY_TILE"
    FOUND_HOTEL = "FOUND_HOTEL"
    BUY_SHARES = "BUY_SHARES"

    # Merger decisions
    BREAK_MERGER_TIE = "BREAK_MERGER_TIE"
    RESOLVE_MERGER = "RESOLVE_MERGER"


@dataclass(frozen=True)
class StartGame:
    """Owner starts the game; turn order is drawn."""
    action_type: ClassVar[ActionType] = ActionType.START_GAME
    player: str


@dataclass(frozen=True)
class AddPlayer:
    action_type: ClassVar[ActionType] = ActionType.ADD_PLAYER
    player: str


@dataclass(frozen=True)
class RemovePlayer:
    action_type: ClassVar[ActionType] = ActionType.REMOVE_PLAYER
    player: str


@dataclass(frozen=True)
class PlayTile:
    """Place the tile at (row, col) from the player's hand."""
    action_type: ClassVar[ActionType] = ActionType.PLAY_TILE
    player: str
    row: int
    col: int


@dataclass(frozen=True)
class FoundHotel:
    action_type: ClassVar[ActionType] = ActionType.FOUND_HOTEL
    player: str
    hotel: str


@dataclass(frozen=True)
class BuyShares:
    """
    Buy shares at current prices.

    shares is given as a hotel name -> amount mapping and stored as sorted
    (hotel, amount) pairs, so the action stays hashable. An empty purchase
    passes.
    """
    action_type: ClassVar[ActionType] = ActionType.BUY_SHARES
    player: str
    shares: tuple[tuple[str, int], ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "shares", tuple(sorted(dict(self.shares).items())))

    @property
    def purchases(self) -> dict[str, int]:
        return dict(self.shares)


@dataclass(frozen=True)
class BreakMergerTie:
    """
    Pick one of the tied hotels.

    Before a survivor is known the pick survives; afterwards it is the
    next hotel to be merged into the survivor.
    """
    action_type: ClassVar[ActionType] = ActionType.BREAK_MERGER_TIE
    player: str
    hotel: str


@dataclass(frozen=True)
class ResolveMerger:
    """Sell and/or trade (2-for-1) merged shares. Unmentioned shares are kept."""
    action_type: ClassVar[ActionType] = ActionType.RESOLVE_MERGER
    player: str
    sell: int = 0
    trade: int = 0


Action = Union[
    StartGame, AddPlayer, RemovePlayer, PlayTile,
    FoundHotel, BuyShares, BreakMergerTie, ResolveMerger,
]


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Error message and code (if failed)
    - Human-readable changes for the action log
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None

    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(cls, state: Any, changes: list[str] | None = None) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, state_changes=changes or [])
