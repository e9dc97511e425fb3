"""
Player View - what one player is allowed to see.

Own money, shares and hand are exact. Other players only show coarse
counts ("0", "1", "2", "many").
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .errors import GameError
from .state import GamePhase, GameState, PendingDecision, Position, Tile


@dataclass(frozen=True)
class PlayerAction:
    """One entry of a game's action log."""
    turn: int
    action: str


@dataclass(frozen=True)
class OpponentView:
    name: str
    money: str
    shares: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class HotelView:
    name: str
    size: int
    shares: int  # left in the bank


@dataclass(frozen=True)
class PlayerView:
    game_id: str
    owner: str
    player_id: int
    money: int
    shares: dict[str, int]
    tiles: list[Position]
    phase: GamePhase
    current_turn: int
    current_player: int
    players: list[OpponentView]
    hotels: list[HotelView]
    board: list[Tile]
    pending: PendingDecision = None
    actions: list[PlayerAction] = field(default_factory=list)


def coarse_count(amount: int) -> str:
    if amount >= 3:
        return "many"
    return str(max(amount, 0))


def _shares_by_hotel(state: GameState, player_id: int) -> dict[str, int]:
    held = {h.name: h.shares_held_by(player_id) for h in state.hotels}
    return {name: count for name, count in held.items() if count}


def _recent_actions(name: str, state: GameState, actions: list[PlayerAction]) -> list[PlayerAction]:
    """Log entries from the player's first mention onward, last two turns only."""
    for index, entry in enumerate(actions):
        if name in entry.action:
            return [a for a in actions[index:] if a.turn >= state.current_turn - 1]
    return []


def get_player_view(
    state: GameState,
    player_name: str,
    actions: list[PlayerAction] | None = None,
) -> PlayerView:
    """Build the view of the game for one player."""
    player = state.get_player(player_name)
    if player is None:
        raise GameError.invalid(f"Player {player_name} doesn't exist in game")

    return PlayerView(
        game_id=state.game_id,
        owner=state.owner,
        player_id=player.id,
        money=player.money,
        shares=_shares_by_hotel(state, player.id),
        tiles=[t.position for t in state.hand(player.id)],
        phase=state.phase,
        current_turn=state.current_turn,
        current_player=state.current_player_idx,
        players=[
            OpponentView(
                name=p.name,
                money=coarse_count(p.money),
                shares={name: coarse_count(n) for name, n in _shares_by_hotel(state, p.id).items()},
            )
            for p in state.players
        ],
        hotels=[
            HotelView(name=h.name, size=state.hotel_size(h.name), shares=h.remaining_shares)
            for h in state.hotels
        ],
        board=state.board_tiles(),
        pending=state.pending,
        actions=_recent_actions(player_name, state, actions or []),
    )
