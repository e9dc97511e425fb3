"""
Turn orchestration - starting the game, advancing turns and ending the game.
"""

from __future__ import annotations
import logging

from .errors import GameError
from .hotels import founded_hotels, is_safe, return_shares, share_price
from .merger import pay_bonuses
from .state import BOARD, GamePhase, GameState, Player
from .tiles import draw_tiles, replace_dead_tiles, tile_sort_key, tiles_remaining
from ..config import GameConfig, DEFAULT_CONFIG

logger = logging.getLogger(__name__)


def start_game(state: GameState, config: GameConfig = DEFAULT_CONFIG) -> tuple[GameState, list[str]]:
    """
    Decide turn order and deal hands.

    Each player draws one tile which goes straight onto the board. The
    player whose tile sorts first (column, then row) goes first.
    """
    bag = state.bag_tiles()
    if len(bag) < state.num_players:
        raise GameError.processing("Not enough tiles in the bag to start the game")

    changes = []
    placed = []
    for player, tile in zip(state.players, bag):
        placed.append((player, tile.moved_to(BOARD)))
        changes.append(f"{player.name} drew {tile.label}")
    state = state.with_tiles([tile for _, tile in placed])

    ordered = sorted(placed, key=lambda item: tile_sort_key(item[1]))
    players = tuple(
        Player(name=player.name, id=index, money=player.money)
        for index, (player, _) in enumerate(ordered)
    )
    state = state._copy_with(players=players)

    for player in players:
        state, _ = draw_tiles(state, player.id, config.tiles_per_hand, config)

    changes.append(f"Turn order: {', '.join(p.name for p in players)}")
    state = state._copy_with(
        phase=GamePhase.PLAY_TILE,
        current_player_idx=0,
        current_turn=1,
        pending=None,
    )
    return state, changes


def is_game_over(state: GameState, config: GameConfig = DEFAULT_CONFIG) -> bool:
    """
    End conditions, checked whenever a turn advances.

    Every founded hotel is safe, some hotel reached the end-game size, or
    no tiles are left in the bag or any hand.
    """
    founded = founded_hotels(state)
    if founded and all(is_safe(state, name, config) for name in founded):
        return True
    if any(state.hotel_size(name) >= config.end_game_hotel_size for name in founded):
        return True
    return tiles_remaining(state) == 0


def advance_turn(state: GameState, config: GameConfig = DEFAULT_CONFIG) -> tuple[GameState, list[str]]:
    """
    Refill the outgoing player's hand and pass play to the next player.

    Dead tiles in every hand are discarded and replaced. Clears any pending
    decision. Ends the game instead when an end condition holds.
    """
    changes = []
    outgoing = state.current_player
    missing = config.tiles_per_hand - len(state.hand(outgoing.id))
    if missing > 0:
        state, _ = draw_tiles(state, outgoing.id, missing, config)

    for player in state.players:
        state, discarded = replace_dead_tiles(state, player.id, config)
        for tile in discarded:
            changes.append(f"{player.name} discarded dead tile {tile.label}")

    if is_game_over(state, config):
        state, end_changes = end_game(state, config)
        return state, changes + end_changes

    next_idx = (state.current_player_idx + 1) % state.num_players
    turn = state.current_turn + 1 if next_idx == 0 else state.current_turn
    incoming = state.players[next_idx]
    phase = GamePhase.PLAY_TILE if state.hand(incoming.id) else GamePhase.BUY_SHARES
    if phase == GamePhase.BUY_SHARES:
        changes.append(f"{incoming.name} has no tiles to play")

    state = state._copy_with(
        phase=phase,
        current_player_idx=next_idx,
        current_turn=turn,
        pending=None,
    )
    return state, changes


def end_game(state: GameState, config: GameConfig = DEFAULT_CONFIG) -> tuple[GameState, list[str]]:
    """Pay final bonuses for every hotel on the board, then cash out all shares."""
    changes = ["Game over"]
    founded = sorted(founded_hotels(state), key=lambda name: -state.hotel_size(name))

    for name in founded:
        state, payout_changes = pay_bonuses(state, name, state.hotel_size(name))
        changes.extend(payout_changes)

    for name in founded:
        price = share_price(state, name)
        for player_id, count in state.hotel(name).stockholders().items():
            player = state.player_by_id(player_id)
            state = state.with_player(player.with_money(player.money + price * count))
            state = state.with_hotel(return_shares(state.hotel(name), player_id, count))
            changes.append(f"{player.name} sold {count} {name} shares for ${price * count}")

    logger.info(f"Game {state.game_id} over")
    return state._copy_with(phase=GamePhase.GAME_OVER, pending=None), changes


def final_standings(state: GameState) -> list[Player]:
    """Players ranked by money, richest first."""
    return sorted(state.players, key=lambda p: (-p.money, p.id))
