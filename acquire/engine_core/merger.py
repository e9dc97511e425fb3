"""
Merger resolution protocol.

A merger runs as a sequence of steps over a MergeContext:

1. Pick the survivor (largest hotel). A size tie pauses the merger in
   BREAK_MERGER_TIE until the current player chooses.
2. Pick the next hotel to merge (largest remaining). A tie pauses again.
3. Pay majority/minority bonuses for the merged hotel, move its tiles
   (and any absorbed loose tiles) to the survivor, and queue its
   stockholders, most shares first.
4. Each queued stockholder trades 2-for-1 and/or sells (RESOLVE_MERGER).
5. When the queue is empty, repeat from 2 for the remaining hotels, or
   move on to BUY_SHARES.

Every function here takes a GameState and returns a new one together with
the human-readable changes it produced.
"""

from __future__ import annotations
from dataclasses import replace
from itertools import groupby
import logging
import math

from .errors import GameError
from .hotels import (
    allocate_shares, is_safe, price_bracket, return_shares, stockholders_by_count,
)
from .state import BOARD, GamePhase, GameState, MergeContext, MergerTieContext
from ..config import GameConfig, DEFAULT_CONFIG

logger = logging.getLogger(__name__)


def round_up_to_hundred(value: float) -> int:
    return int(math.ceil(value / 100)) * 100


def calculate_shareholder_payouts(
    majority: int,
    minority: int,
    stockholders: list[tuple[int, int]],
) -> tuple[dict[int, int], str]:
    """
    Split majority/minority bonuses among stockholders.

    stockholders is a list of (player_id, share_count), most shares first.
    Returns payouts by player id and a description of the rule applied.
    Every shared split is rounded up to the nearest 100.
    """
    if not stockholders:
        return {}, "No shareholders - all shares held by bank"

    groups = [
        [player_id for player_id, _ in group]
        for _, group in groupby(stockholders, key=lambda item: item[1])
    ]
    leaders = groups[0]
    payouts: dict[int, int] = {}

    if len(groups) == 1 or len(leaders) > 1:
        per_player = round_up_to_hundred((majority + minority) / len(leaders))
        for player_id in leaders:
            payouts[player_id] = per_player
        if len(leaders) == 1:
            description = "Majority plus minority paid to single shareholder"
        elif len(groups) == 1:
            description = "Majority plus minority split between tied shareholders"
        else:
            description = "Majority plus minority split between tied majority shareholders"
        return payouts, description

    payouts[leaders[0]] = majority
    seconds = groups[1]
    if len(seconds) > 1:
        per_player = round_up_to_hundred(minority / len(seconds))
        for player_id in seconds:
            payouts[player_id] = per_player
        description = "Minority bonus split between tied shareholders"
    else:
        payouts[seconds[0]] = minority
        description = "Minority bonus paid to single minority shareholder"
    return payouts, description


def pay_bonuses(state: GameState, hotel_name: str, size: int) -> tuple[GameState, list[str]]:
    """Pay majority/minority bonuses for a hotel of the given size."""
    hotel = state.hotel(hotel_name)
    bracket = price_bracket(hotel.tier, size)
    payouts, description = calculate_shareholder_payouts(
        bracket.majority, bracket.minority, stockholders_by_count(hotel),
    )
    changes = [
        f"Hotel {hotel_name} with {size} tiles has majority bonus of "
        f"{bracket.majority} and minority bonus of {bracket.minority}",
        description,
    ]
    for player_id, amount in payouts.items():
        player = state.player_by_id(player_id)
        state = state.with_player(player.with_money(player.money + amount))
        changes.append(f"{player.name} received ${amount} for {hotel_name}")
    return state, changes


# =============================================================================
# Merger steps
# =============================================================================

def _by_size(state: GameState, names) -> list[str]:
    # sorted() is stable, so equal sizes keep their adjacency order
    return sorted(names, key=lambda name: -state.hotel_size(name))


def _tied_for_largest(state: GameState, names) -> list[str]:
    ordered = _by_size(state, names)
    if not ordered:
        return []
    top = state.hotel_size(ordered[0])
    return [name for name in ordered if state.hotel_size(name) == top]


def start_merger(
    state: GameState,
    hotels: tuple[str, ...],
    absorbed_tiles,
    config: GameConfig = DEFAULT_CONFIG,
) -> tuple[GameState, list[str]]:
    """Begin a merger between the given hotels."""
    if len(hotels) < 2:
        raise GameError.processing("Need at least 2 hotels to merge")
    merge = MergeContext(remaining_hotels=tuple(hotels), additional_tiles=tuple(absorbed_tiles))
    return process_merger(state, merge, config=config)


def process_merger(
    state: GameState,
    merge: MergeContext,
    choice: str | None = None,
    config: GameConfig = DEFAULT_CONFIG,
) -> tuple[GameState, list[str]]:
    """
    Advance a merger until it needs a player decision or completes.

    choice is the hotel picked by a tie break: the survivor if none has
    been chosen yet, otherwise the next hotel to merge.
    """
    changes: list[str] = []

    if merge.surviving_hotel is None:
        if choice is None:
            tied = _tied_for_largest(state, merge.remaining_hotels)
            if len(tied) > 1:
                return _await_tie_break(state, merge, tied, changes)
            survivor = tied[0]
        else:
            survivor = choice
            choice = None
        merge = replace(
            merge,
            surviving_hotel=survivor,
            remaining_hotels=tuple(h for h in merge.remaining_hotels if h != survivor),
        )
        changes.append(f"{survivor} survives the merger")

    if not merge.remaining_hotels:
        return _complete_merger(state, changes)

    if choice is None:
        tied = _tied_for_largest(state, merge.remaining_hotels)
        if len(tied) > 1:
            return _await_tie_break(state, merge, tied, changes)
        merged = tied[0]
    else:
        merged = choice

    state, merge_changes = _merge_hotel(state, merge, merged, config)
    return state, changes + merge_changes


def _await_tie_break(state, merge, tied, changes):
    logger.debug(f"Merger tie between {tied}")
    changes.append(f"{', '.join(tied)} are tied, waiting for {state.current_player.name} to choose")
    return state._copy_with(
        phase=GamePhase.BREAK_MERGER_TIE,
        pending=MergerTieContext(tied_hotels=tuple(tied), merge=merge),
    ), changes


def _merge_hotel(
    state: GameState,
    merge: MergeContext,
    merged: str,
    config: GameConfig,
) -> tuple[GameState, list[str]]:
    survivor = merge.surviving_hotel
    if is_safe(state, merged, config):
        raise GameError.processing(f"Cannot merge safe hotel {merged}")

    merged_size = state.hotel_size(merged)
    changes = [f"{survivor} acquires {merged}"]

    state, payout_changes = pay_bonuses(state, merged, merged_size)
    changes.extend(payout_changes)

    moved = [t.moved_to(BOARD, survivor) for t in state.hotel_tiles(merged)]
    for position in merge.additional_tiles:
        tile = state.tile_at(*position)
        if tile is None or not tile.on_board:
            raise GameError.processing(f"Merger tile {position} is not on the board")
        moved.append(tile.moved_to(BOARD, survivor))
    state = state.with_tiles(moved)

    queue = tuple(player_id for player_id, _ in stockholders_by_count(state.hotel(merged)))
    merge = replace(
        merge,
        remaining_hotels=tuple(h for h in merge.remaining_hotels if h != merged),
        additional_tiles=(),
        merged_hotel=merged,
        merged_size=merged_size,
        stockholder_ids=queue,
    )

    if not queue:
        state, next_changes = _continue_merger(state, merge, config)
        return state, changes + next_changes

    return state._copy_with(phase=GamePhase.RESOLVE_MERGER, pending=merge), changes


def _continue_merger(state, merge, config):
    """Queue is empty: merge the next hotel or finish."""
    if merge.remaining_hotels:
        return process_merger(state, merge, config=config)
    return _complete_merger(state, [])


def _complete_merger(state, changes):
    changes.append("Merger complete")
    return state._copy_with(phase=GamePhase.BUY_SHARES, pending=None), changes


# =============================================================================
# Stockholder resolution
# =============================================================================

def validate_resolve_shares(state: GameState, player_id: int, sell: int, trade: int) -> MergeContext:
    """Check a trade/sell request; returns the active merge context."""
    if state.phase != GamePhase.RESOLVE_MERGER:
        raise GameError.invalid("Not resolve merger phase")
    merge = state.merge_context
    if merge is None or merge.surviving_hotel is None or merge.merged_hotel is None:
        raise GameError.processing("Invalid hotel merger context")
    if not merge.stockholder_ids or merge.stockholder_ids[0] != player_id:
        raise GameError.invalid("Not your turn to resolve merger shares")
    if sell < 0 or trade < 0:
        raise GameError.invalid("Share counts cannot be negative")

    merged = state.hotel(merge.merged_hotel)
    if merged.shares_held_by(player_id) < trade + sell:
        raise GameError.invalid(
            f"You don't have {trade + sell} shares in {merge.merged_hotel} to trade/sell"
        )
    if trade % 2 != 0:
        raise GameError.invalid("You can only trade an even number of shares")
    if state.hotel(merge.surviving_hotel).remaining_shares < trade // 2:
        raise GameError.invalid(
            f"{merge.surviving_hotel} doesn't have {trade // 2} shares left to trade"
        )
    return merge


def resolve_shares(
    state: GameState,
    player_id: int,
    sell: int = 0,
    trade: int = 0,
    config: GameConfig = DEFAULT_CONFIG,
) -> tuple[GameState, list[str]]:
    """
    Trade and/or sell the head stockholder's merged shares, then move on.

    Kept shares stay with the player. Sale price uses the merged hotel's
    size at the time it was merged.
    """
    merge = validate_resolve_shares(state, player_id, sell, trade)
    player = state.player_by_id(player_id)
    merged = state.hotel(merge.merged_hotel)
    survivor = state.hotel(merge.surviving_hotel)
    changes = []

    if trade:
        survivor, _ = allocate_shares(survivor, player_id, trade // 2)
        merged = return_shares(merged, player_id, trade)
        changes.append(
            f"{player.name} traded {trade} {merge.merged_hotel} shares for "
            f"{trade // 2} {merge.surviving_hotel} shares"
        )
    if sell:
        price = price_bracket(merged.tier, merge.merged_size).price
        merged = return_shares(merged, player_id, sell)
        player = player.with_money(player.money + price * sell)
        changes.append(f"{player.name} sold {sell} {merge.merged_hotel} shares for ${price * sell}")
    kept = merged.shares_held_by(player_id)
    if kept:
        changes.append(f"{player.name} kept {kept} {merge.merged_hotel} shares")

    state = state.with_player(player).with_hotel(survivor).with_hotel(merged)
    merge = replace(merge, stockholder_ids=merge.stockholder_ids[1:])

    if merge.stockholder_ids:
        return state._copy_with(pending=merge), changes

    state, next_changes = _continue_merger(state, merge, config)
    return state, changes + next_changes
