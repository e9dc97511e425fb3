"""
Share purchases.

A purchase is a mapping of hotel name -> number of shares. It is validated
as a whole before any share moves or any money is debited.
"""

from __future__ import annotations
from typing import Mapping

from .errors import GameError
from .hotels import allocate_shares, share_price
from .state import GameState, Player
from ..config import GameConfig, DEFAULT_CONFIG


def purchase_cost(state: GameState, shares: Mapping[str, int]) -> int:
    return sum(share_price(state, name) * amount for name, amount in shares.items())


def validate_purchase(
    state: GameState,
    player: Player,
    shares: Mapping[str, int],
    config: GameConfig = DEFAULT_CONFIG,
) -> int:
    """
    Check a purchase against the per-turn limit, the bank and the player's money.

    Returns the total cost.
    """
    total = sum(shares.values())
    if total > config.max_shares_per_turn:
        raise GameError.invalid(
            f"You can only buy {config.max_shares_per_turn} shares per turn, requested {total}"
        )

    for name, amount in shares.items():
        if amount <= 0:
            raise GameError.invalid(f"Can't buy zero shares in hotel {name}")
        if not state.has_hotel(name):
            raise GameError.invalid(f"Hotel {name} does not exist")
        if state.hotel_size(name) == 0:
            raise GameError.invalid(f"Hotel {name} is not on the board")
        remaining = state.hotel(name).remaining_shares
        if remaining < amount:
            raise GameError.invalid(f"Hotel {name} only has {remaining} shares left")

    cost = purchase_cost(state, shares)
    if cost > player.money:
        raise GameError.invalid(
            f"You need ${cost} to purchase these shares and you only have ${player.money}"
        )
    return cost


def buy_shares(
    state: GameState,
    player: Player,
    shares: Mapping[str, int],
    config: GameConfig = DEFAULT_CONFIG,
) -> tuple[GameState, list[str]]:
    """Move shares from the bank to the player and debit the cost."""
    cost = validate_purchase(state, player, shares, config)
    changes = []
    for name, amount in shares.items():
        hotel, allocated = allocate_shares(state.hotel(name), player.id, amount)
        state = state.with_hotel(hotel)
        changes.append(f"{player.name} bought {allocated} shares of {name}")
    if not shares:
        changes.append(f"{player.name} bought no shares")
    state = state.with_player(player.with_money(player.money - cost))
    return state, changes
