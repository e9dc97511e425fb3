"""
Hotel operations - prices, bonuses and share pool transfers.

Share slots are never created or destroyed: allocation and return only
change the location of existing slots, lowest index first.
"""

from __future__ import annotations
from dataclasses import dataclass

from .errors import GameError
from .state import BANK, HOTEL_NAMES, GameState, Hotel, HotelTier, Share
from ..config import GameConfig, DEFAULT_CONFIG


@dataclass(frozen=True)
class PriceBracket:
    """Share price and merger bonuses for hotels up to max_size tiles."""
    max_size: int
    price: int
    majority: int
    minority: int


# Ascending size brackets; the last one is unbounded.
SIZE_BRACKETS: tuple[int, ...] = (2, 3, 4, 5, 10, 20, 30, 40)

BASE_PRICES: dict[HotelTier, int] = {
    HotelTier.ECONOMY: 200,
    HotelTier.STANDARD: 300,
    HotelTier.LUXURY: 400,
}


def _build_price_table() -> dict[HotelTier, tuple[PriceBracket, ...]]:
    table = {}
    for tier, base in BASE_PRICES.items():
        brackets = []
        for i, max_size in enumerate(SIZE_BRACKETS + (None,)):
            price = base + 100 * i
            brackets.append(PriceBracket(
                max_size=max_size if max_size is not None else 10**9,
                price=price,
                majority=price * 10,
                minority=price * 5,
            ))
        table[tier] = tuple(brackets)
    return table


SHARE_PRICES = _build_price_table()


def price_bracket(tier: HotelTier, size: int) -> PriceBracket:
    """Look up the bracket for a hotel of the given tier and tile count."""
    for bracket in SHARE_PRICES[tier]:
        if size <= bracket.max_size:
            return bracket
    raise GameError.processing("No price bracket found - check SHARE_PRICES configuration")


def share_price(state: GameState, hotel_name: str) -> int:
    """Current price of one share, keyed by the hotel's tile count."""
    hotel = state.hotel(hotel_name)
    return price_bracket(hotel.tier, state.hotel_size(hotel_name)).price


def allocate_shares(hotel: Hotel, player_id: int, amount: int = 1) -> tuple[Hotel, int]:
    """
    Move up to `amount` bank shares to a player, lowest index first.

    Never allocates more than the bank holds and never fails; returns the
    updated hotel and the number of shares actually allocated.
    """
    allocated = 0
    shares = []
    for share in hotel.shares:
        if share.in_bank and allocated < amount:
            allocated += 1
            shares.append(Share(location=player_id))
        else:
            shares.append(share)
    return hotel.with_shares(tuple(shares)), allocated


def return_shares(hotel: Hotel, player_id: int, amount: int) -> Hotel:
    """Move up to `amount` of a player's shares back to the bank."""
    returned = 0
    shares = []
    for share in hotel.shares:
        if share.location == player_id and not share.in_bank and returned < amount:
            returned += 1
            shares.append(Share(location=BANK))
        else:
            shares.append(share)
    return hotel.with_shares(tuple(shares))


def is_founded(state: GameState, hotel_name: str) -> bool:
    return state.hotel_size(hotel_name) > 0


def is_safe(state: GameState, hotel_name: str, config: GameConfig = DEFAULT_CONFIG) -> bool:
    """A hotel with safe_hotel_size or more tiles can no longer be merged."""
    return state.hotel_size(hotel_name) >= config.safe_hotel_size


def founded_hotels(state: GameState) -> list[str]:
    """Names of hotels currently on the board, in canonical order."""
    return [name for name in HOTEL_NAMES if state.has_hotel(name) and is_founded(state, name)]


def available_hotels(state: GameState) -> list[str]:
    """Names of hotels not on the board, i.e. available to be founded."""
    return [h.name for h in state.hotels if not is_founded(state, h.name)]


def stockholders_by_count(hotel: Hotel) -> list[tuple[int, int]]:
    """
    (player_id, share_count) pairs, most shares first.

    Ties keep turn order (lower player id first).
    """
    holders = hotel.stockholders()
    return sorted(holders.items(), key=lambda item: (-item[1], item[0]))
