"""
Tests for hotel prices and share pools.
"""

from ..engine_core.hotels import (
    allocate_shares, available_hotels, founded_hotels, is_safe, price_bracket,
    return_shares, share_price, stockholders_by_count,
)
from ..engine_core.state import BANK, HOTEL_NAMES, Hotel, HotelTier


class TestPrices:
    """Tests for the price table."""

    def test_economy_brackets(self):
        assert price_bracket(HotelTier.ECONOMY, 2).price == 200
        assert price_bracket(HotelTier.ECONOMY, 5).price == 500
        assert price_bracket(HotelTier.ECONOMY, 6).price == 600
        assert price_bracket(HotelTier.ECONOMY, 41).price == 1000

    def test_tiers_offset_by_100(self):
        assert price_bracket(HotelTier.STANDARD, 11).price == 800
        assert price_bracket(HotelTier.LUXURY, 11).price == 900
        assert price_bracket(HotelTier.LUXURY, 100).price == 1200

    def test_bonuses(self):
        """Majority is 10x price, minority 5x."""
        bracket = price_bracket(HotelTier.ECONOMY, 5)
        assert bracket.majority == 5000
        assert bracket.minority == 2500

    def test_share_price_follows_size(self, make_state):
        state = make_state(board={"Tower": ["1A", "2A"], "Imperial": ["1C", "2C", "3C"]})
        assert share_price(state, "Tower") == 200
        assert share_price(state, "Imperial") == 500


class TestSharePool:
    """Tests for allocating and returning shares."""

    def test_allocate_lowest_index_first(self):
        hotel = Hotel.create("Tower")
        hotel, allocated = allocate_shares(hotel, 0, 2)
        hotel, _ = allocate_shares(hotel, 1, 1)

        assert allocated == 2
        assert [s.location for s in hotel.shares[:4]] == [0, 0, 1, BANK]
        assert hotel.remaining_shares == 22

    def test_short_allocation(self):
        """Never allocates more than the bank holds."""
        hotel, allocated = allocate_shares(Hotel.create("Tower"), 0, 30)
        assert allocated == 25
        assert hotel.remaining_shares == 0
        hotel, allocated = allocate_shares(hotel, 1, 1)
        assert allocated == 0
        assert len(hotel.shares) == 25

    def test_return_shares(self):
        hotel, _ = allocate_shares(Hotel.create("Luxor"), 0, 5)
        hotel = return_shares(hotel, 0, 3)
        assert hotel.shares_held_by(0) == 2
        assert hotel.remaining_shares == 23

    def test_stockholders_by_count(self):
        """Most shares first, ties in player order."""
        hotel = Hotel.create("Festival")
        hotel, _ = allocate_shares(hotel, 2, 1)
        hotel, _ = allocate_shares(hotel, 1, 3)
        hotel, _ = allocate_shares(hotel, 0, 1)
        assert stockholders_by_count(hotel) == [(1, 3), (0, 1), (2, 1)]


class TestHotelStatus:
    """Tests for founded, available and safe hotels."""

    def test_founded_and_available(self, make_state):
        state = make_state(board={"Luxor": ["1A", "2A"]})
        assert founded_hotels(state) == ["Luxor"]
        assert "Luxor" not in available_hotels(state)
        assert len(available_hotels(state)) == len(HOTEL_NAMES) - 1

    def test_safe_at_eleven(self, make_state):
        labels = [f"{c}A" for c in range(1, 12)]
        state = make_state(board={"Tower": labels[:10], "Luxor": [f"{c}C" for c in range(1, 12)]})
        assert not is_safe(state, "Tower")
        assert is_safe(state, "Luxor")
