"""
Action Generator - Generates legal actions from a game state.

The action generator is used by:
1. The CLI and clients to show available actions
2. Validation (is this action in legal_actions?)

Design: Generates Action objects, not just action types.
Share purchases are listed one hotel and one share at a time plus the
empty purchase; combinations are left to the caller.
"""

from __future__ import annotations
from dataclasses import dataclass

from .action import (
    Action, BreakMergerTie, BuyShares, FoundHotel, PlayTile, ResolveMerger, StartGame,
)
from .hotels import founded_hotels, share_price
from .state import GamePhase, GameState
from .tiles import is_dead_tile, sorted_tiles
from ..config import GameConfig, DEFAULT_CONFIG


@dataclass
class ActionGenerator:
    """Generates legal actions for the current game state."""
    config: GameConfig = DEFAULT_CONFIG

    def generate(self, state: GameState) -> list[Action]:
        """
        Generate the legal actions for whoever has to act next.

        Returns a list of fully-specified Action objects.
        """
        if state.phase == GamePhase.GAME_OVER:
            return []

        if state.phase == GamePhase.WAITING_FOR_PLAYERS:
            if state.num_players >= self.config.min_players:
                return [StartGame(player=state.owner)]
            return []

        if state.phase == GamePhase.RESOLVE_MERGER:
            return self._generate_resolve_actions(state)

        player = state.current_player
        if state.phase == GamePhase.PLAY_TILE:
            return [
                PlayTile(player=player.name, row=t.row, col=t.col)
                for t in sorted_tiles(state.hand(player.id))
                if not is_dead_tile(state, t, self.config)
            ]

        if state.phase == GamePhase.FOUND_HOTEL:
            context = state.found_hotel_context
            hotels = context.available_hotels if context else ()
            return [FoundHotel(player=player.name, hotel=name) for name in hotels]

        if state.phase == GamePhase.BREAK_MERGER_TIE:
            tie = state.merger_tie_context
            hotels = tie.tied_hotels if tie else ()
            return [BreakMergerTie(player=player.name, hotel=name) for name in hotels]

        if state.phase == GamePhase.BUY_SHARES:
            return self._generate_buy_actions(state)

        return []

    def _generate_resolve_actions(self, state: GameState) -> list[Action]:
        """Sell-all, trade-max and keep-all for the head of the queue."""
        merge = state.merge_context
        if merge is None or not merge.stockholder_ids:
            return []
        player_id = merge.stockholder_ids[0]
        name = state.player_by_id(player_id).name
        held = state.hotel(merge.merged_hotel).shares_held_by(player_id)
        available = state.hotel(merge.surviving_hotel).remaining_shares
        max_trade = min(held // 2, available) * 2

        actions: list[Action] = [ResolveMerger(player=name)]
        if held:
            actions.append(ResolveMerger(player=name, sell=held))
        if max_trade:
            actions.append(ResolveMerger(player=name, trade=max_trade))
            if held > max_trade:
                actions.append(ResolveMerger(player=name, sell=held - max_trade, trade=max_trade))
        return actions

    def _generate_buy_actions(self, state: GameState) -> list[Action]:
        player = state.current_player
        actions: list[Action] = [BuyShares(player=player.name)]
        for name in founded_hotels(state):
            if state.hotel(name).remaining_shares and share_price(state, name) <= player.money:
                actions.append(BuyShares(player=player.name, shares={name: 1}))
        return actions


def legal_actions(state: GameState, config: GameConfig | None = None) -> list[Action]:
    """
    Convenience function to get legal actions.

    Creates an ActionGenerator and generates actions.
    """
    generator = ActionGenerator(config=config or DEFAULT_CONFIG)
    return generator.generate(state)


def is_legal(state: GameState, action: Action, config: GameConfig | None = None) -> bool:
    """Check if a specific action is among the generated ones."""
    return action in legal_actions(state, config)
