"""
Acquire CLI - Command-line interface for the engine.

Usage:
    acquire new --owner NAME --players A B [--seed N]    Start a game, print the board
    acquire replay FILE --owner NAME [--seed N]          Apply a JSON list of actions
"""

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from .config import GameConfig
from .engine_core.action import AddPlayer, StartGame
from .engine_core.errors import GameError
from .engine_core.state import GameState
from .engine_core.tiles import sorted_tiles
from .engine_core.turns import final_standings
from .api.schemas import ActionRequest


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Acquire - hotel chain board game engine",
        prog="acquire",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # New game command
    new_parser = subparsers.add_parser("new", help="Create and start a game")
    new_parser.add_argument("--owner", required=True, help="Owner player name")
    new_parser.add_argument("--players", nargs="*", default=[], help="Other player names")
    new_parser.add_argument("--seed", type=int, default=None, help="Tile shuffle seed")

    # Replay command
    replay_parser = subparsers.add_parser("replay", help="Replay a JSON list of actions")
    replay_parser.add_argument("file", help="Path to JSON file of action requests")
    replay_parser.add_argument("--owner", required=True, help="Owner player name")
    replay_parser.add_argument("--seed", type=int, default=None, help="Tile shuffle seed")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "new":
        cmd_new(args)
    elif args.command == "replay":
        cmd_replay(args)
    else:
        parser.print_help()
        sys.exit(1)


def _manager():
    from .session import SessionManager
    return SessionManager(config=GameConfig.from_env())


def render_board(state: GameState, config: GameConfig) -> str:
    """Text grid: '.' empty, '#' loose tile, hotel initial otherwise."""
    lines = ["   " + " ".join(f"{c + 1:>2}" for c in range(config.cols))]
    for row in range(config.rows):
        cells = []
        for col in range(config.cols):
            tile = state.tile_at(row, col)
            if tile is None or not tile.on_board:
                cells.append(" .")
            elif tile.hotel:
                cells.append(f" {tile.hotel[0]}")
            else:
                cells.append(" #")
        lines.append(f"{chr(row + ord('A'))}  " + " ".join(cells))
    return "\n".join(lines)


def print_summary(state: GameState, config: GameConfig):
    print(render_board(state, config))
    print(f"\nPhase: {state.phase.value}  Turn: {state.current_turn}")
    if state.players and state.players[0].id >= 0:
        print(f"Current player: {state.current_player.name}")
    for player in final_standings(state):
        hand = " ".join(t.label for t in sorted_tiles(state.hand(player.id)))
        print(f"  {player.name:<20} ${player.money:<6} {hand}")


def cmd_new(args):
    """Create a game, add players and start it."""
    manager = _manager()
    state = manager.create_game(args.owner, seed=args.seed)
    try:
        for name in args.players:
            manager.apply(state.game_id, AddPlayer(player=name))
        result = manager.apply(state.game_id, StartGame(player=args.owner))
    except GameError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    print(f"Game created: {state.game_id}\n")
    print_summary(result.new_state, manager.config)


def cmd_replay(args):
    """Apply a list of action requests to a fresh game."""
    try:
        with open(args.file, "r", encoding="utf-8") as f:
            raw_actions = json.load(f)
    except FileNotFoundError:
        print(f"Error: File not found: {args.file}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Error: {args.file} is not valid JSON: {e}")
        sys.exit(1)

    manager = _manager()
    state = manager.create_game(args.owner, seed=args.seed)

    for index, raw in enumerate(raw_actions):
        try:
            action = ActionRequest.model_validate(raw).to_action()
            manager.apply(state.game_id, action)
        except ValidationError as e:
            print(f"Action {index} is malformed: {e}")
            break
        except GameError as e:
            print(f"Action {index} rejected ({e.code.value}): {e.message}")
            break

    for entry in manager.actions(state.game_id):
        print(f"[{entry.turn}] {entry.action}")
    print()
    print_summary(manager.get_game(state.game_id), manager.config)


if __name__ == "__main__":
    main()
