"""
Session Module - Service-side collaborators around the engine.

A session layer owns everything the engine does not:
- Creating games
- Load-apply-save sequencing
- One in-flight mutation per game
- The per-game action log

Storage is in-memory only; durable storage plugs in through GameStore.
"""

from .manager import SessionManager
from .store import GameStore, InMemoryGameStore

__all__ = [
    "SessionManager",
    "GameStore",
    "InMemoryGameStore",
]
