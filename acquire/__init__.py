"""
Acquire - Turn-based hotel chain board game engine.

A deterministic, rules-driven engine for the board game Acquire.
The engine provides:
- Immutable game state (tiles, hotels, shares, players)
- Tile placement analysis (found, grow, merge)
- Merger resolution with shareholder payouts
- Share purchases and turn sequencing
"""

__version__ = "0.1.0"
