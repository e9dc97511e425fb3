"""
Game errors - the two rejection kinds raised by the engine.

INVALID_ACTION: the player tried something the current state disallows.
PROCESSING_ERROR: an internal invariant was violated (engine or caller bug).
"""

from __future__ import annotations
from enum import Enum


class ErrorCode(str, Enum):
    """Structured error codes."""
    GAME_INVALID_ACTION = "INVALID_ACTION"
    GAME_PROCESSING_ERROR = "PROCESSING_ERROR"


class GameError(Exception):
    """Raised when an action is rejected."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.GAME_INVALID_ACTION):
        self.message = message
        self.code = code
        super().__init__(message)

    @classmethod
    def invalid(cls, message: str) -> GameError:
        return cls(message, ErrorCode.GAME_INVALID_ACTION)

    @classmethod
    def processing(cls, message: str) -> GameError:
        return cls(message, ErrorCode.GAME_PROCESSING_ERROR)

    @property
    def is_invalid_action(self) -> bool:
        return self.code == ErrorCode.GAME_INVALID_ACTION

    def __repr__(self) -> str:
        return f"GameError({self.code.value}: {self.message})"
