"""
API Module - JSON contract for a service layer.

A service layer (HTTP routing, auth and storage live outside this package):
1. Parses ActionRequest bodies and calls to_action()
2. Applies them through the session manager
3. Returns GameStateModel / PlayerViewModel or an ErrorResponse
"""

from .schemas import (
    # Requests
    ActionRequest,
    # State
    GameStateModel,
    HotelModel,
    PendingModel,
    PlayerModel,
    TileModel,
    # Responses
    ActionResponse,
    ErrorResponse,
    PlayerViewModel,
)

__all__ = [
    # Requests
    "ActionRequest",
    # State
    "GameStateModel",
    "HotelModel",
    "PendingModel",
    "PlayerModel",
    "TileModel",
    # Responses
    "ActionResponse",
    "ErrorResponse",
    "PlayerViewModel",
]
