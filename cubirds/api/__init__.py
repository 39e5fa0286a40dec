"""
API Module - HTTP interface for clients.

Clients:
1. Create or join a room
2. Read the latest snapshot and legal moves
3. Submit moves; the server plays the computer seat in reply
4. Push snapshots received from elsewhere (replication)

All state is room-scoped and in memory. No accounts, no database.
"""

from .schemas import (
    CreateRoomRequest,
    JoinRoomRequest,
    MoveRequest,
    GameStateModel,
    PlayerModel,
    OutcomeResponse,
    RoomResponse,
    LegalMovesResponse,
    SpeciesInfo,
    ErrorCode,
    ErrorResponse,
)
from .service import APIService
from .app import create_app

__all__ = [
    "CreateRoomRequest",
    "JoinRoomRequest",
    "MoveRequest",
    "GameStateModel",
    "PlayerModel",
    "OutcomeResponse",
    "RoomResponse",
    "LegalMovesResponse",
    "SpeciesInfo",
    "ErrorCode",
    "ErrorResponse",
    "APIService",
    "create_app",
]
