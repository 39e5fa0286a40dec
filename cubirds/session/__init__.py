"""
Session Module - Rooms holding shared game snapshots.

A room represents one table:
- Created by a host with the initial state
- Joined by a second player (or played against the computer)
- Holds the latest snapshot, last write wins
- Notifies subscribers on every push

Rooms are EPHEMERAL: in-memory only, no database.
"""

from .manager import RoomStore, Room, RoomState, RoomNotFoundError, RoomExistsError
from .game_loop import GameLoop, LoopState, TurnResult

__all__ = [
    "RoomStore",
    "Room",
    "RoomState",
    "RoomNotFoundError",
    "RoomExistsError",
    "GameLoop",
    "LoopState",
    "TurnResult",
]
