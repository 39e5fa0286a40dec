"""
Room Store - Keeps the latest game snapshot per room.

This is the narrow replication boundary around the engine:
push a snapshot, read a snapshot, subscribe to snapshots. The engine
never sees the store.

CONSISTENCY (known weak point):
- Last write wins. Two clients pushing concurrently overwrite each other.
- Callers must serialize submissions themselves (only the player whose
  turn it is submits). A compare-and-swap store could replace this one
  without touching the engine; `version` is there for that purpose.

PERSISTENCE:
- In-memory only. Rooms are gone when the process exits.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable
import logging
import time
import uuid

from ..engine_core.state import GameState

logger = logging.getLogger(__name__)

Subscriber = Callable[[str, GameState], None]


class RoomNotFoundError(KeyError):
    """No room with that id."""


class RoomExistsError(ValueError):
    """A room with that id already exists."""


class RoomState(Enum):
    """State of a room."""
    WAITING = "waiting"      # Host created it, seat 1 is open
    ACTIVE = "active"        # Both seats filled or playing against the computer
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


@dataclass
class Room:
    """
    A shared table.

    Holds the latest snapshot and the names occupying each seat.
    """
    room_id: str
    created_at: float
    game_state: GameState | None = None
    state: RoomState = RoomState.WAITING
    seats: dict[int, str] = field(default_factory=dict)
    version: int = 0
    updated_at: float = 0.0

    def is_active(self) -> bool:
        return self.state in {RoomState.WAITING, RoomState.ACTIVE}


class RoomStore:
    """
    Manages rooms.

    Responsibilities:
    - Create and join rooms
    - Hold the latest snapshot per room (last write wins)
    - Notify subscribers synchronously on every push
    - Clean up finished rooms
    """

    def __init__(self):
        self._rooms: dict[str, Room] = {}
        self._subscribers: dict[str, list[Subscriber]] = {}

    def create_room(
        self,
        initial_state: GameState,
        room_id: str | None = None,
        host_name: str = "Host",
    ) -> Room:
        """
        Create a room holding `initial_state`.

        A game against the computer starts ACTIVE; otherwise the room
        waits for a second player to join.
        """
        room_id = room_id or uuid.uuid4().hex[:6].upper()
        if room_id in self._rooms:
            raise RoomExistsError(f"Room {room_id} already exists")

        now = time.time()
        vs_computer = any(p.is_ai for p in initial_state.players)
        room = Room(
            room_id=room_id,
            created_at=now,
            updated_at=now,
            game_state=initial_state.clone(),
            state=RoomState.ACTIVE if vs_computer else RoomState.WAITING,
            seats={0: host_name},
        )
        if vs_computer:
            room.seats[1] = initial_state.players[1].name

        self._rooms[room_id] = room
        logger.info("Created room %s", room_id)
        return room

    def join_room(self, room_id: str, player_name: str) -> Room | None:
        """Take the open seat. Returns None if the room is missing or full."""
        room = self._rooms.get(room_id)
        if room is None or 1 in room.seats:
            return None
        room.seats[1] = player_name
        room.state = RoomState.ACTIVE
        logger.info("%s joined room %s", player_name, room_id)
        return room

    def get_room(self, room_id: str) -> Room | None:
        """Get a room by ID."""
        return self._rooms.get(room_id)

    def get_state(self, room_id: str) -> GameState | None:
        """Latest snapshot for a room, as a private copy."""
        room = self._rooms.get(room_id)
        if room is None or room.game_state is None:
            return None
        return room.game_state.clone()

    def push_state(self, room_id: str, state: GameState) -> int:
        """
        Replace the room's snapshot and notify subscribers.

        Returns the new version number.
        """
        room = self._rooms.get(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)

        room.game_state = state.clone()
        room.version += 1
        room.updated_at = time.time()
        if state.is_over:
            room.state = RoomState.GAME_OVER

        for callback in list(self._subscribers.get(room_id, [])):
            try:
                callback(room_id, room.game_state.clone())
            except Exception:
                logger.warning("Dropping failed subscriber for room %s", room_id, exc_info=True)
                self._subscribers[room_id].remove(callback)
        return room.version

    def subscribe(self, room_id: str, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for every snapshot pushed to the room.

        Returns a function that removes the subscription.
        """
        if room_id not in self._rooms:
            raise RoomNotFoundError(room_id)
        self._subscribers.setdefault(room_id, []).append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(room_id, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def end_room(self, room_id: str, reason: str = "completed") -> bool:
        """
        Remove a room and its subscribers.

        Returns False if there was no such room.
        """
        room = self._rooms.pop(room_id, None)
        self._subscribers.pop(room_id, None)
        if room is None:
            return False
        room.state = RoomState.GAME_OVER if reason == "completed" else RoomState.ABANDONED
        room.game_state = None
        logger.info("Ended room %s (%s)", room_id, reason)
        return True

    def list_active_rooms(self) -> list[str]:
        """List IDs of active rooms."""
        return [rid for rid, room in self._rooms.items() if room.is_active()]

    def cleanup_stale_rooms(self, max_age_seconds: int = 3600) -> list[str]:
        """
        Remove rooms not updated for `max_age_seconds`.

        Returns the removed room IDs.
        """
        now = time.time()
        stale = [
            rid for rid, room in self._rooms.items()
            if now - room.updated_at > max_age_seconds
        ]
        for rid in stale:
            self.end_room(rid, reason="stale")
        return stale
