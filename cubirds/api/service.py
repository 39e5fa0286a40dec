"""
API Service - Business logic layer between the HTTP API and the engine.

The service:
1. Translates API requests to engine calls
2. Manages rooms and their game loops
3. Runs the computer-controlled seat after each human move
4. Formats responses

This layer is framework-agnostic (used by the FastAPI app and by tests).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import logging
import random

from pydantic import ValidationError

from .schemas import (
    CreateRoomRequest,
    ErrorCode,
    ErrorResponse,
    GameStateModel,
    JoinRoomRequest,
    LegalMovesResponse,
    MoveRequest,
    OutcomeResponse,
    RoomResponse,
    RoomStatus,
    SpeciesInfo,
    SpeciesListResponse,
)
from ..bots import MoveOracle, OraclePolicy
from ..engine_core.action import MoveOutcome, OutcomeCode
from ..engine_core.action_generator import legal_moves
from ..engine_core.setup import initialize_game
from ..engine_core.species import SPECIES_DATA, TOTAL_CARDS
from ..engine_core.state import GameConfig
from ..session import GameLoop, Room, RoomStore

logger = logging.getLogger(__name__)

AI_SEAT = 1


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        room = service.create_room(CreateRoomRequest(ai_enabled=True))
        outcome = service.submit_move(room.room_id, MoveRequest(type="PASS"))
    """
    store: RoomStore = field(default_factory=RoomStore)
    oracle: MoveOracle | None = None

    # Game loops per room
    _loops: dict[str, GameLoop] = field(default_factory=dict)

    def create_room(self, request: CreateRoomRequest) -> RoomResponse:
        """
        Start a new game in a new room.

        Raises RoomExistsError if `request.room_id` is taken.
        """
        state = initialize_game(
            request.player_names,
            ai_enabled=request.ai_enabled,
            seed=request.seed,
            config=GameConfig(rule_variant=request.rule_variant),
        )
        room = self.store.create_room(
            state,
            room_id=request.room_id,
            host_name=state.players[0].name,
        )

        policies = {}
        if request.ai_enabled:
            policies[AI_SEAT] = OraclePolicy(oracle=self.oracle, rng=random.Random(request.seed))
        self._loops[room.room_id] = GameLoop(self.store, room.room_id, policies=policies)

        return self._room_to_response(room)

    def join_room(self, room_id: str, request: JoinRoomRequest) -> RoomResponse | ErrorResponse:
        """Take the open seat in a room."""
        if self.store.get_room(room_id) is None:
            return self._room_not_found(room_id)
        room = self.store.join_room(room_id, request.player_name)
        if room is None:
            return ErrorResponse(error=f"Room {room_id} is full", error_code=ErrorCode.ROOM_FULL)
        return self._room_to_response(room)

    def get_room(self, room_id: str) -> RoomResponse | ErrorResponse:
        """Get room status and the latest snapshot."""
        room = self.store.get_room(room_id)
        if room is None:
            return self._room_not_found(room_id)
        return self._room_to_response(room)

    def get_state(self, room_id: str) -> GameStateModel | ErrorResponse:
        """Get the latest snapshot only."""
        state = self.store.get_state(room_id)
        if state is None:
            return self._room_not_found(room_id)
        return GameStateModel.from_state(state)

    def get_legal_moves(self, room_id: str) -> LegalMovesResponse | ErrorResponse:
        """List the moves the current player could submit."""
        state = self.store.get_state(room_id)
        if state is None:
            return self._room_not_found(room_id)
        return LegalMovesResponse(
            room_id=room_id,
            current_player_index=state.current_player_index,
            turn_phase=state.turn_phase,
            moves=[MoveRequest.from_move(m) for m in legal_moves(state)],
        )

    def submit_move(self, room_id: str, request: MoveRequest) -> OutcomeResponse | ErrorResponse:
        """
        Apply a move, then let the AI seat play until a human is on turn.

        A move that cannot be converted (unknown species, missing row or
        side) is reported as an invalid outcome, not as an error.
        """
        loop = self._loops.get(room_id)
        state = self.store.get_state(room_id)
        if loop is None or state is None:
            return self._room_not_found(room_id)

        try:
            move = request.to_move()
        except ValueError as e:
            outcome = MoveOutcome.invalid(state, str(e), OutcomeCode.MALFORMED_MOVE)
            return OutcomeResponse.from_outcome(outcome, version=self._version(room_id))

        outcome = loop.submit(move)
        ai_moves: list[str] = []
        if outcome.is_valid and loop.policies:
            result = loop.run_ai_turns()
            ai_moves = result.ai_moves
            if result.errors:
                logger.warning("AI seat in room %s stopped: %s", room_id, result.errors)
            latest = self.store.get_state(room_id)
            if latest is not None:
                outcome.new_state = latest

        response = OutcomeResponse.from_outcome(outcome, version=self._version(room_id))
        response.ai_moves = ai_moves
        return response

    def push_remote_state(self, room_id: str, payload: dict[str, Any]) -> RoomResponse | ErrorResponse:
        """
        Replace a room's snapshot with one received from a remote client.

        The payload is normalized before it reaches the engine. Last write wins.
        """
        if self.store.get_room(room_id) is None:
            return self._room_not_found(room_id)
        try:
            model = GameStateModel.model_validate(payload)
        except ValidationError as e:
            return ErrorResponse(
                error="Snapshot could not be parsed",
                error_code=ErrorCode.VALIDATION_ERROR,
                details={"errors": e.errors(include_url=False, include_context=False)},
            )
        self.store.push_state(room_id, model.to_state())
        return self._room_to_response(self.store.get_room(room_id))

    def end_room(self, room_id: str, reason: str = "completed") -> bool:
        """End a room and drop its game loop."""
        self._loops.pop(room_id, None)
        return self.store.end_room(room_id, reason)

    def cleanup_stale_rooms(self, max_age_seconds: int = 3600) -> list[str]:
        """Drop rooms idle for longer than `max_age_seconds`."""
        stale = self.store.cleanup_stale_rooms(max_age_seconds)
        for room_id in stale:
            self._loops.pop(room_id, None)
        return stale

    def list_rooms(self) -> list[str]:
        """List active room IDs."""
        return self.store.list_active_rooms()

    def get_species(self) -> SpeciesListResponse:
        """The species catalogue."""
        return SpeciesListResponse(
            species=[SpeciesInfo.from_config(cfg) for cfg in SPECIES_DATA.values()],
            total_cards=TOTAL_CARDS,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _version(self, room_id: str) -> int | None:
        room = self.store.get_room(room_id)
        return room.version if room else None

    def _room_not_found(self, room_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Room {room_id} not found",
            error_code=ErrorCode.ROOM_NOT_FOUND,
        )

    def _room_to_response(self, room: Room) -> RoomResponse:
        return RoomResponse(
            room_id=room.room_id,
            status=RoomStatus(room.state.value),
            seats=dict(room.seats),
            version=room.version,
            state=GameStateModel.from_state(room.game_state) if room.game_state else None,
        )
