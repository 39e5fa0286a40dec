"""
FastAPI Application - REST API for rooms and moves.

Endpoints:
    GET    /health                           Health check
    GET    /api/v1/species                   Species catalogue
    POST   /api/v1/rooms                     Create a room with a new game
    GET    /api/v1/rooms                     List active rooms
    GET    /api/v1/rooms/{id}                Room status and snapshot
    POST   /api/v1/rooms/{id}/join           Take the open seat
    DELETE /api/v1/rooms/{id}                End a room
    GET    /api/v1/rooms/{id}/state          Latest snapshot
    PUT    /api/v1/rooms/{id}/state          Replace snapshot (replication)
    GET    /api/v1/rooms/{id}/moves          Legal moves for the current player
    POST   /api/v1/rooms/{id}/moves          Submit a move

The API does not check which client submits a move. Serializing
submissions (only the player on turn submits) is the client's job.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Any, Optional, Union
import os

from fastapi import Body, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..session import RoomExistsError
from .schemas import (
    CreateRoomRequest,
    EndRoomResponse,
    ErrorCode,
    ErrorResponse,
    GameStateModel,
    HealthResponse,
    JoinRoomRequest,
    LegalMovesResponse,
    MoveRequest,
    OutcomeResponse,
    RoomListResponse,
    RoomResponse,
    SpeciesListResponse,
)
from .service import APIService

# Environment configuration
CUBIRDS_ENV = os.getenv("CUBIRDS_ENV", "development")
CUBIRDS_ROOM_TTL = int(os.getenv("CUBIRDS_ROOM_TTL", "3600"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

_STATUS_CODES = {
    ErrorCode.ROOM_NOT_FOUND: 404,
    ErrorCode.ROOM_EXISTS: 409,
    ErrorCode.ROOM_FULL: 409,
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.INTERNAL_ERROR: 500,
}


def create_app(service: Optional[APIService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Cubirds Engine API",
        description="""
Rules engine for a two-player bird-flocking card game.

## Turn flow

1. `PLAY` a species onto a row end
2. No capture: `DRAW_CARDS` or `SKIP_DRAW`
3. `FLOCK` one species, or `PASS`

Rejected moves come back with `is_valid=false` and the unchanged state.

## Error Codes

| Code | Description |
|------|-------------|
| `ROOM_NOT_FOUND` | Room does not exist |
| `ROOM_EXISTS` | Room id is taken |
| `ROOM_FULL` | Both seats are taken |
| `VALIDATION_ERROR` | Snapshot could not be parsed |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Wrap an ErrorResponse with its HTTP status code."""
        return JSONResponse(
            status_code=_STATUS_CODES.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    def respond(result: Any) -> Any:
        if isinstance(result, ErrorResponse):
            return make_error_response(result)
        return result

    # =========================================================================
    # Meta Endpoints
    # =========================================================================

    @app.get("/health", response_model=HealthResponse, tags=["Meta"])
    async def health() -> HealthResponse:
        """Health check."""
        return HealthResponse(version=__version__, environment=CUBIRDS_ENV)

    @app.get("/api/v1/species", response_model=SpeciesListResponse, tags=["Meta"])
    async def list_species() -> SpeciesListResponse:
        """The species catalogue with flock thresholds."""
        return api_service.get_species()

    # =========================================================================
    # Room Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/rooms",
        response_model=RoomResponse,
        status_code=201,
        responses={409: {"model": ErrorResponse}},
        tags=["Rooms"],
        summary="Create a room with a new game",
    )
    async def create_room(body: CreateRoomRequest) -> Union[RoomResponse, JSONResponse]:
        """
        Create a room and deal a new game.

        With `ai_enabled`, the second seat is played by the server.
        """
        api_service.cleanup_stale_rooms(CUBIRDS_ROOM_TTL)
        try:
            return api_service.create_room(body)
        except RoomExistsError as e:
            return make_error_response(ErrorResponse(error=str(e), error_code=ErrorCode.ROOM_EXISTS))
        except ValueError as e:
            return make_error_response(
                ErrorResponse(error=str(e), error_code=ErrorCode.VALIDATION_ERROR)
            )

    @app.get("/api/v1/rooms", response_model=RoomListResponse, tags=["Rooms"])
    async def list_rooms() -> RoomListResponse:
        """List all active room IDs."""
        rooms = api_service.list_rooms()
        return RoomListResponse(rooms=rooms, count=len(rooms))

    @app.get(
        "/api/v1/rooms/{room_id}",
        response_model=RoomResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Rooms"],
    )
    async def get_room(room_id: str) -> Union[RoomResponse, JSONResponse]:
        """Room status and the latest snapshot."""
        return respond(api_service.get_room(room_id))

    @app.post(
        "/api/v1/rooms/{room_id}/join",
        response_model=RoomResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Rooms"],
    )
    async def join_room(room_id: str, body: JoinRoomRequest) -> Union[RoomResponse, JSONResponse]:
        """Take the open seat."""
        return respond(api_service.join_room(room_id, body))

    @app.delete("/api/v1/rooms/{room_id}", response_model=EndRoomResponse, tags=["Rooms"])
    async def end_room(
        room_id: str,
        reason: str = Query("user_ended", description="Reason for ending"),
    ) -> EndRoomResponse:
        """End a room and release its state."""
        return EndRoomResponse(success=api_service.end_room(room_id, reason), room_id=room_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/rooms/{room_id}/state",
        response_model=GameStateModel,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
    )
    async def get_state(room_id: str) -> Union[GameStateModel, JSONResponse]:
        """Latest snapshot."""
        return respond(api_service.get_state(room_id))

    @app.put(
        "/api/v1/rooms/{room_id}/state",
        response_model=RoomResponse,
        responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
        tags=["Game"],
    )
    async def put_state(
        room_id: str,
        payload: dict[str, Any] = Body(..., description="Snapshot from a remote client"),
    ) -> Union[RoomResponse, JSONResponse]:
        """Replace the snapshot (last write wins). Missing containers are filled in."""
        return respond(api_service.push_remote_state(room_id, payload))

    @app.get(
        "/api/v1/rooms/{room_id}/moves",
        response_model=LegalMovesResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
    )
    async def get_moves(room_id: str) -> Union[LegalMovesResponse, JSONResponse]:
        """Legal moves for the player on turn."""
        return respond(api_service.get_legal_moves(room_id))

    @app.post(
        "/api/v1/rooms/{room_id}/moves",
        response_model=OutcomeResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Submit a move",
    )
    async def submit_move(room_id: str, body: MoveRequest) -> Union[OutcomeResponse, JSONResponse]:
        """
        Submit a move for the player on turn.

        **Request Body:**
        ```json
        {"type": "PLAY", "species": "Sparrow", "row_index": 0, "side": "LEFT"}
        ```
        """
        return respond(api_service.submit_move(room_id, body))

    return app


# For running directly: uvicorn cubirds.api.app:app
app = create_app()
