"""
Tests for API layer.

Tests:
- API service methods
- Playing against the computer seat
- HTTP endpoints and status codes
"""

import pytest
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.schemas import (
    CreateRoomRequest,
    ErrorCode,
    ErrorResponse,
    JoinRoomRequest,
    MoveRequest,
    RoomStatus,
)
from ..api.service import APIService
from ..session import RoomExistsError


@pytest.fixture
def service():
    """Create a fresh API service."""
    return APIService()


@pytest.fixture
def client(service):
    """HTTP client over a fresh app."""
    return TestClient(create_app(service))


class TestAPIService:
    """Tests for APIService."""

    def test_create_room(self, service):
        """Creating a room deals a game."""
        response = service.create_room(CreateRoomRequest(player_names=["Ann", "Ben"], seed=1))

        assert response.status == RoomStatus.WAITING
        assert response.seats == {0: "Ann"}
        assert len(response.state.players) == 2
        assert len(response.state.rows) == 4

    def test_create_room_duplicate_id(self, service):
        """A taken room id raises."""
        service.create_room(CreateRoomRequest(room_id="T1"))

        with pytest.raises(RoomExistsError):
            service.create_room(CreateRoomRequest(room_id="T1"))

    def test_join_room(self, service):
        """The second seat can be taken once."""
        room = service.create_room(CreateRoomRequest(room_id="T1"))

        joined = service.join_room(room.room_id, JoinRoomRequest(player_name="Ben"))
        assert joined.status == RoomStatus.ACTIVE

        full = service.join_room(room.room_id, JoinRoomRequest(player_name="Cy"))
        assert isinstance(full, ErrorResponse)
        assert full.error_code == ErrorCode.ROOM_FULL

    def test_get_nonexistent_room(self, service):
        """Getting a missing room returns an error."""
        response = service.get_room("nonexistent-id")

        assert isinstance(response, ErrorResponse)
        assert response.error_code == "ROOM_NOT_FOUND"

    def test_submit_valid_move(self, service):
        """A legal move is applied and versioned."""
        room = service.create_room(CreateRoomRequest(seed=2))
        move = service.get_legal_moves(room.room_id).moves[0]

        response = service.submit_move(room.room_id, move)

        assert response.is_valid
        assert response.version == 1
        assert response.ai_moves == []

    def test_submit_wrong_phase(self, service):
        """A move in the wrong phase comes back invalid, not as an error."""
        room = service.create_room(CreateRoomRequest(seed=2))

        response = service.submit_move(room.room_id, MoveRequest(type="PASS"))

        assert not response.is_valid
        assert response.error_code == "WRONG_PHASE"
        assert response.version == 0

    def test_submit_malformed(self, service):
        """A move that cannot be parsed is an invalid outcome."""
        room = service.create_room(CreateRoomRequest(seed=2))

        response = service.submit_move(
            room.room_id, MoveRequest(type="PLAY", species="Dodo", row_index=0, side="LEFT"),
        )

        assert not response.is_valid
        assert response.error_code == "MALFORMED_MOVE"

    def test_computer_replies(self, service):
        """After the human turn ends, the computer plays its own turn."""
        room = service.create_room(CreateRoomRequest(player_names=["Me", "CPU"], ai_enabled=True, seed=5))
        assert room.status == RoomStatus.ACTIVE

        ai_moves = []
        for _ in range(3):
            move = service.get_legal_moves(room.room_id).moves[0]
            response = service.submit_move(room.room_id, move)
            assert response.is_valid
            ai_moves.extend(response.ai_moves)
            if response.ai_moves:
                break

        assert ai_moves
        assert response.state.current_player_index == 0 or response.state.winner is not None

    def test_push_remote_state(self, service):
        """A normalized remote snapshot replaces the room's state."""
        room = service.create_room(CreateRoomRequest(room_id="T1"))
        payload = {
            "players": [{"id": 0, "name": "A", "hand": ["Sparrow"]}, {"id": 1, "name": "B"}],
            "currentPlayerIndex": 1,
            "rows": None,
        }

        response = service.push_remote_state(room.room_id, payload)

        assert response.version == 1
        assert response.state.current_player_index == 1
        assert response.state.players[1].hand == []

    def test_push_invalid_state(self, service):
        """A snapshot that cannot be parsed is a validation error."""
        room = service.create_room(CreateRoomRequest(room_id="T1"))

        response = service.push_remote_state(room.room_id, {"currentPlayerIndex": "abc"})

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.VALIDATION_ERROR
        assert response.details["errors"]

    def test_end_room(self, service):
        """Ending a room drops it."""
        room = service.create_room(CreateRoomRequest())

        assert service.end_room(room.room_id)
        assert room.room_id not in service.list_rooms()
        assert isinstance(service.get_state(room.room_id), ErrorResponse)

    def test_species(self, service):
        """The catalogue lists eight species and 110 cards."""
        response = service.get_species()

        assert len(response.species) == 8
        assert response.total_cards == 110


class TestHTTPEndpoints:
    """Tests for the FastAPI app."""

    def test_health(self, client):
        """Health check responds."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_species(self, client):
        """Species are listed by display name."""
        data = client.get("/api/v1/species").json()

        assert data["species"][0]["name"] == "Sparrow"
        assert data["total_cards"] == 110

    def test_create_and_get_room(self, client):
        """A created room can be fetched."""
        response = client.post("/api/v1/rooms", json={"player_names": ["Ann", "Ben"], "room_id": "TABLE1"})

        assert response.status_code == 201
        assert response.json()["room_id"] == "TABLE1"

        fetched = client.get("/api/v1/rooms/TABLE1")
        assert fetched.status_code == 200
        assert fetched.json()["status"] == "waiting"
        assert client.get("/api/v1/rooms").json()["rooms"] == ["TABLE1"]

    def test_duplicate_room_conflict(self, client):
        """Creating a taken room id is a 409."""
        client.post("/api/v1/rooms", json={"room_id": "TABLE1"})

        response = client.post("/api/v1/rooms", json={"room_id": "TABLE1"})

        assert response.status_code == 409
        assert response.json()["error_code"] == "ROOM_EXISTS"

    def test_bad_player_count(self, client):
        """Games are for exactly two players."""
        response = client.post("/api/v1/rooms", json={"player_names": ["Solo"]})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_missing_room_is_404(self, client):
        """Unknown rooms are 404 on every room route."""
        for path in ["/api/v1/rooms/NOPE", "/api/v1/rooms/NOPE/state", "/api/v1/rooms/NOPE/moves"]:
            response = client.get(path)
            assert response.status_code == 404
            assert response.json()["error_code"] == "ROOM_NOT_FOUND"

    def test_join_full_room(self, client):
        """The second join is a conflict."""
        client.post("/api/v1/rooms", json={"room_id": "TABLE1"})

        assert client.post("/api/v1/rooms/TABLE1/join", json={"player_name": "Ben"}).status_code == 200
        response = client.post("/api/v1/rooms/TABLE1/join", json={"player_name": "Cy"})
        assert response.status_code == 409
        assert response.json()["error_code"] == "ROOM_FULL"

    def test_play_a_move(self, client):
        """Legal moves can be listed and submitted."""
        client.post("/api/v1/rooms", json={"room_id": "TABLE1", "seed": 3})

        moves = client.get("/api/v1/rooms/TABLE1/moves").json()
        assert moves["turn_phase"] == "PLAY"

        response = client.post("/api/v1/rooms/TABLE1/moves", json=moves["moves"][0])
        assert response.status_code == 200
        body = response.json()
        assert body["is_valid"]
        assert body["state"]["turn_phase"] in ("DRAW_DECISION", "FLOCK_OR_PASS", "PLAY")

    def test_camel_case_move(self, client):
        """Moves in camelCase are accepted."""
        client.post("/api/v1/rooms", json={"room_id": "TABLE1", "seed": 3})
        state = client.get("/api/v1/rooms/TABLE1/state").json()
        species = state["players"][0]["hand"][0]

        response = client.post(
            "/api/v1/rooms/TABLE1/moves",
            json={"type": "PLAY", "birdType": species, "rowIndex": 1, "side": "RIGHT"},
        )

        assert response.json()["is_valid"]

    def test_unknown_move_type(self, client):
        """A body that does not parse is rejected by validation."""
        client.post("/api/v1/rooms", json={"room_id": "TABLE1"})

        response = client.post("/api/v1/rooms/TABLE1/moves", json={"type": "JUMP"})

        assert response.status_code == 422

    def test_put_state(self, client):
        """Snapshots can be replaced; bad ones are a 422."""
        client.post("/api/v1/rooms", json={"room_id": "TABLE1"})

        ok = client.put("/api/v1/rooms/TABLE1/state", json={"players": [{"id": 0}, {"id": 1}], "turnPhase": "FLOCK_OR_PASS"})
        assert ok.status_code == 200
        assert ok.json()["version"] == 1

        bad = client.put("/api/v1/rooms/TABLE1/state", json={"players": [{"index": "x"}]})
        assert bad.status_code == 422
        assert bad.json()["error_code"] == "VALIDATION_ERROR"

    def test_put_state_with_bad_seat(self, client):
        """A snapshot whose current player is not seated is refused and the room keeps working."""
        client.post("/api/v1/rooms", json={"room_id": "TABLE1", "seed": 3})

        response = client.put(
            "/api/v1/rooms/TABLE1/state",
            json={"players": [{"id": 0}, {"id": 1}], "currentPlayerIndex": 5},
        )

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        moves = client.get("/api/v1/rooms/TABLE1/moves")
        assert moves.status_code == 200
        played = client.post("/api/v1/rooms/TABLE1/moves", json=moves.json()["moves"][0])
        assert played.status_code == 200
        assert played.json()["is_valid"]

    def test_put_state_without_players(self, client):
        """A snapshot with nobody seated is refused."""
        client.post("/api/v1/rooms", json={"room_id": "TABLE1"})

        response = client.put("/api/v1/rooms/TABLE1/state", json={"currentPlayerIndex": 5})

        assert response.status_code == 422
        assert client.get("/api/v1/rooms/TABLE1").json()["version"] == 0

    def test_end_room(self, client):
        """Deleting a room ends it."""
        client.post("/api/v1/rooms", json={"room_id": "TABLE1"})

        response = client.delete("/api/v1/rooms/TABLE1")

        assert response.json() == {"success": True, "room_id": "TABLE1"}
        assert client.get("/api/v1/rooms/TABLE1").status_code == 404
