"""
Pydantic Schemas for API - Wire format for rooms, states and moves.

These models define the exact contract between clients and the engine.
They also normalize snapshots rehydrated from a replication store, which
may drop empty containers, send `null` for them, or encode arrays as
index-keyed objects. Both snake_case and the camelCase keys used by
browser clients are accepted on input.

Error Codes:
- ROOM_NOT_FOUND: Room does not exist or has been cleaned up
- ROOM_EXISTS: Requested room id is taken
- ROOM_FULL: Both seats are taken
- VALIDATION_ERROR: Request body could not be parsed
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Optional
import random

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from ..engine_core.action import (
    DrawCardsMove,
    FlockMove,
    Move,
    MoveOutcome,
    MoveType,
    PassMove,
    PlayMove,
    SkipDrawMove,
)
from ..engine_core.species import Species, SpeciesConfig, parse_species
from ..engine_core.state import (
    GameConfig,
    GameState,
    GameStatus,
    Player,
    RuleVariant,
    Side,
    TurnPhase,
)


# =============================================================================
# Normalization helpers
# =============================================================================

def _as_list(value: Any) -> list:
    """None -> [], index-keyed dict -> list in key order, list -> list."""
    if value is None:
        return []
    if isinstance(value, dict):
        try:
            keys = sorted(value, key=int)
        except (TypeError, ValueError):
            return list(value.values())
        return [value[k] for k in keys]
    return list(value)


def _species_list(value: Any) -> list[Any]:
    return [parse_species(card) or card for card in _as_list(value)]


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ROOM_EXISTS = "ROOM_EXISTS"
    ROOM_FULL = "ROOM_FULL"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class RoomStatus(str, Enum):
    """Room status values."""
    WAITING = "waiting"
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


# =============================================================================
# Shared Models
# =============================================================================

class SpeciesInfo(BaseModel):
    """Static species data for rendering a bird guide."""
    name: str
    cn_name: str = ""
    emoji: str = ""
    color: str = ""
    total: int
    small_flock: int
    big_flock: int

    @classmethod
    def from_config(cls, cfg: SpeciesConfig) -> SpeciesInfo:
        return cls(
            name=cfg.name,
            cn_name=cfg.cn_name,
            emoji=cfg.emoji,
            color=cfg.color,
            total=cfg.total,
            small_flock=cfg.small_flock,
            big_flock=cfg.big_flock,
        )


class PlayerModel(BaseModel):
    """A player as stored on the wire."""
    index: int = Field(0, validation_alias=AliasChoices("index", "id"))
    name: str = ""
    is_ai: bool = Field(False, validation_alias=AliasChoices("is_ai", "isAi"))
    hand: list[Species] = Field(default_factory=list)
    collection: dict[Species, int] = Field(default_factory=dict)

    @field_validator("hand", mode="before")
    @classmethod
    def _normalize_hand(cls, value: Any) -> list:
        return _species_list(value)

    @field_validator("collection", mode="before")
    @classmethod
    def _normalize_collection(cls, value: Any) -> dict:
        if not value:
            return {}
        return {
            (parse_species(key) or key): count
            for key, count in dict(value).items()
            if count
        }

    @classmethod
    def from_player(cls, player: Player) -> PlayerModel:
        return cls(
            index=player.index,
            name=player.name,
            is_ai=player.is_ai,
            hand=list(player.hand),
            collection=dict(player.collection),
        )

    def to_player(self) -> Player:
        return Player(
            index=self.index,
            name=self.name,
            is_ai=self.is_ai,
            hand=list(self.hand),
            collection={s: n for s, n in self.collection.items() if n > 0},
        )


class GameStateModel(BaseModel):
    """
    A full game snapshot.

    Missing or null containers are filled with empty ones; rows are
    padded to `row_count`; a missing status means PLAYING. Seats are
    checked: two players, and the current player and winner must be one
    of them.
    """
    players: list[PlayerModel] = Field(default_factory=list)
    current_player_index: int = Field(
        0, validation_alias=AliasChoices("current_player_index", "currentPlayerIndex"),
    )
    rows: list[list[Species]] = Field(default_factory=list, validate_default=True)
    deck: list[Species] = Field(default_factory=list)
    discard_pile: list[Species] = Field(
        default_factory=list, validation_alias=AliasChoices("discard_pile", "discardPile"),
    )
    winner: Optional[int] = None
    status: GameStatus = GameStatus.PLAYING
    turn_phase: TurnPhase = Field(
        TurnPhase.PLAY, validation_alias=AliasChoices("turn_phase", "turnPhase"),
    )
    action_log: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("action_log", "lastActionLog"),
    )
    round_number: int = 1
    turn_number: int = 1
    rule_variant: RuleVariant = RuleVariant.DRAW_DECISION

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in ("status", "turn_phase", "turnPhase", "winner"):
            if key in data and data[key] is None:
                del data[key]
        # Lobby snapshots from older clients are treated as in play
        if data.get("status") == "LOBBY":
            data["status"] = GameStatus.PLAYING.value
        return data

    @model_validator(mode="after")
    def _check_seats(self) -> GameStateModel:
        seats = len(self.players)
        if seats != 2:
            raise ValueError(f"A snapshot needs exactly 2 players, got {seats}")
        if not 0 <= self.current_player_index < seats:
            raise ValueError(f"current_player_index {self.current_player_index} is not a seat")
        if self.winner is not None and not 0 <= self.winner < seats:
            raise ValueError(f"winner {self.winner} is not a seat")
        return self

    @field_validator("players", "action_log", mode="before")
    @classmethod
    def _normalize_list(cls, value: Any) -> list:
        return _as_list(value)

    @field_validator("deck", "discard_pile", mode="before")
    @classmethod
    def _normalize_cards(cls, value: Any) -> list:
        return _species_list(value)

    @field_validator("rows", mode="before")
    @classmethod
    def _normalize_rows(cls, value: Any) -> list:
        rows = [_species_list(row) for row in _as_list(value)]
        while len(rows) < GameConfig().row_count:
            rows.append([])
        return rows

    @classmethod
    def from_state(cls, state: GameState) -> GameStateModel:
        return cls(
            players=[PlayerModel.from_player(p) for p in state.players],
            current_player_index=state.current_player_index,
            rows=[list(row) for row in state.rows],
            deck=list(state.deck),
            discard_pile=list(state.discard_pile),
            winner=state.winner,
            status=state.status,
            turn_phase=state.turn_phase,
            action_log=list(state.action_log),
            round_number=state.round_number,
            turn_number=state.turn_number,
            rule_variant=state.config.rule_variant,
        )

    def to_state(self, rng: random.Random | None = None) -> GameState:
        """
        Rebuild an engine state.

        The shuffle position is not part of the wire format; pass `rng`
        to control reshuffles after rehydration.
        """
        return GameState(
            players=[p.to_player() for p in self.players],
            current_player_index=self.current_player_index,
            rows=[list(row) for row in self.rows],
            deck=list(self.deck),
            discard_pile=list(self.discard_pile),
            winner=self.winner,
            status=self.status,
            turn_phase=self.turn_phase,
            action_log=list(self.action_log),
            round_number=self.round_number,
            turn_number=self.turn_number,
            config=GameConfig(rule_variant=self.rule_variant),
            rng=rng or random.Random(),
        )


# =============================================================================
# Request Models
# =============================================================================

class MoveRequest(BaseModel):
    """
    A move as sent by a client.

    Only the fields the move kind needs are read; `to_move` raises
    ValueError when a required one is missing or unknown.
    """
    type: MoveType
    species: Optional[str] = Field(
        None, validation_alias=AliasChoices("species", "birdType"),
    )
    row_index: Optional[int] = Field(None, validation_alias=AliasChoices("row_index", "rowIndex"))
    side: Optional[Side] = None

    def to_move(self) -> Move:
        if self.type == MoveType.DRAW_CARDS:
            return DrawCardsMove()
        if self.type == MoveType.SKIP_DRAW:
            return SkipDrawMove()
        if self.type == MoveType.PASS:
            return PassMove()

        species = parse_species(self.species)
        if species is None:
            raise ValueError(f"Unknown species: {self.species!r}")
        if self.type == MoveType.FLOCK:
            return FlockMove(species=species)

        if self.row_index is None or self.side is None:
            raise ValueError("PLAY needs row_index and side")
        return PlayMove(species=species, row_index=self.row_index, side=self.side)

    @classmethod
    def from_move(cls, move: Move) -> MoveRequest:
        if isinstance(move, PlayMove):
            return cls(type=move.move_type, species=move.species.value,
                       row_index=move.row_index, side=move.side)
        if isinstance(move, FlockMove):
            return cls(type=move.move_type, species=move.species.value)
        return cls(type=move.move_type)


class CreateRoomRequest(BaseModel):
    """Request to open a room with a fresh game."""
    player_names: list[str] = Field(default_factory=lambda: ["Player 1", "Player 2"])
    ai_enabled: bool = False
    seed: Optional[int] = None
    room_id: Optional[str] = None
    rule_variant: RuleVariant = RuleVariant.DRAW_DECISION


class JoinRoomRequest(BaseModel):
    """Request to take the open seat of a room."""
    player_name: str = "Guest"


# =============================================================================
# Response Models
# =============================================================================

class OutcomeResponse(BaseModel):
    """Result of submitting a move."""
    is_valid: bool
    message: str = ""
    captured: list[Species] = Field(default_factory=list)
    drawn: int = 0
    flocked_amount: int = 0
    round_ended: bool = False
    error_code: Optional[str] = None
    version: Optional[int] = None
    state: GameStateModel
    ai_moves: list[str] = Field(default_factory=list)

    @classmethod
    def from_outcome(cls, outcome: MoveOutcome, version: int | None = None) -> OutcomeResponse:
        return cls(
            is_valid=outcome.is_valid,
            message=outcome.message,
            captured=list(outcome.captured),
            drawn=outcome.drawn,
            flocked_amount=outcome.flocked_amount,
            round_ended=outcome.round_ended,
            error_code=outcome.error_code.value if outcome.error_code else None,
            version=version,
            state=GameStateModel.from_state(outcome.new_state),
        )


class RoomResponse(BaseModel):
    """Room status plus the latest snapshot."""
    room_id: str
    status: RoomStatus
    seats: dict[int, str] = Field(default_factory=dict)
    version: int = 0
    state: Optional[GameStateModel] = None


class LegalMovesResponse(BaseModel):
    """Every move the current player could submit."""
    room_id: str
    current_player_index: int
    turn_phase: TurnPhase
    moves: list[MoveRequest] = Field(default_factory=list)


class SpeciesListResponse(BaseModel):
    """The species catalogue."""
    species: list[SpeciesInfo] = Field(default_factory=list)
    total_cards: int = 0


class RoomListResponse(BaseModel):
    """List of active room IDs."""
    rooms: list[str] = Field(default_factory=list)
    count: int = 0


class EndRoomResponse(BaseModel):
    """Response from ending a room."""
    success: bool
    room_id: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str
    environment: str = "development"
