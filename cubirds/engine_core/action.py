"""
Moves and Outcomes.

A move is a tagged union: one frozen dataclass per move kind, each
carrying exactly the fields it needs. The reducer dispatches on the
concrete class, so there is no optional-field probing.

An outcome carries the new state plus what happened (captured cards,
cards drawn, amount banked) for presentation and sound adapters.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union

from .species import Species
from .state import Side


class MoveType(Enum):
    """Move kinds, as named on the wire."""
    PLAY = "PLAY"
    DRAW_CARDS = "DRAW_CARDS"
    SKIP_DRAW = "SKIP_DRAW"
    FLOCK = "FLOCK"
    PASS = "PASS"


@dataclass(frozen=True)
class PlayMove:
    """Play every copy of `species` onto one end of a row."""
    species: Species
    row_index: int
    side: Side
    move_type: ClassVar[MoveType] = MoveType.PLAY


@dataclass(frozen=True)
class DrawCardsMove:
    """Accept the replacement draw after a capture-free play."""
    move_type: ClassVar[MoveType] = MoveType.DRAW_CARDS


@dataclass(frozen=True)
class SkipDrawMove:
    """Decline the replacement draw."""
    move_type: ClassVar[MoveType] = MoveType.SKIP_DRAW


@dataclass(frozen=True)
class FlockMove:
    """Bank a qualifying set of `species` from hand."""
    species: Species
    move_type: ClassVar[MoveType] = MoveType.FLOCK


@dataclass(frozen=True)
class PassMove:
    """End the turn without flocking."""
    move_type: ClassVar[MoveType] = MoveType.PASS


Move = Union[PlayMove, DrawCardsMove, SkipDrawMove, FlockMove, PassMove]


def describe_move(move: Move) -> str:
    """Short human-readable form of a move."""
    if isinstance(move, PlayMove):
        return f"play {move.species.value} {move.side.value.lower()} of row {move.row_index + 1}"
    if isinstance(move, FlockMove):
        return f"flock {move.species.value}"
    if isinstance(move, DrawCardsMove):
        return "draw cards"
    if isinstance(move, SkipDrawMove):
        return "skip draw"
    return "pass"


class OutcomeCode(Enum):
    """Why a move was rejected."""
    WRONG_PHASE = "WRONG_PHASE"
    MALFORMED_MOVE = "MALFORMED_MOVE"
    GAME_OVER = "GAME_OVER"


@dataclass
class MoveOutcome:
    """
    Result of applying a move.

    Contains:
    - Whether the move was valid
    - The new state (an unchanged copy when invalid)
    - Side information for UI/sound: captured, drawn, flocked_amount
    """
    new_state: Any  # GameState
    is_valid: bool = False
    message: str = ""
    captured: list[Species] = field(default_factory=list)
    drawn: int = 0
    flocked_amount: int = 0
    error_code: OutcomeCode | None = None

    # Set when the move ended the round
    round_ended: bool = False

    @classmethod
    def invalid(cls, state: Any, message: str, error_code: OutcomeCode) -> MoveOutcome:
        """Create a rejection carrying an unchanged copy of the state."""
        return cls(new_state=state, is_valid=False, message=message, error_code=error_code)
