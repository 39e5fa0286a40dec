"""
Game State - The aggregate root of a Cubirds game.

Design principles:
- Snapshot-per-transition: apply_move clones, never mutates its input
- Serializable: every field maps onto the wire schema in api.schemas
- Single unit of truth: presentation and transport only read it
"""

from __future__ import annotations
from dataclasses import dataclass, field
from copy import deepcopy
from enum import Enum
import random

from .species import ALL_SPECIES, Species, species_sort_key


class GameStatus(Enum):
    """High-level game status."""
    PLAYING = "PLAYING"
    GAME_OVER = "GAME_OVER"


class TurnPhase(Enum):
    """Position of the turn state machine."""
    PLAY = "PLAY"                    # Must play cards to a row
    DRAW_DECISION = "DRAW_DECISION"  # No capture: draw 2 or skip
    FLOCK_OR_PASS = "FLOCK_OR_PASS"  # May flock once, or pass


class Side(Enum):
    """End of a row that cards are played onto."""
    LEFT = "LEFT"
    RIGHT = "RIGHT"


class RuleVariant(Enum):
    """
    Ruleset for a capture-free play.

    DRAW_DECISION offers the player an explicit draw or skip.
    AUTO_DRAW is the legacy ruleset that draws immediately.
    """
    DRAW_DECISION = "draw_decision"
    AUTO_DRAW = "auto_draw"


class StateCorruptionError(RuntimeError):
    """Raised when a state is structurally broken (a caller-side bug)."""


@dataclass(frozen=True)
class GameConfig:
    """Rule constants for a game."""
    hand_size: int = 8
    row_count: int = 4
    initial_row_cards: int = 3
    draw_on_no_capture: int = 2
    min_row_species: int = 2

    # Win condition
    win_distinct_species: int = 7
    win_big_sets: int = 2
    win_big_set_size: int = 3

    rule_variant: RuleVariant = RuleVariant.DRAW_DECISION


@dataclass
class Player:
    """
    State for a single player.

    The hand is kept sorted for presentation; order carries no meaning.
    A species missing from the collection has a banked count of zero.
    """
    index: int
    name: str
    is_ai: bool = False
    hand: list[Species] = field(default_factory=list)
    collection: dict[Species, int] = field(default_factory=dict)

    def hand_count(self, species: Species) -> int:
        return sum(1 for card in self.hand if card == species)

    def collection_count(self, species: Species) -> int:
        return self.collection.get(species, 0)

    def collection_vector(self) -> dict[Species, int]:
        """Banked count for every species, zeros included."""
        return {s: self.collection.get(s, 0) for s in ALL_SPECIES}

    @property
    def banked_total(self) -> int:
        return sum(self.collection.values())

    def sort_hand(self) -> None:
        self.hand.sort(key=species_sort_key)


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    players: list[Player] = field(default_factory=list)
    current_player_index: int = 0

    # Shared zones
    rows: list[list[Species]] = field(default_factory=list)
    deck: list[Species] = field(default_factory=list)  # Stack: draw from the end
    discard_pile: list[Species] = field(default_factory=list)

    winner: int | None = None
    status: GameStatus = GameStatus.PLAYING
    turn_phase: TurnPhase = TurnPhase.PLAY

    # Human-readable, append-only
    action_log: list[str] = field(default_factory=list)

    round_number: int = 1
    turn_number: int = 1

    config: GameConfig = field(default_factory=GameConfig)

    # Shuffle source; seed it for replayable games
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    @property
    def current_player(self) -> Player:
        """Get the current player."""
        if not 0 <= self.current_player_index < len(self.players):
            raise StateCorruptionError(
                f"current_player_index {self.current_player_index} does not "
                f"resolve to one of {len(self.players)} players"
            )
        return self.players[self.current_player_index]

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def is_over(self) -> bool:
        return self.status == GameStatus.GAME_OVER

    def next_player_index(self) -> int:
        """Seat after the current player."""
        return (self.current_player_index + 1) % self.num_players

    def log(self, message: str) -> None:
        self.action_log.append(message)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a deep copy with some fields replaced."""
        new_state = self.clone()
        for key, value in kwargs.items():
            setattr(new_state, key, value)
        return new_state

    def clone(self) -> GameState:
        """Deep copy the state, including the rng position."""
        return deepcopy(self)
