"""
Engine Core - Deterministic game state management and move application.

The engine is the runtime that:
1. Builds a GameState (initialize_game)
2. Generates legal moves
3. Applies moves via the reducer, producing a fresh state each time
4. Resolves captures, flocks, round ends and victory
"""

from .species import Species, SpeciesConfig, SPECIES_DATA, ALL_SPECIES, TOTAL_CARDS, parse_species
from .state import (
    GameConfig,
    GameState,
    GameStatus,
    Player,
    RuleVariant,
    Side,
    StateCorruptionError,
    TurnPhase,
)
from .action import (
    DrawCardsMove,
    FlockMove,
    Move,
    MoveOutcome,
    MoveType,
    OutcomeCode,
    PassMove,
    PlayMove,
    SkipDrawMove,
)
from .reducer import Reducer, apply_move
from .setup import initialize_game
from .action_generator import legal_moves
from .rules import check_win_condition, flock_options, get_flockable_count

__all__ = [
    "Species",
    "SpeciesConfig",
    "SPECIES_DATA",
    "ALL_SPECIES",
    "TOTAL_CARDS",
    "parse_species",
    "GameConfig",
    "GameState",
    "GameStatus",
    "Player",
    "RuleVariant",
    "Side",
    "StateCorruptionError",
    "TurnPhase",
    "Move",
    "MoveType",
    "MoveOutcome",
    "OutcomeCode",
    "PlayMove",
    "DrawCardsMove",
    "SkipDrawMove",
    "FlockMove",
    "PassMove",
    "Reducer",
    "apply_move",
    "initialize_game",
    "legal_moves",
    "check_win_condition",
    "flock_options",
    "get_flockable_count",
]
