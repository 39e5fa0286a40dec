"""
Move Policy - Interface for computer-controlled players.

A MovePolicy takes a game state and the legal moves, and returns a
decision. The engine validates the chosen move like any other; policies
carry no authority over the rules.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
import random

if TYPE_CHECKING:
    from ..engine_core.state import GameState
    from ..engine_core.action import Move


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The move to submit
    - Explanation (for UI/debugging)
    - Confidence in the decision
    """
    move: Move
    explanation: str = ""
    confidence: float = 1.0

    # Evaluation details (for debugging)
    evaluated_moves: int = 0
    details: dict[str, Any] = field(default_factory=dict)


class MovePolicy(ABC):
    """
    Abstract base class for move policies.

    Implementations range from uniform random play to consulting an
    external move-suggestion oracle.
    """

    @abstractmethod
    def select_move(self, state: GameState, legal_moves: list[Move]) -> BotDecision:
        """
        Select a move from the legal moves.

        Args:
            state: Current game state (read-only)
            legal_moves: Moves the engine would accept right now

        Returns:
            BotDecision with the selected move
        """

    def get_name(self) -> str:
        """Get the policy's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(MovePolicy):
    """
    Random policy - selects moves uniformly at random.

    Used for:
    - Simulations
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_move(self, state: GameState, legal_moves: list[Move]) -> BotDecision:
        if not legal_moves:
            raise ValueError("No legal moves available")

        move = self.rng.choice(legal_moves)
        return BotDecision(
            move=move,
            explanation="Selected randomly",
            confidence=1.0 / len(legal_moves),
            evaluated_moves=len(legal_moves),
        )


class FirstLegalPolicy(MovePolicy):
    """
    First-legal policy - always selects the first legal move.

    Used for deterministic testing.
    """

    def select_move(self, state: GameState, legal_moves: list[Move]) -> BotDecision:
        if not legal_moves:
            raise ValueError("No legal moves available")

        return BotDecision(
            move=legal_moves[0],
            explanation="Selected first legal move",
            evaluated_moves=1,
        )
