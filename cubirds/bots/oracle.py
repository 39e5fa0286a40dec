"""
Oracle Policy - Computer play backed by an optional move-suggestion oracle.

The oracle (for example, a language-model service) only ever proposes
PLAY moves from a read-only view of the table. Everything else is
decided by fixed caller-side rules:
- DRAW_DECISION: always draw
- FLOCK_OR_PASS: flock the first flockable species, otherwise pass

When the oracle is missing, returns nothing, raises, or proposes a move
the engine would reject, the policy falls back to playing the first card
in hand onto a random row and side.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Protocol, TYPE_CHECKING
import logging
import random

from .policy import BotDecision, MovePolicy
from ..engine_core.action import DrawCardsMove, FlockMove, PassMove, PlayMove
from ..engine_core.species import Species
from ..engine_core.state import Side, TurnPhase

if TYPE_CHECKING:
    from ..engine_core.action import Move
    from ..engine_core.state import GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OracleView:
    """Read-only projection of the table for the acting player."""
    player_index: int
    hand: tuple[Species, ...]
    collection: dict[Species, int]
    opponent_collection: dict[Species, int]
    rows: tuple[tuple[Species, ...], ...]

    @classmethod
    def from_state(cls, state: GameState) -> OracleView:
        me = state.current_player
        opponent = state.players[state.next_player_index()]
        return cls(
            player_index=me.index,
            hand=tuple(me.hand),
            collection=dict(me.collection),
            opponent_collection=dict(opponent.collection),
            rows=tuple(tuple(row) for row in state.rows),
        )

    def to_dict(self) -> dict:
        """JSON-friendly form, keyed the way a prompt would present it."""
        return {
            "myHand": [s.value for s in self.hand],
            "myCollection": {s.value: n for s, n in self.collection.items()},
            "opponentCollection": {s.value: n for s, n in self.opponent_collection.items()},
            "rows": [[s.value for s in row] for row in self.rows],
        }


class MoveOracle(Protocol):
    """Anything that can suggest a PLAY move for a view of the table."""

    def suggest_play(self, view: OracleView) -> PlayMove | None:
        ...


@dataclass
class OraclePolicy(MovePolicy):
    """
    Policy for the AI-controlled seat.

    Usage:
        policy = OraclePolicy(oracle=my_oracle, rng=random.Random(7))
        decision = policy.select_move(state, legal_moves(state))
    """
    oracle: MoveOracle | None = None
    rng: random.Random = field(default_factory=random.Random)

    def select_move(self, state: GameState, legal_moves: list[Move]) -> BotDecision:
        if not legal_moves:
            raise ValueError("No legal moves available")

        if state.turn_phase == TurnPhase.DRAW_DECISION:
            return BotDecision(move=DrawCardsMove(), explanation="Always draw")

        if state.turn_phase == TurnPhase.FLOCK_OR_PASS:
            for move in legal_moves:
                if isinstance(move, FlockMove):
                    return BotDecision(move=move, explanation=f"Flock {move.species.value}")
            return BotDecision(move=PassMove(), explanation="Nothing to flock")

        suggestion = self._consult(state)
        if suggestion is not None and suggestion in legal_moves:
            return BotDecision(
                move=suggestion,
                explanation="Oracle suggestion",
                evaluated_moves=len(legal_moves),
            )
        if suggestion is not None:
            logger.info("Oracle suggested an illegal move %r, falling back", suggestion)

        player = state.current_player
        fallback = PlayMove(
            species=player.hand[0],
            row_index=self.rng.randrange(len(state.rows)),
            side=self.rng.choice(list(Side)),
        )
        return BotDecision(move=fallback, explanation="Fallback play", confidence=0.0)

    def _consult(self, state: GameState) -> PlayMove | None:
        if self.oracle is None:
            return None
        try:
            return self.oracle.suggest_play(OracleView.from_state(state))
        except Exception:
            logger.warning("Move oracle failed, using fallback play", exc_info=True)
            return None
