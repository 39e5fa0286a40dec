"""
Game Loop - Drives one room: submit a move, push the snapshot, run the
computer-controlled seat until a human has to act.

The loop:
1. Read the room's latest snapshot
2. Apply the move through the engine
3. Push the new snapshot if the move was valid
4. Repeat for the AI seat while it is on turn
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
import logging

from ..engine_core.action import MoveOutcome, describe_move
from ..engine_core.action_generator import legal_moves
from ..engine_core.reducer import apply_move
from .manager import RoomNotFoundError

if TYPE_CHECKING:
    from ..bots import MovePolicy
    from ..engine_core.action import Move
    from .manager import RoomStore

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """Who the room is waiting on."""
    WAITING_HUMAN = "waiting_human"
    RUNNING_AI = "running_ai"
    STUCK = "stuck"          # Current player has no legal move
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of a run of AI moves.

    Contains the outcomes in order plus where the loop stopped.
    """
    loop_state: LoopState
    outcomes: list[MoveOutcome] = field(default_factory=list)
    ai_moves: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


@dataclass
class GameLoop:
    """
    Applies moves for one room.

    `policies` maps a seat index to the policy that plays it. Seats
    without a policy are played by humans through submit().
    """
    store: RoomStore
    room_id: str
    policies: dict[int, MovePolicy] = field(default_factory=dict)
    max_ai_moves: int = 50

    def submit(self, move: Move) -> MoveOutcome:
        """Apply a move to the room's snapshot; push it if valid."""
        state = self.store.get_state(self.room_id)
        if state is None:
            raise RoomNotFoundError(self.room_id)

        outcome = apply_move(state, move)
        if outcome.is_valid:
            self.store.push_state(self.room_id, outcome.new_state)
        else:
            logger.debug("Rejected %s in room %s: %s", describe_move(move), self.room_id, outcome.message)
        return outcome

    def run_ai_turns(self) -> TurnResult:
        """
        Play the AI seat(s) until a human must act or the game ends.
        """
        result = TurnResult(loop_state=LoopState.RUNNING_AI)

        for _ in range(self.max_ai_moves):
            state = self.store.get_state(self.room_id)
            if state is None:
                raise RoomNotFoundError(self.room_id)

            if state.is_over:
                result.loop_state = LoopState.GAME_OVER
                return result

            policy = self.policies.get(state.current_player_index)
            if policy is None:
                result.loop_state = LoopState.WAITING_HUMAN
                return result

            moves = legal_moves(state)
            if not moves:
                result.loop_state = LoopState.STUCK
                return result

            decision = policy.select_move(state, moves)
            outcome = self.submit(decision.move)
            result.outcomes.append(outcome)
            if not outcome.is_valid:
                result.errors.append(outcome.message)
                result.loop_state = LoopState.STUCK
                return result
            result.ai_moves.append(outcome.message)

        logger.warning("Room %s: AI move limit reached", self.room_id)
        return result
