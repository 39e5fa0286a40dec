"""
Move Generator - Enumerates all legal moves from a game state.

The generator is used by:
1. Bots to enumerate possible moves
2. UI to show available moves
3. Tests (every generated move must be accepted by the reducer)
"""

from __future__ import annotations

from .action import DrawCardsMove, FlockMove, Move, PassMove, PlayMove, SkipDrawMove
from .rules import flock_options
from .species import ALL_SPECIES
from .state import GameState, GameStatus, Side, TurnPhase


def legal_moves(state: GameState) -> list[Move]:
    """
    Generate all legal moves for the current player.

    Returns fully-specified moves; empty when the game is over.
    """
    if state.status == GameStatus.GAME_OVER:
        return []

    player = state.current_player

    if state.turn_phase == TurnPhase.PLAY:
        held = [s for s in ALL_SPECIES if s in player.hand]
        return [
            PlayMove(species=s, row_index=r, side=side)
            for s in held
            for r in range(len(state.rows))
            for side in Side
        ]

    if state.turn_phase == TurnPhase.DRAW_DECISION:
        return [DrawCardsMove(), SkipDrawMove()]

    moves: list[Move] = [FlockMove(species=s) for s in flock_options(player)]
    moves.append(PassMove())
    return moves
