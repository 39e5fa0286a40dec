"""
Playthrough tests for engine-wide properties.

Tests:
- Every generated move is accepted by the reducer
- Cards are never created or lost
- Rows stay valid while the supply lasts
"""

import random

import pytest

from ..engine_core.action import DrawCardsMove, FlockMove, PassMove, PlayMove, SkipDrawMove
from ..engine_core.action_generator import legal_moves
from ..engine_core.deck import is_row_valid
from ..engine_core.reducer import apply_move
from ..engine_core.rules import cards_conserved
from ..engine_core.setup import initialize_game
from ..engine_core.state import GameConfig, GameStatus, RuleVariant, TurnPhase
from .conftest import KF, SP, SW

MAX_MOVES = 400


def play_randomly(state, seed):
    """Yield (before, move, outcome) for random legal moves until the game ends."""
    rng = random.Random(seed)
    for _ in range(MAX_MOVES):
        moves = legal_moves(state)
        if not moves:
            return
        move = rng.choice(moves)
        outcome = apply_move(state, move)
        yield state, move, outcome
        state = outcome.new_state


class TestLegalMoves:
    """Tests for the move generator."""

    def test_play_phase(self, make_state):
        """Every held species on every row and side."""
        state = make_state(hands=[[SP, SP, KF], [SW]])

        moves = legal_moves(state)

        assert len(moves) == 2 * 4 * 2
        assert all(isinstance(m, PlayMove) for m in moves)

    def test_draw_decision_phase(self, make_state):
        """Draw or skip."""
        state = make_state(hands=[[KF], [SW]], phase=TurnPhase.DRAW_DECISION)

        assert legal_moves(state) == [DrawCardsMove(), SkipDrawMove()]

    def test_flock_or_pass_phase(self, make_state):
        """Flockable species, then pass."""
        state = make_state(hands=[[KF] * 3, [SW]], phase=TurnPhase.FLOCK_OR_PASS)

        assert legal_moves(state) == [FlockMove(KF), PassMove()]

    def test_game_over(self, make_state):
        """A finished game has no moves."""
        state = make_state(hands=[[KF], [SW]])
        state = state._copy_with(status=GameStatus.GAME_OVER)

        assert legal_moves(state) == []


class TestPlaythrough:
    """Random games checked move by move."""

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    def test_generated_moves_are_valid(self, seed):
        """The reducer accepts everything the generator offers."""
        state = initialize_game(["A", "B"], seed=seed)

        for _, move, outcome in play_randomly(state, seed):
            assert outcome.is_valid, (move, outcome.message)

    @pytest.mark.parametrize("variant", list(RuleVariant))
    @pytest.mark.parametrize("seed", [11, 12, 13])
    def test_cards_conserved(self, seed, variant):
        """Hands, rows, deck, discard and collections always sum to 110."""
        state = initialize_game(["A", "B"], seed=seed, config=GameConfig(rule_variant=variant))
        assert cards_conserved(state)

        for _, _, outcome in play_randomly(state, seed):
            assert cards_conserved(outcome.new_state)

    @pytest.mark.parametrize("seed", [21, 22, 23])
    def test_row_invariant(self, seed):
        """A row is valid, or untouched, or the supply ran dry."""
        state = initialize_game(["A", "B"], seed=seed)

        for before, _, outcome in play_randomly(state, seed):
            after = outcome.new_state
            supply_ran_dry = not after.deck and not after.discard_pile
            for old_row, row in zip(before.rows, after.rows):
                assert (
                    is_row_valid(row)
                    or row == old_row
                    or supply_ran_dry
                    or outcome.round_ended
                )

    @pytest.mark.parametrize("seed", [31, 32])
    def test_input_never_mutated(self, seed):
        """The state handed to apply_move is left exactly as it was."""
        state = initialize_game(["A", "B"], seed=seed)

        for before, move, outcome in play_randomly(state, seed):
            snapshot = before.clone()
            apply_move(before, move)
            assert before == snapshot
