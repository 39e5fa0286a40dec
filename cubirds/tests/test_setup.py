"""
Tests for game setup.
"""

import pytest

from ..engine_core.setup import initialize_game
from ..engine_core.species import species_sort_key
from ..engine_core.state import GameConfig, GameStatus, RuleVariant, TurnPhase


class TestInitializeGame:
    """Tests for a freshly dealt game."""

    def test_rows_are_dealt(self, new_game):
        """Four rows of three distinct species."""
        assert len(new_game.rows) == 4
        for row in new_game.rows:
            assert len(row) == 3
            assert len(set(row)) == 3

    def test_hands_are_dealt_and_sorted(self, new_game):
        """Eight cards each, in catalogue order."""
        for player in new_game.players:
            assert len(player.hand) == 8
            assert player.hand == sorted(player.hand, key=species_sort_key)

    def test_starting_bird(self, new_game):
        """Each player starts with one banked card."""
        for player in new_game.players:
            assert player.banked_total == 1
            assert list(player.collection.values()) == [1]

    def test_initial_status(self, new_game):
        """Player 0 acts first, in PLAY, round 1."""
        assert new_game.status == GameStatus.PLAYING
        assert new_game.turn_phase == TurnPhase.PLAY
        assert new_game.current_player_index == 0
        assert new_game.round_number == 1
        assert new_game.winner is None
        assert new_game.action_log[0] == "Game started! Round 1."

    def test_seed_is_deterministic(self):
        """The same seed yields the same game."""
        assert initialize_game(["A", "B"], seed=3) == initialize_game(["A", "B"], seed=3)

    def test_seed_carries_into_draws(self):
        """Two games from one seed keep shuffling identically."""
        a = initialize_game(["A", "B"], seed=3)
        b = initialize_game(["A", "B"], seed=3)

        assert a.rng.random() == b.rng.random()

    def test_ai_flag(self, ai_game, new_game):
        """Only the second seat is computer-controlled."""
        assert [p.is_ai for p in ai_game.players] == [False, True]
        assert [p.is_ai for p in new_game.players] == [False, False]

    def test_blank_names_get_default(self):
        """A blank name becomes Player N."""
        state = initialize_game(["", "Bob"], seed=1)

        assert [p.name for p in state.players] == ["Player 1", "Bob"]

    @pytest.mark.parametrize("names", [["Solo"], ["A", "B", "C"], []])
    def test_requires_two_players(self, names):
        """Only two-player games are supported."""
        with pytest.raises(ValueError):
            initialize_game(names)

    def test_config_is_kept(self):
        """A custom config is stored on the state."""
        config = GameConfig(rule_variant=RuleVariant.AUTO_DRAW)

        state = initialize_game(["A", "B"], seed=1, config=config)

        assert state.config is config
