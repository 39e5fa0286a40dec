"""
Tests for the command-line interface.
"""

import pytest

from ..cli import main, parse_move, render
from ..engine_core.action import DrawCardsMove, FlockMove, PassMove, PlayMove, SkipDrawMove
from ..engine_core.state import Side, TurnPhase
from .conftest import CR, SP


class TestParseMove:
    """Tests for reading moves typed in the terminal."""

    @pytest.mark.parametrize("phase,text,expected", [
        (TurnPhase.PLAY, "1 2 l", PlayMove(SP, 1, Side.LEFT)),
        (TurnPhase.PLAY, "8 4 right", PlayMove(CR, 3, Side.RIGHT)),
        (TurnPhase.DRAW_DECISION, "d", DrawCardsMove()),
        (TurnPhase.DRAW_DECISION, "skip", SkipDrawMove()),
        (TurnPhase.FLOCK_OR_PASS, "p", PassMove()),
        (TurnPhase.FLOCK_OR_PASS, "flock 8", FlockMove(CR)),
    ])
    def test_parses(self, phase, text, expected):
        """Terminal shorthand becomes the matching move."""
        assert parse_move(phase, text) == expected

    @pytest.mark.parametrize("phase,text", [
        (TurnPhase.PLAY, ""),
        (TurnPhase.PLAY, "1 2"),
        (TurnPhase.PLAY, "9 1 l"),
        (TurnPhase.PLAY, "1 x l"),
        (TurnPhase.DRAW_DECISION, "p"),
        (TurnPhase.FLOCK_OR_PASS, "flock sparrow"),
    ])
    def test_rejects(self, phase, text):
        """Unreadable input gives None."""
        assert parse_move(phase, text) is None


class TestRender:
    """Tests for the terminal table view."""

    def test_render_shows_collections(self, new_game, capsys):
        """Each collection lists all eight species, banked or not."""
        render(new_game)

        out = capsys.readouterr().out
        line = next(l for l in out.splitlines() if l.startswith("Alice:"))
        counts = line.split("collection: ")[1].split()
        assert len(counts) == 8
        assert sum(int(c[-1]) for c in counts) == 1
        assert "Row 4:" in out


class TestCommands:
    """Tests for CLI subcommands."""

    def test_species(self, capsys):
        """The catalogue is printed."""
        main(["species"])

        out = capsys.readouterr().out
        assert "Red-crowned Crane" in out
        assert len(out.strip().splitlines()) == 9

    def test_simulate(self, capsys):
        """Simulation prints a summary."""
        main(["simulate", "--games", "2", "--policy", "first", "--max-moves", "30"])

        out = capsys.readouterr().out
        assert "Games: 2" in out
        assert "unfinished" in out

    def test_no_command(self):
        """Without a command the help is shown and the exit code is 1."""
        with pytest.raises(SystemExit):
            main([])
