"""
Pytest fixtures for Cubirds tests.
"""

import random

import pytest

from ..engine_core.setup import initialize_game
from ..engine_core.species import Species
from ..engine_core.state import GameConfig, GameState, Player, TurnPhase


SP = Species.SPARROW
SW = Species.SWALLOW
TW = Species.TIT_WARBLER
MD = Species.MANDARIN_DUCK
HO = Species.HOOPOE
KF = Species.KINGFISHER
PC = Species.PEACOCK
CR = Species.RED_CROWNED_CRANE


def build_state(
    hands,
    rows=None,
    deck=None,
    discard=None,
    collections=None,
    phase=TurnPhase.PLAY,
    current=0,
    config=None,
) -> GameState:
    """Build a hand-crafted state for targeted rule tests."""
    collections = collections or [{} for _ in hands]
    players = [
        Player(index=i, name=f"P{i}", hand=list(hand), collection=dict(collections[i]))
        for i, hand in enumerate(hands)
    ]
    return GameState(
        players=players,
        current_player_index=current,
        rows=[list(r) for r in (rows or [[SP, SW], [TW, MD], [HO, KF], [PC, CR]])],
        deck=list(deck or []),
        discard_pile=list(discard or []),
        turn_phase=phase,
        config=config or GameConfig(),
        rng=random.Random(0),
    )


@pytest.fixture
def make_state():
    """Factory for hand-crafted states."""
    return build_state


@pytest.fixture
def new_game() -> GameState:
    """A freshly dealt two-player game with a fixed seed."""
    return initialize_game(["Alice", "Bob"], ai_enabled=False, seed=42)


@pytest.fixture
def ai_game() -> GameState:
    """A freshly dealt game against the computer."""
    return initialize_game(["Human", "Computer"], ai_enabled=True, seed=7)
