"""
Game Setup - Creates the initial game state.

This module handles:
- Building and shuffling the deck (seeded for determinism)
- Laying out the starting rows
- Dealing starting hands
- Granting each player one random starting bird
"""

from __future__ import annotations
import random

from .deck import build_deck, deal_hands, deal_rows, draw_card
from .state import GameConfig, GameState, Player


def initialize_game(
    player_names: list[str],
    ai_enabled: bool = False,
    seed: int | None = None,
    config: GameConfig | None = None,
) -> GameState:
    """
    Set up a new game.

    Args:
        player_names: Names for the two players (blank names get a default)
        ai_enabled: Mark the second player as computer-controlled
        seed: Seed for deterministic shuffling
        config: Rule constants (defaults to the standard game)

    Returns:
        Initial GameState in phase PLAY with player 0 to act
    """
    if len(player_names) != 2:
        raise ValueError("Cubirds is played by exactly 2 players")

    rng = random.Random(seed)
    state = GameState(
        players=_create_players(player_names, ai_enabled),
        deck=build_deck(rng),
        config=config or GameConfig(),
        rng=rng,
    )
    state.log("Game started! Round 1.")

    deal_rows(state)
    deal_hands(state)

    for player in state.players:
        start_bird = draw_card(state)
        if start_bird is not None:
            player.collection[start_bird] = 1

    return state


def _create_players(player_names: list[str], ai_enabled: bool) -> list[Player]:
    return [
        Player(
            index=i,
            name=name or f"Player {i + 1}",
            is_ai=ai_enabled and i == 1,
        )
        for i, name in enumerate(player_names)
    ]
