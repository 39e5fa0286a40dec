"""
Deck - Card supply primitives.

These helpers mutate the state they are given. The reducer only ever
passes them its private working copy, so callers never see a mutation.
"""

from __future__ import annotations
import random

from .species import SPECIES_DATA, Species
from .state import GameState


def build_deck(rng: random.Random) -> list[Species]:
    """Build every species x its total count, shuffled."""
    deck = [cfg.species for cfg in SPECIES_DATA.values() for _ in range(cfg.total)]
    rng.shuffle(deck)
    return deck


def draw_card(state: GameState) -> Species | None:
    """
    Draw one card from the deck.

    If the deck is empty, the discard pile is shuffled into a new deck
    first. Returns None when both are empty.
    """
    if not state.deck:
        if not state.discard_pile:
            return None
        new_deck = list(state.discard_pile)
        state.rng.shuffle(new_deck)
        state.deck = new_deck
        state.discard_pile = []
        state.log("Deck reshuffled.")
    return state.deck.pop()


def draw_cards(state: GameState, count: int) -> list[Species]:
    """Draw up to `count` cards; fewer when the supply runs out."""
    drawn = []
    for _ in range(count):
        card = draw_card(state)
        if card is None:
            break
        drawn.append(card)
    return drawn


def deal_hands(state: GameState) -> None:
    """Deal a fresh hand to every player, replacing their current hand."""
    for player in state.players:
        player.hand = draw_cards(state, state.config.hand_size)
        player.sort_hand()


def deal_rows(state: GameState) -> None:
    """
    Lay out the starting rows.

    Each row gets `initial_row_cards` distinct species; a duplicate draw
    goes to the discard pile instead.
    """
    rows = []
    for _ in range(state.config.row_count):
        row: list[Species] = []
        while len(row) < state.config.initial_row_cards:
            card = draw_card(state)
            if card is None:
                break
            if card in row:
                state.discard_pile.append(card)
            else:
                row.append(card)
        rows.append(row)
    state.rows = rows


def is_row_valid(row: list[Species], min_species: int = 2) -> bool:
    """A row is valid when it holds at least `min_species` distinct species."""
    return len(set(row)) >= min_species


def ensure_row_validity(state: GameState, row_index: int) -> int:
    """
    Append cards to a row until it is valid or the supply is exhausted.

    Returns the number of cards added.
    """
    row = state.rows[row_index]
    added = 0
    while not is_row_valid(row, state.config.min_row_species):
        card = draw_card(state)
        if card is None:
            break
        row.append(card)
        added += 1
    return added
