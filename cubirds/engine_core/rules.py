"""
Rules - Pure queries over game state.

Flock eligibility, capture detection, win condition and card
conservation. Nothing here mutates its arguments.
"""

from __future__ import annotations
from collections import Counter

from .species import ALL_SPECIES, SPECIES_DATA, TOTAL_CARDS, Species
from .state import GameConfig, GameState, Player, Side


def hand_counts(player: Player) -> dict[Species, int]:
    """Count of each species in a player's hand (held species only)."""
    return dict(Counter(player.hand))


def bank_amount(species: Species, hand_count: int) -> int:
    """Cards banked by flocking `hand_count` copies: 2 big, 1 small, 0 otherwise."""
    cfg = SPECIES_DATA[species]
    if hand_count >= cfg.big_flock:
        return 2
    if hand_count >= cfg.small_flock:
        return 1
    return 0


def flock_options(player: Player) -> list[Species]:
    """Species the player could flock right now, in catalogue order."""
    counts = hand_counts(player)
    return [s for s in ALL_SPECIES if bank_amount(s, counts.get(s, 0)) > 0]


def get_flockable_count(player: Player | None) -> int:
    """Number of distinct species the player could flock."""
    if player is None:
        return 0
    return len(flock_options(player))


def check_win_condition(player: Player, config: GameConfig | None = None) -> bool:
    """
    A player wins with enough distinct species banked, or with enough
    species each banked at the big-set size.
    """
    config = config or GameConfig()
    banked = {s: n for s, n in player.collection.items() if n > 0}
    if len(banked) >= config.win_distinct_species:
        return True
    big_sets = sum(1 for n in banked.values() if n >= config.win_big_set_size)
    return big_sets >= config.win_big_sets


def find_capture(row: list[Species], species: Species, played: int, side: Side) -> tuple[int, int]:
    """
    Locate the captured span in a row that already holds the played block.

    `played` copies of `species` sit at the `side` end of `row`. Scanning
    inward from that block, the first other copy of `species` closes the
    span. Returns (start, stop) slice bounds; start == stop means no capture.
    """
    n = len(row)
    if side == Side.LEFT:
        start = played
        for i in range(start, n):
            if row[i] == species:
                return start, i
        return start, start

    stop = n - played
    for i in range(stop - 1, -1, -1):
        if row[i] == species:
            return i + 1, stop
    return stop, stop


def count_cards(state: GameState) -> int:
    """Every card in play: hands, rows, deck, discard, and banked counts."""
    total = len(state.deck) + len(state.discard_pile)
    total += sum(len(row) for row in state.rows)
    for player in state.players:
        total += len(player.hand) + player.banked_total
    return total


def cards_conserved(state: GameState) -> bool:
    """True when no card has been created or lost."""
    return count_cards(state) == TOTAL_CARDS
