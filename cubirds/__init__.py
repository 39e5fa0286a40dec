"""
Cubirds - Rules engine for a two-player bird-flocking card game.

The engine owns the authoritative game state and provides:
- Game setup and deterministic shuffling
- Move validation and application (captures, flocks, rounds)
- Win detection
- Thin adapters: bot policies, an in-memory room store, a REST API, a CLI
"""

__version__ = "0.1.0"
