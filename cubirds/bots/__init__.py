"""
Bots module - Computer-controlled player implementations.

Provides:
- MovePolicy: Interface for bot decision-making
- RandomPolicy / FirstLegalPolicy: Baselines for simulation and tests
- OraclePolicy: Play backed by an optional move-suggestion oracle
"""

from .policy import MovePolicy, BotDecision, RandomPolicy, FirstLegalPolicy
from .oracle import MoveOracle, OraclePolicy, OracleView

__all__ = [
    "MovePolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "MoveOracle",
    "OraclePolicy",
    "OracleView",
]
