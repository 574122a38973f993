"""Game simulation and run metrics.

This module provides:
- Agent-versus-agent game driver
- Game statistics
- Human-versus-agent console play
- JSONL metrics logging
"""

from expectigammon.simulation.self_play import (
    GameStep,
    GameResult,
    play_game,
    compute_game_statistics,
)
from expectigammon.simulation.interactive import play_interactive
from expectigammon.simulation.metrics import MetricsLogger

__all__ = [
    "GameStep",
    "GameResult",
    "play_game",
    "compute_game_statistics",
    "play_interactive",
    "MetricsLogger",
]
