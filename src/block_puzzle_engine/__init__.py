"""Deterministic, server-authoritative 10x10 block puzzle engine."""

from .game import (
    GameConfig,
    GameEngine,
    GameState,
    GameStatus,
    HandRefill,
    PieceType,
    PlacementResult,
)

__all__ = [
    "GameConfig",
    "GameEngine",
    "GameState",
    "GameStatus",
    "HandRefill",
    "PieceType",
    "PlacementResult",
]

__version__ = "0.1.0"
