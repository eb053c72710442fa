"""Game module for the block puzzle engine.

Exports the turn engine and supporting classes:
- PieceType / PieceShape / PieceCatalog: static piece definitions
- GameGrid: 10x10 placement grid
- clear_lines / ClearResult: simultaneous row and column clearing
- ScoringRules / ScoreCalculator: injectable scoring tables
- PieceBagGenerator: serializable bag randomizer
- GameState / GameStatus: persisted game aggregate
- GameEngine: place -> clear -> score -> game-over turn orchestration
"""

from .analysis import BoardAnalysis, analyze
from .bag import PieceBagGenerator
from .core import GameConfig, GameEngine, HandRefill, PlacementResult, TurnSummary
from .errors import EngineError, IllegalTransitionError, MoveValidationError, StateCorruptionError
from .grid import BOARD_SIZE, GameGrid, PlacementAttempt
from .lines import ClearResult, clear_lines
from .pieces import PieceCatalog, PieceShape, PieceType, create_piece, get_piece
from .rules import ScoreCalculator, ScoringRules
from .state import HAND_SIZE, GameState, GameStatus

__all__ = [
    "BOARD_SIZE",
    "HAND_SIZE",
    "BoardAnalysis",
    "ClearResult",
    "EngineError",
    "GameConfig",
    "GameEngine",
    "GameGrid",
    "GameState",
    "GameStatus",
    "HandRefill",
    "IllegalTransitionError",
    "MoveValidationError",
    "PieceBagGenerator",
    "PieceCatalog",
    "PieceShape",
    "PieceType",
    "PlacementAttempt",
    "PlacementResult",
    "ScoreCalculator",
    "ScoringRules",
    "StateCorruptionError",
    "TurnSummary",
    "analyze",
    "clear_lines",
    "create_piece",
    "get_piece",
]
