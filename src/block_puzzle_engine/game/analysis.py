from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .grid import BOARD_CELLS, GameGrid
from .pieces import PieceType, get_piece

# Pieces from different size classes, used to estimate how open the board is
REPRESENTATIVE_PIECES = (
    PieceType.DOT,
    PieceType.LINE2,
    PieceType.LINE3,
    PieceType.T,
    PieceType.O,
)

MAX_EXPECTED_MOVES = 250
CRITICAL_MOVES = 30


@dataclass(frozen=True)
class BoardAnalysis:
    danger_level: float
    filled_cells: int
    empty_cells: int
    fill_ratio: float
    legal_moves: int
    near_complete_rows: Tuple[int, ...]
    near_complete_columns: Tuple[int, ...]
    empty_rows: int
    empty_columns: int


def near_complete_lines(grid: np.ndarray, axis: int, max_missing: int = 3) -> Tuple[int, ...]:
    """Indices of rows (axis=1) or columns (axis=0) missing 1..max_missing cells"""
    empties = np.sum(grid == 0, axis=axis)
    return tuple(int(i) for i in np.where((empties > 0) & (empties <= max_missing))[0])


def count_legal_moves(board: GameGrid) -> int:
    return sum(len(board.get_valid_positions(get_piece(kind))) for kind in REPRESENTATIVE_PIECES)


def danger_level(empty_cells: int, legal_moves: int, near_complete: int) -> float:
    """0.0 (open board) .. 1.0 (nothing fits)"""
    occupancy = 1.0 - empty_cells / float(BOARD_CELLS)
    if legal_moves <= CRITICAL_MOVES:
        scarcity = 1.0
    else:
        scarcity = 1.0 - min(1.0, legal_moves / float(MAX_EXPECTED_MOVES))
    # many almost-full lines means a fragmented board
    fragmentation = 0.3 if near_complete > 6 else 0.0
    level = 0.5 * occupancy + 0.4 * scarcity + 0.1 * fragmentation
    return float(np.clip(level ** 1.5, 0.0, 1.0))


def analyze(board: GameGrid) -> BoardAnalysis:
    grid = board.grid
    filled = board.filled_count()
    empty = BOARD_CELLS - filled
    legal = count_legal_moves(board)
    rows = near_complete_lines(grid, axis=1)
    cols = near_complete_lines(grid, axis=0)
    return BoardAnalysis(
        danger_level=danger_level(empty, legal, len(rows) + len(cols)),
        filled_cells=filled,
        empty_cells=empty,
        fill_ratio=filled / float(BOARD_CELLS),
        legal_moves=legal,
        near_complete_rows=rows,
        near_complete_columns=cols,
        empty_rows=int(np.sum(np.all(grid == 0, axis=1))),
        empty_columns=int(np.sum(np.all(grid == 0, axis=0))),
    )
