from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .grid import GameGrid


@dataclass(frozen=True)
class ClearResult:
    rows: Tuple[int, ...] = ()
    columns: Tuple[int, ...] = ()

    @property
    def line_count(self) -> int:
        # a cell at a row/column intersection is cleared once but both lines count
        return len(self.rows) + len(self.columns)

    @property
    def cleared_any(self) -> bool:
        return self.line_count > 0


def find_complete_rows(board: GameGrid) -> Tuple[int, ...]:
    full_rows = np.where(np.all(board.grid != 0, axis=1))[0]
    return tuple(int(r) for r in full_rows)


def find_complete_columns(board: GameGrid) -> Tuple[int, ...]:
    full_cols = np.where(np.all(board.grid != 0, axis=0))[0]
    return tuple(int(c) for c in full_cols)


def clear_lines(board: GameGrid) -> ClearResult:
    """Clear every complete row and column at once, without gravity.

    Both sets are collected before anything is cleared, so a row and a
    column completed by the same placement are each reported.
    """
    rows = find_complete_rows(board)
    columns = find_complete_columns(board)
    if rows:
        board.grid[list(rows), :] = 0
    if columns:
        board.grid[:, list(columns)] = 0
    return ClearResult(rows=rows, columns=columns)
