from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .pieces import PieceShape, PieceType


Coordinate = Tuple[int, int]

BOARD_SIZE = 10
BOARD_CELLS = BOARD_SIZE * BOARD_SIZE
# 0 is empty, 1..15 are PieceType ids + 1
MAX_CELL_VALUE = len(PieceType)


@dataclass(frozen=True)
class PlacementAttempt:
    success: bool
    cells: Tuple[Coordinate, ...] = ()


class GameGrid:
    """Fixed 10x10 grid for block placement.

    The grid uses 0 for empty cells and positive integers for filled cells.
    A filled cell holds ``kind + 1`` of the piece that filled it, so the
    colour tag is recoverable through the piece catalog.
    Rows index from the top, columns from the left; anchors are the
    top-left corner of a piece's bounding box.
    """

    def __init__(self) -> None:
        self.size = BOARD_SIZE
        self.grid = np.zeros((self.size, self.size), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def is_in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def is_empty(self, row: int, col: int) -> bool:
        return self.is_in_bounds(row, col) and self.grid[row, col] == 0

    def get_cell(self, row: int, col: int) -> Optional[int]:
        """Cell value, or None when outside the board."""
        if not self.is_in_bounds(row, col):
            return None
        return int(self.grid[row, col])

    def can_place_piece(self, piece: PieceShape, row: int, col: int) -> bool:
        """Check if every filled cell of `piece` anchored at (row, col) is free"""
        for r, c in piece.cells_at(row, col):
            if not self.is_in_bounds(r, c):
                return False
            if self.grid[r, c] != 0:
                return False
        return True

    def try_place_piece(self, piece: PieceShape, row: int, col: int) -> PlacementAttempt:
        """Place `piece` if legal; the grid is untouched when it is not."""
        if not self.can_place_piece(piece, row, col):
            return PlacementAttempt(success=False)
        cells = piece.cells_at(row, col)
        value = piece.board_id
        for r, c in cells:
            self.grid[r, c] = value
        return PlacementAttempt(success=True, cells=cells)

    def can_place_piece_anywhere(self, piece: PieceShape) -> bool:
        for row in range(self.size - piece.height + 1):
            for col in range(self.size - piece.width + 1):
                if self.can_place_piece(piece, row, col):
                    return True
        return False

    def get_valid_positions(self, piece: PieceShape) -> List[Coordinate]:
        """All legal (row, col) anchors for a piece, row-major"""
        positions: List[Coordinate] = []
        for row in range(self.size - piece.height + 1):
            for col in range(self.size - piece.width + 1):
                if self.can_place_piece(piece, row, col):
                    positions.append((row, col))
        return positions

    def clear_cells(self, cells: Iterable[Coordinate]) -> None:
        for r, c in cells:
            self.grid[r, c] = 0

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def get_filled_ratio(self) -> float:
        return self.filled_count() / float(BOARD_CELLS)

    def to_array(self) -> List[int]:
        """Row-major flat copy of the grid, BOARD_CELLS values long."""
        return [int(v) for v in self.grid.reshape(-1)]

    @classmethod
    def from_array(cls, data: Sequence[int]) -> "GameGrid":
        values = list(data)
        if len(values) != BOARD_CELLS:
            raise ValueError(f"grid must have {BOARD_CELLS} cells, got {len(values)}")
        for v in values:
            if isinstance(v, bool) or not isinstance(v, (int, np.integer)):
                raise ValueError(f"grid cells must be ints, got {v!r}")
            if not (0 <= int(v) <= MAX_CELL_VALUE):
                raise ValueError(f"grid cell value out of range [0, {MAX_CELL_VALUE}]: {v}")
        grid = cls()
        grid.grid = np.asarray(values, dtype=np.int8).reshape(BOARD_SIZE, BOARD_SIZE)
        return grid

    def copy(self) -> "GameGrid":
        """Create a copy of the current grid"""
        new_grid = GameGrid()
        new_grid.grid = self.grid.copy()
        return new_grid

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameGrid):
            return NotImplemented
        return np.array_equal(self.grid, other.grid)

    def __repr__(self) -> str:
        rows = ["".join("#" if v else "." for v in row) for row in self.grid]
        return "GameGrid(\n  " + "\n  ".join(rows) + "\n)"
