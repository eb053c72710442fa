from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache
from typing import Dict, Tuple

import numpy as np


class PieceType(IntEnum):
    """Enumeration of piece types"""
    # Tetrominoes
    I = 0
    O = 1  # doubles as the 2x2 square
    T = 2
    S = 3
    Z = 4
    J = 5
    L = 6
    # Extended shapes
    DOT = 7
    LINE2 = 8
    LINE3 = 9
    LINE5 = 10
    CORNER = 11
    BIG_CORNER = 12
    SQUARE_3X3 = 13
    RECT_2X3 = 14


Shape = np.ndarray


def _rot90(shape: Shape, k: int) -> Shape:
    k = k % 4
    if k == 0:
        return shape
    return np.rot90(shape, k, axes=(1, 0))  # rotate clockwise when k>0


def _frozen(rows) -> Shape:
    arr = np.array(rows, dtype=np.uint8)
    arr.flags.writeable = False
    return arr


BASE_SHAPES: Dict[PieceType, Shape] = {
    PieceType.I: _frozen([[1, 1, 1, 1]]),
    PieceType.O: _frozen([[1, 1], [1, 1]]),
    PieceType.T: _frozen([[1, 1, 1], [0, 1, 0]]),
    PieceType.S: _frozen([[0, 1, 1], [1, 1, 0]]),
    PieceType.Z: _frozen([[1, 1, 0], [0, 1, 1]]),
    PieceType.J: _frozen([[1, 0], [1, 0], [1, 1]]),
    PieceType.L: _frozen([[0, 1], [0, 1], [1, 1]]),
    PieceType.DOT: _frozen([[1]]),
    PieceType.LINE2: _frozen([[1, 1]]),
    PieceType.LINE3: _frozen([[1, 1, 1]]),
    PieceType.LINE5: _frozen([[1, 1, 1, 1, 1]]),
    PieceType.CORNER: _frozen([[1, 1], [1, 0]]),
    PieceType.BIG_CORNER: _frozen([[1, 1, 1], [1, 0, 0], [1, 0, 0]]),
    PieceType.SQUARE_3X3: _frozen([[1, 1, 1], [1, 1, 1], [1, 1, 1]]),
    PieceType.RECT_2X3: _frozen([[1, 1, 1], [1, 1, 1]]),
}

COLORS: Dict[PieceType, str] = {
    PieceType.I: "#00FFFF",
    PieceType.O: "#FFFF00",
    PieceType.T: "#800080",
    PieceType.S: "#00FF00",
    PieceType.Z: "#FF0000",
    PieceType.J: "#0000FF",
    PieceType.L: "#FFA500",
    PieceType.DOT: "#808080",
    PieceType.LINE2: "#FFB6C1",
    PieceType.LINE3: "#90EE90",
    PieceType.LINE5: "#87CEEB",
    PieceType.CORNER: "#DDA0DD",
    PieceType.BIG_CORNER: "#F0E68C",
    PieceType.SQUARE_3X3: "#8B4513",
    PieceType.RECT_2X3: "#FF69B4",
}

# RECT_2X3 stood upright (rotation 1 or 3) keeps its old 3x2 colour
RECT_VERTICAL_COLOR = "#4169E1"


def _kind(kind: int) -> PieceType:
    # PieceType(...) raises ValueError for ids outside the closed set
    return PieceType(int(kind))


@dataclass(frozen=True, eq=False)
class PieceShape:
    """Immutable piece value: kind, bounding-box mask and display colour."""

    kind: PieceType
    cells: Shape
    color: str
    rotation: int = 0

    @property
    def height(self) -> int:
        return int(self.cells.shape[0])

    @property
    def width(self) -> int:
        return int(self.cells.shape[1])

    @property
    def cell_count(self) -> int:
        return int(self.cells.sum())

    @property
    def board_id(self) -> int:
        """Value written into grid cells covered by this piece (0 is empty)."""
        return int(self.kind) + 1

    def offsets(self) -> Tuple[Tuple[int, int], ...]:
        """(row, col) offsets of filled cells relative to the anchor."""
        rows, cols = np.nonzero(self.cells)
        return tuple((int(r), int(c)) for r, c in zip(rows, cols))

    def cells_at(self, row: int, col: int) -> Tuple[Tuple[int, int], ...]:
        return tuple((row + dr, col + dc) for dr, dc in self.offsets())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PieceShape):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.rotation == other.rotation
            and np.array_equal(self.cells, other.cells)
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.rotation))


class PieceCatalog:
    """Static piece shape and colour lookups"""

    SHAPES = BASE_SHAPES
    COLORS = COLORS

    @classmethod
    def get_shape(cls, kind: int, rotation: int = 0) -> Shape:
        """Read-only mask of the piece at the given clockwise rotation"""
        shape = _rot90(cls.SHAPES[_kind(kind)], rotation)
        if shape.flags.writeable:
            shape = shape.copy()
            shape.flags.writeable = False
        return shape

    @classmethod
    def get_color(cls, kind: int, rotation: int = 0) -> str:
        kind = _kind(kind)
        if kind == PieceType.RECT_2X3 and rotation % 4 in (1, 3):
            return RECT_VERTICAL_COLOR
        return cls.COLORS[kind]

    @classmethod
    def get_dimensions(cls, kind: int) -> Tuple[int, int]:
        """(rows, cols) of the unrotated bounding box"""
        h, w = cls.SHAPES[_kind(kind)].shape
        return int(h), int(w)

    @classmethod
    def get_cell_count(cls, kind: int) -> int:
        return get_piece(kind).cell_count

    @classmethod
    def get_piece(cls, kind: int) -> PieceShape:
        return get_piece(kind)

    @classmethod
    def color_for_board_id(cls, value: int) -> str | None:
        """Colour tag of a grid cell value, None for empty cells."""
        if int(value) == 0:
            return None
        return cls.get_color(int(value) - 1)


def create_piece(kind: int, rotation: int = 0) -> PieceShape:
    kind = _kind(kind)
    rotation = int(rotation) % 4
    return PieceShape(
        kind=kind,
        cells=PieceCatalog.get_shape(kind, rotation),
        color=PieceCatalog.get_color(kind, rotation),
        rotation=rotation,
    )


@lru_cache(maxsize=None)
def get_piece(kind: int) -> PieceShape:
    """Cached rotation-0 piece; the engine only ever places these."""
    return create_piece(kind)
