# tests/conftest.py
from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

import pytest

from block_puzzle_engine.game import (
    GameEngine,
    GameGrid,
    GameState,
    PieceBagGenerator,
    PieceType,
)

FILLER = int(PieceType.I) + 1


def grid_with(cells: Iterable[Tuple[int, int]]) -> GameGrid:
    board = GameGrid()
    for r, c in cells:
        board.grid[r, c] = FILLER
    return board


def make_state(
    cells: Iterable[Tuple[int, int]] = (),
    hand: Sequence[Optional[PieceType]] = (PieceType.I, PieceType.O, PieceType.DOT),
    *,
    seed: int = 0,
    **fields,
) -> GameState:
    return GameState(
        grid=tuple(grid_with(cells).to_array()),
        hand=tuple(hand),
        bag_state=PieceBagGenerator(seed=seed).serialize_state(),
        score=fields.pop("score", 0),
        **fields,
    )


@pytest.fixture
def engine() -> GameEngine:
    return GameEngine()
