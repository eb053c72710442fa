# tests/test_grid.py
from __future__ import annotations

import itertools

import pytest

from block_puzzle_engine.game import GameGrid, PieceType, get_piece

from conftest import grid_with


def test_bounds() -> None:
    board = GameGrid()
    assert board.is_in_bounds(0, 0)
    assert board.is_in_bounds(9, 9)
    assert not board.is_in_bounds(-1, 0)
    assert not board.is_in_bounds(0, 10)
    assert board.get_cell(10, 0) is None


def test_can_place_rejects_out_of_bounds_and_overlap() -> None:
    board = grid_with([(5, 5)])
    i_piece = get_piece(PieceType.I)
    assert board.can_place_piece(i_piece, 0, 6)
    assert not board.can_place_piece(i_piece, 0, 7)  # last cell at col 10
    assert not board.can_place_piece(i_piece, -1, 0)
    assert not board.can_place_piece(i_piece, 5, 2)  # covers (5, 5)


def test_try_place_fills_cells_with_piece_id() -> None:
    board = GameGrid()
    piece = get_piece(PieceType.T)
    attempt = board.try_place_piece(piece, 2, 3)
    assert attempt.success
    assert attempt.cells == ((2, 3), (2, 4), (2, 5), (3, 4))
    for r, c in attempt.cells:
        assert board.get_cell(r, c) == piece.board_id
    assert board.filled_count() == 4


@pytest.mark.parametrize(
    "row,col",
    [(-1, 0), (0, -1), (9, 9), (8, 0), (4, 4), (10, 10)],
)
def test_failed_placement_leaves_board_untouched(row: int, col: int) -> None:
    board = grid_with([(4, 4), (4, 5), (9, 0)])
    before = board.to_array()
    piece = get_piece(PieceType.SQUARE_3X3)
    assert not board.can_place_piece(piece, row, col)
    attempt = board.try_place_piece(piece, row, col)
    assert not attempt.success
    assert attempt.cells == ()
    assert board.to_array() == before


def test_failed_attempts_are_noops_whenever_can_place_is_false() -> None:
    board = grid_with([(r, c) for r, c in itertools.product(range(10), range(10)) if (r * 3 + c) % 4 == 0])
    piece = get_piece(PieceType.S)
    for row, col in itertools.product(range(-2, 11), range(-2, 11)):
        if board.can_place_piece(piece, row, col):
            continue
        before = board.to_array()
        assert not board.try_place_piece(piece, row, col).success
        assert board.to_array() == before


def test_valid_positions_on_empty_board() -> None:
    board = GameGrid()
    assert len(board.get_valid_positions(get_piece(PieceType.SQUARE_3X3))) == 64
    assert len(board.get_valid_positions(get_piece(PieceType.DOT))) == 100
    assert len(board.get_valid_positions(get_piece(PieceType.LINE5))) == 60
    assert board.get_valid_positions(get_piece(PieceType.O))[0] == (0, 0)


def test_can_place_anywhere() -> None:
    full = grid_with(itertools.product(range(10), range(10)))
    assert not full.can_place_piece_anywhere(get_piece(PieceType.DOT))

    one_hole = grid_with([(r, c) for r, c in itertools.product(range(10), range(10)) if (r, c) != (7, 2)])
    assert one_hole.can_place_piece_anywhere(get_piece(PieceType.DOT))
    assert one_hole.get_valid_positions(get_piece(PieceType.DOT)) == [(7, 2)]
    assert not one_hole.can_place_piece_anywhere(get_piece(PieceType.LINE2))


def test_array_round_trip() -> None:
    board = GameGrid()
    board.try_place_piece(get_piece(PieceType.BIG_CORNER), 0, 0)
    board.try_place_piece(get_piece(PieceType.Z), 6, 5)
    data = board.to_array()
    assert len(data) == 100
    assert GameGrid.from_array(data) == board
    assert GameGrid.from_array(data).to_array() == data


def test_from_array_rejects_malformed_data() -> None:
    with pytest.raises(ValueError, match="100 cells"):
        GameGrid.from_array([0] * 99)
    with pytest.raises(ValueError, match="out of range"):
        GameGrid.from_array([0] * 99 + [16])
    with pytest.raises(ValueError, match="must be ints"):
        GameGrid.from_array([0] * 99 + ["1"])


def test_copy_is_independent() -> None:
    board = grid_with([(0, 0)])
    clone = board.copy()
    clone.try_place_piece(get_piece(PieceType.DOT), 1, 1)
    assert board.get_cell(1, 1) == 0
    assert clone != board
