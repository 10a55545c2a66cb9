"""
Tests for collision, movement and rotation.
"""
import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from blockfall.board import Board
from blockfall.piece import ActivePiece
from blockfall.pieces import KIND_IDS, create_shape
from blockfall.physics import (
    Rotation, DropResult, as_rotation, collides, rotate_matrix, kick_offsets,
    move, soft_drop, rotate, landing_row,
)


def make_piece(kind: int, col: int, row: int) -> ActivePiece:
    return ActivePiece(kind=kind, shape=create_shape(kind), col=col, row=row)


def snapshot(piece: ActivePiece):
    return piece.shape.copy(), piece.col, piece.row


def assert_unchanged(piece: ActivePiece, before) -> None:
    shape, col, row = before
    assert np.array_equal(piece.shape, shape)
    assert piece.shape.shape == shape.shape
    assert piece.col == col
    assert piece.row == row


class TestCollides:
    """Test overlap detection."""

    def test_empty_board_spawn(self):
        board = Board()
        for kind in KIND_IDS:
            assert not collides(board, ActivePiece.spawn(kind, board.cols))

    def test_translation_over_empty_board(self):
        """Every fully in-bounds position of the O piece is free."""
        board = Board()
        for row in range(board.rows - 1):
            for col in range(board.cols - 1):
                assert not collides(board, make_piece(2, col, row))

    def test_left_wall(self):
        board = Board()
        assert collides(board, make_piece(2, -1, 0))

    def test_right_wall(self):
        board = Board()
        assert not collides(board, make_piece(2, 8, 0))
        assert collides(board, make_piece(2, 9, 0))

    def test_floor(self):
        board = Board()
        assert not collides(board, make_piece(2, 4, 18))
        assert collides(board, make_piece(2, 4, 19))

    def test_empty_template_cells_may_leave_board(self):
        """Only occupied cells count: the I piece's empty rows may hang below the floor."""
        board = Board()
        assert not collides(board, make_piece(7, 3, 18))  # row 1 of template -> grid row 19
        assert collides(board, make_piece(7, 3, 19))

    def test_above_top_is_open(self):
        board = Board()
        assert not collides(board, make_piece(1, 4, -1))
        assert not collides(board, make_piece(1, 4, -10))

    def test_filled_cell(self):
        board = Board()
        board.grid[1, 5] = 3
        assert collides(board, make_piece(1, 4, 0))  # T bottom row covers (1, 4..6)
        assert not collides(board, make_piece(1, 6, 0))

    def test_pure(self):
        board = Board()
        board.grid[19, :] = 1
        piece = make_piece(1, 4, 18)
        before = snapshot(piece)
        grid_before = board.get_state()
        collides(board, piece)
        assert_unchanged(piece, before)
        assert np.array_equal(board.grid, grid_before)


class TestRotateMatrix:
    """Test the raw 90 degree rotation."""

    def test_clockwise(self):
        matrix = np.array([[1, 2], [3, 4]], dtype=np.int8)
        assert rotate_matrix(matrix, Rotation.CLOCKWISE).tolist() == [[3, 1], [4, 2]]

    def test_counter_clockwise(self):
        matrix = np.array([[1, 2], [3, 4]], dtype=np.int8)
        assert rotate_matrix(matrix, Rotation.COUNTER_CLOCKWISE).tolist() == [[2, 4], [1, 3]]

    def test_rectangular(self):
        matrix = np.array([[1, 1, 1], [0, 1, 0]], dtype=np.int8)
        rotated = rotate_matrix(matrix, Rotation.CLOCKWISE)
        assert rotated.tolist() == [[0, 1], [1, 1], [0, 1]]

    def test_does_not_mutate_input(self):
        matrix = create_shape(1)
        before = matrix.copy()
        rotate_matrix(matrix, Rotation.CLOCKWISE)
        assert np.array_equal(matrix, before)

    def test_inverse(self):
        for kind in KIND_IDS:
            shape = create_shape(kind)
            there = rotate_matrix(shape, Rotation.CLOCKWISE)
            back = rotate_matrix(there, Rotation.COUNTER_CLOCKWISE)
            assert np.array_equal(back, shape)

    def test_four_turns_identity(self):
        for kind in KIND_IDS:
            shape = create_shape(kind)
            rotated = shape
            for _ in range(4):
                rotated = rotate_matrix(rotated, Rotation.CLOCKWISE)
            assert np.array_equal(rotated, shape)

    def test_o_is_symmetric(self):
        shape = create_shape(2)
        assert np.array_equal(rotate_matrix(shape, Rotation.CLOCKWISE), shape)
        assert np.array_equal(rotate_matrix(shape, Rotation.COUNTER_CLOCKWISE), shape)

    def test_i_clockwise_is_vertical(self):
        rotated = rotate_matrix(create_shape(7), Rotation.CLOCKWISE)
        assert np.all(rotated[:, 2] == 7)
        assert np.count_nonzero(rotated) == 4


class TestDirection:
    def test_valid(self):
        assert as_rotation(1) is Rotation.CLOCKWISE
        assert as_rotation(-1) is Rotation.COUNTER_CLOCKWISE
        assert as_rotation(Rotation.CLOCKWISE) is Rotation.CLOCKWISE

    @pytest.mark.parametrize("direction", [0, 2, -2, "cw", None, True])
    def test_invalid(self, direction):
        with pytest.raises(ValueError):
            as_rotation(direction)

    def test_rotate_rejects_invalid_direction(self):
        board = Board()
        piece = make_piece(1, 4, 5)
        before = snapshot(piece)
        with pytest.raises(ValueError):
            rotate(piece, board, 3)
        assert_unchanged(piece, before)


class TestKickOffsets:
    def test_pattern(self):
        assert list(kick_offsets(4)) == [1, -2, 3, -4]
        assert list(kick_offsets(3)) == [1, -2, 3]
        assert list(kick_offsets(2)) == [1, -2]

    def test_cumulative_positions(self):
        """Applied one after another the steps fan out around the start column."""
        positions = np.cumsum(list(kick_offsets(4))).tolist()
        assert positions == [1, -1, 2, -2]


class TestMove:
    """Test horizontal movement."""

    def test_move_accepted(self):
        board = Board()
        piece = make_piece(1, 4, 5)
        assert move(piece, board, 1)
        assert piece.col == 5
        assert move(piece, board, -1)
        assert piece.col == 4

    def test_move_into_wall_rejected(self):
        board = Board()
        piece = make_piece(2, 0, 5)
        before = snapshot(piece)
        assert not move(piece, board, -1)
        assert_unchanged(piece, before)

    def test_move_into_stack_rejected(self):
        board = Board()
        board.grid[5:7, 6] = 1
        piece = make_piece(2, 4, 5)
        before = snapshot(piece)
        assert not move(piece, board, 1)
        assert_unchanged(piece, before)

    def test_move_along_wall_until_blocked(self):
        board = Board()
        piece = make_piece(2, 4, 5)
        steps = 0
        while move(piece, board, 1):
            steps += 1
        assert steps == 4
        assert piece.col == 8


class TestSoftDrop:
    """Test one-row descent."""

    def test_moves_down(self):
        board = Board()
        piece = make_piece(2, 4, 0)
        assert soft_drop(piece, board) is DropResult.MOVED
        assert piece.row == 1

    def test_lands_on_floor(self):
        board = Board()
        piece = make_piece(2, 4, 18)
        assert soft_drop(piece, board) is DropResult.LANDED
        assert piece.row == 18

    def test_lands_on_stack(self):
        board = Board()
        board.grid[10, 4] = 1
        piece = make_piece(2, 4, 8)
        assert soft_drop(piece, board) is DropResult.LANDED
        assert piece.row == 8

    def test_landing_row(self):
        board = Board()
        piece = make_piece(2, 4, 0)
        assert landing_row(piece, board) == 18
        assert piece.row == 0


class TestRotate:
    """Test rotation with wall kicks."""

    def test_free_rotation(self):
        board = Board()
        piece = make_piece(1, 4, 5)
        expected = rotate_matrix(piece.shape, Rotation.CLOCKWISE)
        assert rotate(piece, board, Rotation.CLOCKWISE)
        assert np.array_equal(piece.shape, expected)
        assert piece.col == 4

    def test_o_rotation_keeps_occupancy(self):
        board = Board()
        piece = make_piece(2, 4, 5)
        cells_before = sorted(piece.cells())
        assert rotate(piece, board, Rotation.CLOCKWISE)
        assert sorted(piece.cells()) == cells_before

    def test_i_kicks_off_right_wall(self):
        """A vertical I in the rightmost column kicks left when turned flat."""
        board = Board()
        piece = ActivePiece(
            kind=7,
            shape=rotate_matrix(create_shape(7), Rotation.CLOCKWISE),
            col=7,
            row=5,
        )
        assert not collides(board, piece)
        assert [c for _, c, _ in piece.cells()] == [9, 9, 9, 9]

        assert rotate(piece, board, Rotation.CLOCKWISE)
        # +1 still hits the wall, -2 from there lands at column 6
        assert piece.col == 6
        assert not collides(board, piece)
        assert np.all(piece.shape[2] == 7)
        assert sorted(c for _, c, _ in piece.cells()) == [6, 7, 8, 9]

    def test_i_rotation_reverted_when_no_kick_fits(self):
        board = Board()
        board.grid[5:9, 0:9] = 1  # only column 9 is free in rows 5-8
        piece = ActivePiece(
            kind=7,
            shape=rotate_matrix(create_shape(7), Rotation.CLOCKWISE),
            col=7,
            row=5,
        )
        assert not collides(board, piece)
        before = snapshot(piece)

        assert not rotate(piece, board, Rotation.CLOCKWISE)
        assert_unchanged(piece, before)

    def test_counter_clockwise_rejection_is_atomic(self):
        board = Board()
        board.grid[5:9, 0:9] = 1
        piece = ActivePiece(
            kind=7,
            shape=rotate_matrix(create_shape(7), Rotation.CLOCKWISE),
            col=7,
            row=5,
        )
        before = snapshot(piece)
        assert not rotate(piece, board, Rotation.COUNTER_CLOCKWISE)
        assert_unchanged(piece, before)

    def test_kick_off_left_wall(self):
        board = Board()
        # T pointing right sits with its stem column at the left wall
        piece = make_piece(1, 0, 5)
        piece.shape = rotate_matrix(piece.shape, Rotation.CLOCKWISE)
        piece.col = -1
        assert not collides(board, piece)

        assert rotate(piece, board, Rotation.CLOCKWISE)
        assert piece.col == 0
        assert not collides(board, piece)
