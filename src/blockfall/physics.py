"""
Collision and transform logic for the active piece.

Every mutating function here follows the same pattern: apply the change, test
for collision, and undo the change if it collides. A rejected call leaves the
piece exactly as it was.
"""
from enum import Enum, IntEnum
from typing import Iterator, Union
import numpy as np

from .board import Board
from .piece import ActivePiece


class Rotation(IntEnum):
    """Rotation direction."""
    CLOCKWISE = 1
    COUNTER_CLOCKWISE = -1


class DropResult(Enum):
    """Outcome of a one-row descent."""
    MOVED = "moved"
    LANDED = "landed"


def as_rotation(direction: Union[Rotation, int]) -> Rotation:
    """
    Validate a rotation direction.

    Raises:
        ValueError: if the direction is not clockwise (1) or
            counter-clockwise (-1)
    """
    if isinstance(direction, bool):
        raise ValueError(f"Invalid rotation direction: {direction!r}")
    try:
        return Rotation(direction)
    except ValueError:
        raise ValueError(
            f"Invalid rotation direction: {direction!r}. "
            f"Use Rotation.CLOCKWISE (1) or Rotation.COUNTER_CLOCKWISE (-1)"
        ) from None


def collides(board: Board, piece: ActivePiece) -> bool:
    """
    Check whether the piece overlaps a wall, the floor or a filled cell.

    Rows above the top of the board count as open space.
    """
    for row, col, _ in piece.cells():
        if board.is_blocked(row, col):
            return True
    return False


def rotate_matrix(matrix: np.ndarray, direction: Union[Rotation, int]) -> np.ndarray:
    """
    Rotate a shape matrix by 90 degrees.

    The matrix is transposed, then each row is reversed (clockwise) or the row
    order is reversed (counter-clockwise). Works for rectangular matrices.

    Returns:
        A new array; the input is not modified
    """
    direction = as_rotation(direction)
    transposed = matrix.T
    if direction == Rotation.CLOCKWISE:
        rotated = transposed[:, ::-1]
    else:
        rotated = transposed[::-1, :]
    return np.ascontiguousarray(rotated)


def kick_offsets(width: int) -> Iterator[int]:
    """
    Column steps tried after a blocked rotation: +1, -2, +3, -4, ...

    Steps are applied cumulatively, so the piece tests columns +1, -1, +2,
    -2, ... relative to where it started. The largest step equals `width`.
    """
    for magnitude in range(1, width + 1):
        yield magnitude if magnitude % 2 else -magnitude


def move(piece: ActivePiece, board: Board, delta_cols: int) -> bool:
    """
    Shift the piece horizontally.

    Returns:
        True if the move was accepted, False if it was reverted
    """
    piece.col += delta_cols
    if collides(board, piece):
        piece.col -= delta_cols
        return False
    return True


def soft_drop(piece: ActivePiece, board: Board) -> DropResult:
    """
    Move the piece down one row.

    Returns:
        DropResult.MOVED, or DropResult.LANDED if the piece could not descend
        (the piece is left at its resting position for the caller to merge)
    """
    piece.row += 1
    if collides(board, piece):
        piece.row -= 1
        return DropResult.LANDED
    return DropResult.MOVED


def rotate(piece: ActivePiece, board: Board, direction: Union[Rotation, int]) -> bool:
    """
    Rotate the piece, kicking it sideways off walls and stacks if needed.

    Args:
        piece: The active piece
        board: The board to test against
        direction: Rotation.CLOCKWISE or Rotation.COUNTER_CLOCKWISE

    Returns:
        True if the rotation was accepted, False if it was undone

    Raises:
        ValueError: for an unknown direction
    """
    direction = as_rotation(direction)
    start_col = piece.col
    piece.shape = rotate_matrix(piece.shape, direction)

    if not collides(board, piece):
        return True

    for step in kick_offsets(piece.width):
        piece.col += step
        if not collides(board, piece):
            return True

    piece.shape = rotate_matrix(piece.shape, -direction)
    piece.col = start_col
    return False


def landing_row(piece: ActivePiece, board: Board) -> int:
    """Row the piece would come to rest on if dropped straight down."""
    ghost = piece.copy()
    while soft_drop(ghost, board) is DropResult.MOVED:
        pass
    return ghost.row
