"""
Blockfall Board Module.

This module implements the playfield with:
- COLS x ROWS grid representation (row 0 is the top)
- Occupancy tests used by collision detection
- Merging a landed piece into the grid
- Row sweeping (full rows removed, empty rows inserted at the top)
"""
from typing import List
import numpy as np

from .piece import ActivePiece
from .pieces import MIN_COLS, NUM_KINDS


class Board:
    """
    Represents the Blockfall playfield.

    The board is a 2D numpy array of shape (rows, cols) where:
    - 0 = empty cell
    - 1-7 = settled cell, tagged with the kind id of the piece it came from
    """

    DEFAULT_COLS = 10
    DEFAULT_ROWS = 20

    def __init__(self, cols: int = DEFAULT_COLS, rows: int = DEFAULT_ROWS):
        """Initialize an empty board."""
        if rows <= 0:
            raise ValueError(f"Board rows must be positive, got {rows}")
        if cols < MIN_COLS:
            raise ValueError(f"Board must be at least {MIN_COLS} columns wide, got {cols}")
        self.cols = cols
        self.rows = rows
        self.grid = np.zeros((rows, cols), dtype=np.int8)

    def copy(self) -> "Board":
        """Create a deep copy of this board."""
        new_board = Board(self.cols, self.rows)
        new_board.grid = self.grid.copy()
        return new_board

    def reset(self) -> None:
        """Clear the board."""
        self.grid.fill(0)

    @property
    def total_blocks(self) -> int:
        """Return total number of filled cells on the board."""
        return int(np.count_nonzero(self.grid))

    @property
    def empty_cells(self) -> int:
        return self.cols * self.rows - self.total_blocks

    def in_bounds(self, row: int, col: int) -> bool:
        """Check if coordinates are within board bounds."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    def is_blocked(self, row: int, col: int) -> bool:
        """
        Check whether a piece cell may not occupy (row, col).

        The left, right and bottom edges are walls. Everything above row 0 is
        open space, so a piece may poke out of the top of the board.

        Args:
            row: Grid row (may be negative)
            col: Grid column

        Returns:
            True if the cell is a wall or already filled
        """
        if col < 0 or col >= self.cols or row >= self.rows:
            return True
        if row < 0:
            return False
        return self.grid[row, col] != 0

    def merge(self, piece: ActivePiece) -> int:
        """
        Write a piece's occupied cells into the grid.

        No collision check is made; the caller is expected to merge only a
        piece that has just landed. Cells above the top edge are dropped.

        Returns:
            Number of cells written
        """
        written = 0
        for row, col, value in piece.cells():
            if row >= 0:
                self.grid[row, col] = value
                written += 1
        return written

    def is_row_full(self, row: int) -> bool:
        return bool(np.all(self.grid[row, :] != 0))

    def find_full_rows(self) -> List[int]:
        """Indices of all full rows, top to bottom."""
        return [row for row in range(self.rows) if self.is_row_full(row)]

    def _remove_row(self, row: int) -> None:
        """Remove a row and insert an empty one at the top."""
        remaining = np.delete(self.grid, row, axis=0)
        empty = np.zeros((1, self.cols), dtype=np.int8)
        self.grid = np.vstack((empty, remaining))

    def sweep(self) -> int:
        """
        Clear all full rows.

        Rows are scanned from the bottom up, row 0 included. When a full row
        is removed everything above it shifts down one, so the same index is
        checked again before moving up.

        Returns:
            Number of rows cleared
        """
        cleared = 0
        row = self.rows - 1
        while row >= 0:
            if self.is_row_full(row):
                self._remove_row(row)
                cleared += 1
            else:
                row -= 1
        return cleared

    def get_height_map(self) -> np.ndarray:
        """
        Get the "height" of each column (distance of the topmost filled cell
        from the floor).
        """
        heights = np.zeros(self.cols, dtype=np.int32)
        for col in range(self.cols):
            filled = np.nonzero(self.grid[:, col])[0]
            if filled.size:
                heights[col] = self.rows - int(filled[0])
        return heights

    def count_holes(self) -> int:
        """Count empty cells that have a filled cell somewhere above them."""
        holes = 0
        for col in range(self.cols):
            seen_block = False
            for cell in self.grid[:, col]:
                if cell != 0:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes

    def get_state(self) -> np.ndarray:
        """Get the board state as a numpy array."""
        return self.grid.copy()

    def set_state(self, state: np.ndarray) -> None:
        """Set the board state from a numpy array."""
        state = np.asarray(state)
        if state.shape != (self.rows, self.cols):
            raise ValueError(
                f"State shape {state.shape} does not match board {(self.rows, self.cols)}"
            )
        if not np.issubdtype(state.dtype, np.integer):
            raise ValueError(f"Board cells must be integers, got dtype {state.dtype}")
        if state.min() < 0 or state.max() > NUM_KINDS:
            raise ValueError(f"Board cells must be 0 (empty) or a kind id 1-{NUM_KINDS}")
        self.grid = state.astype(np.int8)

    def __str__(self) -> str:
        """Create a string visualization of the board."""
        lines = []
        for row in range(self.rows):
            lines.append("|" + "".join(
                str(self.grid[row, col]) if self.grid[row, col] else "·"
                for col in range(self.cols)
            ) + "|")
        lines.append("+" + "-" * self.cols + "+")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Board(cols={self.cols}, rows={self.rows}, blocks={self.total_blocks})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return False
        return np.array_equal(self.grid, other.grid)

    __hash__ = None
