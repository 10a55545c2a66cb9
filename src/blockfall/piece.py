"""
Active piece and progress counters.

The active piece is the falling piece under player control: a mutable clone of
a template plus the grid position of the matrix's top-left corner.
"""
from dataclasses import dataclass
from typing import Iterator, Tuple
import numpy as np

from .pieces import create_shape, KIND_NAMES


@dataclass
class ActivePiece:
    """The currently falling piece."""
    kind: int
    shape: np.ndarray
    col: int = 0
    row: int = 0

    @classmethod
    def spawn(cls, kind: int, cols: int) -> "ActivePiece":
        """Create a fresh piece horizontally centred on the top row."""
        shape = create_shape(kind)
        col = cols // 2 - shape.shape[1] // 2
        return cls(kind=kind, shape=shape, col=col, row=0)

    @property
    def name(self) -> str:
        return KIND_NAMES[self.kind]

    @property
    def width(self) -> int:
        """Width of the shape matrix (not of the occupied cells)."""
        return self.shape.shape[1]

    @property
    def height(self) -> int:
        return self.shape.shape[0]

    @property
    def num_blocks(self) -> int:
        return int(np.count_nonzero(self.shape))

    def cells(self) -> Iterator[Tuple[int, int, int]]:
        """
        Yield (row, col, value) in grid coordinates for every occupied cell.
        """
        for dr, dc in zip(*np.nonzero(self.shape)):
            yield self.row + int(dr), self.col + int(dc), int(self.shape[dr, dc])

    def copy(self) -> "ActivePiece":
        """Create a deep copy of this piece."""
        return ActivePiece(self.kind, self.shape.copy(), self.col, self.row)

    def __repr__(self) -> str:
        return f"ActivePiece({self.name}, col={self.col}, row={self.row})"


@dataclass
class Progress:
    """Score, level and line counters for one session."""
    score: int = 0
    level: int = 1
    lines: int = 0

    def reset(self) -> None:
        self.score = 0
        self.level = 1
        self.lines = 0
