"""
Blockfall Renderer.

Provides terminal visualization for a game session. Colours are owned here,
keyed by kind id; the engine only ever produces kind ids.
"""
from typing import Dict, List, Tuple
import os
import numpy as np

from .pieces import KIND_NAMES


# Kind id -> display colour
COLORS: Dict[int, str] = {
    1: "#ff0d72",  # T
    2: "#0dc2ff",  # O
    3: "#0dff72",  # S
    4: "#f538ff",  # Z
    5: "#ff8e0d",  # L
    6: "#ffe138",  # J
    7: "#3877ff",  # I
}


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    """Convert '#rrggbb' to an (r, g, b) tuple."""
    color = color.lstrip("#")
    if len(color) != 6:
        raise ValueError(f"Expected a #rrggbb colour, got {color!r}")
    return tuple(int(color[i:i + 2], 16) for i in (0, 2, 4))


class Renderer:
    """
    Text renderer for Blockfall.

    Cells are drawn two characters wide so the board looks roughly square in
    a terminal. With `use_color` the cells are painted with 24-bit ANSI
    colours from COLORS.
    """

    EMPTY = " ·"
    FILLED = "██"
    GHOST = "░░"

    def __init__(self, use_color: bool = False):
        self.use_color = use_color

    def cell(self, value: int) -> str:
        """Two-character text for one cell value (0 empty, negative ghost)."""
        if value == 0:
            return self.EMPTY
        if value < 0:
            return self.GHOST
        if self.use_color:
            r, g, b = hex_to_rgb(COLORS[value])
            return f"\x1b[38;2;{r};{g};{b}m{self.FILLED}\x1b[0m"
        return self.FILLED

    def render_grid(self, grid: np.ndarray) -> str:
        """
        Render a cell matrix.

        Args:
            grid: (rows, cols) array; 0 empty, 1-7 kind ids, negative = ghost

        Returns:
            String representation with side walls and a floor
        """
        cols = grid.shape[1]
        lines = []
        for row in grid:
            lines.append("|" + "".join(self.cell(int(v)) for v in row) + "|")
        lines.append("+" + "--" * cols + "+")
        return "\n".join(lines)

    def render_shape(self, shape: np.ndarray) -> str:
        lines = []
        for row in shape:
            lines.append("".join(self.cell(int(v)) if v else "  " for v in row).rstrip())
        return "\n".join(lines)

    def render_session(self, session, show_ghost: bool = True) -> str:
        """
        Render the board, the falling piece, its landing shadow and the counters.

        Args:
            session: A GameSession
            show_ghost: Whether to mark where the piece would land

        Returns:
            Complete game state visualization
        """
        display = session.board.get_state().astype(np.int16)

        if show_ghost and not session.game_over:
            ghost = session.piece.copy()
            ghost.row = session.ghost_row()
            for row, col, _ in ghost.cells():
                if session.board.in_bounds(row, col) and display[row, col] == 0:
                    display[row, col] = -1

        for row, col, value in session.piece.cells():
            if session.board.in_bounds(row, col):
                display[row, col] = value

        lines = []
        header = f"Score: {session.score:,}  |  Level: {session.level}  |  Lines: {session.lines}"
        lines.append("=" * len(header))
        lines.append(header)
        lines.append("=" * len(header))
        lines.append(self.render_grid(display))
        lines.append(f"Piece: {KIND_NAMES[session.piece.kind]}")
        if session.paused:
            lines.append("PAUSED")
        if session.game_over:
            lines.append("GAME OVER")
        return "\n".join(lines)


def legend(use_color: bool = False) -> List[str]:
    """One line per kind: name, id and colour."""
    renderer = Renderer(use_color=use_color)
    return [
        f"{renderer.cell(kind_id)} {name} ({kind_id}) {COLORS[kind_id]}"
        for kind_id, name in KIND_NAMES.items()
    ]


def clear_screen():
    """Clear the terminal screen."""
    os.system('cls' if os.name == 'nt' else 'clear')
