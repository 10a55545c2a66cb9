"""
Blockfall Game Engine.

This module implements the session controller:
- Spawning pieces (uniform random kind, centred on the top row)
- Gravity driven by an external tick(elapsed_ms) call
- Player commands (move, rotate, soft drop, pause)
- Landing: merge, sweep, scoring and level/speed progression
- Game over detection and reset

The engine never schedules itself and knows nothing about input devices or
drawing; a driver calls `tick` once per frame and forwards player commands.
"""
from dataclasses import dataclass
from typing import Optional, Dict, Any, Union
from enum import Enum
import numpy as np

from .board import Board
from .config import GameConfig
from .logger import GameLogger
from .piece import ActivePiece, Progress
from .pieces import random_kind, template
from .physics import (
    Rotation, DropResult, as_rotation, collides, move, soft_drop, rotate, landing_row,
    rotate_matrix,
)


class SessionStatus(Enum):
    """Session state machine states."""
    SPAWNING = "spawning"
    FALLING = "falling"
    LANDING = "landing"
    GAME_OVER = "game_over"


@dataclass
class LockResult:
    """Result of a piece landing."""
    kind: int
    cells_merged: int
    lines_cleared: int
    score_gained: int
    level: int
    game_over: bool


@dataclass
class GameState:
    """Complete session snapshot for serialization."""
    board: np.ndarray
    piece_kind: int
    piece_shape: np.ndarray
    piece_col: int
    piece_row: int
    score: int
    level: int
    lines: int
    drop_interval: int
    drop_counter: float
    paused: bool
    status: SessionStatus

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "board": self.board.tolist(),
            "piece_kind": self.piece_kind,
            "piece_shape": self.piece_shape.tolist(),
            "piece_col": self.piece_col,
            "piece_row": self.piece_row,
            "score": self.score,
            "level": self.level,
            "lines": self.lines,
            "drop_interval": self.drop_interval,
            "drop_counter": self.drop_counter,
            "paused": self.paused,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameState":
        """Create from dictionary."""
        return cls(
            board=np.array(data["board"], dtype=np.int8),
            piece_kind=data["piece_kind"],
            piece_shape=np.array(data["piece_shape"], dtype=np.int8),
            piece_col=data["piece_col"],
            piece_row=data["piece_row"],
            score=data["score"],
            level=data["level"],
            lines=data["lines"],
            drop_interval=data["drop_interval"],
            drop_counter=data["drop_counter"],
            paused=data["paused"],
            status=SessionStatus(data["status"]),
        )


def _checked_shape(kind: int, shape) -> np.ndarray:
    """Return `shape` as a piece matrix if it is a rotation of `kind`'s template."""
    orientation = template(kind)
    shape = np.asarray(shape)
    for _ in range(4):
        if shape.shape == orientation.shape and np.array_equal(shape, orientation):
            return shape.astype(np.int8)
        orientation = rotate_matrix(orientation, Rotation.CLOCKWISE)
    raise ValueError(f"Piece shape is not an orientation of kind {kind}:\n{shape}")


class GameSession:
    """
    One game of Blockfall.

    Owns the board, the active piece, the score counters and the gravity
    timer. Read the public attributes to draw; call the command methods to
    play.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        logger: Optional[GameLogger] = None,
    ):
        """
        Initialize a new session and spawn the first piece.

        Args:
            config: Board size and scoring constants (defaults to 10x20)
            seed: Random seed for reproducibility (overrides config.seed)
            logger: Optional event logger
        """
        self.config = config or GameConfig()
        self.rules = self.config.rules
        self.logger = logger
        self.rng = np.random.default_rng(seed if seed is not None else self.config.seed)

        self.board = Board(self.config.cols, self.config.rows)
        self.piece: Optional[ActivePiece] = None
        self.progress = Progress()
        self.drop_interval = self.rules.base_interval_ms
        self.drop_counter = 0.0
        self.paused = False
        self.status = SessionStatus.SPAWNING
        self.last_lock: Optional[LockResult] = None

        # Statistics
        self.pieces_spawned = 0
        self.cells_merged = 0
        self.cells_cleared = 0

        self._spawn()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def grid(self) -> np.ndarray:
        return self.board.grid

    @property
    def score(self) -> int:
        return self.progress.score

    @property
    def level(self) -> int:
        return self.progress.level

    @property
    def lines(self) -> int:
        return self.progress.lines

    @property
    def game_over(self) -> bool:
        return self.status == SessionStatus.GAME_OVER

    def is_game_over(self) -> bool:
        """Check if the game is over."""
        return self.game_over

    def can_control(self) -> bool:
        """Player commands are only accepted while a piece is falling and the game runs."""
        return self.status == SessionStatus.FALLING and not self.paused

    def ghost_row(self) -> int:
        """Row where the active piece would land if dropped now."""
        return landing_row(self.piece, self.board)

    def get_display_grid(self) -> np.ndarray:
        """Board cells with the active piece drawn over them."""
        display = self.board.get_state()
        if self.piece is not None:
            for row, col, value in self.piece.cells():
                if self.board.in_bounds(row, col):
                    display[row, col] = value
        return display

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def _spawn(self) -> None:
        """Bring in a new piece; a blocked spawn ends the game."""
        self.status = SessionStatus.SPAWNING
        kind = random_kind(self.rng)
        self.piece = ActivePiece.spawn(kind, self.board.cols)
        self.pieces_spawned += 1

        if collides(self.board, self.piece):
            self.status = SessionStatus.GAME_OVER
            self._log("game_over", self.get_statistics())
        else:
            self.status = SessionStatus.FALLING

    def _land(self) -> LockResult:
        """Merge the landed piece, clear rows, score, and spawn the next piece."""
        self.status = SessionStatus.LANDING
        piece = self.piece

        merged = self.board.merge(piece)
        cleared = self.board.sweep()
        self.cells_merged += merged
        self.cells_cleared += cleared * self.board.cols

        score_gained = self.rules.score_for_lines(cleared)
        if cleared > 0:
            self.progress.score += score_gained
            self.progress.lines += cleared
            self.progress.level = self.rules.level_for_lines(self.progress.lines)
            self.drop_interval = self.rules.drop_interval_ms(self.progress.level)

        self._log("lock", {
            "kind": piece.kind,
            "col": piece.col,
            "row": piece.row,
            "lines_cleared": cleared,
            "score": self.progress.score,
            "level": self.progress.level,
        })

        self._spawn()

        result = LockResult(
            kind=piece.kind,
            cells_merged=merged,
            lines_cleared=cleared,
            score_gained=score_gained,
            level=self.progress.level,
            game_over=self.game_over,
        )
        self.last_lock = result
        return result

    def _drop_step(self) -> DropResult:
        result = soft_drop(self.piece, self.board)
        if result is DropResult.LANDED:
            self._land()
        self.drop_counter = 0.0
        return result

    def _log(self, event: str, data: Dict[str, Any]) -> None:
        if self.logger is not None:
            self.logger.log(event, data)

    # ------------------------------------------------------------------
    # Driver and player entry points
    # ------------------------------------------------------------------

    def tick(self, elapsed_ms: float) -> bool:
        """
        Advance the gravity timer.

        Time passed while paused or after game over is discarded, so resuming
        never causes an immediate drop.

        Args:
            elapsed_ms: Milliseconds since the previous tick

        Returns:
            True if a forced drop step happened on this tick
        """
        if elapsed_ms < 0:
            raise ValueError(f"elapsed_ms must be >= 0, got {elapsed_ms}")
        if not self.can_control():
            return False

        self.drop_counter += elapsed_ms
        if self.drop_counter > self.drop_interval:
            self._drop_step()
            return True
        return False

    def move_left(self) -> bool:
        if not self.can_control():
            return False
        return move(self.piece, self.board, -1)

    def move_right(self) -> bool:
        if not self.can_control():
            return False
        return move(self.piece, self.board, 1)

    def soft_drop_once(self) -> Optional[DropResult]:
        """
        Move the piece down one row, landing it if it cannot descend.

        Resets the gravity timer.

        Returns:
            The drop result, or None if the command was ignored
        """
        if not self.can_control():
            return None
        return self._drop_step()

    def rotate(self, direction: Union[Rotation, int] = Rotation.CLOCKWISE) -> bool:
        """
        Rotate the active piece.

        Raises:
            ValueError: for an unknown direction, even while paused
        """
        direction = as_rotation(direction)
        if not self.can_control():
            return False
        return rotate(self.piece, self.board, direction)

    def rotate_cw(self) -> bool:
        return self.rotate(Rotation.CLOCKWISE)

    def rotate_ccw(self) -> bool:
        return self.rotate(Rotation.COUNTER_CLOCKWISE)

    def toggle_pause(self) -> bool:
        """
        Pause or resume. Ignored once the game is over.

        Returns:
            The new pause flag
        """
        if self.game_over:
            return self.paused
        self.paused = not self.paused
        return self.paused

    def reset(self, seed: Optional[int] = None) -> GameState:
        """
        Start a new game.

        Args:
            seed: New random seed (optional)

        Returns:
            Initial game state
        """
        if seed is not None:
            self.rng = np.random.default_rng(seed)

        self.board = Board(self.config.cols, self.config.rows)
        self.progress.reset()
        self.drop_interval = self.rules.base_interval_ms
        self.drop_counter = 0.0
        self.paused = False
        self.last_lock = None
        self.pieces_spawned = 0
        self.cells_merged = 0
        self.cells_cleared = 0
        self._log("reset", {"seed": seed})

        self._spawn()
        return self.get_state()

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def get_state(self) -> GameState:
        """Get the current game state."""
        return GameState(
            board=self.board.get_state(),
            piece_kind=self.piece.kind,
            piece_shape=self.piece.shape.copy(),
            piece_col=self.piece.col,
            piece_row=self.piece.row,
            score=self.progress.score,
            level=self.progress.level,
            lines=self.progress.lines,
            drop_interval=self.drop_interval,
            drop_counter=self.drop_counter,
            paused=self.paused,
            status=self.status,
        )

    def set_state(self, state: GameState) -> None:
        """
        Restore the session from a saved state.

        Raises:
            ValueError: if the board holds invalid cells, the piece kind is
                unknown, or the piece shape is not a rotation of its template
        """
        shape = _checked_shape(state.piece_kind, state.piece_shape)
        self.board.set_state(state.board)
        self.piece = ActivePiece(
            kind=state.piece_kind,
            shape=shape,
            col=state.piece_col,
            row=state.piece_row,
        )
        self.progress.score = state.score
        self.progress.level = state.level
        self.progress.lines = state.lines
        self.drop_interval = state.drop_interval
        self.drop_counter = state.drop_counter
        self.paused = state.paused
        self.status = state.status

    def get_statistics(self) -> Dict[str, Any]:
        """Get game statistics."""
        return {
            'score': self.progress.score,
            'level': self.progress.level,
            'lines': self.progress.lines,
            'pieces_spawned': self.pieces_spawned,
            'cells_merged': self.cells_merged,
            'cells_cleared': self.cells_cleared,
            'board_fill_ratio': self.board.total_blocks / (self.board.cols * self.board.rows),
            'holes': self.board.count_holes(),
            'max_height': int(self.board.get_height_map().max()),
        }

    def __str__(self) -> str:
        """String representation of the game state."""
        display = self.get_display_grid()
        lines = []
        for row in display:
            lines.append("|" + "".join(str(v) if v else "·" for v in row) + "|")
        lines.append("+" + "-" * self.board.cols + "+")
        lines.append(f"Score: {self.score} | Level: {self.level} | Lines: {self.lines} | "
                     f"Status: {self.status.value}{' (paused)' if self.paused else ''}")
        return "\n".join(lines)


def play_random_game(
    seed: Optional[int] = None,
    config: Optional[GameConfig] = None,
    frame_ms: float = 50.0,
    max_ticks: int = 100_000,
    verbose: bool = False,
) -> Dict[str, Any]:
    """
    Play a complete game with random commands for testing.

    Each frame the bot issues one random command (or nothing) and then ticks
    the session.

    Args:
        seed: Random seed
        config: Session configuration
        frame_ms: Simulated time per frame
        max_ticks: Safety cap on the number of frames
        verbose: Whether to print line clears and the final board

    Returns:
        Dictionary with game statistics
    """
    session = GameSession(config=config, seed=seed)
    commands = [
        session.move_left,
        session.move_right,
        session.rotate_cw,
        session.soft_drop_once,
        None,
    ]

    ticks = 0
    while not session.is_game_over() and ticks < max_ticks:
        lines_before = session.lines
        command = commands[int(session.rng.integers(len(commands)))]
        if command is not None:
            command()
        session.tick(frame_ms)
        ticks += 1

        if verbose and session.lines > lines_before:
            lock = session.last_lock
            print(f"Cleared {lock.lines_cleared} lines! +{lock.score_gained} points")

    stats = session.get_statistics()
    stats['ticks'] = ticks

    if verbose:
        print("\n" + "=" * 40)
        print("GAME OVER!" if session.is_game_over() else "Tick limit reached")
        print(session)

    return stats
