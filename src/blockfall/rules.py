"""
Blockfall Scoring Rules.

Score, level and gravity speed all derive from the number of rows cleared:
- Clearing n rows at once scores n * line_score * n (10, 40, 90, 160)
- The level goes up by one every `lines_per_level` rows
- Each level shortens the drop interval by `interval_step_ms`, down to a floor
"""
from dataclasses import dataclass


@dataclass
class ScoringRules:
    """Constants for the scoring, level and drop-interval formulas."""
    line_score: int = 10
    lines_per_level: int = 10
    base_interval_ms: int = 1000
    interval_step_ms: int = 100
    min_interval_ms: int = 100

    def __post_init__(self) -> None:
        for name in ("line_score", "lines_per_level", "base_interval_ms", "min_interval_ms"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.interval_step_ms < 0:
            raise ValueError(f"interval_step_ms must be >= 0, got {self.interval_step_ms}")
        if self.min_interval_ms > self.base_interval_ms:
            raise ValueError("min_interval_ms cannot exceed base_interval_ms")

    def score_for_lines(self, lines: int) -> int:
        """
        Points for clearing `lines` rows with a single piece.

        Args:
            lines: Rows cleared by one landing

        Returns:
            Score delta (0 when nothing was cleared)
        """
        if lines <= 0:
            return 0
        return lines * self.line_score * lines

    def level_for_lines(self, total_lines: int) -> int:
        """Level reached after `total_lines` rows in total, starting at 1."""
        return total_lines // self.lines_per_level + 1

    def drop_interval_ms(self, level: int) -> int:
        """Milliseconds between forced drops at `level`."""
        return max(self.min_interval_ms, self.base_interval_ms - (level - 1) * self.interval_step_ms)
