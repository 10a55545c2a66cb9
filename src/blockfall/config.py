"""
Session configuration.

Configuration can be built in code or loaded from a YAML file shaped like
``config/default.yaml``::

    board:
      cols: 10
      rows: 20
    seed: null
    scoring:
      line_score: 10
      lines_per_level: 10
      base_interval_ms: 1000
      interval_step_ms: 100
      min_interval_ms: 100
"""
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union
import yaml

from .pieces import MIN_COLS
from .rules import ScoringRules


@dataclass
class GameConfig:
    """Board size, RNG seed and scoring constants for a session."""
    cols: int = 10
    rows: int = 20
    seed: Optional[int] = None
    rules: ScoringRules = field(default_factory=ScoringRules)

    def __post_init__(self):
        if self.rows <= 0:
            raise ValueError(f"Board rows must be positive, got {self.rows}")
        if self.cols < MIN_COLS:
            raise ValueError(f"Board must be at least {MIN_COLS} columns wide, got {self.cols}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the nested dictionary layout used in YAML files."""
        return {
            "board": {"cols": self.cols, "rows": self.rows},
            "seed": self.seed,
            "scoring": asdict(self.rules),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "GameConfig":
        """
        Create from a nested dictionary. Missing sections keep their defaults.

        Raises:
            ValueError: on unknown sections or keys
        """
        data = data or {}
        unknown = set(data) - {"board", "seed", "scoring"}
        if unknown:
            raise ValueError(f"Unknown config sections: {sorted(unknown)}")

        board = data.get("board") or {}
        unknown = set(board) - {"cols", "rows"}
        if unknown:
            raise ValueError(f"Unknown board keys: {sorted(unknown)}")

        scoring = data.get("scoring") or {}
        valid = {f.name for f in fields(ScoringRules)}
        unknown = set(scoring) - valid
        if unknown:
            raise ValueError(f"Unknown scoring keys: {sorted(unknown)}")

        return cls(
            cols=int(board.get("cols", cls.cols)),
            rows=int(board.get("rows", cls.rows)),
            seed=data.get("seed"),
            rules=ScoringRules(**scoring),
        )


def load_config(config_path: Union[str, Path]) -> GameConfig:
    """Load configuration from YAML file."""
    with open(config_path, 'r') as f:
        return GameConfig.from_dict(yaml.safe_load(f))


def save_config(config: GameConfig, config_path: Union[str, Path]) -> None:
    """Write configuration to a YAML file."""
    with open(config_path, 'w') as f:
        yaml.safe_dump(config.to_dict(), f, sort_keys=False)
