"""
Logging utilities for game sessions.

`GameLogger` appends one JSON object per line for every event a session or
script reports. `MetricsTracker` collects per-game results of a finite run
(benchmarks, batches of bot games) and summarizes them.
"""
from typing import Dict, Any, Optional, List, Union, Iterable
from pathlib import Path
import json
import time
from datetime import datetime
from collections import defaultdict
import numpy as np


def _json_default(obj):
    """json.dumps hook for the numpy values sessions put in event data."""
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def summarize(values: Iterable[float]) -> Dict[str, float]:
    """Mean, spread, extremes and total of a series (all 0.0 when empty)."""
    arr = np.asarray(list(values), dtype=np.float64)
    if arr.size == 0:
        return {'mean': 0.0, 'std': 0.0, 'min': 0.0, 'max': 0.0, 'total': 0.0}
    return {
        'mean': float(arr.mean()),
        'std': float(arr.std()),
        'min': float(arr.min()),
        'max': float(arr.max()),
        'total': float(arr.sum()),
    }


class GameLogger:
    """
    JSONL event logger for game sessions.

    A `GameSession` given a logger reports `lock`, `reset` and `game_over`
    events. Scripts also use it to record per-game summaries.
    """

    def __init__(self, log_dir: Union[str, Path], name: str = "session"):
        """
        Initialize logger.

        Args:
            log_dir: Directory to save logs
            name: Name of the run
        """
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.name = name
        self.start_time = time.time()
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file = self.log_dir / f"{name}_{timestamp}.jsonl"

        # Numeric event fields, by field name
        self.history: Dict[str, List[float]] = defaultdict(list)
        self.step = 0

    def log(self, event: str, data: Optional[Dict[str, Any]] = None,
            step: Optional[int] = None) -> None:
        """
        Append one event record.

        Args:
            event: Event name ("lock", "reset", "game_over", ...)
            data: Event fields; numeric ones are also kept in `history`
            step: Explicit step number (otherwise the previous step + 1)
        """
        data = data or {}
        self.step = step if step is not None else self.step + 1

        record = {
            'step': self.step,
            'time': time.time() - self.start_time,
            'timestamp': datetime.now().isoformat(),
            'event': event,
        }
        record.update(data)

        for key, value in data.items():
            if isinstance(value, (int, float, np.number)) and not isinstance(value, (bool, np.bool_)):
                self.history[key].append(float(value))

        with open(self.log_file, 'a') as f:
            f.write(json.dumps(record, default=_json_default) + '\n')

    def read_events(self, event: Optional[str] = None) -> List[Dict[str, Any]]:
        """Read back the records written so far, optionally only one event type."""
        if not self.log_file.exists():
            return []
        with open(self.log_file) as f:
            records = [json.loads(line) for line in f if line.strip()]
        if event is not None:
            records = [r for r in records if r['event'] == event]
        return records

    def get_mean(self, field: str) -> float:
        """Mean of a numeric field over every event that carried it."""
        return summarize(self.history.get(field, []))['mean']

    def save_summary(self) -> Path:
        """Write `<name>_summary.json` next to the log and return its path."""
        summary = {
            'name': self.name,
            'total_steps': self.step,
            'total_time': time.time() - self.start_time,
            'fields': {key: summarize(values) for key, values in self.history.items()},
        }
        summary_file = self.log_dir / f"{self.name}_summary.json"
        with open(summary_file, 'w') as f:
            json.dump(summary, f, indent=2)
        return summary_file


class MetricsTracker:
    """
    Per-game results of a run.

    Only the keys named at construction are kept from each game's
    statistics; everything else in the dict is ignored.
    """

    def __init__(self, keys: Iterable[str] = ('score', 'lines', 'pieces_spawned')):
        self.keys = tuple(keys)
        self.values: Dict[str, List[float]] = {key: [] for key in self.keys}

    def __len__(self) -> int:
        return len(self.values[self.keys[0]]) if self.keys else 0

    def record(self, stats: Dict[str, Any]) -> None:
        """Add one finished game's statistics."""
        for key in self.keys:
            self.values[key].append(float(stats[key]))

    def summary(self, key: str) -> Dict[str, float]:
        return summarize(self.values[key])

    def summaries(self) -> Dict[str, Dict[str, float]]:
        return {key: self.summary(key) for key in self.keys}
