"""
Blockfall Shape Catalog.

This module defines the seven piece templates.
Each template is a small square matrix whose nonzero cells hold the piece's
kind id (1-7). Templates are read-only; anything that needs to rotate or
otherwise change a shape must work on a clone from `create_shape`.
"""
from typing import Dict, List, Optional
import numpy as np


def _make_template(rows: List[List[int]]) -> np.ndarray:
    """Helper to create a read-only template array."""
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


# =============================================================================
# TEMPLATES (kind id == value stored in the occupied cells)
# =============================================================================

T = _make_template([
    [0, 1, 0],
    [1, 1, 1],
    [0, 0, 0],
])

O = _make_template([
    [2, 2],
    [2, 2],
])

S = _make_template([
    [0, 3, 3],
    [3, 3, 0],
    [0, 0, 0],
])

Z = _make_template([
    [4, 4, 0],
    [0, 4, 4],
    [0, 0, 0],
])

L = _make_template([
    [0, 0, 5],
    [5, 5, 5],
    [0, 0, 0],
])

J = _make_template([
    [6, 0, 0],
    [6, 6, 6],
    [0, 0, 0],
])

I = _make_template([
    [0, 0, 0, 0],
    [7, 7, 7, 7],
    [0, 0, 0, 0],
    [0, 0, 0, 0],
])


# Kind id -> template
TEMPLATES: Dict[int, np.ndarray] = {
    1: T,
    2: O,
    3: S,
    4: Z,
    5: L,
    6: J,
    7: I,
}

KIND_NAMES: Dict[int, str] = {
    1: "T",
    2: "O",
    3: "S",
    4: "Z",
    5: "L",
    6: "J",
    7: "I",
}

KIND_IDS: List[int] = list(TEMPLATES.keys())
NUM_KINDS: int = len(TEMPLATES)

assert NUM_KINDS == 7, f"Expected 7 kinds, got {NUM_KINDS}"

# Narrowest board every kind can spawn on
MIN_COLS: int = max(t.shape[1] for t in TEMPLATES.values())


def template(kind_id: int) -> np.ndarray:
    """Get the read-only template for a kind id."""
    if kind_id not in TEMPLATES:
        raise ValueError(f"Unknown kind id: {kind_id}. Valid ids: {KIND_IDS}")
    return TEMPLATES[kind_id]


def create_shape(kind_id: int) -> np.ndarray:
    """Return a writable deep copy of a kind's template."""
    return np.array(template(kind_id), dtype=np.int8, copy=True)


def kind_by_name(name: str) -> int:
    """Get a kind id by its letter name (case-insensitive)."""
    for kind_id, kind_name in KIND_NAMES.items():
        if kind_name == name.upper():
            return kind_id
    raise ValueError(f"Unknown piece: {name}. Valid pieces: {list(KIND_NAMES.values())}")


def random_kind(rng: Optional[np.random.Generator] = None) -> int:
    """Pick a kind id uniformly at random."""
    if rng is None:
        rng = np.random.default_rng()
    return KIND_IDS[int(rng.integers(NUM_KINDS))]


def cell_count(kind_id: int) -> int:
    """Number of occupied cells in a kind's template."""
    return int(np.count_nonzero(template(kind_id)))


def visualize_shape(shape: np.ndarray) -> str:
    """Create a string visualization of a shape matrix."""
    lines = []
    for row in shape:
        line = "".join("□" if cell else " " for cell in row)
        lines.append(line.rstrip())
    return "\n".join(lines)


if __name__ == "__main__":
    for kind_id in KIND_IDS:
        print(f"\n{KIND_NAMES[kind_id]} (id {kind_id}, {cell_count(kind_id)} cells):")
        print(visualize_shape(template(kind_id)))
