"""Blockfall: a falling-block puzzle engine."""
from .pieces import TEMPLATES, KIND_NAMES, template, create_shape, kind_by_name
from .board import Board
from .piece import ActivePiece, Progress
from .physics import Rotation, DropResult, collides, move, soft_drop, rotate
from .rules import ScoringRules
from .config import GameConfig, load_config
from .engine import GameSession, GameState, SessionStatus, LockResult

__all__ = [
    "TEMPLATES",
    "KIND_NAMES",
    "template",
    "create_shape",
    "kind_by_name",
    "Board",
    "ActivePiece",
    "Progress",
    "Rotation",
    "DropResult",
    "collides",
    "move",
    "soft_drop",
    "rotate",
    "ScoringRules",
    "GameConfig",
    "load_config",
    "GameSession",
    "GameState",
    "SessionStatus",
    "LockResult",
]
