"""Snake simulation engine with a pygame front end in snake.py."""

from .direction import DOWN, LEFT, RIGHT, UP
from .engine import GameSession, GameState, Snapshot
from .settings import GameConfig, load_config, load_config_file
from .spawner import Food
from .storage import ScoreStore

__all__ = [
    "DOWN",
    "LEFT",
    "RIGHT",
    "UP",
    "Food",
    "GameConfig",
    "GameSession",
    "GameState",
    "ScoreStore",
    "Snapshot",
    "load_config",
    "load_config_file",
]
