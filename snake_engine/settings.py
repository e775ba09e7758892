import json
import logging
from dataclasses import dataclass, field, fields, replace

logger = logging.getLogger(__name__)

# Grid configuration
GRID_WIDTH = 28
GRID_HEIGHT = 28
START_LENGTH = 5
MIN_LENGTH = 3

DIFFICULTIES = {
    "easy": {"name": "Easy", "speed": 6, "obstacles": 2},
    "medium": {"name": "Medium", "speed": 10, "obstacles": 4},
    "hard": {"name": "Hard", "speed": 16, "obstacles": 6},
}
DEFAULT_DIFFICULTY = "medium"

FOOD_TYPES = (
    {"name": "apple", "color": (255, 77, 77), "points": 1, "weight": 50},
    {"name": "lime", "color": (76, 175, 80), "points": 3, "weight": 25},
    {"name": "berry", "color": (33, 150, 243), "points": 5, "weight": 15},
    {"name": "gold", "color": (240, 173, 78), "points": 10, "weight": 10},
)

MOVEMENT_MODES = ("discrete", "continuous")
BOUNDARY_MODES = ("wrap", "wall")

# Tuning
COUNTDOWN_SECONDS = 3
NECK_WINDOW = 3
GROWTH_DIVISOR = 10
OBSTACLE_PROBABILITY = 0.08
OBSTACLE_CAP = 12
OBSTACLE_CLEARANCE = 2
SPAWN_ATTEMPTS = 500
OBSTACLE_SPAWN_ATTEMPTS = 1000
MAX_FRAME_DT = 0.1


@dataclass(frozen=True)
class GameConfig:
    """Everything a session reads at start or on a difficulty change."""

    width: int = GRID_WIDTH
    height: int = GRID_HEIGHT
    start_length: int = START_LENGTH
    min_length: int = MIN_LENGTH
    movement: str = "discrete"
    boundary: str = "wrap"
    difficulty: str = DEFAULT_DIFFICULTY
    obstacles_enabled: bool = True
    food_types: tuple = field(default=FOOD_TYPES)
    countdown_seconds: float = COUNTDOWN_SECONDS
    neck_window: int = NECK_WINDOW
    growth_divisor: int = GROWTH_DIVISOR
    obstacle_probability: float = OBSTACLE_PROBABILITY
    obstacle_cap: int = OBSTACLE_CAP
    obstacle_clearance: int = OBSTACLE_CLEARANCE
    spawn_attempts: int = SPAWN_ATTEMPTS
    obstacle_spawn_attempts: int = OBSTACLE_SPAWN_ATTEMPTS
    max_frame_dt: float = MAX_FRAME_DT
    seed: object = None

    @property
    def level(self):
        return DIFFICULTIES[self.difficulty]

    @property
    def speed(self):
        return self.level["speed"]

    @property
    def obstacle_count(self):
        return self.level["obstacles"] if self.obstacles_enabled else 0

    def with_difficulty(self, difficulty):
        """Return a copy using another difficulty, keeping the old one if unknown."""
        if difficulty not in DIFFICULTIES:
            logger.warning("Unknown difficulty %r, keeping %r", difficulty, self.difficulty)
            return self
        return replace(self, difficulty=difficulty)


def _positive_int(value):
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _non_negative_int(value):
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _probability(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool) and 0.0 <= value <= 1.0


def _positive_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def _seed(value):
    return value is None or (isinstance(value, int) and not isinstance(value, bool))


VALIDATORS = {
    "width": _positive_int,
    "height": _positive_int,
    "start_length": _positive_int,
    "min_length": _positive_int,
    "movement": lambda v: v in MOVEMENT_MODES,
    "boundary": lambda v: v in BOUNDARY_MODES,
    "difficulty": lambda v: v in DIFFICULTIES,
    "obstacles_enabled": lambda v: isinstance(v, bool),
    "countdown_seconds": lambda v: _non_negative_int(v) or _positive_number(v),
    "neck_window": _non_negative_int,
    "growth_divisor": _positive_int,
    "obstacle_probability": _probability,
    "obstacle_cap": _non_negative_int,
    "obstacle_clearance": _non_negative_int,
    "spawn_attempts": _positive_int,
    "obstacle_spawn_attempts": _positive_int,
    "max_frame_dt": _positive_number,
    "seed": _seed,
}


def normalize_food_types(food_types):
    """Validate a food table, falling back to FOOD_TYPES when unusable.

    Each entry needs positive integer points. Colors default to white and names
    to "food". A missing or negative weight becomes 1; if every weight ends up
    zero all entries are weighted equally.
    """
    if not isinstance(food_types, (list, tuple)) or not food_types:
        logger.warning("Food type table is empty or not a list, using defaults")
        return FOOD_TYPES

    table = []
    for entry in food_types:
        if not isinstance(entry, dict) or not _positive_int(entry.get("points")):
            logger.warning("Invalid food type %r, using default table", entry)
            return FOOD_TYPES
        weight = entry.get("weight", 1)
        if not isinstance(weight, (int, float)) or isinstance(weight, bool) or weight < 0:
            logger.warning("Invalid weight %r for food type %r, using 1", weight, entry)
            weight = 1
        color = entry.get("color", (255, 255, 255))
        table.append(
            {
                "name": str(entry.get("name", "food")),
                "color": tuple(color) if isinstance(color, (list, tuple)) else color,
                "points": entry["points"],
                "weight": weight,
            }
        )

    if all(t["weight"] == 0 for t in table):
        logger.warning("All food weights are zero, selecting food types uniformly")
        table = [dict(t, weight=1) for t in table]
    return tuple(table)


def load_config(overrides=None):
    """Build a GameConfig from a mapping, keeping defaults for bad values."""
    config = GameConfig()
    if not overrides:
        return config
    if not isinstance(overrides, dict):
        logger.warning("Configuration must be a mapping, got %r; using defaults", overrides)
        return config

    known = {f.name for f in fields(GameConfig)}
    values = {}
    for key, value in overrides.items():
        if key not in known:
            logger.warning("Ignoring unknown configuration key %r", key)
            continue
        if key == "food_types":
            values[key] = normalize_food_types(value)
            continue
        if not VALIDATORS[key](value):
            logger.warning(
                "Invalid value %r for %r, using default %r", value, key, getattr(config, key)
            )
            continue
        values[key] = value

    config = replace(config, **values)
    if config.min_length > config.start_length:
        logger.warning(
            "min_length %d exceeds start_length %d, clamping",
            config.min_length,
            config.start_length,
        )
        config = replace(config, min_length=config.start_length)
    return config


def load_config_file(path):
    """Read JSON overrides from path; an unreadable file yields the defaults."""
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError) as exc:
        logger.warning("Could not read config file %s: %s", path, exc)
        return GameConfig()
    return load_config(data)
