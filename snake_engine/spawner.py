import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Food:
    position: tuple
    points: int
    color: tuple = (255, 83, 95)
    name: str = "food"


class Spawner:
    """Places food and obstacles on empty cells with bounded retries."""

    def __init__(self, config, rng):
        self.width = config.width
        self.height = config.height
        self.food_types = config.food_types
        self.spawn_attempts = config.spawn_attempts
        self.obstacle_spawn_attempts = config.obstacle_spawn_attempts
        self.rng = rng

    def random_free_cell(self, occupied, attempts):
        """Return a random cell not in occupied, or None after attempts misses."""
        for _ in range(attempts):
            cell = (self.rng.randrange(self.width), self.rng.randrange(self.height))
            if cell not in occupied:
                return cell
        return None

    def choose_food_type(self):
        weights = [t.get("weight", 1) for t in self.food_types]
        if sum(weights) <= 0:
            return self.rng.choice(self.food_types)
        return self.rng.choices(self.food_types, weights=weights, k=1)[0]

    def spawn_food(self, snake, obstacles):
        """Pick a weighted food type and place it; None if no free cell was found."""
        food_type = self.choose_food_type()
        cell = self.random_free_cell(set(snake) | set(obstacles), self.spawn_attempts)
        if cell is None:
            logger.debug("No free cell for food after %d attempts", self.spawn_attempts)
            return None
        return Food(cell, food_type["points"], food_type["color"], food_type["name"])

    def spawn_obstacles(self, count, occupied, obstacles):
        """Append up to count obstacles to obstacles, avoiding occupied cells."""
        blocked = set(occupied) | set(obstacles)
        added = 0
        tries = 0
        while added < count and tries < self.obstacle_spawn_attempts:
            tries += 1
            cell = self.random_free_cell(blocked, 1)
            if cell is None:
                continue
            obstacles.append(cell)
            blocked.add(cell)
            added += 1
        if added < count:
            logger.debug("Placed %d of %d obstacles", added, count)
        return added

    def maybe_add_obstacle(self, probability, occupied, obstacles, cap):
        """Add at most one obstacle with the given probability.

        When the list grows past cap the oldest obstacles are dropped.
        """
        if self.rng.random() >= probability:
            return None
        cell = self.random_free_cell(set(occupied) | set(obstacles), self.spawn_attempts)
        if cell is None:
            logger.debug("No free cell for a new obstacle")
            return None
        obstacles.append(cell)
        trim_obstacles(obstacles, cap)
        return cell


def trim_obstacles(obstacles, cap):
    """Drop the oldest obstacles until at most cap remain."""
    excess = len(obstacles) - cap
    if excess > 0:
        del obstacles[:excess]
    return max(excess, 0)
