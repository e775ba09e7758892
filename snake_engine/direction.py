"""Directions and the one-slot input buffer consumed once per tick."""

import logging

logger = logging.getLogger(__name__)

UP = (0, -1)
DOWN = (0, 1)
LEFT = (-1, 0)
RIGHT = (1, 0)
DIRECTIONS = (UP, DOWN, LEFT, RIGHT)


def opposite(direction):
    """Return the exact reverse of a direction vector."""
    return (-direction[0], -direction[1])


def direction_to_text(direction):
    """Convert a direction vector into a compact label for logs and debug UI."""
    mapping = {
        None: "none",
        UP: "up",
        DOWN: "down",
        LEFT: "left",
        RIGHT: "right",
    }
    return mapping.get(direction, "unknown")


class DirectionBuffer:
    """Holds at most one pending direction between two ticks.

    The first valid proposal of a tick wins. Validation is against the direction
    applied by the last tick, so the pending value can never be its reverse.
    """

    def __init__(self, current=RIGHT):
        self.current = current
        self.pending = None

    def propose(self, direction):
        if direction not in DIRECTIONS:
            logger.debug("Ignoring unknown direction %r", direction)
            return False
        if self.pending is not None:
            return False
        # Repeating the current heading must leave the slot free for a turn.
        if direction == self.current:
            return False
        if direction == opposite(self.current):
            logger.debug("Rejected reverse input %s", direction_to_text(direction))
            return False
        self.pending = direction
        return True

    def consume(self):
        """Apply the pending direction, or keep the current one."""
        if self.pending is not None:
            self.current = self.pending
            self.pending = None
        return self.current

    def clear(self):
        self.pending = None
