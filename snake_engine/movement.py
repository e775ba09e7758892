"""Snake body, boundary policies and the two movement models.

Movement models never commit anything themselves. They report the raw cells
the head enters during a tick or frame; the session resolves each cell through
the boundary policy, runs collision detection and only then commits it with
``Snake.enter``. That keeps discrete and continuous play on the same collision
and food rules.
"""

import math

from .direction import RIGHT


def half_up(value):
    """Round to the nearest integer, halves going up."""
    return math.floor(value + 0.5)


def virtual_cell(position):
    """Return the grid cell a real-valued position currently occupies."""
    return (half_up(position[0]), half_up(position[1]))


def create_initial_snake(length, width, height):
    """Create a horizontal snake that fits the board and can move right safely."""
    if length < 1 or length > width:
        raise ValueError("start length does not fit within the grid width.")

    # Center the whole snake horizontally, with segments extending left from the head.
    tail_x = (width - length) // 2
    head_x = tail_x + length - 1
    head_y = height // 2
    return [(head_x - i, head_y) for i in range(length)]


class Snake:
    """Ordered grid cells, head first, plus the real-valued head position."""

    def __init__(self, body, direction=RIGHT, min_length=1):
        self.body = list(body)
        self.direction = direction
        self.min_length = min_length
        self.target_length = max(len(self.body), min_length)
        self.head_position = (float(self.body[0][0]), float(self.body[0][1]))

    @property
    def head(self):
        return self.body[0]

    def __len__(self):
        return len(self.body)

    def grow(self, segments):
        self.target_length += segments

    def peek_body(self, cell, growth=0):
        """Return the body as it would be after entering cell."""
        keep = max(self.target_length + growth, self.min_length) - 1
        return [cell] + self.body[:keep]

    def enter(self, cell):
        """Move the head into cell; the tail follows unless growth is pending."""
        self.body.insert(0, cell)
        while len(self.body) > max(self.target_length, self.min_length):
            self.body.pop()

    def snap_to_cell(self):
        self.head_position = (float(self.head[0]), float(self.head[1]))


class WrapBoundary:
    """Toroidal board: leaving one edge re-enters the opposite edge."""

    wraps = True

    def __init__(self, width, height):
        self.width = width
        self.height = height

    def resolve(self, cell):
        return (cell[0] % self.width, cell[1] % self.height)

    def resolve_position(self, position):
        return (position[0] % self.width, position[1] % self.height)

    def contains(self, cell):
        return 0 <= cell[0] < self.width and 0 <= cell[1] < self.height


class WallBoundary(WrapBoundary):
    """Hard walls: cells outside the board stay outside and end the game."""

    wraps = False

    def resolve(self, cell):
        return cell

    def resolve_position(self, position):
        return position


BOUNDARIES = {
    "wrap": WrapBoundary,
    "wall": WallBoundary,
}


class DiscreteMovement:
    """Classic grid stepping: one cell per tick."""

    continuous = False

    def __init__(self, max_frame_dt=None):
        self.max_frame_dt = max_frame_dt

    def advance(self, snake, direction, speed, dt=None):
        snake.direction = direction
        hx, hy = snake.head
        dx, dy = direction
        return [(hx + dx, hy + dy)], None


class ContinuousMovement:
    """Time-integrated motion, quantized to cells.

    The head travels ``speed`` cells per second. Each half-cell boundary it
    crosses yields the next cell, so a long frame still produces a chain of
    adjacent cells instead of a jump.
    """

    continuous = True

    def __init__(self, max_frame_dt):
        self.max_frame_dt = max_frame_dt

    def advance(self, snake, direction, speed, dt=None):
        if direction != snake.direction:
            snake.snap_to_cell()
            snake.direction = direction
        if dt is None:
            # A bare tick moves exactly one cell.
            dt = 1.0 / speed
        else:
            dt = min(max(dt, 0.0), self.max_frame_dt)

        dx, dy = direction
        x, y = snake.head_position
        step = speed * dt
        new_position = (x + dx * step, y + dy * step)

        # Wrapping keeps the fractional part, so the rounded difference is the
        # number of cells crossed in either boundary mode.
        start = virtual_cell((x, y))
        end = virtual_cell(new_position)
        crossed = abs(end[0] - start[0]) + abs(end[1] - start[1])
        hx, hy = snake.head
        cells = [(hx + dx * i, hy + dy * i) for i in range(1, crossed + 1)]
        return cells, new_position


MOVEMENTS = {
    "discrete": DiscreteMovement,
    "continuous": ContinuousMovement,
}
