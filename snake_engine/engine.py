"""Game session: state machine, the atomic tick, and per-tick snapshots.

The session is the single writer. A driver feeds it time through ``update``
(or steps it directly with ``tick``) and input through ``propose``; anything
else only reads the immutable ``Snapshot`` built at the end of each step.
"""

import logging
import math
import random
from dataclasses import dataclass
from enum import Enum

from .collision import detect_collision
from .direction import RIGHT, DirectionBuffer, direction_to_text
from .events import FOOD_EATEN, GAME_OVER, HIGH_SCORE_UPDATED, STATE_CHANGED, EventHub
from .movement import BOUNDARIES, MOVEMENTS, Snake, create_initial_snake
from .scoring import ScoreTracker, growth_for
from .settings import GameConfig
from .spawner import Spawner, trim_obstacles

logger = logging.getLogger(__name__)


class GameState(Enum):
    IDLE = "idle"
    COUNTDOWN = "countdown"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


TRANSITIONS = {
    (GameState.IDLE, "start"): GameState.COUNTDOWN,
    (GameState.COUNTDOWN, "countdown_done"): GameState.RUNNING,
    (GameState.RUNNING, "pause"): GameState.PAUSED,
    (GameState.PAUSED, "resume"): GameState.RUNNING,
    (GameState.RUNNING, "collide"): GameState.GAME_OVER,
    (GameState.GAME_OVER, "reset"): GameState.IDLE,
    (GameState.COUNTDOWN, "reset"): GameState.IDLE,
    (GameState.RUNNING, "reset"): GameState.IDLE,
    (GameState.PAUSED, "reset"): GameState.IDLE,
}


@dataclass(frozen=True)
class Snapshot:
    state: GameState
    snake: tuple
    head_position: tuple
    direction: tuple
    food: object
    obstacles: tuple
    score: int
    high_score: int
    countdown: int
    game_over_reason: object
    difficulty: str
    tick: int


class GameSession:
    """One game from Idle to GameOver and back, driven by an external clock."""

    def __init__(self, config=None, store=None, rng=None):
        self.config = config or GameConfig()
        self.store = store
        self.rng = rng or random.Random(self.config.seed)
        self.events = EventHub()

        # Fail early if the board cannot hold the starting snake.
        create_initial_snake(self.config.start_length, self.config.width, self.config.height)

        self.boundary = BOUNDARIES[self.config.boundary](self.config.width, self.config.height)
        self.movement = MOVEMENTS[self.config.movement](self.config.max_frame_dt)
        self.spawner = Spawner(self.config, self.rng)

        self.state = GameState.IDLE
        self.buffer = DirectionBuffer(RIGHT)
        self.snake = None
        self.food = None
        self.obstacles = []
        self.scores = ScoreTracker(
            self._load_high_score(), self.store, self.config.growth_divisor
        )
        self.countdown_remaining = 0.0
        self.game_over_reason = None
        self.tick_count = 0
        self._accumulator = 0.0
        self._in_tick = False
        self._reset_requested = False
        self._refresh()

    def on(self, name, callback):
        """Subscribe callback to a session event."""
        self.events.connect(name, callback)

    # Commands -------------------------------------------------------------

    def start(self):
        if not self._can("start"):
            return False
        config = self.config
        self.snake = Snake(
            create_initial_snake(config.start_length, config.width, config.height),
            RIGHT,
            config.min_length,
        )
        self.buffer = DirectionBuffer(RIGHT)
        self.scores = ScoreTracker(self._load_high_score(), self.store, config.growth_divisor)
        self.obstacles = []
        self.food = self.spawner.spawn_food(self.snake.body, self.obstacles)
        self.spawner.spawn_obstacles(config.obstacle_count, self._obstacle_exclusions(), self.obstacles)
        self.countdown_remaining = float(config.countdown_seconds)
        self.game_over_reason = None
        self.tick_count = 0
        self._accumulator = 0.0
        logger.info(
            "Session started: %s/%s, difficulty %s, %d obstacles",
            config.movement,
            config.boundary,
            config.difficulty,
            len(self.obstacles),
        )
        self._fire("start")
        if self.countdown_remaining <= 0:
            self._fire("countdown_done")
        self._refresh()
        return True

    def pause(self):
        if not self._fire("pause"):
            return False
        self._refresh()
        return True

    def resume(self):
        if not self._fire("resume"):
            return False
        self._accumulator = 0.0
        self._refresh()
        return True

    def toggle_pause(self):
        if self.state is GameState.PAUSED:
            return self.resume()
        return self.pause()

    def reset(self):
        """Return to Idle; inside a tick the reset waits for the tick to finish."""
        if not self._can("reset"):
            return False
        if self._in_tick:
            self._reset_requested = True
            return True
        self._reset_now()
        return True

    def propose(self, direction):
        if self.state is not GameState.RUNNING:
            return False
        return self.buffer.propose(direction)

    def set_difficulty(self, difficulty):
        """Switch difficulty; speed applies from the next tick, snake and score stay."""
        config = self.config.with_difficulty(difficulty)
        if config is self.config:
            return False
        self.config = config
        logger.info("Difficulty set to %s", difficulty)
        self._refresh()
        return True

    # Clock ----------------------------------------------------------------

    def update(self, dt):
        """Advance by dt seconds of wall-clock time.

        Counts the countdown down, then runs at most one simulation step so
        every step is observable by the renderer.
        """
        if self.state is GameState.COUNTDOWN:
            self.countdown_remaining -= dt
            if self.countdown_remaining <= 0:
                self.countdown_remaining = 0.0
                self._fire("countdown_done")
            self._refresh()
            return False
        if self.state is not GameState.RUNNING:
            return False
        if self.movement.continuous:
            return self.tick(dt)

        interval = 1.0 / self.config.speed
        self._accumulator = min(self._accumulator + dt, interval)
        if self._accumulator < interval:
            return False
        self._accumulator -= interval
        return self.tick()

    def tick(self, dt=None):
        """Run one atomic step: consume input, move, collide, eat, spawn."""
        if self.state is not GameState.RUNNING:
            return False
        self._in_tick = True
        try:
            self._step(dt)
        except Exception:
            logger.exception("Tick %d failed, resetting to idle", self.tick_count)
            self._reset_requested = True
        finally:
            self._in_tick = False
        if self._reset_requested:
            self._reset_now()
        self._refresh()
        return True

    def snapshot(self):
        return self._snapshot

    # Internals ------------------------------------------------------------

    def _step(self, dt):
        self.tick_count += 1
        direction = self.buffer.consume()
        cells, position = self.movement.advance(self.snake, direction, self.config.speed, dt)
        for raw in cells:
            if not self._enter(raw):
                return

        if position is None:
            self.snake.snap_to_cell()
        else:
            self.snake.head_position = self.boundary.resolve_position(position)

        # One obstacle roll per movement step, not per rendered frame.
        if cells and self.config.obstacles_enabled:
            self.spawner.maybe_add_obstacle(
                self.config.obstacle_probability,
                self._obstacle_exclusions(),
                self.obstacles,
                self.config.obstacle_cap,
            )
        self._maintain()

    def _enter(self, raw):
        """Move the head into one cell; False if the move ended the game."""
        cell = self.boundary.resolve(raw)
        food = self.food
        eating = food is not None and cell == food.position
        growth = growth_for(food.points, self.config.growth_divisor) if eating else 0

        body_after = self.snake.peek_body(cell, growth)
        reason = detect_collision(
            cell, body_after, self.obstacles, self.boundary, self.config.neck_window
        )
        if reason is not None:
            self._game_over(reason)
            return False

        if eating:
            self.scores.add(food.points)
            self.snake.grow(growth)
        self.snake.enter(cell)
        if eating:
            self._consume_food(food)
        return True

    def _consume_food(self, food):
        self.food = None
        logger.debug("Ate %s worth %d at %s", food.name, food.points, food.position)
        self.events.emit(FOOD_EATEN, food.points)
        if self.scores.check_high_score():
            self.events.emit(HIGH_SCORE_UPDATED, self.scores.high_score)
        self.food = self.spawner.spawn_food(self.snake.body, self.obstacles)

    def _game_over(self, reason):
        self.game_over_reason = reason
        self._fire("collide")
        logger.info(
            "Game over (%s) heading %s with score %d",
            reason,
            direction_to_text(self.snake.direction),
            self.scores.score,
        )
        if self.scores.check_high_score():
            self.events.emit(HIGH_SCORE_UPDATED, self.scores.high_score)
        self.events.emit(GAME_OVER, reason, self.scores.score)

    def _maintain(self):
        if self.food is None:
            self.food = self.spawner.spawn_food(self.snake.body, self.obstacles)
        trim_obstacles(self.obstacles, self.config.obstacle_cap)

    def _obstacle_exclusions(self):
        """Cells an obstacle must not take: snake, food and the lane ahead."""
        blocked = set(self.snake.body)
        if self.food is not None:
            blocked.add(self.food.position)
        hx, hy = self.snake.head
        dx, dy = self.snake.direction
        for i in range(1, self.config.obstacle_clearance + 1):
            blocked.add(self.boundary.resolve((hx + dx * i, hy + dy * i)))
        return blocked

    def _reset_now(self):
        self._reset_requested = False
        high_score = max(self.scores.high_score, self._load_high_score())
        self.snake = None
        self.food = None
        self.obstacles = []
        self.buffer = DirectionBuffer(RIGHT)
        self.scores = ScoreTracker(high_score, self.store, self.config.growth_divisor)
        self.countdown_remaining = 0.0
        self.game_over_reason = None
        self.tick_count = 0
        self._accumulator = 0.0
        if self.state is not GameState.IDLE:
            self._set_state(GameState.IDLE)
        self._refresh()

    def _load_high_score(self):
        if self.store is None:
            return 0
        try:
            return int(self.store.load_high_score())
        except Exception:
            logger.warning("Could not load high score, using 0", exc_info=True)
            return 0

    def _can(self, action):
        return (self.state, action) in TRANSITIONS

    def _fire(self, action):
        target = TRANSITIONS.get((self.state, action))
        if target is None:
            return False
        self._set_state(target)
        return True

    def _set_state(self, new_state):
        old_state = self.state
        self.state = new_state
        logger.debug("State %s -> %s", old_state.value, new_state.value)
        self.events.emit(STATE_CHANGED, old_state, new_state)

    def _refresh(self):
        snake = self.snake
        self._snapshot = Snapshot(
            state=self.state,
            snake=tuple(snake.body) if snake else (),
            head_position=snake.head_position if snake else None,
            direction=self.buffer.current,
            food=self.food,
            obstacles=tuple(self.obstacles),
            score=self.scores.score,
            high_score=self.scores.high_score,
            countdown=math.ceil(self.countdown_remaining)
            if self.state is GameState.COUNTDOWN
            else 0,
            game_over_reason=self.game_over_reason,
            difficulty=self.config.difficulty,
            tick=self.tick_count,
        )
