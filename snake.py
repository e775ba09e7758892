import argparse
import dataclasses
import logging
import sys

import pygame

from snake_engine.direction import DOWN, LEFT, RIGHT, UP
from snake_engine.engine import GameSession, GameState
from snake_engine.events import GAME_OVER
from snake_engine.settings import DIFFICULTIES, GameConfig, load_config, load_config_file
from snake_engine.storage import SCORES_FILE, ScoreStore

logger = logging.getLogger("snake")

# Window configuration
CELL_SIZE = 20
HUD_HEIGHT = 44
FPS = 60

# Colors (R, G, B)
BG_TOP = (18, 26, 38)
BG_BOTTOM = (9, 14, 22)
GRID_LINE = (30, 44, 61)
HEAD_COLOR = (112, 224, 120)
BODY_COLOR = (66, 168, 90)
OBSTACLE_COLOR = (122, 127, 134)
WHITE = (240, 240, 240)
SHADOW = (0, 0, 0)

KEY_TO_DIRECTION = {
    pygame.K_UP: UP,
    pygame.K_w: UP,
    pygame.K_DOWN: DOWN,
    pygame.K_s: DOWN,
    pygame.K_LEFT: LEFT,
    pygame.K_a: LEFT,
    pygame.K_RIGHT: RIGHT,
    pygame.K_d: RIGHT,
}
KEY_TO_DIFFICULTY = {pygame.K_1: "easy", pygame.K_2: "medium", pygame.K_3: "hard"}

REASON_TEXT = {
    "wall": "You hit the wall!",
    "obstacle": "You hit an obstacle!",
    "self": "You ran into yourself!",
}


def handle_key(session, key):
    """Translate one key press into a session command; return "quit" to exit."""
    if key == pygame.K_ESCAPE:
        return "quit"
    if key in KEY_TO_DIRECTION:
        session.propose(KEY_TO_DIRECTION[key])
    elif key == pygame.K_SPACE:
        session.start()
    elif key == pygame.K_p:
        session.toggle_pause()
    elif key == pygame.K_r:
        session.reset()
    elif key in KEY_TO_DIFFICULTY:
        session.set_difficulty(KEY_TO_DIFFICULTY[key])
    return None


def get_ui_font(size):
    """Load a preferred UI font, then fall back safely to pygame default."""
    preferred = ["Bahnschrift", "Segoe UI", "Arial"]
    for name in preferred:
        path = pygame.font.match_font(name)
        if path:
            return pygame.font.Font(path, size)
    return pygame.font.Font(None, size)


def grid_rect(grid_pos, padding=0):
    """Return a pixel rectangle for a (possibly fractional) grid position."""
    x, y = grid_pos
    return pygame.Rect(
        int(x * CELL_SIZE) + padding,
        int(y * CELL_SIZE) + HUD_HEIGHT + padding,
        CELL_SIZE - padding * 2,
        CELL_SIZE - padding * 2,
    )


def draw_background(surface, width, height):
    """Draw a gradient board under subtle grid lines."""
    board_h = height * CELL_SIZE
    for y in range(board_h):
        t = y / board_h
        color = tuple(int(a + (b - a) * t) for a, b in zip(BG_TOP, BG_BOTTOM))
        pygame.draw.line(surface, color, (0, y + HUD_HEIGHT), (width * CELL_SIZE, y + HUD_HEIGHT))
    for x in range(0, width * CELL_SIZE, CELL_SIZE):
        pygame.draw.line(surface, GRID_LINE, (x, HUD_HEIGHT), (x, HUD_HEIGHT + board_h), 1)
    for y in range(HUD_HEIGHT, HUD_HEIGHT + board_h, CELL_SIZE):
        pygame.draw.line(surface, GRID_LINE, (0, y), (width * CELL_SIZE, y), 1)


def draw_snapshot(surface, snap, width, height, fonts):
    """Paint one snapshot: board, obstacles, food, snake, HUD and overlays."""
    draw_background(surface, width, height)

    for cell in snap.obstacles:
        pygame.draw.rect(surface, OBSTACLE_COLOR, grid_rect(cell, padding=1), border_radius=3)

    if snap.food is not None:
        rect = grid_rect(snap.food.position, padding=2)
        pygame.draw.circle(surface, snap.food.color, rect.center, rect.width // 2)

    for segment in reversed(snap.snake[1:]):
        pygame.draw.rect(surface, BODY_COLOR, grid_rect(segment, padding=1), border_radius=5)
    if snap.snake:
        head = grid_rect(snap.head_position, padding=1)
        pygame.draw.rect(surface, HEAD_COLOR, head, border_radius=5)
        dx, dy = snap.direction
        eye = (head.centerx + dx * 4, head.centery + dy * 4)
        pygame.draw.circle(surface, SHADOW, eye, 2)

    hud = (
        f"Score: {snap.score}   Best: {snap.high_score}   "
        f"Level: {DIFFICULTIES[snap.difficulty]['name']}"
    )
    pygame.draw.rect(surface, SHADOW, (0, 0, width * CELL_SIZE, HUD_HEIGHT))
    surface.blit(fonts["hud"].render(hud, True, WHITE), (10, 10))

    message = None
    if snap.state is GameState.IDLE:
        message = "Press Space to start"
    elif snap.state is GameState.COUNTDOWN:
        message = str(snap.countdown)
    elif snap.state is GameState.PAUSED:
        message = "Paused"
    elif snap.state is GameState.GAME_OVER:
        reason = REASON_TEXT.get(snap.game_over_reason, "Game Over")
        message = f"{reason} Score: {snap.score}  (R to restart)"
    if message:
        label = fonts["overlay"].render(message, True, WHITE)
        box = label.get_rect(center=(width * CELL_SIZE // 2, HUD_HEIGHT + height * CELL_SIZE // 2))
        box.inflate_ip(26, 16)
        panel = pygame.Surface((box.width, box.height), pygame.SRCALPHA)
        panel.fill((0, 0, 0, 160))
        surface.blit(panel, box.topleft)
        surface.blit(label, label.get_rect(center=box.center))


def record_result(store, name, final_score):
    """Add a finished run to the leaderboard; empty runs are not recorded."""
    if final_score <= 0:
        return None
    board = store.add_to_leaderboard(name, final_score)
    logger.info("Leaderboard: %s", ", ".join(f"{e['name']} {e['score']}" for e in board))
    return board


def parse_args(argv):
    parser = argparse.ArgumentParser(description="Snake")
    parser.add_argument("--config", help="JSON file with configuration overrides")
    parser.add_argument("--mode", choices=("discrete", "continuous"))
    parser.add_argument("--boundary", choices=("wrap", "wall"))
    parser.add_argument("--difficulty", choices=tuple(DIFFICULTIES))
    parser.add_argument("--no-obstacles", action="store_true", help="Disable obstacles")
    parser.add_argument("--seed", type=int)
    parser.add_argument("--scores", default=str(SCORES_FILE), help="Score file path")
    parser.add_argument("--name", default="Anonymous", help="Name for the leaderboard")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser.parse_args(argv)


def build_config(args):
    """Merge the config file with command-line options."""
    base = load_config_file(args.config) if args.config else GameConfig()
    overrides = {
        "movement": args.mode,
        "boundary": args.boundary,
        "difficulty": args.difficulty,
        "seed": args.seed,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if args.no_obstacles:
        overrides["obstacles_enabled"] = False
    merged = dataclasses.asdict(base)
    merged.update(overrides)
    return load_config(merged)


def main(argv=None):
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = build_config(args)
    store = ScoreStore(args.scores)
    session = GameSession(config, store)

    session.on(GAME_OVER, lambda reason, final_score: record_result(store, args.name, final_score))

    pygame.init()
    pygame.display.set_caption("Snake")
    screen = pygame.display.set_mode(
        (config.width * CELL_SIZE, config.height * CELL_SIZE + HUD_HEIGHT)
    )
    clock = pygame.time.Clock()
    fonts = {"hud": get_ui_font(20), "overlay": get_ui_font(24)}

    running = True
    while running:
        # Input is drained once per frame, before the session steps.
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN and handle_key(session, event.key) == "quit":
                running = False

        session.update(clock.tick(FPS) / 1000.0)
        draw_snapshot(screen, session.snapshot(), config.width, config.height, fonts)
        pygame.display.flip()

    pygame.quit()


if __name__ == "__main__":
    main()
