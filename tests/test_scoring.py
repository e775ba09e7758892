from snake_engine.engine import GameState
from snake_engine.scoring import ScoreTracker, growth_for
from snake_engine.spawner import Food
from snake_engine.storage import ScoreStore


class BrokenStore:
    def load_high_score(self):
        raise OSError("disk gone")

    def save_high_score(self, score):
        raise OSError("disk gone")


def test_growth_is_at_least_one():
    assert growth_for(1, 10) == 1
    assert growth_for(10, 10) == 1
    assert growth_for(25, 10) == 2
    assert growth_for(5, 1) == 5


def test_high_score_only_moves_up():
    tracker = ScoreTracker(high_score=20)
    tracker.add(10)
    assert not tracker.check_high_score()
    tracker.add(15)
    assert tracker.check_high_score()
    assert tracker.high_score == 25
    assert not tracker.check_high_score()


def test_failed_save_keeps_in_memory_high_score():
    tracker = ScoreTracker(store=BrokenStore())
    tracker.add(7)
    assert tracker.check_high_score()
    assert tracker.high_score == 7


def test_scenario_b_food_ahead(make_session):
    session = make_session()
    session.start()
    session.obstacles.clear()
    hx, hy = session.snake.head
    session.food = Food((hx + 1, hy), 10)
    eaten = []
    session.on("food_eaten", eaten.append)

    session.tick()

    assert session.scores.score == 10
    assert len(session.snake) == 5 + growth_for(10, session.config.growth_divisor)
    assert eaten == [10]
    assert session.food is not None
    assert session.food.position not in session.snake.body
    assert session.food.position not in session.obstacles


def test_scenario_d_high_score_event_fires_once(running_session, tmp_path):
    store = ScoreStore(tmp_path / "scores.json")
    session = running_session(store)
    assert session.scores.high_score == 0
    updates = []
    session.on("high_score_updated", updates.append)

    hx, hy = session.snake.head
    session.food = Food((hx + 1, hy), 50)
    session.tick()
    session.obstacles.append((hx + 2, hy))
    session.tick()

    assert session.state is GameState.GAME_OVER
    assert updates == [50]
    assert ScoreStore(tmp_path / "scores.json").load_high_score() == 50


def test_high_score_checked_during_play_and_at_game_over(running_session, tmp_path):
    store = ScoreStore(tmp_path / "scores.json")
    session = running_session(store)
    updates = []
    session.on("high_score_updated", updates.append)

    hx, hy = session.snake.head
    for step in range(1, 6):
        session.food = Food(((hx + step) % 10, hy), 10)
        session.tick()
    assert session.scores.score == 50
    assert updates == [10, 20, 30, 40, 50]

    session.obstacles.append(((hx + 6) % 10, hy))
    session.tick()
    assert updates.count(50) == 1
    assert store.load_high_score() == 50


def test_game_over_records_unchecked_score(running_session):
    session = running_session()
    updates = []
    session.on("high_score_updated", updates.append)
    session.scores.score = 30
    hx, hy = session.snake.head
    session.obstacles.append((hx + 1, hy))
    session.tick()
    assert updates == [30]
    assert session.snapshot().high_score == 30


def test_high_score_survives_reset_and_new_session(running_session, make_session, tmp_path):
    store = ScoreStore(tmp_path / "scores.json")
    session = running_session(store)
    hx, hy = session.snake.head
    session.food = Food((hx + 1, hy), 5)
    session.tick()
    session.reset()
    assert session.snapshot().high_score == 5
    assert session.snapshot().score == 0
    assert make_session(store).snapshot().high_score == 5


def test_broken_store_does_not_crash_session(running_session):
    session = running_session(BrokenStore())
    assert session.scores.high_score == 0
    hx, hy = session.snake.head
    session.food = Food((hx + 1, hy), 3)
    session.tick()
    assert session.state is GameState.RUNNING
    assert session.scores.high_score == 3
