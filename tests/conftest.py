import pytest

from snake_engine.engine import GameSession
from snake_engine.settings import GameConfig


@pytest.fixture
def make_session():
    """Build a small, seeded session; obstacles off and no countdown unless asked."""

    def factory(store=None, **overrides):
        values = {
            "width": 10,
            "height": 10,
            "countdown_seconds": 0,
            "obstacles_enabled": False,
            "seed": 7,
        }
        values.update(overrides)
        return GameSession(GameConfig(**values), store)

    return factory


@pytest.fixture
def running_session(make_session, monkeypatch):
    """A started session with an empty board and food spawning switched off."""

    def factory(store=None, **overrides):
        session = make_session(store, **overrides)
        session.start()
        session.food = None
        session.obstacles.clear()
        monkeypatch.setattr(session.spawner, "spawn_food", lambda *args, **kwargs: None)
        return session

    return factory
