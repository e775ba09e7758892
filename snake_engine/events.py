import logging
from collections import defaultdict

logger = logging.getLogger(__name__)

FOOD_EATEN = "food_eaten"
GAME_OVER = "game_over"
HIGH_SCORE_UPDATED = "high_score_updated"
STATE_CHANGED = "state_changed"

EVENT_NAMES = (FOOD_EATEN, GAME_OVER, HIGH_SCORE_UPDATED, STATE_CHANGED)


class EventHub:
    """Synchronous listeners keyed by event name."""

    def __init__(self):
        self._listeners = defaultdict(list)

    def connect(self, name, callback):
        if name not in EVENT_NAMES:
            raise ValueError(f"Unknown event: {name}")
        self._listeners[name].append(callback)

    def disconnect(self, name, callback):
        if callback in self._listeners[name]:
            self._listeners[name].remove(callback)

    def emit(self, name, *args):
        # A failing listener must not break the tick that emitted the event.
        for callback in list(self._listeners[name]):
            try:
                callback(*args)
            except Exception:
                logger.exception("Listener %r failed on %s", callback, name)
