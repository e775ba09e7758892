import logging

logger = logging.getLogger(__name__)


def growth_for(points, divisor):
    """Segments gained for a food worth points; always at least one."""
    return max(1, points // divisor)


class ScoreTracker:
    """Current score, growth derived from it, and the persisted high score."""

    def __init__(self, high_score=0, store=None, growth_divisor=1):
        self.score = 0
        self.high_score = high_score
        self.store = store
        self.growth_divisor = growth_divisor

    def add(self, points):
        """Add a food's points and return the growth it earns."""
        self.score += points
        return growth_for(points, self.growth_divisor)

    def check_high_score(self):
        """Record and persist a new maximum; return True only when it changed."""
        if self.score <= self.high_score:
            return False
        self.high_score = self.score
        logger.info("New high score: %d", self.high_score)
        self.persist()
        return True

    def persist(self):
        if self.store is None:
            return
        try:
            self.store.save_high_score(self.high_score)
        except Exception:
            logger.warning("Could not save high score %d", self.high_score, exc_info=True)
