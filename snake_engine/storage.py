import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SCORES_FILE = Path.home() / ".snake_engine" / "scores.json"
LEADERBOARD_SIZE = 5
DEFAULT_NAME = "Anonymous"


def _parse_score(value):
    if isinstance(value, bool):
        return None
    try:
        score = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return score if score >= 0 else None


class ScoreStore:
    """High score and top-5 leaderboard kept together in one JSON file.

    Missing or corrupt data reads as absence. Failed writes are logged and
    reported through the return value; they never raise.
    """

    def __init__(self, path=SCORES_FILE):
        self.path = Path(path)

    def _read(self):
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable score file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed score file %s", self.path)
            return {}
        return data

    def _write(self, data):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=4)
            tmp.replace(self.path)
        except OSError as exc:
            logger.warning("Could not write score file %s: %s", self.path, exc)
            return False
        return True

    def load_high_score(self):
        score = _parse_score(self._read().get("high_score", 0))
        return 0 if score is None else score

    def save_high_score(self, score):
        data = self._read()
        data["high_score"] = int(score)
        return self._write(data)

    def load_leaderboard(self):
        entries = self._read().get("leaderboard", [])
        if not isinstance(entries, list):
            return []
        board = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            score = _parse_score(entry.get("score"))
            if score is None:
                continue
            board.append({"name": clean_name(entry.get("name")), "score": score})
        board.sort(key=lambda e: e["score"], reverse=True)
        return board[:LEADERBOARD_SIZE]

    def add_to_leaderboard(self, name, score):
        """Insert a result and keep the best LEADERBOARD_SIZE entries."""
        board = self.load_leaderboard()
        board.append({"name": clean_name(name), "score": int(score)})
        board.sort(key=lambda e: e["score"], reverse=True)
        board = board[:LEADERBOARD_SIZE]
        data = self._read()
        data["leaderboard"] = board
        self._write(data)
        return board

    def clear_leaderboard(self):
        data = self._read()
        data["leaderboard"] = []
        self._write(data)


def clean_name(name):
    """Trim a player name, defaulting to Anonymous."""
    if not isinstance(name, str):
        return DEFAULT_NAME
    return name.strip() or DEFAULT_NAME
