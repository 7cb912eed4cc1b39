"""Best-score persistence.

A flat key-value store with a single slot. Stores never raise on load: a
missing or corrupt value degrades to a best score of 0.
"""

import json
import logging
import math
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

BEST_SCORE_KEY = "advanced-flappy-best"


def _coerce_score(value) -> int:
    """Validate a stored value, raising ValueError if it is not a score."""
    if isinstance(value, bool):
        raise ValueError(f"Not a score: {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Non-finite score: {value!r}")
    score = int(value)
    if score != value and not isinstance(value, str):
        raise ValueError(f"Not an integer score: {value!r}")
    if score < 0:
        raise ValueError(f"Negative score: {score}")
    return score


class BestScoreStore:
    """Base class for best-score stores."""

    def load(self) -> int:
        raise NotImplementedError

    def save(self, score: int) -> None:
        raise NotImplementedError


class MemoryBestScoreStore(BestScoreStore):
    """In-process store. Records every save for inspection."""

    def __init__(self, initial: int = 0):
        self.value = initial
        self.saves = []

    def load(self) -> int:
        return self.value

    def save(self, score: int) -> None:
        self.value = score
        self.saves.append(score)


class JsonBestScoreStore(BestScoreStore):
    """Best score kept in a small JSON file.

    Usage:
        store = JsonBestScoreStore("data/best_score.json")
        best = store.load()
        store.save(42)

    File layout: {"advanced-flappy-best": 42}
    """

    def __init__(self, path: str = "data/best_score.json", key: str = BEST_SCORE_KEY):
        self.path = Path(path)
        self.key = key

    def load(self) -> int:
        if not self.path.exists():
            return 0
        try:
            with open(self.path) as f:
                data = json.load(f)
            return _coerce_score(data.get(self.key, 0))
        except (OSError, ValueError, TypeError, AttributeError,
                OverflowError, RecursionError) as exc:
            logger.warning("Ignoring unreadable best score in %s: %s", self.path, exc)
            return 0

    def save(self, score: int) -> None:
        data = {}
        if self.path.exists():
            try:
                with open(self.path) as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    data = loaded
            except (OSError, ValueError, RecursionError) as exc:
                logger.debug("Overwriting unreadable %s: %s", self.path, exc)
        data[self.key] = int(score)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(data, f, indent=2)
        except OSError as exc:
            logger.warning("Could not write best score to %s: %s", self.path, exc)


def open_store(path: Optional[str]) -> BestScoreStore:
    """JSON store at `path`, or an in-memory store when no path is given."""
    if path is None:
        return MemoryBestScoreStore()
    return JsonBestScoreStore(path)
