"""Quiz policy configuration: tag weights and per-mode generation rules."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

DEFAULT_DB_PATH = str(Path.home() / ".notequiz" / "notequiz.db")

DEFAULT_TAG_WEIGHTS = {
    "critical-exam": 4,
    "important-exam": 3,
    "useful-exam": 2,
    "bonus-exam": 1,
}


@dataclass(frozen=True)
class ModePolicy:
    since_midnight: bool
    target_count: int
    pool_cap: Optional[int] = None  # None means the full weighted pool


def _default_modes() -> dict:
    return {
        "day": ModePolicy(since_midnight=True, target_count=20, pool_cap=200),
        "week": ModePolicy(since_midnight=False, target_count=40, pool_cap=200),
        "month": ModePolicy(since_midnight=False, target_count=60),
    }


@dataclass
class QuizConfig:
    tag_weights: dict = field(default_factory=lambda: dict(DEFAULT_TAG_WEIGHTS))
    modes: dict = field(default_factory=_default_modes)
    default_weight: int = 1
    feedback_delay: float = 1.5  # seconds
    db_path: str = DEFAULT_DB_PATH

    def weight_for(self, tags) -> int:
        """Replication count of a note in the weighted pool."""
        weights = [self.tag_weights.get(t, self.default_weight) for t in tags]
        return max([self.default_weight, *weights])

    def policy(self, mode: str) -> ModePolicy:
        try:
            return self.modes[mode]
        except KeyError:
            raise ValueError(f"Unknown quiz mode: {mode!r}") from None


DEFAULT_CONFIG = QuizConfig()


def load_config() -> QuizConfig:
    """Default configuration with the database path taken from NOTEQUIZ_DB if set."""
    return QuizConfig(db_path=os.environ.get("NOTEQUIZ_DB", DEFAULT_DB_PATH))
