"""Bounded ease/interval review scheduling."""
import time
from dataclasses import replace
from typing import Optional

from notequiz.models import ReviewItem

MIN_EASE = 130
MAX_EASE = 300
START_EASE = 250
DAY_MS = 24 * 60 * 60 * 1000

EASE_DELTA = {1: -20, 2: -10, 3: 0, 4: 10}


def now_ms() -> int:
    return int(time.time() * 1000)


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def init_review(question_id: str, note_id: str, now: Optional[int] = None) -> ReviewItem:
    """Fresh review state for a question that was never graded."""
    now = now_ms() if now is None else now
    return ReviewItem(
        question_id=question_id, note_id=note_id, ease=START_EASE, interval=0, due=now,
    )


def schedule(prev: ReviewItem, grade: int, now: Optional[int] = None) -> ReviewItem:
    """Calculate the next review state after a grading.

    Args:
        prev: Current review state (interval 0 means never graded).
        grade: 1=Again, 2=Hard, 3=Good, 4=Easy.
        now: Grading time in epoch ms; defaults to the current time.

    Returns:
        A new ReviewItem; prev is left untouched.
    """
    now = now_ms() if now is None else now
    ease = clamp(prev.ease + EASE_DELTA.get(int(grade), 0), MIN_EASE, MAX_EASE)

    if prev.interval == 0:
        # First grading always lands one day out
        interval = 1
    else:
        interval = round(prev.interval * ease / START_EASE)
        if grade == 1:
            interval = 1
        interval = max(1, interval)

    return replace(
        prev, ease=ease, interval=interval, due=now + interval * DAY_MS, last_reviewed=now,
    )


def calculate_retention(items) -> float:
    """Fraction of items at or above the starting ease. Diagnostic only."""
    items = list(items)
    if not items:
        return 0.0
    return sum(1 for it in items if it.ease >= START_EASE) / len(items)
