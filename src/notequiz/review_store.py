"""Durable per-question review state and the statistics derived from it."""
import logging
from typing import Iterable, Optional

from notequiz.kvstore import KeyValueStore
from notequiz.models import QuizStats, ReviewItem, SessionStreak
from notequiz.scheduler import DAY_MS, START_EASE, calculate_retention, now_ms

logger = logging.getLogger(__name__)

REVIEW_PREFIX = "rev:"
LAST_SESSION_KEY = "lastSession"
STREAK_DAYS_KEY = "streakDays"


class ReviewStore:
    """Review items keyed by question id, plus the session streak scalars."""

    def __init__(self, kv: KeyValueStore) -> None:
        self.kv = kv

    async def save_review(self, item: ReviewItem) -> None:
        await self.kv.set(REVIEW_PREFIX + item.question_id, item.to_dict())

    async def get_review(self, question_id: str) -> Optional[ReviewItem]:
        data = await self.kv.get(REVIEW_PREFIX + question_id)
        return ReviewItem.from_dict(data) if data else None

    async def due_questions(self, ids: Iterable[str], now: Optional[int] = None) -> set[str]:
        """Ids never reviewed or whose due time has passed."""
        now = now_ms() if now is None else now
        due = set()
        for question_id in ids:
            item = await self.get_review(question_id)
            if item is None or item.due <= now:
                due.add(question_id)
        return due

    async def all_reviews(self) -> list[ReviewItem]:
        items = []
        for key in await self.kv.keys(REVIEW_PREFIX):
            data = await self.kv.get(key)
            if data:
                items.append(ReviewItem.from_dict(data))
        return items

    async def retention(self) -> float:
        return calculate_retention(await self.all_reviews())

    async def get_streak(self) -> SessionStreak:
        streak = await self.kv.get(STREAK_DAYS_KEY)
        last = await self.kv.get(LAST_SESSION_KEY)
        return SessionStreak(streak_days=int(streak or 0), last_session=last)

    async def get_stats(self, now: Optional[int] = None) -> QuizStats:
        """Aggregate every stored review item into a fresh snapshot."""
        now = now_ms() if now is None else now
        items = await self.all_reviews()
        total = len(items)
        # ease at or above the starting value stands in for "answered correctly"
        correct = sum(1 for it in items if it.ease >= START_EASE)
        due_today = sum(1 for it in items if it.due <= now)
        average = sum(it.ease for it in items) / total if total else float(START_EASE)
        streak = await self.get_streak()
        return QuizStats(
            total_questions=total,
            correct_answers=correct,
            average_ease=average,
            due_today=due_today,
            streak_days=streak.streak_days,
            last_session=streak.last_session,
        )

    async def update_last_session(self, now: Optional[int] = None) -> SessionStreak:
        """Advance, keep or reset the streak, then stamp the session time."""
        now = now_ms() if now is None else now
        streak = await self.get_streak()
        if streak.last_session is None:
            new_streak = 0
        else:
            gap = (now - streak.last_session) // DAY_MS
            if gap == 1:
                new_streak = streak.streak_days + 1
            elif gap == 0:
                new_streak = streak.streak_days
            else:
                new_streak = 0
        await self.kv.set(STREAK_DAYS_KEY, new_streak)
        await self.kv.set(LAST_SESSION_KEY, now)
        logger.info("Session recorded, streak now %d day(s)", new_streak)
        return SessionStreak(streak_days=new_streak, last_session=now)
