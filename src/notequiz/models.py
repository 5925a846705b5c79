"""Data classes for the quiz domain model."""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

QUIZ_MODES = ("day", "week", "month")

MCQ = "mcq"
CLOZE = "cloze"
TRUEFALSE = "truefalse"
QUESTION_KINDS = (MCQ, CLOZE, TRUEFALSE)

TRUE_ANSWER = "Vrai"
FALSE_ANSWER = "Faux"


class Grade(IntEnum):
    AGAIN = 1
    HARD = 2
    GOOD = 3
    EASY = 4


@dataclass
class Note:
    id: str
    text: str
    title: Optional[str] = None
    tags: set = field(default_factory=set)
    updated_at: Optional[int] = None  # epoch ms


@dataclass
class Question:
    id: str
    kind: str
    prompt: str
    note_id: str
    tag_ids: list = field(default_factory=list)
    choices: Optional[list] = None
    correct_index: Optional[int] = None
    answer_text: Optional[str] = None


@dataclass
class ReviewItem:
    question_id: str
    note_id: str
    ease: int = 250
    interval: int = 0  # days
    due: int = 0  # epoch ms
    last_reviewed: Optional[int] = None

    def to_dict(self) -> dict:
        data = {
            "questionId": self.question_id,
            "noteId": self.note_id,
            "ease": self.ease,
            "interval": self.interval,
            "due": self.due,
        }
        if self.last_reviewed is not None:
            data["lastReviewed"] = self.last_reviewed
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ReviewItem":
        return cls(
            question_id=data["questionId"],
            note_id=data["noteId"],
            ease=int(data["ease"]),
            interval=int(data["interval"]),
            due=int(data["due"]),
            last_reviewed=data.get("lastReviewed"),
        )


@dataclass
class SessionStreak:
    streak_days: int = 0
    last_session: Optional[int] = None  # epoch ms


@dataclass
class QuizStats:
    total_questions: int = 0
    correct_answers: int = 0
    average_ease: float = 250.0
    due_today: int = 0
    streak_days: int = 0
    last_session: Optional[int] = None

    @property
    def accuracy(self) -> float:
        """Share of reviewed questions counted as correct, as a percentage."""
        if self.total_questions == 0:
            return 0.0
        return self.correct_answers / self.total_questions * 100
