"""Quiz session state machine: present, grade, schedule, persist, advance."""
import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from notequiz.config import DEFAULT_CONFIG, QuizConfig
from notequiz.errors import InvalidTransition
from notequiz.models import CLOZE, MCQ, TRUE_ANSWER, TRUEFALSE, Grade, Question
from notequiz.review_store import ReviewStore
from notequiz.scheduler import init_review, now_ms, schedule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GradeResult:
    grade: int
    correct: bool


def grade_mcq(question: Question, selected_index: int) -> GradeResult:
    correct = selected_index == question.correct_index
    return GradeResult(Grade.EASY if correct else Grade.AGAIN, correct)


def grade_truefalse(question: Question, answer: bool) -> GradeResult:
    correct = answer == (question.answer_text == TRUE_ANSWER)
    return GradeResult(Grade.GOOD if correct else Grade.AGAIN, correct)


def grade_cloze(question: Question, user_input: str) -> GradeResult:
    expected = (question.answer_text or "").lower().strip()
    correct = (user_input or "").lower().strip() == expected
    return GradeResult(Grade.GOOD if correct else Grade.HARD, correct)


def grade_answer(question: Question, answer) -> GradeResult:
    """Dispatch to the grading rule of the question's kind."""
    if question.kind == MCQ:
        return grade_mcq(question, answer)
    if question.kind == TRUEFALSE:
        return grade_truefalse(question, answer)
    if question.kind == CLOZE:
        return grade_cloze(question, answer)
    raise ValueError(f"Unknown question kind: {question.kind!r}")


@dataclass(frozen=True)
class Presenting:
    index: int


@dataclass(frozen=True)
class Feedback:
    index: int
    correct: bool
    answer_text: Optional[str] = None


@dataclass(frozen=True)
class Completed:
    score: int


@dataclass(frozen=True)
class Abandoned:
    index: int


SessionState = Union[Presenting, Feedback, Completed, Abandoned]


class QuizSession:
    """One run over an ordered list of questions.

    States go Presenting(i) -> Feedback(i) -> Presenting(i+1) or
    Completed(score). Feedback advances on its own after the configured
    delay; abandon() cancels that pending advance. Gradings are persisted
    before entering Feedback, so abandoning never loses them.
    """

    def __init__(
        self,
        questions: list[Question],
        store: ReviewStore,
        config: QuizConfig = DEFAULT_CONFIG,
        clock: Optional[Callable[[], int]] = None,
        on_complete: Optional[Callable[[int], None]] = None,
    ) -> None:
        self.questions = list(questions)
        self.store = store
        self.config = config
        self.clock = clock or now_ms
        self.on_complete = on_complete
        self.score = 0
        self._timer: Optional[asyncio.Task] = None
        self.state: SessionState = Presenting(0) if self.questions else Completed(0)

    @property
    def current_question(self) -> Optional[Question]:
        if isinstance(self.state, (Presenting, Feedback)):
            return self.questions[self.state.index]
        return None

    @property
    def is_finished(self) -> bool:
        return isinstance(self.state, (Completed, Abandoned))

    async def submit(self, answer) -> GradeResult:
        """Grade the current question, reschedule it and enter Feedback."""
        if not isinstance(self.state, Presenting):
            raise InvalidTransition(f"Cannot submit an answer while {type(self.state).__name__}")
        index = self.state.index
        question = self.questions[index]
        result = grade_answer(question, answer)

        now = self.clock()
        prev = await self.store.get_review(question.id)
        if prev is None:
            prev = init_review(question.id, question.note_id, now)
        item = schedule(prev, result.grade, now)
        await self.store.save_review(item)
        logger.debug(
            "Question %s graded %d, next review in %d day(s)", question.id, result.grade, item.interval,
        )

        if result.correct:
            self.score += 1
        self.state = Feedback(index, result.correct, question.answer_text)
        self._arm_timer()
        return result

    def _arm_timer(self) -> None:
        self._cancel_timer()
        self._timer = asyncio.get_running_loop().create_task(self._auto_advance())

    async def _auto_advance(self) -> None:
        await asyncio.sleep(self.config.feedback_delay)
        await self.advance()

    def _cancel_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None and timer is not asyncio.current_task() and not timer.done():
            timer.cancel()

    async def advance(self) -> SessionState:
        """Leave Feedback for the next question, or complete the session."""
        if not isinstance(self.state, Feedback):
            raise InvalidTransition(f"Cannot advance while {type(self.state).__name__}")
        self._cancel_timer()
        next_index = self.state.index + 1
        if next_index < len(self.questions):
            self.state = Presenting(next_index)
            return self.state

        await self.store.update_last_session(self.clock())
        self.state = Completed(self.score)
        logger.info("Quiz completed: %d/%d", self.score, len(self.questions))
        if self.on_complete is not None:
            self.on_complete(self.score)
        return self.state

    def abandon(self) -> None:
        """Stop the session; a pending auto-advance never fires."""
        if self.is_finished:
            return
        self._cancel_timer()
        index = self.state.index
        self.state = Abandoned(index)
        logger.info("Quiz abandoned at question %d/%d", index + 1, len(self.questions))

    async def wait_for_advance(self) -> SessionState:
        """Wait for a pending auto-advance, if any, and return the new state.

        Cancelling the waiter leaves the auto-advance running.
        """
        timer = self._timer
        if timer is not None:
            try:
                await asyncio.shield(timer)
            except asyncio.CancelledError:
                # a timer stopped by advance() or abandon() is not an error
                if not timer.cancelled():
                    raise
        return self.state
