import asyncio
import os
import signal
import threading
from unittest.mock import patch

from notequiz.app import ask_answer, cmd_load, cmd_stats, run_quiz_session
from notequiz.config import QuizConfig
from notequiz.kvstore import SqliteKeyValueStore
from notequiz.models import CLOZE, MCQ, TRUEFALSE, Question, ReviewItem
from notequiz.review_store import LAST_SESSION_KEY, ReviewStore

INSTANT = QuizConfig(feedback_delay=0)
SLOW = QuizConfig(feedback_delay=30)


def _questions():
    return [
        Question(id="q_a_00001", kind=MCQ, prompt="Choisis", note_id="a",
                 choices=["un", "deux", "trois", "quatre"], correct_index=1),
        Question(id="q_b_00002", kind=TRUEFALSE, prompt="La Terre n'est pas ronde",
                 note_id="b", answer_text="Faux"),
        Question(id="q_c_00003", kind=CLOZE, prompt="La ____ est ronde", note_id="c",
                 answer_text="Terre"),
    ]


def test_ask_answer_mcq_returns_index():
    with patch("notequiz.app.Prompt.ask", return_value="b"):
        assert ask_answer(_questions()[0]) == 1


def test_ask_answer_truefalse_returns_bool():
    with patch("notequiz.app.Prompt.ask", return_value="f"):
        assert ask_answer(_questions()[1]) is False


def test_ask_answer_cloze_returns_text():
    with patch("notequiz.app.Prompt.ask", return_value="terre"):
        assert ask_answer(_questions()[2]) == "terre"


def test_run_quiz_session_all_correct(tmp_db):
    store = ReviewStore(SqliteKeyValueStore(tmp_db))
    with patch("notequiz.app.Prompt.ask", side_effect=["b", "f", "Terre"]):
        score = run_quiz_session(store, _questions(), INSTANT)
    assert score == 3
    stats = asyncio.run(store.get_stats())
    assert stats.total_questions == 3
    assert asyncio.run(store.kv.get(LAST_SESSION_KEY)) is not None


def test_run_quiz_session_mixed_answers(tmp_db):
    store = ReviewStore(SqliteKeyValueStore(tmp_db))
    with patch("notequiz.app.Prompt.ask", side_effect=["a", "v", "Lune"]):
        score = run_quiz_session(store, _questions(), INSTANT)
    assert score == 0
    assert asyncio.run(store.get_review("q_a_00001")).ease == 230
    assert asyncio.run(store.get_review("q_c_00003")).ease == 240


def test_run_quiz_session_abandon_keeps_gradings(tmp_db):
    store = ReviewStore(SqliteKeyValueStore(tmp_db))
    with patch("notequiz.app.Prompt.ask", side_effect=["b", KeyboardInterrupt]):
        score = run_quiz_session(store, _questions(), INSTANT)
    assert score == 1
    assert asyncio.run(store.get_review("q_a_00001")) is not None
    assert asyncio.run(store.kv.get(LAST_SESSION_KEY)) is None


def test_run_quiz_session_empty(tmp_db):
    store = ReviewStore(SqliteKeyValueStore(tmp_db))
    assert run_quiz_session(store, [], INSTANT) == 0


def _interrupt_then(answer):
    """Prompt stand-in: deliver a real SIGINT, then try to answer."""
    def ask(*args, **kwargs):
        os.kill(os.getpid(), signal.SIGINT)
        return answer
    return ask


def test_sigint_at_prompt_abandons_without_grading(tmp_db):
    store = ReviewStore(SqliteKeyValueStore(tmp_db))
    with patch("notequiz.app.Prompt.ask", side_effect=_interrupt_then("b")):
        score = run_quiz_session(store, _questions(), INSTANT)
    assert score == 0
    assert asyncio.run(store.get_review("q_a_00001")) is None
    assert asyncio.run(store.kv.get(LAST_SESSION_KEY)) is None


def test_sigint_during_feedback_abandons(tmp_db):
    store = ReviewStore(SqliteKeyValueStore(tmp_db))

    def answer_then_interrupt(*args, **kwargs):
        threading.Timer(0.1, os.kill, (os.getpid(), signal.SIGINT)).start()
        return "b"

    with patch("notequiz.app.Prompt.ask", side_effect=answer_then_interrupt) as ask:
        score = run_quiz_session(store, _questions(), SLOW)
    assert score == 1
    assert ask.call_count == 1
    assert asyncio.run(store.get_review("q_a_00001")) is not None
    assert asyncio.run(store.kv.get(LAST_SESSION_KEY)) is None


def test_cmd_stats_renders(tmp_db):
    store = ReviewStore(SqliteKeyValueStore(tmp_db))
    asyncio.run(store.save_review(ReviewItem("q1", "n1", ease=260, interval=1, due=0)))
    with patch("notequiz.app.console.print") as printed:
        cmd_stats(store)
    assert printed.called


def test_cmd_load_missing_path(tmp_path):
    assert cmd_load(str(tmp_path / "missing.json")) == []


def test_cmd_load_reads_notes(tmp_path):
    path = tmp_path / "note.md"
    path.write_text("La Terre est ronde.", encoding="utf-8")
    notes = cmd_load(str(path))
    assert [n.id for n in notes] == ["note"]
