"""Tests for data model classes."""
from notequiz.models import Grade, Note, Question, QuizStats, ReviewItem, SessionStreak


def test_note_defaults():
    n = Note(id="n1", text="Du texte")
    assert n.title is None
    assert n.tags == set()
    assert n.updated_at is None


def test_question_defaults():
    q = Question(id="q_n1_abcde", kind="cloze", prompt="La ____", note_id="n1")
    assert q.choices is None
    assert q.correct_index is None
    assert q.answer_text is None
    assert q.tag_ids == []


def test_review_item_defaults():
    item = ReviewItem(question_id="q1", note_id="n1")
    assert item.ease == 250
    assert item.interval == 0
    assert item.last_reviewed is None


def test_review_item_dict_uses_camel_case_keys():
    item = ReviewItem("q1", "n1", ease=240, interval=2, due=10, last_reviewed=5)
    assert item.to_dict() == {
        "questionId": "q1", "noteId": "n1", "ease": 240, "interval": 2, "due": 10, "lastReviewed": 5,
    }
    assert ReviewItem.from_dict(item.to_dict()) == item


def test_review_item_dict_omits_missing_last_reviewed():
    assert "lastReviewed" not in ReviewItem("q1", "n1").to_dict()


def test_quiz_stats_accuracy():
    assert QuizStats().accuracy == 0.0
    assert QuizStats(total_questions=4, correct_answers=3).accuracy == 75.0


def test_session_streak_defaults():
    s = SessionStreak()
    assert s.streak_days == 0
    assert s.last_session is None


def test_grade_values():
    assert [int(g) for g in Grade] == [1, 2, 3, 4]
    assert Grade(1) is Grade.AGAIN
