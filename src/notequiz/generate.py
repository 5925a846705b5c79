"""Question generation from free-text notes."""
import logging
import random
from datetime import datetime
from typing import Optional

from notequiz.config import DEFAULT_CONFIG, QuizConfig
from notequiz.models import (
    CLOZE, FALSE_ANSWER, MCQ, TRUE_ANSWER, TRUEFALSE, Note, Question,
)
from notequiz.text_analysis import (
    candidate_words, detect_definition, detect_formula, make_cloze, negate, to_sentences,
)

logger = logging.getLogger(__name__)

MCQ_PROMPT = "Choisis l'énoncé correct:"
DISTRACTOR_TEMPLATE = 'Concept lié à "{}"'
_ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _question_id(note_id: str, rng: random.Random) -> str:
    suffix = "".join(rng.choice(_ID_ALPHABET) for _ in range(5))
    return f"q_{note_id}_{suffix}"


def weighted_pool(notes: list[Note], config: QuizConfig = DEFAULT_CONFIG) -> list[Note]:
    """Repeat each note as many times as its heaviest tag weight."""
    pool = []
    for note in notes:
        pool.extend([note] * config.weight_for(note.tags))
    return pool


def choose_kind(sentence: str, rng: random.Random) -> str:
    if detect_formula(sentence):
        return CLOZE
    if detect_definition(sentence):
        return CLOZE if rng.random() < 0.5 else TRUEFALSE
    return rng.choice([MCQ, CLOZE, TRUEFALSE])


def build_cloze_question(note: Note, sentence: str, rng: random.Random) -> Optional[Question]:
    cloze = make_cloze(sentence, rng)
    if cloze is None:
        return None
    return Question(
        id=_question_id(note.id, rng), kind=CLOZE, prompt=cloze.prompt,
        answer_text=cloze.answer, note_id=note.id, tag_ids=sorted(note.tags),
    )


def build_truefalse_question(note: Note, sentence: str, rng: random.Random) -> Question:
    negated = negate(sentence)
    # a sentence without a verb to negate can only be asked as true
    is_true = rng.random() < 0.5 or negated == sentence
    return Question(
        id=_question_id(note.id, rng), kind=TRUEFALSE,
        prompt=sentence if is_true else negated,
        answer_text=TRUE_ANSWER if is_true else FALSE_ANSWER,
        note_id=note.id, tag_ids=sorted(note.tags),
    )


def build_mcq_question(note: Note, sentence: str, rng: random.Random) -> Question:
    words = candidate_words(note.text)
    distractors = [DISTRACTOR_TEMPLATE.format(w) for w in rng.sample(words, min(3, len(words)))]
    choices = [sentence, *distractors]
    rng.shuffle(choices)
    return Question(
        id=_question_id(note.id, rng), kind=MCQ, prompt=MCQ_PROMPT,
        choices=choices, correct_index=choices.index(sentence),
        note_id=note.id, tag_ids=sorted(note.tags),
    )


def generate_questions(
    notes: list[Note],
    mode: str,
    target_count: int,
    config: QuizConfig = DEFAULT_CONFIG,
    rng: Optional[random.Random] = None,
) -> list[Question]:
    """Build up to target_count questions from notes.

    Notes are replicated by tag weight, sampled without replacement, and
    each chosen note yields at most one question. Notes without a usable
    sentence are skipped, so the result can be shorter than requested,
    or empty.
    """
    rng = rng or random.Random()
    policy = config.policy(mode)
    pool = weighted_pool(notes, config)
    if policy.pool_cap is not None:
        pool = rng.sample(pool, min(len(pool), policy.pool_cap))
    chosen = rng.sample(pool, min(target_count, len(pool)))

    questions = []
    for note in chosen:
        sentences = to_sentences(note.text)
        if not sentences:
            logger.debug("Note %s has no sentences, skipped", note.id)
            continue
        sentence = rng.choice(sentences)
        kind = choose_kind(sentence, rng)
        if kind == CLOZE:
            question = build_cloze_question(note, sentence, rng)
            if question is None:
                logger.debug("No cloze candidate in note %s, skipped", note.id)
                continue
        elif kind == TRUEFALSE:
            question = build_truefalse_question(note, sentence, rng)
        else:
            question = build_mcq_question(note, sentence, rng)
        questions.append(question)

    logger.debug("Generated %d/%d %s questions", len(questions), target_count, mode)
    return questions


def local_midnight_ms(now: Optional[datetime] = None) -> int:
    now = now or datetime.now()
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return int(midnight.timestamp() * 1000)


def select_notes(
    notes: list[Note], mode: str, config: QuizConfig = DEFAULT_CONFIG, now: Optional[datetime] = None,
) -> list[Note]:
    """Apply the mode's note filter (day mode keeps notes edited since midnight)."""
    if not config.policy(mode).since_midnight:
        return list(notes)
    cutoff = local_midnight_ms(now)
    return [n for n in notes if (n.updated_at or 0) >= cutoff]


def build_quiz(
    notes: list[Note],
    mode: str,
    config: QuizConfig = DEFAULT_CONFIG,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> list[Question]:
    """Filter notes for the mode and generate its target number of questions."""
    subset = select_notes(notes, mode, config, now)
    return generate_questions(subset, mode, config.policy(mode).target_count, config, rng)
