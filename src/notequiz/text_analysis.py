"""Sentence segmentation and content heuristics for question building."""
import random
import re
from dataclasses import dataclass
from typing import Optional

BLANK = "____"

_SENTENCE_END = re.compile(r"[.?!]+")
_NEWLINES = re.compile(r"\n+")
_NON_WORD = re.compile(r"\W+")

FORMULA_PATTERNS = [
    re.compile(r"[a-zA-Z]\s*=\s*[^=]"),
    re.compile(r"\d+\s*[+\-*/]\s*\d+"),
    re.compile(r"[∫∑∏√∂∇]"),
    re.compile(r"\^[0-9{}]+"),
    re.compile(r"_[0-9{}]+"),
    re.compile(r"\\[a-zA-Z]+"),
]

DEFINITION_PATTERNS = [
    re.compile(r"\b(est|sont|is|are)\s+(un|une|le|la|les|des|a|an|the)\s+", re.IGNORECASE),
    re.compile(r":\s*[A-ZÀ-Ý]"),
    re.compile(r"définition\s*:", re.IGNORECASE),
    re.compile(r"déf\s*:", re.IGNORECASE),
    re.compile(r"=\s*\""),
]

# Copula and possession verbs, negated for "false" statements.
_NEGATABLE = re.compile(r"\b(est|sont|a|ont)\b", re.IGNORECASE)


@dataclass
class Cloze:
    prompt: str
    answer: str


def to_sentences(text: str) -> list[str]:
    """Split note text into trimmed, non-empty sentences."""
    flat = _NEWLINES.sub(" ", text or "")
    return [s.strip() for s in _SENTENCE_END.split(flat) if s.strip()]


def detect_formula(text: str) -> bool:
    return any(rx.search(text) for rx in FORMULA_PATTERNS)


def detect_definition(text: str) -> bool:
    return any(rx.search(text) for rx in DEFINITION_PATTERNS)


def _whole_word(word: str) -> re.Pattern:
    return re.compile(rf"(?<!\w){re.escape(word)}(?!\w)", re.IGNORECASE)


def make_cloze(sentence: str, rng: Optional[random.Random] = None) -> Optional[Cloze]:
    """Blank out one randomly chosen word of the sentence.

    Only words longer than three characters are candidates. Returns None
    when the sentence has fewer than two candidates; callers skip it.
    """
    rng = rng or random.Random()
    words = []
    for token in sentence.split():
        word = token.strip(".,;:!?()[]{}«»\"'")
        if len(word) > 3:
            words.append(word)
    if len(words) < 2:
        return None
    target = rng.choice(words)
    prompt = _whole_word(target).sub(BLANK, sentence)
    return Cloze(prompt=prompt, answer=target)


def negate(sentence: str) -> str:
    """Negate the first copula or possession verb (est -> n'est pas)."""
    return _NEGATABLE.sub(lambda m: f"n'{m.group(1)} pas", sentence, count=1)


def candidate_words(text: str, limit: int = 50) -> list[str]:
    """Unique words longer than four characters, in order of appearance."""
    seen = []
    for word in _NON_WORD.split(text or ""):
        if len(word) > 4 and word not in seen:
            seen.append(word)
            if len(seen) >= limit:
                break
    return seen
