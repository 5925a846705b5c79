import random

import pytest

from notequiz.kvstore import MemoryKeyValueStore
from notequiz.models import Note
from notequiz.review_store import ReviewStore


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_notequiz.db")
    return db_path


@pytest.fixture
def memory_store():
    """ReviewStore over an in-memory key-value store."""
    return ReviewStore(MemoryKeyValueStore())


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def sample_notes():
    return [
        Note(
            id="physique",
            text="La loi de Bernoulli est une relation entre P et v.\n"
                 "La pression diminue quand la vitesse augmente.",
            tags={"critical-exam"},
        ),
        Note(
            id="bio",
            text="La cellule est une unité fondamentale du vivant. "
                 "Les mitochondries produisent l'énergie cellulaire!",
            tags={"useful-exam"},
        ),
        Note(
            id="histoire",
            text="La révolution française commence en 1789. "
                 "Les citoyens réclament davantage de libertés politiques?",
        ),
        Note(id="vide", text=""),
    ]
