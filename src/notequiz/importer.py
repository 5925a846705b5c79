"""Load notes from JSON, YAML, markdown or plain text files."""
import json
import logging
from pathlib import Path
from typing import Optional

import yaml

from notequiz.models import Note

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".json", ".yaml", ".yml", ".md", ".txt")


def _parse_tags(raw) -> set:
    if isinstance(raw, (str, dict)):
        raw = [raw]
    tags = set()
    for tag in raw or []:
        if isinstance(tag, dict):
            tag = tag.get("id")
        if tag:
            tags.add(str(tag))
    return tags


def note_from_dict(data: dict, fallback_id: str) -> Note:
    """Build a Note from a loosely structured mapping.

    Accepts both camelCase (``updatedAt``) and snake_case keys. Entries
    without text are kept with empty text; they yield no questions.
    """
    text = data.get("text")
    if not isinstance(text, str):
        logger.warning("Note %s has no text", data.get("id", fallback_id))
        text = ""
    return Note(
        id=str(data.get("id", fallback_id)),
        text=text,
        title=data.get("title"),
        tags=_parse_tags(data.get("tags")),
        updated_at=_parse_timestamp(data.get("updatedAt", data.get("updated_at")), data.get("id", fallback_id)),
    )


def _parse_timestamp(raw, note_id) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning("Note %s: ignoring non-numeric updatedAt %r", note_id, raw)
        return None


def _structured_notes(data, stem: str) -> list[Note]:
    if isinstance(data, dict):
        data = data.get("notes", [data])
    if not isinstance(data, list):
        logger.warning("Ignoring %s: expected a list of notes", stem)
        return []
    notes = []
    for i, entry in enumerate(data):
        if isinstance(entry, dict):
            notes.append(note_from_dict(entry, f"{stem}-{i}"))
        else:
            logger.warning("Ignoring entry %d of %s: not a mapping", i, stem)
    return notes


def _text_note(path: Path) -> Note:
    lines = path.read_text(encoding="utf-8").splitlines()
    tags = set()
    if lines and lines[0].lower().startswith("tags:"):
        tags = {t.strip() for t in lines[0][5:].split(",") if t.strip()}
        lines = lines[1:]
    return Note(
        id=path.stem,
        text="\n".join(lines),
        title=path.stem,
        tags=tags,
        updated_at=int(path.stat().st_mtime * 1000),
    )


def read_notes_file(path: Path) -> list[Note]:
    suffix = path.suffix.lower()
    if suffix == ".json":
        return _structured_notes(json.loads(path.read_text(encoding="utf-8")), path.stem)
    elif suffix in (".yaml", ".yml"):
        return _structured_notes(yaml.safe_load(path.read_text(encoding="utf-8")), path.stem)
    elif suffix in (".md", ".txt"):
        return [_text_note(path)]
    raise ValueError(f"Unsupported note file: {path.name}")


def load_notes(path: str) -> list[Note]:
    """Load notes from a file, or from every supported file in a directory."""
    root = Path(path)
    if root.is_dir():
        notes = []
        for child in sorted(root.iterdir()):
            if child.is_file() and child.suffix.lower() in SUPPORTED_SUFFIXES:
                notes.extend(read_notes_file(child))
        return notes
    return read_notes_file(root)
