"""Build the chapter index from raw vocabulary records and resolve quiz fields.

Records are JSON objects.  The bundled data files use Japanese-specific keys:

  {"chapter": "Ch-1", "hirakana": "ねこ", "katakana": "", "romaji": "neko",
   "kanji": "猫", "meaning": "cat"}

Generic keys (``script_primary``, ``romanization``, ...) are accepted as well.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from types import MappingProxyType

from vocab_quiz.errors import DataFormatError
from vocab_quiz.models import QuizField, VocabularyEntry

log = logging.getLogger("vocab_quiz.store")

NO_CHAPTER = "No Chapter"
MISSING_VALUE = "N/A"

# First key present wins
RAW_KEYS = {
    "script_primary": ("hirakana", "hiragana", "script_primary", "scriptPrimary"),
    "script_secondary": ("katakana", "script_secondary", "scriptSecondary"),
    "romanization": ("romaji", "romanization"),
    "meaning": ("meaning",),
    "ideographic": ("kanji", "ideographic"),
}


class ChapterIndex(Mapping):
    """Read-only mapping of chapter key -> entries, keys in sorted order."""

    def __init__(self, entries: Sequence[VocabularyEntry]):
        self._entries = tuple(entries)
        grouped: dict[str, list[VocabularyEntry]] = {}
        for entry in self._entries:
            grouped.setdefault(entry.chapter, []).append(entry)
        self._chapters = MappingProxyType(
            {key: tuple(grouped[key]) for key in sorted(grouped)}
        )

    def __getitem__(self, chapter: str) -> tuple[VocabularyEntry, ...]:
        return self._chapters[chapter]

    def __iter__(self) -> Iterator[str]:
        return iter(self._chapters)

    def __len__(self) -> int:
        return len(self._chapters)

    @property
    def chapters(self) -> list[str]:
        return list(self._chapters)

    @property
    def entries(self) -> tuple[VocabularyEntry, ...]:
        """Every entry in source order."""
        return self._entries

    def __repr__(self) -> str:
        return f"ChapterIndex({len(self._chapters)} chapters, {len(self._entries)} entries)"


def _clean(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _pick(record: Mapping, keys: tuple[str, ...]) -> str:
    for key in keys:
        if key in record:
            return _clean(record[key])
    return ""


def parse_record(record: Mapping) -> VocabularyEntry:
    chapter = _clean(record.get("chapter")) or NO_CHAPTER
    return VocabularyEntry(
        chapter=chapter,
        **{name: _pick(record, keys) for name, keys in RAW_KEYS.items()},
    )


def load(records) -> ChapterIndex:
    """Validate *records* and index them by chapter.

    Missing fields are tolerated; a record without a chapter lands in the
    ``"No Chapter"`` bucket rather than being dropped.
    """
    if isinstance(records, (str, bytes)) or not isinstance(records, Sequence):
        raise DataFormatError(
            f"Vocabulary data must be a list of records (got {type(records).__name__})"
        )

    entries: list[VocabularyEntry] = []
    for i, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise DataFormatError(
                f"record {i}: expected an object, got {type(record).__name__}"
            )
        entries.append(parse_record(record))

    index = ChapterIndex(entries)
    log.info("Loaded %d entries in %d chapters", len(entries), len(index))
    return index


def field_value(entry: VocabularyEntry, quiz_field: QuizField) -> str:
    """Resolve the display value of *quiz_field* for *entry*.

    ``combined_script`` prefers the primary script and falls back to the
    secondary one, so an entry with only a secondary form still answers.
    """
    quiz_field = QuizField.parse(quiz_field)
    if quiz_field is QuizField.COMBINED_SCRIPT:
        return entry.script_primary or entry.script_secondary or MISSING_VALUE
    return getattr(entry, quiz_field.value) or MISSING_VALUE
