"""Chapter-by-chapter navigation over the vocabulary table."""
from __future__ import annotations

from vocab_quiz.models import VocabularyEntry
from vocab_quiz.store import ChapterIndex


def display_script(entry: VocabularyEntry) -> str:
    """Both script forms as ``"primary (secondary)"``, or whichever exists."""
    if entry.script_primary and entry.script_secondary:
        return f"{entry.script_primary} ({entry.script_secondary})"
    return entry.script_primary or entry.script_secondary or "-"


class ChapterBrowser:
    def __init__(self, index: ChapterIndex):
        self.index = index
        self.position = 0

    @property
    def chapters(self) -> list[str]:
        return self.index.chapters

    @property
    def current_chapter(self) -> str | None:
        chapters = self.chapters
        if not chapters:
            return None
        return chapters[self.position]

    @property
    def current_entries(self) -> tuple[VocabularyEntry, ...]:
        key = self.current_chapter
        return self.index[key] if key is not None else ()

    @property
    def has_previous(self) -> bool:
        return self.position > 0

    @property
    def has_next(self) -> bool:
        return self.position < len(self.chapters) - 1

    def previous(self) -> str | None:
        if self.has_previous:
            self.position -= 1
        return self.current_chapter

    def next(self) -> str | None:
        if self.has_next:
            self.position += 1
        return self.current_chapter

    def select(self, position: int) -> str:
        if not 0 <= position < len(self.chapters):
            raise IndexError(f"chapter position {position} out of range")
        self.position = position
        return self.chapters[position]

    def select_key(self, chapter: str) -> str:
        try:
            return self.select(self.chapters.index(chapter))
        except ValueError:
            raise KeyError(chapter) from None
