from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class QuizField(str, Enum):
    COMBINED_SCRIPT = "combined_script"
    ROMANIZATION = "romanization"
    IDEOGRAPHIC = "ideographic"
    MEANING = "meaning"

    @classmethod
    def parse(cls, value: str | QuizField) -> QuizField:
        """Accept enum values, member names, or the labels used in the data files."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        key = FIELD_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown quiz field: {value!r}") from None


FIELD_ALIASES = {
    "kana": "combined_script",
    "script": "combined_script",
    "romaji": "romanization",
    "kanji": "ideographic",
}


class SessionState(str, Enum):
    CONFIGURING = "configuring"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass(frozen=True)
class VocabularyEntry:
    chapter: str
    script_primary: str = ""
    script_secondary: str = ""
    romanization: str = ""
    meaning: str = ""
    ideographic: str = ""

    def to_dict(self) -> dict:
        return {
            "chapter": self.chapter,
            "script_primary": self.script_primary,
            "script_secondary": self.script_secondary,
            "romanization": self.romanization,
            "meaning": self.meaning,
            "ideographic": self.ideographic,
        }


@dataclass(frozen=True)
class QuizConfiguration:
    question_count: int
    chapters: frozenset[str]
    question_field: QuizField = QuizField.COMBINED_SCRIPT
    answer_field: QuizField = QuizField.MEANING

    def __post_init__(self):
        # bool is an int subclass
        if isinstance(self.question_count, bool) or not isinstance(self.question_count, int):
            raise ValueError(f"question_count must be an integer (got {self.question_count!r})")
        if self.question_count < 1:
            raise ValueError(f"question_count must be positive (got {self.question_count})")
        if not self.chapters:
            raise ValueError("Select at least one chapter")
        object.__setattr__(self, "chapters", frozenset(self.chapters))
        object.__setattr__(self, "question_field", QuizField.parse(self.question_field))
        object.__setattr__(self, "answer_field", QuizField.parse(self.answer_field))

    @property
    def requires_ideographic(self) -> bool:
        return QuizField.IDEOGRAPHIC in (self.question_field, self.answer_field)

    @classmethod
    def from_dict(cls, data: dict, total_entries: int | None = None) -> QuizConfiguration:
        """Build a configuration from a request body.

        ``question_count`` may be ``"all"``, which needs *total_entries*.
        """
        missing = {"question_count", "chapters"} - data.keys()
        if missing:
            raise ValueError(f"missing fields: {', '.join(sorted(missing))}")

        count = data["question_count"]
        if isinstance(count, str):
            if count.strip().lower() == "all":
                if not total_entries:
                    raise ValueError("question_count 'all' needs a loaded vocabulary")
                count = total_entries
            elif count.strip().isdigit():
                count = int(count.strip())

        chapters = data["chapters"]
        if isinstance(chapters, str):
            chapters = [chapters]

        return cls(
            question_count=count,
            chapters=frozenset(chapters),
            question_field=data.get("question_field", QuizField.COMBINED_SCRIPT),
            answer_field=data.get("answer_field", QuizField.MEANING),
        )

    def to_dict(self) -> dict:
        return {
            "question_count": self.question_count,
            "chapters": sorted(self.chapters),
            "question_field": self.question_field.value,
            "answer_field": self.answer_field.value,
        }


@dataclass
class Question:
    entry: VocabularyEntry
    prompt_value: str
    correct_value: str
    choices: tuple[str, ...]
    answered_choice: str | None = None
    is_correct: bool | None = None

    @property
    def is_answered(self) -> bool:
        return self.answered_choice is not None


@dataclass(frozen=True)
class AnswerOutcome:
    is_correct: bool
    chosen_value: str
    correct_value: str
    entry: VocabularyEntry
    score: int


@dataclass(frozen=True)
class QuizResult:
    score: int
    total: int
    percentage: float = field(init=False)

    def __post_init__(self):
        pct = round(self.score / self.total * 100, 1) if self.total else 0.0
        object.__setattr__(self, "percentage", pct)
