from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from vocab_quiz.loader import is_url
from vocab_quiz.models import QuizField

# One letter label per choice (A-Z)
MAX_CHOICE_COUNT = 26

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "data_source": "data/vocabulary.json",
    "question_count_options": [10, 20, 30],
    "default_question_count": 10,
    "default_question_field": "combined_script",
    "default_answer_field": "meaning",
    "choice_count": 4,
    "fetch_timeout": 10.0,
    "random_seed": None,
}


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class Settings:
    data_source: str = DEFAULTS["data_source"]
    question_count_options: list[int] = field(
        default_factory=lambda: list(DEFAULTS["question_count_options"])
    )
    default_question_count: int = DEFAULTS["default_question_count"]
    default_question_field: str = DEFAULTS["default_question_field"]
    default_answer_field: str = DEFAULTS["default_answer_field"]
    choice_count: int = DEFAULTS["choice_count"]
    fetch_timeout: float = DEFAULTS["fetch_timeout"]
    random_seed: int | None = DEFAULTS["random_seed"]

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    def resolved_data_source(self) -> str:
        """URLs pass through; relative paths resolve against the project root."""
        if is_url(self.data_source):
            return self.data_source
        p = Path(self.data_source)
        if not p.is_absolute():
            p = self.project_root / p
        return str(p)

    def validate(self) -> str | None:
        """Return None if the values are usable, or a message naming the bad field."""
        if not isinstance(self.data_source, str) or not self.data_source.strip():
            return "data_source must be a non-empty string"
        if not _is_int(self.choice_count) or not 2 <= self.choice_count <= MAX_CHOICE_COUNT:
            return f"choice_count must be an integer between 2 and {MAX_CHOICE_COUNT}"
        if not _is_int(self.default_question_count) or self.default_question_count < 1:
            return "default_question_count must be a positive integer"
        if not isinstance(self.question_count_options, list) or not all(
            _is_int(n) and n > 0 for n in self.question_count_options
        ):
            return "question_count_options must be a list of positive integers"
        if isinstance(self.fetch_timeout, bool) or not isinstance(self.fetch_timeout, (int, float)) \
                or self.fetch_timeout <= 0:
            return "fetch_timeout must be a positive number"
        if self.random_seed is not None and not _is_int(self.random_seed):
            return "random_seed must be an integer or null"
        for name in ("default_question_field", "default_answer_field"):
            try:
                QuizField.parse(getattr(self, name))
            except ValueError as e:
                return f"{name}: {e}"
        return None

    def to_dict(self) -> dict:
        return {
            "data_source": self.data_source,
            "question_count_options": self.question_count_options,
            "default_question_count": self.default_question_count,
            "default_question_field": self.default_question_field,
            "default_answer_field": self.default_answer_field,
            "choice_count": self.choice_count,
            "fetch_timeout": self.fetch_timeout,
            "random_seed": self.random_seed,
        }


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        known = {f.name for f in Settings.__dataclass_fields__.values()}
        filtered = {k: v for k, v in raw.items() if k in known}
        return Settings(**filtered)
    return Settings()


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(json.dumps(settings.to_dict(), indent=4) + "\n")
