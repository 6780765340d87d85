"""Pick wrong answers for a question and assemble the choice list."""
from __future__ import annotations

import logging
import random
from collections.abc import Iterable

from vocab_quiz.models import QuizField, VocabularyEntry
from vocab_quiz.sampler import pick_distinct_indices, shuffle
from vocab_quiz.store import field_value

_log = logging.getLogger("vocab_quiz.distractors")

DEFAULT_DISTRACTOR_COUNT = 3


def _candidate_values(
    pool: Iterable[VocabularyEntry],
    correct_value: str,
    quiz_field: QuizField,
    require_ideographic: bool,
) -> list[str]:
    """Resolved values that may serve as distractors, deduplicated in pool order.

    String equality is the only test: two different entries that share the
    correct value (e.g. identical meanings) never distract for each other.
    """
    seen: set[str] = set()
    values: list[str] = []
    for entry in pool:
        if require_ideographic and not entry.ideographic:
            continue
        # Empty fields resolve to "N/A", which stays eligible like any other value
        value = field_value(entry, quiz_field)
        if value == correct_value or value in seen:
            continue
        seen.add(value)
        values.append(value)
    return values


def build_distractors(
    pool: Iterable[VocabularyEntry],
    correct_value: str,
    quiz_field: QuizField,
    count: int = DEFAULT_DISTRACTOR_COUNT,
    require_ideographic: bool = False,
    rng: random.Random | None = None,
) -> list[str]:
    """Return up to *count* distinct wrong values for *quiz_field*.

    When the pool cannot supply *count* candidates, all of them are returned
    and the question simply has fewer choices.
    """
    candidates = _candidate_values(pool, correct_value, QuizField.parse(quiz_field), require_ideographic)
    if len(candidates) <= count:
        if len(candidates) < count:
            _log.debug(
                "Only %d distractors available for %r (wanted %d)",
                len(candidates), correct_value, count,
            )
        return shuffle(candidates, rng)

    indices = pick_distinct_indices(len(candidates), count, rng)
    return [candidates[i] for i in sorted(indices)]


def build_choices(
    correct_value: str,
    distractors: Iterable[str],
    rng: random.Random | None = None,
) -> list[str]:
    """Correct value plus every distractor, each once, in random order."""
    choices = [correct_value]
    for d in distractors:
        if d not in choices:
            choices.append(d)
    return shuffle(choices, rng)
