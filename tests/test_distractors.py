"""Tests for distractor selection and choice assembly."""
from __future__ import annotations

from vocab_quiz.distractors import build_choices, build_distractors
from vocab_quiz.models import QuizField, VocabularyEntry


def _entries(*meanings, ideographic=""):
    return [
        VocabularyEntry("Ch-1", script_primary=f"k{i}", romanization=f"r{i}",
                        meaning=m, ideographic=ideographic)
        for i, m in enumerate(meanings)
    ]


class TestBuildDistractors:
    def test_count_and_distinct(self, sample_entries, rng):
        d = build_distractors(sample_entries, "teacher", QuizField.MEANING, 3, rng=rng)
        assert len(d) == 3
        assert len(set(d)) == 3
        assert "teacher" not in d

    def test_values_come_from_pool(self, sample_entries, rng):
        meanings = {e.meaning for e in sample_entries}
        d = build_distractors(sample_entries, "book", QuizField.MEANING, 3, rng=rng)
        assert set(d) <= meanings

    def test_degraded_when_pool_small(self, rng):
        pool = _entries("cat", "dog", "bird")
        d = build_distractors(pool, "cat", QuizField.MEANING, 3, rng=rng)
        assert sorted(d) == ["bird", "dog"]

    def test_equal_values_excluded(self, rng):
        # Two entries share the correct meaning: neither distracts for it
        pool = _entries("cat", "cat", "dog")
        d = build_distractors(pool, "cat", QuizField.MEANING, 3, rng=rng)
        assert d == ["dog"]

    def test_duplicate_candidates_collapsed(self, rng):
        pool = _entries("cat", "dog", "dog", "dog")
        d = build_distractors(pool, "cat", QuizField.MEANING, 3, rng=rng)
        assert d == ["dog"]

    def test_require_ideographic(self, rng):
        pool = _entries("cat", "dog", "bird") + _entries("sun", "moon", ideographic="字")
        d = build_distractors(pool, "cat", QuizField.MEANING, 3, require_ideographic=True, rng=rng)
        assert sorted(d) == ["moon", "sun"]

    def test_combined_script_field(self, sample_entries, rng):
        d = build_distractors(sample_entries, "わたし", QuizField.COMBINED_SCRIPT, 9, rng=rng)
        assert "わたし" not in d
        # secondary-only entries contribute their katakana
        assert "エンジニア" in d
        assert "トイレ" in d

    def test_missing_value_is_a_candidate(self, rng):
        # An entry without a meaning offers "N/A" as a wrong answer
        pool = _entries("cat", "", "dog")
        d = build_distractors(pool, "cat", QuizField.MEANING, 3, rng=rng)
        assert sorted(d) == ["N/A", "dog"]

    def test_missing_value_excluded_when_correct(self, rng):
        pool = _entries("", "", "dog")
        d = build_distractors(pool, "N/A", QuizField.MEANING, 3, rng=rng)
        assert d == ["dog"]

    def test_empty_pool(self, rng):
        assert build_distractors([], "cat", QuizField.MEANING, 3, rng=rng) == []

    def test_zero_count(self, sample_entries, rng):
        assert build_distractors(sample_entries, "I", QuizField.MEANING, 0, rng=rng) == []

    def test_uniform_over_candidates(self, rng):
        pool = _entries("a", "b", "c", "d", "e")
        seen = set()
        for _ in range(200):
            seen.update(build_distractors(pool, "a", QuizField.MEANING, 2, rng=rng))
        assert seen == {"b", "c", "d", "e"}


class TestBuildChoices:
    def test_contains_all_once(self, rng):
        choices = build_choices("cat", ["dog", "bird", "fish"], rng)
        assert sorted(choices) == ["bird", "cat", "dog", "fish"]

    def test_correct_exactly_once(self, rng):
        choices = build_choices("cat", ["cat", "dog"], rng)
        assert choices.count("cat") == 1
        assert len(choices) == 2

    def test_no_distractors(self, rng):
        assert build_choices("cat", [], rng) == ["cat"]

    def test_order_varies(self, rng):
        orders = {tuple(build_choices("a", ["b", "c", "d"], rng)) for _ in range(50)}
        assert len(orders) > 1
