"""Shared test fixtures."""
from __future__ import annotations

import json
import random

import pytest

from vocab_quiz.models import VocabularyEntry
from vocab_quiz.store import load


@pytest.fixture
def sample_records():
    """Raw records as they appear in data.json (Japanese key names)."""
    return [
        {"chapter": "Ch-1", "hirakana": "わたし", "katakana": "", "romaji": "watashi", "kanji": "私", "meaning": "I"},
        {"chapter": "Ch-1", "hirakana": "あなた", "katakana": "", "romaji": "anata", "kanji": "", "meaning": "you"},
        {"chapter": "Ch-1", "hirakana": "せんせい", "katakana": "", "romaji": "sensei", "kanji": "先生", "meaning": "teacher"},
        {"chapter": "Ch-1", "hirakana": "がくせい", "katakana": "", "romaji": "gakusei", "kanji": "学生", "meaning": "student"},
        {"chapter": "Ch-1", "hirakana": "", "katakana": "エンジニア", "romaji": "enjinia", "kanji": "", "meaning": "engineer"},
        {"chapter": "Ch-2", "hirakana": "ほん", "katakana": "", "romaji": "hon", "kanji": "本", "meaning": "book"},
        {"chapter": "Ch-2", "hirakana": "じしょ", "katakana": "", "romaji": "jisho", "kanji": "辞書", "meaning": "dictionary"},
        {"chapter": "Ch-2", "hirakana": "", "katakana": "ノート", "romaji": "nōto", "kanji": "", "meaning": "notebook"},
        {"chapter": "Ch-3", "hirakana": "ここ", "katakana": "", "romaji": "koko", "kanji": "", "meaning": "here"},
        {"chapter": "Ch-3", "hirakana": "", "katakana": "トイレ", "romaji": "toire", "kanji": "", "meaning": "toilet"},
    ]


@pytest.fixture
def sample_index(sample_records):
    return load(sample_records)


@pytest.fixture
def sample_entries(sample_index):
    return list(sample_index.entries)


@pytest.fixture
def entry():
    """A single fully populated entry."""
    return VocabularyEntry(
        chapter="Ch-1",
        script_primary="ねこ",
        script_secondary="ネコ",
        romanization="neko",
        meaning="cat",
        ideographic="猫",
    )


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def data_file(tmp_path, sample_records):
    """sample_records written to a JSON file."""
    path = tmp_path / "data.json"
    path.write_text(json.dumps(sample_records, ensure_ascii=False), encoding="utf-8")
    return path
