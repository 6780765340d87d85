"""Quiz session state machine: configuring -> in progress -> finished.

A session is built for one quiz and discarded afterwards; restarting means
constructing a new one.  The recorded ``answered_choice`` on each Question is
what locks it against double submission.
"""
from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from vocab_quiz.distractors import build_choices, build_distractors
from vocab_quiz.errors import EmptySelectionError, InvalidStateAccess
from vocab_quiz.models import (
    AnswerOutcome,
    Question,
    QuizConfiguration,
    QuizResult,
    SessionState,
    VocabularyEntry,
)
from vocab_quiz.sampler import shuffle
from vocab_quiz.store import field_value

_log = logging.getLogger("vocab_quiz.session")

DEFAULT_CHOICE_COUNT = 4


def eligible_entries(
    configuration: QuizConfiguration,
    pool: Sequence[VocabularyEntry],
) -> list[VocabularyEntry]:
    """Entries of the selected chapters, restricted to ones with an ideographic
    form when either side of the quiz uses it."""
    need_ideographic = configuration.requires_ideographic
    return [
        e for e in pool
        if e.chapter in configuration.chapters
        and (not need_ideographic or e.ideographic)
    ]


class QuizSession:
    def __init__(self, rng: random.Random | None = None, choice_count: int = DEFAULT_CHOICE_COUNT):
        if choice_count < 2:
            raise ValueError(f"choice_count must be at least 2 (got {choice_count})")
        self.rng = rng
        self.choice_count = choice_count
        self.state = SessionState.CONFIGURING
        self.configuration: QuizConfiguration | None = None
        self.pool: list[VocabularyEntry] = []
        self.questions: list[Question] = []
        self.current_index = 0
        self.score = 0

    def _require(self, state: SessionState, action: str) -> None:
        if self.state is not state:
            raise InvalidStateAccess(
                f"cannot {action} while session is {self.state.value}"
            )

    def _build_question(self, entry: VocabularyEntry, vocabulary: Sequence[VocabularyEntry]) -> Question:
        cfg = self.configuration
        prompt = field_value(entry, cfg.question_field)
        correct = field_value(entry, cfg.answer_field)
        distractors = build_distractors(
            vocabulary,
            correct,
            cfg.answer_field,
            count=self.choice_count - 1,
            require_ideographic=cfg.requires_ideographic,
            rng=self.rng,
        )
        choices = build_choices(correct, distractors, self.rng)
        return Question(
            entry=entry,
            prompt_value=prompt,
            correct_value=correct,
            choices=tuple(choices),
        )

    def start(self, configuration: QuizConfiguration, vocabulary_pool: Sequence[VocabularyEntry]) -> None:
        """Draw the questions for *configuration* and enter the quiz.

        Distractors come from the whole *vocabulary_pool*, not only the
        selected chapters.  Raises EmptySelectionError (leaving the session
        in the configuring state) when nothing is eligible.
        """
        self._require(SessionState.CONFIGURING, "start")

        filtered = eligible_entries(configuration, vocabulary_pool)
        if not filtered:
            raise EmptySelectionError(
                "No vocabulary found for the selected chapters. Please choose other chapters."
            )

        self.configuration = configuration
        self.pool = filtered
        shuffle(filtered, self.rng)
        picked = filtered[: min(configuration.question_count, len(filtered))]
        self.questions = [self._build_question(e, vocabulary_pool) for e in picked]
        self.current_index = 0
        self.score = 0
        self.state = SessionState.IN_PROGRESS
        _log.info(
            "Quiz started: %d questions (%s -> %s) from %d eligible entries",
            len(self.questions),
            configuration.question_field.value,
            configuration.answer_field.value,
            len(filtered),
        )

    def current_question(self) -> Question:
        self._require(SessionState.IN_PROGRESS, "read the current question")
        return self.questions[self.current_index]

    def submit_answer(self, chosen_value: str) -> AnswerOutcome:
        """Score *chosen_value* against the current question.

        Only the first answer counts; repeated submissions return the outcome
        already recorded.
        """
        q = self.current_question()
        if not q.is_answered:
            if chosen_value not in q.choices:
                raise ValueError(f"{chosen_value!r} is not one of the choices")
            q.answered_choice = chosen_value
            q.is_correct = chosen_value == q.correct_value
            if q.is_correct:
                self.score += 1
            _log.debug(
                "Q%d answered %r (%s)",
                self.current_index + 1, chosen_value,
                "correct" if q.is_correct else "wrong",
            )
        return AnswerOutcome(
            is_correct=bool(q.is_correct),
            chosen_value=q.answered_choice,
            correct_value=q.correct_value,
            entry=q.entry,
            score=self.score,
        )

    def advance(self) -> None:
        self._require(SessionState.IN_PROGRESS, "advance")
        self.current_index += 1
        if self.current_index >= len(self.questions):
            self.state = SessionState.FINISHED
            _log.info("Quiz finished: %d / %d", self.score, len(self.questions))

    def result(self) -> QuizResult:
        self._require(SessionState.FINISHED, "read the result")
        return QuizResult(score=self.score, total=len(self.questions))

    def progress(self) -> dict:
        total = len(self.questions)
        return {
            "current": min(self.current_index + 1, total),
            "total": total,
            "score": self.score,
            "answered": sum(1 for q in self.questions if q.is_answered),
        }

    @property
    def is_finished(self) -> bool:
        return self.state is SessionState.FINISHED


def start_quiz(
    configuration: QuizConfiguration,
    vocabulary_pool: Sequence[VocabularyEntry],
    rng: random.Random | None = None,
    choice_count: int = DEFAULT_CHOICE_COUNT,
) -> QuizSession:
    session = QuizSession(rng=rng, choice_count=choice_count)
    session.start(configuration, vocabulary_pool)
    return session
