"""Read-only question catalogue queried by the question selector."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import replace
from pathlib import Path
from threading import Lock
from typing import Protocol

from trivia_app.constants.game_constants import DIFFICULTIES
from trivia_app.core.catalogue_importer import load_questions_from_file
from trivia_app.core.models import Question

DEFAULT_CATALOGUE_PATH = Path(__file__).resolve().parent.parent.parent / "data" / "eco_questions.txt"

QuestionPredicate = Callable[[Question], bool]


class QuestionRepository(Protocol):
    """Anything that can answer filter queries over questions."""

    def query_questions(self, predicate: QuestionPredicate) -> list[Question]:
        ...


class QuestionCatalogue:
    """Lazily loaded, validated collection of quiz questions."""

    def __init__(
        self,
        questions: Iterable[Question] | None = None,
        source_path: Path | None = None,
    ) -> None:
        self._lock = Lock()
        self._source_path = source_path or DEFAULT_CATALOGUE_PATH
        self._question_counter: int = 0
        self._questions: list[Question] | None = None
        if questions is not None:
            self._questions = [self._prepare_question(q) for q in questions]

    def query_questions(self, predicate: QuestionPredicate) -> list[Question]:
        """Return every question matching ``predicate`` in catalogue order."""
        return [question for question in self._ensure_loaded() if predicate(question)]

    def get_questions(self) -> list[Question]:
        return list(self._ensure_loaded())

    def get_question_count(self) -> int:
        return len(self._ensure_loaded())

    def categories(self) -> set[str]:
        return {question.category for question in self._ensure_loaded()}

    def _ensure_loaded(self) -> list[Question]:
        with self._lock:
            if self._questions is None:
                loaded = load_questions_from_file(self._source_path)
                self._questions = [self._prepare_question(q) for q in loaded]
            return self._questions

    def _prepare_question(self, question: Question) -> Question:
        """Validate and normalize a question before storage."""
        prompt = question.prompt.strip()
        if not prompt:
            raise ValueError("Question prompt must not be empty.")

        options = tuple(option.strip() for option in question.options)
        if len(options) < 2:
            raise ValueError("Each question must have at least two options.")
        if any(not option for option in options):
            raise ValueError("Option text cannot be empty.")
        if not 0 <= question.correct_answer < len(options):
            raise ValueError(
                f"Correct answer index must be between 0 and {len(options) - 1}."
            )
        if question.difficulty not in DIFFICULTIES:
            raise ValueError(f"Unknown difficulty '{question.difficulty}'.")
        if not question.category.strip():
            raise ValueError("Question category must not be empty.")
        if question.points <= 0:
            raise ValueError("Question points must be a positive integer.")

        return replace(
            question,
            id=self._next_question_id(),
            prompt=prompt,
            options=options,
            category=question.category.strip().lower(),
        )

    def _next_question_id(self) -> int:
        self._question_counter += 1
        return self._question_counter
