"""Service for choosing which questions a game session plays."""

from __future__ import annotations

import random

from trivia_app.constants.game_constants import MIXED_DIFFICULTY
from trivia_app.core.models import GameSettings, Question
from trivia_app.core.services.question_catalogue import QuestionRepository


class QuestionSelector:
    """Filters the repository by settings and shuffles the eligible questions.

    Every call re-filters and reshuffles. The eligible set is fixed for a
    given ``GameSettings`` but the order is drawn again on each request, so a
    question may come up more than once in one session.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._shuffle_rng = rng or random.Random()

    def set_seed(self, seed: int | None) -> None:
        self._shuffle_rng.seed(seed)

    def filter(self, settings: GameSettings, repository: QuestionRepository) -> list[Question]:
        def matches(question: Question) -> bool:
            if settings.difficulty != MIXED_DIFFICULTY and question.difficulty != settings.difficulty:
                return False
            return question.category in settings.categories

        return repository.query_questions(matches)

    def shuffled(self, settings: GameSettings, repository: QuestionRepository) -> list[Question]:
        questions = list(self.filter(settings, repository))
        self._shuffle_rng.shuffle(questions)
        return questions

    def select(self, settings: GameSettings, repository: QuestionRepository) -> list[Question]:
        """Return a shuffled selection of at most ``questions_per_game`` questions."""
        return self.shuffled(settings, repository)[: settings.questions_per_game]

    def question_at(
        self,
        settings: GameSettings,
        repository: QuestionRepository,
        index: int,
    ) -> Question | None:
        """Reshuffle and pick the question for ``index``, wrapping around the pool."""
        questions = self.shuffled(settings, repository)
        if not questions:
            return None
        return questions[index % len(questions)]
