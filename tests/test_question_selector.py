import random

import pytest

from trivia_app.core.models import GameSettings
from trivia_app.core.services.question_selector import QuestionSelector


class CountingRepository:
    """Wraps a catalogue and counts queries."""

    def __init__(self, catalogue):
        self._catalogue = catalogue
        self.calls = 0

    def query_questions(self, predicate):
        self.calls += 1
        return self._catalogue.query_questions(predicate)


@pytest.fixture()
def selector():
    return QuestionSelector(random.Random(1))


def _prompts(questions):
    return sorted(q.prompt for q in questions)


def test_mixed_difficulty_filters_only_by_category(selector, catalogue):
    settings = GameSettings(difficulty="mixed", categories=frozenset({"recycling", "energy"}))
    result = selector.filter(settings, catalogue)
    assert _prompts(result) == sorted(
        ["Glass jar bin?", "Resin codes?", "Renewable source?", "LED savings?"]
    )


def test_exact_difficulty_and_category_intersection(selector, catalogue):
    settings = GameSettings(difficulty="easy", categories=frozenset({"recycling", "energy", "pollution"}))
    result = selector.filter(settings, catalogue)
    assert _prompts(result) == ["Glass jar bin?", "Renewable source?"]


def test_select_truncates_to_questions_per_game(selector, catalogue):
    settings = GameSettings(questions_per_game=2)
    selected = selector.select(settings, catalogue)
    assert len(selected) == 2
    assert set(selected) <= set(catalogue.get_questions())


def test_select_returns_whole_pool_when_smaller_than_request(selector, catalogue):
    selected = selector.select(GameSettings(questions_per_game=50), catalogue)
    assert _prompts(selected) == _prompts(catalogue.get_questions())


def test_empty_pool_yields_no_question(selector, catalogue):
    settings = GameSettings(categories=frozenset({"ocean-acidification"}))
    assert selector.select(settings, catalogue) == []
    assert selector.question_at(settings, catalogue, 3) is None


def test_seeded_selectors_agree(catalogue):
    settings = GameSettings()
    first = QuestionSelector(random.Random(99)).select(settings, catalogue)
    second = QuestionSelector(random.Random(99)).select(settings, catalogue)
    assert first == second


def test_set_seed_restarts_sequence(selector, catalogue):
    settings = GameSettings()
    selector.set_seed(5)
    first = selector.select(settings, catalogue)
    selector.set_seed(5)
    assert selector.select(settings, catalogue) == first


def test_ordering_is_not_fixed_to_catalogue_order(catalogue):
    settings = GameSettings()
    catalogue_order = catalogue.get_questions()
    orderings = [QuestionSelector(random.Random(seed)).select(settings, catalogue) for seed in range(20)]
    assert any(ordering != catalogue_order for ordering in orderings)


def test_question_at_wraps_around_pool(selector, catalogue):
    settings = GameSettings(categories=frozenset({"pollution"}))
    question = selector.question_at(settings, catalogue, 7)
    assert question.prompt == "Eutrophication?"


def test_question_at_requeries_every_time(selector, catalogue):
    repository = CountingRepository(catalogue)
    settings = GameSettings()
    for index in range(4):
        assert selector.question_at(settings, repository, index) is not None
    assert repository.calls == 4
