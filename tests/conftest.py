import random

import pytest

from trivia_app.core.models import Question, User
from trivia_app.core.services.question_catalogue import QuestionCatalogue
from trivia_app.core.session_store import SessionStore


def _question(prompt, category, difficulty, points, correct=1):
    return Question(
        id=0,
        prompt=prompt,
        options=("First", "Second", "Third", "Fourth"),
        correct_answer=correct,
        category=category,
        difficulty=difficulty,
        points=points,
    )


@pytest.fixture()
def questions():
    return [
        _question("Glass jar bin?", "recycling", "easy", 100),
        _question("Resin codes?", "recycling", "hard", 200, correct=3),
        _question("Renewable source?", "energy", "easy", 100, correct=2),
        _question("LED savings?", "energy", "medium", 150, correct=0),
        _question("Eutrophication?", "pollution", "hard", 200),
        _question("Red List?", "conservation", "medium", 150),
    ]


@pytest.fixture()
def catalogue(questions):
    return QuestionCatalogue(questions)


@pytest.fixture()
def store(catalogue):
    return SessionStore(repository=catalogue, rng=random.Random(7))


@pytest.fixture()
def alice():
    return User(id="u-alice", display_name="Alice")


@pytest.fixture()
def bob():
    return User(id="u-bob", display_name="Bob")


@pytest.fixture()
def carol():
    return User(id="u-carol", display_name="Carol")
