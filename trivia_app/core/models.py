"""Domain models for the trivia session engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from trivia_app.constants.game_constants import (
    DEFAULT_CATEGORIES,
    DEFAULT_QUESTIONS_PER_GAME,
    DEFAULT_TIME_PER_QUESTION_SECONDS,
    MIXED_DIFFICULTY,
)


class GameState(str, Enum):
    """Lifecycle phase of a room. Only moves forward."""

    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


@dataclass(slots=True, frozen=True)
class User:
    """An already-authenticated participant."""

    id: str
    display_name: str


@dataclass(slots=True, frozen=True)
class Question:
    """Multiple-choice quiz item tagged with category and difficulty."""

    id: int
    prompt: str
    options: tuple[str, ...]
    correct_answer: int
    category: str
    difficulty: str
    points: int


@dataclass(slots=True, frozen=True)
class PlayerAnswer:
    """A scored response, created once per submission."""

    player_id: str
    question_id: int
    answer_index: int
    time_spent: float
    is_correct: bool
    points: float


@dataclass(slots=True, frozen=True)
class GameRoom:
    """A play session instance in the lobby.

    ``scores`` and ``display_names`` are keyed by user id and keep entries for
    players who have left. Both are stored as read-only mapping views.
    """

    id: str
    name: str
    players: tuple[User, ...]
    max_players: int
    is_private: bool
    game_state: GameState = GameState.WAITING
    question_index: int = 0
    time_remaining: int = 0
    scores: Mapping[str, float] = field(default_factory=dict)
    display_names: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "scores", MappingProxyType(dict(self.scores)))
        names = {player.id: player.display_name for player in self.players}
        object.__setattr__(self, "display_names", MappingProxyType({**self.display_names, **names}))

    def is_full(self) -> bool:
        return len(self.players) >= self.max_players

    def has_player(self, user_id: str) -> bool:
        return any(player.id == user_id for player in self.players)

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(slots=True, frozen=True)
class GameSettings:
    """Session configuration applied when a game starts or advances."""

    questions_per_game: int = DEFAULT_QUESTIONS_PER_GAME
    time_per_question: int = DEFAULT_TIME_PER_QUESTION_SECONDS
    difficulty: str = MIXED_DIFFICULTY
    categories: frozenset[str] = frozenset(DEFAULT_CATEGORIES)


@dataclass(slots=True, frozen=True)
class SessionState:
    """The canonical state record owned by the session store.

    ``rooms`` is the lobby, keyed by room id in creation order. The active
    room is referenced by id only, so every room exists exactly once.
    """

    current_user: User | None = None
    is_authenticated: bool = False
    rooms: dict[str, GameRoom] = field(default_factory=dict)
    active_room_id: str | None = None
    current_question: Question | None = None
    player_answers: tuple[PlayerAnswer, ...] = ()
    game_settings: GameSettings = field(default_factory=GameSettings)
    is_loading: bool = False
    error: str | None = None
    show_results: bool = False

    @property
    def current_room(self) -> GameRoom | None:
        if self.active_room_id is None:
            return None
        return self.rooms.get(self.active_room_id)

    @property
    def available_rooms(self) -> list[GameRoom]:
        return list(self.rooms.values())
