"""Holder of the session state record and entry point for every action."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import fields, replace
import logging
import random
from threading import Lock
from typing import Any

from trivia_app.constants.game_constants import DIFFICULTIES, MIXED_DIFFICULTY
from trivia_app.core.models import GameRoom, GameSettings, SessionState, User
from trivia_app.core.outcome import Outcome, applied
from trivia_app.core.services.game_lifecycle import GameLifecycle
from trivia_app.core.services.question_catalogue import QuestionCatalogue, QuestionRepository
from trivia_app.core.services.question_selector import QuestionSelector
from trivia_app.core.services.room_manager import RoomManager
from trivia_app.core.services.scoring_engine import LeaderboardRow, ScoringEngine

logger = logging.getLogger(__name__)

_SETTINGS_FIELDS = frozenset(f.name for f in fields(GameSettings))


class SessionStore:
    """Facade over the room, selection, scoring and lifecycle services.

    Each action reads the current record, runs one transition and replaces
    the record with the result. Actions never raise for unmet preconditions;
    they return an ``Outcome`` whose ``reason`` says why nothing changed.
    """

    def __init__(
        self,
        repository: QuestionRepository | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._lock = Lock()
        self._state = SessionState()

        rng = rng or random.Random()
        self._repository = repository if repository is not None else QuestionCatalogue()
        self._selector = QuestionSelector(rng)
        self._rooms = RoomManager(rng)
        self._scoring = ScoringEngine()
        self._lifecycle = GameLifecycle(self._selector, self._repository)

    # --- Reads ---

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def current_room(self) -> GameRoom | None:
        return self.state.current_room

    @property
    def available_rooms(self) -> list[GameRoom]:
        return self.state.available_rooms

    def leaderboard(self, limit: int | None = None) -> list[LeaderboardRow]:
        state = self.state
        room = state.current_room
        if room is None:
            return []
        if limit is None:
            return self._scoring.leaderboard(room, state.player_answers, limit=len(room.scores))
        return self._scoring.leaderboard(room, state.player_answers, limit=limit)

    # --- Identity ---

    def set_user(self, user: User) -> Outcome:
        return self._dispatch(
            "set_user", lambda state: applied(replace(state, current_user=user, is_authenticated=True))
        )

    def logout(self) -> Outcome:
        def transition(state: SessionState) -> Outcome:
            detached = self._rooms.detach(state)
            return applied(replace(detached, current_user=None, is_authenticated=False))

        return self._dispatch("logout", transition)

    # --- Rooms ---

    def create_room(self, name: str, max_players: int, is_private: bool) -> Outcome:
        return self._dispatch(
            "create_room",
            lambda state: self._rooms.create_room(state, name, max_players, is_private),
        )

    def join_room(self, room_id: str) -> Outcome:
        return self._dispatch("join_room", lambda state: self._rooms.join_room(state, room_id))

    def leave_room(self) -> Outcome:
        return self._dispatch("leave_room", self._rooms.leave_room)

    # --- Game lifecycle ---

    def start_game(self) -> Outcome:
        return self._dispatch("start_game", self._lifecycle.start)

    def submit_answer(self, answer_index: int, time_spent: float) -> Outcome:
        return self._dispatch(
            "submit_answer",
            lambda state: self._scoring.record_answer(state, answer_index, time_spent),
        )

    def next_question(self) -> Outcome:
        return self._dispatch("next_question", self._lifecycle.advance)

    def end_game(self) -> Outcome:
        return self._dispatch("end_game", self._lifecycle.finish)

    # --- Settings & UI ---

    def set_game_settings(self, **changes: Any) -> Outcome:
        """Shallow-merge ``changes`` into the current settings."""
        unknown = set(changes) - _SETTINGS_FIELDS
        if unknown:
            raise ValueError(f"Unknown game settings: {', '.join(sorted(unknown))}")
        if "categories" in changes:
            changes["categories"] = frozenset(changes["categories"])

        def transition(state: SessionState) -> Outcome:
            merged = replace(state.game_settings, **changes)
            _validate_settings(merged)
            return applied(replace(state, game_settings=merged))

        return self._dispatch("set_game_settings", transition)

    def set_error(self, error: str | None) -> Outcome:
        return self._dispatch("set_error", lambda state: applied(replace(state, error=error)))

    def set_loading(self, loading: bool) -> Outcome:
        return self._dispatch("set_loading", lambda state: applied(replace(state, is_loading=loading)))

    def set_shuffle_seed(self, seed: int | None) -> None:
        with self._lock:
            self._selector.set_seed(seed)

    def _dispatch(self, action: str, transition: Callable[[SessionState], Outcome]) -> Outcome:
        with self._lock:
            outcome = transition(self._state)
            self._state = outcome.state
        if outcome.applied:
            logger.info("%s applied", action)
        else:
            logger.debug("%s skipped: %s", action, outcome.reason.value)
        return outcome


def _validate_settings(settings: GameSettings) -> None:
    if settings.questions_per_game <= 0:
        raise ValueError("questions_per_game must be a positive integer.")
    if settings.time_per_question <= 0:
        raise ValueError("time_per_question must be a positive integer.")
    if settings.difficulty != MIXED_DIFFICULTY and settings.difficulty not in DIFFICULTIES:
        raise ValueError(
            f"difficulty must be one of {', '.join((*DIFFICULTIES, MIXED_DIFFICULTY))}."
        )
