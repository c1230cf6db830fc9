"""Service driving a room through waiting, playing and finished."""

from __future__ import annotations

from dataclasses import replace

from trivia_app.core.models import GameState, SessionState
from trivia_app.core.outcome import NoOpReason, Outcome, applied, skipped
from trivia_app.core.services.question_catalogue import QuestionRepository
from trivia_app.core.services.question_selector import QuestionSelector


class GameLifecycle:
    """Starts, advances and finishes the game in the active room."""

    def __init__(self, selector: QuestionSelector, repository: QuestionRepository) -> None:
        self._selector = selector
        self._repository = repository

    def start(self, state: SessionState) -> Outcome:
        """Begin the game, or restart it from the first question while playing."""
        room = state.current_room
        if room is None:
            return skipped(state, NoOpReason.NO_ACTIVE_ROOM)
        if room.game_state is GameState.FINISHED:
            return skipped(state, NoOpReason.GAME_FINISHED)

        settings = state.game_settings
        selected = self._selector.select(settings, self._repository)
        started = replace(
            room,
            game_state=GameState.PLAYING,
            question_index=0,
            time_remaining=settings.time_per_question,
        )
        return applied(
            replace(
                state,
                rooms={**state.rooms, room.id: started},
                current_question=selected[0] if selected else None,
                player_answers=(),
            )
        )

    def advance(self, state: SessionState) -> Outcome:
        """Move to the next question, or finish after the last one."""
        room = state.current_room
        if room is None:
            return skipped(state, NoOpReason.NO_ACTIVE_ROOM)
        if room.game_state is GameState.FINISHED:
            return skipped(state, NoOpReason.GAME_FINISHED)

        settings = state.game_settings
        next_index = room.question_index + 1
        if next_index >= settings.questions_per_game:
            return self.finish(state)

        question = self._selector.question_at(settings, self._repository, next_index)
        advanced = replace(
            room,
            question_index=next_index,
            time_remaining=settings.time_per_question,
        )
        return applied(
            replace(
                state,
                rooms={**state.rooms, room.id: advanced},
                current_question=question,
                show_results=False,
            )
        )

    def finish(self, state: SessionState) -> Outcome:
        room = state.current_room
        if room is None:
            return skipped(state, NoOpReason.NO_ACTIVE_ROOM)
        if room.game_state is GameState.FINISHED:
            return skipped(state, NoOpReason.GAME_FINISHED)

        finished = replace(room, game_state=GameState.FINISHED)
        return applied(
            replace(
                state,
                rooms={**state.rooms, room.id: finished},
                current_question=None,
                show_results=True,
            )
        )
