"""Service for scoring answers and ranking players."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from trivia_app.constants.game_constants import (
    DEFAULT_LEADERBOARD_SIZE,
    TIME_BONUS_POINTS_PER_SECOND,
    TIME_BONUS_WINDOW_SECONDS,
)
from trivia_app.core.models import GameRoom, PlayerAnswer, Question, SessionState
from trivia_app.core.outcome import NoOpReason, Outcome, applied, skipped


@dataclass(slots=True)
class LeaderboardRow:
    """Immutable snapshot returned to consumers."""

    player_id: str
    display_name: str
    score: float
    correct_answers: int
    total_answers: int


def time_bonus(time_spent: float) -> float:
    """Bonus for answering inside the fixed reference window; never negative."""
    return max(0, (TIME_BONUS_WINDOW_SECONDS - time_spent) * TIME_BONUS_POINTS_PER_SECOND)


class ScoringEngine:
    """Evaluates answers against the active question and updates room scores."""

    def evaluate(
        self,
        question: Question,
        answer_index: int,
        time_spent: float,
        player_id: str,
    ) -> PlayerAnswer:
        is_correct = answer_index == question.correct_answer
        points = question.points + time_bonus(time_spent) if is_correct else 0
        return PlayerAnswer(
            player_id=player_id,
            question_id=question.id,
            answer_index=answer_index,
            time_spent=time_spent,
            is_correct=is_correct,
            points=points,
        )

    def record_answer(self, state: SessionState, answer_index: int, time_spent: float) -> Outcome:
        """Score the current user's answer and add it to the room totals."""
        user = state.current_user
        if user is None:
            return skipped(state, NoOpReason.NOT_AUTHENTICATED)
        question = state.current_question
        if question is None:
            return skipped(state, NoOpReason.NO_ACTIVE_QUESTION)
        room = state.current_room
        if room is None:
            return skipped(state, NoOpReason.NO_ACTIVE_ROOM)

        answer = self.evaluate(question, answer_index, time_spent, user.id)
        scores = {**room.scores, user.id: room.scores.get(user.id, 0) + answer.points}
        return applied(
            replace(
                state,
                rooms={**state.rooms, room.id: replace(room, scores=scores)},
                player_answers=(*state.player_answers, answer),
                show_results=True,
            )
        )

    def leaderboard(
        self,
        room: GameRoom,
        answers: Iterable[PlayerAnswer] = (),
        limit: int = DEFAULT_LEADERBOARD_SIZE,
    ) -> list[LeaderboardRow]:
        """Return the top ``limit`` players by score, then correct answers."""
        names = room.display_names
        correct: dict[str, int] = {}
        total: dict[str, int] = {}
        for answer in answers:
            total[answer.player_id] = total.get(answer.player_id, 0) + 1
            if answer.is_correct:
                correct[answer.player_id] = correct.get(answer.player_id, 0) + 1

        rows = [
            LeaderboardRow(
                player_id=player_id,
                display_name=names.get(player_id, player_id),
                score=score,
                correct_answers=correct.get(player_id, 0),
                total_answers=total.get(player_id, 0),
            )
            for player_id, score in room.scores.items()
        ]
        rows.sort(key=lambda row: (-row.score, -row.correct_answers, row.display_name))
        return rows[:limit]
