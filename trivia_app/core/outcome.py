"""Transition results distinguishing state changes from no-ops."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from trivia_app.core.models import SessionState


class NoOpReason(str, Enum):
    """Why a transition left the state untouched."""

    NOT_AUTHENTICATED = "not_authenticated"
    NO_ACTIVE_ROOM = "no_active_room"
    NO_ACTIVE_QUESTION = "no_active_question"
    ROOM_NOT_FOUND = "room_not_found"
    ROOM_FULL = "room_full"
    ALREADY_IN_ROOM = "already_in_room"
    GAME_FINISHED = "game_finished"


@dataclass(slots=True, frozen=True)
class Outcome:
    """New state plus the reason nothing happened, if nothing did."""

    state: SessionState
    reason: NoOpReason | None = None

    @property
    def applied(self) -> bool:
        return self.reason is None


def applied(state: SessionState) -> Outcome:
    return Outcome(state=state)


def skipped(state: SessionState, reason: NoOpReason) -> Outcome:
    return Outcome(state=state, reason=reason)
