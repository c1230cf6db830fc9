"""Service for creating, joining and leaving game rooms."""

from __future__ import annotations

from dataclasses import replace
import random

from trivia_app.constants.game_constants import ROOM_ID_ALPHABET, ROOM_ID_LENGTH
from trivia_app.core.models import GameRoom, GameState, SessionState
from trivia_app.core.outcome import NoOpReason, Outcome, applied, skipped


class RoomManager:
    """Maintains the lobby, room rosters and per-player score maps."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._id_rng = rng or random.Random()

    def create_room(
        self,
        state: SessionState,
        name: str,
        max_players: int,
        is_private: bool,
    ) -> Outcome:
        """Open a new room with the current user as its first player."""
        user = state.current_user
        if user is None:
            return skipped(state, NoOpReason.NOT_AUTHENTICATED)
        if max_players < 1:
            raise ValueError("A room must allow at least one player.")

        state = self.detach(state)
        room = GameRoom(
            id=self._next_room_id(state),
            name=name,
            players=(user,),
            max_players=max_players,
            is_private=is_private,
            game_state=GameState.WAITING,
            question_index=0,
            time_remaining=0,
            scores={user.id: 0},
        )
        rooms = {**state.rooms, room.id: room}
        return applied(replace(state, rooms=rooms, active_room_id=room.id))

    def join_room(self, state: SessionState, room_id: str) -> Outcome:
        """Add the current user to a lobby room and make it the active room."""
        user = state.current_user
        if user is None:
            return skipped(state, NoOpReason.NOT_AUTHENTICATED)
        room = state.rooms.get(room_id)
        if room is None:
            return skipped(state, NoOpReason.ROOM_NOT_FOUND)
        if room.has_player(user.id):
            if state.active_room_id == room_id:
                return skipped(state, NoOpReason.ALREADY_IN_ROOM)
            # Still on the roster from an earlier sign-in: reactivate without re-seeding.
            state = self.detach(state)
            return applied(replace(state, active_room_id=room_id))
        if room.is_full():
            return skipped(state, NoOpReason.ROOM_FULL)

        state = self.detach(state)
        joined = replace(
            room,
            players=(*room.players, user),
            scores={**room.scores, user.id: 0},
        )
        rooms = {**state.rooms, room_id: joined}
        return applied(replace(state, rooms=rooms, active_room_id=room_id))

    def leave_room(self, state: SessionState) -> Outcome:
        """Leave the active room; calling it again changes nothing."""
        had_room = state.current_room is not None
        state = self.detach(state)
        if not had_room:
            return skipped(state, NoOpReason.NO_ACTIVE_ROOM)
        return applied(state)

    def detach(self, state: SessionState) -> SessionState:
        """Drop the current user from the active room and clear per-room session data.

        The user's score entry stays in the room as a past player.
        """
        rooms = state.rooms
        room = state.current_room
        user = state.current_user
        if room is not None and user is not None and room.has_player(user.id):
            remaining = tuple(player for player in room.players if player.id != user.id)
            rooms = {**rooms, room.id: replace(room, players=remaining)}
        return replace(
            state,
            rooms=rooms,
            active_room_id=None,
            current_question=None,
            player_answers=(),
            show_results=False,
        )

    def _next_room_id(self, state: SessionState) -> str:
        while True:
            room_id = "".join(self._id_rng.choices(ROOM_ID_ALPHABET, k=ROOM_ID_LENGTH))
            if room_id not in state.rooms:
                return room_id
