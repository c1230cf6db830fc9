from dataclasses import replace
import random

import pytest

from trivia_app.constants.game_constants import ROOM_ID_ALPHABET, ROOM_ID_LENGTH
from trivia_app.core.models import GameState, SessionState
from trivia_app.core.outcome import NoOpReason
from trivia_app.core.services.room_manager import RoomManager


@pytest.fixture()
def manager():
    return RoomManager(random.Random(42))


def _as(state, user):
    """Switch the signed-in user without touching the lobby."""
    return replace(state, current_user=user, is_authenticated=True, active_room_id=None)


def test_create_room_requires_user(manager):
    state = SessionState()
    outcome = manager.create_room(state, "Eco", 4, False)
    assert outcome.reason is NoOpReason.NOT_AUTHENTICATED
    assert outcome.state.available_rooms == []


def test_create_room_seeds_creator(manager, alice):
    outcome = manager.create_room(SessionState(current_user=alice, is_authenticated=True), "Eco", 4, True)

    assert outcome.applied
    room = outcome.state.current_room
    assert room.players == (alice,)
    assert room.scores == {alice.id: 0}
    assert room.game_state is GameState.WAITING
    assert room.question_index == 0
    assert room.time_remaining == 0
    assert room.is_private is True
    assert len(room.id) == ROOM_ID_LENGTH
    assert set(room.id) <= set(ROOM_ID_ALPHABET)
    assert outcome.state.available_rooms == [room]


def test_create_room_rejects_zero_capacity(manager, alice):
    with pytest.raises(ValueError):
        manager.create_room(SessionState(current_user=alice), "Empty", 0, False)


def test_room_ids_are_unique(manager, alice):
    state = SessionState(current_user=alice, is_authenticated=True)
    for index in range(20):
        state = manager.create_room(state, f"Room {index}", 4, False).state
    assert len(state.rooms) == 20


def test_join_room_adds_player_and_score(manager, alice, bob):
    state = manager.create_room(SessionState(current_user=alice), "Eco", 4, False).state
    room_id = state.active_room_id

    outcome = manager.join_room(_as(state, bob), room_id)

    assert outcome.applied
    room = outcome.state.current_room
    assert room.id == room_id
    assert room.players == (alice, bob)
    assert room.scores == {alice.id: 0, bob.id: 0}
    assert outcome.state.rooms[room_id] is room


def test_join_room_never_exceeds_capacity(manager, alice, bob, carol):
    state = manager.create_room(SessionState(current_user=alice), "Pair", 2, False).state
    room_id = state.active_room_id
    state = manager.join_room(_as(state, bob), room_id).state
    full_state = _as(state, carol)

    outcome = manager.join_room(full_state, room_id)

    assert outcome.reason is NoOpReason.ROOM_FULL
    assert outcome.state is full_state
    assert len(outcome.state.rooms[room_id].players) == 2


def test_join_unknown_room(manager, alice):
    state = SessionState(current_user=alice)
    outcome = manager.join_room(state, "missing00")
    assert outcome.reason is NoOpReason.ROOM_NOT_FOUND
    assert outcome.state is state


def test_join_requires_user(manager, alice):
    state = manager.create_room(SessionState(current_user=alice), "Eco", 4, False).state
    anonymous = replace(state, current_user=None, active_room_id=None)
    outcome = manager.join_room(anonymous, state.active_room_id)
    assert outcome.reason is NoOpReason.NOT_AUTHENTICATED


def test_join_same_room_twice_is_rejected(manager, alice):
    state = manager.create_room(SessionState(current_user=alice), "Eco", 4, False).state
    outcome = manager.join_room(state, state.active_room_id)
    assert outcome.reason is NoOpReason.ALREADY_IN_ROOM
    assert outcome.state.current_room.players == (alice,)


def test_leave_room_removes_player_but_keeps_score(manager, alice, bob):
    state = manager.create_room(SessionState(current_user=alice), "Eco", 4, False).state
    room_id = state.active_room_id
    state = manager.join_room(_as(state, bob), room_id).state

    outcome = manager.leave_room(state)

    assert outcome.applied
    assert outcome.state.current_room is None
    assert outcome.state.current_question is None
    assert outcome.state.player_answers == ()
    assert outcome.state.show_results is False
    lobby_room = outcome.state.rooms[room_id]
    assert lobby_room.players == (alice,)
    assert bob.id in lobby_room.scores


def test_leave_room_is_idempotent(manager, alice):
    state = manager.create_room(SessionState(current_user=alice), "Eco", 4, False).state
    state = replace(state, show_results=True)

    once = manager.leave_room(state)
    twice = manager.leave_room(once.state)

    assert once.applied
    assert twice.reason is NoOpReason.NO_ACTIVE_ROOM
    assert twice.state == once.state


def test_switching_rooms_leaves_previous_roster(manager, alice):
    state = manager.create_room(SessionState(current_user=alice), "First", 4, False).state
    first_id = state.active_room_id

    state = manager.create_room(state, "Second", 4, False).state

    assert state.active_room_id != first_id
    assert state.rooms[first_id].players == ()
    assert state.current_room.players == (alice,)


def test_rejoin_reactivates_room_still_listing_user(manager, alice, bob):
    state = manager.create_room(SessionState(current_user=alice), "Eco", 4, False).state
    room_id = state.active_room_id
    state = manager.join_room(_as(state, bob), room_id).state
    state = manager.leave_room(state).state

    outcome = manager.join_room(_as(state, alice), room_id)

    assert outcome.applied
    assert outcome.state.active_room_id == room_id
    assert outcome.state.current_room.players == (alice,)
    assert outcome.state.current_room.scores == {alice.id: 0, bob.id: 0}


def test_rejoin_keeps_score(manager, alice):
    state = manager.create_room(SessionState(current_user=alice), "Eco", 4, False).state
    room = state.current_room
    scored = replace(room, scores={alice.id: 140})
    signed_back_in = _as(replace(state, rooms={room.id: scored}), alice)

    outcome = manager.join_room(signed_back_in, room.id)

    assert outcome.applied
    assert outcome.state.current_room.scores[alice.id] == 140


def test_room_maps_are_read_only(manager, alice):
    room = manager.create_room(SessionState(current_user=alice), "Eco", 4, False).state.current_room

    with pytest.raises(TypeError):
        room.scores[alice.id] = 500
    with pytest.raises(TypeError):
        room.display_names[alice.id] = "Mallory"
    assert room.scores == {alice.id: 0}
    assert hash(room) == hash(replace(room, name="Renamed"))


def test_departed_players_keep_display_name(manager, alice, bob):
    state = manager.create_room(SessionState(current_user=alice), "Eco", 4, False).state
    room_id = state.active_room_id
    state = manager.join_room(_as(state, bob), room_id).state
    state = manager.leave_room(state).state

    room = state.rooms[room_id]
    assert room.players == (alice,)
    assert room.display_names == {alice.id: "Alice", bob.id: "Bob"}
