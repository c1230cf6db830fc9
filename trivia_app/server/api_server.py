"""FastAPI server forwarding player intents to the session store."""

from __future__ import annotations

from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field
import uvicorn

from trivia_app.constants.about import APP_NAME, APP_VERSION
from trivia_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from trivia_app.core.markdown_renderer import renderer
from trivia_app.core.models import GameRoom, Question, SessionState, User
from trivia_app.core.outcome import Outcome
from trivia_app.core.session_store import SessionStore


class UserPayload(BaseModel):
    """Payload schema for signing in an already-authenticated user."""

    id: str | None = None
    display_name: str | None = None


class RoomPayload(BaseModel):
    name: str = Field(min_length=1)
    max_players: int = Field(default=4, ge=1)
    is_private: bool = False


class AnswerPayload(BaseModel):
    """Payload schema for submitted answers."""

    answer_index: int = Field(ge=0)
    time_spent: float = Field(ge=0)


class SettingsPayload(BaseModel):
    """Partial game settings; omitted fields keep their current value."""

    questions_per_game: int | None = None
    time_per_question: int | None = None
    difficulty: str | None = None
    categories: list[str] | None = None


class ErrorPayload(BaseModel):
    error: str | None = None


class LoadingPayload(BaseModel):
    loading: bool


def _get_session_store_dependency(store: SessionStore):
    def dependency() -> SessionStore:
        return store

    return dependency


def _require_applied(outcome: Outcome) -> SessionState:
    if not outcome.applied:
        raise HTTPException(status_code=409, detail=outcome.reason.value)
    return outcome.state


def _user_payload(user: User | None) -> dict[str, object] | None:
    if user is None:
        return None
    return {"id": user.id, "display_name": user.display_name}


def _room_payload(room: GameRoom) -> dict[str, object]:
    return {
        "id": room.id,
        "name": room.name,
        "players": [_user_payload(player) for player in room.players],
        "max_players": room.max_players,
        "is_private": room.is_private,
        "game_state": room.game_state.value,
        "question_index": room.question_index,
        "time_remaining": room.time_remaining,
        "scores": dict(room.scores),
    }


def _question_payload(question: Question | None, reveal_answer: bool) -> dict[str, object] | None:
    if question is None:
        return None
    return {
        "id": question.id,
        "prompt": question.prompt,
        "prompt_html": renderer.render_fragment(question.prompt),
        "options": list(question.options),
        "options_html": [renderer.render_inline(option) for option in question.options],
        "category": question.category,
        "difficulty": question.difficulty,
        "points": question.points,
        # Only reveal the answer once results are showing.
        "correct_answer": question.correct_answer if reveal_answer else None,
    }


def _state_payload(state: SessionState) -> dict[str, object]:
    room = state.current_room
    settings = state.game_settings
    return {
        "current_user": _user_payload(state.current_user),
        "is_authenticated": state.is_authenticated,
        "current_room": _room_payload(room) if room is not None else None,
        "available_rooms": [
            _room_payload(r) for r in state.available_rooms if not r.is_private or r.id == state.active_room_id
        ],
        "current_question": _question_payload(state.current_question, state.show_results),
        "player_answers": [
            {
                "player_id": answer.player_id,
                "question_id": answer.question_id,
                "answer_index": answer.answer_index,
                "time_spent": answer.time_spent,
                "is_correct": answer.is_correct,
                "points": answer.points,
            }
            for answer in state.player_answers
        ],
        "game_settings": {
            "questions_per_game": settings.questions_per_game,
            "time_per_question": settings.time_per_question,
            "difficulty": settings.difficulty,
            "categories": sorted(settings.categories),
        },
        "is_loading": state.is_loading,
        "error": state.error,
        "show_results": state.show_results,
    }


def create_api_app(store: SessionStore) -> FastAPI:
    """Create a FastAPI application wired to the provided session store."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    store_dep = _get_session_store_dependency(store)

    @app.get("/state")
    def get_state(session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        return _state_payload(session.state)

    @app.post("/session", status_code=201)
    def sign_in(payload: UserPayload, session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        user_id = payload.id or uuid4().hex
        display_name = (payload.display_name or "").strip() or f"Player-{user_id[:6]}"
        user = User(id=user_id, display_name=display_name)
        return _state_payload(_require_applied(session.set_user(user)))

    @app.delete("/session")
    def sign_out(session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        return _state_payload(_require_applied(session.logout()))

    @app.get("/rooms")
    def list_rooms(session: SessionStore = Depends(store_dep)) -> list[dict[str, object]]:
        return [_room_payload(room) for room in session.available_rooms if not room.is_private]

    @app.post("/rooms", status_code=201)
    def create_room(payload: RoomPayload, session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        try:
            outcome = session.create_room(payload.name, payload.max_players, payload.is_private)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _state_payload(_require_applied(outcome))

    @app.post("/rooms/{room_id}/join")
    def join_room(room_id: str, session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        return _state_payload(_require_applied(session.join_room(room_id)))

    @app.post("/room/leave")
    def leave_room(session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        return _state_payload(_require_applied(session.leave_room()))

    @app.post("/game/start")
    def start_game(session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        return _state_payload(_require_applied(session.start_game()))

    @app.post("/game/answer", status_code=201)
    def submit_answer(payload: AnswerPayload, session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        state = _require_applied(session.submit_answer(payload.answer_index, payload.time_spent))
        answer = state.player_answers[-1]
        return {
            "question_id": answer.question_id,
            "is_correct": answer.is_correct,
            "points": answer.points,
            "score": state.current_room.scores.get(answer.player_id, 0),
        }

    @app.post("/game/next")
    def next_question(session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        return _state_payload(_require_applied(session.next_question()))

    @app.post("/game/end")
    def end_game(session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        return _state_payload(_require_applied(session.end_game()))

    @app.get("/game/leaderboard")
    def leaderboard(
        limit: int | None = Query(default=None, ge=1),
        session: SessionStore = Depends(store_dep),
    ) -> list[dict[str, object]]:
        return [
            {
                "player_id": row.player_id,
                "display_name": row.display_name,
                "score": row.score,
                "correct_answers": row.correct_answers,
                "total_answers": row.total_answers,
            }
            for row in session.leaderboard(limit)
        ]

    @app.patch("/settings")
    def update_settings(payload: SettingsPayload, session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        try:
            outcome = session.set_game_settings(**payload.model_dump(exclude_unset=True, exclude_none=True))
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _state_payload(_require_applied(outcome))

    @app.put("/ui/error")
    def set_error(payload: ErrorPayload, session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        return _state_payload(_require_applied(session.set_error(payload.error)))

    @app.put("/ui/loading")
    def set_loading(payload: LoadingPayload, session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        return _state_payload(_require_applied(session.set_loading(payload.loading)))

    return app


def run_api_server(
    store: SessionStore,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API in the foreground until interrupted."""
    app = create_api_app(store)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)
    server.run()
