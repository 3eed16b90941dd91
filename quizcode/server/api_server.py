"""FastAPI server that exposes participant endpoints."""

from __future__ import annotations

import logging
import secrets
from threading import Thread

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import HTMLResponse
from pydantic import BaseModel
import uvicorn

from quizcode.constants.network_constants import (
    CLIENT_TOKEN_BYTES,
    CLIENT_TOKEN_COOKIE,
    DEFAULT_HOST,
    DEFAULT_PORT,
    IDENTITY_COOKIE,
    IDENTITY_COOKIE_MAX_AGE,
)
from quizcode.constants.quiz_constants import MAX_DISPLAY_NAME_LENGTH
from quizcode.core.errors import (
    DuplicateAnswerError,
    DuplicateParticipantError,
    InvalidTransitionError,
    NotAuthenticatedError,
    QuizNotFoundError,
    StoreError,
)
from quizcode.core.markdown_renderer import renderer
from quizcode.core.quiz_manager import QuizManager
from quizcode.core.services.identity import StaticIdentity
from quizcode.core.services.participation_session import ParticipationSession

logger = logging.getLogger(__name__)

_PARTICIPANT_PAGE_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>QuizCode</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>
      :root { font-family: 'Inter', system-ui, sans-serif; background: #eff6ff; color: #111827; }
      body { margin: 0; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; max-width: 42rem; margin-inline: auto; }
      .card { background: #fff; border-radius: 0.75rem; padding: 1.5rem; box-shadow: 0 0.5rem 1.5rem rgba(0, 0, 0, 0.08); }
      .hidden { display: none; }
      input { font-size: 1rem; padding: 0.6rem; border: 1px solid #d1d5db; border-radius: 0.5rem; width: 100%; box-sizing: border-box; margin-bottom: 0.75rem; }
      .primary-button { border: none; border-radius: 0.75rem; padding: 0.85rem 1.5rem; font-size: 1rem; background: #2563eb; color: #fff; cursor: pointer; }
      .primary-button:disabled { opacity: 0.6; cursor: not-allowed; }
      .options-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(180px, 1fr)); gap: 0.75rem; }
      .option-button { border: 1px solid #e5e7eb; border-radius: 0.75rem; padding: 1rem; font-size: 1rem; background: #fff; text-align: left; cursor: pointer; }
      .option-button:disabled { cursor: default; }
      .option-button.selected { outline: 2px solid #3b82f6; }
      .option-button.correct { background: #f0fdf4; border-color: #22c55e; }
      .option-button.incorrect { background: #fef2f2; border-color: #ef4444; }
      .meta { display: flex; justify-content: space-between; color: #4b5563; font-size: 0.9rem; margin-bottom: 1rem; }
      #status, #join-status { min-height: 1.25rem; color: #b91c1c; }
    </style>
  </head>
  <body>
    <section class="card" id="join-card">
      <h1>Join a Quiz</h1>
      <input id="name-input" maxlength="20" placeholder="Your name" />
      <input id="code-input" maxlength="6" placeholder="Enter 6-character code" />
      <button id="join-button" class="primary-button">Join Quiz</button>
      <p id="join-status"></p>
    </section>
    <section class="card hidden" id="waiting-card">
      <h2 id="quiz-title"></h2>
      <div id="quiz-description"></div>
      <p id="welcome"></p>
      <button id="start-button" class="primary-button">Start Quiz</button>
      <p id="start-status"></p>
    </section>
    <section class="card hidden" id="quiz-card">
      <div class="meta"><span id="progress"></span><span id="timer"></span></div>
      <div id="question-container"></div>
      <div id="options-container" class="options-grid"></div>
      <p id="status"></p>
    </section>
    <section class="card hidden" id="done-card">
      <h2>Quiz Completed!</h2>
      <p>Thank you for participating. Your results will be shown when the host ends the quiz.</p>
    </section>
    <script>
      const joinCard = document.getElementById('join-card');
      const waitingCard = document.getElementById('waiting-card');
      const quizCard = document.getElementById('quiz-card');
      const doneCard = document.getElementById('done-card');
      const nameInput = document.getElementById('name-input');
      const codeInput = document.getElementById('code-input');
      const joinStatus = document.getElementById('join-status');
      const startStatus = document.getElementById('start-status');
      const statusEl = document.getElementById('status');
      const optionsContainer = document.getElementById('options-container');
      let shareCode = null;
      let pollHandle = null;
      let renderedQuestionId = null;

      function show(card) {
        [joinCard, waitingCard, quizCard, doneCard].forEach(c => c.classList.toggle('hidden', c !== card));
      }

      const pathMatch = window.location.pathname.match(/\\/join\\/([A-Za-z0-9]+)/);
      if (pathMatch) { codeInput.value = pathMatch[1].toUpperCase(); }
      codeInput.addEventListener('input', () => {
        codeInput.value = codeInput.value.toUpperCase().replace(/[^A-Z0-9]/g, '');
      });

      async function loadIdentity() {
        const response = await fetch('/identity');
        const payload = await response.json();
        if (payload.display_name) { nameInput.value = payload.display_name; }
      }

      async function postJson(url, body) {
        const response = await fetch(url, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify(body || {})
        });
        const payload = await response.json().catch(() => ({}));
        return { ok: response.ok, payload };
      }

      function detailText(payload, fallback) {
        if (typeof payload.detail === 'string') return payload.detail;
        return fallback;
      }

      async function join() {
        joinStatus.textContent = '';
        if (!codeInput.value) { joinStatus.textContent = 'Please enter a quiz code'; return; }
        if (!nameInput.value.trim()) { joinStatus.textContent = 'Please enter your name'; return; }
        let result = await postJson('/identity', { display_name: nameInput.value });
        if (!result.ok) { joinStatus.textContent = detailText(result.payload, 'Invalid name'); return; }
        result = await postJson(`/quizzes/${codeInput.value}/session`);
        if (!result.ok) {
          // A started session cannot be joined again; resume it if it is ours.
          const resumed = await fetch(`/quizzes/${codeInput.value}/session`);
          if (!resumed.ok) { joinStatus.textContent = detailText(result.payload, 'Unable to join'); return; }
          result = { ok: true, payload: await resumed.json() };
        }
        shareCode = codeInput.value;
        document.getElementById('quiz-title').textContent = result.payload.quiz_title;
        document.getElementById('quiz-description').innerHTML = result.payload.quiz_description_html;
        document.getElementById('welcome').textContent = `Welcome, ${result.payload.display_name}! Click the button below when you're ready.`;
        render(result.payload);
        if (!pollHandle) { pollHandle = setInterval(refresh, 1000); }
      }

      async function start() {
        startStatus.textContent = '';
        const result = await postJson(`/quizzes/${shareCode}/session/start`);
        if (!result.ok) { startStatus.textContent = detailText(result.payload, 'Unable to start'); return; }
        render(result.payload);
      }

      async function refresh() {
        if (!shareCode) return;
        try {
          const response = await fetch(`/quizzes/${shareCode}/session`);
          if (response.ok) { render(await response.json()); }
        } catch (error) {
          console.error('Error refreshing session:', error);
        }
      }

      async function answer(optionId) {
        const result = await postJson(`/quizzes/${shareCode}/session/answer`, { option_id: optionId });
        if (!result.ok) { statusEl.textContent = detailText(result.payload, 'Unable to send answer.'); return; }
        render(result.payload);
      }

      function render(payload) {
        if (payload.status === 'waiting') { show(waitingCard); return; }
        if (payload.status === 'completed') {
          show(doneCard);
          clearInterval(pollHandle);
          return;
        }
        show(quizCard);
        const question = payload.question;
        document.getElementById('progress').textContent = `Question ${payload.question_index + 1} of ${payload.question_count}`;
        document.getElementById('timer').textContent = `${payload.time_remaining}s`;
        if (question.id !== renderedQuestionId) {
          renderedQuestionId = question.id;
          statusEl.textContent = '';
          document.getElementById('question-container').innerHTML = question.text_html;
        }
        optionsContainer.innerHTML = '';
        const correct = payload.correct_option_ids || [];
        question.options.forEach(option => {
          const button = document.createElement('button');
          button.className = 'option-button';
          button.innerHTML = option.text_html;
          button.disabled = !payload.accepts_input;
          if (option.id === payload.selected_option_id) button.classList.add('selected');
          if (payload.revealing && correct.includes(option.id)) button.classList.add('correct');
          if (payload.revealing && option.id === payload.selected_option_id && !correct.includes(option.id)) {
            button.classList.add('incorrect');
          }
          button.addEventListener('click', () => answer(option.id));
          optionsContainer.appendChild(button);
        });
        if (payload.revealing && !payload.selected_option_id) { statusEl.textContent = 'Time is up!'; }
      }

      document.getElementById('join-button').addEventListener('click', join);
      document.getElementById('start-button').addEventListener('click', start);
      loadIdentity();
    </script>
  </body>
</html>
"""


class IdentityPayload(BaseModel):
    """Payload schema for choosing a display name."""

    display_name: str


class AnswerPayload(BaseModel):
    """Payload schema for submitted answers."""

    option_id: str


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def _current_identity(request: Request) -> StaticIdentity:
    return StaticIdentity(
        request.cookies.get(IDENTITY_COOKIE),
        request.cookies.get(CLIENT_TOKEN_COOKIE),
    )


def _session_payload(session: ParticipationSession) -> dict[str, object]:
    state = session.state
    quiz = session.quiz
    question = session.get_current_question()
    payload: dict[str, object] = {
        "status": state.status.value,
        "display_name": session.display_name,
        "quiz_title": quiz.title,
        "quiz_description_html": renderer.render_fragment(quiz.description),
        "question_index": state.current_question_index,
        "question_count": len(quiz.questions),
        "time_remaining": state.time_remaining,
        "accepts_input": state.accepts_input,
        "revealing": state.revealing,
        "selected_option_id": state.selected_option_id,
        "answered_count": len(state.answers),
        "question": None,
        "correct_option_ids": None,
    }
    if question is not None:
        payload["question"] = {
            "id": question.id,
            "text_html": renderer.render_fragment(question.text),
            "time_limit_seconds": question.time_limit_seconds,
            "options": [
                {"id": option.id, "text_html": renderer.render_inline(option.text)}
                for option in question.options
            ],
        }
        # Only reveal the correct option once input for the question is closed.
        if state.revealing:
            payload["correct_option_ids"] = question.correct_option_ids()
    return payload


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title="QuizCode API", version="0.1.0")
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    @app.get("/", response_class=HTMLResponse)
    def serve_participant_page() -> str:
        return _PARTICIPANT_PAGE_HTML

    @app.get("/join/{code}", response_class=HTMLResponse)
    def serve_join_link(code: str) -> str:
        return _PARTICIPANT_PAGE_HTML

    @app.get("/identity")
    def get_identity(request: Request) -> dict[str, object]:
        return {"display_name": _current_identity(request).get_current_identity()}

    @app.post("/identity")
    def set_identity(payload: IdentityPayload, request: Request, response: Response) -> dict[str, object]:
        display_name = payload.display_name.strip()
        if not display_name:
            raise HTTPException(status_code=422, detail="Please enter your name")
        if len(display_name) > MAX_DISPLAY_NAME_LENGTH:
            raise HTTPException(
                status_code=422,
                detail=f"Names can be at most {MAX_DISPLAY_NAME_LENGTH} characters long",
            )
        response.set_cookie(
            key=IDENTITY_COOKIE,
            value=display_name,
            max_age=IDENTITY_COOKIE_MAX_AGE,
            samesite="lax",
            httponly=True,
        )
        # Sessions are bound to this token rather than to the display name.
        if not request.cookies.get(CLIENT_TOKEN_COOKIE):
            response.set_cookie(
                key=CLIENT_TOKEN_COOKIE,
                value=secrets.token_urlsafe(CLIENT_TOKEN_BYTES),
                max_age=IDENTITY_COOKIE_MAX_AGE,
                samesite="lax",
                httponly=True,
            )
        return {"display_name": display_name}

    @app.get("/quizzes/{code}")
    def get_quiz(code: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        try:
            quiz = manager.find_published_quiz(code)
        except QuizNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {
            "share_code": quiz.share_code,
            "title": quiz.title,
            "description_html": renderer.render_fragment(quiz.description),
            "question_count": len(quiz.questions),
        }

    @app.post("/quizzes/{code}/session", status_code=201)
    def join_quiz(
        code: str,
        request: Request,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            session = manager.join_quiz(code, _current_identity(request))
        except NotAuthenticatedError as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        except QuizNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except DuplicateParticipantError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _session_payload(session)

    @app.post("/quizzes/{code}/session/start")
    def start_quiz(
        code: str,
        request: Request,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        identity = _current_identity(request)
        try:
            manager.start_session(code, identity)
            session = manager.get_session(code, identity)
        except NotAuthenticatedError as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        except QuizNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except (DuplicateParticipantError, InvalidTransitionError) as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except StoreError as exc:
            raise HTTPException(status_code=503, detail="Something went wrong. Please try again.") from exc
        return _session_payload(session)

    @app.get("/quizzes/{code}/session")
    def get_session(
        code: str,
        request: Request,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            session = manager.get_session(code, _current_identity(request))
        except NotAuthenticatedError as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        except (QuizNotFoundError, InvalidTransitionError) as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return _session_payload(session)

    @app.post("/quizzes/{code}/session/answer", status_code=201)
    def submit_answer(
        code: str,
        payload: AnswerPayload,
        request: Request,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        identity = _current_identity(request)
        try:
            answer = manager.submit_answer(code, identity, payload.option_id)
            session = manager.get_session(code, identity)
        except NotAuthenticatedError as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        except QuizNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except (DuplicateAnswerError, InvalidTransitionError) as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except StoreError as exc:
            raise HTTPException(status_code=503, detail="Unable to send answer. Please try again.") from exc
        if answer is None:
            raise HTTPException(status_code=409, detail="This question no longer accepts answers.")
        return _session_payload(session)

    return app


def start_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="QuizApiServer", daemon=True)
    thread.start()
    logger.info("Participant API listening on %s:%s", host, port)
    return thread
