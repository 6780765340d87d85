"""FastAPI application with all routes."""
from __future__ import annotations

import logging
import random
import uuid

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, HTTPException, Request

from vocab_quiz.browser import ChapterBrowser, display_script
from vocab_quiz.config import Settings, load_settings, save_settings
from vocab_quiz.errors import EmptySelectionError, InvalidStateAccess, LoadError
from vocab_quiz.loader import load_vocabulary
from vocab_quiz.models import QuizConfiguration, QuizField
from vocab_quiz.sampler import make_rng
from vocab_quiz.session import QuizSession
from vocab_quiz.store import ChapterIndex

app = FastAPI(title="Vocab Quiz")

log = logging.getLogger("vocab_quiz.app")

# Global state (initialized in startup)
_index: ChapterIndex | None = None
_load_error: str | None = None
_settings: Settings | None = None
_rng: random.Random | None = None
_sessions: dict[str, QuizSession] = {}  # session_id -> session, oldest first

# Abandoned sessions beyond this are dropped, oldest first
MAX_SESSIONS = 100


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


def get_index() -> ChapterIndex:
    if _index is None:
        raise HTTPException(503, _load_error or "Vocabulary not loaded")
    return _index


def get_session(session_id: str) -> QuizSession:
    session = _sessions.get(session_id)
    if session is None:
        raise HTTPException(404, "Session not found")
    return session


async def _json_object(request: Request) -> dict:
    """Decode the request body, which must be a JSON object (empty -> {})."""
    if not await request.body():
        return {}
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(400, "Request body is not valid JSON")
    if not isinstance(body, dict):
        raise HTTPException(400, "Expected a JSON object")
    return body


def _reset_rng() -> None:
    global _rng
    s = get_settings()
    _rng = make_rng(s.random_seed) if s.random_seed is not None else None


def _store_session(session: QuizSession) -> str:
    while len(_sessions) >= MAX_SESSIONS:
        oldest = next(iter(_sessions))
        del _sessions[oldest]
        log.info("Session %s dropped (limit %d)", oldest, MAX_SESSIONS)
    session_id = uuid.uuid4().hex
    _sessions[session_id] = session
    return session_id


async def _reload_vocabulary() -> None:
    """Fetch the data source; on failure keep no partial index."""
    global _index, _load_error
    s = get_settings()
    source = s.resolved_data_source()
    try:
        _index = await load_vocabulary(source, timeout=s.fetch_timeout)
        _load_error = None
    except LoadError as e:
        _index = None
        _load_error = f"Failed to load quiz data: {e}"
        log.warning("%s", _load_error)
    _reset_rng()


@app.on_event("startup")
async def startup():
    global _settings
    if _settings is not None:
        return  # Already initialized (e.g. by tests)
    _settings = load_settings()
    await _reload_vocabulary()


# ── API: Vocabulary ──────────────────────────────────────────────────────

@app.get("/api/status")
async def api_status():
    loaded = _index is not None
    return {
        "loaded": loaded,
        "error": _load_error,
        "total_entries": len(_index.entries) if loaded else 0,
        "total_chapters": len(_index) if loaded else 0,
        "active_sessions": len(_sessions),
    }


@app.post("/api/reload")
async def api_reload():
    await _reload_vocabulary()
    return await api_status()


@app.get("/api/chapters")
async def api_chapters():
    index = get_index()
    return {
        "chapters": [{"key": key, "count": len(index[key])} for key in index.chapters],
    }


@app.get("/api/chapters/{chapter}")
async def api_chapter(chapter: str):
    index = get_index()
    browser = ChapterBrowser(index)
    try:
        browser.select_key(chapter)
    except KeyError:
        raise HTTPException(404, f"Unknown chapter: {chapter}")

    chapters = browser.chapters
    pos = browser.position
    return {
        "chapter": chapter,
        "position": pos,
        "previous": chapters[pos - 1] if browser.has_previous else None,
        "next": chapters[pos + 1] if browser.has_next else None,
        "count": len(browser.current_entries),
        "entries": [
            {**e.to_dict(), "script": display_script(e)}
            for e in browser.current_entries
        ],
    }


# ── API: Quiz ────────────────────────────────────────────────────────────

@app.get("/api/quiz/options")
async def api_quiz_options():
    index = get_index()
    s = get_settings()
    return {
        "question_counts": list(s.question_count_options) + ["all"],
        "total_entries": len(index.entries),
        "chapters": index.chapters,
        "fields": [f.value for f in QuizField],
        "defaults": {
            "question_count": s.default_question_count,
            "chapters": index.chapters,
            "question_field": s.default_question_field,
            "answer_field": s.default_answer_field,
        },
    }


def _question_payload(session_id: str, session: QuizSession) -> dict:
    q = session.current_question()
    cfg = session.configuration
    payload = {
        "session_id": session_id,
        "question_field": cfg.question_field.value,
        "answer_field": cfg.answer_field.value,
        "prompt": q.prompt_value,
        "choices": list(q.choices),
        "answered": q.is_answered,
        "progress": session.progress(),
        "session_complete": False,
    }
    if q.is_answered:
        payload["chosen"] = q.answered_choice
        payload["correct"] = q.is_correct
        payload["correct_value"] = q.correct_value
    return payload


@app.post("/api/quiz/start")
async def api_quiz_start(request: Request):
    body = await _json_object(request)
    index = get_index()
    s = get_settings()

    body.setdefault("question_count", s.default_question_count)
    body.setdefault("chapters", index.chapters)
    body.setdefault("question_field", s.default_question_field)
    body.setdefault("answer_field", s.default_answer_field)
    try:
        config = QuizConfiguration.from_dict(body, total_entries=len(index.entries))
    except (ValueError, TypeError) as e:
        raise HTTPException(400, str(e))

    try:
        session = QuizSession(rng=_rng, choice_count=s.choice_count)
    except ValueError as e:
        raise HTTPException(400, f"Invalid settings: {e}")
    try:
        session.start(config, index.entries)
    except EmptySelectionError as e:
        return {"error": str(e), "session_id": None}

    session_id = _store_session(session)
    log.info("Session %s started (%s)", session_id, config.to_dict())
    return _question_payload(session_id, session)


@app.get("/api/quiz/{session_id}/question")
async def api_quiz_question(session_id: str):
    session = get_session(session_id)
    if session.is_finished:
        return {"session_complete": True, "session_id": session_id}
    return _question_payload(session_id, session)


@app.post("/api/quiz/{session_id}/answer")
async def api_quiz_answer(session_id: str, request: Request):
    body = await _json_object(request)
    session = get_session(session_id)
    if "choice" not in body:
        raise HTTPException(400, "No choice provided")
    try:
        outcome = session.submit_answer(body["choice"])
    except InvalidStateAccess as e:
        raise HTTPException(409, str(e))
    except ValueError as e:
        raise HTTPException(400, str(e))

    return {
        "correct": outcome.is_correct,
        "chosen": outcome.chosen_value,
        "correct_value": outcome.correct_value,
        "entry": {**outcome.entry.to_dict(), "script": display_script(outcome.entry)},
        "progress": session.progress(),
    }


@app.post("/api/quiz/{session_id}/next")
async def api_quiz_next(session_id: str):
    session = get_session(session_id)
    try:
        session.advance()
    except InvalidStateAccess as e:
        raise HTTPException(409, str(e))
    if session.is_finished:
        return {"session_complete": True, "session_id": session_id}
    return _question_payload(session_id, session)


@app.get("/api/quiz/{session_id}/result")
async def api_quiz_result(session_id: str):
    session = get_session(session_id)
    try:
        result = session.result()
    except InvalidStateAccess as e:
        raise HTTPException(409, str(e))
    del _sessions[session_id]
    return {
        "session_id": session_id,
        "score": result.score,
        "total": result.total,
        "percentage": result.percentage,
    }


# ── API: Settings ─────────────────────────────────────────────────────────

@app.get("/api/settings")
async def api_get_settings():
    return get_settings().to_dict()


@app.put("/api/settings")
async def api_update_settings(request: Request):
    body = await _json_object(request)
    s = get_settings()
    known = {f.name for f in Settings.__dataclass_fields__.values()}
    updates = {k: v for k, v in body.items() if k in known}
    candidate = Settings(**{**s.to_dict(), **updates})
    error = candidate.validate()
    if error:
        raise HTTPException(400, error)

    reload_needed = (
        candidate.data_source != s.data_source
        or candidate.fetch_timeout != s.fetch_timeout
    )
    for k, v in updates.items():
        setattr(s, k, v)
    save_settings(s)

    if reload_needed:
        await _reload_vocabulary()
    else:
        _reset_rng()
    return s.to_dict()
