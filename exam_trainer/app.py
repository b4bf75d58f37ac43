"""FastAPI application with all routes."""
from __future__ import annotations

import json
import logging

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, HTTPException, Request

from exam_trainer.config import Settings, load_settings, save_settings
from exam_trainer.db import Database, MemoryStore
from exam_trainer.ledger import DailyUsageLedger, ProfileStore, RecencyBuffer
from exam_trainer.models import EXAM_BOARDS, GRADES, Profile
from exam_trainer.providers.base import DatasetProvider
from exam_trainer.session import QUIZ, WRITING, SessionMachine
from exam_trainer.timer import AsyncioScheduler

app = FastAPI(title="Exam Trainer")

# Global state (initialized in startup)
_db: Database | None = None
_settings: Settings | None = None
_machine: SessionMachine | None = None

_log = logging.getLogger("exam_trainer.app")


def get_db() -> Database:
    assert _db is not None
    return _db


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


def get_machine() -> SessionMachine:
    assert _machine is not None
    return _machine


def _get_provider(s: Settings) -> DatasetProvider:
    if s.dataset_source == "file":
        from exam_trainer.providers.file_source import FileDatasetProvider
        return FileDatasetProvider(s.data_full_path)
    elif s.dataset_source == "http":
        from exam_trainer.providers.http_source import HttpDatasetProvider
        return HttpDatasetProvider(s.dataset_url, timeout=s.fetch_timeout)
    raise ValueError(f"Unknown dataset source: {s.dataset_source}")


def build_machine(db: Database, settings: Settings, scheduler=None) -> SessionMachine:
    """Wire a SessionMachine to persistent usage/profile and a per-process recency buffer."""
    return SessionMachine(
        settings=settings,
        ledger=DailyUsageLedger(db, settings.daily_cap_seconds),
        scheduler=scheduler or AsyncioScheduler(),
        provider=_get_provider(settings),
        recent=RecencyBuffer(settings.recent_capacity, store=MemoryStore()),
        profile_store=ProfileStore(db),
        db=db,
    )


async def _json_object(request: Request) -> dict:
    try:
        body = await request.json()
    except json.JSONDecodeError:
        raise HTTPException(400, "Invalid JSON body")
    if not isinstance(body, dict):
        raise HTTPException(400, "Expected a JSON object")
    return body


@app.on_event("startup")
async def startup():
    global _db, _settings, _machine
    if _db is not None:
        return  # Already initialized (e.g. by tests)
    _settings = load_settings()
    _db = Database(_settings.db_full_path)
    _machine = build_machine(_db, _settings)


@app.on_event("shutdown")
async def shutdown():
    if _machine:
        _machine.go_to_menu()
    if _db:
        _db.close()


# ── API: Settings & profile ───────────────────────────────────────────────

@app.get("/api/settings")
async def api_get_settings():
    return get_settings().to_dict()


@app.put("/api/settings")
async def api_update_settings(request: Request):
    body = await _json_object(request)
    s = get_settings()
    for key in ("quiz_seconds", "writing_seconds", "daily_cap_seconds"):
        if key in body:
            value = body[key]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise HTTPException(400, f"{key} must be a positive integer")
            setattr(s, key, value)
    get_machine().ledger.daily_cap_seconds = s.daily_cap_seconds
    save_settings(s)
    _log.info("Settings updated")
    return s.to_dict()


@app.get("/api/profile")
async def api_get_profile():
    profile = get_machine().profile()
    return {**profile.to_dict(), "grades": list(GRADES), "boards": list(EXAM_BOARDS)}


@app.put("/api/profile")
async def api_update_profile(request: Request):
    body = await _json_object(request)
    if "grade" in body and body["grade"] not in GRADES:
        raise HTTPException(400, f"Unknown grade: {body['grade']}")
    current = get_machine().profile().to_dict()
    profile = Profile.from_dict({**current, **body})
    ProfileStore(get_db()).save(profile)
    _log.info("Profile updated: %s %s", profile.grade, ",".join(profile.exam_boards))
    return profile.to_dict()


# ── API: Usage & history ──────────────────────────────────────────────────

@app.get("/api/usage")
async def api_usage():
    return get_machine().snapshot()["usage"]


@app.get("/api/history")
async def api_history():
    db = get_db()
    machine = get_machine()
    return {
        "sessions": db.get_session_history(limit=20),
        "stats": db.get_stats(day=machine.ledger.day()),
        "days": machine.ledger.usage_by_day(),
    }


# ── API: Session ──────────────────────────────────────────────────────────

@app.get("/api/session")
async def api_session():
    return get_machine().snapshot()


@app.post("/api/session/start")
async def api_session_start(request: Request):
    body = await _json_object(request)
    subject = body.get("subject", "")
    machine = get_machine()
    try:
        started = await machine.start_quiz(subject)
    except ValueError as e:
        raise HTTPException(400, str(e))
    if not started:
        raise HTTPException(409, "No time left today")
    return machine.snapshot()


@app.post("/api/writing/start")
async def api_writing_start():
    machine = get_machine()
    if not await machine.start_writing():
        raise HTTPException(409, "No time left today")
    return machine.snapshot()


@app.post("/api/session/answer")
async def api_session_answer(request: Request):
    body = await _json_object(request)
    machine = get_machine()
    if machine.mode != QUIZ:
        raise HTTPException(400, "No quiz in progress")
    choice = body.get("choice")
    if not isinstance(choice, int) or isinstance(choice, bool):
        raise HTTPException(400, "choice must be an integer")
    try:
        record = machine.answer(choice)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {
        "correct": record.correct,
        "question_id": record.question_id,
        "state": machine.snapshot(),
    }


@app.post("/api/session/pause")
async def api_session_pause():
    machine = get_machine()
    if not machine.pause():
        raise HTTPException(400, "Nothing to pause")
    return machine.snapshot()


@app.post("/api/session/resume")
async def api_session_resume():
    machine = get_machine()
    if not machine.resume():
        raise HTTPException(400, "Nothing to resume")
    return machine.snapshot()


@app.post("/api/session/end")
async def api_session_end():
    machine = get_machine()
    if not machine.end_early():
        raise HTTPException(400, "No session in progress")
    return machine.snapshot()


@app.post("/api/session/restart")
async def api_session_restart():
    machine = get_machine()
    if machine.session is None:
        raise HTTPException(400, "No previous session")
    if not await machine.restart():
        raise HTTPException(409, "No time left today")
    return machine.snapshot()


@app.post("/api/session/menu")
async def api_session_menu():
    machine = get_machine()
    machine.go_to_menu()
    return machine.snapshot()


@app.post("/api/writing/draft")
async def api_writing_draft(request: Request):
    body = await _json_object(request)
    machine = get_machine()
    if machine.mode != WRITING:
        raise HTTPException(400, "No writing session in progress")
    machine.save_draft(str(body.get("text", "")))
    return {"ok": True}


@app.post("/api/writing/submit")
async def api_writing_submit(request: Request):
    body = await _json_object(request)
    machine = get_machine()
    if machine.mode != WRITING:
        raise HTTPException(400, "No writing session in progress")
    feedback = machine.submit_writing(str(body.get("text", "")))
    return {"feedback": feedback.to_dict(), "state": machine.snapshot()}

