"""Tests for the FastAPI application routes."""
from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from conftest import ManualScheduler
from fastapi.testclient import TestClient

from exam_trainer import app as app_module
from exam_trainer.app import app, build_machine
from exam_trainer.config import Settings
from exam_trainer.db import Database


@pytest.fixture
def test_app(tmp_path):
    """Set up test app with temporary database, settings and a manual clock."""
    db = Database(tmp_path / "test.db")
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    settings = Settings(db_path=str(tmp_path / "test.db"), data_dir=str(data_dir))
    scheduler = ManualScheduler()

    # Set globals BEFORE creating TestClient so startup() is a no-op
    app_module._db = db
    app_module._settings = settings
    app_module._machine = build_machine(db, settings, scheduler=scheduler)

    with patch("exam_trainer.app.save_settings"):
        client = TestClient(app, raise_server_exceptions=False)
        yield client, db, scheduler
        client.close()

    db.close()
    app_module._db = None
    app_module._settings = None
    app_module._machine = None


class TestSettingsApi:
    def test_get(self, test_app):
        client, _, _ = test_app
        resp = client.get("/api/settings")
        assert resp.status_code == 200
        assert resp.json()["daily_cap_seconds"] == 1800

    def test_update(self, test_app):
        client, _, _ = test_app
        resp = client.put("/api/settings", json={"quiz_seconds": 300, "daily_cap_seconds": 900})
        assert resp.status_code == 200
        assert resp.json()["quiz_seconds"] == 300
        assert client.get("/api/usage").json()["remaining_seconds"] == 900

    def test_rejects_bad_values(self, test_app):
        client, _, _ = test_app
        assert client.put("/api/settings", json={"quiz_seconds": -1}).status_code == 400
        assert client.put("/api/settings", json={"quiz_seconds": "ten"}).status_code == 400
        assert client.put("/api/settings", json={"quiz_seconds": True}).status_code == 400


class TestProfileApi:
    def test_defaults(self, test_app):
        client, _, _ = test_app
        data = client.get("/api/profile").json()
        assert data["grade"] == "Y5"
        assert "Kent" in data["boards"]
        assert data["grades"] == ["Y3", "Y4", "Y5", "Y6"]

    def test_update_persists(self, test_app):
        client, db, _ = test_app
        resp = client.put("/api/profile", json={"grade": "Y3", "exam_boards": ["GL"]})
        assert resp.status_code == 200
        assert json.loads(db.get("profile"))["grade"] == "Y3"
        data = client.get("/api/profile").json()
        assert data["exam_boards"] == ["GL"]
        assert data["allow_harder"] is False

    def test_unknown_grade(self, test_app):
        client, _, _ = test_app
        assert client.put("/api/profile", json={"grade": "Y9"}).status_code == 400


class TestSessionApi:
    def test_menu_state(self, test_app):
        client, _, _ = test_app
        data = client.get("/api/session").json()
        assert data["mode"] == "menu"
        assert data["usage"]["used_seconds"] == 0

    def test_start_and_answer(self, test_app):
        client, _, scheduler = test_app
        resp = client.post("/api/session/start", json={"subject": "maths"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["mode"] == "quiz"
        assert data["total"] == 12
        assert "answer_index" not in data["question"]

        scheduler.advance(3)
        resp = client.post("/api/session/answer", json={"choice": 0})
        assert resp.status_code == 200
        assert resp.json()["state"]["current_index"] == 1
        assert resp.json()["state"]["seconds_left"] == 597

    def test_unknown_subject(self, test_app):
        client, _, _ = test_app
        assert client.post("/api/session/start", json={"subject": "latin"}).status_code == 400

    def test_no_time_left(self, test_app):
        client, db, _ = test_app
        app_module._machine.ledger.commit(1800)
        resp = client.post("/api/session/start", json={"subject": "vr"})
        assert resp.status_code == 409
        assert client.post("/api/writing/start").status_code == 409

    def test_answer_without_quiz(self, test_app):
        client, _, _ = test_app
        assert client.post("/api/session/answer", json={"choice": 0}).status_code == 400

    def test_answer_bad_choice(self, test_app):
        client, _, _ = test_app
        client.post("/api/session/start", json={"subject": "nvr"})
        assert client.post("/api/session/answer", json={"choice": "A"}).status_code == 400
        assert client.post("/api/session/answer", json={"choice": 9}).status_code == 400

    def test_pause_resume(self, test_app):
        client, _, scheduler = test_app
        client.post("/api/session/start", json={"subject": "english"})
        assert client.post("/api/session/pause").json()["paused"] is True
        assert client.post("/api/session/pause").status_code == 400
        scheduler.advance(30)
        data = client.post("/api/session/resume").json()
        assert data["paused"] is False
        assert data["seconds_left"] == 600

    def test_end_and_history(self, test_app):
        client, _, scheduler = test_app
        client.post("/api/session/start", json={"subject": "comprehension"})
        scheduler.advance(25)
        data = client.post("/api/session/end").json()
        assert data["mode"] == "results"
        assert len(data["review"]) == 4
        assert data["usage"]["used_seconds"] == 25
        assert client.post("/api/session/end").status_code == 400

        history = client.get("/api/history").json()
        assert history["sessions"][0]["subject"] == "comprehension"
        assert history["stats"]["session_seconds_today"] == 25

    def test_restart_and_menu(self, test_app):
        client, _, scheduler = test_app
        assert client.post("/api/session/restart").status_code == 400
        client.post("/api/session/start", json={"subject": "vr"})
        client.post("/api/session/end")
        assert client.post("/api/session/restart").json()["mode"] == "quiz"
        scheduler.advance(10)
        data = client.post("/api/session/menu").json()
        assert data["mode"] == "menu"
        assert data["usage"]["used_seconds"] == 10

    def test_curated_file_is_used(self, test_app, tmp_path):
        client, _, _ = test_app
        passage = {
            "id": "bees",
            "title": "Bees",
            "body": "Bees make honey.",
            "questions": [{"stem": "What do bees make?", "choices": ["honey", "jam"], "answerIndex": 0}],
        }
        (tmp_path / "data" / "comprehension.json").write_text(json.dumps([passage]))
        data = client.post("/api/session/start", json={"subject": "comprehension"}).json()
        assert data["passage"]["id"] == "bees"


class TestWritingApi:
    def test_flow(self, test_app):
        client, _, scheduler = test_app
        data = client.post("/api/writing/start").json()
        assert data["mode"] == "writing"
        assert data["prompt"]["prompt"]
        scheduler.advance(90)
        assert client.post("/api/writing/draft", json={"text": "Draft."}).status_code == 200
        resp = client.post("/api/writing/submit", json={"text": "The end. Or is it?"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["feedback"]["words"] == 5
        assert body["state"]["mode"] == "writing_results"
        assert body["state"]["usage"]["used_seconds"] == 90

    def test_submit_without_session(self, test_app):
        client, _, _ = test_app
        assert client.post("/api/writing/submit", json={"text": "x"}).status_code == 400
        assert client.post("/api/writing/draft", json={"text": "x"}).status_code == 400


class TestRequestBodies:
    @pytest.mark.parametrize("path", [
        "/api/session/start",
        "/api/session/answer",
        "/api/writing/draft",
        "/api/writing/submit",
    ])
    def test_non_object_body_is_rejected(self, test_app, path):
        client, _, _ = test_app
        assert client.post(path, json=["maths"]).status_code == 400
        assert client.post(path, content=b"not json",
                           headers={"content-type": "application/json"}).status_code == 400

    def test_non_object_settings_and_profile(self, test_app):
        client, _, _ = test_app
        assert client.put("/api/settings", json=[1, 2]).status_code == 400
        assert client.put("/api/profile", json="Y4").status_code == 400

    def test_history_lists_days(self, test_app):
        client, _, _ = test_app
        app_module._machine.ledger.commit(75)
        days = client.get("/api/history").json()["days"]
        assert list(days.values()) == [75]
