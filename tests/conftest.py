"""Shared test fixtures."""
from __future__ import annotations

import random
from datetime import date

import pytest

from exam_trainer.config import Settings
from exam_trainer.db import Database, MemoryStore
from exam_trainer.ledger import DailyUsageLedger, ProfileStore, RecencyBuffer
from exam_trainer.models import Profile, Question
from exam_trainer.providers.base import DatasetProvider
from exam_trainer.session import SessionMachine

TODAY = date(2026, 3, 14)


class ManualScheduler:
    """Scheduler whose callbacks only run when the test advances the clock."""

    class Handle:
        def __init__(self, scheduler: "ManualScheduler", due: float, callback):
            self.scheduler = scheduler
            self.due = due
            self.callback = callback
            self.cancelled = False

        def cancel(self) -> None:
            self.cancelled = True

    def __init__(self):
        self.now = 0.0
        self.handles: list[ManualScheduler.Handle] = []

    def after(self, seconds, callback):
        handle = self.Handle(self, self.now + seconds, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list["ManualScheduler.Handle"]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due callbacks in order (including ones they schedule)."""
        target = self.now + seconds
        while True:
            due = [h for h in self.pending if h.due <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.due)
            handle.cancelled = True
            self.now = handle.due
            handle.callback()
        self.now = target


class FakeProvider(DatasetProvider):
    """Serves canned datasets by name; a name mapped to an exception raises it."""

    def __init__(self, responses: dict | None = None):
        self.responses = responses or {}
        self.calls: list[str] = []

    async def fetch(self, name: str):
        self.calls.append(name)
        if name not in self.responses:
            raise FileNotFoundError(name)
        value = self.responses[name]
        if isinstance(value, Exception):
            raise value
        return value

    def name(self) -> str:
        return "fake"


def make_question(
    qid: str,
    stem: str | None = None,
    topic: str | None = None,
    year: str | None = "5",
    boards: set[str] | None = None,
    difficulty: str | None = None,
    subject: str = "maths",
) -> Question:
    tags = set()
    if topic:
        tags.add(f"topic:{topic}")
    if year:
        tags.add(f"year:{year}")
    if difficulty:
        tags.add(f"difficulty:{difficulty}")
    return Question(
        id=qid,
        subject=subject,
        stem=stem or f"Question {qid}?",
        choices=["w", "x", "y", "z"],
        answer_index=0,
        tags=tags,
        exam_boards=boards if boards is not None else {"Generic"},
    )


@pytest.fixture
def tmp_db(tmp_path):
    """Create a fresh temporary database."""
    db = Database(tmp_path / "test.db")
    yield db
    db.close()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def profile():
    return Profile(grade="Y5", exam_boards=["GL"], allow_harder=False)


@pytest.fixture
def settings(tmp_path):
    return Settings(db_path=str(tmp_path / "test.db"), data_dir=str(tmp_path / "data"))


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def ledger(store):
    return DailyUsageLedger(store, 1800, today=lambda: TODAY)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def machine(settings, ledger, scheduler, provider, store):
    """A session machine on an in-memory store with a manual clock and no curated data."""
    return SessionMachine(
        settings=settings,
        ledger=ledger,
        scheduler=scheduler,
        provider=provider,
        rng=random.Random(7),
        recent=RecencyBuffer(120),
        profile_store=ProfileStore(store),
    )
