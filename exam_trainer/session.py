"""Timed quiz/writing session state machine.

Modes move ``menu -> quiz -> results`` and ``menu -> writing ->
writing_results``; either results mode can go back to ``menu`` or restart the
same subject. While a timed mode is active and not paused, a one-second tick
counts down; the session finishes when time runs out, when the last question
is answered, on ``end_early``/``submit_writing``, or when leaving for the
menu. Finishing commits the elapsed seconds to the daily ledger exactly once
per session.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING

from exam_trainer.dataset import BUILTIN_PASSAGES, load_curated, load_passages, load_writing_prompts
from exam_trainer.ledger import DailyUsageLedger, ProfileStore, RecencyBuffer
from exam_trainer.models import QUIZ_SUBJECTS, AnswerRecord, Passage, Profile, Question, WritingPrompt
from exam_trainer.pool import QUESTION_COUNT, build_pool, pick_passage
from exam_trainer.question_generator import generate
from exam_trainer.writing import WritingFeedback, assess_writing, pick_prompt

if TYPE_CHECKING:
    from exam_trainer.config import Settings
    from exam_trainer.db import Database
    from exam_trainer.providers.base import DatasetProvider
    from exam_trainer.timer import Cancellable, Scheduler

_log = logging.getLogger("exam_trainer.session")

MENU = "menu"
QUIZ = "quiz"
RESULTS = "results"
WRITING = "writing"
WRITING_RESULTS = "writing_results"

TIMED_MODES = (QUIZ, WRITING)
RESULT_MODE = {QUIZ: RESULTS, WRITING: WRITING_RESULTS}
WRITING_SUBJECT = "writing"
TICK_SECONDS = 1


@dataclass
class Session:
    subject: str
    mode: str
    budget_seconds: int
    seconds_left: int
    questions: list[Question] = field(default_factory=list)
    passage: Passage | None = None
    prompt: WritingPrompt | None = None
    current_index: int = 0
    answers: list[AnswerRecord] = field(default_factory=list)
    paused: bool = False
    committed: bool = False
    history_id: int | None = None
    writing_text: str = ""
    feedback: WritingFeedback | None = None

    @property
    def elapsed_seconds(self) -> int:
        return max(0, self.budget_seconds - self.seconds_left)

    @property
    def current_question(self) -> Question | None:
        if self.current_index < len(self.questions):
            return self.questions[self.current_index]
        return None


class SessionMachine:
    def __init__(
        self,
        settings: Settings,
        ledger: DailyUsageLedger,
        scheduler: Scheduler,
        provider: DatasetProvider,
        rng: random.Random | None = None,
        recent: RecencyBuffer | None = None,
        profile_store: ProfileStore | None = None,
        db: Database | None = None,
    ):
        self.settings = settings
        self.ledger = ledger
        self.scheduler = scheduler
        self.provider = provider
        self.rng = rng or random.Random()
        self.recent = recent if recent is not None else RecencyBuffer(settings.recent_capacity)
        self.profile_store = profile_store
        self.db = db
        self.mode = MENU
        self.session: Session | None = None
        self._handle: Cancellable | None = None

    # ── Entry ─────────────────────────────────────────────────────────────

    def profile(self) -> Profile:
        return self.profile_store.load() if self.profile_store else Profile()

    async def start_quiz(self, subject: str) -> bool:
        """Assemble a question set for *subject* and start the countdown.

        Returns False (staying in the menu) when no daily time is left.
        """
        if subject not in QUIZ_SUBJECTS and subject != "comprehension":
            raise ValueError(f"Unknown subject: {subject}")
        self._leave_timed_mode()
        if self.ledger.remaining_today() <= 0:
            _log.info("Refusing %s: daily allowance used up", subject)
            self.go_to_menu()
            return False

        passage = None
        if subject == "comprehension":
            passage = pick_passage(await load_passages(self.provider) or BUILTIN_PASSAGES, self.rng)
            questions = list(passage.questions)
        else:
            profile = self.profile()
            curated = await load_curated(self.provider, subject)
            target = QUESTION_COUNT[subject]
            generated = generate(subject, profile, self.rng, target * self.settings.generated_multiplier)
            questions = build_pool(
                subject, curated, generated, profile, self.recent, target, rng=self.rng,
            )
        return self._begin(subject, QUIZ, self.settings.quiz_seconds, questions=questions, passage=passage)

    async def start_writing(self) -> bool:
        self._leave_timed_mode()
        if self.ledger.remaining_today() <= 0:
            _log.info("Refusing writing: daily allowance used up")
            self.go_to_menu()
            return False
        prompt = pick_prompt(await load_writing_prompts(self.provider), self.rng)
        return self._begin(WRITING_SUBJECT, WRITING, self.settings.writing_seconds, prompt=prompt)

    async def restart(self) -> bool:
        """Start a fresh session for the subject of the last one."""
        if self.session is None:
            return False
        if self.session.mode == WRITING:
            return await self.start_writing()
        return await self.start_quiz(self.session.subject)

    def _begin(self, subject: str, mode: str, fixed_seconds: int, **content) -> bool:
        # Another start may have begun a session while content was loading.
        self._leave_timed_mode()
        budget = min(fixed_seconds, self.ledger.remaining_today())
        if budget <= 0:
            _log.info("Refusing %s: daily allowance used up", subject)
            self.go_to_menu()
            return False
        self._cancel_tick()
        self.session = Session(
            subject=subject, mode=mode, budget_seconds=budget, seconds_left=budget, **content,
        )
        if self.db is not None:
            self.session.history_id = self.db.start_session(subject, mode, self.ledger.day(), budget)
        self.mode = mode
        _log.info(
            "Started %s (%s): %ds budget, %d questions",
            subject, mode, budget, len(self.session.questions),
        )
        if mode == QUIZ and not self.session.questions:
            self._finish()
        else:
            self._schedule_tick()
        return True

    # ── Timer ─────────────────────────────────────────────────────────────

    def _schedule_tick(self) -> None:
        self._handle = self.scheduler.after(TICK_SECONDS, partial(self._tick, self.session))

    def _cancel_tick(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self, session: Session) -> None:
        if session is not self.session:
            return
        self._handle = None
        if self.mode not in TIMED_MODES or session.paused or session.committed:
            return
        session.seconds_left = max(0, session.seconds_left - TICK_SECONDS)
        if session.seconds_left == 0:
            _log.info("Time up for %s", session.subject)
            self._finish()
        else:
            self._schedule_tick()

    def pause(self) -> bool:
        s = self.session
        if self.mode not in TIMED_MODES or s is None or s.paused:
            return False
        s.paused = True
        self._cancel_tick()
        return True

    def resume(self) -> bool:
        s = self.session
        if self.mode not in TIMED_MODES or s is None or not s.paused:
            return False
        s.paused = False
        self._schedule_tick()
        return True

    # ── Progress ──────────────────────────────────────────────────────────

    def answer(self, choice: int) -> AnswerRecord | None:
        """Record an answer to the current question; the last answer finishes the quiz."""
        s = self.session
        if self.mode != QUIZ or s is None:
            return None
        q = s.current_question
        if q is None:
            return None
        if not 0 <= choice < len(q.choices):
            raise ValueError(f"Choice {choice} out of range for {len(q.choices)} options")
        record = AnswerRecord(q.id, choice, choice == q.answer_index, q.topic)
        s.answers.append(record)
        s.current_index += 1
        if s.current_index >= len(s.questions):
            self._finish()
        return record

    def submit_writing(self, text: str) -> WritingFeedback | None:
        s = self.session
        if self.mode != WRITING or s is None:
            return None
        s.writing_text = text
        s.feedback = assess_writing(text)
        self._finish()
        return s.feedback

    def end_early(self) -> bool:
        if self.mode not in TIMED_MODES:
            return False
        s = self.session
        if self.mode == WRITING and s.feedback is None and s.writing_text:
            s.feedback = assess_writing(s.writing_text)
        self._finish()
        return True

    def save_draft(self, text: str) -> None:
        if self.mode == WRITING and self.session is not None:
            self.session.writing_text = text

    def go_to_menu(self) -> None:
        self._leave_timed_mode()
        self._cancel_tick()
        self.mode = MENU
        self.session = None

    def _leave_timed_mode(self) -> None:
        if self.mode in TIMED_MODES:
            self._finish()

    def _finish(self) -> None:
        s = self.session
        if s is None or s.committed:
            return
        s.committed = True
        self._cancel_tick()
        elapsed = s.elapsed_seconds
        self.ledger.commit(elapsed)
        score = self.score()
        if self.db is not None and s.history_id is not None:
            self.db.end_session(s.history_id, elapsed, score["answered"], score["correct"])
        self.mode = RESULT_MODE[s.mode]
        _log.info(
            "Finished %s: %ds used, %d/%d correct",
            s.subject, elapsed, score["correct"], score["total"],
        )

    # ── Views ─────────────────────────────────────────────────────────────

    def score(self) -> dict:
        s = self.session
        if s is None:
            return {"total": 0, "answered": 0, "correct": 0, "percent": 0, "by_topic": {}}
        correct = sum(1 for a in s.answers if a.correct)
        total = len(s.questions)
        by_topic: dict[str, dict] = {}
        for q in s.questions:
            by_topic.setdefault(q.topic or "general", {"correct": 0, "total": 0})["total"] += 1
        for a in s.answers:
            if a.correct:
                by_topic[a.topic or "general"]["correct"] += 1
        return {
            "total": total,
            "answered": len(s.answers),
            "correct": correct,
            "percent": round(correct / total * 100, 1) if total else 0,
            "by_topic": by_topic,
        }

    def snapshot(self) -> dict:
        view: dict = {
            "mode": self.mode,
            "usage": {
                "day": self.ledger.day(),
                "used_seconds": self.ledger.used_today(),
                "remaining_seconds": self.ledger.remaining_today(),
                "daily_cap_seconds": self.ledger.daily_cap_seconds,
            },
        }
        s = self.session
        if s is None:
            return view
        view.update({
            "subject": s.subject,
            "seconds_left": s.seconds_left,
            "budget_seconds": s.budget_seconds,
            "paused": s.paused,
            "current_index": s.current_index,
            "total": len(s.questions),
        })
        if s.passage is not None:
            view["passage"] = {"id": s.passage.id, "title": s.passage.title, "body": s.passage.body}
        if s.prompt is not None:
            view["prompt"] = {"id": s.prompt.id, "title": s.prompt.title,
                              "prompt": s.prompt.prompt, "tips": s.prompt.tips}
        if self.mode == QUIZ and s.current_question is not None:
            view["question"] = s.current_question.to_dict(include_answer=False)
        if self.mode == RESULTS:
            view["score"] = self.score()
            review = []
            for i, q in enumerate(s.questions):
                a = s.answers[i] if i < len(s.answers) else None
                review.append({
                    **q.to_dict(),
                    "chosen": a.choice if a else None,
                    "correct": a.correct if a else False,
                })
            view["review"] = review
        if self.mode == WRITING_RESULTS:
            view["feedback"] = s.feedback.to_dict() if s.feedback else None
        return view
