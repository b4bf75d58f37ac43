"""CLI entry point for exam-trainer.

Usage:
  python -m exam_trainer serve [--port PORT] [--host HOST]
  python -m exam_trainer usage
  python -m exam_trainer profile [--grade Y5] [--boards GL,Kent] [--harder on|off]
  python -m exam_trainer preview SUBJECT [--seed N]
  python -m exam_trainer history
"""
from __future__ import annotations

import asyncio
import random
import sys


def main():
    args = sys.argv[1:]
    command = args[0] if args else "serve"

    if command == "serve":
        _serve(args[1:])
    elif command == "usage":
        _usage()
    elif command == "profile":
        _profile(args[1:])
    elif command == "preview":
        _preview(args[1:])
    elif command == "history":
        _history()
    else:
        print(f"Unknown command: {command}")
        print("Commands: serve, usage, profile, preview, history")
        sys.exit(1)


def _parse_flag(args: list[str], name: str, default: str) -> str:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _serve(args: list[str]):
    import uvicorn

    port = int(_parse_flag(args, "--port", "8765"))
    host = _parse_flag(args, "--host", "127.0.0.1")
    print(f"Starting Exam Trainer on http://{host}:{port}")
    print("Press Ctrl+C to stop\n")
    uvicorn.run(
        "exam_trainer.app:app",
        host=host,
        port=port,
        reload=False,
        timeout_graceful_shutdown=5,
    )


def _usage():
    from exam_trainer.config import load_settings
    from exam_trainer.db import Database
    from exam_trainer.ledger import DailyUsageLedger

    settings = load_settings()
    db = Database(settings.db_full_path)
    ledger = DailyUsageLedger(db, settings.daily_cap_seconds)
    used = ledger.used_today()
    print(f"Today ({ledger.day()}):")
    print(f"  Used:      {used // 60}m {used % 60:02d}s")
    remaining = ledger.remaining_today()
    print(f"  Remaining: {remaining // 60}m {remaining % 60:02d}s")
    past = {d: s for d, s in ledger.usage_by_day().items() if d != ledger.day()}
    if past:
        print("\nEarlier days:")
        for day, seconds in list(past.items())[-7:]:
            print(f"  {day}  {seconds // 60}m {seconds % 60:02d}s")
    db.close()


def _profile(args: list[str]):
    from exam_trainer.config import load_settings
    from exam_trainer.db import Database
    from exam_trainer.ledger import ProfileStore
    from exam_trainer.models import GRADES, Profile

    settings = load_settings()
    db = Database(settings.db_full_path)
    store = ProfileStore(db)
    data = store.load().to_dict()

    grade = _parse_flag(args, "--grade", "")
    if grade:
        if grade not in GRADES:
            print(f"Unknown grade: {grade} (choose from {', '.join(GRADES)})")
            db.close()
            sys.exit(1)
        data["grade"] = grade
    boards = _parse_flag(args, "--boards", "")
    if boards:
        data["exam_boards"] = [b.strip() for b in boards.split(",") if b.strip()]
    harder = _parse_flag(args, "--harder", "")
    if harder:
        data["allow_harder"] = harder == "on"

    profile = Profile.from_dict(data)
    if grade or boards or harder:
        store.save(profile)
    print(f"Grade:        {profile.grade}")
    print(f"Exam boards:  {', '.join(profile.exam_boards)}")
    print(f"Allow harder: {'on' if profile.allow_harder else 'off'}")
    db.close()


def _preview(args: list[str]):
    if not args or args[0].startswith("--"):
        print("Usage: preview SUBJECT [--seed N]")
        sys.exit(1)
    subject = args[0]

    from exam_trainer.app import _get_provider
    from exam_trainer.config import load_settings
    from exam_trainer.dataset import load_curated
    from exam_trainer.db import Database
    from exam_trainer.ledger import ProfileStore, RecencyBuffer
    from exam_trainer.models import QUIZ_SUBJECTS
    from exam_trainer.pool import QUESTION_COUNT, build_pool
    from exam_trainer.question_generator import generate

    if subject not in QUIZ_SUBJECTS:
        print(f"Unknown subject: {subject} (choose from {', '.join(QUIZ_SUBJECTS)})")
        sys.exit(1)

    seed = _parse_flag(args, "--seed", "")
    rng = random.Random(int(seed)) if seed else random.Random()
    settings = load_settings()
    db = Database(settings.db_full_path)
    profile = ProfileStore(db).load()
    db.close()

    curated = asyncio.run(load_curated(_get_provider(settings), subject))
    target = QUESTION_COUNT[subject]
    generated = generate(subject, profile, rng, target * settings.generated_multiplier)
    pool = build_pool(subject, curated, generated, profile, RecencyBuffer(), target, rng=rng)

    print(f"{subject} for {profile.grade}: {len(pool)} questions "
          f"({len(curated)} curated, {len(generated)} generated)\n")
    for i, q in enumerate(pool, 1):
        print(f"{i:2d}. [{q.topic or 'general'}] {q.stem}")
        for j, choice in enumerate(q.choices):
            mark = "*" if j == q.answer_index else " "
            print(f"     {mark} {choice}")


def _history():
    from exam_trainer.config import load_settings
    from exam_trainer.db import Database

    settings = load_settings()
    db = Database(settings.db_full_path)
    stats = db.get_stats()

    print("Exam Trainer History")
    print("=" * 40)
    print(f"Sessions completed: {stats['sessions']}")
    print(f"Questions answered: {stats['questions_answered']}")
    print(f"Overall accuracy:   {stats['accuracy']}%")
    print()
    for row in db.get_session_history(limit=20):
        print(f"  {row['day']}  {row['subject']:13s} {row['elapsed_seconds']:4d}s  "
              f"{row['questions_correct']}/{row['questions_total']}")
    db.close()


if __name__ == "__main__":
    main()
