from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS sessions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    subject TEXT NOT NULL,
    mode TEXT NOT NULL,
    day TEXT NOT NULL,
    started_at TEXT NOT NULL,
    ended_at TEXT,
    budget_seconds INTEGER DEFAULT 0,
    elapsed_seconds INTEGER DEFAULT 0,
    questions_total INTEGER DEFAULT 0,
    questions_correct INTEGER DEFAULT 0
);
"""


class MemoryStore:
    """Dict-backed key-value store; lives only as long as the process."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._data.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self._init_schema()

    def _init_schema(self) -> None:
        self.conn.executescript(SCHEMA)
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()

    # ── Key-value ─────────────────────────────────────────────────────────

    def get(self, key: str, default: str | None = None) -> str | None:
        row = self.conn.execute(
            "SELECT value FROM kv WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else default

    def set(self, key: str, value: str) -> None:
        self.conn.execute(
            "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)", (key, value)
        )
        self.conn.commit()

    def delete(self, key: str) -> None:
        self.conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        self.conn.commit()

    def keys(self) -> list[str]:
        rows = self.conn.execute("SELECT key FROM kv ORDER BY key").fetchall()
        return [r[0] for r in rows]

    # ── Sessions ──────────────────────────────────────────────────────────

    def start_session(self, subject: str, mode: str, day: str, budget_seconds: int) -> int:
        now = datetime.now(timezone.utc).isoformat()
        cur = self.conn.execute(
            "INSERT INTO sessions (subject, mode, day, started_at, budget_seconds) "
            "VALUES (?, ?, ?, ?, ?)",
            (subject, mode, day, now, budget_seconds),
        )
        self.conn.commit()
        return cur.lastrowid

    def end_session(self, session_id: int, elapsed_seconds: int, total: int, correct: int) -> None:
        now = datetime.now(timezone.utc).isoformat()
        self.conn.execute(
            "UPDATE sessions SET ended_at=?, elapsed_seconds=?, questions_total=?, "
            "questions_correct=? WHERE id=?",
            (now, elapsed_seconds, total, correct, session_id),
        )
        self.conn.commit()

    def get_session_history(self, limit: int = 20) -> list[dict]:
        rows = self.conn.execute(
            "SELECT * FROM sessions ORDER BY id DESC LIMIT ?", (limit,)
        ).fetchall()
        return [dict(r) for r in rows]

    def get_stats(self, day: str | None = None) -> dict:
        row = self.conn.execute(
            "SELECT COUNT(*), COALESCE(SUM(questions_total), 0), "
            "COALESCE(SUM(questions_correct), 0) FROM sessions WHERE ended_at IS NOT NULL"
        ).fetchone()
        sessions, answered, correct = row[0], row[1], row[2]
        seconds_today = 0
        if day is not None:
            seconds_today = self.conn.execute(
                "SELECT COALESCE(SUM(elapsed_seconds), 0) FROM sessions WHERE day = ?",
                (day,),
            ).fetchone()[0]
        return {
            "sessions": sessions,
            "questions_answered": answered,
            "questions_correct": correct,
            "accuracy": round(correct / answered * 100, 1) if answered else 0,
            "session_seconds_today": seconds_today,
        }
