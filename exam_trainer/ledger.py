"""Persistent counters shared across sessions: daily usage, profile, recently served ids."""
from __future__ import annotations

import json
import logging
from collections import deque
from collections.abc import Callable, Iterable
from datetime import date
from typing import Protocol

from exam_trainer.models import Profile

_log = logging.getLogger("exam_trainer.ledger")

PROFILE_KEY = "profile"
RECENT_KEY = "recentServed"
USAGE_KEY_PREFIX = "quizTime_"


class KeyValueStore(Protocol):
    def get(self, key: str, default: str | None = None) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def keys(self) -> list[str]: ...


def today_key(today: date | None = None) -> str:
    """Local calendar day as ``YYYY-MM-DD``."""
    return (today or date.today()).isoformat()


class DailyUsageLedger:
    """Seconds spent in timed sessions, one counter per local calendar day.

    A day's counter starts at 0 the first time it is read, only ever grows,
    and is superseded when the day string changes.
    """

    def __init__(
        self,
        store: KeyValueStore,
        daily_cap_seconds: int,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.daily_cap_seconds = daily_cap_seconds
        self._today = today

    def day(self) -> str:
        return today_key(self._today())

    def _key(self) -> str:
        return USAGE_KEY_PREFIX + self.day()

    def used_today(self) -> int:
        raw = self.store.get(self._key())
        if raw is None:
            return 0
        try:
            return max(0, int(raw))
        except (TypeError, ValueError):
            _log.warning("Corrupt usage value %r for %s; treating as 0", raw, self.day())
            return 0

    def usage_by_day(self) -> dict[str, int]:
        """Seconds used on every day that has a counter, oldest first."""
        usage = {}
        for key in self.store.keys():
            if not key.startswith(USAGE_KEY_PREFIX):
                continue
            try:
                usage[key[len(USAGE_KEY_PREFIX):]] = max(0, int(self.store.get(key)))
            except (TypeError, ValueError):
                continue
        return dict(sorted(usage.items()))

    def remaining_today(self) -> int:
        return max(0, self.daily_cap_seconds - self.used_today())

    def commit(self, seconds: int) -> int:
        """Add *seconds* to today's counter and return the new total."""
        used = self.used_today()
        seconds = int(seconds)
        if seconds <= 0:
            return used
        used += seconds
        self.store.set(self._key(), str(used))
        _log.info("Committed %ds of usage for %s (total %ds)", seconds, self.day(), used)
        return used


class ProfileStore:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self) -> Profile:
        raw = self.store.get(PROFILE_KEY)
        if raw is None:
            return Profile()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            _log.warning("Corrupt profile in store; using defaults")
            return Profile()
        if not isinstance(data, dict):
            _log.warning("Profile in store is not an object; using defaults")
            return Profile()
        return Profile.from_dict(data)

    def save(self, profile: Profile) -> None:
        self.store.set(PROFILE_KEY, json.dumps(profile.to_dict()))


class RecencyBuffer:
    """Bounded FIFO of recently served question ids.

    Oldest ids fall out once ``capacity`` is exceeded. When a store is given
    the buffer is mirrored there as a JSON array after every update.
    """

    def __init__(self, capacity: int = 120, store: KeyValueStore | None = None):
        self.capacity = capacity
        self.store = store
        self._ids: deque[str] = deque(maxlen=capacity)
        if store is not None:
            self._ids.extend(self._load())

    def _load(self) -> list[str]:
        raw = self.store.get(RECENT_KEY)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            _log.warning("Corrupt recency buffer in store; starting empty")
            return []
        if not isinstance(data, list):
            return []
        return [str(x) for x in data][-self.capacity:]

    def record(self, ids: Iterable[str]) -> None:
        for qid in ids:
            if qid in self._ids:
                self._ids.remove(qid)
            self._ids.append(qid)
        if self.store is not None:
            self.store.set(RECENT_KEY, json.dumps(list(self._ids)))

    def clear(self) -> None:
        self._ids.clear()
        if self.store is not None:
            self.store.set(RECENT_KEY, "[]")

    def ids(self) -> list[str]:
        return list(self._ids)

    def __contains__(self, qid: object) -> bool:
        return qid in self._ids

    def __len__(self) -> int:
        return len(self._ids)
