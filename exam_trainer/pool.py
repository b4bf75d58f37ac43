"""Assemble a session's question set from curated and generated candidates."""
from __future__ import annotations

import logging
import random
from collections.abc import Container

from exam_trainer.filters import dedupe, filter_eligible
from exam_trainer.ledger import RecencyBuffer
from exam_trainer.models import Passage, Profile, Question

_log = logging.getLogger("exam_trainer.pool")

QUESTION_COUNT = {
    "maths": 12,
    "english": 10,
    "vr": 10,
    "nvr": 8,
}

# Maximum draws per topic partition. Subjects without a table are shuffled whole.
QUOTAS: dict[str, dict[str, int]] = {
    "maths": {
        "arithmetic": 2,
        "multiplication": 3,
        "fractions": 3,
        "percentages": 2,
        "geometry": 2,
    },
    "english": {
        "synonyms": 3,
        "antonyms": 2,
        "spelling": 2,
        "grammar": 3,
    },
    "vr": {
        "letter-sequence": 2,
        "number-sequence": 2,
        "analogy": 2,
        "codes": 2,
        "odd-one-out": 2,
    },
}


def partition_by_topic(questions: list[Question]) -> dict[str | None, list[Question]]:
    parts: dict[str | None, list[Question]] = {}
    for q in questions:
        parts.setdefault(q.topic, []).append(q)
    return parts


def draw_quotas(
    questions: list[Question],
    quotas: dict[str, int],
    rng: random.Random,
) -> list[Question]:
    """Sample each topic's quota without replacement; short partitions are taken whole."""
    parts = partition_by_topic(questions)
    drawn: list[Question] = []
    for topic, quota in quotas.items():
        part = parts.get(topic, [])
        if len(part) <= quota:
            drawn.extend(part)
        else:
            drawn.extend(rng.sample(part, quota))
    return drawn


def build_pool(
    subject: str,
    curated: list[Question],
    generated: list[Question],
    profile: Profile,
    recent: Container[str],
    target_count: int,
    quotas: dict[str, int] | None = None,
    rng: random.Random | None = None,
) -> list[Question]:
    """Select up to *target_count* questions for one session.

    Candidates are tag-filtered and deduplicated. Questions not in *recent*
    are preferred: quota draws and the first top-up use only those, and
    recently served questions are used only once the rest are exhausted.
    A shorter list comes back only when every eligible question is used.
    When *recent* is a RecencyBuffer the selected ids are recorded in it.
    """
    rng = rng or random.Random()
    if quotas is None:
        quotas = QUOTAS.get(subject)

    candidates = dedupe(filter_eligible([*curated, *generated], profile))
    fresh = [q for q in candidates if q.id not in recent]
    stale = [q for q in candidates if q.id in recent]

    if quotas:
        selected = draw_quotas(fresh, quotas, rng)
    else:
        selected = list(fresh)
        rng.shuffle(selected)

    chosen = {q.id for q in selected}
    for source in (fresh, stale):
        if len(selected) >= target_count:
            break
        extra = [q for q in source if q.id not in chosen]
        rng.shuffle(extra)
        for q in extra[: target_count - len(selected)]:
            selected.append(q)
            chosen.add(q.id)

    selected = selected[:target_count]
    rng.shuffle(selected)

    _log.info(
        "Pool %s: %d curated + %d generated -> %d eligible (%d fresh) -> %d selected",
        subject, len(curated), len(generated), len(candidates), len(fresh), len(selected),
    )
    if len(selected) < target_count:
        _log.info("Pool %s short: %d of %d", subject, len(selected), target_count)

    if isinstance(recent, RecencyBuffer):
        recent.record(q.id for q in selected)
    return selected


def pick_passage(passages: list[Passage], rng: random.Random | None = None) -> Passage | None:
    if not passages:
        return None
    return (rng or random.Random()).choice(passages)
