"""Dispatch procedural question generation to the per-subject builders."""
from __future__ import annotations

import logging
import random

from exam_trainer.filters import stem_fingerprint
from exam_trainer.generators import english, maths, nonverbal, verbal
from exam_trainer.generators.common import GenerationError
from exam_trainer.models import Profile, Question

_log = logging.getLogger("exam_trainer.qgen")

MAX_RETRIES = 3

GENERATORS = {
    "maths": maths.TOPICS,
    "english": english.TOPICS,
    "vr": verbal.TOPICS,
    "nvr": nonverbal.TOPICS,
}


def topics_for(subject: str) -> list[str]:
    return list(GENERATORS.get(subject, {}))


def generate_question(
    subject: str,
    profile: Profile,
    rng: random.Random,
    topic: str | None = None,
) -> Question | None:
    """Generate a single question for *subject*, optionally for one *topic*.

    Builders raise GenerationError when they cannot find enough distinct
    distractors; those attempts are retried with fresh randomness.
    """
    builders = GENERATORS.get(subject)
    if not builders:
        return None
    if topic is None:
        topic = rng.choice(sorted(builders))
    builder = builders[topic]
    for attempt in range(MAX_RETRIES):
        try:
            return builder(rng, profile)
        except GenerationError as e:
            _log.debug("%s/%s attempt %d failed: %s", subject, topic, attempt + 1, e)
    _log.warning("Failed to generate %s/%s after %d attempts", subject, topic, MAX_RETRIES)
    return None


def generate(subject: str, profile: Profile, rng: random.Random, count: int) -> list[Question]:
    """Generate up to *count* topic-balanced questions with distinct stems.

    Topics are visited round-robin from a random starting point. A question
    whose stem fingerprint already occurs in the batch is discarded; the batch
    gives up after ``count * 5`` attempts, so it can come back short.
    """
    topics = topics_for(subject)
    if not topics or count <= 0:
        return []
    offset = rng.randrange(len(topics))
    seen: set[str] = set()
    out: list[Question] = []
    attempts = 0
    while len(out) < count and attempts < count * 5:
        topic = topics[(offset + attempts) % len(topics)]
        attempts += 1
        q = generate_question(subject, profile, rng, topic)
        if q is None:
            continue
        fp = stem_fingerprint(q)
        if fp in seen:
            continue
        seen.add(fp)
        out.append(q)
    if len(out) < count:
        _log.info("Generated %d/%d %s questions", len(out), count, subject)
    return out
