"""Shared building blocks for the procedural generators."""
from __future__ import annotations

import random
from fractions import Fraction

from exam_trainer.models import Profile, Question

CHOICE_COUNT = 4
MAX_LEVEL = 4


class GenerationError(RuntimeError):
    """A builder could not produce enough distinct choices."""


def make_id(rng: random.Random, prefix: str) -> str:
    return f"{prefix}-{rng.getrandbits(32):08x}"


def item_level(rng: random.Random, profile: Profile) -> tuple[int, str]:
    """Pick the level for one item and its difficulty tag.

    When harder items are allowed roughly half the items are stretched one
    level above the profile's grade and tagged ``hard``.
    """
    level = profile.level
    if profile.allow_harder and rng.random() < 0.5:
        return min(level + 1, MAX_LEVEL), "hard"
    return level, "medium" if level >= 2 else "easy"


def fmt_number(value: int | float | Fraction) -> str:
    if isinstance(value, Fraction):
        if value.denominator == 1:
            return str(value.numerator)
        value = float(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return f"{value:.2f}".rstrip("0").rstrip(".")
    return str(value)


def numeric_choices(
    rng: random.Random,
    correct: int | float | Fraction,
    spread: int,
    count: int = CHOICE_COUNT - 1,
    allow_zero: bool = False,
    step: int | Fraction = 1,
) -> list[str]:
    """Return *count* distinct distractors near *correct*.

    Distractors are ``correct ± k*step`` for random ``k`` in ``1..spread``.
    Candidates that format to the same text as the answer or each other are
    discarded and redrawn; the spread widens if the neighbourhood runs out.
    """
    answer = fmt_number(correct)
    seen = {answer}
    out: list[str] = []
    attempts = 0
    while len(out) < count:
        attempts += 1
        if attempts > 200:
            raise GenerationError(f"could not find {count} distractors for {answer}")
        if attempts % 20 == 0:
            spread += 2
        delta = rng.randint(1, max(1, spread)) * step
        candidate = correct + delta if rng.random() < 0.5 else correct - delta
        if candidate < 0 or (candidate == 0 and not allow_zero):
            continue
        text = fmt_number(candidate)
        if text in seen:
            continue
        seen.add(text)
        out.append(text)
    return out


def unique_distractors(
    rng: random.Random,
    correct: str,
    pool: list[str],
    count: int = CHOICE_COUNT - 1,
) -> list[str]:
    """Sample *count* distractors from *pool*, skipping the answer and repeats (case-insensitive)."""
    seen = {correct.strip().lower()}
    candidates = []
    for item in pool:
        key = item.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        candidates.append(item)
    if len(candidates) < count:
        raise GenerationError(f"only {len(candidates)} distractors available for {correct!r}")
    return rng.sample(candidates, count)


def finish_choices(rng: random.Random, correct: str, distractors: list[str]) -> tuple[list[str], int]:
    """Shuffle answer + distractors and locate the answer after shuffling."""
    choices = [correct, *distractors]
    rng.shuffle(choices)
    if len({c.strip().lower() for c in choices}) != len(choices):
        raise GenerationError(f"duplicate choices: {choices}")
    return choices, choices.index(correct)


def build_question(
    rng: random.Random,
    *,
    prefix: str,
    subject: str,
    topic: str,
    difficulty: str,
    profile: Profile,
    stem: str,
    correct: str,
    distractors: list[str],
    explanation: str = "",
) -> Question:
    choices, answer_index = finish_choices(rng, correct, distractors)
    return Question(
        id=make_id(rng, prefix),
        subject=subject,
        stem=stem,
        choices=choices,
        answer_index=answer_index,
        explanation=explanation,
        tags={profile.year_tag, f"topic:{topic}", f"difficulty:{difficulty}"},
    )
