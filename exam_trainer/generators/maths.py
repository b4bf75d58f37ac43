"""Arithmetic, fraction, percentage and geometry items."""
from __future__ import annotations

import random
from fractions import Fraction

from exam_trainer.generators.common import build_question, fmt_number, item_level, numeric_choices
from exam_trainer.models import Profile, Question

SUBJECT = "maths"

ADD_LIMIT = [50, 100, 500, 1000, 5000]
TIMES_LIMIT = [5, 10, 12, 15, 25]
DIVISOR_LIMIT = [5, 9, 12, 12, 15]
DENOMINATORS = [
    [2, 4],
    [2, 3, 4, 5],
    [3, 4, 5, 8, 10],
    [3, 5, 6, 8, 10, 12],
    [6, 7, 8, 9, 12],
]
PERCENTAGES = [
    [50],
    [10, 25, 50],
    [10, 20, 25, 50, 75],
    [5, 15, 30, 35, 40, 60],
    [15, 35, 45, 65, 85],
]
SIDE_LIMIT = [6, 9, 12, 15, 20]


def _arithmetic(rng: random.Random, profile: Profile) -> Question:
    level, difficulty = item_level(rng, profile)
    op = rng.choice(["+", "-", "÷"])
    if op == "÷":
        divisor = rng.randint(2, DIVISOR_LIMIT[level])
        answer = rng.randint(2, 10 + level * 5)
        dividend = divisor * answer
        stem = f"What is {dividend} ÷ {divisor}?"
        explanation = f"{divisor} × {answer} = {dividend}, so {dividend} ÷ {divisor} = {answer}."
    else:
        limit = ADD_LIMIT[level]
        a = rng.randint(limit // 10, limit)
        b = rng.randint(limit // 10, limit)
        if op == "-":
            a, b = max(a, b), min(a, b)
            if a == b:
                a += 1
            answer = a - b
        else:
            answer = a + b
        stem = f"What is {a} {op} {b}?"
        explanation = f"{a} {op} {b} = {answer}."
    spread = 4 + level * 2
    distractors = numeric_choices(rng, answer, spread)
    return build_question(
        rng, prefix="gm-arith", subject=SUBJECT, topic="arithmetic",
        difficulty=difficulty, profile=profile, stem=stem,
        correct=fmt_number(answer), distractors=distractors, explanation=explanation,
    )


def _multiplication(rng: random.Random, profile: Profile) -> Question:
    level, difficulty = item_level(rng, profile)
    a = rng.randint(2, TIMES_LIMIT[level])
    b = rng.randint(2, 12)
    answer = a * b
    distractors = numeric_choices(rng, answer, 4 + level, step=1)
    # A neighbouring times-table fact is the classic slip.
    slip = a * (b + 1)
    if fmt_number(slip) not in distractors:
        distractors[-1] = fmt_number(slip)
    return build_question(
        rng, prefix="gm-mult", subject=SUBJECT, topic="multiplication",
        difficulty=difficulty, profile=profile, stem=f"What is {a} × {b}?",
        correct=fmt_number(answer), distractors=distractors,
        explanation=f"{a} × {b} = {answer}.",
    )


def _fractions(rng: random.Random, profile: Profile) -> Question:
    level, difficulty = item_level(rng, profile)
    denom = rng.choice(DENOMINATORS[level])
    num = rng.randint(1, denom - 1)
    whole = denom * rng.randint(2, 6 + level * 2)
    answer = Fraction(num, denom) * whole
    distractors = numeric_choices(rng, answer, 3 + level)
    return build_question(
        rng, prefix="gm-frac", subject=SUBJECT, topic="fractions",
        difficulty=difficulty, profile=profile,
        stem=f"What is {num}/{denom} of {whole}?",
        correct=fmt_number(answer), distractors=distractors,
        explanation=f"{whole} ÷ {denom} = {whole // denom}, and {whole // denom} × {num} = {fmt_number(answer)}.",
    )


def _percentages(rng: random.Random, profile: Profile) -> Question:
    level, difficulty = item_level(rng, profile)
    pct = rng.choice(PERCENTAGES[level])
    whole = 20 * rng.randint(1, 5 + level * 5)
    answer = Fraction(pct, 100) * whole
    distractors = numeric_choices(rng, answer, 3 + level, step=max(1, pct * whole // 1000))
    return build_question(
        rng, prefix="gm-pct", subject=SUBJECT, topic="percentages",
        difficulty=difficulty, profile=profile,
        stem=f"What is {pct}% of {whole}?",
        correct=fmt_number(answer), distractors=distractors,
        explanation=f"{pct}% of {whole} = {pct}/100 × {whole} = {fmt_number(answer)}.",
    )


def _geometry(rng: random.Random, profile: Profile) -> Question:
    level, difficulty = item_level(rng, profile)
    kind = rng.choice(["triangle", "line", "rectangle"])
    step = 5 if level < 3 else 1
    if kind == "triangle":
        a = step * rng.randint(20 // step, 100 // step)
        b = step * rng.randint(20 // step, (170 - a) // step - 1)
        answer = 180 - a - b
        stem = f"Two angles of a triangle are {a}° and {b}°. What is the third angle?"
        explanation = f"Angles in a triangle add up to 180°: 180 − {a} − {b} = {answer}°."
        distractors = numeric_choices(rng, answer, 4, step=step)
    elif kind == "line":
        a = step * rng.randint(10 // step, 170 // step)
        answer = 180 - a
        stem = f"Two angles sit on a straight line. One is {a}°. What is the other?"
        explanation = f"Angles on a straight line add up to 180°: 180 − {a} = {answer}°."
        distractors = numeric_choices(rng, answer, 4, step=step)
    else:
        w = rng.randint(2, SIDE_LIMIT[level])
        h = rng.randint(2, SIDE_LIMIT[level])
        area, perimeter = w * h, 2 * (w + h)
        if rng.random() < 0.5:
            answer, other, what = area, perimeter, "area"
            explanation = f"Area = length × width = {w} × {h} = {area} cm²."
        else:
            answer, other, what = perimeter, area, "perimeter"
            explanation = f"Perimeter = 2 × (length + width) = 2 × ({w} + {h}) = {perimeter} cm."
        stem = f"A rectangle is {w} cm long and {h} cm wide. What is its {what}?"
        distractors = numeric_choices(rng, answer, 3 + level)
        # Mixing up area and perimeter is the usual mistake.
        if other != answer and fmt_number(other) not in distractors:
            distractors[0] = fmt_number(other)
    return build_question(
        rng, prefix="gm-geo", subject=SUBJECT, topic="geometry",
        difficulty=difficulty, profile=profile, stem=stem,
        correct=fmt_number(answer), distractors=distractors, explanation=explanation,
    )


TOPICS = {
    "arithmetic": _arithmetic,
    "multiplication": _multiplication,
    "fractions": _fractions,
    "percentages": _percentages,
    "geometry": _geometry,
}
