"""Shape-based odd-one-out items.

Three options share a common value of one attribute (fill, size, rotation or
count) and the fourth differs in it. The odd option's slot is drawn
independently of the order in which the options were built, and the choices
themselves are just the labels A-D; what gets drawn lives in
``visual_choice_sets``.
"""
from __future__ import annotations

import random

from exam_trainer.generators.common import CHOICE_COUNT, item_level, make_id
from exam_trainer.models import Profile, Question, VisualAtom

SUBJECT = "nvr"
LABELS = ["A", "B", "C", "D"]

KINDS = ["circle", "square", "triangle", "pentagon", "hexagon", "star"]
FILLS = ["black", "white", "grey", "striped"]
SIZES = ["small", "medium", "large"]
ROTATION_STEP = [90, 90, 90, 45, 30]

ATTRIBUTES_BY_LEVEL = [
    ["fill", "size"],
    ["fill", "size", "count"],
    ["fill", "size", "count", "rotation"],
    ["fill", "size", "count", "rotation"],
    ["count", "rotation"],
]


def _option(kind: str, fill: str, size: str, rotation: int, count: int) -> list[VisualAtom]:
    return [VisualAtom(kind, fill, size, rotation, (i, 0)) for i in range(count)]


def _describe(attribute: str, common, odd) -> str:
    if attribute == "count":
        return f"it has {odd} shape(s) while the others have {common}"
    if attribute == "rotation":
        return f"it is turned to {odd}° while the others are at {common}°"
    return f"it is {odd} while the others are {common}"


def _odd_one_out(rng: random.Random, profile: Profile) -> Question:
    level, difficulty = item_level(rng, profile)
    attribute = rng.choice(ATTRIBUTES_BY_LEVEL[level])

    fill = rng.choice(FILLS)
    size = rng.choice(SIZES)
    rotation = 0
    count = 1
    if attribute == "rotation":
        kinds = ["arrow"] * CHOICE_COUNT
        step = ROTATION_STEP[level]
        rotation = step * rng.randrange(360 // step)
    else:
        # Shapes vary from option to option so kind never singles one out.
        kinds = rng.sample(KINDS, CHOICE_COUNT) if level >= 1 else [rng.choice(KINDS)] * CHOICE_COUNT
    if attribute == "count":
        count = rng.randint(1, 2 + min(level, 2))

    if attribute == "fill":
        common, odd = fill, rng.choice([f for f in FILLS if f != fill])
    elif attribute == "size":
        common, odd = size, rng.choice([s for s in SIZES if s != size])
    elif attribute == "rotation":
        step = ROTATION_STEP[level]
        common, odd = rotation, (rotation + step * rng.randint(1, 360 // step - 1)) % 360
    else:
        common = count
        odd = count + 1 if count == 1 or rng.random() < 0.5 else count - 1

    odd_slot = rng.randrange(CHOICE_COUNT)
    sets: list[list[VisualAtom]] = []
    for slot in range(CHOICE_COUNT):
        value = odd if slot == odd_slot else common
        attrs = {"fill": fill, "size": size, "rotation": rotation, "count": count}
        attrs[attribute] = value
        sets.append(_option(kinds[slot], attrs["fill"], attrs["size"], attrs["rotation"], attrs["count"]))

    return Question(
        id=make_id(rng, f"gn-{attribute}"),
        subject=SUBJECT,
        stem="Which option is the odd one out?",
        choices=list(LABELS),
        answer_index=odd_slot,
        explanation=f"Option {LABELS[odd_slot]} is the odd one out: {_describe(attribute, common, odd)}.",
        tags={profile.year_tag, "topic:odd-one-out", f"difficulty:{difficulty}"},
        visual_choice_sets=sets,
    )


TOPICS = {
    "odd-one-out": _odd_one_out,
}
