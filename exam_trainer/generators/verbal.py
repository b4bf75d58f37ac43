"""Verbal reasoning: letter/number series, analogies, letter codes, odd one out."""
from __future__ import annotations

import random
import string

from exam_trainer.generators.common import (
    build_question,
    fmt_number,
    item_level,
    numeric_choices,
    unique_distractors,
)
from exam_trainer.models import Profile, Question

SUBJECT = "vr"
LETTERS = string.ascii_uppercase

# (a, b, c, answer, distractors, minimum level)
ANALOGIES = [
    ("hot", "cold", "up", "down", ["high", "over", "top"], 0),
    ("puppy", "dog", "kitten", "cat", ["mouse", "pet", "fur"], 0),
    ("bird", "nest", "bee", "hive", ["honey", "flower", "sting"], 0),
    ("day", "night", "summer", "winter", ["sun", "spring", "holiday"], 0),
    ("foot", "shoe", "hand", "glove", ["finger", "ring", "arm"], 1),
    ("pen", "write", "knife", "cut", ["fork", "sharp", "kitchen"], 1),
    ("fish", "swim", "bird", "fly", ["feather", "wing", "sing"], 1),
    ("author", "book", "composer", "symphony", ["piano", "conductor", "orchestra"], 2),
    ("sheep", "flock", "wolf", "pack", ["howl", "forest", "den"], 2),
    ("thermometer", "temperature", "clock", "time", ["hands", "alarm", "tick"], 2),
    ("drought", "rain", "famine", "food", ["hunger", "desert", "crop"], 3),
    ("chapter", "novel", "verse", "poem", ["rhyme", "poet", "stanza"], 3),
    ("cautious", "reckless", "frugal", "extravagant", ["thrifty", "wealthy", "careful"], 4),
    ("sculptor", "chisel", "surgeon", "scalpel", ["hospital", "patient", "operation"], 4),
]

CATEGORIES = {
    "fruit": ["apple", "pear", "plum", "cherry", "mango", "peach"],
    "vegetables": ["carrot", "leek", "onion", "cabbage", "turnip", "potato"],
    "furniture": ["chair", "table", "sofa", "wardrobe", "stool", "bench"],
    "birds": ["robin", "sparrow", "eagle", "owl", "wren", "finch"],
    "instruments": ["violin", "flute", "drum", "trumpet", "harp", "cello"],
    "metals": ["iron", "copper", "silver", "tin", "zinc", "nickel"],
    "planets": ["Mars", "Venus", "Saturn", "Jupiter", "Mercury", "Neptune"],
}

CODE_WORDS = ["CAT", "DOG", "SUN", "HAT", "PEN", "BOX", "FISH", "LAMP", "TREE", "BOAT", "RAIN", "MILK"]


def _shift(letter: str, k: int) -> str:
    return LETTERS[(LETTERS.index(letter) + k) % 26]


def _encode(word: str, k: int) -> str:
    return "".join(_shift(ch, k) for ch in word)


def _letter_sequence(rng: random.Random, profile: Profile) -> Question:
    level, difficulty = item_level(rng, profile)
    start = rng.randrange(26)
    gap = rng.randint(1, 1 + level)
    step = rng.randint(1, 1 + level)
    pairs = []
    for i in range(5):
        first = LETTERS[(start + i * step) % 26]
        pairs.append(first + _shift(first, gap))
    shown, answer = pairs[:4], pairs[4]
    first, second = answer
    candidates = [
        _shift(first, 1) + second,
        first + _shift(second, 1),
        _shift(first, -1) + _shift(second, -1),
        _shift(first, 1) + _shift(second, 1),
        second + first,
        pairs[3],
    ]
    return build_question(
        rng, prefix="gv-lseq", subject=SUBJECT, topic="letter-sequence",
        difficulty=difficulty, profile=profile,
        stem=f"Find the next pair in the series: {', '.join(shown)}, ?",
        correct=answer, distractors=unique_distractors(rng, answer, candidates),
        explanation=f"Each pair moves on {step} letter(s); the second letter is {gap} after the first.",
    )


def _number_sequence(rng: random.Random, profile: Profile) -> Question:
    level, difficulty = item_level(rng, profile)
    kind = rng.choice(["add", "add", "double", "growing"][: 2 + min(level, 2)])
    if kind == "add":
        start, diff = rng.randint(1, 20 + level * 10), rng.randint(2, 4 + level * 3)
        terms = [start + i * diff for i in range(6)]
        rule = f"add {diff} each time"
    elif kind == "double":
        start = rng.randint(1, 3 + level)
        terms = [start * 2 ** i for i in range(6)]
        rule = "double each time"
    else:
        start, diff = rng.randint(1, 10), rng.randint(1, 3)
        terms = [start]
        for i in range(5):
            terms.append(terms[-1] + diff + i)
        rule = f"the gap grows by 1 each time, starting at {diff}"
    answer = terms[5]
    return build_question(
        rng, prefix="gv-nseq", subject=SUBJECT, topic="number-sequence",
        difficulty=difficulty, profile=profile,
        stem=f"What comes next: {', '.join(str(t) for t in terms[:5])}, ?",
        correct=fmt_number(answer), distractors=numeric_choices(rng, answer, 3 + level),
        explanation=f"The rule is: {rule}. The next term is {answer}.",
    )


def _analogy(rng: random.Random, profile: Profile) -> Question:
    level, difficulty = item_level(rng, profile)
    a, b, c, answer, wrong, _ = rng.choice([e for e in ANALOGIES if e[-1] <= level])
    return build_question(
        rng, prefix="gv-anal", subject=SUBJECT, topic="analogy",
        difficulty=difficulty, profile=profile,
        stem=f"{a.capitalize()} is to {b} as {c} is to ___?",
        correct=answer, distractors=unique_distractors(rng, answer, wrong),
        explanation=f"{a.capitalize()} relates to {b} in the same way that {c} relates to {answer}.",
    )


def _codes(rng: random.Random, profile: Profile) -> Question:
    level, difficulty = item_level(rng, profile)
    k = rng.randint(1, 1 + level)
    if level >= 3 and rng.random() < 0.5:
        k = -k
    example, target = rng.sample(CODE_WORDS, 2)
    answer = _encode(target, k)
    candidates = [
        _encode(target, k + 1),
        _encode(target, k - 1),
        _encode(target, -k),
        _encode(target[::-1], k),
        _encode(target, k + 2),
    ]
    direction = "forward" if k > 0 else "back"
    return build_question(
        rng, prefix="gv-code", subject=SUBJECT, topic="codes",
        difficulty=difficulty, profile=profile,
        stem=f"If {example} is written in code as {_encode(example, k)}, how is {target} written?",
        correct=answer, distractors=unique_distractors(rng, answer, candidates),
        explanation=f"Each letter moves {abs(k)} place(s) {direction} in the alphabet.",
    )


def _odd_one_out(rng: random.Random, profile: Profile) -> Question:
    level, difficulty = item_level(rng, profile)
    same, other = rng.sample(sorted(CATEGORIES), 2)
    group = rng.sample(CATEGORIES[same], 3)
    answer = rng.choice(CATEGORIES[other])
    listed = sorted([*group, answer], key=str.lower)
    return build_question(
        rng, prefix="gv-odd", subject=SUBJECT, topic="odd-one-out",
        difficulty=difficulty, profile=profile,
        stem=f"Which word is the odd one out: {', '.join(listed)}?",
        correct=answer, distractors=group,
        explanation=f"The others are all {same}; '{answer}' belongs with {other}.",
    )


TOPICS = {
    "letter-sequence": _letter_sequence,
    "number-sequence": _number_sequence,
    "analogy": _analogy,
    "codes": _codes,
    "odd-one-out": _odd_one_out,
}
