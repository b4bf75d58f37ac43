"""Curated question data: fetch best-effort, normalize raw JSON into domain objects.

Every loader here swallows source failures (missing file, network error,
malformed JSON, wrong shape) and returns an empty list, so callers fall back
to generated content. Individual malformed records are dropped.
"""
from __future__ import annotations

import hashlib
import logging

from exam_trainer.models import GENERIC_BOARD, Passage, Question, VisualAtom, WritingPrompt
from exam_trainer.providers.base import DatasetProvider

_log = logging.getLogger("exam_trainer.dataset")

DATASET_NAMES = {
    "maths": "math",
    "english": "english",
    "vr": "vr",
    "nvr": "nvr",
    "comprehension": "comprehension",
    "writing": "writing",
}


def _text_id(text: str) -> str:
    return hashlib.sha256(text.strip().encode()).hexdigest()[:12]


def _as_str_list(value) -> list[str] | None:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple, set)) and all(isinstance(v, str) for v in value):
        return list(value)
    return None


def _as_int(value) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def _normalize_atom(raw) -> VisualAtom | None:
    if not isinstance(raw, dict) or not isinstance(raw.get("kind"), str):
        return None
    pos = raw.get("position", (raw.get("x", 0), raw.get("y", 0)))
    try:
        position = (int(pos[0]), int(pos[1]))
        rotation = int(raw.get("rotation", 0))
    except (TypeError, ValueError, IndexError):
        return None
    return VisualAtom(
        kind=raw["kind"],
        fill=str(raw.get("fill", "black")),
        size=str(raw.get("size", "medium")),
        rotation=rotation,
        position=position,
    )


def _normalize_visual_sets(raw, n_choices: int) -> list[list[VisualAtom]] | None:
    if raw is None:
        return None
    if not isinstance(raw, list) or len(raw) != n_choices:
        raise ValueError("visual choice sets must parallel choices")
    sets = []
    for entry in raw:
        if not isinstance(entry, list):
            raise ValueError("visual choice set must be a list")
        atoms = [_normalize_atom(a) for a in entry]
        if any(a is None for a in atoms):
            raise ValueError("malformed visual atom")
        sets.append(atoms)
    return sets


def normalize_question(raw, subject: str) -> Question | None:
    """Turn one loosely-typed record into a Question, or None if it is unusable."""
    if not isinstance(raw, dict):
        return None
    qid = raw.get("id")
    stem = raw.get("stem", raw.get("question"))
    choices = _as_str_list(raw.get("choices", raw.get("options")))
    answer_index = _as_int(raw.get("answerIndex", raw.get("answer_index")))
    if qid is None or not isinstance(stem, str) or not stem.strip():
        _log.debug("Dropping record without id/stem: %.80r", raw)
        return None
    if not choices or len(choices) < 2:
        _log.debug("Dropping %s: needs at least two choices", qid)
        return None
    if len({c.strip().lower() for c in choices}) != len(choices):
        _log.debug("Dropping %s: duplicate choices", qid)
        return None
    if answer_index is None or not 0 <= answer_index < len(choices):
        _log.debug("Dropping %s: bad answer index %r", qid, raw.get("answerIndex"))
        return None

    tags = _as_str_list(raw.get("tags")) or []
    boards = _as_str_list(raw.get("examBoards", raw.get("board"))) or [GENERIC_BOARD]
    try:
        visual = _normalize_visual_sets(raw.get("visualChoiceSets"), len(choices))
    except ValueError as e:
        _log.debug("Dropping %s: %s", qid, e)
        return None

    explanation = raw.get("explanation")
    return Question(
        id=str(qid),
        subject=subject,
        stem=stem,
        choices=choices,
        answer_index=answer_index,
        explanation=explanation if isinstance(explanation, str) else "",
        tags=set(tags),
        exam_boards=set(boards),
        visual_choice_sets=visual,
    )


def normalize_questions(raw, subject: str) -> list[Question]:
    if not isinstance(raw, list):
        _log.warning("Expected a list of %s questions, got %s", subject, type(raw).__name__)
        return []
    out = []
    for item in raw:
        q = normalize_question(item, subject)
        if q is not None:
            out.append(q)
    if len(out) < len(raw):
        _log.info("Dropped %d malformed %s records", len(raw) - len(out), subject)
    return out


def normalize_passage(raw) -> Passage | None:
    if not isinstance(raw, dict):
        return None
    pid = raw.get("id")
    body = raw.get("body", raw.get("text"))
    if pid is None or not isinstance(body, str) or not body.strip():
        return None
    questions = []
    for i, item in enumerate(raw.get("questions") or []):
        if isinstance(item, dict) and "id" not in item:
            item = {**item, "id": f"{pid}-q{i + 1}"}
        q = normalize_question(item, "comprehension")
        if q is not None:
            questions.append(q)
    if not questions:
        return None
    title = raw.get("title")
    return Passage(
        id=str(pid),
        title=title if isinstance(title, str) else "",
        body=body,
        questions=questions,
    )


def normalize_prompt(raw) -> WritingPrompt | None:
    if isinstance(raw, str) and raw.strip():
        return WritingPrompt(id=_text_id(raw), title="", prompt=raw.strip())
    if not isinstance(raw, dict):
        return None
    text = raw.get("prompt")
    if not isinstance(text, str) or not text.strip():
        return None
    title = raw.get("title")
    return WritingPrompt(
        id=str(raw.get("id", _text_id(text))),
        title=title if isinstance(title, str) else "",
        prompt=text.strip(),
        tips=_as_str_list(raw.get("tips")) or [],
    )


async def _fetch(provider: DatasetProvider, name: str) -> object | None:
    try:
        return await provider.fetch(name)
    except Exception as e:
        _log.warning("Curated source %s unavailable for %r: %s", provider.name(), name, e)
        return None


async def load_curated(provider: DatasetProvider, subject: str) -> list[Question]:
    name = DATASET_NAMES.get(subject)
    if name is None:
        return []
    raw = await _fetch(provider, name)
    if raw is None:
        return []
    return normalize_questions(raw, subject)


async def load_passages(provider: DatasetProvider) -> list[Passage]:
    raw = await _fetch(provider, DATASET_NAMES["comprehension"])
    if not isinstance(raw, list):
        return []
    return [p for p in (normalize_passage(r) for r in raw) if p is not None]


async def load_writing_prompts(provider: DatasetProvider) -> list[WritingPrompt]:
    raw = await _fetch(provider, DATASET_NAMES["writing"])
    if not isinstance(raw, list):
        return []
    return [p for p in (normalize_prompt(r) for r in raw) if p is not None]


BUILTIN_PASSAGES = [
    Passage(
        id="builtin-lighthouse",
        title="The Lighthouse Keeper",
        body=(
            "Every evening, as the sun slipped behind the cliffs, old Martha climbed "
            "the one hundred and twelve steps of the lighthouse. She polished the great "
            "lens until it gleamed, trimmed the wick, and lit the lamp that would guide "
            "the fishing boats safely home.\n\n"
            "One stormy night the lamp flickered and died. Martha's hands trembled as she "
            "searched for matches, for she could hear the distant horn of a boat caught "
            "among the rocks. At last she found a single match, struck it carefully, and "
            "the beam swept out across the furious sea."
        ),
        questions=[
            Question(
                id="builtin-lighthouse-q1", subject="comprehension",
                stem="When did Martha climb the lighthouse steps?",
                choices=["At dawn", "Every evening", "Only during storms", "Once a week"],
                answer_index=1,
                explanation="The passage says she climbed them 'every evening'.",
            ),
            Question(
                id="builtin-lighthouse-q2", subject="comprehension",
                stem="Why were Martha's hands trembling?",
                choices=[
                    "She was cold from the rain",
                    "She had climbed too many steps",
                    "A boat was in danger and the lamp had gone out",
                    "She had burned herself on the lamp",
                ],
                answer_index=2,
                explanation="The lamp died while she could hear a boat among the rocks.",
            ),
            Question(
                id="builtin-lighthouse-q3", subject="comprehension",
                stem="What does the word 'furious' suggest about the sea?",
                choices=["It was calm", "It was wild and rough", "It was shallow", "It was warm"],
                answer_index=1,
                explanation="'Furious' describes the violent, stormy water.",
            ),
            Question(
                id="builtin-lighthouse-q4", subject="comprehension",
                stem="How many steps did the lighthouse have?",
                choices=["100", "112", "120", "211"],
                answer_index=1,
                explanation="'one hundred and twelve steps'.",
            ),
        ],
    ),
]
