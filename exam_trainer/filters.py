"""Eligibility filtering and near-duplicate removal for candidate questions."""
from __future__ import annotations

import hashlib
import re
from collections.abc import Container, Iterable

from exam_trainer.models import GENERIC_BOARD, Profile, Question

_WS = re.compile(r"\s+")


def eligible(question: Question, profile: Profile, recent_ids: Container[str] = ()) -> bool:
    """Return True if *question* may be served to *profile*.

    The year tag must be absent or match the profile's year (``year:4`` and
    ``year:Y4`` are the same). The board set must be empty, marked Generic, or
    overlap the profile's boards. Hard items need ``allow_harder``, and the id
    must not have been served recently.
    """
    year = question.year
    if year is not None and f"year:{year.upper().lstrip('Y')}" != profile.year_tag:
        return False
    boards = question.exam_boards
    if boards and GENERIC_BOARD not in boards and not boards.intersection(profile.exam_boards):
        return False
    if question.difficulty == "hard" and not profile.allow_harder:
        return False
    return question.id not in recent_ids


def filter_eligible(
    questions: Iterable[Question],
    profile: Profile,
    recent_ids: Container[str] = (),
) -> list[Question]:
    return [q for q in questions if eligible(q, profile, recent_ids)]


def _visual_signature(question: Question) -> str:
    parts = []
    for atoms in question.visual_choice_sets or []:
        parts.append(";".join(
            f"{a.kind},{a.fill},{a.size},{a.rotation},{a.position[0]},{a.position[1]}"
            for a in atoms
        ))
    return "|".join(parts)


def stem_fingerprint(question: Question) -> str:
    """Case- and whitespace-insensitive hash of the stem.

    Visual items share text stems, so their drawable choice sets are folded in.
    """
    text = _WS.sub(" ", question.stem.strip().lower())
    if question.visual_choice_sets:
        text += "\n" + _visual_signature(question)
    return hashlib.sha256(text.encode()).hexdigest()[:16]


def dedupe(questions: Iterable[Question]) -> list[Question]:
    """Drop repeated ids and repeated stem fingerprints, keeping first-seen order."""
    seen_ids: set[str] = set()
    seen_stems: set[str] = set()
    out: list[Question] = []
    for q in questions:
        if q.id in seen_ids:
            continue
        fp = stem_fingerprint(q)
        if fp in seen_stems:
            continue
        seen_ids.add(q.id)
        seen_stems.add(fp)
        out.append(q)
    return out
