"""Tests for writing prompts and draft feedback."""
from __future__ import annotations

import random

from exam_trainer.models import WritingPrompt
from exam_trainer.writing import DEFAULT_PROMPTS, assess_writing, pick_prompt

GOOD_DRAFT = """The storm arrived suddenly over the ancient harbour. Dark clouds gathered, and the gleaming boats rocked nervously on the water.

Meanwhile, Martha cautiously climbed the lighthouse steps; her lantern trembling in the eerie wind. Would the boats make it home? She whispered a quiet hope.

At last the rain eased. Although the town was exhausted, everyone smiled when the fishermen returned safely to the shore.
"""


class TestPickPrompt:
    def test_falls_back_to_defaults(self):
        assert pick_prompt([], random.Random(0)) in DEFAULT_PROMPTS

    def test_uses_given_prompts(self):
        prompt = WritingPrompt("w1", "Sea", "Describe the sea.")
        assert pick_prompt([prompt], random.Random(0)) is prompt


class TestAssessWriting:
    def test_empty(self):
        fb = assess_writing("")
        assert fb.words == 0
        assert fb.sentences == 0
        assert fb.score == 0
        assert fb.tips

    def test_counts(self):
        fb = assess_writing("One two three. Four five!\n\nSix?")
        assert fb.words == 6
        assert fb.sentences == 3
        assert fb.paragraphs == 2

    def test_rich_draft_scores_higher(self):
        short = assess_writing("I went out. It was fun.")
        rich = assess_writing(GOOD_DRAFT)
        assert rich.score > short.score
        assert rich.paragraphs == 3
        assert {"suddenly", "ancient", "cautiously"} <= set(rich.ambitious_words)
        assert "?" in rich.punctuation

    def test_score_bounded(self):
        fb = assess_writing(GOOD_DRAFT * 5)
        assert 0 <= fb.score <= 10

    def test_to_dict(self):
        d = assess_writing("Hello there.").to_dict()
        assert d["words"] == 2
        assert isinstance(d["tips"], list)
