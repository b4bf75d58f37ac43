"""Tests for data models."""
from __future__ import annotations

from exam_trainer.models import AnswerRecord, Profile, Question, VisualAtom


class TestQuestion:
    def test_tag_accessors(self):
        q = Question(
            id="q1", subject="maths", stem="2 + 2 = ?", choices=["3", "4", "5", "6"],
            answer_index=1, tags={"year:5", "topic:arithmetic", "difficulty:easy"},
        )
        assert q.topic == "arithmetic"
        assert q.year == "5"
        assert q.difficulty == "easy"
        assert q.correct_choice == "4"

    def test_missing_tags(self):
        q = Question(id="q1", subject="maths", stem="?", choices=["a", "b"], answer_index=0)
        assert q.topic is None
        assert q.year is None
        assert q.difficulty is None

    def test_to_dict_hides_answer(self):
        q = Question(id="q1", subject="maths", stem="?", choices=["a", "b"], answer_index=1,
                     explanation="because")
        d = q.to_dict(include_answer=False)
        assert "answer_index" not in d
        assert "explanation" not in d
        assert q.to_dict()["answer_index"] == 1

    def test_to_dict_visuals(self):
        atom = VisualAtom("circle", "black", "small", 90, (1, 0))
        q = Question(id="q1", subject="nvr", stem="?", choices=["A", "B"], answer_index=0,
                     visual_choice_sets=[[atom], [atom]])
        d = q.to_dict()
        assert d["visual_choice_sets"][0][0] == {
            "kind": "circle", "fill": "black", "size": "small", "rotation": 90, "position": [1, 0],
        }


class TestProfile:
    def test_defaults(self):
        p = Profile()
        assert p.grade == "Y5"
        assert p.exam_boards == ["Generic"]
        assert p.allow_harder is False

    def test_year_tag_and_level(self):
        assert Profile(grade="Y3").year_tag == "year:3"
        assert Profile(grade="Y3").level == 0
        assert Profile(grade="Y6").level == 3

    def test_from_dict_keeps_defaults_for_bad_fields(self):
        p = Profile.from_dict({"grade": "Y9", "exam_boards": "GL", "allow_harder": "yes"})
        assert p == Profile()

    def test_from_dict_filters_unknown_boards(self):
        p = Profile.from_dict({"grade": "Y4", "exam_boards": ["GL", "Mars"], "allow_harder": True})
        assert p.grade == "Y4"
        assert p.exam_boards == ["GL"]
        assert p.allow_harder is True

    def test_roundtrip(self):
        p = Profile(grade="Y6", exam_boards=["Kent", "CEM"], allow_harder=True)
        assert Profile.from_dict(p.to_dict()) == p


class TestAnswerRecord:
    def test_create(self):
        a = AnswerRecord("q1", 2, False, "fractions")
        assert a.question_id == "q1"
        assert a.topic == "fractions"
