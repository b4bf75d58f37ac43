"""Tests for curated dataset loading and normalization."""
from __future__ import annotations

import asyncio
import json
from unittest.mock import patch

import httpx
import pytest
from conftest import FakeProvider

from exam_trainer.dataset import (
    BUILTIN_PASSAGES,
    load_curated,
    load_passages,
    load_writing_prompts,
    normalize_passage,
    normalize_prompt,
    normalize_question,
    normalize_questions,
)
from exam_trainer.providers.file_source import FileDatasetProvider
from exam_trainer.providers.http_source import HttpDatasetProvider

RAW = {
    "id": "m1",
    "question": "What is 3 × 4?",
    "options": ["7", "12", "14", "34"],
    "answerIndex": 1,
    "explanation": "3 × 4 = 12",
    "tags": ["year:5", "topic:multiplication"],
    "examBoards": ["GL"],
}


class TestNormalizeQuestion:
    def test_accepts_alternate_keys(self):
        q = normalize_question(RAW, "maths")
        assert q.id == "m1"
        assert q.stem == "What is 3 × 4?"
        assert q.correct_choice == "12"
        assert q.topic == "multiplication"
        assert q.exam_boards == {"GL"}

    def test_defaults_board_to_generic(self):
        raw = {k: v for k, v in RAW.items() if k != "examBoards"}
        assert normalize_question(raw, "maths").exam_boards == {"Generic"}

    def test_single_board_string(self):
        assert normalize_question({**RAW, "examBoards": "Kent"}, "maths").exam_boards == {"Kent"}

    def test_string_answer_index(self):
        assert normalize_question({**RAW, "answerIndex": "2"}, "maths").answer_index == 2

    @pytest.mark.parametrize("broken", [
        {"answerIndex": 4},
        {"answerIndex": -1},
        {"answerIndex": None},
        {"answerIndex": True},
        {"options": ["only one"]},
        {"options": ["a", "A", "b"]},
        {"question": ""},
        {"id": None},
        {"visualChoiceSets": [[{"kind": "circle"}]]},
    ])
    def test_rejects_malformed(self, broken):
        assert normalize_question({**RAW, **broken}, "maths") is None

    def test_not_a_dict(self):
        assert normalize_question(["x"], "maths") is None

    def test_visual_sets(self):
        raw = {
            **RAW,
            "choices": ["A", "B"],
            "options": None,
            "answerIndex": 0,
            "visualChoiceSets": [
                [{"kind": "circle", "fill": "black", "x": 1, "y": 0}],
                [{"kind": "square", "rotation": 90}],
            ],
        }
        q = normalize_question(raw, "nvr")
        assert q.visual_choice_sets[0][0].position == (1, 0)
        assert q.visual_choice_sets[1][0].rotation == 90
        assert q.visual_choice_sets[1][0].size == "medium"

    def test_normalize_questions_drops_bad_records(self):
        qs = normalize_questions([RAW, {"id": "bad"}, {**RAW, "id": "m2"}], "maths")
        assert [q.id for q in qs] == ["m1", "m2"]

    def test_normalize_questions_wrong_shape(self):
        assert normalize_questions({"questions": [RAW]}, "maths") == []


class TestNormalizePassage:
    def test_generates_sub_question_ids(self):
        raw = {
            "id": "p1",
            "title": "Foxes",
            "text": "Foxes are clever.",
            "questions": [{k: v for k, v in RAW.items() if k != "id"}],
        }
        p = normalize_passage(raw)
        assert p.body == "Foxes are clever."
        assert p.questions[0].id == "p1-q1"
        assert p.questions[0].subject == "comprehension"

    def test_no_valid_questions(self):
        assert normalize_passage({"id": "p1", "body": "x", "questions": [{"id": "q"}]}) is None

    def test_builtin_passages_are_valid(self):
        for p in BUILTIN_PASSAGES:
            assert p.questions
            for q in p.questions:
                assert 0 <= q.answer_index < len(q.choices)


class TestNormalizePrompt:
    def test_plain_string(self):
        a = normalize_prompt("Write about the sea.")
        b = normalize_prompt("Write about the sea.")
        assert a.prompt == "Write about the sea."
        assert a.id == b.id

    def test_object(self):
        p = normalize_prompt({"id": "w1", "title": "Sea", "prompt": "Describe it.", "tips": ["Use senses"]})
        assert p.id == "w1"
        assert p.tips == ["Use senses"]

    def test_invalid(self):
        assert normalize_prompt({"title": "no prompt"}) is None
        assert normalize_prompt(42) is None


class TestLoaders:
    @pytest.mark.asyncio
    async def test_load_curated_uses_dataset_name(self):
        provider = FakeProvider({"math": [RAW]})
        qs = await load_curated(provider, "maths")
        assert [q.id for q in qs] == ["m1"]
        assert provider.calls == ["math"]

    @pytest.mark.asyncio
    async def test_load_curated_failure_is_empty(self):
        provider = FakeProvider({"vr": RuntimeError("boom")})
        assert await load_curated(provider, "vr") == []
        assert await load_curated(FakeProvider(), "english") == []

    @pytest.mark.asyncio
    async def test_load_curated_unknown_subject(self):
        assert await load_curated(FakeProvider(), "history") == []

    @pytest.mark.asyncio
    async def test_load_passages_wrong_shape(self):
        assert await load_passages(FakeProvider({"comprehension": {"id": "p"}})) == []

    @pytest.mark.asyncio
    async def test_load_writing_prompts(self):
        provider = FakeProvider({"writing": ["Write a poem.", {"prompt": "Write a letter."}, 7]})
        prompts = await load_writing_prompts(provider)
        assert [p.prompt for p in prompts] == ["Write a poem.", "Write a letter."]


class TestFileProvider:
    @pytest.mark.asyncio
    async def test_reads_json(self, tmp_path):
        (tmp_path / "nvr.json").write_text(json.dumps([RAW]))
        provider = FileDatasetProvider(tmp_path)
        assert await provider.fetch("nvr") == [RAW]

    @pytest.mark.asyncio
    async def test_reads_off_the_event_loop(self, tmp_path):
        (tmp_path / "vr.json").write_text("[]")
        calls = []
        real = asyncio.to_thread

        async def recording(func, *args, **kwargs):
            calls.append(func)
            return await real(func, *args, **kwargs)

        with patch("exam_trainer.providers.file_source.asyncio.to_thread", recording):
            assert await FileDatasetProvider(tmp_path).fetch("vr") == []
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await FileDatasetProvider(tmp_path).fetch("nvr")

    @pytest.mark.asyncio
    async def test_malformed_json_loads_empty(self, tmp_path):
        (tmp_path / "math.json").write_text("{not json")
        assert await load_curated(FileDatasetProvider(tmp_path), "maths") == []


class TestHttpProvider:
    @staticmethod
    def _client_factory(handler):
        real = httpx.AsyncClient

        def make(**kwargs):
            return real(transport=httpx.MockTransport(handler), **kwargs)
        return make

    @pytest.mark.asyncio
    async def test_fetch(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[RAW])

        with patch("exam_trainer.providers.http_source.httpx.AsyncClient", self._client_factory(handler)):
            data = await HttpDatasetProvider("http://data.test/sets/").fetch("english")
        assert data == [RAW]
        assert str(seen[0].url) == "http://data.test/sets/english.json"
        assert seen[0].headers["cache-control"] == "no-store"

    @pytest.mark.asyncio
    async def test_http_error_loads_empty(self):
        def handler(request):
            return httpx.Response(503)

        with patch("exam_trainer.providers.http_source.httpx.AsyncClient", self._client_factory(handler)):
            qs = await load_curated(HttpDatasetProvider("http://data.test"), "maths")
        assert qs == []
