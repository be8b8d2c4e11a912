# tests/test_ai_service.py
from types import SimpleNamespace

import pytest

from upsc_prep.core import ai_services
from upsc_prep.core.ai_services import AIService
from upsc_prep.core.prompts import PromptFormatter

QUESTION = {
    "question_text": "Discuss cooperative federalism.",
    "paper": "GS Paper II",
    "subject": "Indian Polity",
    "marks": 15,
    "word_limit": 250,
}


class FakeCompletions:
    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=reply))])


def live_service(*replies):
    service = AIService()
    completions = FakeCompletions(replies)
    service.use_dummy = False
    service.client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return service, completions


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    monkeypatch.setattr(ai_services.time, "sleep", lambda seconds: None)


def test_runs_in_dummy_mode_without_key():
    service = AIService()
    assert service.use_dummy is True
    assert service.health_check() == {"status": "healthy", "mode": "dummy"}


@pytest.mark.parametrize("draw, expected", [(0.0, 5), (0.5, 9), (0.999, 13)])
def test_dummy_score_range(monkeypatch, draw, expected):
    monkeypatch.setattr(ai_services.random, "random", lambda: draw)
    result = AIService().evaluate_answer(QUESTION, "Some answer text")
    assert result["score"] == expected
    assert 3 <= result["score"] <= 15
    assert len(result["strengths"]) == 3


def test_dummy_floor_for_small_questions(monkeypatch):
    monkeypatch.setattr(ai_services.random, "random", lambda: 0.0)
    result = AIService().evaluate_answer(dict(QUESTION, marks=5), "Brief")
    assert result["score"] == 3


def test_upload_without_text_gets_half_marks():
    service, completions = live_service()
    assert service.evaluate_answer(QUESTION, None)["score"] == 7.5
    assert completions.calls == []


def test_live_evaluation_parses_fenced_json():
    reply = '```json\n{"score": 21, "strengths": "Clear structure", "improvements": ["", "More data"],' \
            ' "suggestions": [], "detailed_feedback": " Solid. "}\n```'
    service, completions = live_service(reply)

    result = service.evaluate_answer(QUESTION, "An answer")

    assert result == {
        "score": 15.0,
        "strengths": ["Clear structure"],
        "improvements": ["More data"],
        "suggestions": [],
        "detailed_feedback": "Solid.",
    }
    assert "Discuss cooperative federalism." in completions.calls[0]["messages"][0]["content"]


def test_live_evaluation_clamps_negative_and_rounds():
    service, _ = live_service('{"score": -2}', '{"score": 8.26}')
    assert service.evaluate_answer(QUESTION, "x")["score"] == 0.0
    assert service.evaluate_answer(QUESTION, "x")["score"] == 8.3


def test_live_failure_falls_back_to_simulation():
    service, completions = live_service("not json at all")
    result = service.evaluate_answer(QUESTION, "An answer")
    assert 3 <= result["score"] <= 15
    assert len(completions.calls) == 1


def test_llm_retries_then_gives_up():
    service, completions = live_service(RuntimeError("boom"), RuntimeError("boom"), RuntimeError("boom"))
    with pytest.raises(Exception, match="failed after 3 attempts"):
        service._call_llm_with_retries("prompt", retries=3)
    assert len(completions.calls) == 3


def test_summary_template_and_live():
    dummy = AIService().summarize_editorial("Heatwaves", "Environment", "text")
    assert dummy.startswith('Key Points from "Heatwaves":')
    assert dummy.rstrip().endswith("This topic is relevant for Environment in GS Papers.")

    service, _ = live_service("1. Point one")
    assert service.summarize_editorial("Heatwaves", "Environment", "text") == "1. Point one"


def test_truncate_on_word_boundary():
    assert PromptFormatter.truncate("alpha beta gamma", max_length=12) == "alpha beta ..."
    assert PromptFormatter.truncate("  short  ") == "short"
    assert PromptFormatter.truncate(None) == ""
