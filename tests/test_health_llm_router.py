import pytest
from fastapi import HTTPException

from mindspace.backend.routers import health_llm


def test_health_llm_calls_completion_with_healthcheck_prompt(monkeypatch):
    captured: dict = {}

    def fake_request_completion(prompt, *, system_prompt=None, max_tokens=None, temperature=None, model=None):
        captured["prompt"] = prompt
        captured["system_prompt"] = system_prompt
        captured["max_tokens"] = max_tokens
        return "pong"

    monkeypatch.setattr(health_llm, "request_completion", fake_request_completion)

    result = health_llm.health_llm(q=None)

    assert result["ok"] is True
    assert "pong" in result["text"].lower()
    assert captured["system_prompt"] == "(healthcheck)"
    assert captured["max_tokens"] == 16
    assert "pong" in captured["prompt"]


def test_health_llm_flags_unexpected_content(monkeypatch):
    monkeypatch.setattr(health_llm, "request_completion", lambda prompt, **kw: "hello")

    result = health_llm.health_llm(q=None)

    assert result["ok"] is False
    assert result["detail"] == "unexpected_content"


def test_health_llm_custom_prompt_skips_pong_check(monkeypatch):
    monkeypatch.setattr(health_llm, "request_completion", lambda prompt, **kw: f"echo: {prompt}")

    result = health_llm.health_llm(q="hi")

    assert result == {"ok": True, "text": "echo: hi"}


def test_health_llm_maps_empty_response(monkeypatch):
    def fake_request_completion(prompt, **kwargs):
        raise RuntimeError("empty_completion_from_llm")

    monkeypatch.setattr(health_llm, "request_completion", fake_request_completion)

    with pytest.raises(HTTPException) as excinfo:
        health_llm.health_llm(q=None)

    assert excinfo.value.status_code == 503
    assert excinfo.value.detail == "llm_empty_response"


def test_health_llm_maps_provider_errors(monkeypatch):
    def fake_request_completion(prompt, **kwargs):
        raise TimeoutError("slow")

    monkeypatch.setattr(health_llm, "request_completion", fake_request_completion)

    with pytest.raises(HTTPException) as excinfo:
        health_llm.health_llm(q=None)

    assert excinfo.value.status_code == 503
    assert excinfo.value.detail == "llm_error: TimeoutError"
