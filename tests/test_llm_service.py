from types import SimpleNamespace

import pytest

from mindspace.backend.core.prompt_loader import get_system_prompt
from mindspace.backend.services import llm_service


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _fake_client(monkeypatch, content):
    completions = FakeCompletions(content)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    monkeypatch.setattr(llm_service, "_client", lambda: client)
    return completions


def test_request_completion_sends_system_and_user_messages(monkeypatch):
    completions = _fake_client(monkeypatch, "  You are not alone.  ")

    text = llm_service.request_completion("I feel lonely")

    assert text == "You are not alone."
    kwargs = completions.calls[0]
    assert kwargs["messages"] == [
        {"role": "system", "content": get_system_prompt()},
        {"role": "user", "content": "I feel lonely"},
    ]
    assert kwargs["model"] == llm_service.settings.ai_model
    assert kwargs["max_completion_tokens"] == llm_service.settings.ai_max_tokens


def test_request_completion_raises_on_empty_reply(monkeypatch):
    _fake_client(monkeypatch, None)

    with pytest.raises(RuntimeError, match="empty_completion_from_llm"):
        llm_service.request_completion("hello")


def test_supportive_reply_never_raises(monkeypatch):
    def boom(prompt, **kwargs):
        raise ConnectionError("network down")

    monkeypatch.setattr(llm_service, "request_completion", boom)

    assert llm_service.generate_supportive_reply("hello") == llm_service.FALLBACK_REPLY


def test_system_prompt_is_supportive():
    prompt = get_system_prompt().lower()

    assert prompt
    assert "medical" in prompt or "professional" in prompt
