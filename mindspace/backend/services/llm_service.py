# mindspace/backend/services/llm_service.py
from __future__ import annotations

import logging
from typing import Callable, Optional

from openai import OpenAI, BadRequestError

from mindspace.backend.core.config import settings
from mindspace.backend.core.prompt_loader import get_system_prompt

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I'm here to listen and support you. How are you feeling right now?"

CompletionProvider = Callable[[str], str]


def _client() -> OpenAI:
    kwargs = {"timeout": settings.llm_timeout_sec}
    if settings.openai_api_key:
        kwargs["api_key"] = settings.openai_api_key
    return OpenAI(**kwargs)


def _to_chat_messages(system_prompt: str, user_message: str) -> list:
    """Chat Completions용 messages 포맷."""
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_message or ""},
    ]


def request_completion(
    prompt: str,
    *,
    system_prompt: Optional[str] = None,
    max_tokens: Optional[int] = None,
    temperature: Optional[float] = None,
    model: Optional[str] = None,
) -> str:
    """
    단발 Chat Completions 호출. 실패하면 예외를 그대로 던진다.
    (헬스체크처럼 실패를 구분해야 하는 호출자용)
    """
    client = _client()
    chat_kwargs = dict(
        model=(model or settings.ai_model).strip(),
        messages=_to_chat_messages(system_prompt or get_system_prompt(), prompt),
        temperature=float(settings.ai_temperature if temperature is None else temperature),
        max_completion_tokens=int(max_tokens or settings.ai_max_tokens),
    )

    try:
        resp = client.chat.completions.create(**chat_kwargs)
    except BadRequestError as e:
        # 파라미터 호환 재시도 (구형 모델은 max_tokens만 받음)
        if "max_completion_tokens" not in str(e):
            raise
        chat_kwargs["max_tokens"] = chat_kwargs.pop("max_completion_tokens")
        resp = client.chat.completions.create(**chat_kwargs)

    text = (resp.choices[0].message.content or "").strip()
    if not text:
        raise RuntimeError("empty_completion_from_llm")
    return text


def generate_supportive_reply(prompt: str) -> str:
    """
    Reply to a user's chat message. Never raises: any provider failure
    (network, auth, rate limit, empty answer) yields FALLBACK_REPLY.
    """
    try:
        return request_completion(prompt)
    except Exception as e:
        logger.warning("LLM completion failed; using fallback reply | %s", type(e).__name__)
        return FALLBACK_REPLY
