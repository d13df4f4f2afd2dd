# mindspace/backend/routers/health_llm.py
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from mindspace.backend.services.llm_service import request_completion

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/llm")
def health_llm(q: Optional[str] = Query(None, description="테스트용 프롬프트(없으면 기본 pong 검사)")):
    """
    비-스트리밍 단발 호출 점검. 채팅 경로와 달리 폴백 문구를 쓰지 않음.
    - OK: {"ok": true, "text": "..."}
    - 비정상(호출 실패/내용없음): 503
    """
    prompt = q or "Reply with exactly one word: pong"
    try:
        text = request_completion(prompt, system_prompt="(healthcheck)", max_tokens=16)
    except Exception as e:
        if str(e) == "empty_completion_from_llm":
            raise HTTPException(status_code=503, detail="llm_empty_response")
        raise HTTPException(status_code=503, detail=f"llm_error: {type(e).__name__}")

    # 기본 프롬프트일 때 'pong' 포함 여부로 간단 점검
    if q is None and "pong" not in text.lower():
        return {"ok": False, "detail": "unexpected_content", "text": text}

    return {"ok": True, "text": text}
