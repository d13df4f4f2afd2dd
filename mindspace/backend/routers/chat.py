# mindspace/backend/routers/chat.py
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from mindspace.backend.dependencies.auth import AuthContext, get_current_user
from mindspace.backend.dependencies.services import get_chat_service
from mindspace.backend.schemas.auth import MessageResponse
from mindspace.backend.schemas.chat import (
    ChatClearRequest,
    ChatMessageRead,
    ChatSendRequest,
    ChatSendResponse,
    ChatSessionSummary,
)
from mindspace.backend.services.chat_service import ChatService

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post("/send", response_model=ChatSendResponse)
def send_message(
    body: ChatSendRequest,
    auth: AuthContext = Depends(get_current_user),
    chat: ChatService = Depends(get_chat_service),
):
    messages = chat.send_and_respond(auth.user_id, body.session_id, body.content)
    return ChatSendResponse(
        messages=[ChatMessageRead.model_validate(m, from_attributes=True) for m in messages]
    )


@router.get("/history", response_model=list[ChatMessageRead])
def get_history(
    session_id: Optional[str] = Query(None, alias="sessionId"),
    auth: AuthContext = Depends(get_current_user),
    chat: ChatService = Depends(get_chat_service),
):
    return chat.get_history(auth.user_id, session_id)


@router.get("/sessions", response_model=list[ChatSessionSummary])
def list_sessions(
    auth: AuthContext = Depends(get_current_user),
    chat: ChatService = Depends(get_chat_service),
):
    return chat.list_sessions(auth.user_id)


@router.delete("/message/{message_id}", response_model=MessageResponse)
def delete_message(
    message_id: int,
    auth: AuthContext = Depends(get_current_user),
    chat: ChatService = Depends(get_chat_service),
):
    return chat.delete_message(auth.user_id, message_id)


@router.delete("/clear", response_model=MessageResponse)
def clear_history(
    session_id: Optional[str] = Query(None, alias="sessionId"),
    body: Optional[ChatClearRequest] = Body(None),
    auth: AuthContext = Depends(get_current_user),
    chat: ChatService = Depends(get_chat_service),
):
    # sessionId는 쿼리스트링 또는 JSON body 둘 다 허용
    target = session_id or (body.session_id if body else None)
    return chat.clear_history(auth.user_id, target)
