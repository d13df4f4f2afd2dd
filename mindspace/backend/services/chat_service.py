# mindspace/backend/services/chat_service.py
from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import delete, func
from sqlmodel import Session, select

from mindspace.backend.core.errors import ValidationError, field_error
from mindspace.backend.models.chat import ChatMessage, Sender
from mindspace.backend.services.llm_service import (
    FALLBACK_REPLY,
    CompletionProvider,
    generate_supportive_reply,
)

logger = logging.getLogger(__name__)


class ChatService:
    """
    Append-only chat log per user.
    - 메시지는 수정하지 않고 추가/삭제만 함
    - session_id 는 클라이언트가 정하는 불투명 문자열 (없어도 됨)
    """

    def __init__(self, db: Session, complete: Optional[CompletionProvider] = None):
        self.db = db
        self.complete = complete or generate_supportive_reply

    def append_message(
        self,
        user_id: int,
        session_id: Optional[str],
        sender: Sender | str,
        content: str,
    ) -> ChatMessage:
        sender = Sender(sender)
        row = ChatMessage(
            user_id=user_id,
            session_id=session_id or None,
            sender=sender.value,
            content=content,
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def get_history(self, user_id: int, session_id: Optional[str] = None) -> List[ChatMessage]:
        stmt = select(ChatMessage).where(ChatMessage.user_id == user_id)
        if session_id:
            stmt = stmt.where(ChatMessage.session_id == session_id)
        stmt = stmt.order_by(ChatMessage.timestamp.asc(), ChatMessage.id.asc())
        return list(self.db.exec(stmt).all())

    def list_sessions(self, user_id: int) -> List[dict]:
        last_time = func.max(ChatMessage.timestamp).label("last_message_time")
        stmt = (
            select(
                ChatMessage.session_id,
                func.min(ChatMessage.timestamp).label("start_time"),
                last_time,
                func.count(ChatMessage.id).label("message_count"),
            )
            .where(ChatMessage.user_id == user_id, ChatMessage.session_id.is_not(None))
            .group_by(ChatMessage.session_id)
            .order_by(last_time.desc())
        )
        return [
            {
                "session_id": session_id,
                "start_time": start_time,
                "last_message_time": last_message_time,
                "message_count": message_count,
            }
            for session_id, start_time, last_message_time, message_count in self.db.exec(stmt).all()
        ]

    def delete_message(self, user_id: int, message_id: int) -> dict:
        # 없는 메시지/남의 메시지는 에러가 아니라 안내 메시지로 응답
        result = self.db.exec(
            delete(ChatMessage).where(
                ChatMessage.id == message_id,
                ChatMessage.user_id == user_id,
            )
        )
        self.db.commit()
        if not result.rowcount:
            return {"message": "Message not found"}
        return {"message": "Message deleted successfully"}

    def clear_history(self, user_id: int, session_id: Optional[str] = None) -> dict:
        stmt = delete(ChatMessage).where(ChatMessage.user_id == user_id)
        if session_id:
            stmt = stmt.where(ChatMessage.session_id == session_id)
        result = self.db.exec(stmt)
        self.db.commit()
        logger.info("chat history cleared: user=%s rows=%s", user_id, result.rowcount)
        return {"message": "Chat history cleared successfully"}

    def send_and_respond(
        self,
        user_id: int,
        session_id: Optional[str],
        content: str,
    ) -> List[ChatMessage]:
        """User message -> completion -> AI message. Both rows are returned."""
        if content is None or not content.strip():
            raise ValidationError(details=[field_error("content", "Message content is required")])

        user_msg = self.append_message(user_id, session_id, Sender.user, content)
        try:
            reply = (self.complete(content) or "").strip() or FALLBACK_REPLY
        except Exception:
            # 저장된 user 메시지마다 AI 메시지가 정확히 하나 따라와야 함
            logger.exception("completion provider raised; storing fallback reply")
            reply = FALLBACK_REPLY
        ai_msg = self.append_message(user_id, session_id, Sender.ai, reply)
        return [user_msg, ai_msg]
