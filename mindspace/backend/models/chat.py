from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer
from sqlmodel import SQLModel, Field

from mindspace.backend.core.clock import utcnow


class Sender(str, Enum):
    user = "user"
    ai = "ai"


class ChatMessage(SQLModel, table=True):
    __tablename__ = "chat_messages"

    __table_args__ = (
        CheckConstraint("sender IN ('user', 'ai')", name="ck_chat_messages_sender"),
        Index("ix_chat_messages_user_session", "user_id", "session_id"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    content: str
    sender: str = Field(max_length=10)
    timestamp: datetime = Field(default_factory=utcnow, index=True)
    session_id: Optional[str] = Field(default=None, max_length=100)
