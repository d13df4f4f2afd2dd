# mindspace/backend/schemas/chat.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatSendRequest(BaseModel):
    content: str
    session_id: Optional[str] = Field(default=None, alias="sessionId", max_length=100)

    model_config = ConfigDict(populate_by_name=True)


class ChatClearRequest(BaseModel):
    session_id: Optional[str] = Field(default=None, alias="sessionId")

    model_config = ConfigDict(populate_by_name=True)


class ChatMessageRead(BaseModel):
    id: int
    user_id: int
    session_id: Optional[str]
    sender: str
    content: str
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class ChatSendResponse(BaseModel):
    messages: List[ChatMessageRead]


class ChatSessionSummary(BaseModel):
    session_id: str
    start_time: datetime
    last_message_time: datetime
    message_count: int
