from datetime import datetime
from typing import Optional

from sqlalchemy import Column, ForeignKey, Integer
from sqlmodel import SQLModel, Field

from mindspace.backend.core.clock import utcnow


class UserSession(SQLModel, table=True):
    """
    JWT와 별개인 서버측 로그인 세션 레코드.
    - session_id: 불투명 uuid4 문자열 (토큰과 무관)
    - is_active: 로그아웃 시 False
    - expires_at 이 지났거나 is_active=False 면 무효
    """
    __tablename__ = "user_sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    session_id: str = Field(max_length=100, index=True, unique=True)
    created_at: datetime = Field(default_factory=utcnow)
    expires_at: datetime
    is_active: bool = Field(default=True)
