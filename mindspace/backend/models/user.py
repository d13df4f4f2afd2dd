from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from mindspace.backend.core.clock import utcnow


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(max_length=50, index=True, unique=True)
    email: str = Field(max_length=100, index=True, unique=True)
    password_hash: str = Field(max_length=255)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    last_login: Optional[datetime] = None
    is_active: bool = Field(default=True)

    def summary(self) -> dict:
        # password_hash는 절대 내보내지 않음
        return {"id": self.id, "username": self.username, "email": self.email}
