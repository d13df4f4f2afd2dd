from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer
from sqlmodel import SQLModel, Field

from mindspace.backend.core.clock import utcnow

MOOD_MIN = 1
MOOD_MAX = 5
REFLECTION_MAX_LEN = 1000


class MoodEntry(SQLModel, table=True):
    __tablename__ = "mood_entries"

    __table_args__ = (
        CheckConstraint(
            f"mood_score >= {MOOD_MIN} AND mood_score <= {MOOD_MAX}",
            name="ck_mood_entries_score",
        ),
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
    mood_score: int
    reflection: Optional[str] = None
    timestamp: datetime = Field(default_factory=utcnow, index=True)
