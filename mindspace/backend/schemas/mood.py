from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MoodEntryCreate(BaseModel):
    mood_score: int = Field(alias="moodScore", strict=True)
    reflection: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class MoodEntryUpdate(BaseModel):
    """Absent fields keep their value; ``reflection: null`` clears the note."""
    mood_score: Optional[int] = Field(default=None, alias="moodScore", strict=True)
    reflection: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class MoodEntryRead(BaseModel):
    id: int
    mood_score: int
    reflection: Optional[str]
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class MoodEntryResponse(BaseModel):
    message: str
    entry: MoodEntryRead


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    hasMore: bool


class MoodHistoryResponse(BaseModel):
    entries: List[MoodEntryRead]
    pagination: Pagination


class MoodBucket(BaseModel):
    mood_score: int
    count: int


class MoodTrend(BaseModel):
    current: float
    previous: float
    change: float


class MoodStatsResponse(BaseModel):
    period: int
    startDate: datetime
    endDate: datetime
    averageMood: float
    totalEntries: int
    moodDistribution: List[MoodBucket]
    recentTrend: MoodTrend
