# mindspace/backend/routers/mood.py
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from mindspace.backend.dependencies.auth import AuthContext, get_current_user
from mindspace.backend.dependencies.services import get_mood_service
from mindspace.backend.schemas.auth import MessageResponse
from mindspace.backend.schemas.mood import (
    MoodEntryCreate,
    MoodEntryRead,
    MoodEntryResponse,
    MoodEntryUpdate,
    MoodHistoryResponse,
    MoodStatsResponse,
)
from mindspace.backend.services.mood_service import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_PERIOD_DAYS,
    MoodService,
)

router = APIRouter(prefix="/mood", tags=["Mood"])


@router.post("/entry", response_model=MoodEntryResponse, status_code=status.HTTP_201_CREATED)
def add_entry(
    body: MoodEntryCreate,
    auth: AuthContext = Depends(get_current_user),
    moods: MoodService = Depends(get_mood_service),
):
    entry = moods.add_entry(auth.user_id, body.mood_score, body.reflection)
    return MoodEntryResponse(
        message="Mood entry saved successfully",
        entry=MoodEntryRead.model_validate(entry, from_attributes=True),
    )


@router.get("/history", response_model=MoodHistoryResponse)
def get_history(
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=0),
    offset: int = Query(0, ge=0),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    auth: AuthContext = Depends(get_current_user),
    moods: MoodService = Depends(get_mood_service),
):
    return moods.list_entries(
        auth.user_id,
        limit=limit,
        offset=offset,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/stats", response_model=MoodStatsResponse)
def get_stats(
    period: int = Query(DEFAULT_PERIOD_DAYS, ge=1),
    auth: AuthContext = Depends(get_current_user),
    moods: MoodService = Depends(get_mood_service),
):
    return moods.get_stats(auth.user_id, period)


@router.put("/entry/{entry_id}", response_model=MoodEntryResponse)
def update_entry(
    entry_id: int,
    body: MoodEntryUpdate,
    auth: AuthContext = Depends(get_current_user),
    moods: MoodService = Depends(get_mood_service),
):
    entry = moods.update_entry(auth.user_id, entry_id, body)
    return MoodEntryResponse(
        message="Mood entry updated successfully",
        entry=MoodEntryRead.model_validate(entry, from_attributes=True),
    )


@router.delete("/entry/{entry_id}", response_model=MessageResponse)
def delete_entry(
    entry_id: int,
    auth: AuthContext = Depends(get_current_user),
    moods: MoodService = Depends(get_mood_service),
):
    moods.delete_entry(auth.user_id, entry_id)
    return MessageResponse(message="Mood entry deleted successfully")
