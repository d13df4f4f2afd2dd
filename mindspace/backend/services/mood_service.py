from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete, func
from sqlalchemy.orm.exc import StaleDataError
from sqlmodel import Session, select

from mindspace.backend.core.clock import as_utc, utcnow
from mindspace.backend.core.errors import NotFound, ValidationError, field_error
from mindspace.backend.models.mood import MOOD_MAX, MOOD_MIN, REFLECTION_MAX_LEN, MoodEntry
from mindspace.backend.schemas.mood import MoodEntryUpdate

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 30
DEFAULT_PERIOD_DAYS = 30
TREND_WINDOW_DAYS = 7


def _score_problem(mood_score) -> Optional[dict]:
    if (
        isinstance(mood_score, bool)
        or not isinstance(mood_score, int)
        or not MOOD_MIN <= mood_score <= MOOD_MAX
    ):
        return field_error("moodScore", "Mood score must be between 1 and 5")
    return None


def _reflection_problem(reflection: Optional[str]) -> Optional[dict]:
    if reflection is not None and len(reflection) > REFLECTION_MAX_LEN:
        return field_error("reflection", "Reflection must be less than 1000 characters")
    return None


def _validate(problems: list) -> None:
    problems = [p for p in problems if p]
    if problems:
        raise ValidationError(details=problems)


class MoodService:
    def __init__(self, db: Session):
        self.db = db

    def _get_owned(self, user_id: int, entry_id: int) -> MoodEntry:
        entry = self.db.get(MoodEntry, entry_id)
        if entry is None or entry.user_id != user_id:
            raise NotFound("Mood entry not found")
        return entry

    def _window(self, user_id: int, start: datetime, end: Optional[datetime] = None):
        conds = [MoodEntry.user_id == user_id, MoodEntry.timestamp >= start]
        if end is not None:
            conds.append(MoodEntry.timestamp < end)
        return conds

    def _avg_count(self, conds) -> tuple[float, int]:
        avg, count = self.db.exec(
            select(func.avg(MoodEntry.mood_score), func.count(MoodEntry.id)).where(*conds)
        ).one()
        return float(avg or 0), count or 0

    # ──────────────────────────────────────────────────────────────────────

    def add_entry(self, user_id: int, mood_score: int, reflection: Optional[str] = None) -> MoodEntry:
        _validate([_score_problem(mood_score), _reflection_problem(reflection)])

        entry = MoodEntry(user_id=user_id, mood_score=mood_score, reflection=reflection or None)
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def list_entries(
        self,
        user_id: int,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> dict:
        problems = []
        for name, value in (("limit", limit), ("offset", offset)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                problems.append(field_error(name, f"{name} must be a non-negative integer"))
        _validate(problems)

        conds = [MoodEntry.user_id == user_id]
        if start_date is not None:
            conds.append(MoodEntry.timestamp >= as_utc(start_date))
        if end_date is not None:
            conds.append(MoodEntry.timestamp <= as_utc(end_date))

        # 최신순으로 잘라온 뒤 페이지 안에서는 시간순으로 뒤집음
        page = self.db.exec(
            select(MoodEntry)
            .where(*conds)
            .order_by(MoodEntry.timestamp.desc(), MoodEntry.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()
        total = self.db.exec(select(func.count(MoodEntry.id)).where(*conds)).one()

        return {
            "entries": list(reversed(page)),
            "pagination": {
                "total": total,
                "limit": limit,
                "offset": offset,
                "hasMore": total > offset + limit,
            },
        }

    def get_stats(self, user_id: int, period_days: int = DEFAULT_PERIOD_DAYS) -> dict:
        if isinstance(period_days, bool) or not isinstance(period_days, int) or period_days < 1:
            raise ValidationError(details=[field_error("period", "period must be a positive integer")])

        end = utcnow()
        start = end - timedelta(days=period_days)
        in_period = [
            MoodEntry.user_id == user_id,
            MoodEntry.timestamp >= start,
            MoodEntry.timestamp <= end,
        ]

        avg_mood, total = self.db.exec(
            select(func.avg(MoodEntry.mood_score), func.count(MoodEntry.id)).where(*in_period)
        ).one()

        counts = dict(
            self.db.exec(
                select(MoodEntry.mood_score, func.count(MoodEntry.id))
                .where(*in_period)
                .group_by(MoodEntry.mood_score)
            ).all()
        )
        distribution = [
            {"mood_score": score, "count": counts.get(score, 0)}
            for score in range(MOOD_MIN, MOOD_MAX + 1)
        ]

        week_ago = end - timedelta(days=TREND_WINDOW_DAYS)
        two_weeks_ago = end - timedelta(days=2 * TREND_WINDOW_DAYS)
        current, n_current = self._avg_count(self._window(user_id, week_ago))
        previous, n_previous = self._avg_count(self._window(user_id, two_weeks_ago, week_ago))

        return {
            "period": period_days,
            "startDate": start,
            "endDate": end,
            "averageMood": float(avg_mood or 0),
            "totalEntries": total or 0,
            "moodDistribution": distribution,
            "recentTrend": {
                "current": current,
                "previous": previous,
                "change": current - previous if n_current and n_previous else 0.0,
            },
        }

    def update_entry(self, user_id: int, entry_id: int, payload: MoodEntryUpdate) -> MoodEntry:
        changes = payload.changes()
        problems = []
        if "mood_score" in changes:
            problems.append(_score_problem(changes["mood_score"]))
        if "reflection" in changes:
            problems.append(_reflection_problem(changes["reflection"]))
        _validate(problems)

        entry = self._get_owned(user_id, entry_id)
        for field, value in changes.items():
            setattr(entry, field, value)
        self.db.add(entry)
        try:
            self.db.commit()
        except StaleDataError:
            # 조회와 수정 사이에 삭제된 경우
            self.db.rollback()
            raise NotFound("Mood entry not found")
        self.db.refresh(entry)
        return entry

    def delete_entry(self, user_id: int, entry_id: int) -> None:
        self._get_owned(user_id, entry_id)
        # 조회 뒤 다른 요청이 먼저 지웠으면 0건
        result = self.db.exec(
            delete(MoodEntry).where(
                MoodEntry.id == entry_id,
                MoodEntry.user_id == user_id,
            )
        )
        self.db.commit()
        if not result.rowcount:
            raise NotFound("Mood entry not found")
