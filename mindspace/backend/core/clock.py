from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    # 저장/비교 모두 aware UTC
    return datetime.now(tz=timezone.utc)


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Naive input is taken to be UTC already."""
    if dt is None:
        return None
    if dt.utcoffset() is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
