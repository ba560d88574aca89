"""
processor/dates.py — 게시 시각 → CSV 'Publication Date' 문자열

기본 포맷은 'short' 형식 (예: 03/14/2025 - 09:30), 설정 TIMEZONE 기준.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

from core.config import get_settings

Timestamp = Union[datetime, int, float, None]


def format_date(
    value: Timestamp,
    fmt: Optional[str] = None,
    tz: Optional[str] = None,
) -> str:
    """
    게시 시각을 문자열로 변환합니다.

    - None           → ""
    - int / float    → Unix 초로 해석
    - naive datetime → UTC 로 간주
    """
    if value is None:
        return ""

    s = get_settings()
    fmt = fmt or s.DATE_FORMAT
    zone = ZoneInfo(tz or s.TIMEZONE)

    if isinstance(value, (int, float)):
        dt = datetime.fromtimestamp(value, tz=timezone.utc)
    elif value.tzinfo is None:
        dt = value.replace(tzinfo=timezone.utc)
    else:
        dt = value

    return dt.astimezone(zone).strftime(fmt)
