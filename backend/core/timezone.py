"""대만 타임존 유틸리티.

서버가 UTC로 동작하더라도 조회 기간은 항상 대만 시간(TST) 기준으로 계산.
datetime.now() 대신 now_tst()를, date.today() 대신 today_tst()를 사용할 것.
"""
from datetime import datetime, date, timezone, timedelta
from typing import Optional

try:
    from zoneinfo import ZoneInfo
    TST = ZoneInfo("Asia/Taipei")
except (ImportError, KeyError):
    # Windows에서 tzdata 패키지 없을 때 fallback
    TST = timezone(timedelta(hours=8))


def now_tst() -> datetime:
    """현재 대만 시간 반환."""
    return datetime.now(TST)


def today_tst() -> date:
    """오늘 대만 날짜 반환."""
    return datetime.now(TST).date()


def days_ago_iso(days: int, today: Optional[date] = None) -> str:
    """오늘로부터 N일 전 날짜를 YYYY-MM-DD 문자열로 반환."""
    base = today or today_tst()
    return (base - timedelta(days=days)).isoformat()
