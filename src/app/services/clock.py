"""Business calendar

Every calendar-date decision (what "today" is, pause windows, due dates)
uses a single configured timezone.
"""

from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo
from config import ApplicationConfig


def business_now(timezone: Optional[str] = None) -> datetime:
    return datetime.now(ZoneInfo(timezone or ApplicationConfig.BUSINESS_TIMEZONE))


def business_today(timezone: Optional[str] = None) -> date:
    return business_now(timezone).date()
