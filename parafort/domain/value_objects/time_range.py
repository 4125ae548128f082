"""
Time Range Value Object - Reporting window for compliance dashboards.
"""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import List, Optional


class TimeRange(str, Enum):
    """
    Reporting window selected by the `timeRange` query parameter.

    Usage:
        tr = TimeRange.parse("90d")
        tr.days            # 90
        tr.bucket_unit     # "day"
        tr.bucket_keys()   # ["2026-07-21", ..., "2026-10-19"]
    """
    WEEK = "7d"
    MONTH = "30d"
    QUARTER = "90d"
    YEAR = "1y"

    @classmethod
    def parse(cls, value: Optional[str]) -> 'TimeRange':
        """Unknown or missing values fall back to 30 days."""
        try:
            return cls(value)
        except ValueError:
            return cls.MONTH

    @property
    def days(self) -> int:
        days = {
            self.WEEK: 7,
            self.MONTH: 30,
            self.QUARTER: 90,
            self.YEAR: 365,
        }
        return days[self]

    @property
    def bucket_unit(self) -> str:
        return "month" if self is TimeRange.YEAR else "day"

    def start(self, now: Optional[datetime] = None) -> datetime:
        now = now or datetime.utcnow()
        return now - timedelta(days=self.days)

    def bucket_key(self, value) -> str:
        """ISO key ('YYYY-MM-DD') of the bucket containing `value`."""
        if isinstance(value, datetime):
            value = value.date()
        if self.bucket_unit == "month":
            value = value.replace(day=1)
        return value.isoformat()

    def bucket_keys(self, now: Optional[datetime] = None) -> List[str]:
        """Every bucket from the window start through today, in order."""
        now = now or datetime.utcnow()
        current = self.start(now).date()
        today = now.date()

        if self.bucket_unit == "month":
            current = current.replace(day=1)
            keys = []
            while current <= today:
                keys.append(self.bucket_key(current))
                current = _next_month(current)
            return keys

        keys = []
        while current <= today:
            keys.append(self.bucket_key(current))
            current += timedelta(days=1)
        return keys


def _next_month(d: date) -> date:
    if d.month == 12:
        return d.replace(year=d.year + 1, month=1, day=1)
    return d.replace(month=d.month + 1, day=1)
