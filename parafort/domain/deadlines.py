"""
Deadline arithmetic shared by reminders, dashboards and the urgent-events report.
"""

import math
from datetime import datetime
from typing import Optional

SECONDS_PER_DAY = 86400


def days_until(due_date: datetime, now: Optional[datetime] = None) -> int:
    """Whole days until `due_date`, rounded up. Negative when past due."""
    now = now or datetime.utcnow()
    return math.ceil((due_date - now).total_seconds() / SECONDS_PER_DAY)


def reminder_urgency(days_until_due: int, priority: Optional[str]) -> Optional[str]:
    """Urgency of a reminder for a pending item, None when no reminder is due."""
    if days_until_due <= 1:
        return "urgent"
    if days_until_due <= 7 and priority == "high":
        return "high"
    if days_until_due <= 14 and priority == "high":
        return "medium"
    if days_until_due <= 30:
        return "low"
    return None


def dashboard_urgency(days_until_due: int) -> str:
    if days_until_due <= 7:
        return "high"
    if days_until_due <= 14:
        return "medium"
    return "low"


def due_phrase(days_until_due: int) -> str:
    if days_until_due <= 0:
        return "today"
    if days_until_due == 1:
        return "tomorrow"
    return f"in {days_until_due} days"
