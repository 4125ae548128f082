"""Service for the compliance progress dashboard (metrics, trends, categories)."""
import math
import logging
from datetime import datetime, timedelta
from typing import Optional

from parafort.domain.deadlines import days_until
from parafort.domain.exceptions import UnauthorizedError, ValidationError
from parafort.domain.value_objects import RiskLevel, TimeRange
from parafort.application.serializers import iso

logger = logging.getLogger(__name__)

CATEGORY_COLORS = ['#FF5A00', '#10B981', '#3B82F6', '#F59E0B', '#EF4444', '#8B5CF6', '#06B6D4']
URGENT_WINDOW_DAYS = 30
URGENT_LIMIT = 10


def parse_business_filter(value) -> Optional[int]:
    """`all`, empty or missing means every business of the user."""
    if value is None or value == '' or value == 'all':
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("businessId must be 'all' or a business id", "businessId")


def _percentage(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole > 0 else 0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ComplianceMetricsService:
    """Read-only aggregations over the compliance calendar of one user."""

    def __init__(self, uow):
        self._uow = uow

    def get_metrics(self, user_id, business_id=None, time_range=None, now: datetime = None) -> dict:
        now = now or datetime.utcnow()
        business_filter = parse_business_filter(business_id)
        since = TimeRange.parse(time_range).start(now)

        counts = self._uow.compliance.count_by_status(user_id, business_filter, since)
        total = sum(counts.values())
        completed = counts.get('completed', 0)
        on_time = self._uow.compliance.count_completed_on_time(user_id, business_filter, since)
        avg_days = self._uow.compliance.avg_completion_days(user_id, business_filter, since)

        overall = {
            'totalItems': total,
            'completedItems': completed,
            'inProgressItems': counts.get('in_progress', 0),
            'overdueItems': counts.get('overdue', 0),
            'upcomingItems': counts.get('pending', 0),
            'completionRate': _percentage(completed, total),
            'onTimeRate': _percentage(on_time, completed),
            'avgCompletionTime': avg_days,
        }

        businesses = [
            self._format_business(row, now)
            for row in self._uow.compliance.business_breakdown(user_id, business_filter)
        ]

        return {'overall': overall, 'businesses': businesses}

    @staticmethod
    def _format_business(row: dict, now: datetime) -> dict:
        completion_rate = _percentage(row['completed'], row['total'])
        return {
            'businessId': row['business_id'],
            'businessName': row['business_name'],
            'entityType': row['entity_type'],
            'overallScore': _round_half_up(completion_rate),
            'metrics': {
                'totalItems': row['total'],
                'completedItems': row['completed'],
                'inProgressItems': row['in_progress'],
                'overdueItems': row['overdue'],
                'upcomingItems': row['pending'],
                'completionRate': completion_rate,
                'onTimeRate': _percentage(row['on_time'], row['completed']),
                'avgCompletionTime': row['avg_days'],
            },
            'riskLevel': RiskLevel.classify(row['overdue'], completion_rate).value,
            'lastUpdated': iso(now),
        }

    def get_trends(self, user_id, business_id=None, time_range=None, now: datetime = None) -> dict:
        """
        Date-bucketed series from the range start through today.

        Buckets are days for 7d/30d/90d and months for 1y; empty buckets are
        reported with zeros.
        """
        now = now or datetime.utcnow()
        business_filter = parse_business_filter(business_id)
        tr = TimeRange.parse(time_range)

        completed, overdue, created = self._uow.compliance.trend_counts(
            user_id, business_filter, tr.start(now), tr.bucket_unit
        )

        trends = []
        for key in tr.bucket_keys(now):
            done = completed.get(key, 0)
            late = overdue.get(key, 0)
            trends.append({
                'date': key,
                'completionRate': _percentage(done, done + late),
                'overdueCount': late,
                'newRequirements': created.get(key, 0),
                'resolvedIssues': done,
            })
        return {'trends': trends}

    def get_categories(self, user_id, business_id=None) -> dict:
        business_filter = parse_business_filter(business_id)
        rows = self._uow.compliance.category_counts(user_id, business_filter)

        categories = []
        for index, (category, total, completed) in enumerate(rows):
            categories.append({
                'category': category or 'General',
                'total': total,
                'completed': completed,
                'percentage': _percentage(completed, total),
                'color': CATEGORY_COLORS[index % len(CATEGORY_COLORS)],
            })
        return {'categories': categories}

    def get_urgent_events(self, user, now: datetime = None) -> list:
        """Urgent items across all businesses due in the next 30 days. Admins only."""
        if not getattr(user, 'is_admin', False):
            raise UnauthorizedError("Admin access required")

        now = now or datetime.utcnow()
        events = self._uow.compliance.list_urgent_due_before(
            now + timedelta(days=URGENT_WINDOW_DAYS), limit=URGENT_LIMIT
        )
        return [
            {
                'id': event.id,
                'businessId': event.business_entity_id,
                'businessName': event.business_entity.name if event.business_entity else None,
                'eventType': event.event_type,
                'eventTitle': event.event_title,
                'dueDate': iso(event.due_date),
                'daysRemaining': days_until(event.due_date, now),
                'priority': event.priority,
                'status': event.status,
            }
            for event in events
        ]
