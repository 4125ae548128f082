"""
Repository for ComplianceCalendar items.

Besides CRUD it owns the reporting aggregations used by the compliance
dashboard. Date arithmetic differs between Postgres and SQLite, so the
dialect-specific expressions are built here and nowhere else.
"""
from datetime import datetime
from typing import Optional, List, Dict, Tuple
import uuid

from sqlalchemy import func, case, and_, literal_column
from sqlalchemy.orm import joinedload

from parafort.models_db import ComplianceCalendar, BusinessEntity, ComplianceStatus, User

COMPLETED = ComplianceStatus.COMPLETED.value
IN_PROGRESS = ComplianceStatus.IN_PROGRESS.value
OVERDUE = ComplianceStatus.OVERDUE.value
PENDING = ComplianceStatus.PENDING.value


class ComplianceRepository:
    def __init__(self, session):
        self._session = session

    # --- Dialect helpers ---

    @property
    def _dialect(self) -> str:
        return self._session.get_bind().dialect.name

    def _days_between(self, later, earlier):
        """Fractional days between two timestamp columns."""
        if self._dialect == "postgresql":
            return func.extract("epoch", later - earlier) / 86400
        return func.julianday(later) - func.julianday(earlier)

    def _bucket(self, column, unit: str):
        """'YYYY-MM-DD' key of the day or month containing `column`."""
        if self._dialect == "postgresql":
            return func.to_char(
                func.date_trunc(literal_column(f"'{unit}'"), column),
                literal_column("'YYYY-MM-DD'"),
            )
        fmt = "%Y-%m-01" if unit == "month" else "%Y-%m-%d"
        return func.strftime(literal_column(f"'{fmt}'"), column)

    def _owned(self, query, user_id: uuid.UUID, business_id: Optional[int]):
        query = query.select_from(ComplianceCalendar).join(
            BusinessEntity, ComplianceCalendar.business_entity_id == BusinessEntity.id
        ).filter(BusinessEntity.user_id == user_id)
        if business_id is not None:
            query = query.filter(BusinessEntity.id == business_id)
        return query

    # --- CRUD ---

    def get_by_id(self, id: int) -> Optional[ComplianceCalendar]:
        return self._session.get(ComplianceCalendar, id)

    def get_for_user(self, id: int, user_id: uuid.UUID) -> Optional[ComplianceCalendar]:
        return self._owned(
            self._session.query(ComplianceCalendar), user_id, None
        ).filter(ComplianceCalendar.id == id).first()

    def list_for_business(self, business_id: int, status: str = None) -> List[ComplianceCalendar]:
        query = self._session.query(ComplianceCalendar).filter(
            ComplianceCalendar.business_entity_id == business_id,
        )
        if status:
            query = query.filter(ComplianceCalendar.status == status)
        return query.order_by(ComplianceCalendar.due_date.asc()).all()

    def list_due_between(
        self,
        user_id: uuid.UUID,
        start: datetime,
        end: datetime,
        business_id: Optional[int] = None,
        status: str = None,
    ) -> List[ComplianceCalendar]:
        query = self._owned(
            self._session.query(ComplianceCalendar), user_id, business_id
        ).filter(
            ComplianceCalendar.due_date >= start,
            ComplianceCalendar.due_date <= end,
        )
        if status:
            query = query.filter(ComplianceCalendar.status == status)
        return query.order_by(ComplianceCalendar.due_date.asc()).all()

    def list_pending_due_between(self, start: datetime, end: datetime) -> List[ComplianceCalendar]:
        """Pending items of owned businesses across all users (reminder job)."""
        return self._session.query(ComplianceCalendar).options(
            joinedload(ComplianceCalendar.business_entity).joinedload(BusinessEntity.user),
        ).join(
            BusinessEntity, ComplianceCalendar.business_entity_id == BusinessEntity.id
        ).join(
            User, BusinessEntity.user_id == User.id
        ).filter(
            ComplianceCalendar.status == PENDING,
            ComplianceCalendar.due_date >= start,
            ComplianceCalendar.due_date <= end,
        ).order_by(ComplianceCalendar.due_date.asc()).all()

    def mark_overdue(self, now: datetime) -> int:
        """Flips pending/in-progress items past their due date to overdue."""
        return self._session.query(ComplianceCalendar).filter(
            ComplianceCalendar.status.in_([PENDING, IN_PROGRESS]),
            ComplianceCalendar.due_date < now,
        ).update({"status": OVERDUE, "updated_at": now}, synchronize_session=False)

    def has_events(self, business_id: int) -> bool:
        return self._session.query(ComplianceCalendar.id).filter(
            ComplianceCalendar.business_entity_id == business_id
        ).first() is not None

    def add(self, event: ComplianceCalendar) -> ComplianceCalendar:
        self._session.add(event)
        return event

    def add_all(self, events: List[ComplianceCalendar]) -> None:
        self._session.add_all(events)

    def delete(self, event: ComplianceCalendar) -> None:
        self._session.delete(event)

    # --- Aggregations ---

    def count_by_status(self, user_id: uuid.UUID, business_id: Optional[int], since: datetime) -> Dict[str, int]:
        """Item counts per status created since `since`. A null status counts as pending."""
        status = func.coalesce(ComplianceCalendar.status, PENDING)
        rows = self._owned(
            self._session.query(status, func.count(ComplianceCalendar.id)), user_id, business_id
        ).filter(
            ComplianceCalendar.created_at >= since,
        ).group_by(status).all()

        counts: Dict[str, int] = {}
        for key, count in rows:
            counts[key] = counts.get(key, 0) + int(count or 0)
        return counts

    def count_completed_on_time(self, user_id: uuid.UUID, business_id: Optional[int], since: datetime) -> int:
        return self._owned(
            self._session.query(func.count(ComplianceCalendar.id)), user_id, business_id
        ).filter(
            ComplianceCalendar.status == COMPLETED,
            ComplianceCalendar.completed_date.isnot(None),
            ComplianceCalendar.completed_date <= ComplianceCalendar.due_date,
            ComplianceCalendar.created_at >= since,
        ).scalar() or 0

    def avg_completion_days(self, user_id: uuid.UUID, business_id: Optional[int], since: datetime) -> float:
        value = self._owned(
            self._session.query(func.avg(self._days_between(
                ComplianceCalendar.completed_date, ComplianceCalendar.created_at
            ))), user_id, business_id
        ).filter(
            ComplianceCalendar.status == COMPLETED,
            ComplianceCalendar.completed_date.isnot(None),
            ComplianceCalendar.created_at >= since,
        ).scalar()
        return float(value or 0)

    def business_breakdown(self, user_id: uuid.UUID, business_id: Optional[int]) -> List[dict]:
        """
        Per-business counts over all items, one row per owned business.

        Businesses without items are included with zero counts. A null status
        counts as pending, as in count_by_status.
        """
        def _count_when(condition):
            return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)

        status = ComplianceCalendar.status
        completed = and_(status == COMPLETED, ComplianceCalendar.completed_date.isnot(None))

        query = self._session.query(
            BusinessEntity.id,
            BusinessEntity.name,
            BusinessEntity.entity_type,
            func.count(ComplianceCalendar.id).label("total"),
            _count_when(status == COMPLETED).label("completed"),
            _count_when(status == IN_PROGRESS).label("in_progress"),
            _count_when(status == OVERDUE).label("overdue"),
            _count_when(and_(
                ComplianceCalendar.id.isnot(None),
                func.coalesce(status, PENDING) == PENDING,
            )).label("pending"),
            _count_when(and_(completed, ComplianceCalendar.completed_date <= ComplianceCalendar.due_date)).label("on_time"),
            func.avg(case((completed, self._days_between(
                ComplianceCalendar.completed_date, ComplianceCalendar.created_at
            )))).label("avg_days"),
        ).outerjoin(
            ComplianceCalendar, ComplianceCalendar.business_entity_id == BusinessEntity.id
        ).filter(BusinessEntity.user_id == user_id)

        if business_id is not None:
            query = query.filter(BusinessEntity.id == business_id)

        rows = query.group_by(
            BusinessEntity.id, BusinessEntity.name, BusinessEntity.entity_type
        ).order_by(BusinessEntity.id).all()

        return [
            {
                "business_id": row.id,
                "business_name": row.name,
                "entity_type": row.entity_type,
                "total": int(row.total or 0),
                "completed": int(row.completed or 0),
                "in_progress": int(row.in_progress or 0),
                "overdue": int(row.overdue or 0),
                "pending": int(row.pending or 0),
                "on_time": int(row.on_time or 0),
                "avg_days": float(row.avg_days or 0),
            }
            for row in rows
        ]

    def _bucket_counts(self, user_id, business_id, since, unit, column, *conditions) -> Dict[str, int]:
        bucket = self._bucket(column, unit).label("bucket")
        rows = self._owned(
            self._session.query(bucket, func.count(ComplianceCalendar.id)), user_id, business_id
        ).filter(
            ComplianceCalendar.created_at >= since,
            column.isnot(None),
            *conditions,
        ).group_by(literal_column("bucket")).all()
        return {key: int(count) for key, count in rows if key}

    def trend_counts(
        self, user_id: uuid.UUID, business_id: Optional[int], since: datetime, unit: str
    ) -> Tuple[Dict[str, int], Dict[str, int], Dict[str, int]]:
        """
        Bucketed counts for items created since `since`.

        Returns (completed by completion date, overdue by due date, created by creation date).
        """
        completed = self._bucket_counts(
            user_id, business_id, since, unit,
            ComplianceCalendar.completed_date, ComplianceCalendar.status == COMPLETED,
        )
        overdue = self._bucket_counts(
            user_id, business_id, since, unit,
            ComplianceCalendar.due_date, ComplianceCalendar.status == OVERDUE,
        )
        created = self._bucket_counts(
            user_id, business_id, since, unit,
            ComplianceCalendar.created_at,
        )
        return completed, overdue, created

    def category_counts(self, user_id: uuid.UUID, business_id: Optional[int]) -> List[Tuple[Optional[str], int, int]]:
        rows = self._owned(
            self._session.query(
                ComplianceCalendar.category,
                func.count(ComplianceCalendar.id),
                func.coalesce(func.sum(case((ComplianceCalendar.status == COMPLETED, 1), else_=0)), 0),
            ), user_id, business_id
        ).group_by(ComplianceCalendar.category).order_by(ComplianceCalendar.category).all()
        return [(category, int(total), int(completed or 0)) for category, total, completed in rows]

    def list_urgent_due_before(self, cutoff: datetime, limit: int = 10) -> List[ComplianceCalendar]:
        """Urgent items across all businesses due before `cutoff` (past-due included)."""
        return self._session.query(ComplianceCalendar).options(
            joinedload(ComplianceCalendar.business_entity),
        ).filter(
            ComplianceCalendar.priority == "urgent",
            ComplianceCalendar.due_date <= cutoff,
        ).order_by(ComplianceCalendar.due_date.asc()).limit(limit).all()
