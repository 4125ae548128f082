"""Repository for Notification entities."""
from datetime import datetime
from typing import Optional, List
import uuid

from sqlalchemy import or_

from parafort.models_db import Notification


class NotificationRepository:
    def __init__(self, session):
        self._session = session

    def _not_expired(self, now: datetime):
        return or_(Notification.expires_at.is_(None), Notification.expires_at > now)

    def get_for_user(self, id: int, user_id: uuid.UUID) -> Optional[Notification]:
        return self._session.query(Notification).filter(
            Notification.id == id,
            Notification.user_id == user_id,
        ).first()

    def list_for_user(
        self,
        user_id: uuid.UUID,
        now: datetime,
        limit: int = 50,
        include_read: bool = True,
        category: str = None,
        priority: str = None,
    ) -> List[Notification]:
        query = self._session.query(Notification).filter(
            Notification.user_id == user_id,
            self._not_expired(now),
        )
        if not include_read:
            query = query.filter(Notification.is_read == False)  # noqa: E712
        if category:
            query = query.filter(Notification.category == category)
        if priority:
            query = query.filter(Notification.priority == priority)
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()

    def count_unread(self, user_id: uuid.UUID, now: datetime) -> int:
        return self._session.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.is_read == False,  # noqa: E712
            self._not_expired(now),
        ).count()

    def mark_all_read(self, user_id: uuid.UUID, now: datetime) -> int:
        return self._session.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.is_read == False,  # noqa: E712
        ).update({"is_read": True, "read_at": now}, synchronize_session=False)

    def list_for_related(self, user_id: uuid.UUID, entity_type: str, entity_id: str) -> List[Notification]:
        return self._session.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.related_entity_type == entity_type,
            Notification.related_entity_id == entity_id,
        ).all()

    def delete_expired(self, now: datetime) -> int:
        return self._session.query(Notification).filter(
            Notification.expires_at.isnot(None),
            Notification.expires_at <= now,
        ).delete(synchronize_session=False)

    def delete_read_before(self, cutoff: datetime) -> int:
        return self._session.query(Notification).filter(
            Notification.is_read == True,  # noqa: E712
            Notification.created_at < cutoff,
        ).delete(synchronize_session=False)

    def add(self, notification: Notification) -> Notification:
        self._session.add(notification)
        return notification
