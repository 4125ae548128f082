"""Repository for BusinessEntity entities."""
from datetime import datetime
from typing import Optional, List
import uuid

from sqlalchemy.orm import joinedload

from parafort.models_db import BusinessEntity, ComplianceCalendar


class BusinessEntityRepository:
    def __init__(self, session):
        self._session = session

    def get_by_id(self, id: int) -> Optional[BusinessEntity]:
        return self._session.get(BusinessEntity, id)

    def get_for_user(self, id: int, user_id: uuid.UUID) -> Optional[BusinessEntity]:
        """Ownership-checked lookup. Other users' businesses are invisible."""
        return self._session.query(BusinessEntity).filter(
            BusinessEntity.id == id,
            BusinessEntity.user_id == user_id,
        ).first()

    def list_for_user(self, user_id: uuid.UUID) -> List[BusinessEntity]:
        return self._session.query(BusinessEntity).filter(
            BusinessEntity.user_id == user_id,
        ).order_by(BusinessEntity.created_at.desc()).all()

    def list_all(self, status: str = None, limit: int = 200) -> List[BusinessEntity]:
        query = self._session.query(BusinessEntity).options(joinedload(BusinessEntity.user))
        if status:
            query = query.filter(BusinessEntity.status == status)
        return query.order_by(BusinessEntity.created_at.desc()).limit(limit).all()

    def list_created_since_without_events(self, since: datetime) -> List[BusinessEntity]:
        """Businesses created after `since` that have no compliance items yet."""
        has_events = self._session.query(ComplianceCalendar.id).filter(
            ComplianceCalendar.business_entity_id == BusinessEntity.id
        ).exists()
        return self._session.query(BusinessEntity).filter(
            BusinessEntity.created_at >= since,
            ~has_events,
        ).all()

    def add(self, entity: BusinessEntity) -> BusinessEntity:
        self._session.add(entity)
        return entity
