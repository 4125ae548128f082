"""Repository for ServiceOrder entities."""
from typing import Optional, List
import uuid

from sqlalchemy.orm import joinedload

from parafort.models_db import ServiceOrder


class ServiceOrderRepository:
    def __init__(self, session):
        self._session = session

    def get_by_order_id(self, order_id: str) -> Optional[ServiceOrder]:
        return self._session.query(ServiceOrder).options(
            joinedload(ServiceOrder.service),
        ).filter(ServiceOrder.order_id == order_id).first()

    def order_id_exists(self, order_id: str) -> bool:
        return self._session.query(ServiceOrder.id).filter(
            ServiceOrder.order_id == order_id
        ).first() is not None

    def list_for_user(self, user_id: uuid.UUID) -> List[ServiceOrder]:
        return self._session.query(ServiceOrder).options(
            joinedload(ServiceOrder.service),
        ).filter(
            ServiceOrder.user_id == user_id,
        ).order_by(ServiceOrder.created_at.desc()).all()

    def list_all(self, status: str = None, limit: int = 200) -> List[ServiceOrder]:
        query = self._session.query(ServiceOrder).options(joinedload(ServiceOrder.service))
        if status:
            query = query.filter(ServiceOrder.order_status == status)
        return query.order_by(ServiceOrder.created_at.desc()).limit(limit).all()

    def add(self, order: ServiceOrder) -> ServiceOrder:
        self._session.add(order)
        return order
