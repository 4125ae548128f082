"""Repository for Service catalog entities (services, custom fields, add-ons)."""
from typing import Optional, List, Iterable

from parafort.models_db import Service, ServiceCustomField, ServiceAddon


class ServiceRepository:
    def __init__(self, session):
        self._session = session

    def get_by_id(self, id: int) -> Optional[Service]:
        return self._session.get(Service, id)

    def list_active(self) -> List[Service]:
        return self._session.query(Service).filter(
            Service.is_active == True,  # noqa: E712
        ).order_by(Service.sort_order, Service.name).all()

    def add(self, service: Service) -> Service:
        self._session.add(service)
        return service

    # Custom fields

    def get_field(self, field_id: int) -> Optional[ServiceCustomField]:
        return self._session.get(ServiceCustomField, field_id)

    def list_fields(self, service_id: int, active_only: bool = True) -> List[ServiceCustomField]:
        query = self._session.query(ServiceCustomField).filter(
            ServiceCustomField.service_id == service_id,
        )
        if active_only:
            query = query.filter(ServiceCustomField.is_active == True)  # noqa: E712
        return query.order_by(ServiceCustomField.display_order, ServiceCustomField.id).all()

    def field_name_taken(self, service_id: int, field_name: str, exclude_id: int = None) -> bool:
        query = self._session.query(ServiceCustomField.id).filter(
            ServiceCustomField.service_id == service_id,
            ServiceCustomField.field_name == field_name,
        )
        if exclude_id is not None:
            query = query.filter(ServiceCustomField.id != exclude_id)
        return query.first() is not None

    def add_field(self, field: ServiceCustomField) -> ServiceCustomField:
        self._session.add(field)
        return field

    def delete_field(self, field: ServiceCustomField) -> None:
        self._session.delete(field)

    # Add-ons

    def get_addons(self, service_id: int, addon_ids: Iterable[int]) -> List[ServiceAddon]:
        ids = list(addon_ids)
        if not ids:
            return []
        return self._session.query(ServiceAddon).filter(
            ServiceAddon.service_id == service_id,
            ServiceAddon.id.in_(ids),
            ServiceAddon.is_active == True,  # noqa: E712
        ).all()

    def list_addons(self, service_id: int) -> List[ServiceAddon]:
        return self._session.query(ServiceAddon).filter(
            ServiceAddon.service_id == service_id,
            ServiceAddon.is_active == True,  # noqa: E712
        ).order_by(ServiceAddon.display_order).all()
