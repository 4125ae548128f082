"""Service for business entities (formation orders and admin status updates)."""
import logging
from datetime import datetime

from parafort.application.serializers import business_to_dict, parse_int
from parafort.domain.entity_types import ENTITY_TYPES
from parafort.domain.exceptions import BusinessEntityNotFoundError, InvalidStatusError, ValidationError
from parafort.domain.value_objects import Email, normalize_state
from parafort.models_db import BusinessEntity, BusinessStatus

logger = logging.getLogger(__name__)

STATUSES = [s.value for s in BusinessStatus]


class BusinessEntityService:
    def __init__(self, uow, event_service=None):
        self._uow = uow
        self._events = event_service

    def create(self, user_id, data: dict) -> dict:
        """Formation-order submission. New entities always start as drafts."""
        data = data or {}
        name = (data.get('name') or '').strip()
        if not name:
            raise ValidationError("name is required", "name")

        entity_type = data.get('entityType')
        if not entity_type:
            raise ValidationError("entityType is required", "entityType")
        if entity_type not in ENTITY_TYPES:
            raise ValidationError(f"entityType must be one of: {', '.join(ENTITY_TYPES)}", "entityType")

        state = normalize_state(data.get('state'))

        contact_email = data.get('contactEmail')
        if contact_email:
            contact_email = Email(contact_email).value

        entity = BusinessEntity(
            user_id=user_id,
            name=name,
            entity_type=entity_type,
            state=state,
            status=BusinessStatus.DRAFT.value,
            business_purpose=data.get('businessPurpose'),
            contact_email=contact_email,
            contact_phone=data.get('contactPhone'),
        )
        self._uow.businesses.add(entity)
        self._uow.commit()
        logger.info(f"🏢 Formation order created: business {entity.id} ({entity_type}, {state})")
        return business_to_dict(entity)

    def list_for_user(self, user_id) -> list:
        return [business_to_dict(b) for b in self._uow.businesses.list_for_user(user_id)]

    def get_for_user(self, user_id, business_id) -> dict:
        entity = self._uow.businesses.get_for_user(parse_int(business_id, 'businessId'), user_id)
        if not entity:
            raise BusinessEntityNotFoundError(business_id)
        return business_to_dict(entity)

    def admin_list(self, status=None) -> list:
        if status and status not in STATUSES:
            raise InvalidStatusError(status, STATUSES)
        result = []
        for entity in self._uow.businesses.list_all(status=status):
            data = business_to_dict(entity)
            data['ownerEmail'] = entity.user.email if entity.user else None
            result.append(data)
        return result

    def admin_update_status(self, business_id, status, now=None) -> dict:
        """
        Sets a new status. Filing stamps the filed date and, for a business
        without compliance items, generates its calendar.
        """
        if status not in STATUSES:
            raise InvalidStatusError(status, STATUSES)

        entity = self._uow.businesses.get_by_id(parse_int(business_id, 'businessId'))
        if not entity:
            raise BusinessEntityNotFoundError(business_id)

        now = now or datetime.utcnow()
        previous = entity.status
        entity.status = status
        entity.updated_at = now

        generated = 0
        if status == BusinessStatus.FILED.value:
            entity.filed_date = entity.filed_date or now
            if self._events is not None and not self._uow.compliance.has_events(entity.id):
                generated = len(self._events.generate_for_business(entity, now))

        self._uow.commit()
        logger.info(f"🏢 Business {entity.id} status {previous} -> {status} ({generated} events generated)")

        data = business_to_dict(entity)
        data['generatedEvents'] = generated
        return data
