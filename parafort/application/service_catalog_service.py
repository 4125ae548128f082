"""Service for the service catalog and its admin-configured custom fields."""
import logging
from datetime import datetime

from parafort.application.serializers import custom_field_to_dict, service_to_dict, parse_int
from parafort.domain.custom_fields import validate_field_definition, validate_submission
from parafort.domain.exceptions import (
    CustomFieldNotFoundError, CustomFieldValidationError, DuplicateFieldNameError, ServiceNotFoundError,
)
from parafort.models_db import ServiceCustomField

logger = logging.getLogger(__name__)

# Request key -> model attribute for the editable parts of a field
FIELD_ATTRIBUTES = {
    'fieldName': 'field_name',
    'fieldLabel': 'field_label',
    'fieldType': 'field_type',
    'fieldCategory': 'field_category',
    'isRequired': 'is_required',
    'placeholder': 'placeholder',
    'helpText': 'help_text',
    'validationRules': 'validation_rules',
    'options': 'options',
    'displayOrder': 'display_order',
    'fieldGroup': 'field_group',
    'conditionalDisplay': 'conditional_display',
    'width': 'width',
    'isActive': 'is_active',
    'defaultValue': 'default_value',
}


class ServiceCatalogService:
    def __init__(self, uow):
        self._uow = uow

    def _service(self, service_id):
        service = self._uow.services.get_by_id(parse_int(service_id, 'serviceId'))
        if not service or not service.is_active:
            raise ServiceNotFoundError(service_id)
        return service

    def list_services(self) -> list:
        return [service_to_dict(s) for s in self._uow.services.list_active()]

    def get_service(self, service_id) -> dict:
        return service_to_dict(self._service(service_id), include_addons=True)

    def list_custom_fields(self, service_id) -> list:
        service = self._service(service_id)
        return [custom_field_to_dict(f) for f in self._uow.services.list_fields(service.id)]

    def create_custom_field(self, service_id, data: dict) -> dict:
        service = self._uow.services.get_by_id(parse_int(service_id, 'serviceId'))
        if not service:
            raise ServiceNotFoundError(service_id)

        data = data or {}
        validate_field_definition(data)
        if self._uow.services.field_name_taken(service.id, data['fieldName']):
            raise DuplicateFieldNameError(data['fieldName'])

        field = ServiceCustomField(service_id=service.id, is_active=True)
        self._apply(field, data)
        if field.display_order is None:
            field.display_order = len(self._uow.services.list_fields(service.id, active_only=False))
        self._uow.services.add_field(field)
        self._uow.commit()
        logger.info(f"🧩 Custom field '{field.field_name}' added to service {service.id}")
        return custom_field_to_dict(field)

    def update_custom_field(self, field_id, data: dict) -> dict:
        field = self._uow.services.get_field(parse_int(field_id, 'fieldId'))
        if not field:
            raise CustomFieldNotFoundError(field_id)

        # Validate the merged definition so partial updates stay consistent
        merged = {key: getattr(field, attr) for key, attr in FIELD_ATTRIBUTES.items()}
        merged.update(data or {})
        validate_field_definition(merged)

        if self._uow.services.field_name_taken(field.service_id, merged['fieldName'], exclude_id=field.id):
            raise DuplicateFieldNameError(merged['fieldName'])

        self._apply(field, data or {})
        field.updated_at = datetime.utcnow()
        self._uow.commit()
        return custom_field_to_dict(field)

    def delete_custom_field(self, field_id) -> None:
        field = self._uow.services.get_field(parse_int(field_id, 'fieldId'))
        if not field:
            raise CustomFieldNotFoundError(field_id)
        self._uow.services.delete_field(field)
        self._uow.commit()

    def validate_custom_field_data(self, service_id, data: dict) -> None:
        """Raises CustomFieldValidationError listing every failing field."""
        fields = self._uow.services.list_fields(parse_int(service_id, 'serviceId'))
        errors = validate_submission(fields, data)
        if errors:
            raise CustomFieldValidationError(errors)

    @staticmethod
    def _apply(field, data: dict) -> None:
        for key, attr in FIELD_ATTRIBUTES.items():
            if key in data:
                setattr(field, attr, data[key])
