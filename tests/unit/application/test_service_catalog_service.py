"""Tests for ServiceCatalogService and custom field administration."""
from decimal import Decimal

import pytest

from parafort.application.service_catalog_service import ServiceCatalogService
from parafort.domain.exceptions import (
    CustomFieldNotFoundError, CustomFieldValidationError, DuplicateFieldNameError, ServiceNotFoundError,
    ValidationError,
)


@pytest.fixture
def service(uow):
    return ServiceCatalogService(uow)


FIELD = {'fieldName': 'business_name', 'fieldLabel': 'Business name', 'fieldType': 'text', 'isRequired': True}


class TestCatalog:

    def test_list_only_active_services(self, service, db_session, service_factory):
        service_factory.create(db_session, name='LLC Formation', sort_order=1)
        service_factory.create(db_session, name='Registered Agent', sort_order=0)
        service_factory.create(db_session, name='Retired', is_active=False)

        assert [s['name'] for s in service.list_services()] == ['Registered Agent', 'LLC Formation']

    def test_get_service_with_addons(self, service, db_session, service_factory):
        service_id = service_factory.create(db_session, addons=[{'name': 'Rush', 'price': Decimal('30')}]).id
        data = service.get_service(service_id)
        assert data['oneTimePrice'] == '199.00'
        assert [a['price'] for a in data['addons']] == ['30.00']

    def test_inactive_service_is_not_found(self, service, db_session, service_factory):
        service_id = service_factory.create(db_session, is_active=False).id
        with pytest.raises(ServiceNotFoundError):
            service.get_service(service_id)


class TestCustomFields:

    def test_create_and_list(self, service, db_session, service_factory):
        service_id = service_factory.create(db_session).id
        created = service.create_custom_field(service_id, FIELD)
        service.create_custom_field(service_id, {**FIELD, 'fieldName': 'ein', 'fieldLabel': 'EIN'})

        assert created['displayOrder'] == 0
        assert [f['fieldName'] for f in service.list_custom_fields(service_id)] == ['business_name', 'ein']

    def test_duplicate_name(self, service, db_session, service_factory):
        service_id = service_factory.create(db_session).id
        service.create_custom_field(service_id, FIELD)
        with pytest.raises(DuplicateFieldNameError):
            service.create_custom_field(service_id, FIELD)

    def test_update_validates_merged_definition(self, service, db_session, service_factory):
        service_id = service_factory.create(db_session).id
        field = service.create_custom_field(service_id, FIELD)

        with pytest.raises(ValidationError) as exc:
            service.update_custom_field(field['id'], {'fieldType': 'select'})
        assert exc.value.field == 'options'

        updated = service.update_custom_field(field['id'], {'fieldType': 'select', 'options': ['a', 'b']})
        assert updated['fieldType'] == 'select'
        assert updated['fieldLabel'] == 'Business name'

    def test_delete(self, service, db_session, service_factory):
        service_id = service_factory.create(db_session).id
        field = service.create_custom_field(service_id, FIELD)
        service.delete_custom_field(field['id'])
        with pytest.raises(CustomFieldNotFoundError):
            service.delete_custom_field(field['id'])

    def test_validate_custom_field_data(self, service, db_session, service_factory):
        service_id = service_factory.create(db_session).id
        service.create_custom_field(service_id, FIELD)

        service.validate_custom_field_data(service_id, {'business_name': 'Acme'})
        with pytest.raises(CustomFieldValidationError) as exc:
            service.validate_custom_field_data(service_id, {})
        assert exc.value.errors == {'business_name': 'Business name is required'}
