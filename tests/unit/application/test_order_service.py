"""Tests for OrderService (checkout records and admin status changes)."""
import re
from decimal import Decimal

import pytest

from parafort.application.notification_service import NotificationService
from parafort.application.order_service import OrderService, generate_order_id
from parafort.application.service_catalog_service import ServiceCatalogService
from parafort.domain.exceptions import (
    BusinessEntityNotFoundError, CustomFieldValidationError, InvalidStatusError, OrderNotFoundError,
    ServiceNotFoundError, ValidationError,
)
from parafort.models_db import Notification, ServiceAddon, UserRole


@pytest.fixture
def service(uow):
    return OrderService(uow, ServiceCatalogService(uow), NotificationService(uow))


@pytest.fixture
def catalog(db_session, service_factory):
    formation = service_factory.create(
        db_session,
        addons=[
            {'name': 'Registered Agent', 'price': Decimal('49.00')},
            {'name': 'EIN Application', 'price': Decimal('25.00')},
        ],
        fields=[{
            'field_name': 'members', 'field_label': 'Number of members', 'field_type': 'number',
            'is_required': True, 'validation_rules': {'min': 1},
        }],
    )
    agent, ein = db_session.query(ServiceAddon).order_by(ServiceAddon.id).all()
    return {'service_id': formation.id, 'agent_id': agent.id, 'ein_id': ein.id}


def test_generate_order_id_format():
    assert re.fullmatch(r"PS-\d{9}", generate_order_id())


class TestCreateOrder:

    def test_total_is_computed_server_side(self, service, catalog, db_session, user_factory):
        user = user_factory.create(db_session, first_name='Jane', last_name='Doe')
        order = service.create_order(user, {
            'serviceId': catalog['service_id'],
            'customFieldData': {'members': 2},
            'selectedAddons': [catalog['agent_id'], {'id': catalog['ein_id'], 'quantity': 2}],
            'isExpedited': True,
            'totalAmount': '1.00',
        })

        assert order['baseAmount'] == '199.00'
        assert order['addonsAmount'] == '99.00'
        assert order['expeditedFee'] == '75.00'
        assert order['totalAmount'] == '373.00'
        assert order['customerName'] == 'Jane Doe'
        assert order['orderStatus'] == 'pending'
        assert order['paymentStatus'] == 'pending'
        assert re.fullmatch(r"PS-\d{9}", order['orderId'])

    def test_signed_in_customer_is_notified(self, service, catalog, db_session, user_factory):
        user = user_factory.create(db_session)
        user_id = user.id
        order = service.create_order(user, {'serviceId': catalog['service_id'], 'customFieldData': {'members': 1}})

        notification = db_session.query(Notification).filter_by(user_id=user_id).one()
        assert notification.type == 'order_created'
        assert notification.related_entity_id == order['orderId']

    def test_guest_checkout(self, service, catalog, db_session):
        order = service.create_order(None, {
            'serviceId': catalog['service_id'],
            'customerEmail': 'Guest@Example.com',
            'customerName': 'Guest Buyer',
            'customFieldData': {'members': 1},
        })
        assert order['userId'] is None
        assert order['customerEmail'] == 'guest@example.com'
        assert order['totalAmount'] == '199.00'
        assert db_session.query(Notification).count() == 0

    def test_guest_needs_contact_details(self, service, catalog):
        with pytest.raises(ValidationError) as exc:
            service.create_order(None, {'serviceId': catalog['service_id']})
        assert exc.value.field == 'customerEmail'

    def test_custom_field_errors_are_reported(self, service, catalog, db_session, user_factory):
        user = user_factory.create(db_session)
        with pytest.raises(CustomFieldValidationError) as exc:
            service.create_order(user, {'serviceId': catalog['service_id'], 'customFieldData': {'members': 0}})
        assert set(exc.value.errors) == {'members'}

    def test_unknown_addon(self, service, catalog, db_session, user_factory):
        user = user_factory.create(db_session)
        with pytest.raises(ValidationError) as exc:
            service.create_order(user, {
                'serviceId': catalog['service_id'], 'customFieldData': {'members': 1}, 'selectedAddons': [9999],
            })
        assert exc.value.field == 'selectedAddons'

    def test_unknown_service(self, service, db_session, user_factory):
        user = user_factory.create(db_session)
        with pytest.raises(ServiceNotFoundError):
            service.create_order(user, {'serviceId': 424242})

    def test_business_must_belong_to_customer(self, service, catalog, db_session, user_factory, business_factory):
        user = user_factory.create(db_session)
        stranger = user_factory.create(db_session)
        business_id = business_factory.create(db_session, user=stranger).id
        with pytest.raises(BusinessEntityNotFoundError):
            service.create_order(user, {
                'serviceId': catalog['service_id'], 'customFieldData': {'members': 1},
                'businessEntityId': business_id,
            })

    @pytest.mark.parametrize("data,field", [
        ({'customFieldData': ['x']}, 'customFieldData'),
        ({'customFieldData': 'members=1'}, 'customFieldData'),
        ({'customFieldData': {'members': 1}, 'selectedAddons': {'id': 1}}, 'selectedAddons'),
        ({'customFieldData': {'members': 1}, 'selectedAddons': '1,2'}, 'selectedAddons'),
        ({'customFieldData': {'members': 1}, 'isExpedited': 'maybe'}, 'isExpedited'),
    ])
    def test_malformed_payload(self, service, catalog, db_session, user_factory, data, field):
        user = user_factory.create(db_session)
        with pytest.raises(ValidationError) as exc:
            service.create_order(user, {'serviceId': catalog['service_id'], **data})
        assert exc.value.field == field

    def test_custom_field_data_must_be_an_object_without_fields(self, service, db_session, service_factory):
        plain_id = service_factory.create(db_session, name='Registered Agent').id
        with pytest.raises(ValidationError) as exc:
            service.create_order(None, {
                'serviceId': plain_id, 'customerEmail': 'guest@example.com', 'customerName': 'Guest',
                'customFieldData': ['x'],
            })
        assert exc.value.field == 'customFieldData'

    @pytest.mark.parametrize("flag,fee", [('false', '0.00'), ('0', '0.00'), (False, '0.00'), ('true', '75.00')])
    def test_expedited_flag_forms(self, service, catalog, db_session, user_factory, flag, fee):
        user = user_factory.create(db_session)
        order = service.create_order(user, {
            'serviceId': catalog['service_id'], 'customFieldData': {'members': 1}, 'isExpedited': flag,
        })
        assert order['expeditedFee'] == fee


class TestOrderAccessAndStatus:

    @pytest.fixture
    def placed(self, service, catalog, db_session, user_factory):
        customer = user_factory.create(db_session)
        order = service.create_order(customer, {'serviceId': catalog['service_id'], 'customFieldData': {'members': 1}})
        return customer, order['orderId']

    def test_owner_and_admin_can_read(self, service, placed, db_session, user_factory):
        customer, order_id = placed
        admin = user_factory.create(db_session, role=UserRole.ADMIN.value)
        stranger = user_factory.create(db_session)

        assert service.get_for_user(customer, order_id)['orderId'] == order_id
        assert service.get_for_user(admin, order_id)['orderId'] == order_id
        with pytest.raises(OrderNotFoundError):
            service.get_for_user(stranger, order_id)

    def test_completion_notifies_customer(self, service, placed, db_session):
        customer, order_id = placed
        customer_id = customer.id
        result = service.admin_update_status(order_id, 'completed', notes='Filed with the state')

        assert result['orderStatus'] == 'completed'
        types = {n.type for n in db_session.query(Notification).filter_by(user_id=customer_id)}
        assert types == {'order_created', 'order_completed'}

    def test_cancellation_notifies_failure(self, service, placed, db_session):
        customer, order_id = placed
        customer_id = customer.id
        service.admin_update_status(order_id, 'cancelled')
        failed = db_session.query(Notification).filter_by(user_id=customer_id, type='order_failed').one()
        assert failed.priority == 'urgent'

    def test_invalid_status(self, service, placed):
        _, order_id = placed
        with pytest.raises(InvalidStatusError):
            service.admin_update_status(order_id, 'lost')

    def test_admin_list_filter(self, service, placed):
        assert len(service.admin_list(status='pending')) == 1
        assert service.admin_list(status='completed') == []
