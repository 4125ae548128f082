"""Service for service orders (checkout records)."""
import logging
import secrets
from datetime import datetime
from decimal import Decimal

from parafort.application.serializers import order_to_dict, parse_flag, parse_int
from parafort.domain.exceptions import (
    BusinessEntityNotFoundError, InvalidStatusError, OrderNotFoundError, ServiceNotFoundError, ValidationError,
)
from parafort.domain.value_objects import Email
from parafort.models_db import OrderStatus, PaymentStatus, ServiceOrder

logger = logging.getLogger(__name__)

ORDER_STATUSES = [s.value for s in OrderStatus]
ORDER_ID_PREFIX = "PS-"
ZERO = Decimal("0.00")


def generate_order_id() -> str:
    """PS- followed by 9 random digits."""
    return ORDER_ID_PREFIX + "".join(secrets.choice("0123456789") for _ in range(9))


class OrderService:
    def __init__(self, uow, catalog_service, notification_service):
        self._uow = uow
        self._catalog = catalog_service
        self._notifications = notification_service

    def _new_order_id(self) -> str:
        order_id = generate_order_id()
        while self._uow.orders.order_id_exists(order_id):
            order_id = generate_order_id()
        return order_id

    def _selected_addons(self, service_id, selection) -> list:
        """Accepts a list of add-on ids or {id, quantity} objects."""
        if selection is None:
            selection = []
        elif not isinstance(selection, list):
            raise ValidationError("selectedAddons must be a list", "selectedAddons")

        quantities = {}
        for item in selection:
            if isinstance(item, dict):
                addon_id = parse_int(item.get('id'), 'selectedAddons')
                quantity = parse_int(item.get('quantity', 1), 'selectedAddons')
            else:
                addon_id, quantity = parse_int(item, 'selectedAddons'), 1
            if quantity < 1:
                raise ValidationError("Add-on quantity must be at least 1", "selectedAddons")
            quantities[addon_id] = quantities.get(addon_id, 0) + quantity

        addons = self._uow.services.get_addons(service_id, quantities.keys())
        if len(addons) != len(quantities):
            raise ValidationError("One or more add-ons are not available for this service", "selectedAddons")

        return [
            {'id': a.id, 'name': a.name, 'price': f"{a.price:.2f}", 'quantity': quantities[a.id]}
            for a in sorted(addons, key=lambda a: a.id)
        ]

    def create_order(self, user, data: dict) -> dict:
        """
        Records a checkout. Totals are always computed server-side:
        base price + add-ons + expedited fee.
        """
        data = data or {}
        customer_email = data.get('customerEmail') or (user.email if user else None)
        customer_name = data.get('customerName') or (user.full_name if user else None)
        if not customer_email:
            raise ValidationError("customerEmail is required", "customerEmail")
        if not customer_name:
            raise ValidationError("customerName is required", "customerName")
        customer_email = Email(customer_email).value

        if not data.get('serviceId'):
            raise ValidationError("serviceId is required", "serviceId")
        service = self._uow.services.get_by_id(parse_int(data['serviceId'], 'serviceId'))
        if not service or not service.is_active:
            raise ServiceNotFoundError(data['serviceId'])

        custom_field_data = data.get('customFieldData')
        if custom_field_data is None:
            custom_field_data = {}
        elif not isinstance(custom_field_data, dict):
            raise ValidationError("customFieldData must be an object", "customFieldData")
        self._catalog.validate_custom_field_data(service.id, custom_field_data)

        business_id = data.get('businessEntityId')
        if business_id is not None:
            business_id = parse_int(business_id, 'businessEntityId')
            if not user or not self._uow.businesses.get_for_user(business_id, user.id):
                raise BusinessEntityNotFoundError(business_id)

        addons = self._selected_addons(service.id, data.get('selectedAddons'))
        base_amount = Decimal(service.one_time_price or service.recurring_price or ZERO)
        addons_amount = sum((Decimal(a['price']) * a['quantity'] for a in addons), ZERO)
        is_expedited = parse_flag(data.get('isExpedited'), 'isExpedited')
        expedited_fee = Decimal(service.expedited_price or ZERO) if is_expedited else ZERO

        order = ServiceOrder(
            order_id=self._new_order_id(),
            user_id=user.id if user else None,
            service_id=service.id,
            business_entity_id=business_id,
            customer_email=customer_email,
            customer_name=customer_name,
            customer_phone=data.get('customerPhone'),
            business_name=data.get('businessName'),
            custom_field_data=custom_field_data,
            selected_addons=addons,
            base_amount=base_amount,
            addons_amount=addons_amount,
            is_expedited=is_expedited,
            expedited_fee=expedited_fee,
            total_amount=base_amount + addons_amount + expedited_fee,
            currency='USD',
            order_status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            customer_notes=data.get('customerNotes'),
        )
        order.service = service
        self._uow.orders.add(order)
        self._notifications.notify_order(order, 'order_created')
        self._uow.commit()
        logger.info(f"🧾 Order {order.order_id} created for service {service.id} (total {order.total_amount})")
        return order_to_dict(order)

    def list_for_user(self, user_id) -> list:
        return [order_to_dict(o) for o in self._uow.orders.list_for_user(user_id)]

    def get_for_user(self, user, order_id) -> dict:
        """Owners see their orders; admins see every order."""
        order = self._uow.orders.get_by_order_id(order_id)
        if not order or (order.user_id != user.id and not user.is_admin):
            raise OrderNotFoundError(order_id)
        return order_to_dict(order)

    def admin_list(self, status=None) -> list:
        if status and status not in ORDER_STATUSES:
            raise InvalidStatusError(status, ORDER_STATUSES)
        return [order_to_dict(o) for o in self._uow.orders.list_all(status=status)]

    def admin_update_status(self, order_id, status, notes=None) -> dict:
        if status not in ORDER_STATUSES:
            raise InvalidStatusError(status, ORDER_STATUSES)

        order = self._uow.orders.get_by_order_id(order_id)
        if not order:
            raise OrderNotFoundError(order_id)

        previous = order.order_status
        order.order_status = status
        if notes:
            order.order_notes = notes
        order.updated_at = datetime.utcnow()

        if status == OrderStatus.COMPLETED.value and previous != status:
            self._notifications.notify_order(order, 'order_completed')
        elif status == OrderStatus.CANCELLED.value and previous != status:
            self._notifications.notify_order(order, 'order_failed')

        self._uow.commit()
        logger.info(f"🧾 Order {order.order_id} status {previous} -> {status}")
        return order_to_dict(order)
