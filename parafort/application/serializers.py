"""
JSON shapes returned by the API.

Keys are camelCase because the React client consumes them as-is.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from parafort.domain.exceptions import ValidationError
from parafort.domain.value_objects import state_name


def iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def money(value) -> str:
    return f"{Decimal(value or 0):.2f}"


def parse_datetime(value, field: str) -> datetime:
    """ISO-8601 string (date or datetime, 'Z' allowed) -> naive UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    else:
        if not value or not isinstance(value, str):
            raise ValidationError(f"{field} is required", field)
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(f"{field} must be an ISO-8601 date", field)

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_int(value, field: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer", field)


def parse_flag(value, field: str, default: bool = False) -> bool:
    """JSON booleans or the query-string forms true/false, 1/0, yes/no."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("1", "true", "yes"):
            return True
        if text in ("0", "false", "no"):
            return False
    raise ValidationError(f"{field} must be true or false", field)


def user_to_dict(user) -> dict:
    return {
        "id": str(user.id),
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "phone": user.phone,
        "role": user.role,
        "isActive": user.is_active,
        "createdAt": iso(user.created_at),
    }


def business_to_dict(entity) -> dict:
    return {
        "id": entity.id,
        "userId": str(entity.user_id) if entity.user_id else None,
        "name": entity.name,
        "entityType": entity.entity_type,
        "state": entity.state,
        "stateName": state_name(entity.state),
        "status": entity.status,
        "businessPurpose": entity.business_purpose,
        "contactEmail": entity.contact_email,
        "contactPhone": entity.contact_phone,
        "ein": entity.ein,
        "filedDate": iso(entity.filed_date),
        "createdAt": iso(entity.created_at),
        "updatedAt": iso(entity.updated_at),
    }


def event_to_dict(event) -> dict:
    return {
        "id": event.id,
        "businessEntityId": event.business_entity_id,
        "eventType": event.event_type,
        "eventTitle": event.event_title,
        "eventDescription": event.event_description,
        "dueDate": iso(event.due_date),
        "isRecurring": event.is_recurring,
        "recurringInterval": event.recurring_interval,
        "status": event.status,
        "completedDate": iso(event.completed_date),
        "priority": event.priority,
        "category": event.category,
        "createdAt": iso(event.created_at),
        "updatedAt": iso(event.updated_at),
    }


def notification_to_dict(notification) -> dict:
    return {
        "id": notification.id,
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "actionUrl": notification.action_url,
        "isRead": notification.is_read,
        "priority": notification.priority,
        "category": notification.category,
        "relatedEntityId": notification.related_entity_id,
        "relatedEntityType": notification.related_entity_type,
        "metadata": notification.extra_data,
        "readAt": iso(notification.read_at),
        "expiresAt": iso(notification.expires_at),
        "createdAt": iso(notification.created_at),
    }


def custom_field_to_dict(field) -> dict:
    return {
        "id": field.id,
        "serviceId": field.service_id,
        "fieldName": field.field_name,
        "fieldLabel": field.field_label,
        "fieldType": field.field_type,
        "fieldCategory": field.field_category,
        "isRequired": field.is_required,
        "placeholder": field.placeholder,
        "helpText": field.help_text,
        "validationRules": field.validation_rules,
        "options": field.options,
        "displayOrder": field.display_order,
        "fieldGroup": field.field_group,
        "conditionalDisplay": field.conditional_display,
        "width": field.width,
        "isActive": field.is_active,
        "defaultValue": field.default_value,
    }


def addon_to_dict(addon) -> dict:
    return {
        "id": addon.id,
        "name": addon.name,
        "description": addon.description,
        "price": money(addon.price),
        "displayOrder": addon.display_order,
    }


def service_to_dict(service, include_addons: bool = False) -> dict:
    data = {
        "id": service.id,
        "name": service.name,
        "description": service.description,
        "category": service.category,
        "serviceType": service.service_type,
        "oneTimePrice": money(service.one_time_price) if service.one_time_price is not None else None,
        "recurringPrice": money(service.recurring_price) if service.recurring_price is not None else None,
        "recurringInterval": service.recurring_interval,
        "expeditedPrice": money(service.expedited_price) if service.expedited_price is not None else None,
        "isPopular": service.is_popular,
    }
    if include_addons:
        data["addons"] = [addon_to_dict(a) for a in service.addons if a.is_active]
    return data


def order_to_dict(order) -> dict:
    return {
        "id": order.id,
        "orderId": order.order_id,
        "userId": str(order.user_id) if order.user_id else None,
        "serviceId": order.service_id,
        "serviceName": order.service.name if order.service else None,
        "businessEntityId": order.business_entity_id,
        "customerEmail": order.customer_email,
        "customerName": order.customer_name,
        "customerPhone": order.customer_phone,
        "businessName": order.business_name,
        "customFieldData": order.custom_field_data,
        "selectedAddons": order.selected_addons,
        "baseAmount": money(order.base_amount),
        "addonsAmount": money(order.addons_amount),
        "isExpedited": order.is_expedited,
        "expeditedFee": money(order.expedited_fee),
        "totalAmount": money(order.total_amount),
        "currency": order.currency,
        "orderStatus": order.order_status,
        "paymentStatus": order.payment_status,
        "customerNotes": order.customer_notes,
        "createdAt": iso(order.created_at),
        "updatedAt": iso(order.updated_at),
    }


def folder_to_dict(folder) -> dict:
    return {
        "id": folder.id,
        "name": folder.name,
        "description": folder.description,
        "parentId": folder.parent_id,
        "serviceType": folder.service_type,
        "businessEntityId": folder.business_entity_id,
        "isSystemFolder": folder.is_system_folder,
        "color": folder.color,
        "sortOrder": folder.sort_order,
        "createdAt": iso(folder.created_at),
    }
