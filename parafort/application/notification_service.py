"""Service for in-app notifications."""
import logging
from datetime import datetime, timedelta
from typing import Optional

from parafort.application.serializers import notification_to_dict
from parafort.domain.deadlines import due_phrase
from parafort.domain.exceptions import NotificationNotFoundError, ValidationError
from parafort.models_db import Notification, NotificationPriority

logger = logging.getLogger(__name__)

PRIORITIES = [p.value for p in NotificationPriority]
READ_RETENTION_DAYS = 30

ORDER_MESSAGES = {
    'order_created': ('Order Received', 'Your order {order_id} for {service} has been received.', 'normal'),
    'order_completed': ('Order Completed', 'Your order {order_id} for {service} is complete.', 'high'),
    'order_failed': ('Order Problem', 'There was a problem with your order {order_id}. Our team will contact you.', 'urgent'),
}


class NotificationService:
    """
    Creates and reads per-user notifications.

    The create/notify helpers only stage rows in the session; the caller
    owns the commit so a notification is saved together with the change
    that triggered it.
    """

    def __init__(self, uow):
        self._uow = uow

    # --- Reads and user actions ---

    def list_for_user(self, user_id, limit=50, include_read=True, category=None, priority=None, now=None):
        now = now or datetime.utcnow()
        notifications = self._uow.notifications.list_for_user(
            user_id, now, limit=limit, include_read=include_read,
            category=category, priority=priority,
        )
        return [notification_to_dict(n) for n in notifications]

    def unread_count(self, user_id, now=None) -> int:
        return self._uow.notifications.count_unread(user_id, now or datetime.utcnow())

    def mark_read(self, user_id, notification_id) -> dict:
        notification = self._uow.notifications.get_for_user(notification_id, user_id)
        if not notification:
            raise NotificationNotFoundError(notification_id)
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = datetime.utcnow()
            self._uow.commit()
        return notification_to_dict(notification)

    def mark_all_read(self, user_id) -> int:
        updated = self._uow.notifications.mark_all_read(user_id, datetime.utcnow())
        self._uow.commit()
        return updated

    # --- Creation helpers ---

    def create(
        self,
        user_id,
        type: str,
        category: str,
        title: str,
        message: str,
        priority: str = 'normal',
        action_url: Optional[str] = None,
        related_entity_type: Optional[str] = None,
        related_entity_id=None,
        metadata: Optional[dict] = None,
        expires_at: Optional[datetime] = None,
    ) -> Notification:
        if priority not in PRIORITIES:
            raise ValidationError(f"priority must be one of: {', '.join(PRIORITIES)}", "priority")

        notification = Notification(
            user_id=user_id,
            type=type,
            category=category,
            title=title,
            message=message,
            priority=priority,
            action_url=action_url,
            related_entity_type=related_entity_type,
            related_entity_id=str(related_entity_id) if related_entity_id is not None else None,
            extra_data=metadata,
            expires_at=expires_at,
            delivered_at=datetime.utcnow(),
        )
        return self._uow.notifications.add(notification)

    def notify_order(self, order, kind: str) -> Optional[Notification]:
        """order_created | order_completed | order_failed. Guest orders get nothing."""
        if kind not in ORDER_MESSAGES:
            raise ValueError(f"Unknown order notification: {kind}")
        if not order.user_id:
            return None

        title, template, priority = ORDER_MESSAGES[kind]
        service_name = order.service.name if order.service else 'your service'
        return self.create(
            order.user_id,
            type=kind,
            category='orders',
            title=title,
            message=template.format(order_id=order.order_id, service=service_name),
            priority=priority,
            action_url=f'/service-orders/{order.order_id}',
            related_entity_type='service_order',
            related_entity_id=order.order_id,
            metadata={'orderStatus': order.order_status, 'totalAmount': str(order.total_amount)},
        )

    def has_compliance_reminder(self, user_id, event_id, urgency: str) -> bool:
        existing = self._uow.notifications.list_for_related(user_id, 'compliance_event', str(event_id))
        return any((n.extra_data or {}).get('urgency') == urgency for n in existing)

    def notify_compliance(self, event, days_until_due: int, urgency: str) -> Optional[Notification]:
        business = event.business_entity
        if not business or not business.user_id:
            return None

        description = event.event_description or event.event_title
        priority = 'high' if urgency == 'urgent' else _notification_priority(event.priority)
        return self.create(
            business.user_id,
            type='compliance_reminder',
            category='compliance',
            title=f'Compliance Due: {event.event_title}',
            message=f'{business.name}: {description}. Due {due_phrase(days_until_due)}.',
            priority=priority,
            action_url='/compliance-dashboard',
            related_entity_type='compliance_event',
            related_entity_id=event.id,
            metadata={'urgency': urgency, 'daysUntilDue': days_until_due},
        )

    def notify_system(self, user_id, title: str, message: str, priority: str = 'normal',
                      action_url: Optional[str] = None, expires_at: Optional[datetime] = None) -> Notification:
        return self.create(
            user_id,
            type='system_alert',
            category='system',
            title=title,
            message=message,
            priority=priority,
            action_url=action_url,
            expires_at=expires_at,
        )

    def broadcast(self, title: str, message: str, priority: str = 'normal',
                  action_url: Optional[str] = None, expires_in_days: Optional[int] = None) -> int:
        """System notification to every active user."""
        if not title or not message:
            raise ValidationError("title and message are required")

        expires_at = None
        if expires_in_days:
            expires_at = datetime.utcnow() + timedelta(days=int(expires_in_days))

        users = self._uow.users.get_active()
        for user in users:
            self.notify_system(user.id, title, message, priority=priority,
                               action_url=action_url, expires_at=expires_at)
        self._uow.commit()
        logger.info(f"📣 Broadcast '{title}' sent to {len(users)} users")
        return len(users)

    # --- Maintenance ---

    def cleanup(self, now: datetime = None) -> dict:
        """Deletes expired notifications and read ones older than the retention window."""
        now = now or datetime.utcnow()
        expired = self._uow.notifications.delete_expired(now)
        old_read = self._uow.notifications.delete_read_before(now - timedelta(days=READ_RETENTION_DAYS))
        self._uow.commit()
        logger.info(f"🧹 Notification cleanup: {expired} expired, {old_read} old read")
        return {'expired': expired, 'oldRead': old_read}


def _notification_priority(event_priority: Optional[str]) -> str:
    """Compliance priorities use 'medium' where notifications use 'normal'."""
    if event_priority in PRIORITIES:
        return event_priority
    return 'normal'
