"""Service for compliance calendar items: CRUD, generation and scheduled jobs."""
import logging
from datetime import datetime, timedelta

from parafort.application.serializers import event_to_dict, parse_datetime, parse_int
from parafort.domain.compliance_templates import applicable_templates, calculate_due_dates
from parafort.domain.deadlines import days_until, dashboard_urgency, reminder_urgency
from parafort.domain.exceptions import (
    BusinessEntityNotFoundError, ComplianceEventNotFoundError, InvalidStatusError, ValidationError,
)
from parafort.models_db import ComplianceCalendar, CompliancePriority, ComplianceStatus

logger = logging.getLogger(__name__)

STATUSES = [s.value for s in ComplianceStatus]
PRIORITIES = [p.value for p in CompliancePriority]
REQUIRED_FIELDS = ('businessId', 'eventType', 'eventTitle', 'dueDate', 'category')
REMINDER_WINDOW_DAYS = 30
NEW_BUSINESS_WINDOW_DAYS = 7


class ComplianceEventService:
    """
    Owns every write to the compliance calendar.

    Reads and writes are scoped to businesses owned by the calling user;
    the scheduled jobs (reminders, overdue sweep, weekly generation) run
    across all users.
    """

    def __init__(self, uow, notification_service=None):
        self._uow = uow
        self._notifications = notification_service

    def _owned_business(self, user_id, business_id):
        business = self._uow.businesses.get_for_user(parse_int(business_id, 'businessId'), user_id)
        if not business:
            raise BusinessEntityNotFoundError(business_id)
        return business

    def _owned_event(self, user_id, event_id):
        event = self._uow.compliance.get_for_user(event_id, user_id)
        if not event:
            raise ComplianceEventNotFoundError(event_id)
        return event

    # --- Queries ---

    def list_business_events(self, user_id, business_id, status=None) -> list:
        business = self._owned_business(user_id, business_id)
        return [event_to_dict(e) for e in self._uow.compliance.list_for_business(business.id, status=status)]

    def upcoming(self, user_id, business_id=None, days=90, now=None) -> list:
        """Owned items due between the start of today and the end of day `days` ahead."""
        now = now or datetime.utcnow()
        days = parse_int(days, 'days')
        business_filter = self._owned_business(user_id, business_id).id if business_id not in (None, '', 'all') else None

        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=days + 1) - timedelta(microseconds=1)
        events = self._uow.compliance.list_due_between(user_id, start, end, business_id=business_filter)
        return [event_to_dict(e) for e in events]

    def dashboard_notifications(self, user_id, business_id=None, now=None) -> list:
        """Pending items due in the next 30 days, with days left and an urgency band."""
        now = now or datetime.utcnow()
        business_filter = self._owned_business(user_id, business_id).id if business_id not in (None, '', 'all') else None

        events = self._uow.compliance.list_due_between(
            user_id, now, now + timedelta(days=REMINDER_WINDOW_DAYS),
            business_id=business_filter, status=ComplianceStatus.PENDING.value,
        )
        result = []
        for event in events:
            days = days_until(event.due_date, now)
            data = event_to_dict(event)
            data['daysUntilDue'] = days
            data['urgency'] = dashboard_urgency(days)
            result.append(data)
        return result

    # --- Commands ---

    def create_event(self, user_id, data: dict) -> dict:
        data = data or {}
        missing = [f for f in REQUIRED_FIELDS if not data.get(f)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        business = self._owned_business(user_id, data['businessId'])

        priority = data.get('priority') or CompliancePriority.MEDIUM.value
        if priority not in PRIORITIES:
            raise ValidationError(f"priority must be one of: {', '.join(PRIORITIES)}", "priority")

        status = data.get('status') or ComplianceStatus.PENDING.value
        if status not in STATUSES:
            raise InvalidStatusError(status, STATUSES)

        now = datetime.utcnow()
        event = ComplianceCalendar(
            business_entity_id=business.id,
            event_type=data['eventType'],
            event_title=data['eventTitle'],
            event_description=data.get('eventDescription'),
            due_date=parse_datetime(data['dueDate'], 'dueDate'),
            is_recurring=bool(data.get('isRecurring', False)),
            recurring_interval=data.get('recurringInterval'),
            status=status,
            completed_date=now if status == ComplianceStatus.COMPLETED.value else None,
            priority=priority,
            category=data['category'],
            created_at=now,
            updated_at=now,
        )
        self._uow.compliance.add(event)
        self._uow.commit()
        logger.info(f"📅 Compliance event {event.id} created for business {business.id}")
        return event_to_dict(event)

    def update_event(self, user_id, event_id, data: dict) -> dict:
        """Only title, description, due date, priority and category are editable here."""
        event = self._owned_event(user_id, event_id)
        data = data or {}

        if 'eventTitle' in data:
            if not data['eventTitle']:
                raise ValidationError("eventTitle cannot be empty", "eventTitle")
            event.event_title = data['eventTitle']
        if 'eventDescription' in data:
            event.event_description = data['eventDescription']
        if 'dueDate' in data:
            event.due_date = parse_datetime(data['dueDate'], 'dueDate')
        if 'priority' in data:
            if data['priority'] not in PRIORITIES:
                raise ValidationError(f"priority must be one of: {', '.join(PRIORITIES)}", "priority")
            event.priority = data['priority']
        if 'category' in data:
            if not data['category']:
                raise ValidationError("category cannot be empty", "category")
            event.category = data['category']

        event.updated_at = datetime.utcnow()
        self._uow.commit()
        return event_to_dict(event)

    def update_status(self, user_id, event_id, status, now=None) -> dict:
        """Any known status may follow any other; completion stamps the completion date."""
        if status not in STATUSES:
            raise InvalidStatusError(status, STATUSES)

        event = self._owned_event(user_id, event_id)
        now = now or datetime.utcnow()
        event.status = status
        event.completed_date = now if status == ComplianceStatus.COMPLETED.value else None
        event.updated_at = now
        self._uow.commit()
        return event_to_dict(event)

    def delete_event(self, user_id, event_id) -> None:
        event = self._owned_event(user_id, event_id)
        self._uow.compliance.delete(event)
        self._uow.commit()

    # --- Generation ---

    def generate_for_business(self, business, now=None) -> list:
        """
        Stages calendar items for every template that applies to the business.

        The base date is the filing date, falling back to now. Nothing is
        committed here.
        """
        now = now or datetime.utcnow()
        base_date = business.filed_date or now
        events = []

        for template in applicable_templates(business.entity_type, business.state):
            for due_date in calculate_due_dates(template, base_date, now):
                events.append(ComplianceCalendar(
                    business_entity_id=business.id,
                    event_type=template.event_type,
                    event_title=template.title,
                    event_description=template.description,
                    due_date=due_date,
                    status=ComplianceStatus.PENDING.value,
                    priority=template.priority,
                    category=template.category,
                    is_recurring=template.is_recurring,
                    recurring_interval=template.recurring_interval,
                    created_at=now,
                    updated_at=now,
                ))

        if events:
            self._uow.compliance.add_all(events)
        logger.info(f"🗓️ Generated {len(events)} compliance events for business {business.id}")
        return events

    def generate_for_owned_business(self, user_id, business_id) -> list:
        business = self._owned_business(user_id, business_id)
        events = self.generate_for_business(business)
        self._uow.commit()
        return [event_to_dict(e) for e in events]

    # --- Scheduled jobs ---

    def send_reminders(self, now=None) -> dict:
        """
        Creates in-app reminders for pending items due in the next 30 days.

        Each item is notified at most once per urgency level.
        """
        if self._notifications is None:
            raise RuntimeError("send_reminders needs a notification service")

        now = now or datetime.utcnow()
        events = self._uow.compliance.list_pending_due_between(now, now + timedelta(days=REMINDER_WINDOW_DAYS))

        sent = skipped = 0
        for event in events:
            days = days_until(event.due_date, now)
            urgency = reminder_urgency(days, event.priority)
            user_id = event.business_entity.user_id
            if urgency is None or self._notifications.has_compliance_reminder(user_id, event.id, urgency):
                skipped += 1
                continue
            self._notifications.notify_compliance(event, days, urgency)
            sent += 1

        self._uow.commit()
        logger.info(f"🔔 Reminder check: {len(events)} upcoming, {sent} sent, {skipped} skipped")
        return {'checked': len(events), 'sent': sent, 'skipped': skipped}

    def sweep_overdue(self, now=None) -> int:
        now = now or datetime.utcnow()
        updated = self._uow.compliance.mark_overdue(now)
        self._uow.commit()
        logger.info(f"⏰ Overdue sweep flagged {updated} items")
        return updated

    def generate_for_new_businesses(self, now=None) -> dict:
        """Weekly job: businesses created in the last 7 days that still have no items."""
        now = now or datetime.utcnow()
        businesses = self._uow.businesses.list_created_since_without_events(
            now - timedelta(days=NEW_BUSINESS_WINDOW_DAYS)
        )
        generated = 0
        for business in businesses:
            generated += len(self.generate_for_business(business, now))
        self._uow.commit()
        return {'businesses': len(businesses), 'events': generated}
