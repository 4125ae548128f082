from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, List
import uuid

from flask_login import UserMixin
from sqlalchemy import (
    String, Boolean, ForeignKey, Integer, Numeric, Text, TIMESTAMP, JSON, Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


# 1. Declarative base
class Base(DeclarativeBase):
    pass


# 2. Enumerations (stored as plain strings, compared by equality)
class UserRole(str, Enum):
    CLIENT = "client"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class BusinessStatus(str, Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FILED = "filed"


class ComplianceStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"
    DISMISSED = "dismissed"


class CompliancePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class NotificationPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


# 3. Tables
class User(UserMixin, Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    password_hash: Mapped[Optional[str]] = mapped_column(String)
    first_name: Mapped[Optional[str]] = mapped_column(String)
    last_name: Mapped[Optional[str]] = mapped_column(String)
    phone: Mapped[Optional[str]] = mapped_column(String(20))
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.CLIENT.value)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP, default=datetime.utcnow, onupdate=datetime.utcnow)

    business_entities: Mapped[List["BusinessEntity"]] = relationship(back_populates="user")
    notifications: Mapped[List["Notification"]] = relationship(back_populates="user", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role in (UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value)

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p) or self.email


class BusinessEntity(Base):
    __tablename__ = "business_entities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Nullable for anonymous formation orders
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)

    name: Mapped[Optional[str]] = mapped_column(String)
    entity_type: Mapped[Optional[str]] = mapped_column(String)  # LLC, Corporation, ...
    state: Mapped[Optional[str]] = mapped_column(String(2))
    status: Mapped[str] = mapped_column(String, nullable=False, default=BusinessStatus.DRAFT.value)
    business_purpose: Mapped[Optional[str]] = mapped_column(Text)
    contact_email: Mapped[Optional[str]] = mapped_column(String)
    contact_phone: Mapped[Optional[str]] = mapped_column(String)
    ein: Mapped[Optional[str]] = mapped_column(String)
    filed_date: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP, default=datetime.utcnow, onupdate=datetime.utcnow)

    user: Mapped[Optional["User"]] = relationship(back_populates="business_entities")
    compliance_items: Mapped[List["ComplianceCalendar"]] = relationship(
        back_populates="business_entity", cascade="all, delete-orphan"
    )


class ComplianceCalendar(Base):
    __tablename__ = "compliance_calendar"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    business_entity_id: Mapped[int] = mapped_column(ForeignKey("business_entities.id"), nullable=False, index=True)

    # Event details
    event_type: Mapped[str] = mapped_column(String, nullable=False)  # boir_filing, annual_report, ...
    event_title: Mapped[str] = mapped_column(String, nullable=False)
    event_description: Mapped[Optional[str]] = mapped_column(Text)

    # Timing
    due_date: Mapped[datetime] = mapped_column(TIMESTAMP, nullable=False)
    is_recurring: Mapped[bool] = mapped_column(Boolean, default=False)
    recurring_interval: Mapped[Optional[str]] = mapped_column(String)  # yearly, quarterly, biennial

    # Status (free-form string, no enforced transitions)
    status: Mapped[str] = mapped_column(String, nullable=False, default=ComplianceStatus.PENDING.value, index=True)
    completed_date: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP)

    related_record_type: Mapped[Optional[str]] = mapped_column(String)
    related_record_id: Mapped[Optional[int]] = mapped_column(Integer)

    priority: Mapped[str] = mapped_column(String, nullable=False, default=CompliancePriority.MEDIUM.value)
    category: Mapped[str] = mapped_column(String, nullable=False)  # tax, compliance, state_filing, ...

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP, default=datetime.utcnow, onupdate=datetime.utcnow)

    business_entity: Mapped["BusinessEntity"] = relationship(back_populates="compliance_items")


class Service(Base):
    __tablename__ = "services"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    category: Mapped[Optional[str]] = mapped_column(String)  # Formation, Compliance, Tax, ...
    service_type: Mapped[str] = mapped_column(String, nullable=False, default="one_time")
    one_time_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))
    recurring_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))
    recurring_interval: Mapped[Optional[str]] = mapped_column(String)
    expedited_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_popular: Mapped[bool] = mapped_column(Boolean, default=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP, default=datetime.utcnow)

    custom_fields: Mapped[List["ServiceCustomField"]] = relationship(
        back_populates="service", cascade="all, delete-orphan"
    )
    addons: Mapped[List["ServiceAddon"]] = relationship(back_populates="service", cascade="all, delete-orphan")


class ServiceCustomField(Base):
    __tablename__ = "service_custom_fields"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    service_id: Mapped[int] = mapped_column(ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)

    field_name: Mapped[str] = mapped_column(String, nullable=False)  # snake_case
    field_label: Mapped[str] = mapped_column(String, nullable=False)
    field_type: Mapped[str] = mapped_column(String, nullable=False)
    field_category: Mapped[Optional[str]] = mapped_column(String, default="service_specific")

    is_required: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    placeholder: Mapped[Optional[str]] = mapped_column(String)
    help_text: Mapped[Optional[str]] = mapped_column(Text)
    validation_rules: Mapped[Optional[dict]] = mapped_column(JSONType)  # minLength, maxLength, pattern, min, max
    options: Mapped[Optional[list]] = mapped_column(JSONType)  # select/radio choices

    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    field_group: Mapped[Optional[str]] = mapped_column(String)
    conditional_display: Mapped[Optional[dict]] = mapped_column(JSONType)
    width: Mapped[Optional[str]] = mapped_column(String, default="full")

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    default_value: Mapped[Optional[str]] = mapped_column(String)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP, default=datetime.utcnow, onupdate=datetime.utcnow)

    service: Mapped["Service"] = relationship(back_populates="custom_fields")


class ServiceAddon(Base):
    __tablename__ = "service_addons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    service_id: Mapped[int] = mapped_column(ForeignKey("services.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    service: Mapped["Service"] = relationship(back_populates="addons")


class ServiceOrder(Base):
    __tablename__ = "service_orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[str] = mapped_column(String, unique=True, nullable=False)  # PS-XXXXXXXXX
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)  # guest checkout
    service_id: Mapped[int] = mapped_column(ForeignKey("services.id"), nullable=False)
    business_entity_id: Mapped[Optional[int]] = mapped_column(ForeignKey("business_entities.id"), nullable=True)

    # Customer
    customer_email: Mapped[str] = mapped_column(String, nullable=False)
    customer_name: Mapped[str] = mapped_column(String, nullable=False)
    customer_phone: Mapped[Optional[str]] = mapped_column(String)
    business_name: Mapped[Optional[str]] = mapped_column(String)

    custom_field_data: Mapped[Optional[dict]] = mapped_column(JSONType)
    selected_addons: Mapped[Optional[list]] = mapped_column(JSONType)

    # Pricing
    base_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    addons_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0.00"))
    is_expedited: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    expedited_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0.00"))
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String, default="USD", nullable=False)

    order_status: Mapped[str] = mapped_column(String, default=OrderStatus.PENDING.value, nullable=False)
    payment_status: Mapped[str] = mapped_column(String, default=PaymentStatus.PENDING.value, nullable=False)

    order_notes: Mapped[Optional[str]] = mapped_column(Text)
    customer_notes: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP, default=datetime.utcnow, onupdate=datetime.utcnow)

    service: Mapped["Service"] = relationship()
    business_entity: Mapped[Optional["BusinessEntity"]] = relationship()


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    type: Mapped[str] = mapped_column(String, nullable=False)  # order_update, compliance_reminder, system_alert
    title: Mapped[str] = mapped_column(String, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    action_url: Mapped[Optional[str]] = mapped_column(String)

    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    priority: Mapped[str] = mapped_column(String, default=NotificationPriority.NORMAL.value, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)  # orders, compliance, payments, system

    related_entity_id: Mapped[Optional[str]] = mapped_column(String)
    related_entity_type: Mapped[Optional[str]] = mapped_column(String)
    # "metadata" is reserved on declarative classes
    extra_data: Mapped[Optional[dict]] = mapped_column("metadata", JSONType)

    delivered_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP)
    read_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP)
    expires_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP, default=datetime.utcnow, onupdate=datetime.utcnow)

    user: Mapped["User"] = relationship(back_populates="notifications")


class Folder(Base):
    __tablename__ = "folders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    parent_id: Mapped[Optional[int]] = mapped_column(ForeignKey("folders.id"), nullable=True)
    service_type: Mapped[Optional[str]] = mapped_column(String)  # business_formation, boir_filing, ...
    business_entity_id: Mapped[Optional[int]] = mapped_column(ForeignKey("business_entities.id"), nullable=True)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)
    is_system_folder: Mapped[bool] = mapped_column(Boolean, default=False)
    color: Mapped[str] = mapped_column(String, default="#3b82f6")
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP, default=datetime.utcnow, onupdate=datetime.utcnow)

    parent: Mapped[Optional["Folder"]] = relationship(remote_side="Folder.id")
