"""
Shared fixtures.

The app runs against an in-memory SQLite database; the schema is rebuilt
for every test. Requests close the shared scoped session on teardown, so
tests read ids into locals before calling the client.
"""
import os
import uuid
from datetime import datetime, timedelta
from decimal import Decimal

# Must be set before parafort reads its config
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['RATELIMIT_ENABLED'] = 'false'
os.environ['SECRET_KEY'] = 'test-secret-key'

import pytest
from werkzeug.security import generate_password_hash

from parafort import database
from parafort.app import app
from parafort.models_db import (
    Base, User, UserRole, BusinessEntity, ComplianceCalendar, Service, ServiceAddon,
    ServiceCustomField, Notification, Folder,
)
from parafort.repositories.unit_of_work import UnitOfWork

TEST_PASSWORD = 'password123'
NOW = datetime(2026, 6, 15, 12, 0, 0)


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=database.engine)
    yield
    database.db_session.remove()
    Base.metadata.drop_all(bind=database.engine)


@pytest.fixture
def db_session():
    """The thread-scoped session the app itself uses."""
    return database.db_session


@pytest.fixture
def uow(db_session):
    return UnitOfWork(db_session)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def client():
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False
    return app.test_client()


@pytest.fixture
def login_as(client):
    """login_as(user_id) puts the user in the Flask-Login session of `client`."""
    def _login(user_id):
        with client.session_transaction() as sess:
            sess['_user_id'] = str(user_id)
            sess['_fresh'] = True
        return client
    return _login


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

class UserFactory:
    @staticmethod
    def create(session, **kwargs):
        defaults = {
            'email': f'user-{uuid.uuid4().hex[:8]}@example.com',
            'password_hash': generate_password_hash(TEST_PASSWORD, method='pbkdf2:sha256:1000'),
            'first_name': 'Test',
            'last_name': 'User',
            'role': UserRole.CLIENT.value,
            'is_active': True,
        }
        defaults.update(kwargs)
        user = User(**defaults)
        session.add(user)
        session.commit()
        return user


class BusinessFactory:
    @staticmethod
    def create(session, user=None, **kwargs):
        defaults = {
            'name': f'Acme {uuid.uuid4().hex[:6]} LLC',
            'entity_type': 'LLC',
            'state': 'CA',
            'status': 'draft',
            'created_at': NOW - timedelta(days=60),
        }
        defaults.update(kwargs)
        if user is not None:
            defaults['user_id'] = user.id
        business = BusinessEntity(**defaults)
        session.add(business)
        session.commit()
        return business


class EventFactory:
    @staticmethod
    def create(session, business=None, **kwargs):
        defaults = {
            'event_type': 'annual_report',
            'event_title': 'Annual Report Filing',
            'due_date': NOW + timedelta(days=20),
            'status': 'pending',
            'priority': 'medium',
            'category': 'state_filing',
            'created_at': NOW - timedelta(days=5),
        }
        defaults.update(kwargs)
        if business is not None:
            defaults['business_entity_id'] = business.id
        event = ComplianceCalendar(**defaults)
        session.add(event)
        session.commit()
        return event


class ServiceFactory:
    @staticmethod
    def create(session, addons=(), fields=(), **kwargs):
        defaults = {
            'name': 'LLC Formation',
            'category': 'Formation',
            'service_type': 'one_time',
            'one_time_price': Decimal('199.00'),
            'expedited_price': Decimal('75.00'),
            'is_active': True,
        }
        defaults.update(kwargs)
        service = Service(**defaults)
        session.add(service)
        session.flush()
        for index, addon in enumerate(addons):
            session.add(ServiceAddon(service_id=service.id, display_order=index, **addon))
        for index, field in enumerate(fields):
            field.setdefault('display_order', index)
            session.add(ServiceCustomField(service_id=service.id, **field))
        session.commit()
        return service


class NotificationFactory:
    @staticmethod
    def create(session, user=None, **kwargs):
        defaults = {
            'type': 'system_alert',
            'category': 'system',
            'title': 'Heads up',
            'message': 'Something happened',
            'priority': 'normal',
            'is_read': False,
        }
        defaults.update(kwargs)
        if user is not None:
            defaults['user_id'] = user.id
        notification = Notification(**defaults)
        session.add(notification)
        session.commit()
        return notification


class FolderFactory:
    @staticmethod
    def create(session, user=None, **kwargs):
        defaults = {'name': 'Documents', 'is_system_folder': False}
        defaults.update(kwargs)
        if user is not None:
            defaults['user_id'] = user.id
        folder = Folder(**defaults)
        session.add(folder)
        session.commit()
        return folder


@pytest.fixture
def user_factory():
    return UserFactory


@pytest.fixture
def business_factory():
    return BusinessFactory


@pytest.fixture
def event_factory():
    return EventFactory


@pytest.fixture
def service_factory():
    return ServiceFactory


@pytest.fixture
def notification_factory():
    return NotificationFactory


@pytest.fixture
def folder_factory():
    return FolderFactory
