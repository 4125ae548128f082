"""
Unit of Work pattern for managing database transactions.

Provides a single entry point for all repositories within a request,
ensuring consistent transaction management.
"""
from .user_repository import UserRepository
from .business_entity_repository import BusinessEntityRepository
from .compliance_repository import ComplianceRepository
from .service_repository import ServiceRepository
from .service_order_repository import ServiceOrderRepository
from .notification_repository import NotificationRepository
from .folder_repository import FolderRepository


class UnitOfWork:
    """
    Aggregates all repositories and manages the database session lifecycle.

    Usage:
        uow = UnitOfWork(session)
        business = uow.businesses.get_for_user(42, user.id)
        uow.compliance.add(event)
        uow.commit()
    """

    def __init__(self, session):
        self.session = session
        self.users = UserRepository(session)
        self.businesses = BusinessEntityRepository(session)
        self.compliance = ComplianceRepository(session)
        self.services = ServiceRepository(session)
        self.orders = ServiceOrderRepository(session)
        self.notifications = NotificationRepository(session)
        self.folders = FolderRepository(session)

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()

    def flush(self):
        self.session.flush()

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.rollback()
        self.close()
        return False
