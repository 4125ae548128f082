"""Tests for UnitOfWork."""
from parafort.models_db import User
from parafort.repositories import (
    BusinessEntityRepository, ComplianceRepository, FolderRepository, NotificationRepository,
    ServiceOrderRepository, ServiceRepository, UnitOfWork, UserRepository,
)


class TestUnitOfWork:

    def test_creates_all_repositories(self, db_session):
        uow = UnitOfWork(db_session)

        assert isinstance(uow.users, UserRepository)
        assert isinstance(uow.businesses, BusinessEntityRepository)
        assert isinstance(uow.compliance, ComplianceRepository)
        assert isinstance(uow.services, ServiceRepository)
        assert isinstance(uow.orders, ServiceOrderRepository)
        assert isinstance(uow.notifications, NotificationRepository)
        assert isinstance(uow.folders, FolderRepository)

    def test_commit(self, db_session):
        uow = UnitOfWork(db_session)
        uow.users.add(User(email='uow@example.com'))
        uow.commit()

        assert uow.users.get_by_email('UOW@example.com') is not None

    def test_rollback(self, db_session):
        uow = UnitOfWork(db_session)
        uow.users.add(User(email='rolled@example.com'))
        uow.rollback()

        assert uow.users.get_by_email('rolled@example.com') is None

    def test_context_manager_rolls_back_on_error(self, db_session):
        try:
            with UnitOfWork(db_session) as uow:
                uow.users.add(User(email='boom@example.com'))
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        assert UserRepository(db_session).get_by_email('boom@example.com') is None
