"""
Simple Dependency Injection container using Flask's g object.

No external DI framework needed - just factory functions that create
services with their dependencies, cached per-request in Flask g.
"""
from flask import g

from parafort.database import get_db
from parafort.repositories.unit_of_work import UnitOfWork


def get_uow() -> UnitOfWork:
    """Get or create UnitOfWork for the current request."""
    if 'uow' not in g:
        db = next(get_db())
        g.uow = UnitOfWork(db)
    return g.uow


def get_account_service():
    from parafort.application.account_service import AccountService
    return AccountService(get_uow())


def get_notification_service():
    from parafort.application.notification_service import NotificationService
    return NotificationService(get_uow())


def get_compliance_event_service():
    """ComplianceEventService wired with notifications for reminders."""
    from parafort.application.compliance_event_service import ComplianceEventService
    return ComplianceEventService(get_uow(), notification_service=get_notification_service())


def get_compliance_metrics_service():
    from parafort.application.compliance_metrics_service import ComplianceMetricsService
    return ComplianceMetricsService(get_uow())


def get_business_entity_service():
    """BusinessEntityService wired with event generation for filed businesses."""
    from parafort.application.business_entity_service import BusinessEntityService
    return BusinessEntityService(get_uow(), event_service=get_compliance_event_service())


def get_service_catalog_service():
    from parafort.application.service_catalog_service import ServiceCatalogService
    return ServiceCatalogService(get_uow())


def get_order_service():
    from parafort.application.order_service import OrderService
    return OrderService(
        get_uow(),
        catalog_service=get_service_catalog_service(),
        notification_service=get_notification_service(),
    )


def get_folder_service():
    from parafort.application.folder_service import FolderService
    return FolderService(get_uow())


def teardown_uow(exception=None):
    """
    Teardown handler for Flask app context.

    Register with: app.teardown_appcontext(teardown_uow)
    """
    uow = g.pop('uow', None)
    if uow:
        if exception:
            uow.rollback()
        uow.close()
