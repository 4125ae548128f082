from .unit_of_work import UnitOfWork
from .user_repository import UserRepository
from .business_entity_repository import BusinessEntityRepository
from .compliance_repository import ComplianceRepository
from .service_repository import ServiceRepository
from .service_order_repository import ServiceOrderRepository
from .notification_repository import NotificationRepository
from .folder_repository import FolderRepository
