"""
Domain exceptions - Business-level errors.

Raised by the application services and translated into JSON error
responses by the route layer (see parafort.api_errors).
"""


class DomainError(Exception):
    """Base exception for all domain errors."""

    status_code = 400

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class ValidationError(DomainError):
    """Raised when request data fails validation."""

    status_code = 400

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)


class NotFoundError(DomainError):
    """Raised when an entity is not found (or not visible to the caller)."""

    status_code = 404

    def __init__(self, entity_type: str, identifier=None):
        self.entity_type = entity_type
        self.identifier = identifier
        message = f"{entity_type} not found"
        if identifier is not None:
            message = f"{entity_type} '{identifier}' not found"
        code = entity_type.upper().replace(" ", "_")
        super().__init__(message, f"{code}_NOT_FOUND")


class UnauthorizedError(DomainError):
    """Raised when the user doesn't have permission."""

    status_code = 403

    def __init__(self, message: str = "Access denied"):
        super().__init__(message, "UNAUTHORIZED")


class BusinessRuleViolationError(DomainError):
    """Raised when a business rule is violated."""

    status_code = 409

    def __init__(self, rule: str, message: str):
        self.rule = rule
        super().__init__(message, f"BUSINESS_RULE_{rule.upper()}")


# Specific domain errors

class UserNotFoundError(NotFoundError):
    def __init__(self, user_id=None):
        super().__init__("User", user_id)


class BusinessEntityNotFoundError(NotFoundError):
    def __init__(self, business_id=None):
        super().__init__("Business entity", business_id)


class ComplianceEventNotFoundError(NotFoundError):
    def __init__(self, event_id=None):
        super().__init__("Compliance event", event_id)


class ServiceNotFoundError(NotFoundError):
    def __init__(self, service_id=None):
        super().__init__("Service", service_id)


class CustomFieldNotFoundError(NotFoundError):
    def __init__(self, field_id=None):
        super().__init__("Custom field", field_id)


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id=None):
        super().__init__("Order", order_id)


class NotificationNotFoundError(NotFoundError):
    def __init__(self, notification_id=None):
        super().__init__("Notification", notification_id)


class FolderNotFoundError(NotFoundError):
    def __init__(self, folder_id=None):
        super().__init__("Folder", folder_id)


class InvalidStatusError(ValidationError):
    """Raised when a status value is not one of the allowed values."""

    def __init__(self, status, allowed):
        self.status = status
        self.allowed = list(allowed)
        message = f"Invalid status '{status}'. Allowed: {', '.join(self.allowed)}"
        super().__init__(message, "status")


class DuplicateEmailError(BusinessRuleViolationError):
    def __init__(self, email: str):
        self.email = email
        super().__init__("DUPLICATE_EMAIL", "An account with this email already exists")


class DuplicateFieldNameError(BusinessRuleViolationError):
    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__("DUPLICATE_FIELD", f"Field name '{field_name}' already exists for this service")


class SystemFolderError(BusinessRuleViolationError):
    def __init__(self, folder_id):
        self.folder_id = folder_id
        super().__init__("SYSTEM_FOLDER", "System folders cannot be deleted")


class CustomFieldValidationError(ValidationError):
    """Raised when submitted custom field data fails one or more field rules."""

    def __init__(self, errors: dict):
        self.errors = dict(errors)
        super().__init__("Custom field validation failed", "customFieldData")
