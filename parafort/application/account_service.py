"""Service for account registration and credential checks."""
import logging
import re
from datetime import datetime

from werkzeug.security import generate_password_hash, check_password_hash

from parafort.domain.exceptions import DuplicateEmailError, ValidationError
from parafort.domain.value_objects import Email
from parafort.models_db import User, UserRole

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def validate_password(password: str) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters", "password")
    if not re.search(r"\d", password):
        raise ValidationError("Password must contain at least one digit", "password")


class AccountService:
    def __init__(self, uow):
        self._uow = uow

    def register(self, email: str, password: str, first_name=None, last_name=None, phone=None) -> User:
        email = Email(email or "").value
        validate_password(password)

        if self._uow.users.get_by_email(email):
            raise DuplicateEmailError(email)

        user = User(
            email=email,
            password_hash=generate_password_hash(password),
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            role=UserRole.CLIENT.value,
            is_active=True,
        )
        self._uow.users.add(user)
        self._uow.commit()
        logger.info(f"👤 Registered user {user.id}")
        return user

    def authenticate(self, email: str, password: str):
        """Returns the user for valid credentials of an active account, else None."""
        if not email or not password:
            return None
        user = self._uow.users.get_by_email(email)
        if not user or not user.is_active or not user.password_hash:
            return None
        if not check_password_hash(user.password_hash, password):
            return None

        user.last_login_at = datetime.utcnow()
        self._uow.commit()
        return user
