"""Repository for User entities."""
from typing import Optional, List
import uuid

from parafort.models_db import User


class UserRepository:
    def __init__(self, session):
        self._session = session

    def get_by_id(self, id: uuid.UUID) -> Optional[User]:
        return self._session.get(User, id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self._session.query(User).filter_by(email=email.strip().lower()).first()

    def get_active(self) -> List[User]:
        return self._session.query(User).filter(User.is_active == True).all()  # noqa: E712

    def add(self, user: User) -> User:
        self._session.add(user)
        return user
