"""Repository for Folder entities."""
from typing import Optional, List
import uuid

from parafort.models_db import Folder


class FolderRepository:
    def __init__(self, session):
        self._session = session

    def get_for_user(self, id: int, user_id: uuid.UUID) -> Optional[Folder]:
        return self._session.query(Folder).filter(
            Folder.id == id,
            Folder.user_id == user_id,
        ).first()

    def list_for_user(self, user_id: uuid.UUID, business_id: int = None) -> List[Folder]:
        query = self._session.query(Folder).filter(Folder.user_id == user_id)
        if business_id is not None:
            query = query.filter(Folder.business_entity_id == business_id)
        return query.order_by(Folder.sort_order, Folder.name).all()

    def has_children(self, folder_id: int) -> bool:
        return self._session.query(Folder.id).filter(Folder.parent_id == folder_id).first() is not None

    def add(self, folder: Folder) -> Folder:
        self._session.add(folder)
        return folder

    def delete(self, folder: Folder) -> None:
        self._session.delete(folder)
