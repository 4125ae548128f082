"""Service for user document folders."""
from parafort.application.serializers import folder_to_dict, parse_int
from parafort.domain.exceptions import (
    BusinessEntityNotFoundError, FolderNotFoundError, SystemFolderError, ValidationError,
)
from parafort.models_db import Folder

DEFAULT_COLOR = '#3b82f6'


class FolderService:
    def __init__(self, uow):
        self._uow = uow

    def create(self, user_id, data: dict) -> dict:
        data = data or {}
        name = (data.get('name') or '').strip()
        if not name:
            raise ValidationError("name is required", "name")

        parent_id = data.get('parentId')
        if parent_id is not None:
            parent_id = parse_int(parent_id, 'parentId')
            if not self._uow.folders.get_for_user(parent_id, user_id):
                raise FolderNotFoundError(parent_id)

        business_id = data.get('businessEntityId')
        if business_id is not None:
            business_id = parse_int(business_id, 'businessEntityId')
            if not self._uow.businesses.get_for_user(business_id, user_id):
                raise BusinessEntityNotFoundError(business_id)

        folder = Folder(
            name=name,
            description=data.get('description'),
            parent_id=parent_id,
            business_entity_id=business_id,
            service_type=data.get('serviceType'),
            user_id=user_id,
            color=data.get('color') or DEFAULT_COLOR,
            sort_order=int(data.get('sortOrder') or 0),
            is_system_folder=False,
        )
        self._uow.folders.add(folder)
        self._uow.commit()
        return folder_to_dict(folder)

    def list_for_user(self, user_id, business_id=None) -> list:
        if business_id is not None:
            business_id = parse_int(business_id, 'businessId')
        return [folder_to_dict(f) for f in self._uow.folders.list_for_user(user_id, business_id)]

    def delete(self, user_id, folder_id) -> None:
        folder = self._uow.folders.get_for_user(parse_int(folder_id, 'folderId'), user_id)
        if not folder:
            raise FolderNotFoundError(folder_id)
        if folder.is_system_folder:
            raise SystemFolderError(folder.id)
        if self._uow.folders.has_children(folder.id):
            raise ValidationError("Folder is not empty", "folderId")
        self._uow.folders.delete(folder)
        self._uow.commit()
