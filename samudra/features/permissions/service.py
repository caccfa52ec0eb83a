"""
Business rules for permission management.
"""
from typing import List, Optional

from samudra.core.errors import ForbiddenError, NotFoundError, ValidationError
from samudra.features.permissions.models import Permission
from samudra.features.permissions.repository import PermissionRepository
from samudra.features.permissions.schemas import (
    PermissionCreate,
    PermissionFilter,
    PermissionUpdate,
)
from samudra.features.roles.repository import RoleRepository
from samudra.utils import get_logger


log = get_logger(__name__)


class PermissionService:
    """
    Validates and applies permission changes.

    Rules:
    - codes are unique and derived as MODULE_ACTION when omitted
    - system permissions keep their name and code and stay active
    - a permission held by any role cannot be deleted
    """

    def __init__(self, permission_repository: PermissionRepository, role_repository: RoleRepository):
        self.permissions = permission_repository
        self.roles = role_repository

    async def list_permissions(self, filters: Optional[PermissionFilter] = None) -> List[Permission]:
        return await self.permissions.find_all(filters)

    async def list_permissions_by_module(self, module: str) -> List[Permission]:
        return await self.permissions.find_by_module(module.strip().upper())

    async def list_permissions_by_action(self, action: str) -> List[Permission]:
        return await self.permissions.find_by_action(action.strip().upper())

    async def get_permission_by_id(self, permission_id: str) -> Permission:
        permission = await self.permissions.find_by_id(permission_id)
        if not permission:
            raise NotFoundError("Permission not found")
        return permission

    async def get_permission_by_code(self, code: str) -> Permission:
        permission = await self.permissions.find_by_code(code.strip().upper())
        if not permission:
            raise NotFoundError("Permission not found")
        return permission

    async def create_permission(self, data: PermissionCreate, user_id: str) -> Permission:
        values = data.model_dump(exclude_none=True)
        if not values.get("code"):
            values["code"] = self.generate_permission_code(values["module"], values["action"])

        if await self.permissions.find_by_code(values["code"]):
            raise ValidationError("Permission with this code already exists")

        values["created_by"] = user_id
        values["updated_by"] = user_id
        permission = await self.permissions.create(values)
        log.info("Created permission %s (%s) by user %s", permission.code, permission.id, user_id)
        return permission

    async def update_permission(self, permission_id: str, data: PermissionUpdate, user_id: str) -> Permission:
        permission = await self.get_permission_by_id(permission_id)
        values = data.model_dump(exclude_none=True)

        if permission.is_system and (
            values.get("name") or values.get("code") or values.get("is_active") is False
        ):
            raise ForbiddenError("Cannot modify name, code, or deactivate system permissions")

        code = values.get("code")
        if code and code != permission.code:
            existing = await self.permissions.find_by_code(code)
            if existing and existing.id != permission.id:
                raise ValidationError("Permission with this code already exists")

        values["updated_by"] = user_id
        permission = await self.permissions.update(permission, values)
        log.info("Updated permission %s fields=%s by user %s", permission.id, sorted(values), user_id)
        return permission

    async def delete_permission(self, permission_id: str) -> bool:
        permission = await self.get_permission_by_id(permission_id)

        if permission.is_system:
            raise ForbiddenError("Cannot delete system permissions")

        roles = await self.roles.get_roles_with_permission(permission_id)
        if roles:
            role_names = ", ".join(role.name for role in roles)
            raise ValidationError(f"Permission is used by the following roles: {role_names}")

        await self.permissions.delete(permission)
        log.info("Deleted permission %s (%s)", permission.code, permission_id)
        return True

    async def permission_code_exists(self, code: str) -> bool:
        return await self.permissions.code_exists(code.strip().upper())

    @staticmethod
    def generate_permission_code(module: str, action: str) -> str:
        return f"{module}_{action}".upper()
