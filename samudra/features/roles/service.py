"""
Business rules for role management and permission assignment.
"""
from typing import List, Optional

from samudra.core.errors import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    ServerError,
    ValidationError,
)
from samudra.features.permissions.models import Permission
from samudra.features.permissions.repository import PermissionRepository
from samudra.features.roles.models import Role
from samudra.features.roles.repository import RoleRepository
from samudra.features.roles.schemas import RoleCreate, RoleFilter, RoleUpdate
from samudra.utils import get_logger


log = get_logger(__name__)


class RoleService:
    def __init__(self, role_repository: RoleRepository, permission_repository: PermissionRepository):
        self.roles = role_repository
        self.permissions = permission_repository

    async def list_roles(self, filters: Optional[RoleFilter] = None) -> List[Role]:
        return await self.roles.find_all(filters)

    async def get_role_by_id(self, role_id: str) -> Role:
        role = await self.roles.find_by_id(role_id)
        if not role:
            raise NotFoundError("Role not found")
        return role

    async def get_role_by_name(self, name: str) -> Role:
        role = await self.roles.find_by_name(name.strip().upper())
        if not role:
            raise NotFoundError("Role not found")
        return role

    async def create_role(self, data: RoleCreate, user_id: str) -> Role:
        if await self.roles.find_by_name(data.name):
            raise ValidationError("Role with this name already exists")

        permissions = await self._resolve_permissions(data.permissions or [])

        values = data.model_dump(exclude={"permissions"}, exclude_none=True)
        values["created_by"] = user_id
        values["updated_by"] = user_id
        role = await self.roles.create(values, permissions)
        log.info("Created role %s (%s) with %d permissions by user %s", role.name, role.id, len(permissions), user_id)
        return role

    async def update_role(self, role_id: str, data: RoleUpdate, user_id: str) -> Role:
        role = await self.get_role_by_id(role_id)
        values = data.model_dump(exclude={"permissions"}, exclude_none=True)

        if role.is_system and (values.get("name") or values.get("is_active") is False):
            raise ForbiddenError("Cannot modify name or deactivate system roles")

        name = values.get("name")
        if name and name != role.name:
            existing = await self.roles.find_by_name(name)
            if existing and existing.id != role.id:
                raise ValidationError("Role with this name already exists")

        permissions = None
        if data.permissions is not None:
            permissions = await self._resolve_permissions(data.permissions)

        values["updated_by"] = user_id
        role = await self.roles.update(role, values, permissions)
        log.info("Updated role %s fields=%s by user %s", role.id, sorted(values), user_id)
        return role

    async def delete_role(self, role_id: str) -> bool:
        role = await self.get_role_by_id(role_id)

        if role.is_system:
            raise ForbiddenError("Cannot delete system roles")

        await self.roles.delete(role)
        log.info("Deleted role %s (%s)", role.name, role_id)
        return True

    async def add_permission_to_role(self, role_id: str, permission_id: str, user_id: str) -> Role:
        """
        Attach a permission to a role.

        Attaching a permission the role already holds is an error, not a no-op.
        """
        role = await self.get_role_by_id(role_id)

        permission = await self.permissions.find_by_id(permission_id)
        if not permission:
            raise NotFoundError("Permission not found")

        if any(p.id == permission.id for p in role.permissions):
            raise ServerError("Role already has this permission")

        await self.roles.add_permission(role, permission.id)
        role = await self.roles.update(role, {"updated_by": user_id})
        log.info("Attached permission %s to role %s by user %s", permission.code, role.name, user_id)
        return role

    async def remove_permission_from_role(self, role_id: str, permission_id: str, user_id: str) -> Role:
        role = await self.get_role_by_id(role_id)

        if not any(p.id == permission_id for p in role.permissions):
            raise BadRequestError("Role does not have this permission")

        await self.roles.remove_permission(role, permission_id)
        role = await self.roles.update(role, {"updated_by": user_id})
        log.info("Detached permission %s from role %s by user %s", permission_id, role.name, user_id)
        return role

    async def get_role_permissions(self, role_id: str) -> List[Permission]:
        await self.get_role_by_id(role_id)
        return await self.roles.get_permissions(role_id)

    async def get_roles_with_permission(self, permission_id: str) -> List[Role]:
        return await self.roles.get_roles_with_permission(permission_id)

    async def _resolve_permissions(self, permission_ids: List[str]) -> List[Permission]:
        """Load permissions by id; any unknown or repeated id invalidates the whole list."""
        if not permission_ids:
            return []
        permissions = await self.permissions.find_by_ids(permission_ids)
        if len(permissions) != len(permission_ids):
            raise ValidationError("One or more permissions are invalid")
        return permissions
