"""
Persistence for roles and their ordered permission assignments.
"""
from typing import Any, Dict, List, Optional
from sqlalchemy import select, insert, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.errors import ServerError, ValidationError
from samudra.features.permissions.models import Permission
from samudra.features.roles.models import Role, role_permissions
from samudra.features.roles.schemas import RoleFilter
from samudra.utils import get_logger


log = get_logger(__name__)


class RoleRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_all(self, filters: Optional[RoleFilter] = None) -> List[Role]:
        stmt = select(Role)
        if filters is not None:
            for key, value in filters.model_dump(exclude_none=True).items():
                stmt = stmt.where(getattr(Role, key) == value)
        result = await self.db.execute(stmt.order_by(Role.name))
        return list(result.scalars().all())

    async def find_by_id(self, role_id: str) -> Optional[Role]:
        result = await self.db.execute(select(Role).where(Role.id == role_id))
        return result.scalars().first()

    async def find_by_name(self, name: str) -> Optional[Role]:
        result = await self.db.execute(select(Role).where(Role.name == name))
        return result.scalars().first()

    async def create(self, values: Dict[str, Any], permissions: List[Permission]) -> Role:
        role = Role(**values)
        self.db.add(role)
        await self._flush("Role with this name already exists")
        await self._insert_permissions(role.id, [p.id for p in permissions], start=0)
        return await self._reload(role.id)

    async def update(
        self,
        role: Role,
        values: Dict[str, Any],
        permissions: Optional[List[Permission]] = None,
    ) -> Role:
        """
        Apply field changes; a permission list, when given, replaces the current one.

        ``updated_at`` is always rewritten, since assignment changes only touch
        ``role_permissions`` and may leave every column of the role unchanged.
        """
        for key, value in values.items():
            setattr(role, key, value)
        role.updated_at = func.now()
        await self._flush("Role with this name already exists")
        if permissions is not None:
            await self.db.execute(delete(role_permissions).where(role_permissions.c.role_id == role.id))
            await self._insert_permissions(role.id, [p.id for p in permissions], start=0)
        return await self._reload(role.id)

    async def delete(self, role: Role) -> None:
        await self.db.execute(delete(role_permissions).where(role_permissions.c.role_id == role.id))
        await self.db.delete(role)
        await self.db.flush()

    async def add_permission(self, role: Role, permission_id: str) -> None:
        """Attach a permission after the role's current last one."""
        result = await self.db.execute(
            select(func.max(role_permissions.c.position)).where(role_permissions.c.role_id == role.id)
        )
        last = result.scalar()
        try:
            await self._insert_permissions(role.id, [permission_id], start=0 if last is None else last + 1)
        except IntegrityError:
            await self.db.rollback()
            raise ServerError("Role already has this permission")

    async def remove_permission(self, role: Role, permission_id: str) -> None:
        await self.db.execute(
            delete(role_permissions).where(
                role_permissions.c.role_id == role.id,
                role_permissions.c.permission_id == permission_id,
            )
        )
        await self.db.flush()

    async def get_permissions(self, role_id: str) -> List[Permission]:
        stmt = (
            select(Permission)
            .join(role_permissions, role_permissions.c.permission_id == Permission.id)
            .where(role_permissions.c.role_id == role_id)
            .order_by(role_permissions.c.position)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_roles_with_permission(self, permission_id: str) -> List[Role]:
        stmt = (
            select(Role)
            .join(role_permissions, role_permissions.c.role_id == Role.id)
            .where(role_permissions.c.permission_id == permission_id)
            .order_by(Role.name)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _insert_permissions(self, role_id: str, permission_ids: List[str], start: int) -> None:
        if not permission_ids:
            return
        await self.db.execute(
            insert(role_permissions),
            [
                {"role_id": role_id, "permission_id": permission_id, "position": start + offset}
                for offset, permission_id in enumerate(permission_ids)
            ],
        )

    async def _reload(self, role_id: str) -> Role:
        # populate_existing refreshes server-side timestamps and the permission list
        stmt = select(Role).where(Role.id == role_id).execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalars().one()

    async def _flush(self, conflict_message: str) -> None:
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            log.info("Role uniqueness violated: %s", e.orig)
            raise ValidationError(conflict_message)
