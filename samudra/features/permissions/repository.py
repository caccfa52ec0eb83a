"""
Persistence for permissions.

Repositories only read and write rows; validation rules live in the services.
Values are expected to be normalized already (uppercased identity fields).
"""
from typing import Any, Dict, List, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.errors import ValidationError
from samudra.features.permissions.models import Permission
from samudra.features.permissions.schemas import PermissionFilter
from samudra.utils import get_logger


log = get_logger(__name__)


class PermissionRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_all(self, filters: Optional[PermissionFilter] = None) -> List[Permission]:
        """Permissions matching every supplied filter, ordered by module then name."""
        stmt = select(Permission)
        if filters is not None:
            for key, value in filters.model_dump(exclude_none=True).items():
                stmt = stmt.where(getattr(Permission, key) == value)
        stmt = stmt.order_by(Permission.module, Permission.name)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def find_by_id(self, permission_id: str) -> Optional[Permission]:
        result = await self.db.execute(select(Permission).where(Permission.id == permission_id))
        return result.scalars().first()

    async def find_by_ids(self, permission_ids: List[str]) -> List[Permission]:
        """Existing permissions among the ids, in the order requested, without duplicates."""
        if not permission_ids:
            return []
        result = await self.db.execute(select(Permission).where(Permission.id.in_(permission_ids)))
        by_id = {permission.id: permission for permission in result.scalars().all()}
        ordered: List[Permission] = []
        for permission_id in dict.fromkeys(permission_ids):
            if permission_id in by_id:
                ordered.append(by_id[permission_id])
        return ordered

    async def find_by_code(self, code: str) -> Optional[Permission]:
        result = await self.db.execute(select(Permission).where(Permission.code == code))
        return result.scalars().first()

    async def find_by_module(self, module: str) -> List[Permission]:
        stmt = select(Permission).where(Permission.module == module).order_by(Permission.name)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def find_by_action(self, action: str) -> List[Permission]:
        stmt = (
            select(Permission)
            .where(Permission.action == action)
            .order_by(Permission.module, Permission.name)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def code_exists(self, code: str) -> bool:
        return await self.find_by_code(code) is not None

    async def create(self, values: Dict[str, Any]) -> Permission:
        permission = Permission(**values)
        self.db.add(permission)
        await self._flush()
        await self.db.refresh(permission)
        return permission

    async def update(self, permission: Permission, values: Dict[str, Any]) -> Permission:
        for key, value in values.items():
            setattr(permission, key, value)
        await self._flush()
        await self.db.refresh(permission)
        return permission

    async def delete(self, permission: Permission) -> None:
        await self.db.delete(permission)
        await self.db.flush()

    async def _flush(self) -> None:
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            log.info("Permission uniqueness violated: %s", e.orig)
            raise ValidationError("Permission with this name or code already exists")
