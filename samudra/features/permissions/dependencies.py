"""
Per-request construction of the permission service.
"""
from typing import Annotated
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.database.engine import get_db
from samudra.features.permissions.repository import PermissionRepository
from samudra.features.permissions.service import PermissionService
from samudra.features.roles.repository import RoleRepository


async def get_permission_service(db: Annotated[AsyncSession, Depends(get_db)]) -> PermissionService:
    return PermissionService(PermissionRepository(db), RoleRepository(db))
