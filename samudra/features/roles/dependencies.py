"""
Per-request construction of the role service.
"""
from typing import Annotated
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.database.engine import get_db
from samudra.features.permissions.repository import PermissionRepository
from samudra.features.roles.repository import RoleRepository
from samudra.features.roles.service import RoleService


async def get_role_service(db: Annotated[AsyncSession, Depends(get_db)]) -> RoleService:
    return RoleService(RoleRepository(db), PermissionRepository(db))
