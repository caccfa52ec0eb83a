"""
Role management API routes.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request, status

from samudra.core import config
from samudra.core.rate_limit import limiter
from samudra.core.schemas import ApiResponse, MessageData, success
from samudra.features.permissions.schemas import PermissionResponse
from samudra.features.roles.dependencies import get_role_service
from samudra.features.roles.schemas import RoleCreate, RoleFilter, RoleResponse, RoleUpdate
from samudra.features.roles.service import RoleService
from samudra.features.users.dependencies import require_permissions
from samudra.features.users.schemas import CurrentUser


router = APIRouter()


@router.get("", response_model=ApiResponse[List[RoleResponse]])
async def list_roles(
    is_active: Optional[bool] = Query(None, alias="isActive"),
    is_system: Optional[bool] = Query(None, alias="isSystem"),
    service: RoleService = Depends(get_role_service),
    current_user: CurrentUser = Depends(require_permissions("ROLE_READ")),
):
    """List roles ordered by name, with optional filtering."""
    return success(await service.list_roles(RoleFilter(is_active=is_active, is_system=is_system)))


@router.post("", response_model=ApiResponse[RoleResponse], status_code=status.HTTP_201_CREATED)
@limiter.limit(config.WRITE_RATE_LIMIT)
async def create_role(
    request: Request,
    role: RoleCreate,
    service: RoleService = Depends(get_role_service),
    current_user: CurrentUser = Depends(require_permissions("ROLE_CREATE")),
):
    """Create a new role, optionally with an initial permission list."""
    return success(await service.create_role(role, current_user.id))


@router.get("/name/{name}", response_model=ApiResponse[RoleResponse])
async def get_role_by_name(
    name: str,
    service: RoleService = Depends(get_role_service),
    current_user: CurrentUser = Depends(require_permissions("ROLE_READ")),
):
    return success(await service.get_role_by_name(name))


@router.get("/{role_id}", response_model=ApiResponse[RoleResponse])
async def get_role(
    role_id: str,
    service: RoleService = Depends(get_role_service),
    current_user: CurrentUser = Depends(require_permissions("ROLE_READ")),
):
    """Get a specific role with its permissions."""
    return success(await service.get_role_by_id(role_id))


@router.put("/{role_id}", response_model=ApiResponse[RoleResponse])
async def update_role(
    role_id: str,
    role_update: RoleUpdate,
    service: RoleService = Depends(get_role_service),
    current_user: CurrentUser = Depends(require_permissions("ROLE_UPDATE")),
):
    """Update a role. System roles keep their name and active state."""
    return success(await service.update_role(role_id, role_update, current_user.id))


@router.delete("/{role_id}", response_model=ApiResponse[MessageData])
async def delete_role(
    role_id: str,
    service: RoleService = Depends(get_role_service),
    current_user: CurrentUser = Depends(require_permissions("ROLE_DELETE")),
):
    await service.delete_role(role_id)
    return success({"message": "Role deleted successfully"})


@router.get("/{role_id}/permissions", response_model=ApiResponse[List[PermissionResponse]])
async def get_role_permissions(
    role_id: str,
    service: RoleService = Depends(get_role_service),
    current_user: CurrentUser = Depends(require_permissions("ROLE_READ")),
):
    """List a role's permissions in assignment order."""
    return success(await service.get_role_permissions(role_id))


@router.put("/{role_id}/permissions/{permission_id}", response_model=ApiResponse[RoleResponse])
async def add_permission_to_role(
    role_id: str,
    permission_id: str,
    service: RoleService = Depends(get_role_service),
    current_user: CurrentUser = Depends(require_permissions("ROLE_UPDATE")),
):
    """Attach a permission to a role. Attaching one the role already holds fails."""
    return success(await service.add_permission_to_role(role_id, permission_id, current_user.id))


@router.delete("/{role_id}/permissions/{permission_id}", response_model=ApiResponse[RoleResponse])
async def remove_permission_from_role(
    role_id: str,
    permission_id: str,
    service: RoleService = Depends(get_role_service),
    current_user: CurrentUser = Depends(require_permissions("ROLE_UPDATE")),
):
    """Detach a permission from a role."""
    return success(await service.remove_permission_from_role(role_id, permission_id, current_user.id))
