"""
Permission management API routes.

Every response uses the ``{"status", "data"}`` envelope; service errors are
rendered by the application exception handlers.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request, status

from samudra.core import config
from samudra.core.rate_limit import limiter
from samudra.core.schemas import ApiResponse, ExistsData, MessageData, success
from samudra.features.permissions.dependencies import get_permission_service
from samudra.features.permissions.schemas import (
    PermissionCreate,
    PermissionFilter,
    PermissionResponse,
    PermissionUpdate,
)
from samudra.features.permissions.service import PermissionService
from samudra.features.roles.dependencies import get_role_service
from samudra.features.roles.schemas import RoleResponse
from samudra.features.roles.service import RoleService
from samudra.features.users.dependencies import require_permissions
from samudra.features.users.schemas import CurrentUser


router = APIRouter()


@router.get("", response_model=ApiResponse[List[PermissionResponse]])
async def list_permissions(
    is_active: Optional[bool] = Query(None, alias="isActive"),
    is_system: Optional[bool] = Query(None, alias="isSystem"),
    module: Optional[str] = None,
    action: Optional[str] = None,
    service: PermissionService = Depends(get_permission_service),
    current_user: CurrentUser = Depends(require_permissions("PERMISSION_READ")),
):
    """List permissions ordered by module and name, with optional filtering."""
    filters = PermissionFilter(is_active=is_active, is_system=is_system, module=module, action=action)
    return success(await service.list_permissions(filters))


@router.post("", response_model=ApiResponse[PermissionResponse], status_code=status.HTTP_201_CREATED)
@limiter.limit(config.WRITE_RATE_LIMIT)
async def create_permission(
    request: Request,
    permission: PermissionCreate,
    service: PermissionService = Depends(get_permission_service),
    current_user: CurrentUser = Depends(require_permissions("PERMISSION_CREATE")),
):
    """Create a new permission. The code defaults to MODULE_ACTION."""
    return success(await service.create_permission(permission, current_user.id))


@router.get("/code/{code}", response_model=ApiResponse[PermissionResponse])
async def get_permission_by_code(
    code: str,
    service: PermissionService = Depends(get_permission_service),
    current_user: CurrentUser = Depends(require_permissions("PERMISSION_READ")),
):
    """Get a permission by code (case-insensitive)."""
    return success(await service.get_permission_by_code(code))


@router.get("/module/{module}", response_model=ApiResponse[List[PermissionResponse]])
async def list_permissions_by_module(
    module: str,
    service: PermissionService = Depends(get_permission_service),
    current_user: CurrentUser = Depends(require_permissions("PERMISSION_READ")),
):
    return success(await service.list_permissions_by_module(module))


@router.get("/action/{action}", response_model=ApiResponse[List[PermissionResponse]])
async def list_permissions_by_action(
    action: str,
    service: PermissionService = Depends(get_permission_service),
    current_user: CurrentUser = Depends(require_permissions("PERMISSION_READ")),
):
    return success(await service.list_permissions_by_action(action))


@router.get("/{code}/exists", response_model=ApiResponse[ExistsData])
async def check_permission_code_exists(
    code: str,
    service: PermissionService = Depends(get_permission_service),
    current_user: CurrentUser = Depends(require_permissions("PERMISSION_READ")),
):
    """Check whether a permission code is taken."""
    return success({"exists": await service.permission_code_exists(code)})


@router.get("/{permission_id}/roles", response_model=ApiResponse[List[RoleResponse]])
async def list_roles_with_permission(
    permission_id: str,
    service: PermissionService = Depends(get_permission_service),
    role_service: RoleService = Depends(get_role_service),
    current_user: CurrentUser = Depends(require_permissions("PERMISSION_READ", "ROLE_READ")),
):
    """List the roles that currently hold a permission."""
    await service.get_permission_by_id(permission_id)
    return success(await role_service.get_roles_with_permission(permission_id))


@router.get("/{permission_id}", response_model=ApiResponse[PermissionResponse])
async def get_permission(
    permission_id: str,
    service: PermissionService = Depends(get_permission_service),
    current_user: CurrentUser = Depends(require_permissions("PERMISSION_READ")),
):
    return success(await service.get_permission_by_id(permission_id))


@router.put("/{permission_id}", response_model=ApiResponse[PermissionResponse])
async def update_permission(
    permission_id: str,
    permission_update: PermissionUpdate,
    service: PermissionService = Depends(get_permission_service),
    current_user: CurrentUser = Depends(require_permissions("PERMISSION_UPDATE")),
):
    """Update a permission. System permissions keep their name, code and active state."""
    return success(await service.update_permission(permission_id, permission_update, current_user.id))


@router.delete("/{permission_id}", response_model=ApiResponse[MessageData])
async def delete_permission(
    permission_id: str,
    service: PermissionService = Depends(get_permission_service),
    current_user: CurrentUser = Depends(require_permissions("PERMISSION_DELETE")),
):
    """Delete a permission that no role holds."""
    await service.delete_permission(permission_id)
    return success({"message": "Permission deleted successfully"})
