"""
Pydantic schemas for role management.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import Field, ConfigDict, field_validator

from samudra.core.schemas import CamelModel
from samudra.features.permissions.schemas import PermissionSummary


def _normalize_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip().upper()
    if not v:
        raise ValueError("Role name must not be blank")
    return v


class RoleCreate(CamelModel):
    """Schema for creating a new role."""
    name: str = Field(..., min_length=1, max_length=50, description="Unique role name")
    description: str = Field(..., min_length=1, max_length=1000)
    permissions: Optional[List[str]] = Field(None, description="Permission ids, in order")
    is_active: bool = True
    is_system: bool = False

    @field_validator("name")
    @classmethod
    def uppercase_name(cls, v: str) -> str:
        return _normalize_name(v)


class RoleUpdate(CamelModel):
    """Schema for updating a role. A supplied permission list replaces the current one."""
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=1000)
    permissions: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def uppercase_name(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_name(v)


class RoleFilter(CamelModel):
    is_active: Optional[bool] = None
    is_system: Optional[bool] = None


class RoleResponse(CamelModel):
    """Schema for role response."""
    id: str
    name: str
    description: Optional[str] = None
    permissions: List[PermissionSummary] = []
    is_active: bool
    is_system: bool
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
