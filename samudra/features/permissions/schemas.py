"""
Pydantic schemas for permission management.

Identity fields are normalized to uppercase on the way in, so lookups and
uniqueness checks are case-insensitive.
"""
from datetime import datetime
from typing import Optional
from pydantic import Field, ConfigDict, field_validator

from samudra.core.schemas import CamelModel
from samudra.features.permissions.models import PERMISSION_ACTIONS


def _normalize_identifier(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip().upper()
    if not v:
        raise ValueError("Value must not be blank")
    return v


def _normalize_action(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip().upper()
    if v not in PERMISSION_ACTIONS:
        raise ValueError(f"Action must be one of: {', '.join(PERMISSION_ACTIONS)}")
    return v


class PermissionCreate(CamelModel):
    """Schema for creating a new permission."""
    name: str = Field(..., min_length=1, max_length=100, description="Unique permission name")
    module: str = Field(..., min_length=1, max_length=50, description="ERP module (e.g. 'EMPLOYEE')")
    action: str = Field(..., description="One of CREATE, READ, UPDATE, DELETE, EXECUTE, ALL")
    code: Optional[str] = Field(None, max_length=100, description="Defaults to MODULE_ACTION")
    description: Optional[str] = Field(None, max_length=1000)
    is_active: bool = True
    is_system: bool = False

    @field_validator("name", "module", "code")
    @classmethod
    def uppercase_identifier(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_identifier(v)

    @field_validator("action")
    @classmethod
    def known_action(cls, v: str) -> str:
        return _normalize_action(v)


class PermissionUpdate(CamelModel):
    """Schema for updating a permission. Only supplied fields change."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    module: Optional[str] = Field(None, min_length=1, max_length=50)
    action: Optional[str] = None
    code: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    is_active: Optional[bool] = None

    @field_validator("name", "module", "code")
    @classmethod
    def uppercase_identifier(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_identifier(v)

    @field_validator("action")
    @classmethod
    def known_action(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_action(v)


class PermissionFilter(CamelModel):
    """Optional equality filters for listing permissions."""
    is_active: Optional[bool] = None
    is_system: Optional[bool] = None
    module: Optional[str] = None
    action: Optional[str] = None

    @field_validator("module", "action")
    @classmethod
    def uppercase(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else None


class PermissionResponse(CamelModel):
    """Schema for permission response."""
    id: str
    name: str
    code: str
    module: str
    action: str
    description: Optional[str] = None
    is_active: bool
    is_system: bool
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PermissionSummary(CamelModel):
    """Compact permission embedded in role responses."""
    id: str
    name: str
    code: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
