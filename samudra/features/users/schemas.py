"""
Pydantic schemas for the authenticated caller.
"""
from typing import List, Optional
from pydantic import BaseModel, Field

SUPER_ADMIN_PERMISSION = "ALL"


class CurrentUser(BaseModel):
    """Identity carried by the bearer token."""
    id: str = Field(..., min_length=1)
    username: Optional[str] = None
    permissions: List[str] = []

    def has_permissions(self, codes: List[str]) -> bool:
        """True if the user holds every code, or the super admin code."""
        held = {code.upper() for code in self.permissions}
        if SUPER_ADMIN_PERMISSION in held:
            return True
        return all(code.upper() in held for code in codes)
