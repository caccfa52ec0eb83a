"""
Permission model for role-based access control.
"""
from sqlalchemy import String, Text, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from samudra.core.database.base import Base, TimestampMixin, AuditMixin, generate_ulid


PERMISSION_ACTIONS = ("CREATE", "READ", "UPDATE", "DELETE", "EXECUTE", "ALL")


class Permission(Base, TimestampMixin, AuditMixin):
    """
    Permission model defining an action on an ERP module.
    
    Examples:
    - module="EMPLOYEE", action="READ", code="EMPLOYEE_READ"
    - module="SHIPMENT", action="ALL", code="SHIPMENT_ALL"
    
    System permissions (is_system=True) keep their name and code forever and
    cannot be deactivated or deleted.
    """
    __tablename__ = "permissions"
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    
    # Identity, stored uppercased; the unique indexes are the real guard against duplicates
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    code: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    
    module: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    action: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_system: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    
    def __repr__(self) -> str:
        return f"<Permission(id={self.id}, code={self.code!r}, module={self.module}, action={self.action})>"
