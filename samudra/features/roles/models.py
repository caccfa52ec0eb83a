"""
Role model and its ordered role-permission association.
"""
from datetime import datetime
from sqlalchemy import String, Text, Boolean, Integer, ForeignKey, Table, Column, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from samudra.core.database.base import Base, TimestampMixin, AuditMixin, generate_ulid
from samudra.features.permissions.models import Permission


# The composite primary key forbids holding the same permission twice;
# position keeps the order in which permissions were attached.
role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column("role_id", String(26), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", String(26), ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
    Column("position", Integer, nullable=False, default=0),
    Column("assigned_at", DateTime(timezone=True), nullable=False, default=datetime.now),
)


class Role(Base, TimestampMixin, AuditMixin):
    """
    Role model for grouping permissions.
    
    Examples: SUPER_ADMIN, BRANCH_MANAGER, VIEWER
    """
    __tablename__ = "roles"
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_system: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    
    # Association rows are written explicitly by RoleRepository
    permissions: Mapped[list[Permission]] = relationship(
        Permission,
        secondary=role_permissions,
        order_by=role_permissions.c.position,
        lazy="selectin",
        viewonly=True,
    )
    
    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name!r}, system={self.is_system})>"
