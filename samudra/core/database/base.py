"""
Declarative base and the column mixins shared by RBAC tables.
"""
from datetime import datetime
from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
import ulid


def generate_ulid() -> str:
    return str(ulid.new())


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    """Database-maintained ``created_at`` and ``updated_at``."""
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class AuditMixin:
    """
    Ids of the users who created and last changed a row.

    Users live in the authentication service, so these are plain strings
    rather than foreign keys.
    """
    created_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
