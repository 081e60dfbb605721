"""
Reusable mixins for the SQLAlchemy models.

TenantScopedMixin is the marker every hospital-owned entity carries: the
session-level tenant filter (database.session) targets it, and the
TenantScopedService base builds its queries on its tenant_id column.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, validates


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class TimestampMixin:
    """
    created_at / updated_at columns.

    Usage:
        class MyModel(TimestampMixin, Base):
            __tablename__ = "my_table"
            id: Mapped[int] = mapped_column(primary_key=True)
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        doc="Creation timestamp",
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        default=None,
        onupdate=utcnow,
        doc="Last modification timestamp",
    )


class TenantScopedMixin:
    """
    Adds the owning tenant to a model.

    tenant_id is assigned once, at creation, by the service layer. Any later
    attempt to move the row to another tenant raises ValueError.
    """

    tenant_id: Mapped[int] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Owning tenant (hospital)",
    )

    @validates("tenant_id")
    def _validate_tenant_id(self, key, value):
        current = self.__dict__.get("tenant_id")
        if current is not None and value != current:
            raise ValueError(
                f"{type(self).__name__}.tenant_id is immutable (was {current}, got {value})"
            )
        return value


class AuditMixin:
    """Tracks which user created the row."""

    created_by: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        doc="User that created the record",
    )
