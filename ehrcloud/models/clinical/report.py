"""Report model - medical or operational documents written by the care team."""

from typing import Any, Dict, Optional

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ehrcloud.database.base_class import Base
from ehrcloud.models.enums import ReportType
from ehrcloud.models.mixins import AuditMixin, TenantScopedMixin, TimestampMixin
from ehrcloud.models.types import JSONBCompatible, enum_column


class Report(TenantScopedMixin, TimestampMixin, AuditMixin, Base):
    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(primary_key=True)
    patient_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("patients.id", ondelete="CASCADE"), index=True
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    report_type: Mapped[ReportType] = mapped_column(
        enum_column(ReportType, "report_type_enum"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    data: Mapped[Dict[str, Any]] = mapped_column(JSONBCompatible, default=dict, nullable=False)
