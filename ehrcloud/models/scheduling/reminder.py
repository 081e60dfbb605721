"""Reminder model - a note scheduled for a patient or an appointment (no delivery)."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ehrcloud.database.base_class import Base
from ehrcloud.models.enums import ReminderChannel, ReminderStatus
from ehrcloud.models.mixins import AuditMixin, TenantScopedMixin, TimestampMixin
from ehrcloud.models.types import enum_column


class Reminder(TenantScopedMixin, TimestampMixin, AuditMixin, Base):
    __tablename__ = "reminders"

    id: Mapped[int] = mapped_column(primary_key=True)
    patient_id: Mapped[Optional[int]] = mapped_column(ForeignKey("patients.id", ondelete="CASCADE"))
    appointment_id: Mapped[Optional[int]] = mapped_column(ForeignKey("appointments.id", ondelete="CASCADE"))

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[Optional[str]] = mapped_column(Text)
    remind_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    channel: Mapped[ReminderChannel] = mapped_column(
        enum_column(ReminderChannel, "reminder_channel_enum"),
        default=ReminderChannel.IN_APP,
        nullable=False,
    )
    status: Mapped[ReminderStatus] = mapped_column(
        enum_column(ReminderStatus, "reminder_status_enum"),
        default=ReminderStatus.PENDING,
        nullable=False,
    )
