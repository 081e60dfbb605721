"""
Pydantic schemas for the Reminder module.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from ehrcloud.api.v1.dependencies import reject_null
from ehrcloud.models.enums import ReminderChannel, ReminderStatus
from ehrcloud.models.mixins import as_utc


class ReminderCreate(BaseModel):
    """
    A reminder may target a patient, an appointment, or neither
    (an internal note for the care team).
    """
    title: str = Field(..., min_length=3, max_length=200)
    message: Optional[str] = None
    remind_at: datetime
    channel: ReminderChannel = ReminderChannel.IN_APP
    patient_id: Optional[int] = None
    appointment_id: Optional[int] = None

    @field_validator("remind_at")
    @classmethod
    def normalise_remind_at(cls, v: datetime) -> datetime:
        return as_utc(v)


class ReminderUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    message: Optional[str] = None
    remind_at: Optional[datetime] = None
    channel: Optional[ReminderChannel] = None
    status: Optional[ReminderStatus] = None

    reject_null_fields = field_validator("title", "remind_at", "channel", "status")(reject_null)

    @field_validator("remind_at")
    @classmethod
    def normalise_remind_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class ReminderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    patient_id: Optional[int] = None
    appointment_id: Optional[int] = None
    title: str
    message: Optional[str] = None
    remind_at: datetime
    channel: ReminderChannel
    status: ReminderStatus
    created_by: Optional[int] = None
    created_at: datetime

    @field_serializer("remind_at")
    def serialize_remind_at(self, v: datetime) -> str:
        return as_utc(v).isoformat()


class ReminderFilters(BaseModel):
    status: Optional[ReminderStatus] = None
    patient_id: Optional[int] = None
    upcoming: bool = False
