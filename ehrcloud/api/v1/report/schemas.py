"""
Pydantic schemas for the Report module.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ehrcloud.models.enums import ReportType


class ReportCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    report_type: ReportType
    content: str = Field(..., min_length=1)
    patient_id: Optional[int] = None
    data: Dict[str, Any] = Field(default_factory=dict)


class ReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    patient_id: Optional[int] = None
    title: str
    report_type: ReportType
    content: str
    data: Dict[str, Any] = {}
    created_by: Optional[int] = None
    created_at: datetime


class ReportFilters(BaseModel):
    report_type: Optional[ReportType] = None
    patient_id: Optional[int] = None
    search: Optional[str] = None
