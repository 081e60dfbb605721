"""
Pydantic schemas for the Staff module.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ehrcloud.api.v1.dependencies import reject_null
from ehrcloud.api.v1.user.schemas import check_password_strength
from ehrcloud.models.enums import Gender, StaffDepartment, StaffShift, StaffStatus, UserRole

# Account roles a staff profile may be created with
STAFF_ACCOUNT_ROLES = (UserRole.STAFF, UserRole.NURSE)


class StaffCreate(BaseModel):
    """
    Body of POST /staff: the sign-in account and the employee profile are
    created together.
    """
    # --- Account ---
    email: EmailStr
    password: str = Field(..., max_length=128)
    account_role: UserRole = UserRole.STAFF

    # --- Profile ---
    employee_id: str = Field(..., min_length=1, max_length=50)
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    phone: str = Field(..., min_length=5, max_length=30)
    department: StaffDepartment
    position: str = Field(..., min_length=2, max_length=100)
    joining_date: date
    salary: Optional[Decimal] = Field(None, ge=0)
    shift: StaffShift = StaffShift.DAY
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_strength(v)

    @field_validator("account_role")
    @classmethod
    def validate_account_role(cls, v: UserRole) -> UserRole:
        if v not in STAFF_ACCOUNT_ROLES:
            raise ValueError("staff accounts must use the staff or nurse role")
        return v


class StaffUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=2, max_length=100)
    last_name: Optional[str] = Field(None, min_length=2, max_length=100)
    phone: Optional[str] = Field(None, min_length=5, max_length=30)
    department: Optional[StaffDepartment] = None
    position: Optional[str] = Field(None, min_length=2, max_length=100)
    salary: Optional[Decimal] = Field(None, ge=0)
    shift: Optional[StaffShift] = None
    status: Optional[StaffStatus] = None
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None
    notes: Optional[str] = None

    reject_null_fields = field_validator(
        "first_name", "last_name", "phone", "department", "position", "shift", "status"
    )(reject_null)


class StaffResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    user_id: int
    employee_id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    department: StaffDepartment
    position: str
    joining_date: date
    salary: Optional[Decimal] = None
    shift: StaffShift
    status: StaffStatus
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime


class StaffSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_id: str
    full_name: str
    position: str


class DepartmentGroup(BaseModel):
    department: StaffDepartment
    count: int
    staff: List[StaffSummary]


class StaffFilters(BaseModel):
    department: Optional[StaffDepartment] = None
    position: Optional[str] = None
    status: Optional[StaffStatus] = None
    search: Optional[str] = None
