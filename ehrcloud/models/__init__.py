"""
EHR Cloud models - single import point for every SQLAlchemy model.

    from ehrcloud.models import Tenant, User, Patient, Appointment

Sub-packages:
    tenants/     - Platform level (Tenant, SubscriptionPlan)
    user/        - Accounts (User)
    patient/     - Patient records
    care_team/   - Doctor and Staff profiles
    scheduling/  - Appointments and reminders
    clinical/    - Prescriptions and reports

Importing this package registers every table on Base.metadata, which
alembic and init_db rely on.
"""

# === Enums ===
from ehrcloud.models.enums import (
    AppointmentStatus,
    AppointmentType,
    BillingCycle,
    DoctorStatus,
    Gender,
    PatientStatus,
    PrescriptionStatus,
    ReminderChannel,
    ReminderStatus,
    ReportType,
    StaffDepartment,
    StaffShift,
    StaffStatus,
    TenantStatus,
    UserRole,
)

# === Mixins ===
from ehrcloud.models.mixins import TenantScopedMixin, TimestampMixin, AuditMixin

# === Models ===
from ehrcloud.models.tenants import Tenant, SubscriptionPlan, INITIAL_PLANS
from ehrcloud.models.user import User
from ehrcloud.models.patient import Patient
from ehrcloud.models.care_team import Doctor, Staff
from ehrcloud.models.scheduling import Appointment, Reminder
from ehrcloud.models.clinical import Prescription, Report

__all__ = [
    # Enums
    "AppointmentStatus", "AppointmentType", "BillingCycle", "DoctorStatus",
    "Gender", "PatientStatus", "PrescriptionStatus", "ReminderChannel",
    "ReminderStatus", "ReportType", "StaffDepartment", "StaffShift",
    "StaffStatus", "TenantStatus", "UserRole",
    # Mixins
    "TenantScopedMixin", "TimestampMixin", "AuditMixin",
    # Models
    "Tenant", "SubscriptionPlan", "INITIAL_PLANS", "User", "Patient",
    "Doctor", "Staff", "Appointment", "Reminder", "Prescription", "Report",
]
