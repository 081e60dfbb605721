"""
EHR Cloud enums - every enumerated type used by the models and schemas.

Values are stored as strings (see models.types.enum_column) so the same
definitions work on PostgreSQL and SQLite.
"""

from enum import Enum


# =============================================================================
# MODULE: PLATFORM - Tenants and subscriptions
# =============================================================================

class TenantStatus(str, Enum):
    """Lifecycle of a hospital account."""
    TRIAL = "trial"                      # Signed up, inside the trial period
    ACTIVE = "active"                    # Paying customer
    SUSPENDED = "suspended"              # Blocked by the platform (unpaid, abuse)
    CANCELLED = "cancelled"              # Closed, terminal


class BillingCycle(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


# =============================================================================
# MODULE: USER - Accounts and roles
# =============================================================================

class UserRole(str, Enum):
    """
    Closed set of roles. Permissions are derived from the role through
    core.auth.permissions.ROLE_PERMISSIONS.
    """
    SUPER_ADMIN = "super_admin"          # Platform operator, no tenant
    HOSPITAL_OWNER = "hospital_owner"    # Tenant administrator
    DOCTOR = "doctor"
    NURSE = "nurse"
    STAFF = "staff"                      # Reception, billing, admin staff

    @classmethod
    def tenant_roles(cls) -> list["UserRole"]:
        return [role for role in cls if role is not cls.SUPER_ADMIN]


# =============================================================================
# MODULE: PATIENT
# =============================================================================

class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class PatientStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


# =============================================================================
# MODULE: CARE TEAM - Doctors and staff
# =============================================================================

class DoctorStatus(str, Enum):
    AVAILABLE = "Available"
    BUSY = "Busy"
    OFF_DUTY = "Off Duty"


class StaffDepartment(str, Enum):
    ADMINISTRATION = "Administration"
    NURSING = "Nursing"
    LABORATORY = "Laboratory"
    PHARMACY = "Pharmacy"
    RADIOLOGY = "Radiology"
    RECEPTION = "Reception"
    BILLING = "Billing"
    IT_SUPPORT = "IT Support"
    MAINTENANCE = "Maintenance"
    SECURITY = "Security"
    HUMAN_RESOURCES = "Human Resources"
    OTHER = "Other"


class StaffShift(str, Enum):
    DAY = "Day"
    NIGHT = "Night"
    ROTATING = "Rotating"


class StaffStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on-leave"


# =============================================================================
# MODULE: SCHEDULING - Appointments and reminders
# =============================================================================

class AppointmentStatus(str, Enum):
    """See services.validation.rules.APPOINTMENT_TRANSITIONS for the lifecycle."""
    SCHEDULED = "Scheduled"
    CONFIRMED = "Confirmed"
    COMPLETED = "Completed"              # Terminal
    CANCELLED = "Cancelled"              # Terminal
    NO_SHOW = "No-Show"                  # Terminal


class AppointmentType(str, Enum):
    IN_PERSON = "In-Person"
    VIRTUAL = "Virtual"


class ReminderChannel(str, Enum):
    EMAIL = "email"
    SMS = "sms"
    IN_APP = "in_app"


class ReminderStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    CANCELLED = "cancelled"


# =============================================================================
# MODULE: CLINICAL - Prescriptions and reports
# =============================================================================

class PrescriptionStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ReportType(str, Enum):
    MEDICAL = "medical"
    LAB = "lab"
    RADIOLOGY = "radiology"
    DISCHARGE = "discharge"
    OPERATIONAL = "operational"
