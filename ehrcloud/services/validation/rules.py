"""
Explicit validation rules.

Each function checks one business rule and returns a ValidationResult;
callers decide whether to combine results or fail immediately.
"""

import re
from datetime import date
from typing import Dict, FrozenSet, Optional

from ehrcloud.models.enums import AppointmentStatus, TenantStatus
from ehrcloud.services.validation.results import ValidationResult


# =============================================================================
# STATE MACHINES
# =============================================================================

AS = AppointmentStatus

# Terminal states map to an empty set
APPOINTMENT_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AS.SCHEDULED: frozenset({AS.CONFIRMED, AS.CANCELLED, AS.NO_SHOW}),
    AS.CONFIRMED: frozenset({AS.COMPLETED, AS.CANCELLED, AS.NO_SHOW}),
    AS.COMPLETED: frozenset(),
    AS.CANCELLED: frozenset(),
    AS.NO_SHOW: frozenset(),
}

TS = TenantStatus

TENANT_TRANSITIONS: Dict[TenantStatus, FrozenSet[TenantStatus]] = {
    TS.TRIAL: frozenset({TS.ACTIVE, TS.SUSPENDED, TS.CANCELLED}),
    TS.ACTIVE: frozenset({TS.SUSPENDED, TS.CANCELLED}),
    TS.SUSPENDED: frozenset({TS.ACTIVE, TS.CANCELLED}),
    TS.CANCELLED: frozenset(),
}


def validate_appointment_transition(current: AppointmentStatus, target: AppointmentStatus) -> ValidationResult:
    """
    Scheduled -> Confirmed -> Completed, Scheduled|Confirmed -> Cancelled|No-Show.

    Re-applying the current status is accepted as a no-op.
    """
    if current == target or target in APPOINTMENT_TRANSITIONS[current]:
        return ValidationResult.success()
    if not APPOINTMENT_TRANSITIONS[current]:
        return ValidationResult.failure(
            "status", f"Appointment is {current.value} and can no longer change status"
        )
    return ValidationResult.failure(
        "status", f"Cannot change appointment status from {current.value} to {target.value}"
    )


def validate_tenant_transition(current: TenantStatus, target: TenantStatus) -> ValidationResult:
    if current == target or target in TENANT_TRANSITIONS[current]:
        return ValidationResult.success()
    return ValidationResult.failure(
        "status", f"Cannot change hospital status from {current.value} to {target.value}"
    )


# =============================================================================
# FIELD RULES
# =============================================================================

SUBDOMAIN_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_subdomain(value: str, reserved: FrozenSet[str] = frozenset()) -> ValidationResult:
    """Lowercase DNS label, 1-63 characters, not reserved."""
    if not SUBDOMAIN_PATTERN.match(value or ""):
        return ValidationResult.failure(
            "subdomain", "Subdomain must be a lowercase DNS label (letters, digits and hyphens)"
        )
    if value in reserved:
        return ValidationResult.failure("subdomain", f"Subdomain '{value}' is reserved")
    return ValidationResult.success()


def validate_time_of_day(value: str, field_name: str = "appointment_time") -> ValidationResult:
    if not TIME_PATTERN.match(value or ""):
        return ValidationResult.failure(field_name, "Time must use the HH:MM 24-hour format")
    return ValidationResult.success()


def validate_date_range(
    start: Optional[date],
    end: Optional[date],
    start_field: str = "start_date",
) -> ValidationResult:
    if start is not None and end is not None and start > end:
        return ValidationResult.failure(start_field, "Start date must be on or before end date")
    return ValidationResult.success()
