from ehrcloud.services.validation.results import ValidationResult
from ehrcloud.services.validation.rules import (
    APPOINTMENT_TRANSITIONS,
    TENANT_TRANSITIONS,
    validate_appointment_transition,
    validate_date_range,
    validate_subdomain,
    validate_tenant_transition,
    validate_time_of_day,
)
from ehrcloud.services.validation.schema_validator import validate_medications

__all__ = [
    "ValidationResult",
    "APPOINTMENT_TRANSITIONS",
    "TENANT_TRANSITIONS",
    "validate_appointment_transition",
    "validate_date_range",
    "validate_subdomain",
    "validate_tenant_transition",
    "validate_time_of_day",
    "validate_medications",
]
