"""
Static role -> permission table.

Roles are the closed UserRole enumeration; the table is keyed by it and
frozen at import. _check_table() fails the import if a role is missing, so
adding a role without granting it permissions cannot ship silently.
"""

from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping

from ehrcloud.models.enums import UserRole


class Permission(str, Enum):
    # Patients
    PATIENTS_READ = "patients:read"
    PATIENTS_WRITE = "patients:write"
    PATIENTS_DELETE = "patients:delete"
    # Care team
    DOCTORS_READ = "doctors:read"
    DOCTORS_WRITE = "doctors:write"
    STAFF_READ = "staff:read"
    STAFF_WRITE = "staff:write"
    # Scheduling
    APPOINTMENTS_READ = "appointments:read"
    APPOINTMENTS_WRITE = "appointments:write"
    REMINDERS_READ = "reminders:read"
    REMINDERS_WRITE = "reminders:write"
    # Clinical
    PRESCRIPTIONS_READ = "prescriptions:read"
    PRESCRIPTIONS_WRITE = "prescriptions:write"
    REPORTS_READ = "reports:read"
    REPORTS_WRITE = "reports:write"
    # Hospital administration
    USERS_MANAGE = "users:manage"
    TENANT_READ = "tenant:read"
    TENANT_MANAGE = "tenant:manage"
    # Platform
    PLATFORM_TENANTS = "platform:tenants"
    PLATFORM_PLANS = "platform:plans"


P = Permission

_CLINICAL_READ = frozenset({
    P.PATIENTS_READ,
    P.DOCTORS_READ,
    P.APPOINTMENTS_READ,
    P.PRESCRIPTIONS_READ,
    P.REMINDERS_READ,
    P.TENANT_READ,
})

ROLE_PERMISSIONS: Mapping[UserRole, FrozenSet[Permission]] = MappingProxyType({
    UserRole.SUPER_ADMIN: frozenset({
        P.PLATFORM_TENANTS,
        P.PLATFORM_PLANS,
    }),
    UserRole.HOSPITAL_OWNER: _CLINICAL_READ | {
        P.PATIENTS_WRITE, P.PATIENTS_DELETE,
        P.DOCTORS_WRITE,
        P.STAFF_READ, P.STAFF_WRITE,
        P.APPOINTMENTS_WRITE,
        P.REMINDERS_WRITE,
        P.REPORTS_READ, P.REPORTS_WRITE,
        P.USERS_MANAGE,
        P.TENANT_MANAGE,
    },
    UserRole.DOCTOR: _CLINICAL_READ | {
        P.PATIENTS_WRITE,
        P.DOCTORS_WRITE,
        P.APPOINTMENTS_WRITE,
        P.PRESCRIPTIONS_WRITE,
        P.REMINDERS_WRITE,
        P.REPORTS_READ, P.REPORTS_WRITE,
    },
    UserRole.NURSE: _CLINICAL_READ,
    UserRole.STAFF: _CLINICAL_READ | {
        P.PATIENTS_WRITE,
        P.STAFF_READ,
        P.APPOINTMENTS_WRITE,
        P.REMINDERS_WRITE,
        P.REPORTS_READ,
    },
})


def _check_table() -> None:
    missing = [role.value for role in UserRole if role not in ROLE_PERMISSIONS]
    if missing:
        raise RuntimeError(f"Roles without a permission entry: {missing}")


_check_table()


class PermissionTable:
    """
    Read-only view over a role -> permissions mapping.

    The AppContext holds one instance; dependencies ask it instead of
    importing ROLE_PERMISSIONS directly.
    """

    def __init__(self, table: Mapping[UserRole, FrozenSet[Permission]] = ROLE_PERMISSIONS):
        self._table = table

    def permissions_for(self, role: UserRole) -> FrozenSet[Permission]:
        return self._table.get(role, frozenset())

    def allows(self, role: UserRole, permission: Permission) -> bool:
        return permission in self.permissions_for(role)

    def allows_all(self, role: UserRole, permissions: Iterable[Permission]) -> bool:
        granted = self.permissions_for(role)
        return all(p in granted for p in permissions)

    def roles_with(self, permission: Permission) -> list:
        return [role for role, granted in self._table.items() if permission in granted]
