"""
Tests for the static role -> permission table.
"""

import pytest

from ehrcloud.core.auth.permissions import ROLE_PERMISSIONS, Permission, PermissionTable
from ehrcloud.models.enums import UserRole


class TestPermissionTable:

    def test_every_role_has_an_entry(self):
        assert set(ROLE_PERMISSIONS) == set(UserRole)

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            ROLE_PERMISSIONS[UserRole.NURSE] = frozenset(Permission)

    @pytest.mark.parametrize("role, permission, expected", [
        (UserRole.HOSPITAL_OWNER, Permission.PATIENTS_DELETE, True),
        (UserRole.DOCTOR, Permission.PATIENTS_DELETE, False),
        (UserRole.DOCTOR, Permission.PRESCRIPTIONS_WRITE, True),
        (UserRole.NURSE, Permission.PATIENTS_WRITE, False),
        (UserRole.NURSE, Permission.PATIENTS_READ, True),
        (UserRole.STAFF, Permission.APPOINTMENTS_WRITE, True),
        (UserRole.STAFF, Permission.STAFF_WRITE, False),
        (UserRole.HOSPITAL_OWNER, Permission.PLATFORM_TENANTS, False),
        (UserRole.SUPER_ADMIN, Permission.PLATFORM_TENANTS, True),
        (UserRole.SUPER_ADMIN, Permission.PATIENTS_READ, False),
    ])
    def test_allows(self, role, permission, expected):
        assert PermissionTable().allows(role, permission) is expected

    def test_platform_permissions_stay_on_the_platform(self):
        table = PermissionTable()
        for role in UserRole.tenant_roles():
            granted = table.permissions_for(role)
            assert Permission.PLATFORM_TENANTS not in granted
            assert Permission.PLATFORM_PLANS not in granted

    def test_allows_all(self):
        table = PermissionTable()
        assert table.allows_all(UserRole.DOCTOR, [Permission.PATIENTS_READ, Permission.PATIENTS_WRITE])
        assert not table.allows_all(UserRole.DOCTOR, [Permission.PATIENTS_READ, Permission.USERS_MANAGE])

    def test_roles_with(self):
        assert PermissionTable().roles_with(Permission.USERS_MANAGE) == [UserRole.HOSPITAL_OWNER]

    def test_custom_table(self):
        table = PermissionTable({UserRole.NURSE: frozenset({Permission.REPORTS_READ})})
        assert table.allows(UserRole.NURSE, Permission.REPORTS_READ)
        assert table.permissions_for(UserRole.DOCTOR) == frozenset()
