"""
Unit tests for model constraints and helpers.
"""

from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ehrcloud.models import Doctor, Tenant, User
from ehrcloud.models.enums import UserRole
from ehrcloud.models.mixins import as_utc

from conftest import TEST_PASSWORD_HASH


# =============================================================================
# TENANT
# =============================================================================

class TestTenant:

    def test_subdomain_unique(self, db_session: Session, tenant_h1):
        db_session.add(Tenant(name="Copy", subdomain="h1", contact_email="x@copy.example.com"))
        with pytest.raises(IntegrityError):
            db_session.flush()
        db_session.rollback()

    def test_defaults(self, tenant_h1):
        assert tenant_h1.is_active
        assert not tenant_h1.is_suspended
        assert tenant_h1.plan_code is None
        assert "h1" in repr(tenant_h1)


# =============================================================================
# USER
# =============================================================================

class TestUser:

    def _user(self, tenant, email):
        return User(
            tenant_id=tenant.id if tenant else None,
            email=email,
            password_hash=TEST_PASSWORD_HASH,
            first_name="Jane",
            last_name="Doe",
            role=UserRole.NURSE,
        )

    def test_email_unique_per_tenant(self, db_session: Session, nurse_h1, tenant_h1):
        db_session.add(self._user(tenant_h1, nurse_h1.email))
        with pytest.raises(IntegrityError):
            db_session.flush()
        db_session.rollback()

    def test_same_email_in_two_tenants(self, db_session: Session, nurse_h1, tenant_h2):
        user = self._user(tenant_h2, nurse_h1.email)
        db_session.add(user)
        db_session.flush()
        assert user.id is not None

    def test_full_name_and_flags(self, doctor_user_h1, super_admin):
        assert doctor_user_h1.full_name == "Gregory House"
        assert not doctor_user_h1.is_super_admin
        assert super_admin.is_super_admin
        assert super_admin.tenant_id is None


# =============================================================================
# DOCTOR
# =============================================================================

class TestDoctor:

    def test_license_unique_per_tenant(self, db_session: Session, doctor_h1, make_user, tenant_h1):
        other = make_user(tenant_h1, UserRole.DOCTOR, "other.doctor@h1.example.com")
        db_session.add(Doctor(
            tenant_id=tenant_h1.id,
            user_id=other.id,
            license_number=doctor_h1.license_number,
            specialization="Surgery",
            department="Surgery",
        ))
        with pytest.raises(IntegrityError):
            db_session.flush()
        db_session.rollback()

    def test_full_name_comes_from_account(self, doctor_h1):
        assert doctor_h1.full_name == "Gregory House"


class TestAsUtc:

    def test_naive_is_treated_as_utc(self):
        value = as_utc(datetime(2026, 1, 1, 12, 0))
        assert value.utcoffset().total_seconds() == 0

    def test_none(self):
        assert as_utc(None) is None
