"""
Shared pytest fixtures for the EHR Cloud tests.

This module provides:
- an in-memory SQLite AppContext per test (StaticPool, fresh schema)
- the FastAPI application built around that context, and a TestClient
- two hospitals (h1, h2) with one account per role, plus clinical fixtures
- helpers producing Authorization / tenant headers

IMPORTANT - sessions:
The test session and the request sessions share the single in-memory
connection. Fixtures therefore commit what they create; assertions made
after an API call start with db_session.expire_all().
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Callable, Dict, Generator, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

import ehrcloud.models  # noqa: F401  (registers the tables)
from ehrcloud.api.v1.auth.services import issue_tokens
from ehrcloud.core.config import Settings
from ehrcloud.core.context import AppContext
from ehrcloud.core.security.hashing import hash_password
from ehrcloud.database.base_class import Base
from ehrcloud.main import create_app
from ehrcloud.models import (
    Appointment,
    Doctor,
    Patient,
    Staff,
    SubscriptionPlan,
    Tenant,
    User,
)
from ehrcloud.models.enums import (
    AppointmentStatus,
    Gender,
    StaffDepartment,
    TenantStatus,
    UserRole,
)

TEST_PASSWORD = "Secret123"
# Low bcrypt cost keeps the suite fast; computed once
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD, rounds=4)

BASE_DOMAIN = "ehr.test"


# =============================================================================
# APPLICATION
# =============================================================================

def make_settings(**overrides) -> Settings:
    values = dict(
        ENVIRONMENT="test",
        DATABASE_URL="sqlite://",
        BASE_DOMAIN=BASE_DOMAIN,
        RATE_LIMIT_ENABLED=False,
        JWT_SECRET="test-access-secret",
        JWT_REFRESH_SECRET="test-refresh-secret",
        LOG_LEVEL="WARNING",
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def context(settings: Settings) -> Generator[AppContext, None, None]:
    """Fresh in-memory database for every test."""
    app_context = AppContext.build(settings)
    Base.metadata.create_all(bind=app_context.engine)
    yield app_context
    Base.metadata.drop_all(bind=app_context.engine)
    app_context.close()


@pytest.fixture
def app(context: AppContext):
    return create_app(context=context)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session(context: AppContext) -> Generator[Session, None, None]:
    session = context.session_factory()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# TENANTS
# =============================================================================

@pytest.fixture
def make_tenant(db_session: Session) -> Callable[..., Tenant]:
    def _make(subdomain: str, status: TenantStatus = TenantStatus.ACTIVE, **values) -> Tenant:
        tenant = Tenant(
            name=values.pop("name", f"Hospital {subdomain.upper()}"),
            subdomain=subdomain,
            status=status,
            contact_email=values.pop("contact_email", f"contact@{subdomain}.example.com"),
            settings={},
            **values,
        )
        db_session.add(tenant)
        db_session.commit()
        return tenant

    return _make


@pytest.fixture
def tenant_h1(make_tenant) -> Tenant:
    return make_tenant("h1")


@pytest.fixture
def tenant_h2(make_tenant) -> Tenant:
    return make_tenant("h2")


@pytest.fixture
def basic_plan(db_session: Session) -> SubscriptionPlan:
    plan = SubscriptionPlan(
        code="basic",
        name="Basic",
        price_cents=4900,
        max_patients=500,
        max_users=10,
        features=["patients", "appointments"],
    )
    db_session.add(plan)
    db_session.commit()
    return plan


# =============================================================================
# USERS
# =============================================================================

@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    def _make(tenant: Optional[Tenant], role: UserRole, email: str, **values) -> User:
        user = User(
            tenant_id=tenant.id if tenant is not None else None,
            email=email,
            password_hash=TEST_PASSWORD_HASH,
            first_name=values.pop("first_name", role.value.replace("_", " ").title().replace(" ", "")),
            last_name=values.pop("last_name", "Tester"),
            role=role,
            is_active=values.pop("is_active", True),
            **values,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture
def owner_h1(make_user, tenant_h1) -> User:
    return make_user(tenant_h1, UserRole.HOSPITAL_OWNER, "owner@h1.example.com")


@pytest.fixture
def doctor_user_h1(make_user, tenant_h1) -> User:
    return make_user(tenant_h1, UserRole.DOCTOR, "doctor@h1.example.com", first_name="Gregory", last_name="House")


@pytest.fixture
def nurse_h1(make_user, tenant_h1) -> User:
    return make_user(tenant_h1, UserRole.NURSE, "nurse@h1.example.com")


@pytest.fixture
def staff_user_h1(make_user, tenant_h1) -> User:
    return make_user(tenant_h1, UserRole.STAFF, "frontdesk@h1.example.com")


@pytest.fixture
def owner_h2(make_user, tenant_h2) -> User:
    return make_user(tenant_h2, UserRole.HOSPITAL_OWNER, "owner@h2.example.com")


@pytest.fixture
def super_admin(make_user) -> User:
    return make_user(None, UserRole.SUPER_ADMIN, "root@platform.example.com")


# =============================================================================
# CLINICAL RECORDS
# =============================================================================

@pytest.fixture
def make_patient(db_session: Session) -> Callable[..., Patient]:
    def _make(tenant: Tenant, first_name: str = "Alice", last_name: str = "Martin", **values) -> Patient:
        patient = Patient(
            tenant_id=tenant.id,
            first_name=first_name,
            last_name=last_name,
            date_of_birth=values.pop("date_of_birth", date(1980, 4, 12)),
            gender=values.pop("gender", Gender.FEMALE),
            phone=values.pop("phone", "+33600000001"),
            allergies=values.pop("allergies", []),
            **values,
        )
        db_session.add(patient)
        db_session.commit()
        return patient

    return _make


@pytest.fixture
def patient_h1(make_patient, tenant_h1) -> Patient:
    return make_patient(tenant_h1)


@pytest.fixture
def patient_h2(make_patient, tenant_h2) -> Patient:
    return make_patient(tenant_h2, first_name="Bob", last_name="Durand")


@pytest.fixture
def doctor_h1(db_session: Session, tenant_h1, doctor_user_h1) -> Doctor:
    doctor = Doctor(
        tenant_id=tenant_h1.id,
        user_id=doctor_user_h1.id,
        license_number="LIC-H1-001",
        specialization="Diagnostics",
        department="Internal Medicine",
        experience_years=12,
        qualifications=["MD"],
        consultation_fee=Decimal("80.00"),
        available_hours={"monday": {"start": "09:00", "end": "17:00"}},
    )
    db_session.add(doctor)
    db_session.commit()
    return doctor


@pytest.fixture
def doctor_h2(db_session: Session, make_user, tenant_h2) -> Doctor:
    user = make_user(tenant_h2, UserRole.DOCTOR, "doctor@h2.example.com")
    doctor = Doctor(
        tenant_id=tenant_h2.id,
        user_id=user.id,
        license_number="LIC-H2-001",
        specialization="Cardiology",
        department="Cardiology",
    )
    db_session.add(doctor)
    db_session.commit()
    return doctor


@pytest.fixture
def staff_member_h1(db_session: Session, tenant_h1, staff_user_h1) -> Staff:
    member = Staff(
        tenant_id=tenant_h1.id,
        user_id=staff_user_h1.id,
        employee_id="EMP-001",
        first_name=staff_user_h1.first_name,
        last_name=staff_user_h1.last_name,
        email=staff_user_h1.email,
        phone="+33600000099",
        department=StaffDepartment.RECEPTION,
        position="Receptionist",
        joining_date=date(2022, 1, 3),
    )
    db_session.add(member)
    db_session.commit()
    return member


@pytest.fixture
def appointment_h1(db_session: Session, tenant_h1, patient_h1, doctor_h1) -> Appointment:
    appointment = Appointment(
        tenant_id=tenant_h1.id,
        patient_id=patient_h1.id,
        doctor_id=doctor_h1.id,
        appointment_date=date.today() + timedelta(days=3),
        appointment_time="10:30",
        reason="Annual check-up",
        status=AppointmentStatus.SCHEDULED,
    )
    db_session.add(appointment)
    db_session.commit()
    return appointment


# =============================================================================
# AUTHENTICATION HELPERS
# =============================================================================

@pytest.fixture
def token_for(settings: Settings) -> Callable[[User], str]:
    def _token(user: User) -> str:
        return issue_tokens(user, settings).access_token

    return _token


@pytest.fixture
def auth_headers(token_for) -> Callable[..., Dict[str, str]]:
    """
    Headers for a user; the tenant defaults to the user's own hospital.

    Usage:
        client.get("/api/v1/patients", headers=auth_headers(owner_h1))
        client.get("/api/v1/patients", headers=auth_headers(owner_h1, subdomain="h2"))
    """
    def _headers(user: User, subdomain: Optional[str] = None) -> Dict[str, str]:
        headers = {"Authorization": f"Bearer {token_for(user)}"}
        if subdomain is None and user.tenant is not None:
            subdomain = user.tenant.subdomain
        if subdomain is not None:
            headers["X-Tenant-Subdomain"] = subdomain
        return headers

    return _headers


def tenant_headers(subdomain: str) -> Dict[str, str]:
    return {"X-Tenant-Subdomain": subdomain}
