"""initial_schema

Revision ID: 5b1e0c7a9d21
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '5b1e0c7a9d21'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# =============================================================================
# HELPERS
# =============================================================================

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql")


def enum_type(name: str, *values: str) -> sa.Enum:
    """String-backed enum, same definition as models.types.enum_column."""
    return sa.Enum(*values, name=name, native_enum=False, length=32)


def timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def tenant_column() -> sa.Column:
    return sa.Column(
        'tenant_id', sa.Integer(),
        sa.ForeignKey('tenants.id', ondelete='CASCADE'),
        nullable=False,
    )


def created_by_column() -> sa.Column:
    return sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)


GENDERS = ('Male', 'Female', 'Other')


# =============================================================================
# UPGRADE
# =============================================================================

def upgrade() -> None:
    # === PLATFORM ===
    op.create_table(
        'subscription_plans',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(50), nullable=False, unique=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('price_cents', sa.Integer(), nullable=False),
        sa.Column('billing_cycle', enum_type('billing_cycle_enum', 'monthly', 'yearly'), nullable=False),
        sa.Column('max_patients', sa.Integer()),
        sa.Column('max_users', sa.Integer()),
        sa.Column('max_storage_mb', sa.Integer()),
        sa.Column('features', JSON_TYPE, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *timestamps(),
    )

    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('subdomain', sa.String(63), nullable=False),
        sa.Column(
            'status',
            enum_type('tenant_status_enum', 'trial', 'active', 'suspended', 'cancelled'),
            nullable=False,
        ),
        sa.Column('trial_ends_at', sa.DateTime(timezone=True)),
        sa.Column('activated_at', sa.DateTime(timezone=True)),
        sa.Column('cancelled_at', sa.DateTime(timezone=True)),
        sa.Column('contact_email', sa.String(255), nullable=False),
        sa.Column('contact_phone', sa.String(30)),
        sa.Column('address', sa.Text()),
        sa.Column('plan_id', sa.Integer(), sa.ForeignKey('subscription_plans.id', ondelete='SET NULL')),
        sa.Column('max_patients', sa.Integer()),
        sa.Column('max_users', sa.Integer()),
        sa.Column('max_storage_mb', sa.Integer()),
        sa.Column('settings', JSON_TYPE, nullable=False),
        *timestamps(),
    )
    op.create_index('ix_tenants_subdomain', 'tenants', ['subdomain'], unique=True)

    # === USERS ===
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('phone', sa.String(30)),
        sa.Column(
            'role',
            enum_type('user_role_enum', 'super_admin', 'hospital_owner', 'doctor', 'nurse', 'staff'),
            nullable=False,
        ),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True)),
        *timestamps(),
        sa.UniqueConstraint('tenant_id', 'email', name='uq_users_tenant_email'),
    )
    op.create_index('ix_users_tenant_id', 'users', ['tenant_id'])
    op.create_index('ix_users_email', 'users', ['email'])

    # === PATIENTS ===
    op.create_table(
        'patients',
        sa.Column('id', sa.Integer(), primary_key=True),
        tenant_column(),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('gender', enum_type('gender_enum', *GENDERS), nullable=False),
        sa.Column('email', sa.String(255)),
        sa.Column('phone', sa.String(30), nullable=False),
        sa.Column('address', sa.Text()),
        sa.Column('emergency_contact_name', sa.String(200)),
        sa.Column('emergency_contact_phone', sa.String(30)),
        sa.Column('blood_group', sa.String(5)),
        sa.Column('allergies', JSON_TYPE, nullable=False),
        sa.Column('notes', sa.Text()),
        sa.Column('status', enum_type('patient_status_enum', 'active', 'inactive'), nullable=False),
        sa.Column('last_visit_at', sa.DateTime(timezone=True)),
        *timestamps(),
        created_by_column(),
        comment='Patient records, one row per patient per hospital',
    )
    op.create_index('ix_patients_tenant_id', 'patients', ['tenant_id'])
    op.create_index('ix_patients_last_visit_at', 'patients', ['last_visit_at'])
    op.create_index('ix_patients_tenant_name', 'patients', ['tenant_id', 'last_name', 'first_name'])

    # === CARE TEAM ===
    op.create_table(
        'doctors',
        sa.Column('id', sa.Integer(), primary_key=True),
        tenant_column(),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('license_number', sa.String(50), nullable=False),
        sa.Column('specialization', sa.String(100), nullable=False),
        sa.Column('department', sa.String(100), nullable=False),
        sa.Column('experience_years', sa.Integer(), nullable=False),
        sa.Column('qualifications', JSON_TYPE, nullable=False),
        sa.Column('consultation_fee', sa.Numeric(10, 2), nullable=False),
        sa.Column('available_hours', JSON_TYPE, nullable=False),
        sa.Column(
            'status',
            enum_type('doctor_status_enum', 'Available', 'Busy', 'Off Duty'),
            nullable=False,
        ),
        sa.Column('rating', sa.Numeric(2, 1), nullable=False),
        *timestamps(),
        sa.UniqueConstraint('user_id', name='uq_doctors_user'),
        sa.UniqueConstraint('tenant_id', 'license_number', name='uq_doctors_tenant_license'),
    )
    op.create_index('ix_doctors_tenant_id', 'doctors', ['tenant_id'])

    op.create_table(
        'staff',
        sa.Column('id', sa.Integer(), primary_key=True),
        tenant_column(),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('employee_id', sa.String(50), nullable=False),
        sa.Column(
            'department',
            enum_type(
                'staff_department_enum',
                'Administration', 'Nursing', 'Laboratory', 'Pharmacy', 'Radiology', 'Reception',
                'Billing', 'IT Support', 'Maintenance', 'Security', 'Human Resources', 'Other',
            ),
            nullable=False,
        ),
        sa.Column('position', sa.String(100), nullable=False),
        sa.Column('joining_date', sa.Date(), nullable=False),
        sa.Column('salary', sa.Numeric(12, 2)),
        sa.Column('shift', enum_type('staff_shift_enum', 'Day', 'Night', 'Rotating'), nullable=False),
        sa.Column('status', enum_type('staff_status_enum', 'active', 'inactive', 'on-leave'), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(30), nullable=False),
        sa.Column('gender', enum_type('gender_enum', *GENDERS)),
        sa.Column('date_of_birth', sa.Date()),
        sa.Column('notes', sa.Text()),
        *timestamps(),
        sa.UniqueConstraint('tenant_id', 'employee_id', name='uq_staff_tenant_employee'),
        sa.UniqueConstraint('user_id', name='uq_staff_user'),
    )
    op.create_index('ix_staff_tenant_id', 'staff', ['tenant_id'])

    # === SCHEDULING ===
    op.create_table(
        'appointments',
        sa.Column('id', sa.Integer(), primary_key=True),
        tenant_column(),
        sa.Column('patient_id', sa.Integer(), sa.ForeignKey('patients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('doctor_id', sa.Integer(), sa.ForeignKey('doctors.id', ondelete='CASCADE'), nullable=False),
        sa.Column('appointment_date', sa.Date(), nullable=False),
        sa.Column('appointment_time', sa.String(5), nullable=False, comment='HH:MM'),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('department', sa.String(100)),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('type', enum_type('appointment_type_enum', 'In-Person', 'Virtual'), nullable=False),
        sa.Column(
            'status',
            enum_type('appointment_status_enum', 'Scheduled', 'Confirmed', 'Completed', 'Cancelled', 'No-Show'),
            nullable=False,
        ),
        sa.Column('location', sa.String(200)),
        sa.Column('notes', sa.Text()),
        *timestamps(),
        created_by_column(),
    )
    op.create_index('ix_appointments_tenant_id', 'appointments', ['tenant_id'])
    op.create_index('ix_appointments_patient_id', 'appointments', ['patient_id'])
    op.create_index('ix_appointments_doctor_id', 'appointments', ['doctor_id'])
    op.create_index(
        'ix_appointments_tenant_date', 'appointments', ['tenant_id', 'appointment_date', 'appointment_time']
    )

    op.create_table(
        'reminders',
        sa.Column('id', sa.Integer(), primary_key=True),
        tenant_column(),
        sa.Column('patient_id', sa.Integer(), sa.ForeignKey('patients.id', ondelete='CASCADE')),
        sa.Column('appointment_id', sa.Integer(), sa.ForeignKey('appointments.id', ondelete='CASCADE')),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('message', sa.Text()),
        sa.Column('remind_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('channel', enum_type('reminder_channel_enum', 'email', 'sms', 'in_app'), nullable=False),
        sa.Column('status', enum_type('reminder_status_enum', 'pending', 'sent', 'cancelled'), nullable=False),
        *timestamps(),
        created_by_column(),
    )
    op.create_index('ix_reminders_tenant_id', 'reminders', ['tenant_id'])
    op.create_index('ix_reminders_remind_at', 'reminders', ['remind_at'])

    # === CLINICAL ===
    op.create_table(
        'prescriptions',
        sa.Column('id', sa.Integer(), primary_key=True),
        tenant_column(),
        sa.Column('patient_id', sa.Integer(), sa.ForeignKey('patients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('doctor_id', sa.Integer(), sa.ForeignKey('doctors.id', ondelete='CASCADE'), nullable=False),
        sa.Column('appointment_id', sa.Integer(), sa.ForeignKey('appointments.id', ondelete='SET NULL')),
        sa.Column('diagnosis', sa.Text(), nullable=False),
        sa.Column('medications', JSON_TYPE, nullable=False),
        sa.Column('notes', sa.Text()),
        sa.Column(
            'status',
            enum_type('prescription_status_enum', 'active', 'completed', 'cancelled'),
            nullable=False,
        ),
        sa.Column('issued_at', sa.DateTime(timezone=True), nullable=False),
        *timestamps(),
        created_by_column(),
    )
    op.create_index('ix_prescriptions_tenant_id', 'prescriptions', ['tenant_id'])
    op.create_index('ix_prescriptions_patient_id', 'prescriptions', ['patient_id'])
    op.create_index('ix_prescriptions_doctor_id', 'prescriptions', ['doctor_id'])

    op.create_table(
        'reports',
        sa.Column('id', sa.Integer(), primary_key=True),
        tenant_column(),
        sa.Column('patient_id', sa.Integer(), sa.ForeignKey('patients.id', ondelete='CASCADE')),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column(
            'report_type',
            enum_type('report_type_enum', 'medical', 'lab', 'radiology', 'discharge', 'operational'),
            nullable=False,
        ),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('data', JSON_TYPE, nullable=False),
        *timestamps(),
        created_by_column(),
    )
    op.create_index('ix_reports_tenant_id', 'reports', ['tenant_id'])
    op.create_index('ix_reports_patient_id', 'reports', ['patient_id'])


# =============================================================================
# DOWNGRADE
# =============================================================================

def downgrade() -> None:
    for table in (
        'reports',
        'prescriptions',
        'reminders',
        'appointments',
        'staff',
        'doctors',
        'patients',
        'users',
        'tenants',
        'subscription_plans',
    ):
        op.drop_table(table)
