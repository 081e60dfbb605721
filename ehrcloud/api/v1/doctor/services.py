"""
Business services for the Doctor module.
"""
from typing import List, Optional

from sqlalchemy import Select, or_, select

from ehrcloud.core.exceptions import ConflictError, NotFoundError
from ehrcloud.models.care_team.doctor import Doctor
from ehrcloud.models.enums import DoctorStatus
from ehrcloud.models.user.user import User
from ehrcloud.services.scoping import TenantScopedService

from ehrcloud.api.v1.doctor.schemas import DoctorCreate, DoctorFilters, DoctorUpdate


class DoctorService(TenantScopedService[Doctor]):
    model = Doctor
    not_found_message = "Doctor not found"
    sortable_fields = frozenset({"created_at", "specialization", "department", "experience_years", "rating"})

    def _apply_filters(self, query: Select, filters: Optional[DoctorFilters]) -> Select:
        if filters is None:
            return query
        if filters.status:
            query = query.where(Doctor.status == filters.status)
        if filters.specialization:
            query = query.where(Doctor.specialization.ilike(f"%{filters.specialization}%"))
        if filters.department:
            query = query.where(Doctor.department == filters.department)
        if filters.search:
            term = f"%{filters.search.strip()}%"
            query = query.join(User, Doctor.user_id == User.id).where(or_(
                User.first_name.ilike(term),
                User.last_name.ilike(term),
                Doctor.specialization.ilike(term),
                Doctor.license_number.ilike(term),
            ))
        return query

    def get_available(self) -> List[Doctor]:
        query = self._base_query().where(Doctor.status == DoctorStatus.AVAILABLE).order_by(Doctor.id)
        return list(self.db.execute(query).scalars().unique().all())

    def _tenant_user(self, user_id: int) -> User:
        """User accounts are not TenantScopedMixin models: filter explicitly."""
        user = self.db.scalar(select(User).where(User.id == user_id, User.tenant_id == self.tenant_id))
        if user is None:
            raise NotFoundError("User not found")
        return user

    def create_doctor(self, data: DoctorCreate, default_user_id: int) -> Doctor:
        """
        Raises:
            NotFoundError: user_id is not an account of this hospital
            ConflictError: the user already has a doctor profile, or the
                license number is already registered in this hospital
        """
        user = self._tenant_user(data.user_id or default_user_id)

        if self.db.scalar(select(Doctor.id).where(Doctor.user_id == user.id)) is not None:
            raise ConflictError("Doctor profile already exists for this user")
        self._ensure_unique_license(data.license_number)

        values = data.model_dump(exclude={"user_id"})
        return self.create(values, user_id=user.id)

    def update_doctor(self, doctor_id: int, data: DoctorUpdate) -> Doctor:
        doctor = self.get_by_id(doctor_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("license_number") and changes["license_number"] != doctor.license_number:
            self._ensure_unique_license(changes["license_number"])
        return self.apply_changes(doctor, changes)

    def _ensure_unique_license(self, license_number: str) -> None:
        exists = self.db.scalar(
            self._base_query().with_only_columns(Doctor.id).where(Doctor.license_number == license_number)
        )
        if exists is not None:
            raise ConflictError("License number already registered")

    def profile_for_user(self, user_id: int) -> Optional[Doctor]:
        return self.db.execute(
            self._base_query().where(Doctor.user_id == user_id)
        ).scalars().first()
