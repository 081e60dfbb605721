"""
Business services for the Appointment module.

Status changes go through validate_appointment_transition(); an illegal
transition raises before any attribute is touched, so the stored record
stays as it was.
"""
from datetime import date
from typing import List, Optional

from sqlalchemy import Select

from ehrcloud.api.v1.dependencies import PaginationParams
from ehrcloud.models.care_team.doctor import Doctor
from ehrcloud.models.enums import AppointmentStatus
from ehrcloud.models.mixins import utcnow
from ehrcloud.models.patient.patient import Patient
from ehrcloud.models.scheduling.appointment import Appointment
from ehrcloud.services.scoping import TenantScopedService
from ehrcloud.services.validation import validate_appointment_transition, validate_date_range

from ehrcloud.api.v1.appointment.schemas import AppointmentCreate, AppointmentFilters, AppointmentUpdate

OPEN_STATUSES = (AppointmentStatus.SCHEDULED, AppointmentStatus.CONFIRMED)
UPCOMING_LIMIT = 10


class AppointmentService(TenantScopedService[Appointment]):
    model = Appointment
    not_found_message = "Appointment not found"
    sortable_fields = frozenset({"created_at", "status", "doctor_id", "patient_id"})

    def _apply_filters(self, query: Select, filters: Optional[AppointmentFilters]) -> Select:
        if filters is None:
            return query
        validate_date_range(filters.start_date, filters.end_date).raise_for_errors()

        if filters.status:
            query = query.where(Appointment.status == filters.status)
        if filters.start_date:
            query = query.where(Appointment.appointment_date >= filters.start_date)
        if filters.end_date:
            query = query.where(Appointment.appointment_date <= filters.end_date)
        if filters.doctor_id:
            query = query.where(Appointment.doctor_id == filters.doctor_id)
        if filters.patient_id:
            query = query.where(Appointment.patient_id == filters.patient_id)
        return query

    def _order_by(self, query: Select, pagination: PaginationParams) -> Select:
        # Calendar order unless the client asked for another sortable column
        if pagination.sort_by in self.sortable_fields:
            return super()._order_by(query, pagination)
        columns = (Appointment.appointment_date, Appointment.appointment_time, Appointment.id)
        if pagination.sort_order == "desc":
            return query.order_by(*(c.desc() for c in columns))
        return query.order_by(*columns)

    def get_upcoming(self, limit: int = UPCOMING_LIMIT) -> List[Appointment]:
        """Open appointments from today on, soonest first."""
        query = (
            self._base_query()
            .where(
                Appointment.appointment_date >= date.today(),
                Appointment.status.in_(OPEN_STATUSES),
            )
            .order_by(Appointment.appointment_date, Appointment.appointment_time, Appointment.id)
            .limit(limit)
        )
        return list(self.db.execute(query).scalars().unique().all())

    def _check_references(self, patient_id: Optional[int], doctor_id: Optional[int]) -> None:
        if patient_id is not None:
            self.get_related(Patient, patient_id, "Patient not found")
        if doctor_id is not None:
            self.get_related(Doctor, doctor_id, "Doctor not found")

    def create_appointment(self, data: AppointmentCreate, created_by: int) -> Appointment:
        """
        Raises:
            NotFoundError: patient or doctor missing in this hospital
        """
        self._check_references(data.patient_id, data.doctor_id)
        return self.create(
            data.model_dump(),
            status=AppointmentStatus.SCHEDULED,
            created_by=created_by,
        )

    def update_appointment(self, appointment_id: int, data: AppointmentUpdate) -> Appointment:
        """
        Raises:
            NotFoundError: appointment, patient or doctor missing
            ValidationFailedError: illegal status transition
        """
        appointment = self.get_by_id(appointment_id)
        changes = data.model_dump(exclude_unset=True)

        target = changes.get("status")
        if target is not None:
            validate_appointment_transition(appointment.status, target).raise_for_errors()
        self._check_references(changes.get("patient_id"), changes.get("doctor_id"))

        completing = target == AppointmentStatus.COMPLETED and appointment.status != target
        appointment = self.apply_changes(appointment, changes)

        if completing:
            # Patient as of this update (patient_id may have changed)
            patient = self.get_related(Patient, appointment.patient_id, "Patient not found")
            patient.last_visit_at = utcnow()
            self.db.flush()
        return appointment

    def cancel(self, appointment_id: int) -> Appointment:
        appointment = self.get_by_id(appointment_id)
        validate_appointment_transition(appointment.status, AppointmentStatus.CANCELLED).raise_for_errors()
        return self.apply_changes(appointment, {"status": AppointmentStatus.CANCELLED})
