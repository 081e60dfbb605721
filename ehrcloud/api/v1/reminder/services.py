"""
Business services for the Reminder module.

Reminders are stored only; delivery over email or SMS is outside this
service.
"""
from typing import Optional

from sqlalchemy import Select

from ehrcloud.models.enums import ReminderStatus
from ehrcloud.models.mixins import utcnow
from ehrcloud.models.patient.patient import Patient
from ehrcloud.models.scheduling.appointment import Appointment
from ehrcloud.models.scheduling.reminder import Reminder
from ehrcloud.services.scoping import TenantScopedService
from ehrcloud.services.validation import ValidationResult

from ehrcloud.api.v1.reminder.schemas import ReminderCreate, ReminderFilters, ReminderUpdate


class ReminderService(TenantScopedService[Reminder]):
    model = Reminder
    not_found_message = "Reminder not found"
    default_sort = "remind_at"
    sortable_fields = frozenset({"created_at", "remind_at", "status"})

    def _apply_filters(self, query: Select, filters: Optional[ReminderFilters]) -> Select:
        if filters is None:
            return query
        if filters.status:
            query = query.where(Reminder.status == filters.status)
        if filters.patient_id:
            query = query.where(Reminder.patient_id == filters.patient_id)
        if filters.upcoming:
            query = query.where(
                Reminder.remind_at >= utcnow(),
                Reminder.status == ReminderStatus.PENDING,
            )
        return query

    def create_reminder(self, data: ReminderCreate, created_by: int) -> Reminder:
        """
        Raises:
            NotFoundError: patient or appointment missing in this hospital
            ValidationFailedError: appointment of another patient
        """
        values = data.model_dump()
        if data.patient_id is not None:
            self.get_related(Patient, data.patient_id, "Patient not found")
        if data.appointment_id is not None:
            appointment = self.get_related(Appointment, data.appointment_id, "Appointment not found")
            if data.patient_id is None:
                values["patient_id"] = appointment.patient_id
            elif appointment.patient_id != data.patient_id:
                ValidationResult.failure(
                    "appointment_id", "Appointment belongs to another patient"
                ).raise_for_errors()
        return self.create(values, created_by=created_by)

    def update_reminder(self, reminder_id: int, data: ReminderUpdate) -> Reminder:
        return self.update(reminder_id, data.model_dump(exclude_unset=True))
