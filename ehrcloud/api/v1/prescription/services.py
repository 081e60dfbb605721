"""
Business services for the Prescription module.
"""
from typing import Optional

from sqlalchemy import Select

from ehrcloud.api.v1.doctor.services import DoctorService
from ehrcloud.models.care_team.doctor import Doctor
from ehrcloud.models.clinical.prescription import Prescription
from ehrcloud.models.patient.patient import Patient
from ehrcloud.models.scheduling.appointment import Appointment
from ehrcloud.services.scoping import TenantScopedService
from ehrcloud.services.validation import ValidationResult, validate_medications

from ehrcloud.api.v1.prescription.schemas import PrescriptionCreate, PrescriptionFilters, PrescriptionUpdate


class PrescriptionService(TenantScopedService[Prescription]):
    model = Prescription
    not_found_message = "Prescription not found"
    default_sort = "issued_at"
    sortable_fields = frozenset({"created_at", "issued_at", "status"})

    def _apply_filters(self, query: Select, filters: Optional[PrescriptionFilters]) -> Select:
        if filters is None:
            return query
        if filters.patient_id:
            query = query.where(Prescription.patient_id == filters.patient_id)
        if filters.doctor_id:
            query = query.where(Prescription.doctor_id == filters.doctor_id)
        if filters.status:
            query = query.where(Prescription.status == filters.status)
        return query

    def _prescribing_doctor(self, doctor_id: Optional[int], user_id: int) -> Doctor:
        if doctor_id is not None:
            return self.get_related(Doctor, doctor_id, "Doctor not found")
        doctor = DoctorService(self.db, self.tenant_id).profile_for_user(user_id)
        if doctor is None:
            ValidationResult.failure(
                "doctor_id", "doctor_id is required when the caller has no doctor profile"
            ).raise_for_errors()
        return doctor

    def create_prescription(self, data: PrescriptionCreate, user_id: int) -> Prescription:
        """
        Raises:
            ValidationFailedError: invalid medication list, no prescribing doctor
            NotFoundError: patient, doctor or appointment missing in this hospital
        """
        validate_medications(data.medications).raise_for_errors()

        self.get_related(Patient, data.patient_id, "Patient not found")
        doctor = self._prescribing_doctor(data.doctor_id, user_id)
        if data.appointment_id is not None:
            appointment = self.get_related(Appointment, data.appointment_id, "Appointment not found")
            if appointment.patient_id != data.patient_id:
                ValidationResult.failure(
                    "appointment_id", "Appointment belongs to another patient"
                ).raise_for_errors()

        values = data.model_dump(exclude={"doctor_id"})
        return self.create(values, doctor_id=doctor.id, created_by=user_id)

    def update_prescription(self, prescription_id: int, data: PrescriptionUpdate) -> Prescription:
        prescription = self.get_by_id(prescription_id)
        changes = data.model_dump(exclude_unset=True)
        if "medications" in changes:
            validate_medications(changes["medications"]).raise_for_errors()
        return self.apply_changes(prescription, changes)
