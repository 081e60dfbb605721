from ehrcloud.models.patient.patient import Patient

__all__ = ["Patient"]
