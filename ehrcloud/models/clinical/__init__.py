from ehrcloud.models.clinical.prescription import Prescription
from ehrcloud.models.clinical.report import Report

__all__ = ["Prescription", "Report"]
