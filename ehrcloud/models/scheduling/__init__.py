from ehrcloud.models.scheduling.appointment import Appointment
from ehrcloud.models.scheduling.reminder import Reminder

__all__ = ["Appointment", "Reminder"]
