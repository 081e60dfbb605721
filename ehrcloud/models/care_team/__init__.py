from ehrcloud.models.care_team.doctor import Doctor
from ehrcloud.models.care_team.staff import Staff

__all__ = ["Doctor", "Staff"]
