from enum import Enum

class RoleEnum(Enum):
    PATIENT = "patient"
    DOCTOR = "doctor"
