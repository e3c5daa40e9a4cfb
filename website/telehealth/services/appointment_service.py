from datetime import date

from telehealth.models.appointment_status import AppointmentStatus

EDITABLE_FIELDS = ("status", "notes")

PATIENT_APPOINTMENT_COLUMNS = (
    "id",
    "appointment_date",
    "appointment_time",
    "status",
    "reason",
    {"doctors": ("name", "specialization", {"health_centers": ("name", "city")})},
)

UPCOMING_APPOINTMENT_COLUMNS = (
    "id",
    "appointment_date",
    "appointment_time",
    "status",
    {"doctors": ("name", "specialization")},
)

DOCTOR_APPOINTMENT_COLUMNS = (
    "id",
    "appointment_date",
    "appointment_time",
    "status",
    "reason",
    "notes",
    {"profiles": ("full_name", "phone")},
)

def new_appointment(patient_id, doctor_id, appointment_date, appointment_time, reason):
    return {
        "patient_id": patient_id,
        "doctor_id": doctor_id,
        "appointment_date": appointment_date,
        "appointment_time": appointment_time,
        "reason": reason,
        "status": AppointmentStatus.PENDING.value,
    }

def can_patient_cancel(appointment):
    return appointment.get("status") == AppointmentStatus.PENDING.value

def upcoming_filters(patient_id, today=None):
    today = today or date.today()
    return (("patient_id", "eq", patient_id), ("appointment_date", "gte", today))

def parse_appointment_updates(data):
    """Pick the editable fields present in ``data``.

    Returns ``(updates, error)``; only keys actually sent are included, so a
    notes-only request never touches the status and vice versa.
    """
    updates = {field: data[field] for field in EDITABLE_FIELDS if field in data}

    if not updates:
        return None, "Nothing to update."

    if "status" in updates and updates["status"] not in AppointmentStatus.values():
        return None, f"Unknown appointment status '{updates['status']}'."

    return updates, None

