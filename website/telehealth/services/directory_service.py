DOCTOR_COLUMNS = (
    "id",
    "name",
    "specialization",
    "years_of_experience",
    "consultation_fee",
    "email",
    "phone",
    {"health_centers": ("name", "city", "state")},
)

def _matches(doctor, term):
    if term in (doctor.get("name") or "").lower():
        return True
    if term in (doctor.get("specialization") or "").lower():
        return True
    center = doctor.get("health_centers")
    return center is not None and term in (center.get("city") or "").lower()

def filter_doctors(doctors, search_term):
    """Case-insensitive substring match on name, specialization or city.

    A blank search term returns the list untouched, in its original order.
    """
    if not search_term or not search_term.strip():
        return list(doctors)

    term = search_term.lower()
    return [doctor for doctor in doctors if _matches(doctor, term)]
