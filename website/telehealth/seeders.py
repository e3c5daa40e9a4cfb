from telehealth.exceptions import NotFoundError
from telehealth.models.roles import RoleEnum
from telehealth.models.user import User
from telehealth.services.data_gateway import DataGateway
from telehealth.extensions import db

HEALTH_CENTERS = [
    {"name": "Nairobi Hospital", "city": "Nairobi", "state": "Nairobi County"},
    {"name": "Coast General Hospital", "city": "Mombasa", "state": "Mombasa County"},
    {"name": "Aga Khan Hospital", "city": "Kisumu", "state": "Kisumu County"},
]

# (name, specialization, years_of_experience, consultation_fee, health center index)
DOCTORS = [
    ("Dr. Amina Odhiambo", "Cardiology", 12, "3500.00", 0),
    ("Dr. Brian Mwangi", "Pediatrics", 8, "2500.00", 0),
    ("Dr. Fatuma Hassan", "Dermatology", 10, "3000.00", 1),
    ("Dr. Peter Kamau", "General Practice", 5, "1500.00", 1),
    ("Dr. Grace Wanjiru", "Gynecology", 15, "4000.00", 2),
]


def seed_directory(flush=False):
    """
    Seeds health centers and their doctors.

    Existing rows are left alone unless ``flush`` is set; returns how many
    rows of each relation were inserted.
    """
    gateway = DataGateway(service_role=True)
    stats = {"health_centers": 0, "doctors": 0}

    if not flush and gateway.select("health_centers", columns=("id",), limit=1):
        return stats

    centers = []
    for fields in HEALTH_CENTERS:
        centers.append(gateway.insert("health_centers", fields))
    stats["health_centers"] = len(centers)

    for name, specialization, years, fee, center_index in DOCTORS:
        slug = name.split()[-1].lower()
        gateway.insert("doctors", {
            "name": name,
            "specialization": specialization,
            "years_of_experience": years,
            "consultation_fee": fee,
            "email": f"{slug}@telehealth.example",
            "phone": f"+2547000000{len(slug):02d}",
            "health_center_id": centers[center_index]["id"],
        })
        stats["doctors"] += 1

    return stats


def create_doctor_account(email, password, doctor_name):
    """Create a sign-in identity for an existing doctor and grant it the doctor role."""
    gateway = DataGateway(service_role=True)
    doctor = gateway.select_one("doctors", columns=("id", "user_id"), filters=(("name", "eq", doctor_name),))

    email = email.strip().lower()
    user = User.query.filter_by(email=email).first()
    if user is None:
        user = User(email=email)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()

    try:
        gateway.select_one(
            "user_roles",
            filters=(("user_id", "eq", user.id), ("role", "eq", RoleEnum.DOCTOR.value)),
        )
    except NotFoundError:
        gateway.insert("user_roles", {"user_id": user.id, "role": RoleEnum.DOCTOR.value})

    gateway.update("doctors", {"user_id": user.id}, filters=(("id", "eq", doctor["id"]),))
    return user
