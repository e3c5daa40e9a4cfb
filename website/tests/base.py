"""Shared fixtures for the web application tests.

Every test case gets a fresh app bound to an in-memory SQLite database and a
Flask test client. Rows are created through the data gateway with the
service role, the same way the seeders do.
"""

import unittest
from datetime import date, timedelta

from telehealth import create_app
from telehealth.extensions import db
from telehealth.models.roles import RoleEnum
from telehealth.models.user import User
from telehealth.services.auth_service import register_user
from telehealth.services.data_gateway import DataGateway


class AppTestCase(unittest.TestCase):
    def setUp(self):
        self.app = create_app({
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
        })
        self.ctx = self.app.app_context()
        self.ctx.push()
        self.client = self.app.test_client()
        self.service = DataGateway(service_role=True)

    def tearDown(self):
        db.session.remove()
        db.drop_all()
        self.ctx.pop()

    # region Builders
    def create_patient(self, email="patient@example.com", full_name="Jane Patient", phone="0700111222"):
        user, error = register_user(email=email, password="secret123", full_name=full_name, phone=phone)
        self.assertIsNone(error)
        return user

    def create_health_center(self, name="Nairobi Hospital", city="Nairobi", state="Nairobi County"):
        return self.service.insert("health_centers", {"name": name, "city": city, "state": state})

    def create_doctor(self, name="Dr. Amina Odhiambo", specialization="Cardiology", center=None, user=None, fee="2500.00"):
        center = center or self.create_health_center()
        return self.service.insert("doctors", {
            "name": name,
            "specialization": specialization,
            "years_of_experience": 10,
            "consultation_fee": fee,
            "health_center_id": center["id"],
            "user_id": user.id if user else None,
        })

    def create_doctor_user(self, email="doctor@example.com", name="Dr. Amina Odhiambo"):
        user = User(email=email)
        user.set_password("secret123")
        db.session.add(user)
        db.session.commit()
        self.service.insert("user_roles", {"user_id": user.id, "role": RoleEnum.DOCTOR.value})
        doctor = self.create_doctor(name=name, user=user)
        return user, doctor

    def create_appointment(self, patient, doctor, days_ahead=1, at="10:00", status="pending", reason="Checkup"):
        return self.service.insert("appointments", {
            "patient_id": patient.id,
            "doctor_id": doctor["id"],
            "appointment_date": date.today() + timedelta(days=days_ahead),
            "appointment_time": at,
            "status": status,
            "reason": reason,
        })
    # endregion

    def login(self, user):
        with self.client.session_transaction() as sess:
            sess["user_id"] = user.id

    def fetch_appointment(self, appointment_id):
        return self.service.select_one("appointments", filters=(("id", "eq", appointment_id),))
