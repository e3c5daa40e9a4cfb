"""Tests for sign-up, sign-in and the session gate.

Tests cover:
- Patient sign-up creates the identity, its profile and the patient role
- Sign-in failures and validation messages
- Doctor portal sign-in rejects identities without the doctor role
- Logout and session change notifications
- Sessions naming a vanished identity count as no session
"""

from telehealth.extensions import db
from telehealth.models.user import User
from telehealth.services.auth_service import on_session_change

from tests.base import AppTestCase


class PatientAuthTest(AppTestCase):
    def _sign_up(self, **overrides):
        form = {
            "mode": "signup",
            "full_name": "Jane Patient",
            "phone": "0700111222",
            "email": "Jane@Example.com",
            "password": "secret123",
        }
        form.update(overrides)
        return self.client.post("/auth", data=form)

    def test_sign_up_creates_profile_and_patient_role(self):
        response = self._sign_up()

        self.assertEqual(response.status_code, 302)
        self.assertTrue(response.headers["Location"].endswith("/dashboard"))

        user = User.query.filter_by(email="jane@example.com").one()
        profile = self.service.select_one("profiles", filters=(("id", "eq", user.id),))
        roles = self.service.select("user_roles", columns=("role",), filters=(("user_id", "eq", user.id),))

        self.assertEqual(profile["full_name"], "Jane Patient")
        self.assertEqual(profile["phone"], "0700111222")
        self.assertEqual(roles, [{"role": "patient"}])

        with self.client.session_transaction() as sess:
            self.assertEqual(sess["user_id"], user.id)

    def test_duplicate_email_rejected(self):
        self.create_patient(email="jane@example.com")

        response = self._sign_up()

        self.assertEqual(response.status_code, 200)
        self.assertIn(b"Email already registered.", response.data)
        self.assertEqual(User.query.count(), 1)

    def test_short_password_rejected(self):
        response = self._sign_up(password="123")
        self.assertIn(b"Password must be at least 6 characters.", response.data)
        self.assertEqual(User.query.count(), 0)

    def test_sign_in(self):
        user = self.create_patient()

        response = self.client.post("/auth", data={"email": "patient@example.com", "password": "secret123"})

        self.assertTrue(response.headers["Location"].endswith("/dashboard"))
        with self.client.session_transaction() as sess:
            self.assertEqual(sess["user_id"], user.id)

    def test_wrong_password(self):
        self.create_patient()

        response = self.client.post("/auth", data={"email": "patient@example.com", "password": "nope-nope"})

        self.assertEqual(response.status_code, 200)
        self.assertIn(b"Invalid login credentials.", response.data)
        with self.client.session_transaction() as sess:
            self.assertNotIn("user_id", sess)

    def test_signed_in_visitor_skips_auth_page(self):
        self.login(self.create_patient())
        response = self.client.get("/auth")
        self.assertTrue(response.headers["Location"].endswith("/dashboard"))

    def test_logout_clears_session(self):
        self.login(self.create_patient())

        response = self.client.post("/logout")

        self.assertEqual(response.headers["Location"], "/")
        with self.client.session_transaction() as sess:
            self.assertNotIn("user_id", sess)

    def test_vanished_identity_is_no_session(self):
        user = self.create_patient()
        self.login(user)
        User.query.filter_by(id=user.id).delete()
        db.session.commit()

        response = self.client.get("/dashboard")

        self.assertTrue(response.headers["Location"].endswith("/auth"))

    def test_navigation_depends_on_session(self):
        anonymous = self.client.get("/")
        self.assertIn(b"Sign In", anonymous.data)
        self.assertNotIn(b"Logout", anonymous.data)

        self.login(self.create_patient())
        signed_in = self.client.get("/")
        self.assertIn(b"Logout", signed_in.data)
        self.assertIn(b'href="/appointments"', signed_in.data)


class SessionChangeTest(AppTestCase):
    def test_sign_in_and_out_notify_listeners(self):
        seen = []

        def listener(sender, user_id=None, **extra):
            seen.append(user_id)

        on_session_change(listener)
        user = self.create_patient()

        self.client.post("/auth", data={"email": "patient@example.com", "password": "secret123"})
        self.client.post("/logout")

        self.assertEqual(seen[-2:], [user.id, None])


class DoctorAuthTest(AppTestCase):
    def test_doctor_signs_in(self):
        user, _ = self.create_doctor_user()

        response = self.client.post("/doctor/auth", data={"email": "doctor@example.com", "password": "secret123"})

        self.assertTrue(response.headers["Location"].endswith("/doctor/dashboard"))
        with self.client.session_transaction() as sess:
            self.assertEqual(sess["user_id"], user.id)

    def test_patient_rejected_from_doctor_portal(self):
        self.create_patient()

        response = self.client.post("/doctor/auth", data={"email": "patient@example.com", "password": "secret123"})

        self.assertEqual(response.status_code, 200)
        self.assertIn(b"Access denied. This portal is for doctors only.", response.data)
        with self.client.session_transaction() as sess:
            self.assertNotIn("user_id", sess)
