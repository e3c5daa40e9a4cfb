import logging
from datetime import date

from flask import Blueprint, current_app, render_template, request, redirect, url_for, flash

from telehealth.exceptions import DataAccessError
from telehealth.models.appointment_status import AppointmentStatus
from telehealth.services.appointment_service import (
    PATIENT_APPOINTMENT_COLUMNS,
    UPCOMING_APPOINTMENT_COLUMNS,
    can_patient_cancel,
    new_appointment,
    upcoming_filters,
)
from telehealth.services.auth_service import get_current_session
from telehealth.services.data_gateway import DataGateway
from telehealth.services.directory_service import DOCTOR_COLUMNS, filter_doctors

logger = logging.getLogger(__name__)

patient_bp = Blueprint("patient", __name__)

BOOKING_DOCTOR_COLUMNS = (
    "id",
    "name",
    "specialization",
    "consultation_fee",
    {"health_centers": ("name", "city")},
)

@patient_bp.route("/")
def index():
    return render_template("index.html")

@patient_bp.route("/dashboard")
def dashboard():
    current = get_current_session()
    if not current:
        return redirect(url_for("auth.login"))

    gateway = DataGateway(identity_id=current.user_id)

    try:
        profile = gateway.select_one(
            "profiles",
            columns=("full_name",),
            filters=(("id", "eq", current.user_id),)
        )
    except DataAccessError as e:
        logger.info("Dashboard without profile for %s: %s", current.user_id, e.message)
        profile = None

    appointments = []
    try:
        appointments = gateway.select(
            "appointments",
            columns=UPCOMING_APPOINTMENT_COLUMNS,
            filters=upcoming_filters(current.user_id),
            order_by=(("appointment_date", True),),
            limit=current_app.config["UPCOMING_APPOINTMENTS_LIMIT"]
        )
    except DataAccessError:
        flash("Failed to load appointments", "danger")

    return render_template(
        "patient/dashboard.html",
        profile=profile,
        appointments=appointments,
        upcoming_count=len(appointments)
    )

# region Doctors
@patient_bp.route("/doctors")
def doctors():
    current = get_current_session()
    if not current:
        return redirect(url_for("auth.login"))

    search_term = request.args.get("q", "")

    doctors_list = []
    try:
        doctors_list = DataGateway(identity_id=current.user_id).select(
            "doctors",
            columns=DOCTOR_COLUMNS,
            order_by=("name",)
        )
    except DataAccessError:
        flash("Failed to load doctors", "danger")

    return render_template(
        "patient/doctors.html",
        doctors=filter_doctors(doctors_list, search_term),
        search_term=search_term
    )
# endregion

# region Appointments
def _load_booking_doctor(gateway, doctor_id):
    try:
        return gateway.select_one(
            "doctors",
            columns=BOOKING_DOCTOR_COLUMNS,
            filters=(("id", "eq", doctor_id),)
        )
    except DataAccessError:
        flash("Failed to load doctor information", "danger")
        return None

@patient_bp.route("/book-appointment/<doctor_id>", methods=["GET", "POST"])
def book_appointment(doctor_id):
    current = get_current_session()
    if not current:
        return redirect(url_for("auth.login"))

    gateway = DataGateway(identity_id=current.user_id)

    doctor = _load_booking_doctor(gateway, doctor_id)
    if doctor is None:
        return redirect(url_for("patient.doctors"))

    today = date.today().isoformat()

    if request.method == "POST":
        fields = new_appointment(
            patient_id=current.user_id,
            doctor_id=doctor["id"],
            appointment_date=request.form.get("appointment_date", ""),
            appointment_time=request.form.get("appointment_time", ""),
            reason=request.form.get("reason", "")
        )

        try:
            gateway.insert("appointments", fields)
        except DataAccessError as e:
            flash(e.message or "Failed to book appointment", "danger")
            return render_template(
                "patient/book_appointment.html",
                doctor=doctor,
                form=request.form,
                today=today
            )

        flash("Appointment booked! Your appointment has been successfully scheduled.", "success")
        return redirect(url_for("patient.appointments"))

    return render_template(
        "patient/book_appointment.html",
        doctor=doctor,
        form={},
        today=today
    )

@patient_bp.route("/appointments")
def appointments():
    current = get_current_session()
    if not current:
        return redirect(url_for("auth.login"))

    appointments_list = []
    try:
        appointments_list = DataGateway(identity_id=current.user_id).select(
            "appointments",
            columns=PATIENT_APPOINTMENT_COLUMNS,
            filters=(("patient_id", "eq", current.user_id),),
            order_by=(("appointment_date", False), ("appointment_time", False))
        )
    except DataAccessError:
        flash("Failed to load appointments", "danger")

    return render_template(
        "patient/appointments.html",
        appointments=appointments_list,
        can_cancel=can_patient_cancel
    )

@patient_bp.route("/appointments/<appointment_id>/cancel", methods=["GET", "POST"])
def cancel_appointment(appointment_id):
    current = get_current_session()
    if not current:
        return redirect(url_for("auth.login"))

    gateway = DataGateway(identity_id=current.user_id)

    if request.method == "GET":
        try:
            appointment = gateway.select_one(
                "appointments",
                columns=PATIENT_APPOINTMENT_COLUMNS,
                filters=(("id", "eq", appointment_id), ("patient_id", "eq", current.user_id))
            )
        except DataAccessError:
            flash("Appointment not found", "danger")
            return redirect(url_for("patient.appointments"))

        return render_template("patient/cancel_appointment.html", appointment=appointment)

    try:
        gateway.update(
            "appointments",
            {"status": AppointmentStatus.CANCELLED.value},
            filters=(("id", "eq", appointment_id),)
        )
    except DataAccessError:
        flash("Failed to cancel appointment", "danger")
    else:
        flash("Appointment cancelled. Your appointment has been cancelled.", "success")

    return redirect(url_for("patient.appointments"))
# endregion
