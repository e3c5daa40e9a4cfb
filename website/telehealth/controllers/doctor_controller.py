import logging

from flask import Blueprint, render_template, redirect, url_for, request, flash, jsonify

from telehealth.exceptions import DataAccessError
from telehealth.models.appointment_status import AppointmentStatus
from telehealth.models.roles import RoleEnum
from telehealth.services.appointment_service import DOCTOR_APPOINTMENT_COLUMNS, parse_appointment_updates
from telehealth.services.auth_service import get_current_session, has_role, sign_out
from telehealth.services.data_gateway import DataGateway

logger = logging.getLogger(__name__)

doctor_bp = Blueprint("doctor", __name__, url_prefix="/doctor")

def _current_doctor_session():
    """Return the session if it belongs to a doctor; sign out anyone else."""
    current = get_current_session()
    if not current:
        return None

    if not has_role(current.user_id, RoleEnum.DOCTOR):
        logger.info("Non-doctor %s signed out of the doctor portal", current.user_id)
        sign_out()
        return None

    return current

@doctor_bp.route("/dashboard")
def dashboard():
    current = _current_doctor_session()
    if not current:
        return redirect(url_for("auth.doctor_login"))

    gateway = DataGateway(identity_id=current.user_id)

    try:
        doctor = gateway.select_one(
            "doctors",
            columns=("id", "name"),
            filters=(("user_id", "eq", current.user_id),)
        )
    except DataAccessError:
        logger.warning("No doctor record linked to %s", current.user_id)
        doctor = None

    appointments = []
    if doctor is not None:
        try:
            appointments = gateway.select(
                "appointments",
                columns=DOCTOR_APPOINTMENT_COLUMNS,
                filters=(("doctor_id", "eq", doctor["id"]),),
                order_by=("appointment_date", "appointment_time")
            )
        except DataAccessError:
            flash("Failed to load appointments", "danger")

    return render_template(
        "doctor/dashboard.html",
        doctor=doctor,
        appointments=appointments,
        statuses=AppointmentStatus.values(),
        hide_navbar=True
    )

@doctor_bp.route("/appointments/<appointment_id>", methods=["POST"])
def update_appointment(appointment_id):
    wants_json = request.is_json

    current = _current_doctor_session()
    if not current:
        if wants_json:
            return jsonify({"error": "Not signed in"}), 401
        return redirect(url_for("auth.doctor_login"))

    if wants_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Expected a JSON object."}), 400
    else:
        data = request.form

    updates, error = parse_appointment_updates(data)

    if error:
        if wants_json:
            return jsonify({"error": error}), 400
        flash(error, "danger")
        return redirect(url_for("doctor.dashboard"))

    try:
        DataGateway(identity_id=current.user_id).update(
            "appointments",
            updates,
            filters=(("id", "eq", appointment_id),)
        )
    except DataAccessError:
        if wants_json:
            return jsonify({"error": "Failed to update appointment"}), 400
        flash("Failed to update appointment", "danger")
        return redirect(url_for("doctor.dashboard"))

    if wants_json:
        return jsonify({"id": appointment_id, "updates": updates})

    flash("Appointment updated", "success")
    return redirect(url_for("doctor.dashboard"))

@doctor_bp.route("/logout", methods=["POST"])
def logout():
    sign_out()
    return redirect(url_for("auth.doctor_login"))
