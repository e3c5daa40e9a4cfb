from flask import Blueprint, render_template, request, redirect, url_for, flash

from telehealth.models.roles import RoleEnum
from telehealth.services.auth_service import (
    authenticate_user,
    get_current_session,
    has_role,
    register_user,
    sign_in,
    sign_out,
)

auth_bp = Blueprint("auth", __name__)

@auth_bp.route("/auth", methods=["GET", "POST"])
def login():
    if get_current_session():
        return redirect(url_for("patient.dashboard"))

    mode = request.form.get("mode") or request.args.get("mode", "signin")

    if request.method == "POST":
        if mode == "signup":
            user, error = register_user(
                email=request.form.get("email", ""),
                password=request.form.get("password", ""),
                full_name=request.form.get("full_name", "").strip(),
                phone=request.form.get("phone", "").strip() or None
            )
        else:
            user, error = authenticate_user(
                email=request.form.get("email", ""),
                password=request.form.get("password", "")
            )

        if error:
            flash(error, "danger")
            return render_template("auth/login.html", hide_navbar=True, mode=mode, form=request.form)

        sign_in(user)
        if mode == "signup":
            flash("Account created successfully!", "success")
        return redirect(url_for("patient.dashboard"))

    return render_template("auth/login.html", hide_navbar=True, mode=mode, form={})

@auth_bp.route("/doctor/auth", methods=["GET", "POST"])
def doctor_login():
    if request.method == "POST":
        user, error = authenticate_user(
            email=request.form.get("email", ""),
            password=request.form.get("password", "")
        )

        if user and not has_role(user.id, RoleEnum.DOCTOR):
            user, error = None, "Access denied. This portal is for doctors only."

        if error:
            flash(error, "danger")
            return render_template("auth/doctor_login.html", hide_navbar=True, form=request.form)

        sign_in(user)
        return redirect(url_for("doctor.dashboard"))

    return render_template("auth/doctor_login.html", hide_navbar=True, form={})

@auth_bp.route("/logout", methods=["POST"])
def logout():
    sign_out()
    return redirect(url_for("patient.index"))
