import logging
import os

from flask import Flask, request

from .config import Config, ensure_secret_key
from .extensions import db
from telehealth.models.user import User
from telehealth.models.profile import Profile
from telehealth.models.user_role import UserRole
from telehealth.models.health_center import HealthCenter
from telehealth.models.doctor import Doctor
from telehealth.models.appointment import Appointment

logger = logging.getLogger(__name__)

def _log_session_change(sender, user_id=None, **extra):
    if user_id:
        logger.info("Signed in %s", user_id)
    else:
        logger.info("Signed out")

def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)
    ensure_secret_key(app.config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    os.makedirs(app.instance_path, exist_ok=True)
    db.init_app(app)

    with app.app_context():
        db.create_all()

    from .controllers.auth_controller import auth_bp
    from .controllers.patient_controller import patient_bp
    from .controllers.doctor_controller import doctor_bp
    from .services.auth_service import get_current_session, on_session_change
    from .cli import register_commands

    app.register_blueprint(auth_bp)
    app.register_blueprint(patient_bp)
    app.register_blueprint(doctor_bp)

    register_commands(app)
    on_session_change(_log_session_change)

    @app.context_processor
    def inject_navigation():
        return {
            "current_session": get_current_session(),
            "current_path": request.path,
        }

    return app
