import logging
import re
from dataclasses import dataclass

from flask import current_app, session

from telehealth.exceptions import DataAccessError
from telehealth.extensions import db, session_changed
from telehealth.models.roles import RoleEnum
from telehealth.models.user import User
from telehealth.services.data_gateway import DataGateway

logger = logging.getLogger(__name__)

EMAIL_REGEX = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
MIN_PASSWORD_LENGTH = 6

@dataclass(frozen=True)
class Session:
    user_id: str
    email: str

def is_valid_email(email):
    return re.match(EMAIL_REGEX, email) is not None

# region Session
def get_current_session():
    """Return the signed-in identity, or None when there is no usable session."""
    user_id = session.get("user_id")
    if not user_id:
        return None

    user = db.session.get(User, user_id)
    if user is None:
        session.clear()
        return None

    return Session(user_id=user.id, email=user.email)

def on_session_change(callback):
    """Call ``callback(sender, user_id=...)`` on every sign-in and sign-out."""
    session_changed.connect(callback, weak=False)
    return callback

def sign_in(user):
    session.clear()
    session["user_id"] = user.id
    session_changed.send(current_app._get_current_object(), user_id=user.id)

def sign_out():
    had_session = session.get("user_id") is not None
    session.clear()
    if had_session:
        session_changed.send(current_app._get_current_object(), user_id=None)
# endregion

# region Identities
def register_user(email, password, full_name, phone=None):
    email = (email or "").strip().lower()

    if not is_valid_email(email):
        return None, "Please enter a valid email address."

    if len(password or "") < MIN_PASSWORD_LENGTH:
        return None, f"Password must be at least {MIN_PASSWORD_LENGTH} characters."

    if User.query.filter_by(email=email).first():
        return None, "Email already registered."

    user = User(email=email)
    user.set_password(password)

    db.session.add(user)
    db.session.commit()

    gateway = DataGateway(identity_id=user.id)
    try:
        gateway.insert("profiles", {"id": user.id, "full_name": full_name, "phone": phone})
        gateway.insert("user_roles", {"user_id": user.id, "role": RoleEnum.PATIENT.value})
    except DataAccessError as e:
        return None, f"Error creating profile: {e.message}"

    logger.info("Registered patient %s", user.id)
    return user, None

def authenticate_user(email, password):
    email = (email or "").strip().lower()
    user = User.query.filter_by(email=email).first()

    if not user or not user.check_password(password or ""):
        logger.info("Failed sign-in for %s", email)
        return None, "Invalid login credentials."

    return user, None

def has_role(user_id, role):
    try:
        rows = DataGateway(identity_id=user_id).select(
            "user_roles",
            columns=("role",),
            filters=(("user_id", "eq", user_id), ("role", "eq", role.value)),
        )
    except DataAccessError:
        logger.warning("Role lookup failed for %s", user_id)
        return False
    return bool(rows)
# endregion
