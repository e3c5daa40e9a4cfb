import os
import warnings

from dotenv import load_dotenv

load_dotenv()

INSECURE_SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"

def ensure_secret_key(config):
    """Fill in the insecure development key, with a warning, when none is configured."""
    if not config.get("SECRET_KEY"):
        warnings.warn(
            "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
        )
        config["SECRET_KEY"] = INSECURE_SECRET_KEY

class Config:
    SECRET_KEY = os.getenv("SECRET_KEY")

    # Falls back to a SQLite file inside the Flask instance folder
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///telehealth.sqlite")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    UPCOMING_APPOINTMENTS_LIMIT = int(os.getenv("UPCOMING_APPOINTMENTS_LIMIT", "5"))
