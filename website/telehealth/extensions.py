from blinker import Namespace
from flask_sqlalchemy import SQLAlchemy

class DatabaseSingleton:
    _instance = None

    @staticmethod
    def get_instance():
        if DatabaseSingleton._instance is None:
            DatabaseSingleton._instance = SQLAlchemy()
        return DatabaseSingleton._instance

db = DatabaseSingleton.get_instance()

signals = Namespace()

# Sent with the identity id (or None) whenever someone signs in or out.
session_changed = signals.signal("session-changed")
