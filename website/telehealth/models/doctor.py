import uuid

from telehealth.extensions import db

class Doctor(db.Model):
    __tablename__ = "doctors"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True, unique=True)
    name = db.Column(db.String(150), nullable=False)
    specialization = db.Column(db.String(150), nullable=False)
    years_of_experience = db.Column(db.Integer, nullable=True)
    consultation_fee = db.Column(db.Numeric(10, 2), nullable=True)
    email = db.Column(db.String(120), nullable=True)
    phone = db.Column(db.String(40), nullable=True)
    health_center_id = db.Column(db.String(36), db.ForeignKey("health_centers.id"), nullable=True)

    health_center = db.relationship("HealthCenter", back_populates="doctors", uselist=False)
    appointments = db.relationship("Appointment", back_populates="doctor")

    def __repr__(self):
        return f"<Doctor {self.name}, {self.specialization}>"
