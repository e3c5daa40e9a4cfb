import uuid

from telehealth.extensions import db

class HealthCenter(db.Model):
    __tablename__ = "health_centers"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(200), nullable=False)
    city = db.Column(db.String(120), nullable=False)
    state = db.Column(db.String(120), nullable=True)

    doctors = db.relationship("Doctor", back_populates="health_center")

    def __repr__(self):
        return f"<HealthCenter {self.name}, {self.city}>"
