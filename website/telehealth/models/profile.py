from telehealth.extensions import db

class Profile(db.Model):
    __tablename__ = "profiles"

    id = db.Column(db.String(36), db.ForeignKey("users.id"), primary_key=True)
    full_name = db.Column(db.String(150), nullable=True)
    phone = db.Column(db.String(40), nullable=True)

    user = db.relationship("User", back_populates="profile", uselist=False)
    appointments = db.relationship("Appointment", back_populates="patient")

    def __repr__(self):
        return f"<Profile {self.id}, {self.full_name}>"
