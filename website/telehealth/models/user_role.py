from telehealth.extensions import db
from telehealth.models.roles import RoleEnum

class UserRole(db.Model):
    __tablename__ = "user_roles"

    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), primary_key=True)
    role = db.Column(db.String(20), primary_key=True, default=RoleEnum.PATIENT.value)

    user = db.relationship("User", back_populates="roles")

    def __repr__(self):
        return f"<UserRole {self.user_id}: {self.role}>"
