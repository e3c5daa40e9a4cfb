"""
Row-level access rules applied by the data gateway on every mutation.

Each rule receives the acting identity id and either the candidate field
mapping (inserts) or the ORM row (updates) and answers whether the write is
allowed. Relations without a rule are read-only for signed-in identities;
only a gateway opened with ``service_role=True`` (CLI seeding) may write them.
"""

from telehealth.models.roles import RoleEnum


def _own_appointment(identity_id, appointment):
    if appointment.patient_id == identity_id:
        return True
    doctor = appointment.doctor
    return doctor is not None and doctor.user_id is not None and doctor.user_id == identity_id


def _insert_appointment(identity_id, fields):
    return fields.get("patient_id") == identity_id


def _insert_profile(identity_id, fields):
    return fields.get("id") == identity_id


def _insert_user_role(identity_id, fields):
    # Self-service sign-up may only ever grant the patient role
    return fields.get("user_id") == identity_id and fields.get("role") == RoleEnum.PATIENT.value


INSERT_RULES = {
    "appointments": _insert_appointment,
    "profiles": _insert_profile,
    "user_roles": _insert_user_role,
}

UPDATE_RULES = {
    "appointments": _own_appointment,
    "profiles": lambda identity_id, profile: profile.id == identity_id,
}


class AccessPolicy:
    def __init__(self, identity_id=None, service_role=False):
        self.identity_id = identity_id
        self.service_role = service_role

    def can_insert(self, relation, fields):
        if self.service_role:
            return True
        rule = INSERT_RULES.get(relation)
        if rule is None or self.identity_id is None:
            return False
        return rule(self.identity_id, fields)

    def can_update(self, relation, row):
        if self.service_role:
            return True
        rule = UPDATE_RULES.get(relation)
        if rule is None or self.identity_id is None:
            return False
        return rule(self.identity_id, row)
