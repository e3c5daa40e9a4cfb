"""
Generic query/mutation gateway over the named relations of the booking
database.

Views address data by relation name rather than by ORM model, and ask for
embedded related rows with a nested column spec::

    gateway.select(
        "doctors",
        columns=("id", "name", {"health_centers": ("name", "city")}),
        order_by=("name",),
    )

Rows come back as plain dicts (embedded rows as nested dicts or ``None``).
Filters are ``(column, operator, value)`` tuples; ordering entries are either
a column name (ascending) or a ``(column, ascending)`` pair. String values
for date/time/number columns are parsed the way the database would parse
them, and rejected with the database's wording when malformed.

Every mutation is checked against the row-level ``AccessPolicy`` of the
acting identity. Rejected inserts raise ``PolicyViolationError``; rows an
identity may not update are skipped silently, so the update reports fewer
affected rows.
"""

import logging
from datetime import date, time
from decimal import Decimal, InvalidOperation

from sqlalchemy import Date, Integer, Numeric, Time
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from telehealth.extensions import db
from telehealth.exceptions import DataAccessError, NotFoundError, PolicyViolationError, UnknownRelationError
from telehealth.models.appointment import Appointment
from telehealth.models.doctor import Doctor
from telehealth.models.health_center import HealthCenter
from telehealth.models.profile import Profile
from telehealth.models.user_role import UserRole
from telehealth.services.access_policy import AccessPolicy

logger = logging.getLogger(__name__)

RELATIONS = {
    "profiles": Profile,
    "doctors": Doctor,
    "health_centers": HealthCenter,
    "appointments": Appointment,
    "user_roles": UserRole,
}

# parent relation -> embedded relation -> relationship attribute on the parent model
EMBEDS = {
    "doctors": {"health_centers": "health_center"},
    "appointments": {"doctors": "doctor", "profiles": "patient"},
}

OPERATORS = {
    "eq": lambda column, value: column == value,
    "neq": lambda column, value: column != value,
    "gt": lambda column, value: column > value,
    "gte": lambda column, value: column >= value,
    "lt": lambda column, value: column < value,
    "lte": lambda column, value: column <= value,
    "in": lambda column, value: column.in_(value),
}


class DataGateway:
    def __init__(self, identity_id=None, service_role=False):
        self.identity_id = identity_id
        self.policy = AccessPolicy(identity_id=identity_id, service_role=service_role)

    # region Reads
    def select(self, relation, columns=None, filters=(), order_by=(), limit=None):
        names, embeds = self._split_columns(relation, columns)

        query = self._filtered(relation, filters)
        query = query.options(*self._load_options(relation, embeds))

        for entry in order_by:
            column_name, ascending = (entry, True) if isinstance(entry, str) else entry
            column = self._column(relation, column_name)
            query = query.order_by(column.asc() if ascending else column.desc())

        if limit is not None:
            query = query.limit(limit)

        try:
            rows = query.all()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise self._failure(relation, "select", e)

        logger.debug("Selected %d %s row(s) as %s", len(rows), relation, self.identity_id)
        return [self._serialize(relation, row, names, embeds) for row in rows]

    def select_one(self, relation, columns=None, filters=(), order_by=()):
        rows = self.select(relation, columns=columns, filters=filters, order_by=order_by, limit=2)
        if not rows:
            raise NotFoundError(relation)
        if len(rows) > 1:
            raise DataAccessError(f"more than one {relation} row matched the given filters", relation=relation)
        return rows[0]
    # endregion

    # region Mutations
    def insert(self, relation, fields):
        model = self._model(relation)
        values = {name: self._coerce(relation, name, value) for name, value in fields.items()}

        if not self.policy.can_insert(relation, values):
            logger.warning("Insert into %s rejected by access policy for %s", relation, self.identity_id)
            raise PolicyViolationError(relation)

        row = model(**values)
        try:
            db.session.add(row)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise self._failure(relation, "insert", e)

        logger.info("Inserted %s row as %s", relation, self.identity_id)
        names, _ = self._split_columns(relation, None)
        return self._serialize(relation, row, names, {})

    def update(self, relation, fields, filters):
        values = {name: self._coerce(relation, name, value) for name, value in fields.items()}

        try:
            rows = self._filtered(relation, filters).all()
            updated = 0
            for row in rows:
                if not self.policy.can_update(relation, row):
                    continue
                for name, value in values.items():
                    setattr(row, name, value)
                if not self.policy.can_update(relation, row):
                    db.session.rollback()
                    raise PolicyViolationError(relation)
                updated += 1
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise self._failure(relation, "update", e)

        logger.info("Updated %d %s row(s) (%s) as %s", updated, relation, ", ".join(values), self.identity_id)
        return updated
    # endregion

    # region Helpers
    def _model(self, relation):
        try:
            return RELATIONS[relation]
        except KeyError:
            raise UnknownRelationError(relation) from None

    def _column(self, relation, name):
        model = self._model(relation)
        if name not in model.__table__.columns:
            raise DataAccessError(f'column {relation}.{name} does not exist', relation=relation)
        return getattr(model, name)

    def _split_columns(self, relation, columns):
        model = self._model(relation)
        if columns is None:
            return [column.key for column in model.__table__.columns], {}

        names, embeds = [], {}
        for item in columns:
            if isinstance(item, dict):
                embeds.update(item)
            else:
                self._column(relation, item)
                names.append(item)

        for child in embeds:
            self._embed_attribute(relation, child)
        return names, embeds

    def _embed_attribute(self, relation, child):
        try:
            return EMBEDS[relation][child]
        except KeyError:
            raise DataAccessError(
                f"could not find a relationship between '{relation}' and '{child}'", relation=relation
            ) from None

    def _load_options(self, relation, embeds, parent=None):
        model = self._model(relation)
        options = []
        for child, child_columns in embeds.items():
            attribute = getattr(model, self._embed_attribute(relation, child))
            loader = joinedload(attribute) if parent is None else parent.joinedload(attribute)
            options.append(loader)

            _, nested = self._split_columns(child, child_columns)
            options.extend(self._load_options(child, nested, loader))
        return options

    def _filtered(self, relation, filters):
        query = self._model(relation).query
        for column_name, op, value in filters:
            column = self._column(relation, column_name)
            if op not in OPERATORS:
                raise DataAccessError(f"unsupported filter operator '{op}'", relation=relation)
            if op == "in":
                value = [self._coerce(relation, column_name, item) for item in value]
            else:
                value = self._coerce(relation, column_name, value)
            query = query.filter(OPERATORS[op](column, value))
        return query

    def _coerce(self, relation, name, value):
        self._column(relation, name)
        column = self._model(relation).__table__.columns[name]
        if not isinstance(value, str):
            return value

        column_type = column.type
        try:
            if isinstance(column_type, Date):
                return date.fromisoformat(value)
            if isinstance(column_type, Time):
                return time.fromisoformat(value)
            if isinstance(column_type, Integer):
                return int(value)
            if isinstance(column_type, Numeric):
                return Decimal(value)
        except (ValueError, InvalidOperation):
            raise DataAccessError(
                f'invalid input syntax for type {column_type.__visit_name__}: "{value}"', relation=relation
            ) from None
        return value

    def _serialize(self, relation, row, names, embeds):
        data = {name: getattr(row, name) for name in names}
        for child, child_columns in embeds.items():
            related = getattr(row, self._embed_attribute(relation, child))
            if related is None:
                data[child] = None
            else:
                child_names, child_embeds = self._split_columns(child, child_columns)
                data[child] = self._serialize(child, related, child_names, child_embeds)
        return data

    def _failure(self, relation, operation, error):
        message = str(getattr(error, "orig", None) or error)
        logger.warning("%s on %s failed: %s", operation.capitalize(), relation, message)
        return DataAccessError(message, relation=relation)
    # endregion
