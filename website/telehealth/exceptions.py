"""
Errors raised by the data gateway.

Views catch ``DataAccessError`` at the request boundary and turn it into a
flashed message; nothing in here should reach the user as a 500.
"""

class DataAccessError(Exception):
    """Base exception for every failed gateway call."""

    def __init__(self, message, relation=None):
        self.message = message
        self.relation = relation
        super().__init__(message)


class UnknownRelationError(DataAccessError):
    """The relation name is not registered with the gateway."""

    def __init__(self, relation):
        super().__init__(f'relation "{relation}" does not exist', relation=relation)


class NotFoundError(DataAccessError):
    """A single-row select matched no row."""

    def __init__(self, relation):
        super().__init__(f"no {relation} row matched the given filters", relation=relation)


class PolicyViolationError(DataAccessError):
    """An insert was rejected by the row-level access policy."""

    def __init__(self, relation):
        super().__init__(
            f'new row violates row-level security policy for table "{relation}"',
            relation=relation,
        )
