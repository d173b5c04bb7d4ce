"""Exceptions raised by the data-access layer.

Lookups that match nothing are not errors: they return ``None`` or ``[]``.
Anything the database rejects surfaces as a ``DataAccessError`` carrying the
underlying SQLAlchemy exception as ``__cause__``.
"""

from typing import Optional


class DataAccessError(Exception):
    """The database rejected a statement or could not be reached."""

    def __init__(self, message: str, statement: Optional[str] = None):
        super().__init__(message)
        self.statement = statement


class ConstraintViolationError(DataAccessError):
    """An integrity constraint failed (duplicate email, unknown owner, ...)."""
