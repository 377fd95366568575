"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP. Every error carries an :class:`ErrorKind` tag; the HTTP
status is assigned only at the boundary (``app/core/errors.py``).
"""

from __future__ import annotations

from enum import Enum

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name; SQLite reports the offending
    ``table.column``, so ``uq_users_email`` also matches ``users.email``.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    name = constraint_name.lower()
    if name in message:
        return True
    if name.startswith("uq_"):
        table, _, column = name[3:].partition("_")
        return f"{table}.{column}" in message
    return False


class ErrorKind(Enum):
    """Closed set of failure categories a service may report."""

    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories or domain logic.
    - The API layer translates ``kind`` into a status code.
    """

    kind: ErrorKind = ErrorKind.VALIDATION
    default_message = "Invalid request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class ValidationFailedError(ServiceError):
    """Raised when input is missing or malformed."""

    kind = ErrorKind.VALIDATION
    default_message = "All fields are required"


class UnauthorizedError(ServiceError):
    """Raised for bad credentials or an invalid, expired or reused token."""

    kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized request"


class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key; omitted for a bare message.
    :type key: str | int | None
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, key: str | int | None = None) -> None:
        self.entity = entity
        self.key = key
        super().__init__(entity if key is None else f"{entity} not found: {key}")


class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Client-facing explanation, used as the message.
    :type detail: str
    """

    kind = ErrorKind.CONFLICT

    def __init__(self, entity: str, detail: str) -> None:
        self.entity = entity
        self.detail = detail
        super().__init__(detail)


class InternalError(ServiceError):
    """Raised when persistence, signing or an upload fails unexpectedly."""

    kind = ErrorKind.INTERNAL
    default_message = "Something went wrong"


class UploadFailedError(InternalError):
    """Raised when the media uploader returns no hosted URL."""

    default_message = "File upload failed"
