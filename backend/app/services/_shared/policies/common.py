"""Input policies shared by services."""

from __future__ import annotations

import re

from app.services._shared.errors import ValidationFailedError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_blank(value: str | None) -> bool:
    """Return True if the value is missing or only whitespace."""
    return value is None or not str(value).strip()


def ensure_required(*values: str | None, message: str = "All fields are required") -> None:
    """Raise :class:`ValidationFailedError` when any value is blank."""
    if any(is_blank(v) for v in values):
        raise ValidationFailedError(message)


def is_valid_email(value: str) -> bool:
    """Check the ``local@domain.tld`` shape (no whitespace, one ``@``)."""
    return EMAIL_PATTERN.match(value.strip()) is not None


def ensure_email(value: str) -> None:
    if not is_valid_email(value):
        raise ValidationFailedError("Invalid email address")
