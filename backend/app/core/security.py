"""Stateless password hashing capability.

Credential checks operate on the stored hash, never on a loaded record, so
services can verify passwords without methods bound to the ORM model.
"""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash


def hash_password(raw: str) -> str:
    """
    Return a salted one-way hash for ``raw``.

    :param raw: Plain text password.
    :type raw: str
    :returns: Hash string suitable for storage.
    :rtype: str
    :raises ValueError: If ``raw`` is empty or not a string.
    """
    if not isinstance(raw, str) or not raw:
        raise ValueError("Password must be a non-empty string.")
    return generate_password_hash(raw)


def verify_password(password_hash: str | None, raw: str | None) -> bool:
    """
    Check a plain text candidate against a stored hash.

    :param password_hash: Stored hash (``None`` or empty never matches).
    :type password_hash: str | None
    :param raw: Plain text candidate.
    :type raw: str | None
    :returns: ``True`` when the candidate matches.
    :rtype: bool
    """
    if not password_hash or not raw:
        return False
    # ``check_password_hash`` is untyped; coerce to bool for mypy.
    return bool(check_password_hash(password_hash, raw))
