"""Idempotent demo data for local development environments."""

from __future__ import annotations

import logging
from typing import Any, TypeVar, cast

from app.models.subscription import Subscription
from app.models.user import User
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select
from sqlalchemy.orm import Session

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

DEMO_AVATAR_URL = "https://placehold.co/256x256/png"

USER_FIXTURES: list[dict[str, str]] = [
    {
        "email": "alex.martinez@example.com",
        "username": "alexm",
        "full_name": "Alex Martinez",
        "password": "devPass123!",
    },
    {
        "email": "jamie.lee@example.com",
        "username": "jamielee",
        "full_name": "Jamie Lee",
        "password": "strongPass123",
    },
    {
        "email": "sara.kim@example.com",
        "username": "sarak",
        "full_name": "Sara Kim",
        "password": "watchMore2024",
    },
    {
        "email": "maria.garcia@example.com",
        "username": "mariag",
        "full_name": "Maria Garcia",
        "password": "channelPass!9",
    },
]

# (subscriber, channel) pairs by username.
SUBSCRIPTION_FIXTURES: list[tuple[str, str]] = [
    ("jamielee", "alexm"),
    ("sarak", "alexm"),
    ("mariag", "alexm"),
    ("alexm", "sarak"),
    ("mariag", "sarak"),
]


def _session(database: SQLAlchemy) -> Session:
    """Return the current SQLAlchemy session."""
    return cast(Session, database.session)


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def _get_or_create(
    session: Session,
    model: type[T],
    *,
    defaults: dict[str, Any] | None = None,
    **filters: Any,
) -> tuple[T, bool]:
    """Fetch ``model`` by ``filters`` or create it using ``defaults``."""
    instance = session.execute(select(model).filter_by(**filters)).scalar_one_or_none()
    if instance is not None:
        return instance, False
    params = dict(defaults or {})
    params.update(filters)
    instance = cast(T, model(**params))
    session.add(instance)
    return instance, True


def seed_users(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create the demo accounts; existing ones keep their password."""
    if verbose:
        LOGGER.info("Seeding users...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    for fixture in USER_FIXTURES:
        user, created = _get_or_create(
            session,
            User,
            defaults={
                "username": fixture["username"],
                "full_name": fixture["full_name"],
                "avatar": DEMO_AVATAR_URL,
            },
            email=fixture["email"],
        )
        if created:
            user.password = fixture["password"]
        session.flush()
        _touch(summary, "users", created)
        if verbose:
            LOGGER.debug("user %s %s", user.username, "created" if created else "exists")

    session.commit()
    return summary


def seed_subscriptions(
    database: SQLAlchemy, *, verbose: bool = False
) -> dict[str, dict[str, int]]:
    """Subscribe demo users to each other; requires :func:`seed_users` first."""
    if verbose:
        LOGGER.info("Seeding subscriptions...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    ids = {
        username: user_id
        for username, user_id in session.execute(
            select(User.username, User.id).where(
                User.username.in_({name for pair in SUBSCRIPTION_FIXTURES for name in pair})
            )
        )
    }
    for subscriber, channel in SUBSCRIPTION_FIXTURES:
        if subscriber not in ids or channel not in ids:
            raise RuntimeError(f"Seed user missing for subscription {subscriber}->{channel}")
        _, created = _get_or_create(
            session,
            Subscription,
            subscriber_id=ids[subscriber],
            channel_id=ids[channel],
        )
        _touch(summary, "subscriptions", created)

    session.commit()
    return summary


def run_all(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Run all seeders in foreign-key order."""
    if verbose:
        LOGGER.info("Running demo seed pipeline...")
    combined: dict[str, dict[str, int]] = {}
    for func in (seed_users, seed_subscriptions):
        result = func(database, verbose=verbose)
        for table, counters in result.items():
            entry = combined.setdefault(table, {"created": 0, "existing": 0})
            entry["created"] += counters.get("created", 0)
            entry["existing"] += counters.get("existing", 0)
    return combined


__all__ = ["seed_users", "seed_subscriptions", "run_all"]
