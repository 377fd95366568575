"""Factory Boy definition for :class:`app.models.user.User`."""

from __future__ import annotations

from app.models.user import User

import factory
from tests.factories import BaseFactory

DEFAULT_PASSWORD = "Passw0rd!"


class UserFactory(BaseFactory):
    """
    Build persisted :class:`app.models.user.User` instances.

    Notes
    -----
    - Every account carries a hosted avatar URL; the cover image is optional
      and stored as an empty string when absent.
    - ``refresh_token`` starts empty (logged out).
    """

    class Meta:
        model = User

    id = None  # let autoincrement handle it
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    username = factory.Sequence(lambda n: f"user{n}")
    full_name = factory.Faker("name")
    avatar = factory.LazyAttribute(lambda o: f"https://media.test/{o.username}-avatar.png")
    cover_image = ""
    password_hash = factory.LazyFunction(lambda: "")  # set via postgen

    @factory.post_generation
    def password(obj, create, extracted, **kwargs):
        """Set password using model setter (ensures hashing)."""
        value = extracted or DEFAULT_PASSWORD
        obj.password = value
