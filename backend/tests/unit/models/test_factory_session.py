"""Factories persist into the per-test transactional session."""

from app.models.user import User
from tests.factories import SQLAlchemySession
from tests.factories.subscription import SubscriptionFactory
from tests.factories.user import UserFactory


def test_factories_use_the_current_test_session(session):
    assert SQLAlchemySession.get() is session

    user = UserFactory(username="flushed")

    # Flushed on create, so the primary key is already assigned
    assert user.id is not None
    assert session.get(User, user.id) is user


def test_subscription_factory_links_fresh_users(session):
    sub = SubscriptionFactory()

    assert sub.subscriber_id != sub.channel_id
    assert session.get(User, sub.subscriber_id) is not None
    assert session.get(User, sub.channel_id) is not None
