"""Factory Boy definition for :class:`app.models.subscription.Subscription`."""

from __future__ import annotations

from app.models.subscription import Subscription

import factory
from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class SubscriptionFactory(BaseFactory):
    """Build a subscriber -> channel edge; both ends default to new users."""

    class Meta:
        model = Subscription

    id = None
    subscriber_id = factory.LazyAttribute(lambda o: o.subscriber.id)
    channel_id = factory.LazyAttribute(lambda o: o.channel.id)

    class Params:
        subscriber = factory.SubFactory(UserFactory)
        channel = factory.SubFactory(UserFactory)
