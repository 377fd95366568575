"""Unit tests for SubscriptionRepository channel aggregation."""

import pytest
from app.repositories.subscription import SubscriptionRepository
from tests.factories.subscription import SubscriptionFactory
from tests.factories.user import UserFactory


class TestSubscriptionRepository:
    @pytest.fixture()
    def repo(self, session):
        return SubscriptionRepository(session=session)

    @pytest.fixture()
    def channel(self, session):
        """A channel with three subscribers that itself follows one channel."""
        channel = UserFactory(username="creator", full_name="Creator")
        fans = UserFactory.create_batch(3)
        for fan in fans:
            SubscriptionFactory(subscriber=fan, channel=channel)
        SubscriptionFactory(subscriber=channel, channel=UserFactory())
        return channel, fans

    def test_profile_aggregates(self, repo, channel):
        creator, fans = channel

        row = repo.channel_profile("Creator", fans[0].id)

        assert row is not None
        assert row["username"] == "creator"
        assert row["full_name"] == "Creator"
        assert row["subscribers_count"] == 3
        assert row["channels_subscribed_to_count"] == 1
        assert bool(row["is_subscribed"]) is True
        assert row["email"] == creator.email
        assert row["avatar"] == creator.avatar
        assert row["cover_image"] == ""

    def test_viewer_not_subscribed(self, repo, channel):
        outsider = UserFactory()
        row = repo.channel_profile("creator", outsider.id)
        assert bool(row["is_subscribed"]) is False

    def test_anonymous_viewer_is_never_subscribed(self, repo, channel):
        row = repo.channel_profile("creator", None)
        assert bool(row["is_subscribed"]) is False

    def test_channel_without_edges(self, repo, session):
        loner = UserFactory(username="loner")
        row = repo.channel_profile("loner", loner.id)
        assert row["subscribers_count"] == 0
        assert row["channels_subscribed_to_count"] == 0
        assert bool(row["is_subscribed"]) is False

    def test_unknown_channel(self, repo, session):
        assert repo.channel_profile("ghost", None) is None
