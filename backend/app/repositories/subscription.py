"""Subscription repository: channel aggregation over subscription rows."""

from __future__ import annotations

from typing import Any

from sqlalchemy import exists, false, func, select
from sqlalchemy.engine import RowMapping

from app.models.subscription import Subscription
from app.models.user import User
from app.repositories.base import BaseRepository


class SubscriptionRepository(BaseRepository[Subscription]):
    """Read-mostly repository for :class:`Subscription` rows."""

    model = Subscription

    def channel_profile(self, username: str, viewer_id: int | None) -> RowMapping | None:
        """Aggregate a channel's public profile in one statement.

        The channel is matched by lowercased username. Subscriber and
        subscription totals are correlated counts over ``subscriptions``;
        ``is_subscribed`` is true iff ``viewer_id`` follows the channel.

        :param username: Channel handle (normalized before matching).
        :type username: str
        :param viewer_id: Requesting user; ``None`` never counts as subscribed.
        :type viewer_id: int | None
        :returns: Row mapping with ``full_name``, ``username``,
            ``subscribers_count``, ``channels_subscribed_to_count``,
            ``is_subscribed``, ``avatar``, ``cover_image`` and ``email``,
            or ``None`` when no channel matches.
        :rtype: RowMapping | None
        """
        subscribers = (
            select(func.count(Subscription.id))
            .where(Subscription.channel_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        subscribed_to = (
            select(func.count(Subscription.id))
            .where(Subscription.subscriber_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        is_subscribed: Any
        if viewer_id is None:
            is_subscribed = false()
        else:
            is_subscribed = (
                exists()
                .where(
                    Subscription.channel_id == User.id,
                    Subscription.subscriber_id == viewer_id,
                )
                .correlate(User)
            )

        stmt = (
            select(
                User.full_name,
                User.username,
                subscribers.label("subscribers_count"),
                subscribed_to.label("channels_subscribed_to_count"),
                is_subscribed.label("is_subscribed"),
                User.avatar,
                User.cover_image,
                User.email,
            )
            .where(User.username == username.strip().lower())
            .limit(1)
        )
        return self.session.execute(stmt).mappings().first()
