"""
ChannelService
==============

Read-only service exposing a user's public channel profile.
"""

from __future__ import annotations

from app.repositories.subscription import SubscriptionRepository
from app.services._shared.base import BaseService
from app.services._shared.errors import NotFoundError
from app.services._shared.policies.common import ensure_required
from app.services.channels.dto import ChannelProfileOut


class ChannelService(BaseService):
    """Aggregate subscription counts for a channel as seen by a viewer."""

    def get_channel_profile(
        self, username: str | None, viewer_id: int | None = None
    ) -> ChannelProfileOut:
        """
        Return the channel profile for ``username``.

        :param username: Channel handle, matched case-insensitively.
        :type username: str | None
        :param viewer_id: Requester used for ``is_subscribed``; defaults to the
            context actor. Anonymous viewers are never subscribed.
        :type viewer_id: int | None
        :returns: Profile with subscriber / subscribed-to counts.
        :rtype: ChannelProfileOut
        :raises ValidationFailedError: If ``username`` is blank.
        :raises NotFoundError: If no channel matches.
        """
        ensure_required(username, message="username is missing")
        if viewer_id is None:
            viewer_id = self.ctx.actor_id

        with self.ro_uow() as uow:
            repo: SubscriptionRepository = uow.subscriptions
            row = repo.channel_profile(str(username), viewer_id)
            if row is None:
                raise NotFoundError("Channel does not exist")
            return ChannelProfileOut.from_row(row)
