"""DTOs for ChannelService."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ChannelProfileOut:
    """
    Public channel profile with subscription aggregates.

    :param full_name: Channel owner's display name.
    :type full_name: str
    :param username: Channel handle.
    :type username: str
    :param subscribers_count: Users subscribed to this channel.
    :type subscribers_count: int
    :param channels_subscribed_to_count: Channels this user subscribes to.
    :type channels_subscribed_to_count: int
    :param is_subscribed: Whether the viewer subscribes to this channel.
    :type is_subscribed: bool
    :param avatar: Hosted avatar URL.
    :type avatar: str
    :param cover_image: Hosted cover URL or empty string.
    :type cover_image: str
    :param email: Channel owner's email.
    :type email: str
    """

    full_name: str
    username: str
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool
    avatar: str
    cover_image: str
    email: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> ChannelProfileOut:
        return cls(
            full_name=row["full_name"],
            username=row["username"],
            subscribers_count=int(row["subscribers_count"] or 0),
            channels_subscribed_to_count=int(row["channels_subscribed_to_count"] or 0),
            is_subscribed=bool(row["is_subscribed"]),
            avatar=row["avatar"],
            cover_image=row["cover_image"] or "",
            email=row["email"],
        )
