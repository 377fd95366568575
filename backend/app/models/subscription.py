"""Subscription edge between a subscriber and a channel (both users)."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class Subscription(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    A user (``subscriber``) following another user's channel.

    Rows are only read by the channel profile aggregation; no API flow
    creates or removes them.

    Fields
    ------
    subscriber_id : int
        FK to ``users.id``; the follower.
    channel_id : int
        FK to ``users.id``; the followed channel.
    """

    __tablename__ = "subscriptions"

    subscriber_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    channel_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_subscriber_channel"),
        CheckConstraint("subscriber_id <> channel_id", name="no_self_subscription"),
        Index("ix_subscriptions_channel_id", "channel_id"),
        Index("ix_subscriptions_subscriber_id", "subscriber_id"),
    )
