"""User resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields

from .common import InputSchema


class AccountUpdateSchema(InputSchema):
    """Payload for updating account details."""

    full_name = fields.String(load_default=None, allow_none=True, data_key="fullName")
    email = fields.String(load_default=None, allow_none=True)


class UserSchema(Schema):
    """Sanitized representation of a user; no password or refresh token."""

    id = fields.Integer(required=True)
    username = fields.String(required=True)
    email = fields.String(required=True)
    full_name = fields.String(required=True, data_key="fullName")
    avatar = fields.String(required=True)
    cover_image = fields.String(dump_default="", data_key="coverImage")
    created_at = fields.DateTime(allow_none=True, data_key="createdAt")
    updated_at = fields.DateTime(allow_none=True, data_key="updatedAt")


class ChannelProfileSchema(Schema):
    """Public channel profile with subscription aggregates."""

    full_name = fields.String(required=True, data_key="fullName")
    username = fields.String(required=True)
    subscribers_count = fields.Integer(required=True, data_key="subscribersCount")
    channels_subscribed_to_count = fields.Integer(
        required=True, data_key="channelsSubscribedToCount"
    )
    is_subscribed = fields.Boolean(required=True, data_key="isSubscribed")
    avatar = fields.String(required=True)
    cover_image = fields.String(dump_default="", data_key="coverImage")
    email = fields.String(required=True)
