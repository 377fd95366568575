"""Integration tests for account endpoints and channel profiles."""

from __future__ import annotations

import io

import pytest
from app.models.user import User
from tests.factories.subscription import SubscriptionFactory
from tests.factories.user import UserFactory
from tests.helpers.assertions import assert_envelope, assert_problem, assert_sanitized_user
from tests.helpers.auth import bearer, expired_token, issue_token

BASE = "/api/v1/users"


@pytest.fixture()
def me(app, session):
    """A committed user plus a valid access token for it."""
    user = UserFactory(username="me", email="me@example.com", full_name="Me Myself")
    session.commit()
    user_id = user.id
    with app.app_context():
        token = issue_token(user_id)
    return {"id": user_id, "token": token}


class TestCurrentUser:
    def test_returns_sanitized_record(self, client, me):
        resp = client.get(f"{BASE}/current-user", headers=bearer(me["token"]))

        assert resp.status_code == 200
        user = assert_envelope(resp.get_json(), status=200)
        assert_sanitized_user(user)
        assert user["id"] == me["id"]
        assert user["fullName"] == "Me Myself"

    def test_access_token_from_cookie(self, client, me):
        resp = client.get(f"{BASE}/current-user", headers={"Cookie": f"accessToken={me['token']}"})
        assert resp.status_code == 200

    def test_missing_token_is_401(self, client, session):
        resp = client.get(f"{BASE}/current-user")
        assert_problem(resp, status=401, detail="Unauthorized request")

    def test_expired_token_is_401(self, app, client, me):
        with app.app_context():
            token = expired_token(me["id"])
        resp = client.get(f"{BASE}/current-user", headers=bearer(token))
        assert_problem(resp, status=401, detail="Access token has expired")

    def test_garbage_token_is_401(self, client, session):
        resp = client.get(f"{BASE}/current-user", headers=bearer("not.a.jwt"))
        assert_problem(resp, status=401)


class TestUpdateAccount:
    def test_updates_name_and_email(self, client, me):
        resp = client.patch(
            f"{BASE}/update-account",
            headers=bearer(me["token"]),
            json={"fullName": "Renamed", "email": "Renamed@Example.com"},
        )

        assert resp.status_code == 200
        user = assert_envelope(resp.get_json(), status=200, message="Account details updated successfully")
        assert user["fullName"] == "Renamed"
        assert user["email"] == "renamed@example.com"

    def test_both_fields_required(self, client, me):
        resp = client.patch(
            f"{BASE}/update-account", headers=bearer(me["token"]), json={"fullName": "Only Name"}
        )
        assert_problem(resp, status=400, detail="All fields are required")

    def test_email_taken_is_409(self, client, me, session):
        UserFactory(email="taken@example.com")
        session.commit()

        resp = client.patch(
            f"{BASE}/update-account",
            headers=bearer(me["token"]),
            json={"fullName": "X", "email": "taken@example.com"},
        )
        assert_problem(resp, status=409, detail="Email is already in use")


class TestImages:
    def test_update_avatar(self, client, uploader, me):
        resp = client.patch(
            f"{BASE}/avatar",
            headers=bearer(me["token"]),
            data={"avatar": (io.BytesIO(b"img"), "face.png")},
            content_type="multipart/form-data",
        )

        assert resp.status_code == 200
        user = assert_envelope(resp.get_json(), status=200, message="Avatar image updated successfully")
        assert user["avatar"].endswith("face.png")
        assert len(uploader.uploaded) == 1

    def test_update_cover_image(self, client, me):
        resp = client.patch(
            f"{BASE}/cover-image",
            headers=bearer(me["token"]),
            data={"coverImage": (io.BytesIO(b"img"), "banner.png")},
            content_type="multipart/form-data",
        )

        assert resp.status_code == 200
        assert resp.get_json()["data"]["coverImage"].endswith("banner.png")

    def test_avatar_file_missing_is_400(self, client, me):
        resp = client.patch(f"{BASE}/avatar", headers=bearer(me["token"]), data={})
        assert_problem(resp, status=400, detail="Avatar file is missing")

    def test_cover_upload_failure_is_500(self, client, uploader, me):
        uploader.fail = True
        resp = client.patch(
            f"{BASE}/cover-image",
            headers=bearer(me["token"]),
            data={"coverImage": (io.BytesIO(b"img"), "banner.png")},
            content_type="multipart/form-data",
        )
        assert_problem(resp, status=500, detail="Error while uploading cover image")


class TestChannelProfile:
    @pytest.fixture()
    def channel(self, session, me):
        """'studio' has three subscribers (one of them ``me``) and follows one channel."""
        channel = UserFactory(username="studio", full_name="The Studio")
        viewer = session.get(User, me["id"])
        SubscriptionFactory(subscriber=viewer, channel=channel)
        for fan in UserFactory.create_batch(2):
            SubscriptionFactory(subscriber=fan, channel=channel)
        SubscriptionFactory(subscriber=channel, channel=UserFactory())
        session.commit()
        return "studio"

    def test_profile_as_subscriber(self, client, me, channel):
        resp = client.get(f"{BASE}/c/{channel}", headers=bearer(me["token"]))

        assert resp.status_code == 200
        data = assert_envelope(resp.get_json(), status=200, message="User channel fetched successfully")
        assert data["username"] == "studio"
        assert data["fullName"] == "The Studio"
        assert data["subscribersCount"] == 3
        assert data["channelsSubscribedToCount"] == 1
        assert data["isSubscribed"] is True
        assert "password" not in data and "refreshToken" not in data

    def test_profile_as_outsider(self, app, client, channel, session):
        outsider = UserFactory()
        session.commit()
        outsider_id = outsider.id
        with app.app_context():
            token = issue_token(outsider_id)

        resp = client.get(f"{BASE}/c/STUDIO", headers=bearer(token))

        assert resp.status_code == 200
        assert resp.get_json()["data"]["isSubscribed"] is False

    def test_unknown_channel_is_404(self, client, me):
        resp = client.get(f"{BASE}/c/nobody", headers=bearer(me["token"]))
        assert_problem(resp, status=404, detail="Channel does not exist")

    def test_requires_auth(self, client, session):
        resp = client.get(f"{BASE}/c/studio")
        assert resp.status_code == 401
