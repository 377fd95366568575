"""Unit tests for the filesystem media uploader."""

from __future__ import annotations

import os

from app.infra.media.local_uploader import LocalMediaUploader


def test_moves_file_under_root(tmp_path):
    src = tmp_path / "incoming" / "Photo.PNG"
    src.parent.mkdir()
    src.write_bytes(b"img")
    uploader = LocalMediaUploader(root=str(tmp_path / "media"), base_url="/api/v1/media/")

    media = uploader.upload(str(src))

    assert media is not None
    assert media.url == f"/api/v1/media/{media.public_id}"
    assert media.public_id.endswith(".png")
    assert not src.exists()
    assert os.path.isfile(tmp_path / "media" / media.public_id)


def test_missing_file_returns_none(tmp_path):
    uploader = LocalMediaUploader(root=str(tmp_path / "media"), base_url="/media")
    assert uploader.upload(str(tmp_path / "nope.png")) is None
