# app/infra/media/cloudinary_uploader.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from app.services._shared.ports import MediaUploader, UploadedMedia

log = logging.getLogger(__name__)


@dataclass(slots=True)
class CloudinaryMediaUploader(MediaUploader):
    """
    Push files to Cloudinary through the official SDK.

    Credentials travel with each call instead of the SDK's global config, so
    several apps (or tests) in one process never share an account. The
    resource type is detected by Cloudinary (``auto``). The local file is
    always removed after the attempt.
    """

    cloud_name: str
    api_key: str
    api_secret: str
    timeout: int = 30

    def _options(self) -> dict[str, Any]:
        return {
            "resource_type": "auto",
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self.api_secret,
            "timeout": self.timeout,
        }

    def upload(self, local_path: str) -> UploadedMedia | None:
        if not local_path or not os.path.isfile(local_path):
            log.warning("Upload skipped, file not found: %s", local_path)
            return None

        try:
            body = cloudinary.uploader.upload(local_path, **self._options())
        except CloudinaryError:
            log.error("Cloudinary upload failed for %s", local_path, exc_info=True)
            return None
        finally:
            if os.path.exists(local_path):
                os.remove(local_path)

        url = body.get("secure_url") or body.get("url")
        if not url:
            log.error("Cloudinary response without URL for %s", local_path)
            return None
        return UploadedMedia(url=url, public_id=body.get("public_id"))
