# app/infra/media/local_uploader.py
from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from uuid import uuid4

from app.services._shared.ports import MediaUploader, UploadedMedia

log = logging.getLogger(__name__)


@dataclass(slots=True)
class LocalMediaUploader(MediaUploader):
    """
    Store uploads on the local filesystem under ``root``.

    Files are renamed to a random hex stem (keeping the extension) and served
    back by the ``/media/<filename>`` endpoint, whose prefix is ``base_url``.
    """

    root: str
    base_url: str

    def upload(self, local_path: str) -> UploadedMedia | None:
        if not local_path or not os.path.isfile(local_path):
            log.warning("Upload skipped, file not found: %s", local_path)
            return None

        _, ext = os.path.splitext(local_path)
        name = f"{uuid4().hex}{ext.lower()}"
        try:
            os.makedirs(self.root, exist_ok=True)
            shutil.move(local_path, os.path.join(self.root, name))
        except OSError:
            log.error("Local media store failed for %s", local_path, exc_info=True)
            return None
        finally:
            if os.path.exists(local_path):
                os.remove(local_path)

        return UploadedMedia(url=f"{self.base_url.rstrip('/')}/{name}", public_id=name)
