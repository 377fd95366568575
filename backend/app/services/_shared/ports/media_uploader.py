from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True, slots=True)
class UploadedMedia:
    """
    Hosted asset returned by an uploader.

    :param url: Public URL of the stored file.
    :type url: str
    :param public_id: Provider-side identifier, when the provider has one.
    :type public_id: str | None
    """

    url: str
    public_id: str | None = None


class MediaUploader(Protocol):
    """
    Port for pushing a local temporary file to durable media storage.

    Implementations must remove ``local_path`` once the attempt is over,
    whatever its outcome, and return ``None`` instead of raising when the
    provider rejects the file or is unreachable.
    """

    def upload(self, local_path: str) -> UploadedMedia | None: ...


@dataclass
class StubMediaUploader(MediaUploader):
    """In-memory uploader used in tests; records every path it receives."""

    base_url: str = "https://media.test"
    fail: bool = False
    fail_paths: set[str] = field(default_factory=set)
    uploaded: list[str] = field(default_factory=list)

    def upload(self, local_path: str) -> UploadedMedia | None:
        self.uploaded.append(local_path)
        if os.path.exists(local_path):
            os.remove(local_path)
        if self.fail or local_path in self.fail_paths:
            return None
        name = os.path.basename(local_path)
        return UploadedMedia(url=f"{self.base_url}/{name}", public_id=name)
