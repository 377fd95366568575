"""
app.services._shared.ports
==========================

Collection of *ports* (hexagonal interfaces) that define the contracts
for token signing and media storage.

These ports decouple the service layer from concrete implementations of
JWT handling and file hosting.

Modules
-------
- :mod:`token_provider`:
    Defines :class:`~.TokenProvider`, abstraction for signing access tokens
    and signing/verifying refresh tokens, plus :class:`~.TokenError`.

- :mod:`media_uploader`:
    Defines :class:`~.MediaUploader` and :class:`~.UploadedMedia`,
    abstraction for pushing temporary uploads to durable storage.

Design Notes
------------
Concrete adapters (PyJWT, local disk, Cloudinary) implement these interfaces
under ``app.infra``. The ``Stub*`` classes are in-memory doubles for tests.
"""

from __future__ import annotations

from .media_uploader import MediaUploader, StubMediaUploader, UploadedMedia

# Re-export core interfaces for clean imports
from .token_provider import (
    InvalidTokenError,
    StubTokenProvider,
    TokenError,
    TokenProvider,
)

__all__ = [
    "TokenProvider",
    "TokenError",
    "InvalidTokenError",
    "StubTokenProvider",
    "MediaUploader",
    "UploadedMedia",
    "StubMediaUploader",
]
