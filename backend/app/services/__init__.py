"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`app.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``app.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Registration (from ``app.services.registration``)
    * :class:`UserRegistrationService`, :class:`UserRegistrationIn`

- Authentication (from ``app.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`LoginIn`, :class:`RefreshIn`, :class:`TokenPairOut`,
      :class:`LoginOut`, :class:`AuthTokenConfig`

- Identity (from ``app.services.identity``)
    * :class:`IdentityService`
    * DTOs: :class:`AccountUpdateIn`, :class:`PasswordChangeIn`, :class:`UserPublicOut`

- Channels (from ``app.services.channels``)
    * :class:`ChannelService`, :class:`ChannelProfileOut`
"""

from __future__ import annotations

# Base primitives (service base + request-scoped context)
from ._shared.base import BaseService, ServiceContext

# Authentication service + DTOs
from .auth.dto import AuthTokenConfig, LoginIn, LoginOut, RefreshIn, TokenPairOut
from .auth.service import AuthService

# Channel profile service + DTO
from .channels.dto import ChannelProfileOut
from .channels.service import ChannelService

# Identity service + DTOs
from .identity.dto import AccountUpdateIn, PasswordChangeIn, UserPublicOut
from .identity.service import IdentityService

# Registration service + DTO
from .registration.dto import UserRegistrationIn
from .registration.service import UserRegistrationService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Registration
    "UserRegistrationService",
    "UserRegistrationIn",
    # Auth
    "AuthService",
    "LoginIn",
    "RefreshIn",
    "TokenPairOut",
    "LoginOut",
    "AuthTokenConfig",
    # Identity
    "IdentityService",
    "AccountUpdateIn",
    "PasswordChangeIn",
    "UserPublicOut",
    # Channels
    "ChannelService",
    "ChannelProfileOut",
]
