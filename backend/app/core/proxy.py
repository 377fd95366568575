"""WSGI proxy middleware configuration helper."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Apply :class:`werkzeug.middleware.proxy_fix.ProxyFix` when enabled.

    Secure auth cookies depend on the request scheme, so behind a TLS
    terminating proxy the forwarded ``X-Forwarded-Proto`` must be honoured.

    Notes
    -----
    Controlled by ``USE_PROXYFIX`` (default ``True``); ``PROXYFIX_HOPS``
    sets how many proxies are trusted (default ``1``).
    """
    if not app.config.get("USE_PROXYFIX", True):
        return
    hops = int(app.config.get("PROXYFIX_HOPS", 1))
    app.wsgi_app = ProxyFix(  # type: ignore[method-assign]
        app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops, x_prefix=hops
    )
