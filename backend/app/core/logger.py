"""Structured logging configuration with request correlation.

Every record leaves the process as one JSON line carrying the request id of
the HTTP request that produced it. Services log through :func:`bind_logger`
so their records keep the request and actor ids even when emitted outside a
request context (CLI seeding, background work, unit tests).
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = ("X-Request-ID", "X-Correlation-ID")

# Client-supplied ids end up in every log line; anything else is replaced
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

# Attributes passed through ``extra=`` that are promoted into the JSON payload
EXTRA_KEYS = ("endpoint", "elapsed_ms", "user_id", "actor_id", "status")


class JSONFormatter(logging.Formatter):
    """Render log records as JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for key in EXTRA_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp the current request id on records that do not carry one yet."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = ensure_request_id() if has_request_context() else None
        return True


class ContextAdapter(logging.LoggerAdapter):
    """Logger adapter whose bound fields sit under the call's own ``extra``."""

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        kwargs["extra"] = {**(self.extra or {}), **(kwargs.get("extra") or {})}
        return msg, kwargs


def bind_logger(name: str, **fields: Any) -> ContextAdapter:
    """Return a logger for ``name`` that adds ``fields`` to every record.

    ``None`` values are dropped so that :class:`RequestIdFilter` can still fill
    in the request id from the active request.
    """

    bound = {key: value for key, value in fields.items() if value is not None}
    return ContextAdapter(logging.getLogger(name), bound)


def _incoming_request_id() -> str | None:
    for header in CORRELATION_HEADERS:
        value = (request.headers.get(header) or "").strip()
        if value and _REQUEST_ID_RE.match(value):
            return value
    return None


def ensure_request_id() -> str:
    """Return the current request identifier, generating one when necessary.

    A correlation header from the client is reused when it looks like an
    identifier; malformed values are ignored and a fresh UUID is issued.
    """

    if not has_request_context():
        return str(uuid4())
    if "request_id" not in g:
        g.request_id = _incoming_request_id() or str(uuid4())
    return g.request_id


def configure_logging(level: str | int = "INFO") -> None:
    """Configure the root logger with JSON-formatted stdout output."""

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    level_value: int | str = level
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level_value = resolved if isinstance(resolved, int) else level.upper()
    root.setLevel(level_value)


def init_app(app: Flask) -> None:
    """Inject request-id middleware and attach filters to the app logger."""

    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _seed_request_id() -> None:  # pragma: no cover - integration glue
        ensure_request_id()

    @app.after_request
    def _inject_response_header(response):  # pragma: no cover - integration glue
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = ["bind_logger", "configure_logging", "init_app", "ensure_request_id", "JSONFormatter"]
