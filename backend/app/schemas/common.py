"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, pre_load


class InputSchema(Schema):
    """Base for request payloads: unknown keys are dropped, blanks become ``None``.

    Required-ness is enforced by the services so that every flow reports
    its own error message.
    """

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def blank_to_none(self, data: Any, **_: Any) -> Any:
        if not hasattr(data, "items"):
            return data
        return {k: (None if isinstance(v, str) and not v.strip() else v) for k, v in data.items()}


class ApiResponseSchema(Schema):
    """Success envelope wrapped around every non-error payload."""

    status_code = fields.Integer(required=True, data_key="statusCode")
    data = fields.Raw(allow_none=True)
    message = fields.String(required=True)
    success = fields.Boolean(required=True)


def build_envelope(data: Any, message: str, status_code: int) -> dict[str, Any]:
    """Return the envelope mapping; ``success`` follows the status code."""

    return ApiResponseSchema().dump(
        {
            "status_code": int(status_code),
            "data": data,
            "message": message,
            "success": int(status_code) < 400,
        }
    )
