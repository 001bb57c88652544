"""JSON error envelope shared by every API response.

Services raise `ApiError` (usually through `abort_json`) and the factory's
error handlers turn it into::

    {"error": {"code": ..., "message": ..., "details": {...}, "request_id": ...}}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

VALIDATION_ERROR = "validation_error"
INVALID_JSON = "invalid_json"
UNAUTHORIZED = "unauthorized"
FORBIDDEN = "forbidden"
NOT_FOUND = "not_found"
METHOD_NOT_ALLOWED = "method_not_allowed"
CONFLICT = "conflict"
INTERNAL_ERROR = "internal_error"
HTTP_ERROR = "http_error"

# Codes for errors raised by Flask/Werkzeug rather than by our services.
STATUS_CODES = {
    401: UNAUTHORIZED,
    403: FORBIDDEN,
    404: NOT_FOUND,
    405: METHOD_NOT_ALLOWED,
    409: CONFLICT,
    500: INTERNAL_ERROR,
}


def code_for_status(status_code: int) -> str:
    return STATUS_CODES.get(status_code, HTTP_ERROR)


@dataclass
class ApiError(Exception):
    status_code: int
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def to_dict(self, request_id: str | None = None) -> Dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details or {},
                "request_id": request_id,
            }
        }


def abort_json(status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None) -> None:
    raise ApiError(status_code=status_code, code=code, message=message, details=details)
