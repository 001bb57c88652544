from __future__ import annotations

from typing import Any, Dict, Type, TypeVar

from flask import request
from pydantic import BaseModel, ValidationError

from storefront.app.common.errors import abort_json

M = TypeVar("M", bound=BaseModel)


def get_json() -> Dict[str, Any]:
    if not request.is_json:
        abort_json(400, "invalid_json", "Request must be application/json")
    data = request.get_json(silent=True)
    if data is None or not isinstance(data, dict):
        abort_json(400, "invalid_json", "Malformed JSON body")
    return data


def field_errors(err: ValidationError) -> Dict[str, str]:
    """Flatten pydantic errors into {"a.b": "message"}; first message per field wins."""
    fields: Dict[str, str] = {}
    for e in err.errors():
        loc = ".".join(str(p) for p in e["loc"]) or "__root__"
        msg = e["msg"]
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        fields.setdefault(loc, msg)
    return fields


def validate(schema: Type[M], data: Dict[str, Any]) -> M:
    try:
        return schema.model_validate(data)
    except ValidationError as err:
        abort_json(400, "validation_error", "Invalid request body", {"fields": field_errors(err)})


def parse_body(schema: Type[M]) -> M:
    """Validate the JSON request body against a pydantic schema."""
    return validate(schema, get_json())
