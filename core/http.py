"""JSON request helpers shared by the API views."""

import json
from typing import Optional

from django.http import HttpRequest

from core.exceptions import ValidationError

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def parse_json_body(request: HttpRequest) -> dict:
    """
    Decode a JSON object from the request body.

    An empty body decodes to {}. Form POSTs (urlencoded or multipart) are
    accepted too.

    Raises:
        ValidationError: The body is not a JSON object.
    """
    if request.content_type in FORM_CONTENT_TYPES:
        return request.POST.dict()
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise ValidationError("Request body must be valid JSON.")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data


def parse_id(value, field_name: str) -> int:
    """
    Coerce a primary key taken from a body or query string.

    Raises:
        ValidationError: ``value`` is not a whole number.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"{field_name} must be a whole number.")


def get_text(data: dict, name: str, default: Optional[str] = "") -> Optional[str]:
    """Return ``data[name]`` as a string; missing or null gives ``default``."""
    value = data.get(name)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string.")
    return value
