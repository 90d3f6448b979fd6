from __future__ import annotations

import json
from typing import Any

from .errors import ApiError, TooManyRequestsError, UnauthorizedError, ValidationError

UNAUTHORIZED_STATUSES = (401, 403, 404)


def parse_json(text: str | None) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def json_or_raw(text: str | None) -> Any:
    """Decoded JSON when ``text`` parses, otherwise ``text`` unchanged."""
    if not text:
        return text
    try:
        return json.loads(text)
    except ValueError:
        return text


def classify_client_error(status_code: int, text: str | None) -> ApiError:
    # 404 is reported as unauthorized as well
    if status_code in UNAUTHORIZED_STATUSES:
        return UnauthorizedError(status_code, f"unauthorized ({status_code})")
    if status_code == 422:
        return ValidationError(status_code, "validation failed", errors=parse_json(text), details=text)
    if status_code == 429:
        return TooManyRequestsError(status_code, "too many requests")
    return ApiError(status_code, f"request failed with {status_code}", text)
