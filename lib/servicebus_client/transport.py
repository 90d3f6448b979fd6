from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from .config_types import ClientConfig
from .errors import NetworkError, ServerError
from .errors_utils import classify_client_error

logger = logging.getLogger(__name__)

USER_AGENT = "servicebus-client/0.1.0"
JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
RAW_BODY_KEY = "body"


def normalize_base_uri(base_uri: str) -> str:
    return base_uri.rstrip("/") + "/"


@dataclass(frozen=True)
class RequestOutcome:
    """Result of a single request; each call gets its own."""

    response: httpx.Response

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.response.headers

    @property
    def text(self) -> str:
        return self.response.text

    @property
    def content(self) -> bytes:
        return self.response.content

    def as_json(self) -> Any:
        """Decoded body, or ``False`` when the body is empty or not JSON."""
        if not self.response.content:
            return False
        try:
            return json.loads(self.response.content)
        except ValueError:
            return False

    def as_response(self) -> httpx.Response:
        return self.response


class Transport:
    def __init__(self, cfg: ClientConfig, *, transport: httpx.BaseTransport | None = None):
        self._cfg = cfg
        headers = {
            "User-Agent": USER_AGENT,
            "Content-Type": JSON_CONTENT_TYPE,
            "Accept": JSON_CONTENT_TYPE,
        }
        self._client = httpx.Client(
            base_url=normalize_base_uri(cfg.base_uri),
            timeout=cfg.request_timeout_s,
            headers=headers,
            follow_redirects=False,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def get(self, path: str, params: Mapping[str, Any] | None = None, headers: Mapping[str, str] | None = None):
        return self.request("GET", path, params, headers)

    def post(self, path: str, params: Mapping[str, Any] | None = None, headers: Mapping[str, str] | None = None):
        return self.request("POST", path, params, headers)

    def put(self, path: str, params: Mapping[str, Any] | None = None, headers: Mapping[str, str] | None = None):
        return self.request("PUT", path, params, headers)

    def patch(self, path: str, params: Mapping[str, Any] | None = None, headers: Mapping[str, str] | None = None):
        return self.request("PATCH", path, params, headers)

    def delete(self, path: str, params: Mapping[str, Any] | None = None, headers: Mapping[str, str] | None = None):
        return self.request("DELETE", path, params, headers)

    def request(
            self,
            method: str,
            path: str,
            params: Mapping[str, Any] | None = None,
            headers: Mapping[str, str] | None = None,
    ) -> RequestOutcome:
        """Send one request and return its outcome.

        ``params`` is the query string for GET. For other verbs a ``"body"``
        key is sent as the raw request body, anything else is form-encoded.
        4xx responses raise a classified ``ApiError``; 5xx responses raise
        ``ServerError`` and connection failures ``NetworkError``.
        """
        method = method.upper()
        req_headers = httpx.Headers(headers or {})
        options: dict[str, Any] = {}
        if params:
            if method == "GET":
                options["params"] = dict(params)
            elif RAW_BODY_KEY in params:
                options["content"] = params[RAW_BODY_KEY]
            else:
                options["data"] = dict(params)
                if "content-type" not in req_headers:
                    req_headers["Content-Type"] = FORM_CONTENT_TYPE

        try:
            r = self._client.request(method, path, headers=req_headers, **options)
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise NetworkError(str(e)) from e

        logger.debug("%s %s -> %s", method, path, r.status_code)

        if 400 <= r.status_code < 500:
            logger.warning("%s %s rejected with %s", method, path, r.status_code)
            raise classify_client_error(r.status_code, r.text)
        if r.status_code >= 500:
            raise ServerError(r.status_code, f"{method} {path} failed with {r.status_code}", r.text)

        return RequestOutcome(r)
