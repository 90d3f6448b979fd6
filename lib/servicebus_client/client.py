from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any, TypeVar
from urllib.parse import quote

import httpx

from .config_types import ClientConfig
from .errors import InvalidQueueName
from .models import QueueMessage
from .polling import retry
from .signing import generate_sas_token
from .transport import RequestOutcome, Transport, normalize_base_uri

T = TypeVar("T")

# entity path, optionally followed by a subqueue such as /$DeadLetterQueue
_QUEUE_NAME_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9._/-]*[A-Za-z0-9._-])?(?:/\$[A-Za-z]+)?$")


def validate_queue_name(queue_name: str) -> str:
    name = (queue_name or "").strip()
    if not name or not _QUEUE_NAME_RE.match(name) or "//" in name:
        raise InvalidQueueName(f"invalid queue name: {queue_name!r}")
    return name


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class ServiceBusClient:
    """Send, receive, unlock and delete messages on Service Bus queues."""

    def __init__(self, cfg: ClientConfig, *, transport: httpx.BaseTransport | None = None):
        self._cfg = cfg
        self._base_uri = normalize_base_uri(cfg.base_uri)
        self._timeout = cfg.timeout
        self._t = Transport(cfg, transport=transport)

    def __enter__(self) -> "ServiceBusClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._t.close()

    @property
    def timeout(self) -> int:
        return self._timeout

    def set_timeout(self, timeout: int) -> "ServiceBusClient":
        """Set the receive timeout (seconds) used by later peek/read calls."""
        self._timeout = int(timeout)
        return self

    def get_auth_header(self, path: str) -> str:
        """SAS token for ``path`` relative to the configured base URI."""
        return generate_sas_token(self._base_uri + path, self._cfg.sas_key_name, self._cfg.sas_key_value)

    def retry(self, timeout_s: float, operation: Callable[[], T], **kwargs: Any) -> T:
        return retry(timeout_s, operation, **kwargs)

    def _signed(self, method: str, path: str, params: dict[str, Any] | None = None) -> RequestOutcome:
        headers = {"Authorization": self.get_auth_header(path)}
        return self._t.request(method, path, params, headers)

    # --- queue operations ---
    def send_message(self, queue_name: str, body: Any) -> bool:
        """Send ``body`` to the queue; ``True`` when the service answers 201.

        ``str`` and ``bytes`` bodies are sent as-is, anything else is JSON-encoded.
        """
        queue = validate_queue_name(queue_name)
        if not isinstance(body, (str, bytes)):
            body = json.dumps(body)
        outcome = self._signed("POST", f"{queue}/messages", {"body": body})
        return outcome.status_code == 201

    def peek(self, queue_name: str, raw_response: bool = False) -> QueueMessage | httpx.Response | None:
        """Peek-lock the head message without removing it.

        Returns ``None`` when the queue is empty (204), the raw response when
        ``raw_response`` is set, otherwise a ``QueueMessage``.
        """
        queue = validate_queue_name(queue_name)
        outcome = self._signed("POST", f"{queue}/messages/head?timeout={int(self._timeout)}")
        return self._message_result(outcome, raw_response)

    def destructive_read(self, queue_name: str, raw_response: bool = False) -> QueueMessage | httpx.Response | None:
        """Receive and delete the head message. Same return shape as ``peek``."""
        queue = validate_queue_name(queue_name)
        outcome = self._signed("DELETE", f"{queue}/messages/head")
        return self._message_result(outcome, raw_response)

    def unlock_message(self, queue_name: str, message_id: str, lock_token: str) -> bool:
        queue = validate_queue_name(queue_name)
        outcome = self._signed("PUT", f"{queue}/messages/{_segment(message_id)}/{_segment(lock_token)}")
        return outcome.status_code == 200

    def delete_message(self, queue_name: str, message_id: str, lock_token: str) -> bool:
        queue = validate_queue_name(queue_name)
        outcome = self._signed("DELETE", f"{queue}/messages/{_segment(message_id)}/{_segment(lock_token)}")
        return outcome.status_code == 200

    @staticmethod
    def _message_result(outcome: RequestOutcome, raw_response: bool) -> QueueMessage | httpx.Response | None:
        if raw_response:
            return outcome.as_response()
        if outcome.status_code == 204:
            return None
        return QueueMessage.from_response(outcome.as_response())
