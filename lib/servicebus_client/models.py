from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from .errors_utils import json_or_raw

LOCATION_HEADER = "Location"
BROKER_PROPERTIES_HEADER = "BrokerProperties"


@dataclass
class QueueMessage:
    body: Any
    location: str | None
    properties: Any

    @property
    def message_id(self) -> str | None:
        return self._property("MessageId")

    @property
    def lock_token(self) -> str | None:
        return self._property("LockToken")

    def _property(self, key: str) -> str | None:
        if isinstance(self.properties, dict):
            value = self.properties.get(key)
            return str(value) if value is not None else None
        return None

    @classmethod
    def from_response(cls, response: httpx.Response) -> "QueueMessage":
        return cls(
            body=json_or_raw(response.text),
            location=response.headers.get(LOCATION_HEADER),
            properties=json_or_raw(response.headers.get(BROKER_PROPERTIES_HEADER)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"body": self.body, "location": self.location, "properties": self.properties}
