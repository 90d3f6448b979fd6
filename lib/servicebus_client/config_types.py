from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import ConfigurationError

DEFAULT_RECEIVE_TIMEOUT_S = 4
DEFAULT_REQUEST_TIMEOUT_S = 10.0


@dataclass(frozen=True)
class ClientConfig:
    base_uri: str
    sas_key_name: str
    sas_key_value: str
    timeout: int = DEFAULT_RECEIVE_TIMEOUT_S
    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S

    def __post_init__(self) -> None:
        if not self.base_uri:
            raise ConfigurationError("No baseUri provided.")
        if not self.sas_key_name:
            raise ConfigurationError("No sasKeyName provided.")
        if not self.sas_key_value:
            raise ConfigurationError("No sasKeyValue provided.")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ClientConfig":
        """Build a config from the option names used by the service docs.

        Recognised keys: ``baseUri``, ``sasKeyName``, ``sasKeyValue`` and the
        optional ``timeout`` (receive timeout in seconds, default 4).
        """
        timeout = data.get("timeout")
        if timeout is None:
            timeout = DEFAULT_RECEIVE_TIMEOUT_S
        try:
            timeout = int(timeout)
        except (TypeError, ValueError) as e:
            raise ConfigurationError("Invalid timeout provided.") from e
        return cls(
            base_uri=str(data.get("baseUri") or ""),
            sas_key_name=str(data.get("sasKeyName") or ""),
            sas_key_value=str(data.get("sasKeyValue") or ""),
            timeout=timeout,
        )
