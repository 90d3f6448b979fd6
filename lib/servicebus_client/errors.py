from __future__ import annotations

from typing import Any


class ServiceBusClientError(Exception):
    """Base client error."""


class ConfigurationError(ServiceBusClientError, ValueError):
    """Missing or invalid client configuration."""


class InvalidQueueName(ServiceBusClientError, ValueError):
    """Queue name that cannot be placed into a request path."""


class TransportError(ServiceBusClientError):
    """Transport layer failure that is not classified further."""


class NetworkError(TransportError):
    """Connection, TLS or timeout failure raised by httpx."""


class ServerError(TransportError):
    def __init__(self, status_code: int, message: str, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ApiError(ServiceBusClientError):
    def __init__(self, status_code: int, message: str, details: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class UnauthorizedError(ApiError):
    """401, 403 and 404 responses."""


class ValidationError(ApiError):
    def __init__(self, status_code: int, message: str, errors: Any = None, details: str | None = None):
        super().__init__(status_code, message, details)
        self.errors = errors


class TooManyRequestsError(ApiError):
    """Throttled by the service."""


class OperationTimeout(ServiceBusClientError):
    def __init__(self, output: Any = None, message: str = "operation did not succeed before the timeout"):
        super().__init__(message)
        self.output = output


class OperationCancelled(ServiceBusClientError):
    def __init__(self, output: Any = None, message: str = "operation was cancelled"):
        super().__init__(message)
        self.output = output
