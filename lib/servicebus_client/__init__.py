from .client import ServiceBusClient
from .config_types import ClientConfig
from .errors import (
    ApiError,
    ConfigurationError,
    InvalidQueueName,
    NetworkError,
    OperationCancelled,
    OperationTimeout,
    ServerError,
    ServiceBusClientError,
    TooManyRequestsError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from .models import QueueMessage
from .polling import retry
from .signing import generate_sas_token

__all__ = [
    "ServiceBusClient",
    "ClientConfig",
    "QueueMessage",
    "retry",
    "generate_sas_token",
    "ServiceBusClientError",
    "ConfigurationError",
    "InvalidQueueName",
    "TransportError",
    "NetworkError",
    "ServerError",
    "ApiError",
    "UnauthorizedError",
    "ValidationError",
    "TooManyRequestsError",
    "OperationTimeout",
    "OperationCancelled",
]
