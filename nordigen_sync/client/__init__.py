"""HTTP client module for the Nordigen API."""

from nordigen_sync.client.http_client import HTTPClient
from nordigen_sync.client.nordigen_client import NordigenClient
from nordigen_sync.client.exceptions import (
    NordigenSyncError,
    NordigenAPIError,
    InvalidInputDataError,
    InvalidTokenError,
    AccessDeniedError,
    NotFoundError,
    ResourceSuspendedError,
    RateLimitError,
    UnknownError,
    ServiceError,
    TransportError,
    TimeoutError,
    ConnectionError,
    RequisitionNotLinked,
    AccountNotLinkedToRequisition,
    MissingBalanceError,
    create_nordigen_error,
    handle_nordigen_error,
)

__all__ = [
    "HTTPClient",
    "NordigenClient",
    "NordigenSyncError",
    "NordigenAPIError",
    "InvalidInputDataError",
    "InvalidTokenError",
    "AccessDeniedError",
    "NotFoundError",
    "ResourceSuspendedError",
    "RateLimitError",
    "UnknownError",
    "ServiceError",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "RequisitionNotLinked",
    "AccountNotLinkedToRequisition",
    "MissingBalanceError",
    "create_nordigen_error",
    "handle_nordigen_error",
]
