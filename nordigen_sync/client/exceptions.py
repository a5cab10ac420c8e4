"""Custom exceptions for the Nordigen sync core."""

from typing import Optional, Dict, Any, Mapping


class NordigenSyncError(Exception):
    """Base exception for all nordigen-sync errors."""
    pass


class NordigenAPIError(NordigenSyncError):
    """Base class for failures reported by the aggregation API."""

    default_message = "Nordigen API error"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        response_data: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        self.response_data = response_data or {}
        super().__init__(message or self._message_from_response())

    def _message_from_response(self) -> str:
        summary = self.response_data.get("summary")
        detail = self.response_data.get("detail")
        if summary and detail:
            return f"{self.default_message}: {summary} ({detail})"
        if summary or detail:
            return f"{self.default_message}: {summary or detail}"
        return self.default_message


class InvalidInputDataError(NordigenAPIError):
    """Raised when the API rejects request data (400)."""
    default_message = "Invalid input data"


class InvalidTokenError(NordigenAPIError):
    """Raised when the access token is invalid or expired (401)."""
    default_message = "Invalid Nordigen token"


class AccessDeniedError(NordigenAPIError):
    """Raised when access to the resource is denied (403)."""
    default_message = "Access denied"


class NotFoundError(NordigenAPIError):
    """Raised when resource is not found (404)."""
    default_message = "Resource not found"


class ResourceSuspendedError(NordigenAPIError):
    """Raised when the resource is suspended (409)."""
    default_message = "Resource suspended"


class RateLimitError(NordigenAPIError):
    """Raised when rate limit is exceeded (429)."""
    default_message = "Rate limit exceeded"


class UnknownError(NordigenAPIError):
    """Raised when the API fails with an unspecified error (500)."""
    default_message = "Unknown Nordigen error"


class ServiceError(NordigenAPIError):
    """Raised when the API or the institution is unavailable (503)."""
    default_message = "Nordigen service error"


class TransportError(NordigenSyncError):
    """Base class for failures before a response is received."""
    pass


class TimeoutError(TransportError):
    """Raised when request times out."""
    pass


class ConnectionError(TransportError):
    """Raised when connection fails."""
    pass


class RequisitionNotLinked(NordigenSyncError):
    """Raised when a requisition has not reached the linked state."""

    def __init__(self, requisition_status: Optional[str] = None):
        super().__init__(f"Requisition not linked (status: {requisition_status})")
        self.requisition_status = requisition_status


class AccountNotLinkedToRequisition(NordigenSyncError):
    """Raised when an account is not part of the requisition's account list."""

    def __init__(self, account_id: str, requisition_id: str):
        super().__init__(
            f"Account {account_id} is not linked to requisition {requisition_id}"
        )
        self.account_id = account_id
        self.requisition_id = requisition_id


class MissingBalanceError(NordigenSyncError):
    """Raised when the balance type used for reconciliation is not reported."""

    def __init__(self, balance_type: str):
        super().__init__(f"No balance of type '{balance_type}' reported")
        self.balance_type = balance_type


ERROR_CLASSES = {
    400: InvalidInputDataError,
    401: InvalidTokenError,
    403: AccessDeniedError,
    404: NotFoundError,
    409: ResourceSuspendedError,
    429: RateLimitError,
    500: UnknownError,
    503: ServiceError,
}


def create_nordigen_error(
    status_code: int,
    response_data: Optional[Dict[str, Any]] = None,
) -> Optional[NordigenAPIError]:
    """Create the typed error for a reported status code, if it is one."""
    error_class = ERROR_CLASSES.get(status_code)
    if error_class is None:
        return None
    return error_class(status_code=status_code, response_data=response_data)


def handle_nordigen_error(response: Optional[Mapping[str, Any]]) -> None:
    """Raise the typed error for a response's ``status_code``.

    Responses without a ``status_code``, or with one outside the known set,
    pass through untouched.
    """
    if not response:
        return

    status_code = response.get("status_code")
    if status_code is None:
        return

    try:
        status_code = int(status_code)
    except (TypeError, ValueError):
        return

    error = create_nordigen_error(status_code, dict(response))
    if error is not None:
        raise error
