from typing import Dict, Any, Optional
from urllib.parse import urljoin
import httpx

from nordigen_sync.config.logging import get_logger, mask_sensitive_data
from nordigen_sync.config.settings import settings
from nordigen_sync.client.exceptions import TimeoutError, ConnectionError

logger = get_logger(__name__)


class HTTPClient:
    """HTTP client wrapper for the Nordigen API.

    Failed responses are not raised here: the decoded body is returned with
    the HTTP ``status_code`` merged in, and callers map it through
    ``handle_nordigen_error``. Transport failures raise immediately.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize HTTP client.

        Args:
            base_url: Base URL for API requests
            timeout: Request timeout in seconds
            client: Optional pre-built httpx client (used by tests)
        """
        self.base_url = base_url or settings.nordigen_base_url
        if not self.base_url.endswith("/"):
            self.base_url += "/"
        self.timeout = timeout or settings.nordigen_timeout

        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={
                "User-Agent": "nordigen-sync/0.1.0",
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            follow_redirects=True,
        )

        logger.info(f"HTTP client initialized with base URL: {self.base_url}")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
        logger.debug("HTTP client closed")

    def _build_url(self, endpoint: str) -> str:
        """Build full URL from endpoint."""
        return urljoin(self.base_url, endpoint.lstrip('/'))

    def _sanitize_for_logging(self, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Sanitize sensitive data for logging."""
        if not data:
            return {}

        sensitive_fields = [
            "authorization", "token", "secret", "key", "access", "refresh",
            "iban", "bban", "owner",
        ]

        sanitized = {}
        for key, value in data.items():
            key_lower = key.lower()
            if any(field in key_lower for field in sensitive_fields):
                if isinstance(value, str):
                    sanitized[key] = mask_sensitive_data(value)
                else:
                    sanitized[key] = "[MASKED]"
            else:
                sanitized[key] = value

        return sanitized

    @staticmethod
    def _decode(response: httpx.Response) -> Dict[str, Any]:
        """Decode a response body into a dictionary."""
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            return {"content": response.text}
        if isinstance(data, dict):
            return data
        return {"content": data}

    async def request(
        self,
        method: str,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Make HTTP request to API endpoint.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            headers: Optional headers to include
            json: Optional JSON data to send
            params: Optional query parameters

        Returns:
            Response data as dictionary; carries ``status_code`` when the
            request was not successful

        Raises:
            TimeoutError: When request times out
            ConnectionError: When connection fails
        """
        url = self._build_url(endpoint)
        request_headers = headers or {}

        log_data = {
            "method": method,
            "url": url,
            "headers": self._sanitize_for_logging(request_headers),
            "params": params,
        }
        if json:
            log_data["json"] = self._sanitize_for_logging(json)

        logger.debug(f"Making request: {log_data}")

        try:
            response = await self.client.request(
                method=method,
                url=url,
                headers=request_headers,
                json=json,
                params=params,
            )
        except httpx.TimeoutException as e:
            raise TimeoutError(f"Request timed out after {self.timeout}s") from e
        except (httpx.ConnectError, httpx.NetworkError) as e:
            raise ConnectionError(f"Connection failed: {str(e)}") from e

        logger.debug(
            f"{method} {url} -> {response.status_code} "
            f"({len(response.content)} bytes)"
        )

        response_data = self._decode(response)

        if not response.is_success:
            logger.warning(f"{method} {endpoint} failed with HTTP {response.status_code}")
            response_data["status_code"] = response.status_code

        return response_data

    async def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Make GET request."""
        return await self.request("GET", endpoint, params=params, headers=headers)

    async def post(
        self,
        endpoint: str,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Make POST request."""
        return await self.request("POST", endpoint, json=json, headers=headers)

    async def delete(
        self,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Make DELETE request."""
        return await self.request("DELETE", endpoint, headers=headers)
