import json
import pytest
import httpx
from unittest.mock import AsyncMock, patch

from nordigen_sync.client.http_client import HTTPClient
from nordigen_sync.client.nordigen_client import NordigenClient
from nordigen_sync.client.exceptions import TimeoutError, ConnectionError


def make_http_client(handler):
    """Create an HTTP client backed by a mock transport."""
    return HTTPClient(
        base_url="https://api.test.com/api/v2",
        timeout=5.0,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestHTTPClient:

    def test_initialization(self):
        """Test HTTP client initialization."""
        client = HTTPClient(base_url="https://api.test.com/api/v2", timeout=10.0)

        assert client.base_url == "https://api.test.com/api/v2/"
        assert client.timeout == 10.0

    def test_build_url(self):
        """Test URL building."""
        client = HTTPClient(base_url="https://api.test.com/api/v2/")

        assert client._build_url("/token/new/") == "https://api.test.com/api/v2/token/new/"
        assert client._build_url("accounts/123/") == "https://api.test.com/api/v2/accounts/123/"

    def test_sanitize_for_logging(self):
        """Test data sanitization for logging."""
        client = HTTPClient(base_url="https://api.test.com/")
        sensitive_data = {
            "Authorization": "Bearer token123456789",
            "secret_key": "supersecretvalue",
            "iban": "DE89370400440532013000",
            "institution_id": "SANDBOXFINANCE_SFIN0000",
        }

        sanitized = client._sanitize_for_logging(sensitive_data)

        assert sanitized["Authorization"] != "Bearer token123456789"
        assert sanitized["secret_key"] != "supersecretvalue"
        assert sanitized["iban"].endswith("3000")
        assert sanitized["iban"] != "DE89370400440532013000"
        assert sanitized["institution_id"] == "SANDBOXFINANCE_SFIN0000"

    @pytest.mark.asyncio
    async def test_successful_request(self):
        """Test successful HTTP request."""
        def handler(request):
            assert request.url.path == "/api/v2/requisitions/req1/"
            return httpx.Response(200, json={"id": "req1", "status": "LN"})

        async with make_http_client(handler) as client:
            result = await client.get("requisitions/req1/")

        assert result == {"id": "req1", "status": "LN"}

    @pytest.mark.asyncio
    async def test_error_response_carries_status_code(self):
        """Test that failed responses are returned with their status code."""
        def handler(request):
            return httpx.Response(404, json={"summary": "Not found.", "detail": "No requisition"})

        async with make_http_client(handler) as client:
            result = await client.get("requisitions/missing/")

        assert result["status_code"] == 404
        assert result["summary"] == "Not found."

    @pytest.mark.asyncio
    async def test_non_json_error_body(self):
        """Test that a non-JSON error body is still reported."""
        def handler(request):
            return httpx.Response(503, text="Service Unavailable")

        async with make_http_client(handler) as client:
            result = await client.get("institutions/X/")

        assert result == {"content": "Service Unavailable", "status_code": 503}

    @pytest.mark.asyncio
    async def test_post_sends_json(self):
        """Test POST request body."""
        def handler(request):
            assert request.method == "POST"
            assert json.loads(request.content) == {"secret_id": "id", "secret_key": "key"}
            return httpx.Response(200, json={"access": "token"})

        async with make_http_client(handler) as client:
            result = await client.post("token/new/", json={"secret_id": "id", "secret_key": "key"})

        assert result == {"access": "token"}

    @pytest.mark.asyncio
    async def test_timeout_error(self):
        """Test timeout error handling."""
        client = make_http_client(lambda request: httpx.Response(200))

        with patch.object(
            client.client, 'request',
            new_callable=AsyncMock,
            side_effect=httpx.ReadTimeout("Request timed out"),
        ) as mock_request:
            with pytest.raises(TimeoutError) as exc_info:
                await client.get("accounts/acc1/balances/")

        assert "timed out" in str(exc_info.value)
        mock_request.assert_awaited_once()
        await client.close()

    @pytest.mark.asyncio
    async def test_connection_error(self):
        """Test connection error handling."""
        client = make_http_client(lambda request: httpx.Response(200))

        with patch.object(
            client.client, 'request',
            new_callable=AsyncMock,
            side_effect=httpx.ConnectError("Connection failed"),
        ) as mock_request:
            with pytest.raises(ConnectionError) as exc_info:
                await client.get("accounts/acc1/balances/")

        assert "Connection failed" in str(exc_info.value)
        mock_request.assert_awaited_once()
        await client.close()


class TestNordigenClient:

    @pytest.mark.asyncio
    async def test_generate_token(self):
        """Test token generation uses the configured secrets."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"access": "access123", "refresh": "refresh123"})

        client = NordigenClient(secret_id="id", secret_key="key", http_client=make_http_client(handler))
        result = await client.generate_token()

        assert result["access"] == "access123"
        assert requests[0].url.path == "/api/v2/token/new/"
        assert "Authorization" not in requests[0].headers
        await client.close()

    @pytest.mark.asyncio
    async def test_token_is_sent_as_bearer(self):
        """Test that the access token is applied to data requests."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"balances": []})

        client = NordigenClient(http_client=make_http_client(handler))
        client.token = "access123"
        await client.account("acc1").get_balances()

        assert requests[0].headers["Authorization"] == "Bearer access123"
        assert requests[0].url.path == "/api/v2/accounts/acc1/balances/"
        await client.close()

    @pytest.mark.asyncio
    async def test_get_transactions_date_window(self):
        """Test that the date window is sent as query parameters."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"transactions": {"booked": [], "pending": []}})

        client = NordigenClient(http_client=make_http_client(handler))
        await client.account("acc1").get_transactions(date_from="2023-01-01", date_to="2023-01-31")

        assert requests[0].url.params["date_from"] == "2023-01-01"
        assert requests[0].url.params["date_to"] == "2023-01-31"
        await client.close()

    @pytest.mark.asyncio
    async def test_create_requisition_creates_agreement_first(self):
        """Test that a requisition is bound to a new end user agreement."""
        requests = []

        def handler(request):
            requests.append(request)
            if request.url.path.endswith("/agreements/enduser/"):
                return httpx.Response(201, json={"id": "agr1"})
            return httpx.Response(201, json={"id": "req1", "link": "https://ob.example/link"})

        client = NordigenClient(http_client=make_http_client(handler))
        result = await client.requisition.create(
            institution_id="SANDBOXFINANCE_SFIN0000",
            reference_id="ref1",
            access_valid_for_days=90,
            redirect_url="https://app.example/nordigen/link",
        )

        assert result == {"id": "req1", "link": "https://ob.example/link"}
        assert [r.url.path for r in requests] == [
            "/api/v2/agreements/enduser/",
            "/api/v2/requisitions/",
        ]
        await client.close()

    @pytest.mark.asyncio
    async def test_create_requisition_stops_on_agreement_failure(self):
        """Test that a failed agreement is returned without creating a requisition."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(400, json={"summary": "Invalid institution"})

        client = NordigenClient(http_client=make_http_client(handler))
        result = await client.requisition.create(
            institution_id="UNKNOWN",
            reference_id="ref1",
            access_valid_for_days=90,
            redirect_url="https://app.example/nordigen/link",
        )

        assert result["status_code"] == 400
        assert len(requests) == 1
        await client.close()
