"""Thin Nordigen (GoCardless Bank Account Data) API client.

Every method returns the decoded response body. Failures are reported through
a ``status_code`` key instead of an exception so that the caller decides how
to map them.
"""

from typing import Dict, Any, Optional

from nordigen_sync.config.logging import get_logger
from nordigen_sync.config.settings import settings
from nordigen_sync.client.http_client import HTTPClient

logger = get_logger(__name__)


class RequisitionApi:
    """Requisition endpoints."""

    def __init__(self, client: "NordigenClient"):
        self._client = client

    async def create(
        self,
        institution_id: str,
        reference_id: str,
        access_valid_for_days: int,
        redirect_url: str,
        max_historical_days: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Create an end user agreement and a requisition bound to it."""
        agreement = await self._client.post(
            "agreements/enduser/",
            json={
                "institution_id": institution_id,
                "max_historical_days": max_historical_days or settings.nordigen_max_historical_days,
                "access_valid_for_days": access_valid_for_days,
                "access_scope": ["balances", "details", "transactions"],
            },
        )
        if "status_code" in agreement:
            return agreement

        return await self._client.post(
            "requisitions/",
            json={
                "redirect": redirect_url,
                "institution_id": institution_id,
                "reference": reference_id,
                "agreement": agreement.get("id"),
            },
        )

    async def get_by_id(self, requisition_id: str) -> Dict[str, Any]:
        return await self._client.get(f"requisitions/{requisition_id}/")

    async def delete(self, requisition_id: str) -> Dict[str, Any]:
        return await self._client.delete(f"requisitions/{requisition_id}/")


class AccountApi:
    """Endpoints scoped to one account."""

    def __init__(self, client: "NordigenClient", account_id: str):
        self._client = client
        self.account_id = account_id

    async def get_metadata(self) -> Dict[str, Any]:
        return await self._client.get(f"accounts/{self.account_id}/")

    async def get_details(self) -> Dict[str, Any]:
        return await self._client.get(f"accounts/{self.account_id}/details/")

    async def get_balances(self) -> Dict[str, Any]:
        return await self._client.get(f"accounts/{self.account_id}/balances/")

    async def get_transactions(
        self,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Fetch transactions; dates are ISO ``YYYY-MM-DD`` strings."""
        params = {}
        if date_from:
            params["date_from"] = date_from
        if date_to:
            params["date_to"] = date_to
        return await self._client.get(
            f"accounts/{self.account_id}/transactions/",
            params=params or None,
        )


class InstitutionApi:
    """Institution endpoints."""

    def __init__(self, client: "NordigenClient"):
        self._client = client

    async def get_by_id(self, institution_id: str) -> Dict[str, Any]:
        return await self._client.get(f"institutions/{institution_id}/")


class NordigenClient:
    """Raw transport to the Nordigen API."""

    def __init__(
        self,
        secret_id: Optional[str] = None,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
        http_client: Optional[HTTPClient] = None,
    ):
        """Initialize the Nordigen client.

        Args:
            secret_id: API secret id (defaults to env var)
            secret_key: API secret key (defaults to env var)
            base_url: API base URL (defaults to env var)
            http_client: Optional HTTP client to reuse
        """
        self.secret_id = secret_id or settings.nordigen_secret_id
        self.secret_key = secret_key or settings.nordigen_secret_key
        self.http_client = http_client or HTTPClient(base_url=base_url)
        self.token: Optional[str] = None

        self.requisition = RequisitionApi(self)
        self.institution = InstitutionApi(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self.http_client.close()

    def account(self, account_id: str) -> AccountApi:
        return AccountApi(self, account_id)

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def generate_token(self) -> Dict[str, Any]:
        """Request a new access token pair with the configured secrets."""
        logger.debug("Requesting new Nordigen access token")
        return await self.http_client.post(
            "token/new/",
            json={"secret_id": self.secret_id, "secret_key": self.secret_key},
        )

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.http_client.get(endpoint, params=params, headers=self._headers())

    async def post(self, endpoint: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.http_client.post(endpoint, json=json, headers=self._headers())

    async def delete(self, endpoint: str) -> Dict[str, Any]:
        return await self.http_client.delete(endpoint, headers=self._headers())
