"""
RepairShopr API Client

Thin async transport for the RepairShopr endpoints used by the kiosk:
- Customer search
- Customer creation
- Ticket creation

Authentication is the ``api_key`` query parameter on every call. Failed
calls raise ExternalServiceError carrying the CRM's own error body.
"""
from typing import Any, Dict, List, Optional

import httpx

from kiosk_backend.config import Settings
from kiosk_backend.errors import ExternalServiceError
from kiosk_backend.utils.http import request_with_retry, safe_json
from kiosk_backend.utils.logger import get_logger

logger = get_logger(__name__)


class RepairShoprClient:
    """
    RepairShopr API integration with opt-in retry and error surfacing
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = settings.crm_base_url
        self.api_key = settings.repairshopr_api_key
        self.headers = {
            "Accept": "application/json"
        }
        self.timeout = settings.http_timeout
        self.max_retries = settings.http_max_retries
        self.transport = transport

    def _build_params(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        query = {"api_key": self.api_key}
        for key, value in (params or {}).items():
            if value is None or value == "":
                continue
            query[key] = value
        return query

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        retry: bool = True,
        **kwargs
    ) -> httpx.Response:
        """
        Make HTTP request against the account API

        Args:
            method: HTTP method (GET, POST)
            endpoint: API endpoint relative to the account base URL
            retry: Allow retries for this call (off for non-idempotent creates)
            **kwargs: ``params`` and ``json`` for httpx

        Returns:
            The final httpx response, successful or not

        Raises:
            ExternalServiceError: On transport failure
        """
        label = f"RepairShopr {method} /{endpoint}"
        try:
            return await request_with_retry(
                method,
                f"{self.base_url}/{endpoint}",
                label=label,
                timeout=self.timeout,
                max_retries=self.max_retries if retry else 0,
                transport=self.transport,
                params=self._build_params(kwargs.pop("params", None)),
                headers=self.headers,
                **kwargs
            )
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"{label} failed: {e}", detail=str(e)) from e

    @staticmethod
    def _decode(response: httpx.Response, failure: str) -> Any:
        if not response.is_success:
            detail = safe_json(response)
            logger.error(f"{failure} (HTTP {response.status_code}): {detail}")
            raise ExternalServiceError(failure, detail=detail)
        try:
            return response.json()
        except ValueError as e:
            raise ExternalServiceError(
                f"{failure}: response is not JSON",
                detail=response.text
            ) from e

    async def search_customers(self, query: str) -> List[Dict[str, Any]]:
        """
        Search customers by a free-text term

        Args:
            query: Email, phone or name to search for

        Returns:
            Candidate customer records in CRM relevance order
        """
        response = await self._make_request("GET", "customers", params={"query": query})
        data = self._decode(response, "RepairShopr customer search failed")

        customers = data.get("customers") if isinstance(data, dict) else data
        if not isinstance(customers, list):
            return []
        return [c for c in customers if isinstance(c, dict)]

    async def create_customer(self, body: Dict[str, Any]) -> Any:
        """
        Create a customer record; not retried, a replay could duplicate it

        Args:
            body: Sanitized customer fields

        Returns:
            Decoded CRM response body
        """
        response = await self._make_request("POST", "customers", retry=False, json=body)
        return self._decode(response, "RepairShopr customer create failed")

    async def create_ticket(self, body: Dict[str, Any]) -> Any:
        """
        Create a ticket; never retried since the call is not idempotent

        Args:
            body: Ticket payload

        Returns:
            Decoded CRM response body
        """
        response = await self._make_request("POST", "tickets", retry=False, json=body)
        return self._decode(response, "RepairShopr ticket create failed")
