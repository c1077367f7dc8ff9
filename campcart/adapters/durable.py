"""
Durable Cart Adapter

HTTP client for the authenticated cart resource. Used once the user has a
valid credential; every request carries it as a bearer token.
"""

import asyncio
import logging
from typing import Optional, Any

import httpx

from ..credentials import CredentialStore
from ..errors import (
    AuthenticationRequiredError,
    BackendRejectedError,
    ConflictError,
    TransientBackendError,
)
from ..models import ItemType, LineItem
from .base import CartAdapter

logger = logging.getLogger(__name__)


class DurableCartAdapter(CartAdapter):
    """
    Cart persisted by the remote cart service.

    Reads are retried on timeouts and server errors; writes are never
    retried since a repeated write could double-book. A 401 clears the
    stored credential and raises AuthenticationRequiredError.

    Usage:
        adapter = DurableCartAdapter("http://localhost:8001", credentials)
        items = await adapter.load()
        items = await adapter.put(line_item)
    """

    name = "durable"

    def __init__(
        self,
        base_url: str,
        credentials: CredentialStore,
        timeout: float = 10.0,
        read_retries: int = 3,
        retry_delay: float = 1.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the adapter.

        Args:
            base_url: Base URL of the cart service
            credentials: Holder of the bearer token
            timeout: Bound on every request, in seconds
            read_retries: Extra attempts for GET requests
            retry_delay: Pause between read attempts, in seconds
            http_client: Preconfigured client, mainly for tests
        """
        self.base_url = base_url.rstrip("/")
        self._credentials = credentials
        self.read_retries = read_retries
        self.retry_delay = retry_delay
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    def _headers(self) -> dict[str, str]:
        token = self._credentials.token
        if not token:
            raise AuthenticationRequiredError("Sign in to use your saved cart")
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> dict[str, Any]:
        """Make an authenticated request, retrying idempotent reads only"""
        url = f"{self.base_url}{path}"
        headers = self._headers()
        attempts = 1 + (self.read_retries if method == "GET" else 0)
        error: Optional[TransientBackendError] = None

        for attempt in range(1, attempts + 1):
            try:
                response = await self._http_client.request(
                    method=method,
                    url=url,
                    headers=headers,
                    json=body,
                    params=params,
                )
            except httpx.TimeoutException as e:
                error = TransientBackendError(f"{method} {path} timed out: {e}")
            except httpx.TransportError as e:
                error = TransientBackendError(f"Cannot reach cart service at {self.base_url}: {e}")
            else:
                if response.status_code < 400:
                    return _json_body(method, path, response)
                self._raise_for_status(method, path, response)
                error = TransientBackendError(
                    f"{method} {path} failed: {response.status_code} - {response.text}"
                )

            if attempt < attempts:
                logger.warning(f"{error}; retrying ({attempt}/{attempts - 1})")
                await asyncio.sleep(self.retry_delay)

        logger.error(f"Request failed: {error}")
        raise error

    def _raise_for_status(self, method: str, path: str, response: httpx.Response) -> None:
        """Raise for client errors; server errors are left to the retry loop"""
        status = response.status_code
        if status == 401:
            self._credentials.clear()
            raise AuthenticationRequiredError("Authentication failed. Please log in again.")
        if status >= 500:
            return
        detail = _error_detail(response)
        if status == 409:
            raise ConflictError(detail)
        raise BackendRejectedError(f"{method} {path} rejected: {detail}", status)

    @staticmethod
    def _items(payload: dict[str, Any]) -> list[LineItem]:
        try:
            cart = payload.get("cart") or {}
            return [LineItem.from_dict(entry) for entry in cart.get("items", [])]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise BackendRejectedError(f"Malformed cart in response: {e}", 200) from e

    # ==================== Cart APIs ====================

    async def load(self) -> list[LineItem]:
        """GET /cart"""
        return self._items(await self._request("GET", "/api/cart"))

    async def put(self, item: LineItem) -> list[LineItem]:
        """POST /cart with one line item"""
        return self._items(await self._request("POST", "/api/cart", body=item.to_dict()))

    async def update_quantity(self, item: LineItem) -> list[LineItem]:
        """PUT /cart/item"""
        body = {
            "id": item.id,
            "catalogItemId": item.catalog_item_id,
            "itemType": item.item_type.value,
            "quantity": item.quantity,
        }
        return self._items(await self._request("PUT", "/api/cart/item", body=body))

    async def delete(
        self,
        catalog_item_id: str,
        item_type: ItemType,
        line_id: Optional[str] = None,
    ) -> list[LineItem]:
        """DELETE /cart/item/{catalogItemId}/{itemType}"""
        params = {"id": line_id} if line_id else None
        path = f"/api/cart/item/{catalog_item_id}/{ItemType(item_type).value}"
        return self._items(await self._request("DELETE", path, params=params))

    async def clear(self) -> list[LineItem]:
        """DELETE /cart/clear"""
        await self._request("DELETE", "/api/cart/clear")
        return []

    async def bulk_import(self, items: list[LineItem]) -> list[LineItem]:
        """POST /cart/migrate; called once per anonymous-to-account transition"""
        body = {"items": [item.to_dict() for item in items]}
        return self._items(await self._request("POST", "/api/cart/migrate", body=body))

    async def save(self, items: list[LineItem]) -> list[LineItem]:
        """
        Replace the remote cart with the given items.

        Not atomic: the cart is cleared before the import, so when the import
        fails the remote cart is left empty and the caller still holds the
        items to retry with.
        """
        await self.clear()
        if not items:
            return []
        return await self.bulk_import(items)


def _json_body(method: str, path: str, response: httpx.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError as e:
        raise BackendRejectedError(
            f"{method} {path} returned a non-JSON body: {e}", response.status_code
        ) from e
    if not isinstance(payload, dict):
        raise BackendRejectedError(f"{method} {path} returned an unexpected body", response.status_code)
    return payload


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict):
        return str(payload.get("detail") or payload.get("message") or payload)
    return str(payload)
