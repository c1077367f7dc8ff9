"""
Catalog API Client

Read-only lookups of bookable items (camping sites, activities, equipment)
used to price reservations before they are added to the cart.
"""

import asyncio
import logging
from typing import Optional, Any

import httpx

from .errors import BackendRejectedError, CatalogItemNotFoundError, TransientBackendError
from .models import CatalogItem, ItemType, RatePeriod

logger = logging.getLogger(__name__)

RESOURCE_PATHS = {
    ItemType.LODGING: "/api/camping-sites",
    ItemType.ACTIVITY: "/api/activities",
    ItemType.EQUIPMENT: "/api/equipment",
}

CAPACITY_FIELDS = {
    ItemType.LODGING: ("capacity", "maxGuests"),
    ItemType.ACTIVITY: ("capacity", "maxParticipants"),
    ItemType.EQUIPMENT: ("capacity", "quantity"),
}


class CatalogClient:
    """Client for the catalog service"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        read_retries: int = 3,
        retry_delay: float = 1.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.read_retries = read_retries
        self.retry_delay = retry_delay
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def _get(self, path: str) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        error: Optional[Exception] = None

        for attempt in range(self.read_retries + 1):
            if attempt:
                await asyncio.sleep(self.retry_delay)
            try:
                response = await self._http_client.get(url, headers={"Accept": "application/json"})
            except httpx.TransportError as e:
                error = TransientBackendError(f"Cannot reach catalog at {self.base_url}: {e}")
                logger.warning(f"{error} (attempt {attempt + 1})")
                continue
            if response.status_code == 404:
                raise CatalogItemNotFoundError(f"Catalog item not found: {path}")
            if response.status_code >= 500:
                error = TransientBackendError(f"Catalog error {response.status_code} for {path}")
                logger.warning(f"{error} (attempt {attempt + 1})")
                continue
            if response.status_code >= 400:
                raise BackendRejectedError(
                    f"Catalog request {path} failed: {response.status_code}", response.status_code
                )
            try:
                return response.json()
            except ValueError as e:
                raise BackendRejectedError(
                    f"Catalog returned a non-JSON body for {path}: {e}", response.status_code
                ) from e

        raise error

    async def get_item(self, item_type: ItemType, catalog_item_id: str) -> CatalogItem:
        """Get a catalog item with its base rate and capacity"""
        item_type = ItemType(item_type)
        path = f"{RESOURCE_PATHS[item_type]}/{catalog_item_id}"
        payload = await self._get(path)
        try:
            return parse_catalog_item(item_type, payload.get("data", payload))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise BackendRejectedError(f"Malformed catalog item at {path}: {e}", 200) from e


def parse_catalog_item(item_type: ItemType, data: dict[str, Any]) -> CatalogItem:
    """Map a catalog payload onto a CatalogItem"""
    capacity = next(
        (data[key] for key in CAPACITY_FIELDS[ItemType(item_type)] if data.get(key) is not None),
        None,
    )
    return CatalogItem(
        id=str(data.get("id") or data.get("_id")),
        name=data["name"],
        base_rate=float(data["price"]),
        rate_period=RatePeriod(data.get("period") or RatePeriod.DAY.value),
        capacity=int(capacity) if capacity is not None else None,
        location=data.get("location") or data.get("category"),
    )
