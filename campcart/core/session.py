"""Cart session: wires storage, credentials, adapters, migration and the store"""

import logging
from typing import Optional
import datetime as dt

from ..adapters import CartAdapter, DurableCartAdapter, EphemeralCartAdapter
from ..catalog import CatalogClient
from ..credentials import CredentialStore
from ..migration import MigrationCoordinator, MigrationOutcome, MigrationState
from ..models import ItemType, LineItem, activity_item, equipment_item, lodging_item
from ..storage import LocalStorage
from ..store import CartStore
from .config import Settings, get_settings

logger = logging.getLogger(__name__)


class CartSession:
    """
    One running cart for the application.

    Constructed once by the application root and passed to whatever needs
    the cart. The active backend is chosen here on start and on every
    identity change, never per operation: the durable adapter once the
    user is signed in and the local cart has been migrated, the ephemeral
    adapter otherwise.

    Usage:
        async with CartSession() as session:
            await session.start()
            await session.add_lodging("site-1", check_in, check_out, guests=2)
            await session.login(token)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        storage: Optional[LocalStorage] = None,
        durable: Optional[DurableCartAdapter] = None,
        catalog: Optional[CatalogClient] = None,
    ):
        settings = settings or get_settings()
        self.storage = storage or LocalStorage(settings.storage_path)
        self.credentials = CredentialStore(self.storage)
        self.ephemeral = EphemeralCartAdapter(self.storage)
        self.durable = durable or DurableCartAdapter(
            settings.cart_api_base_url,
            self.credentials,
            timeout=settings.request_timeout,
            read_retries=settings.read_retries,
            retry_delay=settings.retry_delay,
        )
        self.catalog = catalog or CatalogClient(
            settings.catalog_api_base_url,
            timeout=settings.request_timeout,
            read_retries=settings.read_retries,
            retry_delay=settings.retry_delay,
        )
        self.migration = MigrationCoordinator(
            self.storage,
            self.ephemeral,
            self.durable,
            self.credentials,
            max_attempts=settings.max_migration_attempts,
        )
        self.store = CartStore(
            self._select_adapter(),
            tax_rate=settings.tax_rate,
            service_fee=settings.service_fee,
            currency=settings.currency,
        )

    async def __aenter__(self) -> "CartSession":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def close(self) -> None:
        """Close HTTP clients"""
        await self.durable.close()
        await self.catalog.close()

    @property
    def active_backend(self) -> str:
        return self.store.adapter.name

    def _select_adapter(self) -> CartAdapter:
        if self.credentials.is_authenticated and self.migration.state == MigrationState.MIGRATED:
            return self.durable
        return self.ephemeral

    async def _activate(self) -> MigrationOutcome:
        """Run a pending migration, pick the backend and load its cart"""
        outcome = await self.migration.run()
        adapter = self._select_adapter()

        if outcome.items is not None:
            self.store.use_adapter(adapter, outcome.items)
            return outcome

        if adapter is not self.store.adapter:
            # Never show one identity's items while committing to another's cart
            self.store.use_adapter(adapter, [])
        await self.store.load()
        return outcome

    async def start(self) -> MigrationOutcome:
        """Initialize the cart on application start"""
        outcome = await self._activate()
        logger.info(f"Cart ready on {self.active_backend} backend with {len(self.store.snapshot())} items")
        return outcome

    async def login(self, token: str) -> MigrationOutcome:
        """Adopt a new credential and move to the account cart"""
        self.credentials.set(token)
        return await self._activate()

    async def logout(self) -> MigrationOutcome:
        """Drop the credential and fall back to the local cart"""
        self.credentials.clear()
        return await self._activate()

    # ==================== Catalog-backed adds ====================

    async def add_lodging(
        self,
        catalog_item_id: str,
        check_in: dt.date,
        check_out: dt.date,
        guests: int,
    ) -> LineItem:
        """Look up a camping site and add a stay to the cart"""
        site = await self.catalog.get_item(ItemType.LODGING, catalog_item_id)
        return await self.store.add(lodging_item(site, check_in, check_out, guests))

    async def add_activity(
        self,
        catalog_item_id: str,
        date: dt.date,
        time: dt.time,
        participants: int,
    ) -> LineItem:
        """Look up an activity and add a booking to the cart"""
        activity = await self.catalog.get_item(ItemType.ACTIVITY, catalog_item_id)
        return await self.store.add(activity_item(activity, date, time, participants))

    async def add_equipment(
        self,
        catalog_item_id: str,
        rental_start: dt.date,
        rental_end: dt.date,
        quantity: int,
    ) -> LineItem:
        """Look up equipment and add a rental to the cart"""
        equipment = await self.catalog.get_item(ItemType.EQUIPMENT, catalog_item_id)
        return await self.store.add(equipment_item(equipment, rental_start, rental_end, quantity))
