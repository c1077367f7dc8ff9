"""
Cart migration

Moves the anonymous cart into the account cart the first time the device
sees a valid credential. The flag only ever moves forward, so a second
login after a successful migration does nothing.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .adapters.durable import DurableCartAdapter
from .adapters.ephemeral import EphemeralCartAdapter
from .credentials import CredentialStore
from .errors import CartError
from .models import LineItem
from .storage import LocalStorage

logger = logging.getLogger(__name__)

STATE_KEY = "cart_migration_state"
ATTEMPTS_KEY = "cart_migration_attempts"


class MigrationState(str, Enum):
    """Progress of the anonymous-to-account cart transfer"""
    NOT_MIGRATED = "not_migrated"
    MIGRATING = "migrating"
    MIGRATED = "migrated"


@dataclass
class MigrationOutcome:
    """Result of one migration run"""
    state: MigrationState
    ran: bool = False
    items: Optional[list[LineItem]] = None
    error: Optional[Exception] = None
    exhausted: bool = False
    moved: int = 0

    @property
    def succeeded(self) -> bool:
        return self.state == MigrationState.MIGRATED


class MigrationCoordinator:
    """
    One-shot transfer of the ephemeral cart to the durable cart.

    Failed attempts leave the state at NOT_MIGRATED and the local cart in
    place. After `max_attempts` consecutive failures automatic retries stop
    until `reset_attempts()` is called.
    """

    def __init__(
        self,
        storage: LocalStorage,
        ephemeral: EphemeralCartAdapter,
        durable: DurableCartAdapter,
        credentials: CredentialStore,
        max_attempts: int = 5,
    ):
        self._storage = storage
        self._ephemeral = ephemeral
        self._durable = durable
        self._credentials = credentials
        self.max_attempts = max_attempts
        # MIGRATING is never persisted; a crash mid-run restarts from NOT_MIGRATED
        self._running = False

    @property
    def state(self) -> MigrationState:
        if self._running:
            return MigrationState.MIGRATING
        if self._storage.get(STATE_KEY) == MigrationState.MIGRATED.value:
            return MigrationState.MIGRATED
        return MigrationState.NOT_MIGRATED

    @property
    def attempts(self) -> int:
        return int(self._storage.get(ATTEMPTS_KEY, 0))

    @property
    def exhausted(self) -> bool:
        return self.attempts >= self.max_attempts

    @property
    def is_pending(self) -> bool:
        """True when a run would actually try to migrate"""
        return (
            self.state == MigrationState.NOT_MIGRATED
            and self._credentials.is_authenticated
            and not self.exhausted
        )

    def reset_attempts(self) -> None:
        """Re-enable automatic retries after the attempt limit was reached"""
        self._storage.remove(ATTEMPTS_KEY)

    async def run(self) -> MigrationOutcome:
        """
        Migrate if pending.

        Returns:
            Outcome carrying the canonical account cart on success
        """
        state = self.state
        if state != MigrationState.NOT_MIGRATED:
            return MigrationOutcome(state=state)
        if not self._credentials.is_authenticated:
            return MigrationOutcome(state=state)
        if self.exhausted:
            logger.error(
                f"Cart migration gave up after {self.attempts} attempts; "
                "the local cart stays active until attempts are reset"
            )
            return MigrationOutcome(state=state, exhausted=True)

        local_items = await self._ephemeral.load()
        if not local_items:
            self._mark_migrated()
            logger.info("No local cart to migrate")
            return MigrationOutcome(state=MigrationState.MIGRATED, ran=True)

        self._running = True
        try:
            logger.info(f"Migrating {len(local_items)} cart items to the account cart...")
            items = await self._durable.bulk_import(local_items)
            # A retry after a failed clear re-imports into a cart that merges by line id
            await self._ephemeral.clear()
        except CartError as e:
            attempts = self.attempts + 1
            self._storage.set(ATTEMPTS_KEY, attempts)
            logger.warning(f"Cart migration attempt {attempts} failed: {e}")
            return MigrationOutcome(
                state=MigrationState.NOT_MIGRATED,
                ran=True,
                error=e,
                exhausted=attempts >= self.max_attempts,
            )
        finally:
            self._running = False

        self._mark_migrated()
        logger.info("Cart migration complete")
        return MigrationOutcome(
            state=MigrationState.MIGRATED,
            ran=True,
            items=items,
            moved=len(local_items),
        )

    def _mark_migrated(self) -> None:
        self._storage.set(STATE_KEY, MigrationState.MIGRATED.value)
        self._storage.remove(ATTEMPTS_KEY)
