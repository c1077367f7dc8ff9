# Campsite booking cart

from .errors import (
    CartError,
    CartValidationError,
    ConflictError,
    ItemNotFoundError,
    BackendError,
    TransientBackendError,
    BackendRejectedError,
    AuthenticationRequiredError,
    LocalStorageError,
    CatalogItemNotFoundError,
)
from .models import (
    ItemType,
    RatePeriod,
    CatalogItem,
    LineItem,
    line_item_id,
    lodging_item,
    activity_item,
    equipment_item,
)
from .store import CartStore, CartEvent, EventKind, BookingSummary
from .migration import MigrationCoordinator, MigrationState, MigrationOutcome

__all__ = [
    "CartError",
    "CartValidationError",
    "ConflictError",
    "ItemNotFoundError",
    "BackendError",
    "TransientBackendError",
    "BackendRejectedError",
    "AuthenticationRequiredError",
    "LocalStorageError",
    "CatalogItemNotFoundError",
    "ItemType",
    "RatePeriod",
    "CatalogItem",
    "LineItem",
    "line_item_id",
    "lodging_item",
    "activity_item",
    "equipment_item",
    "CartStore",
    "CartEvent",
    "EventKind",
    "BookingSummary",
    "MigrationCoordinator",
    "MigrationState",
    "MigrationOutcome",
]
