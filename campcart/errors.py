"""Cart error types"""


class CartError(Exception):
    """Base exception for cart errors"""
    pass


class CartValidationError(CartError):
    """Input rejected before any persistence attempt"""
    pass


class ConflictError(CartValidationError):
    """Reservation overlaps an existing line item for the same catalog item"""

    def __init__(self, message: str, conflicting_ids: tuple[str, ...] = ()):
        super().__init__(message)
        self.conflicting_ids = conflicting_ids


class ItemNotFoundError(CartError):
    """Line item is not in the cart"""
    pass


class BackendError(CartError):
    """Persistence backend failed to commit or load"""
    pass


class TransientBackendError(BackendError):
    """Network failure, timeout or server error; the operation may be retried"""
    pass


class BackendRejectedError(BackendError):
    """Backend refused the request (4xx other than 401)"""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationRequiredError(BackendError):
    """Credential missing or rejected; the user must sign in again"""
    pass


class LocalStorageError(BackendError):
    """Device-local storage could not be written"""
    pass


class CatalogItemNotFoundError(CartError):
    """Catalog service has no such item"""
    pass
