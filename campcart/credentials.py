"""Bearer credential holder for the durable cart"""

import logging
from typing import Callable, Optional

from .storage import LocalStorage

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth_token"


class CredentialStore:
    """
    Holds the bearer token issued by the auth service.

    The token is persisted in local storage so a signed-in user stays signed
    in across restarts. Listeners are told whenever the token changes.
    """

    def __init__(self, storage: LocalStorage):
        self._storage = storage
        self._listeners: list[Callable[[Optional[str]], None]] = []

    @property
    def token(self) -> Optional[str]:
        return self._storage.get(TOKEN_KEY)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def set(self, token: str) -> None:
        """Store a new credential"""
        self._storage.set(TOKEN_KEY, token)
        self._notify(token)

    def clear(self) -> None:
        """Forget the credential, e.g. after the backend answered 401"""
        if self.token is None:
            return
        self._storage.remove(TOKEN_KEY)
        logger.info("Cleared stored credential")
        self._notify(None)

    def subscribe(self, listener: Callable[[Optional[str]], None]) -> Callable[[], None]:
        """Register a change listener; returns an unsubscribe function"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, token: Optional[str]) -> None:
        for listener in list(self._listeners):
            try:
                listener(token)
            except Exception:
                logger.exception("Credential listener failed")
