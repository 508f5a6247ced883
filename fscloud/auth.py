"""
Retry-once-on-401 wrapper shared by every authenticated API call.

``AuthenticatedCall.execute(fn)`` runs ``fn(access_token)``. When the server
answers 401 it refreshes the access token exactly once, stores it, and runs
``fn`` once more with the new token. A second 401 is not retried.
"""
import threading
from typing import Callable, Optional, TypeVar

from . import api
from .client import CloudClient
from .errors import ApiError, AuthExpired, AuthRequired, SessionExpired
from .session_store import ACCESS_TOKEN, TokenStore
from .utils import get_logger

T = TypeVar("T")


class AuthenticatedCall:
    def __init__(self, client: CloudClient, store: TokenStore) -> None:
        self.client = client
        self.store = store
        self.logger = get_logger("fscloud")
        self._refresh_lock = threading.Lock()

    def execute(self, fn: Callable[[str], T], missing_token_message: Optional[str] = None) -> T:
        token = self.store.access_token
        if not token:
            if missing_token_message:
                raise AuthRequired(missing_token_message)
            raise AuthRequired()
        try:
            return fn(token)
        except AuthExpired:
            self.logger.info("Access token rejected, refreshing")
        new_token = self._refresh(token)
        try:
            return fn(new_token)
        except AuthExpired as exc:
            self.logger.info("Access token rejected again after refresh")
            raise SessionExpired(exc.message) from exc

    def _refresh(self, rejected: str) -> str:
        with self._refresh_lock:
            current = self.store.access_token
            if current and current != rejected:
                # another call already refreshed while this one waited
                self.logger.debug("Access token already refreshed")
                return current
            refresh_token = self.store.refresh_token
            if not refresh_token:
                raise SessionExpired()
            try:
                new_token = api.refresh_access_token(self.client, refresh_token)
            except ApiError as exc:
                self.logger.info("Token refresh failed: %s", exc)
                raise SessionExpired(exc.message) from exc
            self.store.set(ACCESS_TOKEN, new_token)
            self.logger.debug("Access token refreshed")
            return new_token
