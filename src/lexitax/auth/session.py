"""Session manager owning the bearer credential."""

from lexitax.api.constants import DEFAULT_CONTENT_TYPE
from lexitax.auth.constants import StorageKeys, TokenType
from lexitax.auth.token_store import MemoryTokenStore, TokenStore
from lexitax.utils.logger import logger


class SessionManager:
    """Holds the credential and builds request headers from it.

    One instance is shared by the auth gateway and the API client. The
    credential is read from the store on every call, so a token set or
    cleared through any holder is seen by the next request.
    """

    def __init__(self, store: TokenStore | None = None):
        self._store = store or MemoryTokenStore()

    @property
    def store(self) -> TokenStore:
        return self._store

    @property
    def access_token(self) -> str | None:
        return self._store.get(StorageKeys.ACCESS_TOKEN.value)

    @property
    def refresh_token(self) -> str | None:
        return self._store.get(StorageKeys.REFRESH_TOKEN.value)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    def set_token(self, token: str, refresh_token: str | None = None) -> None:
        """Persist the access token, and the refresh token when given."""
        self._store.set(StorageKeys.ACCESS_TOKEN.value, token)
        if refresh_token:
            self._store.set(StorageKeys.REFRESH_TOKEN.value, refresh_token)
        logger.info("Credential stored")

    def clear_token(self) -> None:
        """Remove the credential from the store."""
        self._store.delete(StorageKeys.ACCESS_TOKEN.value)
        self._store.delete(StorageKeys.REFRESH_TOKEN.value)
        logger.info("Credential cleared")

    def build_headers(self, content_type: str = DEFAULT_CONTENT_TYPE) -> dict[str, str]:
        """Headers for an outgoing request; Authorization only when a credential exists."""
        headers = {"Content-Type": content_type}
        token = self.access_token
        if token:
            headers["Authorization"] = f"{TokenType.BEARER.value} {token}"
        return headers
