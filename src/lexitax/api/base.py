"""Shared HTTP plumbing for the LexiTax API clients."""

from collections.abc import Callable
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError as SchemaValidationError

from lexitax.api.exceptions import FetchError, LexiTaxError, NetworkError
from lexitax.api.results import ApiResult
from lexitax.auth.session import SessionManager
from lexitax.config import LexiTaxSettings
from lexitax.utils.logger import logger

T = TypeVar("T")


def extract_error_message(body: Any) -> str | None:
    """Pull the server-provided message out of an error body."""
    if not isinstance(body, dict):
        return None
    for field in ("error", "detail", "message"):
        value = body.get(field)
        if isinstance(value, str) and value:
            return value
    return None


class BaseApiClient:
    """Async client for the LexiTax API.

    Owns the ``httpx.AsyncClient`` and maps transport failures and non-2xx
    responses onto the LexiTax error taxonomy. Headers are rebuilt from the
    session manager on every request.
    """

    error_class: type[LexiTaxError] = FetchError

    def __init__(
        self,
        settings: LexiTaxSettings,
        session: SessionManager,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: LexiTax settings with API configuration
            session: Session manager holding the credential
            transport: Optional transport override (tests, mock backend)
        """
        self.settings = settings
        self.session = session
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self):
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_client(self) -> None:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.base_url,
                timeout=self.settings.timeout,
                transport=self._transport,
            )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        data: dict | None = None,
        fallback_error: str = "Request failed",
    ) -> Any:
        """Make an HTTP request to the LexiTax API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            data: Optional request body data
            fallback_error: Message used when the server gives none

        Returns:
            Parsed JSON body, or None for an empty successful response

        Raises:
            NetworkError: On transport failure
            LexiTaxError: ``error_class`` on non-2xx or malformed responses
        """
        await self._ensure_client()

        try:
            response = await self._client.request(
                method, endpoint, json=data, headers=self.session.build_headers()
            )
        except httpx.RequestError as e:
            logger.warning(
                "Request failed before a response", method=method, endpoint=endpoint, error=str(e)
            )
            raise NetworkError(str(e) or "Network error", original_error=e) from e

        body: Any = None
        malformed = False
        if response.content:
            try:
                body = response.json()
            except ValueError:
                malformed = True

        if not response.is_success:
            message = extract_error_message(body) or fallback_error
            logger.info(
                "API returned an error",
                method=method,
                endpoint=endpoint,
                status_code=response.status_code,
                error=message,
            )
            raise self.error_class(
                message, status_code=response.status_code, response_data=body
            )

        if malformed:
            raise self.error_class(
                f"{fallback_error}: invalid response format",
                status_code=response.status_code,
            )

        return body

    async def _request_result(
        self,
        method: str,
        endpoint: str,
        parse: Callable[[Any], T],
        data: dict | None = None,
        fallback_error: str = "Request failed",
    ) -> ApiResult[T]:
        """Run a request and parse its body, folding every failure into an ApiResult."""
        try:
            body = await self._make_request(method, endpoint, data, fallback_error)
            return ApiResult.ok(parse(body))
        except SchemaValidationError as e:
            logger.error("Failed to parse response", endpoint=endpoint, error=str(e))
            return ApiResult.fail(
                self.error_class(f"{fallback_error}: invalid response format")
            )
        except LexiTaxError as e:
            return ApiResult.fail(e)
