"""Error taxonomy shared by the auth gateway, the API client and the chat session."""

from typing import Any


class LexiTaxError(Exception):
    """Base exception for all LexiTax client errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: Any | None = None,
    ) -> None:
        """Initialize LexiTaxError.

        Args:
            message: User-facing error message
            status_code: HTTP status code if applicable
            response_data: Parsed response body from the API, if any
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.status_code:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class ValidationError(LexiTaxError):
    """Input rejected on the client before any network call."""


class GuestQuotaExceededError(ValidationError):
    """Raised when a guest has used every query of their quota."""

    def __init__(self, limit: int) -> None:
        super().__init__(
            f"Guest mode is limited to {limit} queries. Please sign in to continue."
        )
        self.limit = limit


class NetworkError(LexiTaxError):
    """Transport-level failure: DNS, refused connection, timeout."""

    def __init__(
        self,
        message: str = "Network error",
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message=message)
        self.original_error = original_error


class AuthError(LexiTaxError):
    """Non-2xx or malformed response from an auth endpoint."""


class FetchError(LexiTaxError):
    """Non-2xx or malformed response from a conversation, chat or guest endpoint."""
