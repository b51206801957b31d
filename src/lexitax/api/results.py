"""
Tagged result returned by every client operation.

Callers branch on ``success`` and never see an exception from the
gateway, the API client or the chat session.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from lexitax.api.exceptions import LexiTaxError

T = TypeVar("T")


@dataclass
class ApiResult(Generic[T]):
    """Result of a client operation."""

    success: bool
    data: T | None = None
    error: LexiTaxError | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> "ApiResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: LexiTaxError) -> "ApiResult[T]":
        return cls(success=False, error=error)

    @property
    def message(self) -> str | None:
        """The error message of a failed result."""
        return self.error.message if self.error else None
