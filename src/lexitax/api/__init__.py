"""
LexiTax API package.

This package provides typed clients for the LexiTax REST API together with
the error taxonomy and the tagged result every operation returns.
"""

from .client import ConversationClient
from .exceptions import (
    AuthError,
    FetchError,
    GuestQuotaExceededError,
    LexiTaxError,
    NetworkError,
    ValidationError,
)
from .results import ApiResult
from .schemas import ChatResponse, Citation, Conversation, GuestQueryCount, GuestSession, Message

__all__ = [
    "ApiResult",
    "AuthError",
    "ChatResponse",
    "Citation",
    "Conversation",
    "ConversationClient",
    "FetchError",
    "GuestQueryCount",
    "GuestQuotaExceededError",
    "GuestSession",
    "LexiTaxError",
    "Message",
    "NetworkError",
    "ValidationError",
]
